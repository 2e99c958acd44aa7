from __future__ import annotations

import os
import tempfile
from pathlib import Path

_TMP = Path(tempfile.mkdtemp(prefix="leadshub-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP / 'test.db'}"
os.environ["DATA_DIR"] = str(_TMP)
os.environ["APP_ENV"] = "test"

import pytest  # noqa: E402

from leadshub.db import models  # noqa: E402,F401
from leadshub.db.base import Base  # noqa: E402
from leadshub.db.repositories import Repository  # noqa: E402
from leadshub.db.session import SessionLocal, engine  # noqa: E402


@pytest.fixture(autouse=True)
def reset_db() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def admin_id() -> int:
    with SessionLocal() as db:
        user = Repository(db).create_user(
            name="Ada Admin", email="ada@example.com", password="secret1", role="admin"
        )
        return user.id
