from __future__ import annotations

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from leadshub.db.repositories import Repository
from leadshub.db.session import SessionLocal
from leadshub.types import LeadData


def test_sqlite_connections_enforce_foreign_keys() -> None:
    with SessionLocal() as db:
        assert db.execute(text("PRAGMA foreign_keys")).scalar() == 1


def test_lead_for_unknown_owner_is_rejected_by_the_store() -> None:
    with SessionLocal() as db:
        repo = Repository(db)
        data = LeadData(first_name="A", last_name="B", designation="CTO", email="a@x.com", company_name="Acme")
        with pytest.raises(IntegrityError):
            repo.create_lead(data, assigned_to_id=999, created_by_id=999)
        assert repo.list_all_leads() == []
