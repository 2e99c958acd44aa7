from __future__ import annotations

import os
import sqlite3
import subprocess
import sys
from pathlib import Path


def test_alembic_upgrade_and_downgrade_initial_schema(tmp_path: Path) -> None:
    repo_root = Path(__file__).resolve().parents[2]
    db_path = tmp_path / "migration_test.db"
    env = os.environ.copy()
    env["DATABASE_URL"] = f"sqlite:///{db_path}"

    subprocess.run(
        [sys.executable, "-m", "alembic", "-c", "alembic.ini", "upgrade", "head"],
        cwd=repo_root,
        env=env,
        check=True,
    )

    conn = sqlite3.connect(db_path)
    cur = conn.cursor()
    cur.execute("SELECT name FROM sqlite_master WHERE type='table' AND name IN ('users', 'leads', 'countries')")
    assert {row[0] for row in cur.fetchall()} == {"users", "leads", "countries"}

    cur.execute("PRAGMA index_list(leads)")
    unique_indexes = [row[1] for row in cur.fetchall() if row[2]]
    columns = set()
    for name in unique_indexes:
        cur.execute(f"PRAGMA index_info({name})")
        columns.add(frozenset(row[2] for row in cur.fetchall()))
    assert frozenset({"email", "company_name", "job_link"}) in columns

    subprocess.run(
        [sys.executable, "-m", "alembic", "-c", "alembic.ini", "downgrade", "base"],
        cwd=repo_root,
        env=env,
        check=True,
    )

    cur.execute("SELECT name FROM sqlite_master WHERE type='table' AND name='leads'")
    assert cur.fetchone() is None

    conn.close()
