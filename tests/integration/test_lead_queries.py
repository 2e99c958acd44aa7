from __future__ import annotations

from datetime import date

import pytest

from leadshub.db.repositories import DuplicateLeadError, Repository
from leadshub.db.session import SessionLocal
from leadshub.types import LeadData, LeadQuery


def _data(**overrides) -> LeadData:
    values = {
        "first_name": "Alice",
        "last_name": "Smith",
        "designation": "CTO",
        "email": "alice@x.com",
        "company_name": "Acme",
    }
    values.update(overrides)
    return LeadData(**values)


def test_non_admin_sees_only_assigned_leads(admin_id) -> None:
    with SessionLocal() as db:
        repo = Repository(db)
        user = repo.create_user(name="Uma", email="uma@example.com", password="secret1")
        repo.create_lead(_data(), assigned_to_id=admin_id, created_by_id=admin_id)
        repo.create_lead(_data(email="bob@y.com"), assigned_to_id=user.id, created_by_id=admin_id)

        mine = repo.list_leads(LeadQuery(user_id=user.id, role="user"))
        assert [lead.email for lead in mine.items] == ["bob@y.com"]

        everything = repo.list_leads(LeadQuery(role="admin"))
        assert everything.total == 2

        assigned = repo.list_leads(LeadQuery(role="admin", assigned_to=admin_id))
        assert [lead.email for lead in assigned.items] == ["alice@x.com"]


def test_search_filters_and_pagination(admin_id) -> None:
    with SessionLocal() as db:
        repo = Repository(db)
        for index in range(5):
            repo.create_lead(
                _data(email=f"lead{index}@x.com", location="Berlin" if index % 2 else "Paris"),
                assigned_to_id=admin_id,
                created_by_id=admin_id,
            )

        page = repo.list_leads(LeadQuery(role="admin", limit=2, page=2, sort_by="email", sort_order="asc"))
        assert [lead.email for lead in page.items] == ["lead2@x.com", "lead3@x.com"]
        assert page.pagination() == {
            "current_page": 2,
            "total_pages": 3,
            "total": 5,
            "has_next": True,
            "has_prev": True,
        }

        assert repo.list_leads(LeadQuery(role="admin", location="berl")).total == 2
        assert repo.list_leads(LeadQuery(role="admin", search="LEAD4")).total == 1
        assert repo.list_leads(LeadQuery(role="admin", search="100%")).total == 0
        assert repo.list_leads(LeadQuery(role="admin", date_to=date(2000, 1, 1))).total == 0


def test_filter_options_hide_sources_from_non_admins(admin_id) -> None:
    with SessionLocal() as db:
        repo = Repository(db)
        repo.create_lead(_data(source="Referral", location="Paris"), assigned_to_id=admin_id, created_by_id=admin_id)

        admin_view = repo.lead_filter_options(user_id=admin_id, role="admin")
        assert admin_view["companies"] == ["acme"]
        assert admin_view["sources"] == ["Referral"]

        user_view = repo.lead_filter_options(user_id=admin_id, role="user")
        assert user_view["locations"] == ["Paris"]
        assert user_view["sources"] == []


def test_update_keeps_required_fields_when_blank(admin_id) -> None:
    with SessionLocal() as db:
        repo = Repository(db)
        lead = repo.create_lead(_data(), assigned_to_id=admin_id, created_by_id=admin_id)
        updated = repo.update_lead(lead.id, {"first_name": "", "notes": "called twice"})
        assert updated.first_name == "Alice"
        assert updated.notes == "called twice"


def test_update_into_existing_key_raises_duplicate(admin_id) -> None:
    with SessionLocal() as db:
        repo = Repository(db)
        repo.create_lead(_data(), assigned_to_id=admin_id, created_by_id=admin_id)
        other = repo.create_lead(_data(email="bob@y.com"), assigned_to_id=admin_id, created_by_id=admin_id)
        with pytest.raises(DuplicateLeadError):
            repo.update_lead(other.id, {"email": "alice@x.com"})


def test_user_with_leads_cannot_be_deleted(admin_id) -> None:
    with SessionLocal() as db:
        repo = Repository(db)
        repo.create_lead(_data(), assigned_to_id=admin_id, created_by_id=admin_id)
        with pytest.raises(ValueError):
            repo.delete_user(admin_id)
