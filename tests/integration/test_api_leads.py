from __future__ import annotations

from fastapi.testclient import TestClient

from leadshub.api.app import create_app


def _lead_payload(owner_id: int, **overrides) -> dict:
    payload = {
        "first_name": "Alice",
        "last_name": "Smith",
        "designation": "CTO",
        "email": "Alice@X.com",
        "company_name": "Acme",
        "location": "NYC",
        "assigned_to": owner_id,
        "created_by": owner_id,
    }
    payload.update(overrides)
    return payload


def test_lead_create_get_update_delete(admin_id) -> None:
    client = TestClient(create_app())

    create_resp = client.post("/api/leads", json=_lead_payload(admin_id))
    assert create_resp.status_code == 201
    lead = create_resp.json()
    assert lead["email"] == "alice@x.com"
    assert lead["job_link"] is None
    assert lead["assigned_to"]["id"] == admin_id

    duplicate_resp = client.post("/api/leads", json=_lead_payload(admin_id, email="alice@x.com", company_name="ACME"))
    assert duplicate_resp.status_code == 400
    assert duplicate_resp.json()["detail"] == "A lead with this email and company already exists"

    get_resp = client.get(f"/api/leads/{lead['id']}")
    assert get_resp.status_code == 200

    update_resp = client.put(f"/api/leads/{lead['id']}", json={"notes": "warm"})
    assert update_resp.status_code == 200
    assert update_resp.json()["notes"] == "warm"

    assert client.delete(f"/api/leads/{lead['id']}").status_code == 200
    assert client.get(f"/api/leads/{lead['id']}").status_code == 404
    assert client.delete(f"/api/leads/{lead['id']}").status_code == 404


def test_lead_create_rejects_unknown_user(admin_id) -> None:
    client = TestClient(create_app())
    resp = client.post("/api/leads", json=_lead_payload(admin_id, created_by=999))
    assert resp.status_code == 400


def test_lead_list_filters_and_lookups(admin_id) -> None:
    client = TestClient(create_app())
    client.post("/api/leads", json=_lead_payload(admin_id, company_link="https://acme.test"))
    client.post("/api/leads", json=_lead_payload(admin_id, email="bob@y.com", company_name="Beta", location="Paris"))

    list_resp = client.get("/api/leads", params={"role": "admin", "location": "par", "sortBy": "email"})
    assert list_resp.status_code == 200
    body = list_resp.json()
    assert [item["email"] for item in body["leads"]] == ["bob@y.com"]
    assert body["pagination"]["total"] == 1

    assert client.get("/api/leads", params={"role": "admin", "sortBy": "password"}).status_code == 400

    filters = client.get("/api/leads/filters", params={"role": "admin"}).json()
    assert filters["companies"] == ["acme", "beta"]

    company = client.get("/api/leads/company", params={"company_name": "ACME"}).json()
    assert company == {"exists": True, "company": {"company_name": "acme", "company_link": "https://acme.test"}}
    assert client.get("/api/leads/company").status_code == 400


def test_import_upload_returns_summary_and_skip_report(admin_id) -> None:
    client = TestClient(create_app())
    content = (
        "First Name,Last Name,Designation,Email,Company Name\n"
        "Alice,Smith,CTO,alice@x.com,Acme\n"
        "Bob,Jones,,bob@y.com,Beta\n"
    )

    resp = client.post(
        "/api/leads/import",
        params={"assigneeId": admin_id},
        files={"file": ("leads.csv", content.encode("utf-8"), "text/csv")},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["assignee"]["id"] == admin_id
    assert body["summary"] == {"processed": 2, "created": 1, "skipped": 1, "errors": 0}
    assert body["skipped_rows"][0]["row_number"] == 3
    assert body["skipped_rows"][0]["reason"] == "Missing designation"
    assert body["skip_report_csv"].startswith("Row Number,")


def test_import_upload_rejects_header_only_file() -> None:
    client = TestClient(create_app())
    resp = client.post(
        "/api/leads/import",
        files={"file": ("leads.csv", b"First Name,Email\n", "text/csv")},
    )
    assert resp.status_code == 400
