from __future__ import annotations

from fastapi.testclient import TestClient

from leadshub.api.app import create_app


def test_user_admin_endpoints() -> None:
    client = TestClient(create_app())

    create_resp = client.post(
        "/api/admin/users",
        json={"name": "Uma", "email": "Uma@Example.com", "password": "secret1"},
    )
    assert create_resp.status_code == 201
    user = create_resp.json()
    assert user["email"] == "uma@example.com"
    assert user["role"] == "user"

    assert client.post(
        "/api/admin/users",
        json={"name": "Uma", "email": "uma@example.com", "password": "secret1"},
    ).status_code == 400

    list_resp = client.get("/api/admin/users", params={"search": "uma"})
    assert list_resp.json()["pagination"]["total"] == 1

    update_resp = client.put(f"/api/admin/users/{user['id']}", json={"role": "admin"})
    assert update_resp.status_code == 200
    assert update_resp.json()["role"] == "admin"

    assert client.put("/api/admin/users/999", json={"name": "x"}).status_code == 404
    assert client.delete(f"/api/admin/users/{user['id']}").status_code == 200
    assert client.delete(f"/api/admin/users/{user['id']}").status_code == 404


def test_countries() -> None:
    client = TestClient(create_app())
    assert client.post("/api/countries", json={"name": "Portugal"}).status_code == 201
    assert client.post("/api/countries", json={"name": "Austria"}).status_code == 201
    assert client.post("/api/countries", json={"name": "Portugal"}).status_code == 400
    assert client.post("/api/countries", json={"name": "  "}).status_code == 400

    names = [item["name"] for item in client.get("/api/countries").json()]
    assert names == ["Austria", "Portugal"]


def test_dashboard_and_reports(admin_id) -> None:
    client = TestClient(create_app())
    client.post(
        "/api/leads",
        json={
            "first_name": "Alice",
            "last_name": "Smith",
            "designation": "CTO",
            "email": "alice@x.com",
            "company_name": "Acme",
            "assigned_to": admin_id,
            "created_by": admin_id,
        },
    )

    dashboard = client.get("/api/admin/dashboard").json()
    assert dashboard["stats"]["total_leads"] == 1
    assert dashboard["stats"]["new_leads"] == 1
    assert dashboard["stats"]["active_users"] == 1
    assert dashboard["recent_activity"][0]["message"] == "New lead added: acme by Ada Admin"

    report = client.get("/api/admin/reports", params={"range": "30"}).json()
    assert report["total_leads"] == 1
    assert report["leads_by_company"] == [{"company": "acme", "count": 1}]
    assert client.get("/api/admin/reports", params={"range": "soon"}).status_code == 400


def test_health() -> None:
    client = TestClient(create_app())
    assert client.get("/health").json() == {"status": "ok"}
