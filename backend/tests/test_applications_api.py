from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy.exc import OperationalError


def _parse(ts: str) -> datetime:
    return datetime.fromisoformat(ts.replace("Z", "+00:00"))


def test_create_returns_201_with_uuid_and_submitted_date(client):
    payload = {
        "company": "Google",
        "jobTitle": "Backend Engineer",
        "dateApplied": "2026-05-14",
        "status": "Applied",
        "notes": "Referred by a friend",
        "link": "https://careers.google.com/jobs/123",
    }
    res = client.post("/api/applications", json=payload)
    assert res.status_code == 201
    created = res.json()

    assert str(uuid.UUID(created["id"])) == created["id"]
    assert created["dateApplied"].startswith("2026-05-14")
    assert created["company"] == "Google"
    assert created["jobTitle"] == "Backend Engineer"
    assert created["status"] == "Applied"
    assert created["notes"] == "Referred by a friend"
    assert created["link"] == "https://careers.google.com/jobs/123"
    assert created["createdAt"]
    assert created["updatedAt"]


def test_create_with_empty_optional_fields_stores_null(client):
    res = client.post(
        "/api/applications",
        json={"company": "Acme", "jobTitle": "Engineer", "dateApplied": "2026-06-01", "status": "Offer", "notes": "", "link": ""},
    )
    assert res.status_code == 201
    body = res.json()
    assert body["notes"] is None
    assert body["link"] is None


def test_create_with_blank_company_is_400_naming_company(client):
    res = client.post(
        "/api/applications",
        json={"company": "", "jobTitle": "Engineer", "dateApplied": "2026-06-01", "status": "Applied"},
    )
    assert res.status_code == 400
    body = res.json()
    assert body["error"] == "VALIDATION_ERROR"
    assert "company" in body["errors"]
    assert body["errors"]["company"] == ["Company name is required"]


def test_create_missing_required_fields_is_400(client):
    res = client.post("/api/applications", json={"company": "Acme"})
    assert res.status_code == 400
    errors = res.json()["errors"]
    assert set(errors) == {"jobTitle", "dateApplied", "status"}


def test_create_rejects_bad_status_date_and_link(client):
    res = client.post(
        "/api/applications",
        json={
            "company": "Acme",
            "jobTitle": "Engineer",
            "dateApplied": "not-a-date",
            "status": "Ghosted",
            "link": "definitely not a url",
        },
    )
    assert res.status_code == 400
    errors = res.json()["errors"]
    assert errors["status"] == ["Please select a valid status"]
    assert errors["dateApplied"] == ["Invalid date format. Expected YYYY-MM-DD"]
    assert errors["link"] == ["Must be a valid URL"]


def test_list_is_ordered_by_date_applied_desc(client, create_app_record):
    older = create_app_record(company="Older", dateApplied="2026-01-05")
    newest = create_app_record(company="Newest", dateApplied="2026-03-20")
    middle = create_app_record(company="Middle", dateApplied="2026-02-11")

    res = client.get("/api/applications")
    assert res.status_code == 200
    ids = [a["id"] for a in res.json()]
    assert ids == [newest["id"], middle["id"], older["id"]]


def test_list_empty(client):
    res = client.get("/api/applications")
    assert res.status_code == 200
    assert res.json() == []


def test_get_by_id(client, create_app_record):
    rec = create_app_record(company="Globex")
    res = client.get(f"/api/applications/{rec['id']}")
    assert res.status_code == 200
    assert res.json() == rec


def test_get_nonexistent_uuid_is_404(client):
    res = client.get(f"/api/applications/{uuid.uuid4()}")
    assert res.status_code == 404
    assert res.json()["message"] == "Application not found"


def test_get_non_uuid_is_400(client):
    res = client.get("/api/applications/not-a-uuid")
    assert res.status_code == 400
    assert res.json()["message"] == "Invalid ID format. Must be a UUID."


def test_partial_update_only_touches_given_fields(client, create_app_record):
    rec = create_app_record(company="Initech", jobTitle="Analyst", dateApplied="2026-04-02", notes="first call")

    res = client.put(f"/api/applications/{rec['id']}", json={"status": "Offer"})
    assert res.status_code == 200
    updated = res.json()

    assert updated["status"] == "Offer"
    assert updated["company"] == "Initech"
    assert updated["jobTitle"] == "Analyst"
    assert updated["dateApplied"] == rec["dateApplied"]
    assert updated["notes"] == "first call"
    assert updated["createdAt"] == rec["createdAt"]
    assert _parse(updated["updatedAt"]) > _parse(rec["updatedAt"])


def test_update_link_to_empty_string_persists_null(client, create_app_record):
    rec = create_app_record(link="https://example.com/job")
    assert rec["link"] == "https://example.com/job"

    res = client.put(f"/api/applications/{rec['id']}", json={"link": ""})
    assert res.status_code == 200
    assert res.json()["link"] is None

    res2 = client.get(f"/api/applications/{rec['id']}")
    assert res2.json()["link"] is None


def test_update_notes_to_empty_string_persists_null(client, create_app_record):
    rec = create_app_record(notes="some notes")
    res = client.put(f"/api/applications/{rec['id']}", json={"notes": ""})
    assert res.status_code == 200
    assert res.json()["notes"] is None


def test_update_date_applied_when_provided(client, create_app_record):
    rec = create_app_record(dateApplied="2026-04-02")
    res = client.put(f"/api/applications/{rec['id']}", json={"dateApplied": "2026-04-09"})
    assert res.status_code == 200
    assert res.json()["dateApplied"].startswith("2026-04-09")


def test_update_with_empty_body_returns_record_unchanged(client, create_app_record):
    rec = create_app_record()
    res = client.put(f"/api/applications/{rec['id']}", json={})
    assert res.status_code == 200
    assert res.json() == rec


def test_update_invalid_status_is_400(client, create_app_record):
    rec = create_app_record()
    res = client.put(f"/api/applications/{rec['id']}", json={"status": "Hired"})
    assert res.status_code == 400
    assert res.json()["errors"]["status"] == ["Please select a valid status"]

    # Nothing was written.
    assert client.get(f"/api/applications/{rec['id']}").json()["status"] == "Applied"


def test_update_rejects_null_for_required_columns(client, create_app_record):
    rec = create_app_record()
    res = client.put(f"/api/applications/{rec['id']}", json={"company": None, "jobTitle": ""})
    assert res.status_code == 400
    errors = res.json()["errors"]
    assert "company" in errors
    assert "jobTitle" in errors


def test_update_nonexistent_is_404(client):
    res = client.put(f"/api/applications/{uuid.uuid4()}", json={"status": "Offer"})
    assert res.status_code == 404
    assert res.json()["message"] == "Application not found for update"


def test_update_bad_id_is_400(client):
    res = client.put("/api/applications/123", json={"status": "Offer"})
    assert res.status_code == 400
    assert res.json()["message"] == "Invalid ID format. Must be a UUID."


def test_delete_then_get_is_404(client, create_app_record):
    rec = create_app_record()
    res = client.delete(f"/api/applications/{rec['id']}")
    assert res.status_code == 204
    assert res.content == b""

    res2 = client.get(f"/api/applications/{rec['id']}")
    assert res2.status_code == 404


def test_delete_nonexistent_is_404(client):
    res = client.delete(f"/api/applications/{uuid.uuid4()}")
    assert res.status_code == 404
    assert res.json()["message"] == "Application not found for delete"


def test_delete_bad_id_is_400(client):
    res = client.delete("/api/applications/nope")
    assert res.status_code == 400


def test_store_failure_is_500_with_generic_message(client, monkeypatch):
    from jobtrack.routes import applications as routes

    def boom(db):
        raise OperationalError("SELECT 1", {}, Exception("db down"))

    monkeypatch.setattr(routes, "list_applications", boom)

    res = client.get("/api/applications")
    assert res.status_code == 500
    body = res.json()
    assert body["error"] == "INTERNAL_ERROR"
    assert body["message"] == "Error fetching job applications"
    assert "db down" not in res.text


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


def test_create_with_out_of_range_date_is_400(client):
    res = client.post(
        "/api/applications",
        json={"company": "Acme", "jobTitle": "Engineer", "dateApplied": "0001-01-01T00:00:00+05:00", "status": "Applied"},
    )
    assert res.status_code == 400
    assert res.json()["errors"]["dateApplied"] == ["Invalid date format. Expected YYYY-MM-DD"]


def test_javascript_link_is_rejected_on_create_and_update(client, create_app_record):
    res = client.post(
        "/api/applications",
        json={
            "company": "Acme",
            "jobTitle": "Engineer",
            "dateApplied": "2026-06-01",
            "status": "Applied",
            "link": "javascript:alert(document.cookie)",
        },
    )
    assert res.status_code == 400
    assert res.json()["errors"]["link"] == ["Must be a valid URL"]

    rec = create_app_record()
    res2 = client.put(f"/api/applications/{rec['id']}", json={"link": "javascript:alert(1)"})
    assert res2.status_code == 400
    assert client.get(f"/api/applications/{rec['id']}").json()["link"] is None


def test_long_text_fields_are_stored(client, create_app_record):
    rec = create_app_record(company="C" * 300, jobTitle="T" * 300)
    got = client.get(f"/api/applications/{rec['id']}").json()
    assert got["company"] == "C" * 300
    assert got["jobTitle"] == "T" * 300


def test_read_after_delete_in_same_session_is_404(client, create_app_record):
    rec = create_app_record()
    # Load the row into the shared session first so a stale instance is tracked.
    assert client.get(f"/api/applications/{rec['id']}").status_code == 200
    assert client.delete(f"/api/applications/{rec['id']}").status_code == 204

    res = client.get(f"/api/applications/{rec['id']}")
    assert res.status_code == 404
    assert res.json()["message"] == "Application not found"
    assert client.put(f"/api/applications/{rec['id']}", json={"status": "Offer"}).status_code == 404
