from sqlalchemy import Column, String, Text

from conftest import create_application
from eteeap.models.activity_log import ActivityLog
from eteeap.models.document_remark import DocumentRemark
from eteeap.models.verified_file import VerifiedFile
from eteeap.services import admin_service
from eteeap.utils.documents import DOCUMENT_KEYS
from eteeap.utils.live_schema import live_applications_table


def _find(applications, application_id):
    return next(a for a in applications if a["id"] == application_id)


def test_admin_routes_require_admin(client, user_headers):
    assert client.get("/admin/applications", headers=user_headers).status_code == 403

    client.cookies.clear()
    assert client.get("/admin/applications").status_code == 401


# ------------------ Listing & verified flags ------------------

def test_list_defaults_every_document_to_unverified(client, user_headers, admin_headers):
    app_id = create_application(client, user_headers)

    applications = client.get("/admin/applications", headers=admin_headers).json()
    row = _find(applications, app_id)
    for key in DOCUMENT_KEYS:
        assert row[f"{key}_verified"] == 0


def test_verified_flags_match_verified_files(client, db, user_headers, admin_headers):
    first = create_application(client, user_headers)
    second = create_application(client, user_headers, program_name="BS Business Administration")

    client.post(f"/admin/applications/{first}/verify/resume", json={"verified": 1}, headers=admin_headers)
    client.post(f"/admin/applications/{first}/verify/picture", json={"verified": 1}, headers=admin_headers)
    client.post(f"/admin/applications/{second}/verify/transcript", json={"verified": 1}, headers=admin_headers)

    applications = client.get("/admin/applications", headers=admin_headers).json()
    for app_id in (first, second):
        stored = {k for (k,) in db.query(VerifiedFile.file_key).filter(VerifiedFile.application_id == app_id).all()}
        row = _find(applications, app_id)
        flagged = {key for key in DOCUMENT_KEYS if row[f"{key}_verified"] == 1}
        assert flagged == stored


def test_list_excludes_drafts(client, user_headers, admin_headers):
    submitted = create_application(client, user_headers)
    draft = create_application(client, user_headers, is_draft="true")

    ids = [a["id"] for a in client.get("/admin/applications", headers=admin_headers).json()]
    assert submitted in ids
    assert draft not in ids


# ------------------ Application status ------------------

def test_set_status_normalizes_case(client, user_headers, admin_headers):
    app_id = create_application(client, user_headers)
    response = client.patch(f"/admin/applications/{app_id}/status", json={"status": "aCCepted"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "Accepted"
    assert response.json()["id"] == app_id
    assert "message" not in response.json()


def test_set_status_is_idempotent(client, db, user_headers, admin_headers):
    app_id = create_application(client, user_headers)
    for _ in range(2):
        response = client.patch(f"/admin/applications/{app_id}/status", json={"status": "rejected"}, headers=admin_headers)
        assert response.json()["status"] == "Rejected"

    audits = db.query(ActivityLog).filter(ActivityLog.action == "update_application_status").count()
    assert audits == 2


def test_set_status_rejects_bad_input(client, user_headers, admin_headers):
    app_id = create_application(client, user_headers)

    invalid = client.patch(f"/admin/applications/{app_id}/status", json={"status": "approved"}, headers=admin_headers)
    assert invalid.status_code == 400
    assert invalid.json()["detail"] == "Invalid status value"

    missing = client.patch(f"/admin/applications/{app_id}/status", json={}, headers=admin_headers)
    assert missing.status_code == 400

    unknown = client.patch("/admin/applications/9999/status", json={"status": "pending"}, headers=admin_headers)
    assert unknown.status_code == 404


# ------------------ Document status ------------------

def test_document_status_written_when_column_exists(client, user_headers, admin_headers):
    app_id = create_application(client, user_headers)
    response = client.patch(
        f"/admin/applications/{app_id}/documents/resume/status",
        json={"status": "APPROVED", "remark": "Looks good"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    application = response.json()
    assert application["resume_status"] == "approved"
    assert application["resume_remark"] == "Looks good"


def test_document_status_is_noop_without_column(client, user_headers, admin_headers):
    app_id = create_application(client, user_headers)
    before = _find(client.get("/admin/applications", headers=admin_headers).json(), app_id)

    response = client.patch(
        f"/admin/applications/{app_id}/documents/picture/status",
        json={"status": "rejected"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    application = response.json()
    assert "picture_status" not in application
    assert application["status"] == before["status"]


def test_document_status_validation(client, user_headers, admin_headers):
    app_id = create_application(client, user_headers)
    url = f"/admin/applications/{app_id}/documents/%s/status"

    assert client.patch(url % "passport", json={"status": "approved"}, headers=admin_headers).status_code == 400
    assert client.patch(url % "resume", json={"status": "accepted"}, headers=admin_headers).status_code == 400
    assert client.patch(url % "resume", json={}, headers=admin_headers).status_code == 400
    assert client.patch(
        "/admin/applications/9999/documents/resume/status", json={"status": "approved"}, headers=admin_headers
    ).status_code == 404


def test_document_status_unknown_column_is_bad_request(client, db, user_headers, admin_headers, monkeypatch):
    app_id = create_application(client, user_headers)

    # A schema that claims picture_status exists while the database lacks it
    stale = live_applications_table(db)
    stale.append_column(Column("picture_status", String(20)))
    stale.append_column(Column("picture_remark", Text))
    db.rollback()
    monkeypatch.setattr(admin_service, "live_applications_table", lambda session: stale)

    response = client.patch(
        f"/admin/applications/{app_id}/documents/picture/status",
        json={"status": "approved"},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Document does not support status updates"


def test_document_status_keys_reflect_live_schema(client, admin_headers):
    response = client.get("/admin/document-status-keys", headers=admin_headers)
    assert response.json() == {"supported": ["resume"]}


# ------------------ File verification ------------------

def test_verify_twice_keeps_single_row(client, db, user_headers, admin_headers):
    app_id = create_application(client, user_headers)
    for _ in range(2):
        response = client.post(f"/admin/applications/{app_id}/verify/resume", json={"verified": 1}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["resume_verified"] == 1

    count = db.query(VerifiedFile).filter(
        VerifiedFile.application_id == app_id, VerifiedFile.file_key == "resume"
    ).count()
    assert count == 1


def test_unverify_removes_row(client, db, user_headers, admin_headers):
    app_id = create_application(client, user_headers)
    client.post(f"/admin/applications/{app_id}/verify/resume", json={"verified": 1}, headers=admin_headers)

    response = client.post(f"/admin/applications/{app_id}/verify/resume", json={"verified": 0}, headers=admin_headers)
    assert response.json()["resume_verified"] == 0
    assert db.query(VerifiedFile).filter(VerifiedFile.application_id == app_id).count() == 0


def test_verify_without_flag_only_marks(client, db, user_headers, admin_headers):
    app_id = create_application(client, user_headers)

    first = client.post(f"/admin/applications/{app_id}/verify/picture", headers=admin_headers)
    assert first.status_code == 200
    assert first.json()["picture_verified"] == 1

    second = client.post(f"/admin/applications/{app_id}/verify/picture", headers=admin_headers)
    assert second.status_code == 200
    assert second.json() == {"message": "Already verified"}
    assert db.query(VerifiedFile).filter(VerifiedFile.application_id == app_id).count() == 1


def test_verify_validation(client, user_headers, admin_headers):
    app_id = create_application(client, user_headers)
    assert client.post(f"/admin/applications/{app_id}/verify/passport", json={"verified": 1}, headers=admin_headers).status_code == 400
    assert client.post("/admin/applications/9999/verify/resume", json={"verified": 1}, headers=admin_headers).status_code == 404


# ------------------ Delete ------------------

def test_delete_returns_snapshot_and_cascades(client, db, user_headers, admin_headers):
    app_id = create_application(client, user_headers)
    client.post(f"/admin/applications/{app_id}/verify/resume", json={"verified": 1}, headers=admin_headers)
    client.post(f"/admin/applications/{app_id}/remarks/resume", json={"remark": "Blurry"}, headers=admin_headers)

    response = client.delete(f"/admin/applications/{app_id}", headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Application deleted"
    assert body["deleted"]["id"] == app_id
    assert body["deleted"]["program_name"] == "BS Information Technology"

    assert db.query(VerifiedFile).filter(VerifiedFile.application_id == app_id).count() == 0
    assert db.query(DocumentRemark).filter(DocumentRemark.application_id == app_id).count() == 0
    assert client.delete(f"/admin/applications/{app_id}", headers=admin_headers).status_code == 404


# ------------------ Remarks, logs, dashboard ------------------

def test_remarks_latest_wins(client, user_headers, admin_headers):
    app_id = create_application(client, user_headers)
    url = f"/admin/applications/{app_id}/remarks/transcript"

    assert client.get(url, headers=admin_headers).json() == {"remark": "", "created_at": None}

    client.post(url, json={"remark": "Missing page 2"}, headers=admin_headers)
    latest = client.post(url, json={"remark": "Please upload a clearer copy"}, headers=admin_headers)
    assert latest.json()["remark"] == "Please upload a clearer copy"
    assert client.get(url, headers=admin_headers).json()["remark"] == "Please upload a clearer copy"


def test_activity_logs_name_the_actor(client, user_headers, admin_headers):
    app_id = create_application(client, user_headers)
    client.patch(f"/admin/applications/{app_id}/status", json={"status": "accepted"}, headers=admin_headers)

    logs = client.get("/admin/activity-logs", headers=admin_headers).json()
    entry = next(log for log in logs if log["action"] == "update_application_status")
    assert entry["user"] == "Administrator"
    assert entry["role"] == "admin"
    assert "Accepted" in entry["details"]


def test_dashboard_stats(client, user_headers, admin_headers):
    accepted = create_application(client, user_headers)
    create_application(client, user_headers, program_name="BS Business Administration")
    create_application(client, user_headers, is_draft="true")

    client.patch(f"/admin/applications/{accepted}/status", json={"status": "accepted"}, headers=admin_headers)
    for key in ("letter_of_intent", "resume", "picture"):
        client.post(f"/admin/applications/{accepted}/verify/{key}", json={"verified": 1}, headers=admin_headers)

    stats = client.get("/admin/dashboard-stats", headers=admin_headers).json()
    assert stats["totalApplicants"] == 2
    assert stats["accepted"] == 1
    assert stats["pendingVerifications"] == 1
    assert stats["rejected"] == 0
    assert stats["incompleteRequirements"] == 1
    programs = {p["program"]: p["count"] for p in stats["programDistribution"]}
    assert programs == {"BS Information Technology": 1, "BS Business Administration": 1}
    assert sum(m["count"] for m in stats["monthlyApplicants"]) == 2


# ------------------ Admin profile ------------------

def test_admin_profile_default_picture_and_update(client, admin_headers):
    profile = client.get("/admin/profile", headers=admin_headers).json()
    assert profile["profile_picture"] == "http://testserver/uploads/profile/default.png"

    response = client.put(
        "/admin/profile",
        data={"fullname": "Registrar", "email": "registrar@eteeap.com"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["user"]["fullname"] == "Registrar"
    assert client.get("/admin/profile", headers=admin_headers).json()["email"] == "registrar@eteeap.com"


def test_admin_profile_requires_fields(client, admin_headers):
    response = client.put("/admin/profile", data={"fullname": ""}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Fullname and email required"
