import calendar
from datetime import datetime, timedelta

from conftest import create_application, login_headers, signup
from eteeap.models.application import Application
from eteeap.models.document_remark import DocumentRemark
from eteeap.models.notification_read import NotificationRead
from eteeap.services.notification_service import PER_SOURCE_LIMIT


def _seed_timeline(db, app_id):
    db.query(Application).filter(Application.id == app_id).update({"updated_at": datetime(2025, 3, 2, 9, 0, 0)})
    db.add(DocumentRemark(application_id=app_id, document_name="resume", remark="Outdated", created_at=datetime(2025, 3, 1, 8, 0, 0)))
    db.add(DocumentRemark(application_id=app_id, document_name="picture", remark="Too dark", created_at=datetime(2025, 3, 3, 10, 0, 0)))
    db.commit()


def test_notifications_sorted_newest_first(client, db, user_headers):
    app_id = create_application(client, user_headers)
    _seed_timeline(db, app_id)

    notifications = client.get("/notifications", headers=user_headers).json()
    assert [n["type"] for n in notifications] == ["remark", "status", "remark"]
    timestamps = [n["ts"] for n in notifications]
    assert timestamps == sorted(timestamps, reverse=True)
    assert len(set(timestamps)) == len(timestamps)


def test_notification_keys(client, db, user_headers):
    app_id = create_application(client, user_headers)
    _seed_timeline(db, app_id)

    notifications = client.get("/notifications", headers=user_headers).json()
    status = next(n for n in notifications if n["type"] == "status")
    expected_ts = calendar.timegm(datetime(2025, 3, 2, 9, 0, 0).timetuple())
    assert status["notification_key"] == f"status:{app_id}:{expected_ts}"
    assert status["title"] == "Application Status: Pending"

    remark_keys = {n["notification_key"] for n in notifications if n["type"] == "remark"}
    remark_ids = {r.id for r in db.query(DocumentRemark).all()}
    assert remark_keys == {f"remark:{rid}" for rid in remark_ids}


def test_mark_read_flags_exactly_one(client, db, user_headers):
    app_id = create_application(client, user_headers)
    _seed_timeline(db, app_id)

    before = client.get("/notifications", headers=user_headers).json()
    assert not any(n["read"] for n in before)
    target = before[1]["notification_key"]

    response = client.post("/notifications/mark-read", json={"notification_key": target}, headers=user_headers)
    assert response.status_code == 200

    after = client.get("/notifications", headers=user_headers).json()
    read = {n["notification_key"]: n["read"] for n in after}
    assert read[target] is True
    assert [k for k, v in read.items() if v] == [target]


def test_mark_read_is_idempotent(client, db, user_headers):
    for _ in range(2):
        response = client.post("/notifications/mark-read", json={"notification_key": "remark:7"}, headers=user_headers)
        assert response.status_code == 200
    assert db.query(NotificationRead).filter(NotificationRead.notification_key == "remark:7").count() == 1


def test_mark_read_requires_key(client, user_headers):
    response = client.post("/notifications/mark-read", json={}, headers=user_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "notification_key required"


def test_notifications_only_cover_own_applications(client, db, user_headers):
    mine = create_application(client, user_headers)
    signup(client, fullname="Ben Santos", email="ben@example.com", password="Secret456")
    other_headers = login_headers(client, "ben@example.com", "Secret456")
    theirs = create_application(client, other_headers, full_name="Ben Santos", email="ben@example.com")
    _seed_timeline(db, theirs)

    notifications = client.get("/notifications", headers=user_headers).json()
    assert {n["application_id"] for n in notifications} == {mine}


def test_remarks_capped_per_source(client, db, user_headers):
    app_id = create_application(client, user_headers)
    start = datetime(2025, 1, 1)
    for i in range(PER_SOURCE_LIMIT + 5):
        db.add(DocumentRemark(application_id=app_id, document_name="resume", remark=f"note {i}", created_at=start + timedelta(minutes=i)))
    db.commit()

    notifications = client.get("/notifications", headers=user_headers).json()
    remarks = [n for n in notifications if n["type"] == "remark"]
    assert len(remarks) == PER_SOURCE_LIMIT
    assert remarks[0]["message"] == f"note {PER_SOURCE_LIMIT + 4}"


# ------------------ Resubmission ------------------

def test_resubmit_replaces_file_and_adds_remark(client, db, user_headers):
    app_id = create_application(client, user_headers)
    response = client.post(
        "/notifications/resubmit",
        data={"application_id": app_id, "document_name": "resume"},
        files={"file": ("cv-v2.pdf", b"%PDF-1.4", "application/pdf")},
        headers=user_headers,
    )
    assert response.status_code == 200
    assert response.json()["file_path"].endswith("-cv-v2.pdf")

    remark = db.query(DocumentRemark).filter(DocumentRemark.application_id == app_id).one()
    assert remark.document_name == "resume"
    assert remark.remark == "User resubmitted resume"


def test_resubmit_validation(client, user_headers):
    app_id = create_application(client, user_headers)
    upload = {"file": ("cv.pdf", b"%PDF-1.4", "application/pdf")}

    bad_name = client.post("/notifications/resubmit", data={"application_id": app_id, "document_name": "passport"}, files=upload, headers=user_headers)
    assert bad_name.status_code == 400

    no_file = client.post("/notifications/resubmit", data={"application_id": app_id, "document_name": "resume"}, headers=user_headers)
    assert no_file.status_code == 400
    assert no_file.json()["detail"] == "File is required"

    missing = client.post("/notifications/resubmit", data={"application_id": 9999, "document_name": "resume"}, files=upload, headers=user_headers)
    assert missing.status_code == 404
