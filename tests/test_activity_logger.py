from eteeap.config import settings
from eteeap.models.activity_log import ActivityLog
from eteeap.models.user import User
from eteeap.services.activity_logger import log_activity
from eteeap.utils.hash import hash_password


def _make_user(db, email, role="user"):
    user = User(fullname=email.split("@")[0], email=email, password=hash_password("Secret123"), role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def test_explicit_actor_is_recorded(client, db):
    user = _make_user(db, "carla@example.com")
    entry = log_activity(db, user.id, "user", "login", "User logged in")
    assert entry.user_id == user.id
    assert entry.role == "user"


def test_missing_actor_uses_configured_system_actor(client, db, monkeypatch):
    system = _make_user(db, "system@example.com", role="admin")
    monkeypatch.setattr(settings, "SYSTEM_ACTOR_ID", system.id)

    entry = log_activity(db, None, "admin", "maintenance", "Nightly cleanup")
    assert entry.user_id == system.id


def test_missing_actor_falls_back_to_first_admin(client, db, monkeypatch):
    monkeypatch.setattr(settings, "SYSTEM_ACTOR_ID", None)
    first_admin = db.query(User).filter(User.role == "admin").order_by(User.id).first()

    entry = log_activity(db, None, "admin", "maintenance", "Nightly cleanup")
    assert entry.user_id == first_admin.id


def test_missing_actor_without_admin_is_skipped(client, db, monkeypatch):
    monkeypatch.setattr(settings, "SYSTEM_ACTOR_ID", None)
    db.query(ActivityLog).delete()
    db.query(User).filter(User.role == "admin").delete()
    db.commit()

    assert log_activity(db, None, "admin", "maintenance", "Nightly cleanup") is None
    assert db.query(ActivityLog).count() == 0
