import os
import tempfile

# Configure before anything from eteeap is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["MAIL_SUPPRESS_SEND"] = "true"
os.environ["ALLOW_USER_ID_HEADER"] = "false"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="eteeap-uploads-")

import pytest
from fastapi.testclient import TestClient

from eteeap import models  # noqa: F401
from eteeap.config import settings
from eteeap.database import Base, SessionLocal, engine
from eteeap.main import app

ADMIN_EMAIL = settings.ADMIN_EMAIL
ADMIN_PASSWORD = settings.ADMIN_PASSWORD


@pytest.fixture
def client():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    # Entering the client runs startup, which seeds the built-in admin
    with TestClient(app) as c:
        yield c
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(client):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def signup(client, fullname="Ann Cruz", email="ann@example.com", password="Secret123"):
    return client.post("/auth/signup", json={"fullname": fullname, "email": email, "password": password})


def login_headers(client, email, password):
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def create_application(client, headers, **fields):
    data = {
        "program_name": "BS Information Technology",
        "full_name": "Ann Cruz",
        "email": "ann@example.com",
        "phone": "09171234567",
    }
    data.update(fields)
    response = client.post("/submit_application", data=data, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()["application_id"]


@pytest.fixture
def user_headers(client):
    signup(client)
    return login_headers(client, "ann@example.com", "Secret123")


@pytest.fixture
def admin_headers(client):
    return login_headers(client, ADMIN_EMAIL, ADMIN_PASSWORD)
