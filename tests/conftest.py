import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure predictable environment variables for tests before importing the app.
BASE_DIR = Path(__file__).resolve().parents[1]
TEST_DB_PATH = BASE_DIR / "test.db"

if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

os.environ.setdefault("DATABASE_URL", f"sqlite:///{TEST_DB_PATH}")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("EMAIL_BACKEND", "console")
os.environ.setdefault("UPLOAD_DIR", str(BASE_DIR / "test_uploads"))
os.environ.pop("SEED_DEMO_USER_EMAIL", None)
os.environ.pop("GEMINI_API_KEY", None)

import ayu.main as main  # noqa: E402  (import after env vars are set)
from ayu.config import settings  # noqa: E402
from ayu.database import Base, SessionLocal, engine  # noqa: E402
from ayu.services import email_service  # noqa: E402

PREFIX = settings.API_PREFIX


@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def outbox(monkeypatch):
    """Capture OTP emails instead of delivering them."""
    sent = []

    def _capture(to_email, otp, purpose=email_service.PURPOSE_VERIFY):
        sent.append({"email": to_email, "otp": otp, "purpose": purpose})

    monkeypatch.setattr(email_service, "send_email_otp", _capture)
    return sent


@pytest.fixture()
def client(monkeypatch, outbox):
    """Provide a TestClient with startup tasks patched out for isolation."""
    monkeypatch.setattr(main, "run_seed", lambda: None)

    with TestClient(main.app) as test_client:
        yield test_client


@pytest.fixture()
def register(client, outbox):
    """Sign up an account and return the OTP that was emailed for it."""

    def _register(name="Ann", email="ann@x.com", password="Passw0rd!"):
        response = client.post(f"{PREFIX}/signup", json={
            "name": name,
            "email": email,
            "password": password,
            "confirmPassword": password,
        })
        assert response.status_code == 201, response.json()
        return outbox[-1]["otp"]

    return _register


@pytest.fixture()
def verified_user(client, register):
    otp = register()
    response = client.post(f"{PREFIX}/verifyotp", json={"email": "ann@x.com", "otp": otp})
    assert response.status_code == 200
    return {"email": "ann@x.com", "password": "Passw0rd!"}
