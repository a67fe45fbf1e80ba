from pathlib import Path

import pytest

from ayu.config import settings
from ayu.models.user import User
from ayu.services.auth_service import create_access_token

PREFIX = settings.API_PREFIX

FULL_PROFILE = {"height": 170, "weight": 65, "gender": "Female", "dob": "1995-05-01"}


@pytest.fixture()
def user_id(verified_user, db):
    return db.query(User).filter(User.email == verified_user["email"]).first().id


@pytest.fixture()
def token(client, verified_user):
    response = client.post(f"{PREFIX}/signin", json=verified_user)
    return response.json()["data"]["token"]


def test_scenario_d_update_profile(client, user_id):
    response = client.put(f"{PREFIX}/updateprofile/{user_id}", json=FULL_PROFILE)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["height"] == 170
    assert data["weight"] == 65
    assert data["gender"] == "Female"
    assert data["dob"] == "1995-05-01"
    assert "password_hash" not in data and "otp" not in data


def test_partial_update_leaves_other_fields(client, user_id):
    client.put(f"{PREFIX}/updateprofile/{user_id}", json=FULL_PROFILE)

    response = client.put(f"{PREFIX}/updateprofile/{user_id}", json={"height": 172.5})

    data = response.json()["data"]
    assert data["height"] == 172.5
    assert data["weight"] == 65
    assert data["gender"] == "Female"
    assert data["dob"] == "1995-05-01"


def test_update_unknown_user(client):
    response = client.put(f"{PREFIX}/updateprofile/9999", json={"height": 170})

    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


def test_update_rejects_invalid_gender(client, user_id):
    response = client.put(f"{PREFIX}/updateprofile/{user_id}", json={"gender": "Robot"})
    assert response.status_code == 400


def test_update_rejects_null_or_blank_name(client, user_id):
    for body in ({"name": None}, {"name": "   "}):
        response = client.put(f"{PREFIX}/updateprofile/{user_id}", json=body)
        assert response.status_code == 400

    lookup = client.get(f"{PREFIX}/user/ann@x.com")
    assert lookup.json()["data"]["name"] == "Ann"


def test_update_trims_name(client, user_id):
    response = client.put(f"{PREFIX}/updateprofile/{user_id}", json={"name": "  Ann Lee "})

    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Ann Lee"


def test_update_with_someone_elses_token_is_forbidden(client, user_id):
    other = create_access_token({"sub": str(user_id + 1)})

    response = client.put(
        f"{PREFIX}/updateprofile/{user_id}",
        json={"height": 170},
        headers={"Authorization": f"Bearer {other}"},
    )

    assert response.status_code == 403


def test_update_requires_token_when_configured(client, user_id, token, monkeypatch):
    monkeypatch.setattr(settings, "PROFILE_UPDATE_REQUIRE_TOKEN", True)

    anonymous = client.put(f"{PREFIX}/updateprofile/{user_id}", json={"height": 170})
    owner = client.put(
        f"{PREFIX}/updateprofile/{user_id}",
        json={"height": 170},
        headers={"Authorization": f"Bearer {token}"},
    )

    assert anonymous.status_code == 401
    assert owner.status_code == 200


def test_get_user_by_email(client, verified_user):
    found = client.get(f"{PREFIX}/user/ann@x.com")
    missing = client.get(f"{PREFIX}/user/ghost@x.com")

    assert found.status_code == 200
    assert found.json()["data"]["email"] == "ann@x.com"
    assert missing.status_code == 404


def test_profile_me_requires_valid_token(client, token):
    ok = client.get(f"{PREFIX}/profile/me", headers={"Authorization": f"Bearer {token}"})
    bad = client.get(f"{PREFIX}/profile/me", headers={"Authorization": "Bearer garbage"})

    assert ok.status_code == 200
    assert ok.json()["data"]["name"] == "Ann"
    assert bad.status_code == 401


def test_upload_profile_photo(client, token):
    headers = {"Authorization": f"Bearer {token}"}
    response = client.post(
        f"{PREFIX}/profile/photo",
        files={"file": ("me.png", b"\x89PNG fake", "image/png")},
        headers=headers,
    )

    assert response.status_code == 200
    picture = response.json()["data"]["profilePicture"]
    assert picture.startswith("/uploads/profile_photos/")
    assert picture.endswith(".png")
    assert (Path(settings.UPLOAD_DIR) / "profile_photos" / Path(picture).name).exists()
    served = client.get(picture)
    assert served.status_code == 200
    assert served.content == b"\x89PNG fake"

    rejected = client.post(
        f"{PREFIX}/profile/photo",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=headers,
    )
    assert rejected.status_code == 400
