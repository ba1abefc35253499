"""
Tests for the profile, email verification and video registration endpoints.
"""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from memoreel.config import Settings
from memoreel.dependencies import get_user_service, get_video_service
from memoreel.main import create_app
from memoreel.services.user_service import UserService
from memoreel.services.video_service import VideoService


@pytest.fixture
def app(fake_users, fake_reels, fake_videos, apply_auth_override):
    app = create_app(Settings(_env_file=None, JWT_SECRET="test-secret"))
    app.dependency_overrides[get_user_service] = lambda: UserService(
        users=fake_users, reels=fake_reels
    )
    app.dependency_overrides[get_video_service] = lambda: VideoService(videos=fake_videos)
    apply_auth_override(app)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


def test_get_profile(client, fake_users, make_user):
    user = make_user(id="user-123", first_name="Grace", last_name="Hopper")
    fake_users.users[user.id] = user

    response = client.get("/api/v1/me")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == "user-123"
    assert data["first_name"] == "Grace"
    assert "password" not in data


def test_get_profile_missing_user(client):
    response = client.get("/api/v1/me")

    assert response.status_code == 404


def test_patch_profile(client, fake_users, make_user):
    user = make_user(id="user-123", first_name="Grace", last_name="Hopper")
    fake_users.users[user.id] = user

    response = client.patch("/api/v1/me", json={"first_name": "Amazing Grace"})

    assert response.status_code == 200
    assert response.json()["first_name"] == "Amazing Grace"
    assert fake_users.users["user-123"].last_name == "Hopper"


def test_patch_profile_rejects_empty_name(client, fake_users, make_user):
    user = make_user(id="user-123")
    fake_users.users[user.id] = user

    response = client.patch("/api/v1/me", json={"first_name": ""})

    assert response.status_code == 422


def test_verify_email_claims_reels(client, fake_users, fake_reels, make_user, make_reel):
    user = make_user(email="new@example.com", email_verification_token="tok")
    fake_users.users[user.id] = user
    for _ in range(2):
        reel = make_reel(user_id=None, email="new@example.com")
        fake_reels.reels[reel.id] = reel

    response = client.post("/api/v1/auth/verify-email", json={"token": "tok"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "user_id": user.id, "reels_claimed": 2}


def test_verify_email_expired(client, fake_users, make_user):
    user = make_user(
        email_verification_token="old",
        email_verification_expires_at=datetime.now(UTC) - timedelta(days=1),
    )
    fake_users.users[user.id] = user

    response = client.post("/api/v1/auth/verify-email", json={"token": "old"})

    assert response.status_code == 400


def test_verify_email_unknown_token(client):
    response = client.post("/api/v1/auth/verify-email", json={"token": "unknown"})

    assert response.status_code == 404


def test_register_video(client, fake_videos):
    response = client.post(
        "/api/v1/videos",
        json={"key": "uploads/abc.MOV", "file_format": "MOV", "size_mb": 48.2},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["file_format"] == "mov"
    assert data["id"] in fake_videos.videos


def test_register_video_rejects_non_positive_size(client):
    response = client.post(
        "/api/v1/videos", json={"key": "uploads/abc.mp4", "file_format": "mp4", "size_mb": 0}
    )

    assert response.status_code == 422
