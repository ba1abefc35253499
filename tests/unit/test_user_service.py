from datetime import UTC, datetime, timedelta

import pytest

from memoreel.models.domain.errors import UserNotFoundError
from memoreel.models.domain.video_domain import Video
from memoreel.services.reel_service import ReelService
from memoreel.services.user_service import EmailVerificationExpiredError, UserService


@pytest.fixture
def service(fake_users, fake_reels):
    return UserService(users=fake_users, reels=fake_reels)


@pytest.mark.asyncio
async def test_verify_email_claims_unowned_reels(service, fake_users, fake_reels, make_user, make_reel):
    user = await fake_users.create_user(
        make_user(
            email="owner@example.com",
            email_verification_token="verify-me",
            email_verification_expires_at=datetime.now(UTC) + timedelta(hours=1),
        )
    )
    for _ in range(3):
        await fake_reels.create_reel(make_reel(user_id=None, email="owner@example.com"))
    for _ in range(5):
        await fake_reels.create_reel(make_reel(user_id=None))

    verified, claimed = await service.verify_email("verify-me")

    assert claimed == 3
    assert verified.email_verified is True
    assert verified.email_verification_token is None
    stored = await fake_users.get_user_by_id(user.id)
    assert stored.email_verified is True
    owned = [r for r in fake_reels.reels.values() if r.user_id == user.id]
    assert len(owned) == 3


@pytest.mark.asyncio
async def test_verify_email_claims_reels_whatever_the_case(
    service, fake_users, fake_reels, fake_videos, make_user
):
    user = await fake_users.create_user(
        make_user(email=" Owner@Example.COM", email_verification_token="verify-me")
    )
    await fake_videos.create_video(
        Video(id="video-1", key="uploads/video-1.mp4", file_format="mp4", size_mb=3)
    )
    reels = ReelService(reels=fake_reels, videos=fake_videos, users=fake_users)
    reel = await reels.create_reel(
        video_id="video-1", email="owner@EXAMPLE.com", recipient_emails=[]
    )

    verified, claimed = await service.verify_email("verify-me")

    assert verified.email == "owner@example.com"
    assert claimed == 1
    assert (await fake_reels.get_reel_by_id(reel.id)).user_id == user.id


@pytest.mark.asyncio
async def test_verify_email_leaves_owned_reels_alone(service, fake_users, fake_reels, make_user, make_reel):
    await fake_users.create_user(
        make_user(email="owner@example.com", email_verification_token="verify-me")
    )
    await fake_reels.create_reel(make_reel(user_id="another-user", email="owner@example.com"))

    _, claimed = await service.verify_email("verify-me")

    assert claimed == 0


@pytest.mark.asyncio
async def test_verify_email_expired_token(service, fake_users, make_user):
    await fake_users.create_user(
        make_user(
            email_verification_token="stale",
            email_verification_expires_at=datetime.now(UTC) - timedelta(minutes=1),
        )
    )

    with pytest.raises(EmailVerificationExpiredError):
        await service.verify_email("stale")


@pytest.mark.asyncio
async def test_verify_email_unknown_token(service):
    with pytest.raises(UserNotFoundError):
        await service.verify_email("missing")


@pytest.mark.asyncio
async def test_update_profile(service, fake_users, make_user):
    user = await fake_users.create_user(make_user(first_name="Ada", last_name="Byron"))

    updated = await service.update_profile(user.id, last_name="Lovelace")

    assert updated.first_name == "Ada"
    assert updated.last_name == "Lovelace"
    stored = await service.get_profile(user.id)
    assert stored.last_name == "Lovelace"
