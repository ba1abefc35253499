from datetime import UTC, datetime

import pytest

from memoreel.auth.verify import auth_dependency
from memoreel.models.domain.errors import (
    DuplicateEmailError,
    RecipientNotFoundError,
    ReelNotDeletedError,
    ReelNotFoundError,
    ReelNotUpdatedError,
    UserNotFoundError,
    UserNotUpdatedError,
    VideoNotFoundError,
)
from memoreel.models.domain.pagination import Pageable, PaginationData, paginate
from memoreel.models.domain.reel_domain import Recipient, Reel, ReelDeliveryStatus, ReelFilter
from memoreel.models.domain.user_domain import User
from memoreel.models.domain.video_domain import Video
from memoreel.utils.emails import normalize_email
from memoreel.utils.ids import new_id


@pytest.fixture
def auth_override():
    def _override():
        return {"sub": "user-123"}

    return _override


@pytest.fixture
def apply_auth_override(auth_override):
    def _apply(app):
        app.dependency_overrides[auth_dependency] = auth_override

    return _apply


def _now() -> datetime:
    return datetime.now(UTC)


class FakeUserRepository:
    def __init__(self):
        self.users: dict[str, User] = {}

    def _find(self, **criteria) -> User:
        for user in self.users.values():
            if user.deleted_at is None and all(
                getattr(user, k) == v for k, v in criteria.items()
            ):
                return user.model_copy(deep=True)
        raise UserNotFoundError()

    async def get_user_by_id(self, user_id: str) -> User:
        return self._find(id=user_id)

    async def get_user_by_email(self, email: str) -> User:
        return self._find(email=normalize_email(email))

    async def get_user_by_reset_password_token(self, token: str) -> User:
        return self._find(reset_password_token=token)

    async def get_user_by_email_verification_token(self, token: str) -> User:
        return self._find(email_verification_token=token)

    async def create_user(self, user: User) -> User:
        if any(u.email == user.email for u in self.users.values()):
            raise DuplicateEmailError()
        user.created_at = user.updated_at = _now()
        self.users[user.id] = user.model_copy(deep=True)
        return user

    async def update_user(self, user: User) -> None:
        stored = self.users.get(user.id)
        if stored is None or stored.deleted_at is not None:
            raise UserNotUpdatedError()
        user.updated_at = _now()
        self.users[user.id] = user.model_copy(deep=True)

    async def delete_user(self, user_id: str) -> None:
        self.users[user_id].deleted_at = _now()


class FakeVideoRepository:
    def __init__(self):
        self.videos: dict[str, Video] = {}

    async def get_video_by_id(self, video_id: str) -> Video:
        video = self.videos.get(video_id)
        if video is None or video.deleted_at is not None:
            raise VideoNotFoundError()
        return video.model_copy(deep=True)

    async def create_video(self, video: Video) -> Video:
        video.created_at = video.updated_at = _now()
        self.videos[video.id] = video.model_copy(deep=True)
        return video

    async def update_video(self, video: Video) -> None:
        self.videos[video.id] = video.model_copy(deep=True)

    async def delete_video(self, video_id: str) -> None:
        self.videos[video_id].deleted_at = _now()


class FakeReelRepository:
    """In-memory ReelRepository; recipients are soft-deleted like the real one."""

    def __init__(self):
        self.reels: dict[str, Reel] = {}

    def _visible(self, reel: Reel) -> Reel:
        copy = reel.model_copy(deep=True)
        copy.recipients = [r for r in copy.recipients if r.deleted_at is None]
        return copy

    async def get_reel_by_id(self, reel_id: str) -> Reel:
        reel = self.reels.get(reel_id)
        if reel is None or reel.deleted_at is not None:
            raise ReelNotFoundError()
        return self._visible(reel)

    async def get_reel_by_email_confirmation_token(self, token: str) -> Reel:
        for reel in self.reels.values():
            if reel.email_confirmation_token == token and reel.deleted_at is None:
                return self._visible(reel)
        raise ReelNotFoundError()

    async def get_reels_paged(
        self, user_id: str, reel_filter: ReelFilter, pageable: Pageable
    ) -> tuple[list[Reel], PaginationData]:
        matches = [
            self._visible(reel)
            for reel in sorted(self.reels.values(), key=lambda r: r.id, reverse=True)
            if reel.user_id == user_id
            and reel.deleted_at is None
            and reel.id < pageable.cursor
            and (
                not ReelDeliveryStatus.is_valid(reel_filter.delivery_status)
                or reel.delivery_status == reel_filter.delivery_status
            )
        ]
        return paginate(matches[: pageable.limit()], pageable, key=lambda r: r.id)

    async def create_reel(self, reel: Reel) -> Reel:
        reel.created_at = reel.updated_at = _now()
        self.reels[reel.id] = reel.model_copy(deep=True)
        return reel

    async def update_reel(self, reel: Reel) -> None:
        stored = self.reels.get(reel.id)
        if stored is None or stored.deleted_at is not None:
            raise ReelNotUpdatedError()
        recipients = stored.recipients
        self.reels[reel.id] = reel.model_copy(deep=True, update={"recipients": recipients})

    async def add_recipients(self, reel: Reel, recipients: list[Recipient]) -> None:
        self.reels[reel.id].recipients.extend(r.model_copy() for r in recipients)
        reel.recipients.extend(recipients)

    async def delete_recipient(self, reel: Reel, recipient_id: str) -> None:
        if reel.find_recipient(recipient_id) is None:
            raise RecipientNotFoundError()
        for recipient in self.reels[reel.id].recipients:
            if recipient.uid == recipient_id:
                recipient.deleted_at = _now()
        reel.recipients = [r for r in reel.recipients if r.uid != recipient_id]

    async def assign_reels_to_user_by_email(self, email: str, user_id: str) -> int:
        email = normalize_email(email)
        claimed = 0
        for reel in self.reels.values():
            if reel.email == email and reel.user_id is None and reel.deleted_at is None:
                reel.user_id = user_id
                claimed += 1
        return claimed

    async def delete_reel(self, reel_id: str) -> None:
        reel = self.reels.get(reel_id)
        if reel is None or reel.deleted_at is not None:
            raise ReelNotDeletedError()
        reel.deleted_at = _now()


@pytest.fixture
def fake_users():
    return FakeUserRepository()


@pytest.fixture
def fake_videos():
    return FakeVideoRepository()


@pytest.fixture
def fake_reels():
    return FakeReelRepository()


@pytest.fixture
def make_recipient():
    def _make(email: str | None = None, **overrides) -> Recipient:
        data = {
            "uid": new_id(),
            "email": email or f"recipient_{new_id().lower()}@example.com",
            "created_at": _now(),
        }
        data.update(overrides)
        return Recipient(**data)

    return _make


@pytest.fixture
def make_reel(make_recipient):
    def _make(**overrides) -> Reel:
        data = {
            "id": new_id(),
            "user_id": "user-123",
            "video_id": new_id(),
            "email": f"{new_id().lower()}@memoreel.com",
            "title": "Test Reel",
            "recipients": [make_recipient(), make_recipient()],
            "email_confirmation_token": new_id(),
            "delivery_status": ReelDeliveryStatus.UNCONFIRMED,
        }
        data.update(overrides)
        return Reel(**data)

    return _make


@pytest.fixture
def make_user():
    def _make(**overrides) -> User:
        data = {
            "id": new_id(),
            "first_name": "test",
            "last_name": "user",
            "email": f"{new_id().lower()}@example.com",
            "password": "demopassword",
        }
        data.update(overrides)
        return User(**data)

    return _make
