"""
Repository capabilities.

Services depend on these protocols rather than on the PostgreSQL classes so
tests can hand them in-memory doubles.
"""

from typing import Protocol

from memoreel.models.domain.pagination import Pageable, PaginationData
from memoreel.models.domain.reel_domain import Recipient, Reel, ReelFilter
from memoreel.models.domain.user_domain import User
from memoreel.models.domain.video_domain import Video


class UserRepository(Protocol):
    async def get_user_by_id(self, user_id: str) -> User: ...

    async def get_user_by_email(self, email: str) -> User: ...

    async def get_user_by_reset_password_token(self, token: str) -> User: ...

    async def get_user_by_email_verification_token(self, token: str) -> User: ...

    async def create_user(self, user: User) -> User: ...

    async def update_user(self, user: User) -> None: ...

    async def delete_user(self, user_id: str) -> None: ...


class VideoRepository(Protocol):
    async def get_video_by_id(self, video_id: str) -> Video: ...

    async def create_video(self, video: Video) -> Video: ...

    async def update_video(self, video: Video) -> None: ...

    async def delete_video(self, video_id: str) -> None: ...


class ReelRepository(Protocol):
    async def get_reel_by_id(self, reel_id: str) -> Reel: ...

    async def get_reel_by_email_confirmation_token(self, token: str) -> Reel: ...

    async def get_reels_paged(
        self, user_id: str, reel_filter: ReelFilter, pageable: Pageable
    ) -> tuple[list[Reel], PaginationData]: ...

    async def create_reel(self, reel: Reel) -> Reel: ...

    async def update_reel(self, reel: Reel) -> None: ...

    async def add_recipients(self, reel: Reel, recipients: list[Recipient]) -> None: ...

    async def delete_recipient(self, reel: Reel, recipient_id: str) -> None: ...

    async def assign_reels_to_user_by_email(self, email: str, user_id: str) -> int: ...

    async def delete_reel(self, reel_id: str) -> None: ...
