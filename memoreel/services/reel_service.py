"""
Reel service.

Composes the reel, video and user repositories into the reel workflows:
create (unconfirmed) -> confirm by emailed token (scheduled) -> delivery.
Owner-scoped operations treat someone else's reel as not found.
"""

from datetime import UTC, datetime

from memoreel.infrastructure.observability.logging import get_logger
from memoreel.models.domain.errors import ReelNotFoundError, UserNotFoundError
from memoreel.models.domain.pagination import Pageable, PaginationData
from memoreel.models.domain.reel_domain import Recipient, Reel, ReelDeliveryStatus, ReelFilter
from memoreel.repositories.interfaces import ReelRepository, UserRepository, VideoRepository
from memoreel.utils.emails import normalize_email
from memoreel.utils.ids import new_id, new_token

logger = get_logger(__name__)


class ReelServiceError(Exception):
    """Custom exception for reel workflow failures."""

    def __init__(self, message: str, reel_id: str | None = None):
        super().__init__(message)
        self.reel_id = reel_id


class ReelAlreadyConfirmedError(ReelServiceError):
    pass


def _unique_emails(emails: list[str], existing: set[str] | None = None) -> list[str]:
    seen = set(existing or ())
    unique = []
    for email in emails:
        normalized = normalize_email(email)
        if normalized and normalized not in seen:
            seen.add(normalized)
            unique.append(normalized)
    return unique


def _new_recipient(email: str) -> Recipient:
    return Recipient(uid=new_id(), email=email, created_at=datetime.now(UTC))


class ReelService:
    def __init__(self, reels: ReelRepository, videos: VideoRepository, users: UserRepository):
        self.reels = reels
        self.videos = videos
        self.users = users

    async def create_reel(
        self,
        *,
        video_id: str,
        email: str,
        recipient_emails: list[str],
        title: str = "",
        description: str = "",
        private: bool = True,
        delivery_date: datetime | None = None,
    ) -> Reel:
        """
        Create an unconfirmed reel for an uploaded video.

        The reel starts unowned whoever the sender claims to be. It gets an
        owner on confirm_reel or through assign_reels_to_user_by_email.

        Raises:
            VideoNotFoundError: video_id does not exist
        """
        await self.videos.get_video_by_id(video_id)

        reel = Reel(
            id=new_id(),
            user_id=None,
            video_id=video_id,
            email=email,
            title=title,
            description=description,
            private=private,
            recipients=[_new_recipient(e) for e in _unique_emails(recipient_emails)],
            email_confirmation_token=new_token(),
            delivery_status=ReelDeliveryStatus.UNCONFIRMED,
            delivery_date=delivery_date,
        )

        reel = await self.reels.create_reel(reel)
        logger.info("Reel created", reel_id=reel.id, recipients=len(reel.recipients))
        return reel

    async def confirm_reel(self, token: str) -> Reel:
        """
        Move an unconfirmed reel to scheduled using its email confirmation token.

        The token only reaches the sender's inbox, so confirming is the point
        where the reel can join a verified account registered under that email.
        """
        reel = await self.reels.get_reel_by_email_confirmation_token(token)

        if reel.delivery_status != ReelDeliveryStatus.UNCONFIRMED:
            raise ReelAlreadyConfirmedError("Reel is already confirmed", reel_id=reel.id)

        reel.delivery_status = ReelDeliveryStatus.SCHEDULED
        if reel.user_id is None:
            reel.user_id = await self._verified_user_id(reel.email)
        await self.reels.update_reel(reel)

        logger.info("Reel confirmed", reel_id=reel.id, owned=reel.user_id is not None)
        return reel

    async def _verified_user_id(self, email: str) -> str | None:
        try:
            user = await self.users.get_user_by_email(email)
        except UserNotFoundError:
            return None
        return user.id if user.email_verified else None

    async def get_reel(self, user_id: str, reel_id: str) -> Reel:
        reel = await self.reels.get_reel_by_id(reel_id)
        if reel.user_id != user_id:
            raise ReelNotFoundError(reel_id=reel_id)
        return reel

    async def list_reels(
        self, user_id: str, reel_filter: ReelFilter, pageable: Pageable
    ) -> tuple[list[Reel], PaginationData]:
        return await self.reels.get_reels_paged(user_id, reel_filter, pageable)

    async def update_reel(
        self,
        user_id: str,
        reel_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
        private: bool | None = None,
        delivery_date: datetime | None = None,
    ) -> Reel:
        reel = await self.get_reel(user_id, reel_id)

        if title is not None:
            reel.title = title
        if description is not None:
            reel.description = description
        if private is not None:
            reel.private = private
        if delivery_date is not None:
            reel.delivery_date = delivery_date

        await self.reels.update_reel(reel)
        return reel

    async def delete_reel(self, user_id: str, reel_id: str) -> None:
        await self.get_reel(user_id, reel_id)
        await self.reels.delete_reel(reel_id)

    async def add_recipients(self, user_id: str, reel_id: str, emails: list[str]) -> Reel:
        """Add recipients, skipping addresses the reel already has."""
        reel = await self.get_reel(user_id, reel_id)

        existing = {normalize_email(recipient.email) for recipient in reel.recipients}
        new_recipients = [_new_recipient(e) for e in _unique_emails(emails, existing)]

        if new_recipients:
            await self.reels.add_recipients(reel, new_recipients)

        return reel

    async def delete_recipient(self, user_id: str, reel_id: str, recipient_id: str) -> Reel:
        reel = await self.get_reel(user_id, reel_id)
        await self.reels.delete_recipient(reel, recipient_id)
        return reel
