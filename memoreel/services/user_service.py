"""
User service for profile management and email verification.
"""

from datetime import UTC, datetime

from memoreel.infrastructure.observability.logging import get_logger
from memoreel.models.domain.user_domain import User
from memoreel.repositories.interfaces import ReelRepository, UserRepository

logger = get_logger(__name__)


class UserServiceError(Exception):
    """Custom exception for user workflow failures."""

    def __init__(self, message: str, user_id: str | None = None):
        super().__init__(message)
        self.user_id = user_id


class EmailVerificationExpiredError(UserServiceError):
    pass


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class UserService:
    def __init__(self, users: UserRepository, reels: ReelRepository):
        self.users = users
        self.reels = reels

    async def get_profile(self, user_id: str) -> User:
        return await self.users.get_user_by_id(user_id)

    async def update_profile(
        self, user_id: str, *, first_name: str | None = None, last_name: str | None = None
    ) -> User:
        user = await self.users.get_user_by_id(user_id)

        if first_name is not None:
            user.first_name = first_name
        if last_name is not None:
            user.last_name = last_name

        await self.users.update_user(user)
        logger.info("User profile updated", user_id=user_id)
        return user

    async def verify_email(self, token: str) -> tuple[User, int]:
        """
        Mark the user's email as verified and claim the reels sent from it.

        Returns:
            The updated user and how many reels were assigned to them

        Raises:
            UserNotFoundError: no user holds this token
            EmailVerificationExpiredError: the token is past its expiry
        """
        user = await self.users.get_user_by_email_verification_token(token)

        expires_at = user.email_verification_expires_at
        if expires_at is not None and _as_utc(expires_at) < datetime.now(UTC):
            raise EmailVerificationExpiredError("Verification token expired", user_id=user.id)

        user.email_verified = True
        user.email_verification_token = None
        user.email_verification_expires_at = None
        await self.users.update_user(user)

        claimed = await self.reels.assign_reels_to_user_by_email(user.email, user.id)

        logger.info("User email verified", user_id=user.id, reels_claimed=claimed)
        return user, claimed
