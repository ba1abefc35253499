from datetime import datetime

from pydantic import BaseModel

from memoreel.models.domain.user_domain import User


class UserProfileResponse(BaseModel):
    """Public view of a user; password and tokens stay server-side."""

    id: str
    first_name: str
    last_name: str
    email: str
    email_verified: bool
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_domain(cls, user: User) -> "UserProfileResponse":
        return cls(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            email_verified=user.email_verified,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class VerifyEmailResponse(BaseModel):
    success: bool
    user_id: str
    reels_claimed: int
