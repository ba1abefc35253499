from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from memoreel.utils.emails import normalize_email


class ReelDeliveryStatus(str, Enum):
    """Where a reel is in the confirm-then-deliver workflow."""

    UNCONFIRMED = "unconfirmed"
    SCHEDULED = "scheduled"
    FAILED = "failed"
    DELIVERED = "delivered"

    @classmethod
    def is_valid(cls, value) -> bool:
        if isinstance(value, cls):
            return True
        return isinstance(value, str) and value in cls._value2member_map_


class Recipient(BaseModel):
    """An email address entitled to view a reel. Stored inside the reel row."""

    uid: str
    email: str
    created_at: datetime
    deleted_at: datetime | None = None


class ReelFilter(BaseModel):
    """Optional listing filter; an unknown delivery_status means no filter."""

    delivery_status: str | None = None


class Reel(BaseModel):
    """Domain model for a reel (one video plus delivery metadata and recipients)."""

    id: str
    # Set once the reel is confirmed by, or claimed by, a verified user
    user_id: str | None = None
    video_id: str
    email: str
    title: str = ""
    description: str = ""
    private: bool = True
    recipients: list[Recipient] = Field(default_factory=list)
    email_confirmation_token: str
    delivery_status: ReelDeliveryStatus = ReelDeliveryStatus.UNCONFIRMED
    delivery_date: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return normalize_email(value)

    def find_recipient(self, recipient_id: str) -> Recipient | None:
        for recipient in self.recipients:
            if recipient.uid == recipient_id:
                return recipient
        return None
