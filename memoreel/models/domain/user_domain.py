from datetime import datetime

from pydantic import BaseModel, field_validator

from memoreel.utils.emails import normalize_email


class User(BaseModel):
    """Domain model for a registered user (mirrors the users table)."""

    id: str
    first_name: str = ""
    last_name: str = ""
    email: str
    password: str
    email_verified: bool = False
    reset_password_token: str | None = None
    email_verification_token: str | None = None
    reset_password_expires_at: datetime | None = None
    email_verification_expires_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return normalize_email(value)
