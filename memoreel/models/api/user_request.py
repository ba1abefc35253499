from pydantic import BaseModel, Field


class UpdateProfileRequest(BaseModel):
    """Request body for PATCH /me. Omitted fields are left unchanged."""

    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)


class VerifyEmailRequest(BaseModel):
    token: str = Field(..., min_length=1)
