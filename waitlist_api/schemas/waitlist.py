from datetime import datetime
from typing import Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, field_validator
from pydantic_core import PydanticCustomError

INVALID_EMAIL_MESSAGE = "Please enter a valid email address"


def normalize_email(value: str) -> str:
    """Validate an email address and return its canonical stored form."""
    if not isinstance(value, str):
        raise PydanticCustomError("invalid_email", INVALID_EMAIL_MESSAGE)
    candidate = value.strip()
    try:
        validate_email(candidate, check_deliverability=False)
    except EmailNotValidError:
        raise PydanticCustomError("invalid_email", INVALID_EMAIL_MESSAGE)
    return candidate.lower()


class EmailPayload(BaseModel):
    email: str

    @field_validator("email", mode="before")
    @classmethod
    def validate_email_format(cls, v):
        return normalize_email(v)


class WaitlistJoin(EmailPayload):
    """Request body for joining the waitlist."""


class ResendConfirmationRequest(EmailPayload):
    """Request body for resending a confirmation token."""


class WaitlistEmail(BaseModel):
    id: str
    email: str
    created_at: datetime
    confirmed: bool = False
    confirmation_token: Optional[str] = None
    confirmed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WaitlistJoinResponse(BaseModel):
    message: str
    email: str


class WaitlistCountResponse(BaseModel):
    count: int


class ConfirmResponse(BaseModel):
    message: str
    confirmed: bool


class ResendConfirmationResponse(BaseModel):
    message: str
    # Only populated outside production
    token: Optional[str] = None
