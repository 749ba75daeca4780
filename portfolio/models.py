"""Data models for contact form submissions."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

REQUIRED_FIELDS = ("firstName", "lastName", "email", "message")


class SubmissionStatus(str, Enum):
    """Feedback state of a contact form."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"


class ContactFormData(BaseModel):
    """A contact form submission as sent over the wire."""

    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    email: str
    phone: Optional[str] = None
    message: str
    received_at: datetime = Field(default_factory=datetime.now, exclude=True)

    @field_validator("phone", mode="before")
    @classmethod
    def phone_as_text(cls, value):
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


def missing_fields(data: dict) -> list[str]:
    """Return the required fields that are absent, not strings, or empty."""
    missing = []
    for name in REQUIRED_FIELDS:
        value = data.get(name)
        if not isinstance(value, str) or not value:
            missing.append(name)
    return missing


class ContactSuccess(BaseModel):
    success: bool = True
    message: str


class ContactError(BaseModel):
    error: str
    fields: list[str] = Field(default_factory=list)


class ExperienceSummary(BaseModel):
    years: int
    total: float
    text: str
