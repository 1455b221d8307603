"""Pydantic models for the identify request/response contract."""

from __future__ import annotations

import re
from typing import Final, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

EMAIL_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MISSING_FIELDS_MESSAGE: Final[str] = "At least one of email or phoneNumber is required."
INVALID_EMAIL_MESSAGE: Final[str] = "Invalid email format"


class IdentifyBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class IdentifyPayload(IdentifyBaseModel):
    """Request body: ``{"email"?: str, "phoneNumber"?: str | number}``."""

    email: str | None = None
    phone_number: str | None = Field(default=None, alias="phoneNumber")

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str | None) -> str | None:
        if value is not None and not EMAIL_PATTERN.match(value):
            raise ValueError(INVALID_EMAIL_MESSAGE)
        return value

    @field_validator("phone_number", mode="before")
    @classmethod
    def _coerce_phone_number(cls, value: object) -> object:
        if isinstance(value, bool):
            return value
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        if isinstance(value, int | float):
            return str(value)
        return value

    @model_validator(mode="after")
    def _require_one_field(self) -> Self:
        if not self.email and not self.phone_number:
            raise ValueError(MISSING_FIELDS_MESSAGE)
        return self


class ContactView(IdentifyBaseModel):
    # "Contatct" is part of the published contract
    primary_contact_id: int = Field(alias="primaryContatctId")
    emails: list[str] = Field(default_factory=list)
    phone_numbers: list[str] = Field(default_factory=list, alias="phoneNumbers")
    secondary_contact_ids: list[int] = Field(default_factory=list, alias="secondaryContactIds")


class IdentifyResponse(IdentifyBaseModel):
    contact: ContactView


class ErrorDetail(IdentifyBaseModel):
    path: str
    message: str


class ErrorResponse(IdentifyBaseModel):
    error: str
    details: list[ErrorDetail] | None = None
