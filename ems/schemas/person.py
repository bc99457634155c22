"""Field validation shared by every person-shaped input (employees, contractors)."""

from __future__ import annotations

import re
from datetime import date
from typing import ClassVar

from pydantic import BaseModel, field_validator, model_validator

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_PHONE_RE = re.compile(r"^\+?[0-9 ().-]{7,20}$")
_NUMBER_RE = re.compile(r"^[A-Za-z0-9_-]{1,20}$")


def clean_name(v: str, label: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{label} is required")
    if not 2 <= len(v) <= 50:
        raise ValueError(f"{label} must be between 2 and 50 characters")
    return v


def clean_email(v: str) -> str:
    v = v.strip().lower()
    if not v:
        raise ValueError("Email is required")
    if len(v) > 100 or not _EMAIL_RE.match(v):
        raise ValueError("Invalid email address")
    return v


def clean_phone(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    if not v:
        return None
    if not _PHONE_RE.match(v) or sum(c.isdigit() for c in v) < 7:
        raise ValueError("Invalid phone number")
    return v


def clean_number(v: str, label: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{label} is required")
    if not _NUMBER_RE.match(v):
        raise ValueError(f"{label} must be 1-20 letters, digits, '-' or '_'")
    return v


def clean_text(v: str, label: str, max_length: int) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{label} is required")
    if len(v) > max_length:
        raise ValueError(f"{label} must not exceed {max_length} characters")
    return v


class PersonIn(BaseModel):
    first_name: str
    last_name: str
    email: str
    phone_number: str | None = None
    date_of_birth: date

    @field_validator("first_name")
    @classmethod
    def _first_name(cls, v: str) -> str:
        return clean_name(v, "First name")

    @field_validator("last_name")
    @classmethod
    def _last_name(cls, v: str) -> str:
        return clean_name(v, "Last name")

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return clean_email(v)

    @field_validator("phone_number")
    @classmethod
    def _phone(cls, v: str | None) -> str | None:
        return clean_phone(v)


class PersonPatch(BaseModel):
    # Fields that may be omitted from a patch but never sent as null.
    NOT_NULL: ClassVar[frozenset[str]] = frozenset(
        {"first_name", "last_name", "email", "date_of_birth"}
    )

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone_number: str | None = None
    date_of_birth: date | None = None

    @field_validator("first_name")
    @classmethod
    def _first_name(cls, v: str | None) -> str | None:
        return None if v is None else clean_name(v, "First name")

    @field_validator("last_name")
    @classmethod
    def _last_name(cls, v: str | None) -> str | None:
        return None if v is None else clean_name(v, "Last name")

    @field_validator("email")
    @classmethod
    def _email(cls, v: str | None) -> str | None:
        return None if v is None else clean_email(v)

    @field_validator("phone_number")
    @classmethod
    def _phone(cls, v: str | None) -> str | None:
        return clean_phone(v)

    @model_validator(mode="after")
    def _no_nulls(self) -> PersonPatch:
        nulls = sorted(f for f in self.model_fields_set & self.NOT_NULL if getattr(self, f) is None)
        if nulls:
            raise ValueError(f"{', '.join(nulls)} cannot be null")
        return self
