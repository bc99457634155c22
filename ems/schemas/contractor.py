"""Pydantic schemas for Contractor CRUD."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, field_validator, model_validator

from ems.schemas.person import PersonIn, clean_number, clean_text


class ContractorCreate(PersonIn):
    contractor_number: str
    company: str
    specialty: str
    contract_start_date: date
    contract_end_date: date
    hourly_rate: Decimal
    is_active: bool = True

    @field_validator("contractor_number")
    @classmethod
    def _number(cls, v: str) -> str:
        return clean_number(v, "Contractor number")

    @field_validator("company")
    @classmethod
    def _company(cls, v: str) -> str:
        return clean_text(v, "Company", 100)

    @field_validator("specialty")
    @classmethod
    def _specialty(cls, v: str) -> str:
        return clean_text(v, "Specialty", 100)

    @field_validator("hourly_rate")
    @classmethod
    def _rate(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Hourly rate cannot be negative")
        return v

    @model_validator(mode="after")
    def _window(self) -> ContractorCreate:
        if self.contract_end_date < self.contract_start_date:
            raise ValueError("Contract end date cannot precede its start date")
        return self


class ContractExtendRequest(BaseModel):
    new_end_date: date


class ContractorRead(BaseModel):
    id: int
    contractor_number: str
    display_name: str
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone_number: str | None
    date_of_birth: date
    age: int
    company: str
    specialty: str
    contract_start_date: date
    contract_end_date: date
    hourly_rate: float
    is_active: bool
    is_contract_valid: bool
    remaining_contract_days: int
    role_description: str
    created_at: datetime | None = None
