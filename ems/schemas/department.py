"""Pydantic schemas for Department CRUD."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, field_validator


class DepartmentCreate(BaseModel):
    name: str
    description: str | None = None
    location: str | None = None
    budget: Decimal = Decimal("0")

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Department name is required")
        if len(v) > 50:
            raise ValueError("Department name must not exceed 50 characters")
        return v

    @field_validator("description")
    @classmethod
    def _description(cls, v: str | None) -> str | None:
        if v is not None and len(v) > 500:
            raise ValueError("Description must not exceed 500 characters")
        return v

    @field_validator("location")
    @classmethod
    def _location(cls, v: str | None) -> str | None:
        if v is not None and len(v) > 20:
            raise ValueError("Location must not exceed 20 characters")
        return v

    @field_validator("budget")
    @classmethod
    def _budget(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Budget cannot be negative")
        return v


class DepartmentRead(BaseModel):
    id: int
    name: str
    description: str | None
    location: str | None
    budget: float
    created_at: datetime | None
    employee_count: int
    total_salary_expense: float


class AverageSalaryResponse(BaseModel):
    department: str
    average_salary: float
