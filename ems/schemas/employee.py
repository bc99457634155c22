"""Pydantic schemas for Employee / Manager input, display and forms."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar

from pydantic import BaseModel, Field, field_validator, model_validator

from ems.domain.rules import MIN_HIRE_AGE, calculate_age
from ems.models.employee import EmployeeKind
from ems.schemas.person import PersonIn, PersonPatch, clean_number, clean_text

MAX_SALARY = Decimal("1000000")


def _check_salary(v: Decimal | None) -> Decimal | None:
    if v is not None and not Decimal("0") <= v <= MAX_SALARY:
        raise ValueError("Salary must be between 0 and 1,000,000")
    return v


# ── Input ───────────────────────────────────────────────────────────
class EmployeeCreate(PersonIn):
    kind: EmployeeKind = EmployeeKind.EMPLOYEE
    employee_number: str
    position: str
    hire_date: date = Field(default_factory=date.today)
    salary: Decimal
    is_active: bool = True
    department_id: int | None = None
    manager_id: int | None = None
    management_level: str | None = None
    bonus: Decimal | None = None

    @field_validator("employee_number")
    @classmethod
    def _number(cls, v: str) -> str:
        return clean_number(v, "Employee number")

    @field_validator("position")
    @classmethod
    def _position(cls, v: str) -> str:
        return clean_text(v, "Position", 100)

    @field_validator("salary")
    @classmethod
    def _salary(cls, v: Decimal) -> Decimal:
        return _check_salary(v)  # type: ignore[return-value]

    @field_validator("management_level")
    @classmethod
    def _level(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return clean_text(v, "Management level", 50)

    @model_validator(mode="after")
    def _cross_field(self) -> EmployeeCreate:
        if calculate_age(self.date_of_birth, self.hire_date) < MIN_HIRE_AGE:
            raise ValueError(f"Employee must be at least {MIN_HIRE_AGE} years old at hire date")
        if self.kind == EmployeeKind.EMPLOYEE and (
            self.management_level is not None or self.bonus is not None
        ):
            raise ValueError("Management level and bonus apply to managers only")
        return self


class EmployeeUpdate(PersonPatch):
    NOT_NULL: ClassVar[frozenset[str]] = PersonPatch.NOT_NULL | {
        "kind", "employee_number", "position", "hire_date", "salary", "is_active",
    }

    id: int | None = None
    kind: EmployeeKind | None = None
    employee_number: str | None = None
    position: str | None = None
    hire_date: date | None = None
    salary: Decimal | None = None
    is_active: bool | None = None
    department_id: int | None = None
    manager_id: int | None = None
    management_level: str | None = None
    bonus: Decimal | None = None

    @field_validator("employee_number")
    @classmethod
    def _number(cls, v: str | None) -> str | None:
        return None if v is None else clean_number(v, "Employee number")

    @field_validator("position")
    @classmethod
    def _position(cls, v: str | None) -> str | None:
        return None if v is None else clean_text(v, "Position", 100)

    @field_validator("salary")
    @classmethod
    def _salary(cls, v: Decimal | None) -> Decimal | None:
        return _check_salary(v)


class RaiseRequest(BaseModel):
    percentage: Decimal


class AssignEmployeeRequest(BaseModel):
    employee_id: int


# ── Display ─────────────────────────────────────────────────────────
class EmployeeRead(BaseModel):
    """Display shape for employees, managers and (re-labelled) contractors."""

    id: int
    kind: str
    employee_number: str
    display_name: str
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone_number: str | None
    date_of_birth: date
    age: int
    position: str
    hire_date: date
    salary: float
    annual_salary: float
    is_active: bool
    department_id: int | None = None
    department_name: str = ""
    manager_id: int | None = None
    manager_name: str = ""
    management_level: str | None = None
    bonus: float | None = None
    total_compensation: float | None = None
    is_eligible_for_promotion: bool = False
    role_description: str = ""
    created_at: datetime | None = None


class ExpenseApprovalResponse(BaseModel):
    manager_id: int
    management_level: str | None
    amount: float
    approved: bool


class StatisticsResponse(BaseModel):
    employee_count_by_department: dict[str, int] = Field(default_factory=dict)
    top_earners: list[EmployeeRead] = Field(default_factory=list)
    eligible_for_promotion: list[EmployeeRead] = Field(default_factory=list)
    total_employees: int = 0


# ── Forms ───────────────────────────────────────────────────────────
class SelectOption(BaseModel):
    value: int
    label: str


class EmployeeForm(BaseModel):
    """Editable fields of an employee, pre-filled for the edit form."""

    id: int | None = None
    kind: str = EmployeeKind.EMPLOYEE.value
    employee_number: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone_number: str | None = None
    date_of_birth: date | None = None
    position: str = ""
    hire_date: date = Field(default_factory=date.today)
    salary: float = 0.0
    is_active: bool = True
    department_id: int | None = None
    manager_id: int | None = None
    management_level: str | None = None
    bonus: float | None = None


class EmployeeFormPage(BaseModel):
    form: EmployeeForm
    departments: list[SelectOption]
    managers: list[SelectOption]
