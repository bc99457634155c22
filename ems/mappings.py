"""
Entity <-> DTO translation.

Derived display fields (full name, age, annual salary, department and
manager names) are filled in here, at projection time, from the rules in
:mod:`ems.domain.rules`.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from ems.domain import rules
from ems.models.contractor import Contractor
from ems.models.department import Department
from ems.models.employee import Employee, EmployeeKind
from ems.schemas.contractor import ContractorCreate, ContractorRead
from ems.schemas.department import DepartmentCreate, DepartmentRead
from ems.schemas.employee import (EmployeeCreate, EmployeeForm, EmployeeRead,
                                  EmployeeUpdate, SelectOption)

CONTRACTOR_KIND = "contractor"


# ── Employee / Manager ──────────────────────────────────────────────
def employee_to_read(
    employee: Employee, today: date | None = None, managed_count: int = 0
) -> EmployeeRead:
    annual = rules.annual_salary(employee)
    bonus = compensation = None
    if employee.is_manager:
        bonus = float(employee.bonus or 0)
        compensation = float(rules.total_compensation(employee))
        # Managers report their bonus as part of the annual figure.
        annual = rules.total_compensation(employee)

    return EmployeeRead(
        id=employee.id,
        kind=employee.kind,
        employee_number=employee.employee_number,
        display_name=rules.employee_display_name(employee),
        first_name=employee.first_name,
        last_name=employee.last_name,
        full_name=employee.full_name,
        email=employee.email,
        phone_number=employee.phone_number,
        date_of_birth=employee.date_of_birth,
        age=rules.calculate_age(employee.date_of_birth, today),
        position=employee.position,
        hire_date=employee.hire_date,
        salary=float(employee.salary),
        annual_salary=float(annual),
        is_active=bool(employee.is_active),
        department_id=employee.department_id,
        department_name=employee.department.name if employee.department else "",
        manager_id=employee.manager_id,
        manager_name=employee.manager.full_name if employee.manager else "",
        management_level=employee.management_level,
        bonus=bonus,
        total_compensation=compensation,
        is_eligible_for_promotion=rules.is_eligible_for_promotion(employee, today),
        role_description=rules.employee_role_description(employee, managed_count),
        created_at=employee.created_at,
    )


def employees_to_read(
    employees: list[Employee],
    today: date | None = None,
    managed_counts: dict[int, int] | None = None,
) -> list[EmployeeRead]:
    counts = managed_counts or {}
    return [employee_to_read(e, today, counts.get(e.id, 0)) for e in employees]


def employee_from_create(body: EmployeeCreate) -> Employee:
    data = body.model_dump()
    data["kind"] = body.kind.value
    employee = Employee(**data)
    employee.created_at = datetime.now(timezone.utc)
    if employee.is_manager and employee.bonus is None:
        employee.bonus = 0
    return employee


def apply_employee_update(body: EmployeeUpdate, employee: Employee) -> Employee:
    """Copy the fields the client actually sent onto ``employee``."""
    changes = body.model_dump(exclude_unset=True, exclude={"id"})
    if "kind" in changes and changes["kind"] is not None:
        changes["kind"] = EmployeeKind(changes["kind"]).value
    for field, value in changes.items():
        setattr(employee, field, value)

    if employee.is_manager:
        if employee.bonus is None:
            employee.bonus = 0
    else:
        employee.management_level = None
        employee.bonus = None
    return employee


def employee_to_form(employee: Employee) -> EmployeeForm:
    return EmployeeForm(
        id=employee.id,
        kind=employee.kind,
        employee_number=employee.employee_number,
        first_name=employee.first_name,
        last_name=employee.last_name,
        email=employee.email,
        phone_number=employee.phone_number,
        date_of_birth=employee.date_of_birth,
        position=employee.position,
        hire_date=employee.hire_date,
        salary=float(employee.salary),
        is_active=bool(employee.is_active),
        department_id=employee.department_id,
        manager_id=employee.manager_id,
        management_level=employee.management_level,
        bonus=float(employee.bonus) if employee.bonus is not None else None,
    )


def department_options(departments: list[Department]) -> list[SelectOption]:
    return [SelectOption(value=d.id, label=d.name) for d in departments]


def manager_options(managers: list[Employee]) -> list[SelectOption]:
    return [SelectOption(value=m.id, label=rules.employee_display_name(m)) for m in managers]


# ── Contractor ──────────────────────────────────────────────────────
def contractor_to_read(contractor: Contractor, today: date | None = None) -> ContractorRead:
    return ContractorRead(
        id=contractor.id,
        contractor_number=contractor.contractor_number,
        display_name=rules.contractor_display_name(contractor),
        first_name=contractor.first_name,
        last_name=contractor.last_name,
        full_name=contractor.full_name,
        email=contractor.email,
        phone_number=contractor.phone_number,
        date_of_birth=contractor.date_of_birth,
        age=rules.calculate_age(contractor.date_of_birth, today),
        company=contractor.company,
        specialty=contractor.specialty,
        contract_start_date=contractor.contract_start_date,
        contract_end_date=contractor.contract_end_date,
        hourly_rate=float(contractor.hourly_rate),
        is_active=bool(contractor.is_active),
        is_contract_valid=rules.is_contract_valid(contractor, today),
        remaining_contract_days=rules.remaining_contract_days(contractor, today),
        role_description=rules.contractor_role_description(contractor),
        created_at=contractor.created_at,
    )


def contractor_to_employee_read(
    contractor: Contractor, today: date | None = None
) -> EmployeeRead:
    """Show a contractor in the employee listing shape."""
    monthly = rules.contractor_monthly_rate(contractor)
    return EmployeeRead(
        id=contractor.id,
        kind=CONTRACTOR_KIND,
        employee_number=contractor.contractor_number,
        display_name=rules.contractor_display_name(contractor),
        first_name=contractor.first_name,
        last_name=contractor.last_name,
        full_name=contractor.full_name,
        email=contractor.email,
        phone_number=contractor.phone_number,
        date_of_birth=contractor.date_of_birth,
        age=rules.calculate_age(contractor.date_of_birth, today),
        position=contractor.specialty,
        hire_date=contractor.contract_start_date,
        salary=float(monthly),
        annual_salary=float(monthly * 12),
        is_active=rules.is_contract_valid(contractor, today),
        department_name=contractor.company,
        role_description=rules.contractor_role_description(contractor),
        created_at=contractor.created_at,
    )


def contractor_from_create(body: ContractorCreate) -> Contractor:
    contractor = Contractor(**body.model_dump())
    contractor.created_at = datetime.now(timezone.utc)
    return contractor


# ── Department ──────────────────────────────────────────────────────
def department_to_read(department: Department) -> DepartmentRead:
    employee_count, salary_expense = rules.department_summary(department)
    return DepartmentRead(
        id=department.id,
        name=department.name,
        description=department.description,
        location=department.location,
        budget=float(department.budget),
        created_at=department.created_at,
        employee_count=employee_count,
        total_salary_expense=float(salary_expense),
    )


def department_from_create(body: DepartmentCreate) -> Department:
    department = Department(**body.model_dump())
    department.created_at = datetime.now(timezone.utc)
    return department
