"""
Business rules for employees, managers, contractors and departments.

Everything here is pure: no session, no I/O. Functions that depend on the
calendar take an optional ``today`` so callers (and tests) can pin it.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from ems.core.exceptions import InvalidArgumentError, InvalidOperationError

if TYPE_CHECKING:
    from ems.models.contractor import Contractor
    from ems.models.department import Department
    from ems.models.employee import Employee

CENTS = Decimal("0.01")

MIN_HIRE_AGE = 16
PROMOTION_MIN_YEARS = 2
MAX_RAISE_PERCENT = Decimal("50")
MAX_CONTRACT_EXTENSION_YEARS = 2
HOURS_PER_MONTH = 160

# Expense ceiling per management tier; anything else falls back to the default.
EXPENSE_LIMITS: dict[str, Decimal] = {
    "Senior": Decimal("10000"),
    "Mid": Decimal("5000"),
    "Junior": Decimal("2000"),
}
DEFAULT_EXPENSE_LIMIT = Decimal("1000")


def _money(value: object) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def add_years(d: date, years: int) -> date:
    """Shift ``d`` by whole years; Feb 29 lands on Feb 28 in common years."""
    try:
        return d.replace(year=d.year + years)
    except ValueError:
        return d.replace(year=d.year + years, day=28)


# ── Person ──────────────────────────────────────────────────────────
def years_between(start: date, today: date | None = None) -> int:
    """Whole calendar years from ``start`` to ``today``.

    One is subtracted when the anniversary of ``start`` has not yet come
    round this year, so the count increments on the anniversary itself.
    """
    today = today or date.today()
    years = today.year - start.year
    if (today.month, today.day) < (start.month, start.day):
        years -= 1
    return years


def calculate_age(date_of_birth: date, today: date | None = None) -> int:
    return years_between(date_of_birth, today)


# ── Employee ────────────────────────────────────────────────────────
def annual_salary(employee: Employee) -> Decimal:
    return _money(employee.salary) * 12


def total_compensation(employee: Employee) -> Decimal:
    return annual_salary(employee) + _money(employee.bonus)


def is_eligible_for_promotion(employee: Employee, today: date | None = None) -> bool:
    if not employee.is_active:
        return False
    return years_between(employee.hire_date, today) >= PROMOTION_MIN_YEARS


def give_raise(employee: Employee, percentage: Decimal | float | int) -> Decimal:
    """Raise the monthly salary by ``percentage`` percent and return it."""
    pct = _money(percentage)
    if pct <= 0:
        raise InvalidArgumentError("Raise percentage must be positive")
    if pct > MAX_RAISE_PERCENT:
        raise InvalidOperationError(f"Raise percentage cannot exceed {MAX_RAISE_PERCENT}%")

    raised = _money(employee.salary) * (1 + pct / 100)
    employee.salary = raised.quantize(CENTS, rounding=ROUND_HALF_UP)
    return employee.salary


def employee_display_name(employee: Employee) -> str:
    name = f"{employee.employee_number}: {employee.first_name} {employee.last_name}"
    if employee.is_manager:
        name += " (Manager)"
    return name


def employee_role_description(employee: Employee, managed_count: int = 0) -> str:
    dept = employee.department.name if employee.department is not None else "No Department"
    if employee.is_manager:
        level = f"{employee.management_level} " if employee.management_level else ""
        return f"{level}Manager overseeing {managed_count} employees in {dept} department"
    return f"Employee working as {employee.position} in {dept} department"


# ── Manager ─────────────────────────────────────────────────────────
def can_approve_expense(manager: Employee, amount: Decimal | float | int) -> bool:
    limit = EXPENSE_LIMITS.get(manager.management_level or "", DEFAULT_EXPENSE_LIMIT)
    return _money(amount) <= limit


def add_managed_employee(
    manager: Employee,
    employee: Employee | None,
    managed: list[Employee],
) -> list[Employee]:
    """Put ``employee`` under ``manager``.

    ``managed`` is the manager's current team (the rows whose
    ``manager_id`` is the manager). It is extended in place and returned.
    """
    if employee is None:
        raise InvalidArgumentError("Employee to manage must be provided")
    if not manager.is_manager:
        raise InvalidOperationError(
            f"Employee {manager.employee_number} is not a manager"
        )
    if employee is manager or (employee.id is not None and employee.id == manager.id):
        raise InvalidOperationError("A manager cannot manage themselves")
    if any(m is employee or (m.id is not None and m.id == employee.id) for m in managed):
        raise InvalidOperationError("Employee is already managed by this manager")

    employee.manager_id = manager.id
    employee.manager = manager
    managed.append(employee)
    return managed


# ── Contractor ──────────────────────────────────────────────────────
def is_contract_valid(contractor: Contractor, today: date | None = None) -> bool:
    today = today or date.today()
    return (
        contractor.contract_start_date <= today <= contractor.contract_end_date
        and bool(contractor.is_active)
    )


def remaining_contract_days(contractor: Contractor, today: date | None = None) -> int:
    today = today or date.today()
    if not is_contract_valid(contractor, today):
        return 0
    return (contractor.contract_end_date - today).days


def extend_contract(
    contractor: Contractor, new_end_date: date, today: date | None = None
) -> date:
    today = today or date.today()
    if new_end_date <= contractor.contract_end_date:
        raise InvalidArgumentError("New end date must be after current end date")
    if new_end_date > add_years(today, MAX_CONTRACT_EXTENSION_YEARS):
        raise InvalidOperationError(
            f"Contract cannot be extended more than {MAX_CONTRACT_EXTENSION_YEARS} "
            "years from today"
        )
    contractor.contract_end_date = new_end_date
    return new_end_date


def contract_value(contractor: Contractor, estimated_hours: int) -> Decimal:
    return _money(contractor.hourly_rate) * estimated_hours


def contractor_monthly_rate(contractor: Contractor) -> Decimal:
    return _money(contractor.hourly_rate) * HOURS_PER_MONTH


def contractor_display_name(contractor: Contractor) -> str:
    return (
        f"{contractor.contractor_number}: {contractor.first_name} "
        f"{contractor.last_name} (Contractor)"
    )


def contractor_role_description(contractor: Contractor) -> str:
    return f"Contractor from {contractor.company} specializing in {contractor.specialty}"


# ── Department ──────────────────────────────────────────────────────
def department_employee_count(employees: Iterable[Employee]) -> int:
    return sum(1 for e in employees if e.is_active)


def department_salary_expense(employees: Iterable[Employee]) -> Decimal:
    return sum((annual_salary(e) for e in employees if e.is_active), Decimal("0"))


def department_summary(department: Department) -> tuple[int, Decimal]:
    employees = list(department.employees or [])
    return department_employee_count(employees), department_salary_expense(employees)
