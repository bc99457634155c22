"""
Pre-commit business-rule gate.

Hooked on ``Session.before_flush`` so it sees every pending insert and
update of the unit of work at once. All violations are collected first;
if there is any, the whole flush is refused with a single
:class:`InvalidEmployeeDataError` and nothing reaches the database.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy import event
from sqlalchemy.orm import Session

from ems.core.exceptions import InvalidEmployeeDataError
from ems.domain.rules import MIN_HIRE_AGE, add_years
from ems.models.contractor import Contractor
from ems.models.employee import Employee

logger = logging.getLogger(__name__)


def employee_violations(employee: Employee, today: date | None = None) -> list[str]:
    today = today or date.today()
    label = f"Employee {employee.employee_number or '<new>'}"
    problems: list[str] = []

    if employee.salary is not None and Decimal(str(employee.salary)) < 0:
        problems.append(f"{label}: salary cannot be negative")
    if employee.hire_date is not None and employee.hire_date > today:
        problems.append(f"{label}: hire date cannot be in the future")
    if employee.date_of_birth is not None and employee.date_of_birth > add_years(
        today, -MIN_HIRE_AGE
    ):
        problems.append(f"{label}: employee must be at least {MIN_HIRE_AGE} years old")
    if employee.is_manager and employee.bonus is not None and Decimal(str(employee.bonus)) < 0:
        problems.append(f"{label}: bonus cannot be negative")
    return problems


def contractor_violations(contractor: Contractor) -> list[str]:
    label = f"Contractor {contractor.contractor_number or '<new>'}"
    problems: list[str] = []

    if contractor.hourly_rate is not None and Decimal(str(contractor.hourly_rate)) < 0:
        problems.append(f"{label}: hourly rate cannot be negative")
    if (
        contractor.contract_start_date is not None
        and contractor.contract_end_date is not None
        and contractor.contract_end_date < contractor.contract_start_date
    ):
        problems.append(f"{label}: contract end date cannot precede its start date")
    return problems


def pending_violations(session: Session) -> list[str]:
    """Rule violations across every new or modified row in ``session``."""
    today = date.today()
    problems: list[str] = []
    for obj in list(session.new) + list(session.dirty):
        if isinstance(obj, Employee):
            problems.extend(employee_violations(obj, today))
        elif isinstance(obj, Contractor):
            problems.extend(contractor_violations(obj))
    return problems


@event.listens_for(Session, "before_flush")
def _enforce_business_rules(session: Session, _flush_context, _instances) -> None:
    problems = pending_violations(session)
    if problems:
        logger.warning("Save rejected, %d rule violation(s): %s", len(problems), problems)
        raise InvalidEmployeeDataError("; ".join(problems), errors=problems)
