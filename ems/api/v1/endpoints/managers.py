"""
Manager endpoints — teams (managed employees) and expense approval.

A manager's team is not stored as a collection; it is every employee whose
``manager_id`` points at the manager.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, Query

from ems.api.v1.deps import get_employee_repository
from ems.core.exceptions import InvalidOperationError
from ems.domain.rules import add_managed_employee, can_approve_expense
from ems.mappings import employees_to_read
from ems.models.employee import Employee
from ems.repositories.employees import EmployeeRepository
from ems.schemas.employee import (AssignEmployeeRequest, EmployeeRead,
                                  ExpenseApprovalResponse)

router = APIRouter(prefix="/managers", tags=["managers"])
logger = logging.getLogger(__name__)


async def _require_manager(repo: EmployeeRepository, manager_id: int) -> Employee:
    manager = await repo.require(manager_id)
    if not manager.is_manager:
        raise InvalidOperationError(f"Employee {manager.employee_number} is not a manager")
    return manager


@router.get("", response_model=list[EmployeeRead])
async def list_managers(
    repo: EmployeeRepository = Depends(get_employee_repository),
) -> list[EmployeeRead]:
    return employees_to_read(await repo.list_managers(), managed_counts=await repo.managed_counts())


@router.get("/{manager_id}/employees", response_model=list[EmployeeRead])
async def list_team(
    manager_id: int,
    repo: EmployeeRepository = Depends(get_employee_repository),
) -> list[EmployeeRead]:
    await _require_manager(repo, manager_id)
    return employees_to_read(await repo.list_managed_by(manager_id))


@router.post("/{manager_id}/employees", response_model=list[EmployeeRead])
async def assign_to_team(
    manager_id: int,
    body: AssignEmployeeRequest,
    repo: EmployeeRepository = Depends(get_employee_repository),
) -> list[EmployeeRead]:
    """Put an existing employee under this manager; returns the whole team."""
    manager = await _require_manager(repo, manager_id)
    employee = await repo.require(body.employee_id)
    team = await repo.list_managed_by(manager_id)

    add_managed_employee(manager, employee, team)
    await repo.update(employee)
    logger.info("Employee %d now managed by %d", employee.id, manager_id)
    return employees_to_read(team)


@router.get("/{manager_id}/expense-approval", response_model=ExpenseApprovalResponse)
async def expense_approval(
    manager_id: int,
    amount: Decimal = Query(..., ge=0),
    repo: EmployeeRepository = Depends(get_employee_repository),
) -> ExpenseApprovalResponse:
    manager = await _require_manager(repo, manager_id)
    return ExpenseApprovalResponse(
        manager_id=manager.id,
        management_level=manager.management_level,
        amount=float(amount),
        approved=can_approve_expense(manager, amount),
    )
