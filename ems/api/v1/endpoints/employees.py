"""
Employee endpoints — list/search, create, edit, delete, raises, statistics.

Form endpoints (``/employees/new``, ``/employees/{id}/edit``) hand the
client everything it needs to render the create/edit screens: defaults or
current values plus the department and manager select lists.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query

from ems.api.v1.deps import get_department_repository, get_employee_repository
from ems.core.config import settings
from ems.core.exceptions import (DuplicateRecordError, InvalidArgumentError,
                                 InvalidOperationError)
from ems.domain.rules import give_raise
from ems.mappings import (apply_employee_update, department_options,
                          employee_from_create, employee_to_form,
                          employee_to_read, employees_to_read, manager_options)
from ems.models.employee import Employee, EmployeeKind
from ems.repositories.departments import DepartmentRepository
from ems.repositories.employees import EmployeeRepository
from ems.schemas.common import DeleteResponse
from ems.schemas.employee import (EmployeeCreate, EmployeeForm,
                                  EmployeeFormPage, EmployeeRead,
                                  EmployeeUpdate, RaiseRequest,
                                  StatisticsResponse)

router = APIRouter(tags=["employees"])
logger = logging.getLogger(__name__)


async def _check_references(
    repo: EmployeeRepository,
    departments: DepartmentRepository,
    department_id: int | None,
    manager_id: int | None,
) -> None:
    """Department and manager ids on an input must point at real rows."""
    if department_id is not None and await departments.get_by_id(department_id) is None:
        raise InvalidArgumentError(f"Department with ID {department_id} does not exist")
    if manager_id is not None:
        manager = await repo.get_by_id(manager_id)
        if manager is None:
            raise InvalidArgumentError(f"Manager with ID {manager_id} does not exist")
        if not manager.is_manager:
            raise InvalidOperationError(
                f"Employee {manager.employee_number} is not a manager"
            )


async def _form_page(
    form: EmployeeForm,
    repo: EmployeeRepository,
    departments: DepartmentRepository,
) -> EmployeeFormPage:
    return EmployeeFormPage(
        form=form,
        departments=department_options(await departments.get_all_ordered("name")),
        managers=manager_options(await repo.list_managers()),
    )


async def _read(repo: EmployeeRepository, employee: Employee) -> EmployeeRead:
    managed = await repo.list_managed_by(employee.id) if employee.is_manager else []
    return employee_to_read(employee, managed_count=len(managed))


# ── Listing ─────────────────────────────────────────────────────────
@router.get("/employees", response_model=list[EmployeeRead])
async def list_employees(
    search: str | None = None,
    department: str | None = None,
    min_salary: Decimal | None = None,
    max_salary: Decimal | None = None,
    hired_after: date | None = None,
    active_only: bool = False,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    repo: EmployeeRepository = Depends(get_employee_repository),
) -> list[EmployeeRead]:
    """One filter applies, in order: search, department, salary range, hire date."""
    page = {"skip": skip, "limit": limit}
    if search:
        employees = await repo.search(search, **page)
    elif department:
        employees = await repo.list_by_department(department, **page)
    elif min_salary is not None and max_salary is not None:
        employees = await repo.list_by_salary_range(min_salary, max_salary, **page)
    elif hired_after is not None:
        employees = await repo.list_hired_after(hired_after, **page)
    elif active_only:
        employees = await repo.list_active(**page)
    else:
        employees = await repo.get_all(**page)
    return employees_to_read(employees, managed_counts=await repo.managed_counts())


@router.get("/employees/statistics", response_model=StatisticsResponse)
async def employee_statistics(
    repo: EmployeeRepository = Depends(get_employee_repository),
) -> StatisticsResponse:
    counts = await repo.managed_counts()
    return StatisticsResponse(
        employee_count_by_department=await repo.count_by_department(),
        top_earners=employees_to_read(
            await repo.top_earners(settings.TOP_EARNERS_COUNT), managed_counts=counts
        ),
        eligible_for_promotion=employees_to_read(
            await repo.list_eligible_for_promotion(), managed_counts=counts
        ),
        total_employees=await repo.count(),
    )


@router.get("/employees/by-number/{employee_number}", response_model=EmployeeRead)
async def get_employee_by_number(
    employee_number: str,
    repo: EmployeeRepository = Depends(get_employee_repository),
) -> EmployeeRead:
    return await _read(repo, await repo.get_by_employee_number(employee_number))


# ── Create ──────────────────────────────────────────────────────────
@router.get("/employees/new", response_model=EmployeeFormPage)
async def new_employee_form(
    repo: EmployeeRepository = Depends(get_employee_repository),
    departments: DepartmentRepository = Depends(get_department_repository),
) -> EmployeeFormPage:
    return await _form_page(EmployeeForm(), repo, departments)


@router.post("/employees", response_model=EmployeeRead, status_code=201)
async def create_employee(
    body: EmployeeCreate,
    repo: EmployeeRepository = Depends(get_employee_repository),
    departments: DepartmentRepository = Depends(get_department_repository),
) -> EmployeeRead:
    if not await repo.is_employee_number_unique(body.employee_number):
        raise DuplicateRecordError(f"Employee number '{body.employee_number}' already exists")
    await _check_references(repo, departments, body.department_id, body.manager_id)

    employee = await repo.add(employee_from_create(body))
    logger.info("Created employee %s (%s)", employee.id, employee.employee_number)
    return await _read(repo, employee)


# ── Detail ──────────────────────────────────────────────────────────
@router.get("/employees/{employee_id}", response_model=EmployeeRead)
async def get_employee(
    employee_id: int,
    repo: EmployeeRepository = Depends(get_employee_repository),
) -> EmployeeRead:
    return await _read(repo, await repo.require(employee_id))


# ── Edit ────────────────────────────────────────────────────────────
@router.get("/employees/{employee_id}/edit", response_model=EmployeeFormPage)
async def edit_employee_form(
    employee_id: int,
    repo: EmployeeRepository = Depends(get_employee_repository),
    departments: DepartmentRepository = Depends(get_department_repository),
) -> EmployeeFormPage:
    employee = await repo.require(employee_id)
    return await _form_page(employee_to_form(employee), repo, departments)


@router.put("/employees/{employee_id}", response_model=EmployeeRead)
async def update_employee(
    employee_id: int,
    body: EmployeeUpdate,
    repo: EmployeeRepository = Depends(get_employee_repository),
    departments: DepartmentRepository = Depends(get_department_repository),
) -> EmployeeRead:
    if body.id not in (None, 0, employee_id):
        raise HTTPException(status_code=400, detail="Employee id in body does not match URL")

    employee = await repo.require(employee_id)

    if body.employee_number is not None and not await repo.is_employee_number_unique(
        body.employee_number, exclude_id=employee_id
    ):
        raise DuplicateRecordError(f"Employee number '{body.employee_number}' already exists")
    if body.manager_id == employee_id:
        raise InvalidOperationError("An employee cannot manage themselves")
    await _check_references(repo, departments, body.department_id, body.manager_id)
    if body.kind == EmployeeKind.EMPLOYEE and employee.is_manager:
        if await repo.list_managed_by(employee_id):
            raise InvalidOperationError(
                f"Employee {employee.employee_number} still manages employees; "
                "reassign them before removing the manager role"
            )

    apply_employee_update(body, employee)
    employee = await repo.update(employee)
    logger.info("Updated employee %d", employee_id)
    return await _read(repo, employee)


@router.post("/employees/{employee_id}/raise", response_model=EmployeeRead)
async def raise_salary(
    employee_id: int,
    body: RaiseRequest,
    repo: EmployeeRepository = Depends(get_employee_repository),
) -> EmployeeRead:
    employee = await repo.require(employee_id)
    give_raise(employee, body.percentage)
    employee = await repo.update(employee)
    logger.info("Raised salary of employee %d by %s%%", employee_id, body.percentage)
    return await _read(repo, employee)


# ── Delete ──────────────────────────────────────────────────────────
@router.delete("/employees/{employee_id}", response_model=DeleteResponse)
async def delete_employee(
    employee_id: int,
    repo: EmployeeRepository = Depends(get_employee_repository),
) -> DeleteResponse:
    employee = await repo.delete(employee_id)
    logger.info("Deleted employee %d (%s)", employee_id, employee.full_name)
    return DeleteResponse(success=True, message=f"Employee '{employee.full_name}' deleted")
