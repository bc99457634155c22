"""
Department endpoints — CRUD plus the average-salary aggregate.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from ems.api.v1.deps import get_department_repository, get_employee_repository
from ems.core.exceptions import DuplicateRecordError
from ems.mappings import department_from_create, department_to_read
from ems.repositories.departments import DepartmentRepository
from ems.repositories.employees import EmployeeRepository
from ems.schemas.common import DeleteResponse
from ems.schemas.department import (AverageSalaryResponse, DepartmentCreate,
                                    DepartmentRead)

router = APIRouter(prefix="/departments", tags=["departments"])
logger = logging.getLogger(__name__)


@router.get("", response_model=list[DepartmentRead])
async def list_departments(
    repo: DepartmentRepository = Depends(get_department_repository),
) -> list[DepartmentRead]:
    return [department_to_read(d) for d in await repo.list_with_employees()]


@router.post("", response_model=DepartmentRead, status_code=201)
async def create_department(
    body: DepartmentCreate,
    repo: DepartmentRepository = Depends(get_department_repository),
) -> DepartmentRead:
    if not await repo.is_name_unique(body.name):
        raise DuplicateRecordError(f"Department '{body.name}' already exists")
    department = await repo.add(department_from_create(body))
    logger.info("Created department %d (%s)", department.id, department.name)
    return department_to_read(department)


@router.get("/{department_id}", response_model=DepartmentRead)
async def get_department(
    department_id: int,
    repo: DepartmentRepository = Depends(get_department_repository),
) -> DepartmentRead:
    return department_to_read(await repo.get_with_employees(department_id))


@router.get("/{name}/average-salary", response_model=AverageSalaryResponse)
async def average_salary(
    name: str,
    departments: DepartmentRepository = Depends(get_department_repository),
    employees: EmployeeRepository = Depends(get_employee_repository),
) -> AverageSalaryResponse:
    department = await departments.get_by_name(name)
    average = await employees.average_salary_by_department(department.name)
    return AverageSalaryResponse(department=department.name, average_salary=float(average))


@router.delete("/{department_id}", response_model=DeleteResponse)
async def delete_department(
    department_id: int,
    repo: DepartmentRepository = Depends(get_department_repository),
) -> DeleteResponse:
    department = await repo.delete(department_id)
    return DeleteResponse(success=True, message=f"Department '{department.name}' deleted")
