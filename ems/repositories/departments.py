"""
Department repository — departments are always loaded with their employees
so head-count and salary expense can be derived.
"""

from __future__ import annotations

from sqlalchemy import Select, func, select
from sqlalchemy.orm import selectinload

from ems.core.exceptions import EmployeeNotFoundError, InvalidOperationError
from ems.models.department import Department
from ems.models.employee import Employee
from ems.repositories.base import Repository


class DepartmentRepository(Repository[Department]):
    model = Department
    entity_name = "Department"

    def _select(self) -> Select:
        return select(Department).options(selectinload(Department.employees))

    async def get_by_name(self, name: str) -> Department:
        department = await self._scalar(
            self._select().where(func.lower(Department.name) == name.strip().lower())
        )
        if department is None:
            raise EmployeeNotFoundError(f"Department '{name}' was not found")
        return department

    async def is_name_unique(self, name: str) -> bool:
        stmt = select(func.count(Department.id)).where(
            func.lower(Department.name) == name.strip().lower()
        )
        return (await self._scalar(stmt)) == 0

    async def _check_can_delete(self, entity: Department) -> None:
        stmt = select(func.count(Employee.id)).where(Employee.department_id == entity.id)
        staff = await self._scalar(stmt)
        if staff:
            raise InvalidOperationError(
                f"Department '{entity.name}' still has {staff} employee(s)"
            )

    async def get_with_employees(self, department_id: int) -> Department:
        return await self.require(department_id)

    async def list_with_employees(self) -> list[Department]:
        return await self.get_all_ordered("name")
