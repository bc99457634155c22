"""
Employee repository — the named queries behind listing, search and statistics.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import Select, func, or_, select
from sqlalchemy.orm import selectinload

from ems.core.exceptions import EmployeeNotFoundError, InvalidOperationError
from ems.domain.rules import CENTS, is_eligible_for_promotion
from ems.models.department import Department
from ems.models.employee import Employee, EmployeeKind
from ems.repositories.base import Repository

UNASSIGNED = "Unassigned"


def _like_pattern(term: str) -> str:
    # Escape SQL LIKE metacharacters to prevent wildcard injection
    safe = term.replace("\\", "\\\\").replace("%", r"\%").replace("_", r"\_")
    return f"%{safe}%"


class EmployeeRepository(Repository[Employee]):
    model = Employee
    entity_name = "Employee"

    def _select(self) -> Select:
        return select(Employee).options(selectinload(Employee.manager))

    async def list_active(self, skip: int = 0, limit: int | None = None) -> list[Employee]:
        stmt = self._select().where(Employee.is_active.is_(True)).order_by(Employee.id)
        return await self._scalars(self._page(stmt, skip, limit))

    async def list_by_department(
        self, department: str, skip: int = 0, limit: int | None = None
    ) -> list[Employee]:
        stmt = (
            self._select()
            .join(Department, Employee.department_id == Department.id)
            .where(func.lower(Department.name) == department.strip().lower())
            .order_by(Employee.id)
        )
        return await self._scalars(self._page(stmt, skip, limit))

    async def list_by_salary_range(
        self,
        min_salary: Decimal,
        max_salary: Decimal,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[Employee]:
        stmt = (
            self._select()
            .where(Employee.salary >= min_salary, Employee.salary <= max_salary)
            .order_by(Employee.id)
        )
        return await self._scalars(self._page(stmt, skip, limit))

    async def list_hired_after(
        self, after: date, skip: int = 0, limit: int | None = None
    ) -> list[Employee]:
        stmt = self._select().where(Employee.hire_date > after).order_by(Employee.id)
        return await self._scalars(self._page(stmt, skip, limit))

    async def search(
        self, term: str, skip: int = 0, limit: int | None = None
    ) -> list[Employee]:
        """Case-insensitive substring match over names, email, number and position."""
        pattern = _like_pattern(term.strip())
        stmt = (
            self._select()
            .where(
                or_(
                    Employee.first_name.ilike(pattern, escape="\\"),
                    Employee.last_name.ilike(pattern, escape="\\"),
                    Employee.email.ilike(pattern, escape="\\"),
                    Employee.employee_number.ilike(pattern, escape="\\"),
                    Employee.position.ilike(pattern, escape="\\"),
                )
            )
            .order_by(Employee.id)
        )
        return await self._scalars(self._page(stmt, skip, limit))

    async def count_by_department(self) -> dict[str, int]:
        """Active head-count per department name."""
        stmt = (
            select(Department.name, func.count(Employee.id))
            .select_from(Employee)
            .outerjoin(Department, Employee.department_id == Department.id)
            .where(Employee.is_active.is_(True))
            .group_by(Department.name)
            .order_by(Department.name)
        )
        result = await self._execute(stmt)
        return {name or UNASSIGNED: int(count) for name, count in result.all()}

    async def average_salary_by_department(self, department: str) -> Decimal:
        """Mean monthly salary of the department's active staff; zero when it has none."""
        stmt = (
            select(func.avg(Employee.salary))
            .join(Department, Employee.department_id == Department.id)
            .where(
                func.lower(Department.name) == department.strip().lower(),
                Employee.is_active.is_(True),
            )
        )
        average = await self._scalar(stmt)
        if average is None:
            return Decimal("0")
        return Decimal(str(average)).quantize(CENTS)

    async def top_earners(self, count: int) -> list[Employee]:
        stmt = (
            self._select()
            .where(Employee.is_active.is_(True))
            .order_by(Employee.salary.desc(), Employee.id)
            .limit(count)
        )
        return await self._scalars(stmt)

    async def get_by_employee_number(self, employee_number: str) -> Employee:
        employee = await self._scalar(
            self._select().where(Employee.employee_number == employee_number)
        )
        if employee is None:
            raise EmployeeNotFoundError(
                f"Employee with number {employee_number} was not found"
            )
        return employee

    async def is_employee_number_unique(
        self, employee_number: str, exclude_id: int | None = None
    ) -> bool:
        stmt = select(func.count(Employee.id)).where(
            Employee.employee_number == employee_number
        )
        if exclude_id is not None:
            stmt = stmt.where(Employee.id != exclude_id)
        return (await self._scalar(stmt)) == 0

    async def list_eligible_for_promotion(self, today: date | None = None) -> list[Employee]:
        return [e for e in await self.list_active() if is_eligible_for_promotion(e, today)]

    async def list_managers(self) -> list[Employee]:
        return await self._scalars(
            self._select()
            .where(Employee.kind == EmployeeKind.MANAGER.value)
            .order_by(Employee.id)
        )

    async def managed_counts(self) -> dict[int, int]:
        """Team size per manager id."""
        stmt = (
            select(Employee.manager_id, func.count(Employee.id))
            .where(Employee.manager_id.is_not(None))
            .group_by(Employee.manager_id)
        )
        result = await self._execute(stmt)
        return {manager_id: int(count) for manager_id, count in result.all()}

    async def list_managed_by(self, manager_id: int) -> list[Employee]:
        return await self._scalars(
            self._select().where(Employee.manager_id == manager_id).order_by(Employee.id)
        )

    async def _check_can_delete(self, entity: Employee) -> None:
        managed = await self.list_managed_by(entity.id)
        if managed:
            raise InvalidOperationError(
                f"Employee {entity.employee_number} still manages {len(managed)} "
                "employee(s); reassign them first"
            )
