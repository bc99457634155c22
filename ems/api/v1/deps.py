"""
FastAPI dependencies — database session and repositories.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ems.db.session import async_session_factory
from ems.repositories.contractors import ContractorRepository
from ems.repositories.departments import DepartmentRepository
from ems.repositories.employees import EmployeeRepository


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Repositories ────────────────────────────────────────────────────
def get_employee_repository(db: AsyncSession = Depends(get_db)) -> EmployeeRepository:
    return EmployeeRepository(db)


def get_department_repository(db: AsyncSession = Depends(get_db)) -> DepartmentRepository:
    return DepartmentRepository(db)


def get_contractor_repository(db: AsyncSession = Depends(get_db)) -> ContractorRepository:
    return ContractorRepository(db)
