"""
Contractor repository.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import func, select

from ems.core.exceptions import EmployeeNotFoundError
from ems.models.contractor import Contractor
from ems.repositories.base import Repository


class ContractorRepository(Repository[Contractor]):
    model = Contractor
    entity_name = "Contractor"

    async def get_by_contractor_number(self, contractor_number: str) -> Contractor:
        contractor = await self._scalar(
            self._select().where(Contractor.contractor_number == contractor_number)
        )
        if contractor is None:
            raise EmployeeNotFoundError(
                f"Contractor with number {contractor_number} was not found"
            )
        return contractor

    async def is_contractor_number_unique(
        self, contractor_number: str, exclude_id: int | None = None
    ) -> bool:
        stmt = select(func.count(Contractor.id)).where(
            Contractor.contractor_number == contractor_number
        )
        if exclude_id is not None:
            stmt = stmt.where(Contractor.id != exclude_id)
        return (await self._scalar(stmt)) == 0

    async def list_active(self) -> list[Contractor]:
        return await self._scalars(
            self._select().where(Contractor.is_active.is_(True)).order_by(Contractor.id)
        )

    async def list_valid(
        self, today: date | None = None, skip: int = 0, limit: int | None = None
    ) -> list[Contractor]:
        """Active contractors whose contract window contains ``today``."""
        today = today or date.today()
        stmt = (
            self._select()
            .where(
                Contractor.is_active.is_(True),
                Contractor.contract_start_date <= today,
                Contractor.contract_end_date >= today,
            )
            .order_by(Contractor.id)
        )
        return await self._scalars(self._page(stmt, skip, limit))
