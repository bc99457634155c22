"""
Reference data inserted on first startup.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ems.models.department import Department

logger = logging.getLogger(__name__)

DEFAULT_DEPARTMENTS = (
    {
        "name": "IT",
        "description": "Information Technology Department",
        "location": "Floor 3",
        "budget": Decimal("500000"),
    },
    {
        "name": "HR",
        "description": "Human Resources Department",
        "location": "Floor 2",
        "budget": Decimal("200000"),
    },
    {
        "name": "Finance",
        "description": "Finance Department",
        "location": "Floor 4",
        "budget": Decimal("300000"),
    },
)


async def seed_departments(session: AsyncSession) -> int:
    """Insert any default department that is missing. Returns how many were added."""
    result = await session.execute(select(Department.name))
    existing = set(result.scalars().all())

    added = 0
    for data in DEFAULT_DEPARTMENTS:
        if data["name"] in existing:
            continue
        session.add(Department(**data))
        added += 1

    if added:
        await session.commit()
        logger.info("Seeded %d default department(s)", added)
    return added
