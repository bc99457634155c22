"""
Department model — owns its employees by foreign key only.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Column, DateTime, Integer, Numeric, String
from sqlalchemy.orm import relationship

from ems.db.base import Base


class Department(Base):
    __tablename__ = "departments"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    name: str = Column(String(50), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    description: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    location: str | None = Column(String(20), nullable=True)  # type: ignore[assignment]
    budget: Decimal = Column(Numeric(18, 2), nullable=False, default=0)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    # Restrict-on-delete is enforced by the FK; never null out children.
    employees = relationship(
        "Employee",
        back_populates="department",
        passive_deletes="all",
    )
