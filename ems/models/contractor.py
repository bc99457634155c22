"""
Contractor model — a person on a fixed-term contract, not an employee.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import Boolean, Column, Date, Integer, Numeric, String

from ems.db.base import Base
from ems.models.person import PersonMixin


class Contractor(PersonMixin, Base):
    __tablename__ = "contractors"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    contractor_number: str = Column(String(20), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    company: str = Column(String(100), nullable=False)  # type: ignore[assignment]
    specialty: str = Column(String(100), nullable=False)  # type: ignore[assignment]
    contract_start_date: date = Column(Date, nullable=False)  # type: ignore[assignment]
    contract_end_date: date = Column(Date, nullable=False)  # type: ignore[assignment]
    hourly_rate: Decimal = Column(Numeric(18, 2), nullable=False, default=0)  # type: ignore[assignment]
    is_active: bool = Column(Boolean, default=True, server_default="1")  # type: ignore[assignment]
