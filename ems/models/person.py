"""
Person columns shared by employees and contractors.

Not a mapped class: both tables carry the columns directly, the variant
of a row is told apart by its table (contractors) or by the ``kind``
discriminator (employees / managers).

Columns are left unannotated here; declarative copies mixin columns onto
each subclass and would otherwise try to interpret the annotations.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, String


class PersonMixin:
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100), nullable=False)
    phone_number = Column(String(20), nullable=True)
    date_of_birth = Column(Date, nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
