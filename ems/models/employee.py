"""
Employee model — plain employees and managers share one table.

``kind`` is the variant tag. Manager-only columns (``management_level``,
``bonus``) stay NULL on plain employee rows. The managed-employee set is
not stored: it is every row whose ``manager_id`` points at the manager.
"""

from __future__ import annotations

import enum
from datetime import date
from decimal import Decimal

from sqlalchemy import (Boolean, CheckConstraint, Column, Date, ForeignKey,
                        Index, Integer, Numeric, String)
from sqlalchemy.orm import relationship

from ems.db.base import Base
from ems.models.department import Department  # noqa: F401  (relationship target)
from ems.models.person import PersonMixin


class EmployeeKind(str, enum.Enum):
    EMPLOYEE = "employee"
    MANAGER = "manager"


class Employee(PersonMixin, Base):
    __tablename__ = "employees"
    __table_args__ = (
        CheckConstraint("kind IN ('employee', 'manager')", name="ck_employees_kind"),
        Index("ix_employees_active_department", "is_active", "department_id"),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    kind: str = Column(  # type: ignore[assignment]
        String(20),
        nullable=False,
        default=EmployeeKind.EMPLOYEE.value,
        server_default=EmployeeKind.EMPLOYEE.value,
        index=True,
    )
    employee_number: str = Column(String(20), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    position: str = Column(String(100), nullable=False)  # type: ignore[assignment]
    hire_date: date = Column(Date, nullable=False, default=date.today)  # type: ignore[assignment]
    salary: Decimal = Column(Numeric(18, 2), nullable=False, default=0)  # type: ignore[assignment]
    is_active: bool = Column(Boolean, default=True, server_default="1")  # type: ignore[assignment]
    department_id: int | None = Column(  # type: ignore[assignment]
        Integer,
        ForeignKey("departments.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    manager_id: int | None = Column(  # type: ignore[assignment]
        Integer,
        ForeignKey("employees.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )

    # Manager-only
    management_level: str | None = Column(String(50), nullable=True)  # type: ignore[assignment]
    bonus: Decimal | None = Column(Numeric(18, 2), nullable=True)  # type: ignore[assignment]

    department = relationship("Department", back_populates="employees", lazy="selectin")
    # Self-referential eager loads stop at the first level unless join_depth is set.
    manager = relationship(
        "Employee", remote_side="Employee.id", lazy="selectin", join_depth=1
    )

    @property
    def is_manager(self) -> bool:
        return self.kind == EmployeeKind.MANAGER.value
