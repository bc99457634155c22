"""
V1 API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from ems.api.v1.endpoints import contractors, departments, employees, health, managers

api_router = APIRouter()

# Employees: list/search, CRUD, raises, statistics
api_router.include_router(employees.router)

# Managers: teams and expense approval
api_router.include_router(managers.router)

# Contractors and departments
api_router.include_router(contractors.router)
api_router.include_router(departments.router)

# Health
api_router.include_router(health.router)
