"""
Contractor endpoints — CRUD, contract extension and the employee-shaped view.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from ems.api.v1.deps import get_contractor_repository
from ems.core.config import settings
from ems.core.exceptions import DuplicateRecordError
from ems.domain.rules import extend_contract
from ems.mappings import (contractor_from_create, contractor_to_employee_read,
                          contractor_to_read)
from ems.repositories.contractors import ContractorRepository
from ems.schemas.common import DeleteResponse
from ems.schemas.contractor import (ContractExtendRequest, ContractorCreate,
                                    ContractorRead)
from ems.schemas.employee import EmployeeRead

router = APIRouter(prefix="/contractors", tags=["contractors"])
logger = logging.getLogger(__name__)


@router.get("", response_model=list[ContractorRead])
async def list_contractors(
    valid_only: bool = False,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    repo: ContractorRepository = Depends(get_contractor_repository),
) -> list[ContractorRead]:
    if valid_only:
        contractors = await repo.list_valid(skip=skip, limit=limit)
    else:
        contractors = await repo.get_all(skip=skip, limit=limit)
    return [contractor_to_read(c) for c in contractors]


@router.post("", response_model=ContractorRead, status_code=201)
async def create_contractor(
    body: ContractorCreate,
    repo: ContractorRepository = Depends(get_contractor_repository),
) -> ContractorRead:
    if not await repo.is_contractor_number_unique(body.contractor_number):
        raise DuplicateRecordError(
            f"Contractor number '{body.contractor_number}' already exists"
        )
    contractor = await repo.add(contractor_from_create(body))
    logger.info("Created contractor %d (%s)", contractor.id, contractor.contractor_number)
    return contractor_to_read(contractor)


@router.get("/{contractor_id}", response_model=ContractorRead)
async def get_contractor(
    contractor_id: int,
    repo: ContractorRepository = Depends(get_contractor_repository),
) -> ContractorRead:
    return contractor_to_read(await repo.require(contractor_id))


@router.get("/{contractor_id}/as-employee", response_model=EmployeeRead)
async def get_contractor_as_employee(
    contractor_id: int,
    repo: ContractorRepository = Depends(get_contractor_repository),
) -> EmployeeRead:
    return contractor_to_employee_read(await repo.require(contractor_id))


@router.post("/{contractor_id}/extend", response_model=ContractorRead)
async def extend_contractor(
    contractor_id: int,
    body: ContractExtendRequest,
    repo: ContractorRepository = Depends(get_contractor_repository),
) -> ContractorRead:
    contractor = await repo.require(contractor_id)
    extend_contract(contractor, body.new_end_date)
    contractor = await repo.update(contractor)
    logger.info("Extended contract %d to %s", contractor_id, body.new_end_date)
    return contractor_to_read(contractor)


@router.delete("/{contractor_id}", response_model=DeleteResponse)
async def delete_contractor(
    contractor_id: int,
    repo: ContractorRepository = Depends(get_contractor_repository),
) -> DeleteResponse:
    contractor = await repo.delete(contractor_id)
    return DeleteResponse(
        success=True, message=f"Contractor '{contractor.full_name}' deleted"
    )
