"""Tests for the repository query surface against a real (in-memory) database."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from conftest import make_contractor, make_employee, make_manager
from ems.core.exceptions import (DuplicateRecordError, EmployeeNotFoundError,
                                 InvalidArgumentError, InvalidOperationError)
from ems.mappings import employees_to_read
from ems.models.contractor import Contractor
from ems.models.employee import Employee
from ems.repositories.contractors import ContractorRepository
from ems.repositories.departments import DepartmentRepository
from ems.repositories.employees import EmployeeRepository


@pytest.fixture
async def staff(db_session: AsyncSession, departments: dict[str, int]) -> dict:
    """Four employees and a manager spread over IT and HR; one inactive."""
    repo = EmployeeRepository(db_session)
    boss = await repo.add(
        make_manager(department_id=departments["IT"], hire_date=date(2015, 3, 1))
    )
    rows = [
        make_employee(
            employee_number="EMP001", first_name="Alice", last_name="Smith",
            email="alice@corp.io", salary=Decimal("4000"), department_id=departments["IT"],
            manager_id=boss.id, hire_date=date(2019, 1, 1),
        ),
        make_employee(
            employee_number="EMP002", first_name="Bob", last_name="Stone",
            email="bob@corp.io", salary=Decimal("6000"), department_id=departments["IT"],
            hire_date=date(2023, 7, 1), position="Data_Analyst",
        ),
        make_employee(
            employee_number="EMP003", first_name="Carol", last_name="Jones",
            email="carol@corp.io", salary=Decimal("3000"), department_id=departments["HR"],
            hire_date=date(2021, 5, 1),
        ),
        make_employee(
            employee_number="EMP004", first_name="Dave", last_name="Brown",
            email="dave@corp.io", salary=Decimal("8000"), is_active=False,
            department_id=departments["HR"], hire_date=date(2010, 1, 1),
        ),
        make_employee(
            employee_number="EMP005", first_name="Erin", last_name="White",
            email="erin@corp.io", salary=Decimal("2000"), hire_date=date(2024, 1, 1),
        ),
    ]
    added = {e.employee_number: await repo.add(e) for e in rows}
    added["boss"] = boss
    return added


# ── Generic CRUD ────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_get_by_id_missing_is_none(db_session: AsyncSession):
    repo = EmployeeRepository(db_session)
    assert await repo.get_by_id(999) is None
    with pytest.raises(EmployeeNotFoundError):
        await repo.require(999)


@pytest.mark.asyncio
async def test_delete_missing_raises(db_session: AsyncSession):
    with pytest.raises(EmployeeNotFoundError):
        await EmployeeRepository(db_session).delete(999)


@pytest.mark.asyncio
async def test_get_all_ordered(db_session: AsyncSession, staff):
    repo = EmployeeRepository(db_session)
    by_salary = await repo.get_all_ordered("salary", ascending=False)
    assert [e.employee_number for e in by_salary][:2] == ["MGR001", "EMP004"]


@pytest.mark.asyncio
async def test_order_by_unknown_field_rejected(db_session: AsyncSession):
    with pytest.raises(InvalidArgumentError):
        await EmployeeRepository(db_session).get_all_ordered("shoe_size")


@pytest.mark.asyncio
async def test_find_by(db_session: AsyncSession, staff, departments):
    repo = EmployeeRepository(db_session)
    found = await repo.find_by(department_id=departments["HR"], is_active=True)
    assert [e.employee_number for e in found] == ["EMP003"]

    with pytest.raises(InvalidArgumentError):
        await repo.find_by(nickname="Al")


@pytest.mark.asyncio
async def test_duplicate_number_caught_at_commit(db_session: AsyncSession, staff):
    repo = EmployeeRepository(db_session)
    with pytest.raises(DuplicateRecordError):
        await repo.add(make_employee(employee_number="EMP001", email="x@corp.io"))
    assert await repo.count() == 6


# ── Employee queries ────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_list_active(db_session: AsyncSession, staff):
    active = await EmployeeRepository(db_session).list_active()
    assert "EMP004" not in {e.employee_number for e in active}
    assert len(active) == 5


@pytest.mark.asyncio
async def test_list_by_department_case_insensitive(db_session: AsyncSession, staff):
    found = await EmployeeRepository(db_session).list_by_department("it")
    assert {e.employee_number for e in found} == {"MGR001", "EMP001", "EMP002"}


@pytest.mark.asyncio
async def test_salary_range_inclusive(db_session: AsyncSession, staff):
    found = await EmployeeRepository(db_session).list_by_salary_range(
        Decimal("3000"), Decimal("6000")
    )
    assert {e.employee_number for e in found} == {"EMP001", "EMP002", "EMP003"}


@pytest.mark.asyncio
async def test_hired_after_is_strict(db_session: AsyncSession, staff):
    found = await EmployeeRepository(db_session).list_hired_after(date(2023, 7, 1))
    assert [e.employee_number for e in found] == ["EMP005"]


@pytest.mark.asyncio
async def test_search_matches_several_columns(db_session: AsyncSession, staff):
    repo = EmployeeRepository(db_session)
    assert {e.employee_number for e in await repo.search("ST")} == {"EMP002"}
    assert {e.employee_number for e in await repo.search("carol@")} == {"EMP003"}
    assert {e.employee_number for e in await repo.search("emp00")} == {
        "EMP001", "EMP002", "EMP003", "EMP004", "EMP005",
    }


@pytest.mark.asyncio
async def test_search_escapes_like_wildcards(db_session: AsyncSession, staff):
    repo = EmployeeRepository(db_session)
    assert [e.employee_number for e in await repo.search("_")] == ["EMP002"]
    assert await repo.search("%") == []


@pytest.mark.asyncio
async def test_count_by_department(db_session: AsyncSession, staff):
    counts = await EmployeeRepository(db_session).count_by_department()
    assert counts == {"IT": 3, "HR": 1, "Unassigned": 1}


@pytest.mark.asyncio
async def test_average_salary_active_only(db_session: AsyncSession, staff):
    repo = EmployeeRepository(db_session)
    assert await repo.average_salary_by_department("HR") == Decimal("3000.00")
    assert await repo.average_salary_by_department("IT") == Decimal("6333.33")


@pytest.mark.asyncio
async def test_average_salary_empty_department_is_zero(db_session: AsyncSession, departments):
    avg = await EmployeeRepository(db_session).average_salary_by_department("Finance")
    assert avg == Decimal("0")


@pytest.mark.asyncio
async def test_top_earners(db_session: AsyncSession, staff):
    top = await EmployeeRepository(db_session).top_earners(2)
    assert [e.employee_number for e in top] == ["MGR001", "EMP002"]


@pytest.mark.asyncio
async def test_get_by_employee_number(db_session: AsyncSession, staff):
    repo = EmployeeRepository(db_session)
    emp = await repo.get_by_employee_number("EMP003")
    assert emp.first_name == "Carol"
    assert emp.department.name == "HR"
    with pytest.raises(EmployeeNotFoundError):
        await repo.get_by_employee_number("NOPE")


@pytest.mark.asyncio
async def test_employee_number_uniqueness(db_session: AsyncSession, staff):
    repo = EmployeeRepository(db_session)
    assert await repo.is_employee_number_unique("EMP999") is True
    assert await repo.is_employee_number_unique("EMP001") is False
    assert await repo.is_employee_number_unique("EMP001", exclude_id=staff["EMP001"].id) is True


@pytest.mark.asyncio
async def test_eligible_for_promotion(db_session: AsyncSession, staff):
    eligible = await EmployeeRepository(db_session).list_eligible_for_promotion(
        today=date(2024, 6, 1)
    )
    assert {e.employee_number for e in eligible} == {"MGR001", "EMP001", "EMP003"}


@pytest.mark.asyncio
async def test_managers_and_teams(db_session: AsyncSession, staff):
    repo = EmployeeRepository(db_session)
    boss = staff["boss"]
    assert [m.id for m in await repo.list_managers()] == [boss.id]
    assert [e.employee_number for e in await repo.list_managed_by(boss.id)] == ["EMP001"]
    assert await repo.managed_counts() == {boss.id: 1}
    assert staff["EMP001"].manager.full_name == "Grace Hopper"


@pytest.mark.asyncio
async def test_cannot_delete_manager_with_team(db_session: AsyncSession, staff):
    repo = EmployeeRepository(db_session)
    with pytest.raises(InvalidOperationError):
        await repo.delete(staff["boss"].id)

    await repo.delete(staff["EMP001"].id)
    await repo.delete(staff["boss"].id)
    assert await repo.get_by_id(staff["boss"].id) is None


# ── Departments ─────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_department_lookup_and_totals(db_session: AsyncSession, staff, departments):
    repo = DepartmentRepository(db_session)
    it = await repo.get_by_name("it")
    assert it.id == departments["IT"]
    assert len((await repo.get_with_employees(it.id)).employees) == 3
    assert [d.name for d in await repo.list_with_employees()] == ["Finance", "HR", "IT"]
    assert await repo.is_name_unique("Legal") is True
    assert await repo.is_name_unique("hr") is False


@pytest.mark.asyncio
async def test_department_with_staff_cannot_be_deleted(db_session: AsyncSession, staff, departments):
    repo = DepartmentRepository(db_session)
    with pytest.raises(InvalidOperationError):
        await repo.delete(departments["HR"])
    deleted = await repo.delete(departments["Finance"])
    assert deleted.name == "Finance"


# ── Contractors ─────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_contractor_queries(db_session: AsyncSession):
    repo = ContractorRepository(db_session)
    await repo.add(make_contractor())
    await repo.add(
        make_contractor(
            contractor_number="CTR002", email="c2@corp.io", is_active=False,
        )
    )
    await repo.add(
        make_contractor(
            contractor_number="CTR003", email="c3@corp.io",
            contract_start_date=date(2025, 1, 1), contract_end_date=date(2025, 6, 30),
        )
    )

    assert [c.contractor_number for c in await repo.list_active()] == ["CTR001", "CTR003"]
    valid = await repo.list_valid(today=date(2024, 6, 1))
    assert [c.contractor_number for c in valid] == ["CTR001"]
    assert (await repo.get_by_contractor_number("CTR003")).email == "c3@corp.io"
    assert await repo.is_contractor_number_unique("CTR001") is False
    with pytest.raises(EmployeeNotFoundError):
        await repo.get_by_contractor_number("CTR999")


# ── Mapping / loading ───────────────────────────────────────────────
def test_person_columns_on_both_tables():
    """Both tables get their own copy of the shared person columns."""
    person = {"first_name", "last_name", "email", "phone_number", "date_of_birth", "created_at"}
    employee_cols = set(Employee.__table__.c.keys())
    contractor_cols = set(Contractor.__table__.c.keys())
    assert person <= employee_cols
    assert person <= contractor_cols
    assert Employee.__table__.c.first_name is not Contractor.__table__.c.first_name


@pytest.mark.asyncio
async def test_team_loaded_in_fresh_session_has_manager(session_factory, staff):
    """A team read in a new session can be projected without lazy loads."""
    boss_id = staff["boss"].id
    async with session_factory() as session:
        team = await EmployeeRepository(session).list_managed_by(boss_id)
        assert [e.manager.full_name for e in team] == ["Grace Hopper"]
        assert employees_to_read(team)[0].manager_name == "Grace Hopper"


# ── Paging ──────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_paging_pushed_into_queries(db_session: AsyncSession, staff):
    repo = EmployeeRepository(db_session)
    page = await repo.get_all(skip=1, limit=2)
    assert [e.employee_number for e in page] == ["EMP001", "EMP002"]
    tail = await repo.list_active(skip=3)
    assert [e.employee_number for e in tail] == ["EMP003", "EMP005"]
    assert [e.employee_number for e in await repo.search("emp", limit=1)] == ["EMP001"]
