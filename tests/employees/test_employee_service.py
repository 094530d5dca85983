from dataclasses import replace

import pytest

from conftest import DARIO, ENGINEERING, HANA, INES, MARA, NOEL, SALES, TOMAS

from src.hr_records.hr_records.core.enums import DenyReason
from src.hr_records.hr_records.core.exceptions import (
    AuthorizationError,
    ConcurrentModificationError,
    NotFoundError,
    ValidationError,
)


def test_employee_lists_own_department_with_redaction(world):
    rows = world.container.employee_service.list_employees(world.principal(DARIO))

    assert {r["id"] for r in rows} == {MARA, DARIO, INES}
    for r in rows:
        if r["id"] == DARIO:
            assert r["phone"] is not None and r["hire_date"] == "2020-01-06"
        else:
            assert r["phone"] is None and r["date_of_birth"] is None and r["hire_date"] is None


def test_all_scope_lists_everyone_unredacted(world):
    rows = world.container.employee_service.list_employees(world.principal(HANA))
    assert {r["id"] for r in rows} == {1, 2, 3, 4, 5, 6, 7}
    assert all(r["phone"] for r in rows)


def test_employee_without_department_gets_empty_listing(world):
    assert world.container.employee_service.list_employees(world.principal(NOEL)) == []


def test_get_employee_cross_department_is_denied(world):
    with pytest.raises(AuthorizationError) as exc:
        world.container.employee_service.get_employee(world.principal(DARIO), TOMAS)
    assert exc.value.reason is DenyReason.CROSS_DEPARTMENT


def test_get_employee_in_department_is_redacted(world):
    row = world.container.employee_service.get_employee(world.principal(DARIO), INES)
    assert row["full_name"] == "Ines Park"
    assert row["phone"] is None


def test_get_missing_employee(world):
    with pytest.raises(NotFoundError):
        world.container.employee_service.get_employee(world.principal(DARIO), 404)


def test_search_is_filtered_and_redacted(world):
    rows = world.container.employee_service.search_employees(world.principal(DARIO), "example.com")
    assert {r["id"] for r in rows} == {MARA, DARIO, INES}
    assert [r for r in rows if r["id"] != DARIO and r["phone"] is not None] == []


def test_search_requires_keyword(world):
    with pytest.raises(ValidationError):
        world.container.employee_service.search_employees(world.principal(DARIO), "  ")


def test_department_listing_blocks_probing_other_departments(world):
    service = world.container.employee_service
    assert {r["id"] for r in service.list_department_employees(world.principal(DARIO), ENGINEERING)} == {
        MARA,
        DARIO,
        INES,
    }
    with pytest.raises(AuthorizationError) as exc:
        service.list_department_employees(world.principal(DARIO), SALES)
    assert exc.value.reason is DenyReason.CROSS_DEPARTMENT


def test_department_listing_for_missing_department(world):
    with pytest.raises(NotFoundError):
        world.container.employee_service.list_department_employees(world.principal(HANA), 99)


def test_employee_updates_own_profile(world):
    row = world.container.employee_service.update_employee(
        world.principal(DARIO),
        DARIO,
        changes={"bio": "Backend developer", "phone": "+491701234567"},
    )
    assert row["bio"] == "Backend developer"
    assert row["phone"] == "+491701234567"
    assert row["version"] == 1


def test_employee_cannot_update_colleague(world):
    with pytest.raises(AuthorizationError) as exc:
        world.container.employee_service.update_employee(world.principal(DARIO), INES, changes={"bio": "x"})
    assert exc.value.reason is DenyReason.NOT_OWNER
    assert world.employees.writes == 0


@pytest.mark.parametrize(
    "changes",
    [
        {"first_name": "A"},
        {"email": "not-an-email"},
        {"phone": "0123"},
        {"bio": "x" * 1001},
        {"date_of_birth": "17.05.1990"},
        {"salary": 1},
    ],
)
def test_update_validation(world, changes):
    with pytest.raises(ValidationError):
        world.container.employee_service.update_employee(world.principal(DARIO), DARIO, changes=changes)


def test_update_with_stale_version(world):
    with pytest.raises(ConcurrentModificationError) as exc:
        world.container.employee_service.update_employee(
            world.principal(DARIO), DARIO, changes={"bio": "x"}, expected_version=7
        )
    assert exc.value.retryable


def test_department_move_needs_all_scope(world):
    service = world.container.employee_service
    # Mara holds EMPLOYEE:UPDATE:ALL; Dario only OWN.
    with pytest.raises(AuthorizationError):
        service.update_employee(world.principal(DARIO), DARIO, changes={"department_id": SALES})

    row = service.update_employee(world.principal(MARA), DARIO, changes={"department_id": SALES})
    assert row["department_id"] == SALES


def test_department_move_to_missing_department(world):
    with pytest.raises(NotFoundError):
        world.container.employee_service.update_employee(world.principal(HANA), DARIO, changes={"department_id": 99})


def test_deactivate_requires_delete_permission(world):
    with pytest.raises(AuthorizationError):
        world.container.employee_service.deactivate_employee(world.principal(MARA), DARIO)

    world.container.employee_service.deactivate_employee(world.principal(HANA), DARIO)
    assert not world.employees.get_by_id(DARIO).is_active


def test_promote_to_manager(world):
    row = world.container.employee_service.promote_to_manager(world.principal(HANA), TOMAS, SALES)
    assert row["role"] == "MANAGER"
    assert world.departments.get_by_id(SALES).manager_id == TOMAS


def test_promote_requires_update_all(world):
    with pytest.raises(AuthorizationError):
        world.container.employee_service.promote_to_manager(world.principal(DARIO), TOMAS, SALES)


def test_promote_into_missing_department(world):
    with pytest.raises(NotFoundError):
        world.container.employee_service.promote_to_manager(world.principal(HANA), TOMAS, 99)


def test_all_scope_listing_is_not_truncated(world):
    template = world.employees.get_by_id(TOMAS)
    for offset in range(600):
        world.employees.add(replace(template, employee_id=1000 + offset, email=f"extra{offset}@example.com"))

    rows = world.container.employee_service.list_employees(world.principal(HANA))
    assert len(rows) == 607
