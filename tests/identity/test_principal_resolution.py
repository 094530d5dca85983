import pytest

from conftest import DARIO, ENGINEERING, NOEL

from src.hr_records.hr_records.core.exceptions import AuthenticationError, NotFoundError
from src.hr_records.hr_records.rbac.catalog import lookup


def test_resolves_role_and_department(world):
    principal = world.container.principal_service.resolve(DARIO)

    assert principal.employee_id == DARIO
    assert principal.department_id == ENGINEERING
    assert principal.role_name == "EMPLOYEE"
    assert lookup("ABSENCE:CREATE:OWN") in principal.permissions
    assert lookup("ABSENCE:APPROVE:DEPARTMENT") not in principal.permissions


def test_employee_without_department(world):
    assert world.container.principal_service.resolve(NOEL).department_id is None


def test_unknown_employee(world):
    with pytest.raises(NotFoundError):
        world.container.principal_service.resolve(404)


def test_deactivated_employee_is_rejected(world):
    world.employees.set_active(employee_id=DARIO, is_active=False, expected_version=0)
    with pytest.raises(AuthenticationError):
        world.container.principal_service.resolve(DARIO)


def test_role_lookups_are_cached(world):
    world.container.principal_service.resolve(DARIO)
    world.container.principal_service.resolve(NOEL)
    assert world.roles.get_by_id_calls == 1
