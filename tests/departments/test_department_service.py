import pytest

from conftest import DARIO, ENGINEERING, HANA, MARA, NOEL, SALES, TOMAS

from src.hr_records.hr_records.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError


def test_any_principal_reads_departments(world):
    names = [d["name"] for d in world.container.department_service.list_departments(world.principal(NOEL))]
    assert names == ["Engineering", "Human Resources", "Sales"]
    assert world.container.department_service.get_department(world.principal(DARIO), SALES)["manager_id"] == 4


def test_get_missing_department(world):
    with pytest.raises(NotFoundError):
        world.container.department_service.get_department(world.principal(DARIO), 99)


def test_create_department(world):
    row = world.container.department_service.create_department(
        world.principal(HANA), name="Platform", description=" Infra ", manager_id=MARA, parent_id=ENGINEERING
    )
    assert row["name"] == "Platform"
    assert row["description"] == "Infra"
    assert row["parent_id"] == ENGINEERING


def test_create_requires_department_create_all(world):
    with pytest.raises(AuthorizationError):
        world.container.department_service.create_department(world.principal(MARA), name="Platform")


def test_create_rejects_duplicate_name(world):
    with pytest.raises(ConflictError):
        world.container.department_service.create_department(world.principal(HANA), name="Sales")


def test_create_with_missing_manager(world):
    with pytest.raises(NotFoundError):
        world.container.department_service.create_department(world.principal(HANA), name="Legal", manager_id=404)


def test_update_rejects_parent_cycle(world):
    service = world.container.department_service
    child = service.create_department(world.principal(HANA), name="Platform", parent_id=ENGINEERING)

    with pytest.raises(ValidationError):
        service.update_department(world.principal(HANA), ENGINEERING, changes={"parent_id": child["id"]})
    with pytest.raises(ValidationError):
        service.update_department(world.principal(HANA), ENGINEERING, changes={"parent_id": ENGINEERING})


def test_update_renames_department(world):
    row = world.container.department_service.update_department(
        world.principal(HANA), SALES, changes={"name": "Sales EMEA"}
    )
    assert row["name"] == "Sales EMEA"


def test_update_rename_collision(world):
    with pytest.raises(ConflictError):
        world.container.department_service.update_department(world.principal(HANA), SALES, changes={"name": "Engineering"})


def test_delete_blocked_by_employees(world):
    with pytest.raises(ConflictError):
        world.container.department_service.delete_department(world.principal(HANA), SALES)


def test_delete_blocked_by_sub_departments(world):
    service = world.container.department_service
    parent = service.create_department(world.principal(HANA), name="Research")
    service.create_department(world.principal(HANA), name="Research Lab", parent_id=parent["id"])

    with pytest.raises(ConflictError):
        service.delete_department(world.principal(HANA), parent["id"])


def test_delete_empty_department(world):
    service = world.container.department_service
    row = service.create_department(world.principal(HANA), name="Legal")
    service.delete_department(world.principal(HANA), row["id"])
    assert world.departments.get_by_id(row["id"]) is None


def test_delete_requires_permission(world):
    with pytest.raises(AuthorizationError):
        world.container.department_service.delete_department(world.principal(TOMAS), SALES)
