import pytest

from conftest import DARIO, EMPLOYEE_ROLE, HANA, MARA

from src.hr_records.hr_records.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError


def test_admin_lists_roles(world):
    names = [r.name for r in world.container.role_service.list_roles(world.principal(HANA))]
    assert names == ["EMPLOYEE", "HR_ADMIN", "MANAGER"]


@pytest.mark.parametrize("employee_id", [DARIO, MARA])
def test_non_admins_cannot_read_roles(world, employee_id):
    with pytest.raises(AuthorizationError):
        world.container.role_service.list_roles(world.principal(employee_id))


def test_create_role_with_catalog_permissions(world):
    role = world.container.role_service.create_role(
        world.principal(HANA),
        name="auditor",
        permission_names=["ABSENCE:READ:ALL", "EMPLOYEE:READ:ALL"],
    )
    assert role.name == "AUDITOR"
    assert role.permission_names == ["ABSENCE:READ:ALL", "EMPLOYEE:READ:ALL"]


def test_create_role_rejects_duplicate_name(world):
    with pytest.raises(ConflictError):
        world.container.role_service.create_role(world.principal(HANA), name="MANAGER", permission_names=[])


def test_create_role_rejects_unknown_permission(world):
    with pytest.raises(ValidationError):
        world.container.role_service.create_role(
            world.principal(HANA), name="WEIRD", permission_names=["ROLE:APPROVE:OWN"]
        )


def test_grant_invalidates_cache_so_next_principal_sees_permission(world):
    before = world.principal(DARIO)

    world.container.role_service.grant_permission(
        world.principal(HANA), role_id=EMPLOYEE_ROLE, permission_name="ABSENCE:READ:ALL"
    )

    after = world.principal(DARIO)
    assert "ABSENCE:READ:ALL" in {p.name for p in after.permissions}
    assert "ABSENCE:READ:ALL" not in {p.name for p in before.permissions}


def test_revoke_invalidates_cache(world):
    world.principal(DARIO)
    world.container.role_service.revoke_permission(
        world.principal(HANA), role_id=EMPLOYEE_ROLE, permission_name="FEEDBACK:CREATE:DEPARTMENT"
    )
    assert "FEEDBACK:CREATE:DEPARTMENT" not in {p.name for p in world.principal(DARIO).permissions}


def test_grant_requires_role_update_all(world):
    with pytest.raises(AuthorizationError):
        world.container.role_service.grant_permission(
            world.principal(MARA), role_id=EMPLOYEE_ROLE, permission_name="ABSENCE:READ:ALL"
        )


def test_grant_on_missing_role(world):
    with pytest.raises(NotFoundError):
        world.container.role_service.grant_permission(
            world.principal(HANA), role_id=99, permission_name="ABSENCE:READ:ALL"
        )


def test_manager_role_lookup(world):
    assert world.container.role_service.get_manager_role().name == "MANAGER"
