"""Walkthroughs across services, using the in-memory repositories from conftest."""
from datetime import date

import pytest

from conftest import DARIO, ENGINEERING, HANA, INES, MARA, SOFIA, TOMAS

from src.hr_records.hr_records.core.enums import AbsenceStatus
from src.hr_records.hr_records.core.exceptions import AuthorizationError, ConflictError


def test_department_colleague_sees_redacted_roster(world):
    rows = world.container.employee_service.list_employees(world.principal(DARIO))

    assert sorted(r["id"] for r in rows) == [MARA, DARIO, INES]
    assert all(r["department_id"] == ENGINEERING for r in rows)
    own = next(r for r in rows if r["id"] == DARIO)
    assert own["date_of_birth"] == "1990-05-17"
    assert [r["phone"] for r in rows if r["id"] != DARIO] == [None, None]


def test_absence_is_approved_once(world):
    service = world.container.absence_service
    absence = service.submit_absence(
        world.principal(DARIO),
        absence_type="VACATION",
        start_date=date(2025, 1, 5),
        end_date=date(2025, 1, 7),
        reason="Ski week",
    )

    approved = service.review_absence(world.principal(MARA), absence.absence_id, decision="APPROVED", comment="Have fun")
    assert approved.status is AbsenceStatus.APPROVED
    assert approved.reviewer_id == MARA
    assert approved.review_comment == "Have fun"

    with pytest.raises(ConflictError):
        service.review_absence(world.principal(MARA), absence.absence_id, decision="REJECTED")
    assert service.get_absence(world.principal(DARIO), absence.absence_id).status is AbsenceStatus.APPROVED


def test_granted_permission_takes_effect_after_invalidation(world):
    # Dario's role gains department-wide absence reads; the cache is dropped on grant.
    world.container.absence_service.submit_absence(
        world.principal(INES), absence_type="SICK_LEAVE", start_date=date(2025, 2, 3), end_date=date(2025, 2, 4)
    )
    assert world.container.absence_service.list_absences(world.principal(DARIO)) == []

    employee_role = world.roles.get_by_name("EMPLOYEE")
    world.container.role_service.grant_permission(
        world.principal(HANA), role_id=employee_role.role_id, permission_name="ABSENCE:READ:DEPARTMENT"
    )

    listed = world.container.absence_service.list_absences(world.principal(DARIO))
    assert [a.employee_id for a in listed] == [INES]


def test_reassignment_moves_visibility(world):
    world.container.employee_service.update_employee(world.principal(HANA), TOMAS, changes={"department_id": ENGINEERING})

    ids = {r["id"] for r in world.container.employee_service.list_employees(world.principal(DARIO))}
    assert TOMAS in ids
    with pytest.raises(AuthorizationError):
        world.container.employee_service.get_employee(world.principal(TOMAS), SOFIA)
