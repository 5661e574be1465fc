from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from src.timeclock_system.timeclock_system.core.enums import EntryType, PlannerType, RequestStatus, Role
from src.timeclock_system.timeclock_system.core.exceptions import AuthorizationError, ValidationError
from src.timeclock_system.timeclock_system.requests.service import RequestService


def _svc(requests_repo, entries_repo, employees_repo):
    return RequestService(requests_repo, entries_repo, employees_repo)


def _file_time_request(svc, fixed_now, **overrides):
    kwargs = dict(
        current_role=Role.EMPLOYEE,
        employee_id="emp-1",
        entry_type="clock_in",
        work_date=date(2026, 3, 17),
        entry_time="09:00",
        work_center="Madrid",
        comment="  forgot to clock in ",
        now=fixed_now,
    )
    kwargs.update(overrides)
    return svc.create_time_request(**kwargs)


def test_approve_time_request_creates_clock_event(requests_repo, entries_repo, employees_repo, fixed_now):
    svc = _svc(requests_repo, entries_repo, employees_repo)
    rid = _file_time_request(svc, fixed_now)

    assert requests_repo.get_time_request(request_id=rid).comment == "forgot to clock in"

    entry_id = svc.approve_time_request(current_role=Role.SUPERVISOR, supervisor_id="sup-1", request_id=rid)

    event = entries_repo.events[-1]
    assert event.entry_id == entry_id
    assert event.kind == EntryType.CLOCK_IN
    assert event.timestamp == datetime(2026, 3, 17, 9, 0, tzinfo=timezone.utc)
    assert requests_repo.get_time_request(request_id=rid).status == RequestStatus.APPROVED
    assert requests_repo.get_time_request(request_id=rid).decided_by == "sup-1"


def test_time_request_cannot_be_approved_twice(requests_repo, entries_repo, employees_repo, fixed_now):
    svc = _svc(requests_repo, entries_repo, employees_repo)
    rid = _file_time_request(svc, fixed_now)
    svc.approve_time_request(current_role=Role.SUPERVISOR, supervisor_id="sup-1", request_id=rid)

    with pytest.raises(ValidationError):
        svc.approve_time_request(current_role=Role.SUPERVISOR, supervisor_id="sup-1", request_id=rid)
    assert len(entries_repo.events) == 1


def test_reject_time_request_adds_no_event(requests_repo, entries_repo, employees_repo, fixed_now):
    svc = _svc(requests_repo, entries_repo, employees_repo)
    rid = _file_time_request(svc, fixed_now)

    svc.reject_time_request(current_role=Role.SUPERVISOR, supervisor_id="sup-1", request_id=rid)

    assert entries_repo.events == []
    assert requests_repo.get_time_request(request_id=rid).status == RequestStatus.REJECTED


def test_time_request_in_the_future_is_rejected(requests_repo, entries_repo, employees_repo, fixed_now):
    svc = _svc(requests_repo, entries_repo, employees_repo)
    with pytest.raises(ValidationError):
        _file_time_request(svc, fixed_now, work_date=date(2026, 3, 18), entry_time="18:30")


@pytest.mark.parametrize(
    "overrides",
    [
        {"entry_type": "lunch"},
        {"work_center": "Sevilla"},
        {"work_center": ""},
        {"entry_time": "9h"},
    ],
)
def test_time_request_validation(requests_repo, entries_repo, employees_repo, fixed_now, overrides):
    svc = _svc(requests_repo, entries_repo, employees_repo)
    with pytest.raises(ValidationError):
        _file_time_request(svc, fixed_now, **overrides)


def test_only_employees_file_and_only_supervisors_decide(requests_repo, entries_repo, employees_repo, fixed_now):
    svc = _svc(requests_repo, entries_repo, employees_repo)
    with pytest.raises(AuthorizationError):
        _file_time_request(svc, fixed_now, current_role=Role.SUPERVISOR)

    rid = _file_time_request(svc, fixed_now)
    with pytest.raises(AuthorizationError):
        svc.approve_time_request(current_role=Role.EMPLOYEE, supervisor_id="emp-1", request_id=rid)


def test_supervisor_outside_work_center_cannot_decide(requests_repo, entries_repo, employees_repo, fixed_now):
    svc = _svc(requests_repo, entries_repo, employees_repo)
    rid = requests_repo.create_time_request(
        employee_id="emp-3",
        entry_type=EntryType.CLOCK_OUT,
        requested_at=datetime(2026, 3, 17, 18, tzinfo=timezone.utc),
        work_center="Sevilla",
        comment=None,
    )

    with pytest.raises(AuthorizationError):
        svc.approve_time_request(current_role=Role.SUPERVISOR, supervisor_id="sup-1", request_id=rid)


def test_planner_request_lifecycle(requests_repo, entries_repo, employees_repo):
    svc = _svc(requests_repo, entries_repo, employees_repo)
    rid = svc.create_planner_request(
        current_role=Role.EMPLOYEE,
        employee_id="emp-2",
        planner_type="vacation",
        start_date=date(2026, 8, 3),
        end_date=date(2026, 8, 14),
    )
    req = requests_repo.get_planner_request(request_id=rid)
    assert req.planner_type == PlannerType.VACATION
    assert req.start_at.date() == date(2026, 8, 3)

    svc.decide_planner_request(current_role=Role.SUPERVISOR, supervisor_id="sup-1", request_id=rid, approve=True)

    assert requests_repo.get_planner_request(request_id=rid).status == RequestStatus.APPROVED
    assert entries_repo.events == []


def test_planner_request_end_before_start(requests_repo, entries_repo, employees_repo):
    svc = _svc(requests_repo, entries_repo, employees_repo)
    with pytest.raises(ValidationError):
        svc.create_planner_request(
            current_role=Role.EMPLOYEE,
            employee_id="emp-1",
            planner_type="sick_leave",
            start_date=date(2026, 3, 10),
            end_date=date(2026, 3, 9),
        )


def test_list_requests(requests_repo, entries_repo, employees_repo, fixed_now):
    svc = _svc(requests_repo, entries_repo, employees_repo)
    _file_time_request(svc, fixed_now)
    svc.create_planner_request(
        current_role=Role.EMPLOYEE,
        employee_id="emp-1",
        planner_type="personal",
        start_date=date(2026, 3, 20),
        end_date=date(2026, 3, 20),
        start_time="10:00",
        end_time="12:00",
    )

    mine = svc.list_my_requests(employee_id="emp-1")
    assert len(mine["time_requests"]) == 1
    assert len(mine["planner_requests"]) == 1

    pending = svc.list_for_supervisor(work_centers=["Madrid"], status=RequestStatus.PENDING)
    assert {r["type"] for r in pending} == {"time", "planner"}


def test_concurrent_approval_inserts_no_second_event(requests_repo, entries_repo, employees_repo, fixed_now):
    svc = _svc(requests_repo, entries_repo, employees_repo)
    rid = _file_time_request(svc, fixed_now)

    decide = requests_repo.decide_time_request

    def other_supervisor_wins(*, request_id, status, decided_by):
        # Another approval lands between our pending check and our update.
        decide(request_id=request_id, status=RequestStatus.APPROVED, decided_by="sup-2")
        return decide(request_id=request_id, status=status, decided_by=decided_by)

    requests_repo.decide_time_request = other_supervisor_wins

    with pytest.raises(ValidationError):
        svc.approve_time_request(current_role=Role.SUPERVISOR, supervisor_id="sup-1", request_id=rid)

    assert entries_repo.events == []
    assert requests_repo.get_time_request(request_id=rid).decided_by == "sup-2"
