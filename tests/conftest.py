from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone

import pytest
from werkzeug.security import generate_password_hash

from src.timeclock_system.timeclock_system.core.enums import RequestStatus
from src.timeclock_system.timeclock_system.employees.model import Company, Employee, Supervisor
from src.timeclock_system.timeclock_system.requests.model import PlannerRequest, TimeRequest
from src.timeclock_system.timeclock_system.time_entries.model import TimeEvent

# Fast hash so the suite does not spend its time in scrypt.
_HASH_METHOD = "pbkdf2:sha256:1000"


class FakeEmployeeRepo:
    def __init__(self, employees=(), supervisors=()):
        self._employees = {e.employee_id: e for e in employees}
        self._supervisors = {s.supervisor_id: s for s in supervisors}

    def get_employee(self, employee_id):
        return self._employees.get(str(employee_id))

    def get_employee_by_email(self, email):
        return next((e for e in self._employees.values() if e.email == email), None)

    def get_supervisor(self, supervisor_id):
        return self._supervisors.get(str(supervisor_id))

    def get_supervisor_by_email(self, email):
        return next((s for s in self._supervisors.values() if s.email == email), None)

    def list_employees_for_work_centers(self, work_centers):
        wanted = set(work_centers)
        return [e for e in self._employees.values() if e.is_active and wanted & set(e.work_centers)]

    def update_employee_pin(self, employee_id, pin_hash):
        employee = self._employees.get(str(employee_id))
        if not employee or not employee.is_active:
            return False
        self._employees[employee.employee_id] = replace(employee, pin_hash=pin_hash)
        return True


class FakeTimeEntryRepo:
    def __init__(self, events=()):
        self.events: list[TimeEvent] = list(events)
        self._next_id = 1000

    def _window(self, events, start, end):
        return sorted(
            (e for e in events if (start is None or e.timestamp >= start) and (end is None or e.timestamp <= end)),
            key=lambda e: e.timestamp,
        )

    def list_for_employees(self, employee_ids, *, start=None, end=None):
        ids = set(employee_ids)
        return self._window([e for e in self.events if e.employee_id in ids], start, end)

    def list_for_employee(self, employee_id, *, start=None, end=None):
        return self.list_for_employees([employee_id], start=start, end=end)

    def get_latest_for_employee(self, employee_id, *, before=None):
        mine = [e for e in self.list_for_employee(employee_id) if before is None or e.timestamp < before]
        return mine[-1] if mine else None

    def create_entry(self, *, employee_id, kind, timestamp, work_center, latitude=None, longitude=None):
        self._next_id += 1
        self.events.append(
            TimeEvent(
                employee_id=employee_id,
                timestamp=timestamp,
                kind=kind,
                work_center=work_center,
                entry_id=self._next_id,
                latitude=latitude,
                longitude=longitude,
            )
        )
        return self._next_id


class FakeRequestRepo:
    def __init__(self):
        self._next_id = 1
        self.time_requests: dict[int, TimeRequest] = {}
        self.planner_requests: dict[int, PlannerRequest] = {}

    def _new_id(self):
        rid = self._next_id
        self._next_id += 1
        return rid

    def create_time_request(self, *, employee_id, entry_type, requested_at, work_center, comment):
        rid = self._new_id()
        self.time_requests[rid] = TimeRequest(
            request_id=rid,
            employee_id=employee_id,
            entry_type=entry_type,
            requested_at=requested_at,
            work_center=work_center,
            comment=comment,
            status=RequestStatus.PENDING,
            created_at=datetime(2026, 3, 1, 10, 0, tzinfo=timezone.utc),
        )
        return rid

    def get_time_request(self, *, request_id):
        return self.time_requests.get(int(request_id))

    def list_time_requests(self, *, employee_id=None, work_centers=None, status=None, limit=200):
        rows = []
        for r in self.time_requests.values():
            if employee_id is not None and r.employee_id != employee_id:
                continue
            if work_centers is not None and r.work_center not in work_centers:
                continue
            if status is not None and r.status != status:
                continue
            rows.append({"request_id": r.request_id, "type": "time", "status": r.status.value, "created_at": ""})
        return rows[:limit]

    def decide_time_request(self, *, request_id, status, decided_by):
        req = self.time_requests.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            return False
        self.time_requests[req.request_id] = replace(req, status=status, decided_by=decided_by)
        return True

    def create_planner_request(self, *, employee_id, planner_type, start_at, end_at, comment):
        rid = self._new_id()
        self.planner_requests[rid] = PlannerRequest(
            request_id=rid,
            employee_id=employee_id,
            planner_type=planner_type,
            start_at=start_at,
            end_at=end_at,
            comment=comment,
            status=RequestStatus.PENDING,
            created_at=datetime(2026, 3, 1, 10, 0, tzinfo=timezone.utc),
        )
        return rid

    def get_planner_request(self, *, request_id):
        return self.planner_requests.get(int(request_id))

    def list_planner_requests(self, *, employee_id=None, work_centers=None, status=None, limit=200):
        rows = []
        for r in self.planner_requests.values():
            if employee_id is not None and r.employee_id != employee_id:
                continue
            if status is not None and r.status != status:
                continue
            rows.append({"request_id": r.request_id, "type": "planner", "status": r.status.value, "created_at": ""})
        return rows[:limit]

    def decide_planner_request(self, *, request_id, status, decided_by):
        req = self.planner_requests.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            return False
        self.planner_requests[req.request_id] = replace(req, status=status, decided_by=decided_by)
        return True


@pytest.fixture
def fixed_now():
    # Wednesday 2026-03-18 17:00 UTC
    return datetime(2026, 3, 18, 17, 0, tzinfo=timezone.utc)


@pytest.fixture
def ana():
    return Employee(
        employee_id="emp-1",
        email="ana@example.com",
        fiscal_name="Ana García",
        pin_hash=generate_password_hash("1111", method=_HASH_METHOD),
        work_centers=("Madrid",),
        document_number="12345678Z",
        timezone="UTC",
    )


@pytest.fixture
def luis():
    return Employee(
        employee_id="emp-2",
        email="luis@example.com",
        fiscal_name="Luis Pérez",
        pin_hash=generate_password_hash("2222", method=_HASH_METHOD),
        work_centers=("Madrid", "Toledo"),
        timezone="UTC",
    )


@pytest.fixture
def carmen():
    """Employee of a work center the supervisor does not manage."""
    return Employee(
        employee_id="emp-3",
        email="carmen@example.com",
        fiscal_name="Carmen Ruiz",
        pin_hash=generate_password_hash("3333", method=_HASH_METHOD),
        work_centers=("Sevilla",),
        timezone="UTC",
    )


@pytest.fixture
def supervisor():
    return Supervisor(
        supervisor_id="sup-1",
        email="boss@example.com",
        fiscal_name="Supervisor Demo",
        pin_hash=generate_password_hash("1234", method=_HASH_METHOD),
        work_centers=("Madrid", "Toledo"),
        company=Company(fiscal_name="Demo Company S.L.", nif="B00000000"),
    )


@pytest.fixture
def employees_repo(ana, luis, carmen, supervisor):
    return FakeEmployeeRepo([ana, luis, carmen], [supervisor])


@pytest.fixture
def entries_repo():
    return FakeTimeEntryRepo()


@pytest.fixture
def requests_repo():
    return FakeRequestRepo()
