from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_non_empty, require_pin
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: str
    full_name: str
    email: str
    role: Role
    work_centers: tuple[str, ...] = field(default_factory=tuple)
    timezone: Optional[str] = None


class AuthService:
    """Use case: authenticate an employee or supervisor with email + PIN."""

    def __init__(self, profiles: EmployeeRepository):
        self._profiles = profiles

    @staticmethod
    def _pin_matches(pin_hash: str, pin: str) -> bool:
        try:
            return check_password_hash(pin_hash, pin)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            return False

    def authenticate(self, email: str, pin: str, role: Role) -> SessionUser:
        email = require_non_empty(email, "Email").lower()
        pin = require_pin(pin)

        if role == Role.SUPERVISOR:
            supervisor = self._profiles.get_supervisor_by_email(email)
            if not supervisor or not supervisor.is_active or not self._pin_matches(supervisor.pin_hash, pin):
                raise AuthenticationError("Invalid email or PIN")
            return SessionUser(
                user_id=supervisor.supervisor_id,
                full_name=supervisor.fiscal_name,
                email=supervisor.email,
                role=Role.SUPERVISOR,
                work_centers=supervisor.work_centers,
            )

        employee = self._profiles.get_employee_by_email(email)
        if not employee or not employee.is_active or not self._pin_matches(employee.pin_hash, pin):
            raise AuthenticationError("Invalid email or PIN")
        return SessionUser(
            user_id=employee.employee_id,
            full_name=employee.fiscal_name,
            email=employee.email,
            role=Role.EMPLOYEE,
            work_centers=employee.work_centers,
            timezone=employee.timezone,
        )

    def change_pin(
        self,
        employee_id: str,
        current_pin: str,
        new_pin: str,
        confirm_pin: Optional[str] = None,
    ) -> None:
        """Replace an employee's PIN after checking the current one.

        ``confirm_pin`` is optional; when given it must repeat ``new_pin``.
        """

        current_pin = require_pin(current_pin)
        new_pin = require_pin(new_pin)
        if confirm_pin is not None and confirm_pin.strip() != new_pin:
            raise ValidationError("New PINs do not match")
        if new_pin == current_pin:
            raise ValidationError("New PIN must differ from the current one")

        employee = self._profiles.get_employee(employee_id)
        if not employee or not employee.is_active or not self._pin_matches(employee.pin_hash, current_pin):
            raise AuthenticationError("Current PIN is incorrect")

        if not self._profiles.update_employee_pin(employee.employee_id, generate_password_hash(new_pin)):
            raise ValidationError("PIN could not be updated")
        logger.info("employee %s changed PIN", employee.employee_id)
