"""Example: use the service layer without Flask.

Controllers are thin; the clock rules and report maths live in services and
the ``worktime`` functions.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.timeclock_system.timeclock_system.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        timezone=settings.TIMEZONE,
        hours_limit=settings.ALARM_HOURS_LIMIT,
    )

    print(container.clock_service.current_state("emp-0001").to_dict())

    today = date.today()
    history = container.clock_service.history("emp-0001", start=today.replace(day=1), end=today)
    print(history.to_dict(container.report_service.tz)["total"])

    for row in container.report_service.alarm_report(["Madrid"], today.replace(day=1), today):
        print(row.to_dict())


if __name__ == "__main__":
    main()
