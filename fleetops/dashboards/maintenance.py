"""Upcoming and overdue equipment maintenance."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from .dates import as_date, days_until


@dataclass
class MaintenanceTask:
    equipment_id: str | None
    name: str
    due_date: date
    days_until_due: int


@dataclass
class MaintenanceSchedule:
    overdue: list[MaintenanceTask] = field(default_factory=list)
    upcoming: list[MaintenanceTask] = field(default_factory=list)


def maintenance_schedule(
    equipment: list[dict[str, Any]],
    today: date | None = None,
    upcoming_days: int = 14,
) -> MaintenanceSchedule:
    """Split equipment by ``next_maintenance_date`` into overdue and upcoming.

    Both lists are ordered soonest first. Equipment without a date is skipped.
    """
    today = today or date.today()
    schedule = MaintenanceSchedule()

    for row in equipment:
        due = as_date(row.get("next_maintenance_date"))
        if due is None:
            continue
        task = MaintenanceTask(
            equipment_id=row.get("id"),
            name=row.get("name", ""),
            due_date=due,
            days_until_due=days_until(due, today),
        )
        if task.days_until_due < 0:
            schedule.overdue.append(task)
        elif task.days_until_due <= upcoming_days:
            schedule.upcoming.append(task)

    schedule.overdue.sort(key=lambda t: t.due_date)
    schedule.upcoming.sort(key=lambda t: t.due_date)
    return schedule
