"""Compliance dashboard metrics from ``compliance_requirements`` rows."""

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from fleetops.utils.logger import get_logger

from .dates import as_date, days_until

logger = get_logger(__name__)

COMPLIANT = "compliant"
CLOSED_STATUSES = frozenset({COMPLIANT, "not_applicable"})


@dataclass
class ComplianceSummary:
    total: int = 0
    by_status: dict[str, int] = field(default_factory=dict)
    compliance_percentage: int = 0
    overdue: list[dict[str, Any]] = field(default_factory=list)
    due_soon: list[dict[str, Any]] = field(default_factory=list)
    framework_scores: dict[str, int] = field(default_factory=dict)


def _percentage(part: int, whole: int) -> int:
    return round(part / whole * 100) if whole else 0


def summarize_compliance(
    requirements: list[dict[str, Any]],
    today: date | None = None,
    due_soon_days: int = 30,
) -> ComplianceSummary:
    """Count requirements by status and find overdue or upcoming ones.

    A requirement is overdue when its due date has passed and it is not
    compliant or marked not applicable; due soon when that date is within
    ``due_soon_days``.
    """
    today = today or date.today()
    summary = ComplianceSummary(total=len(requirements))
    statuses: Counter[str] = Counter()
    framework_totals: dict[str, int] = defaultdict(int)
    framework_compliant: dict[str, int] = defaultdict(int)

    for req in requirements:
        status = (req.get("status") or "pending").lower()
        statuses[status] += 1

        framework = req.get("framework") or "General"
        framework_totals[framework] += 1
        if status == COMPLIANT:
            framework_compliant[framework] += 1

        due = as_date(req.get("due_date"))
        if due is None or status in CLOSED_STATUSES:
            continue
        remaining = days_until(due, today)
        if remaining < 0:
            summary.overdue.append(req)
        elif remaining <= due_soon_days:
            summary.due_soon.append(req)

    summary.by_status = dict(statuses)
    summary.compliance_percentage = _percentage(statuses[COMPLIANT], len(requirements))
    summary.framework_scores = {
        name: _percentage(framework_compliant[name], total)
        for name, total in framework_totals.items()
    }
    logger.info(
        "Compliance summary: %d%% compliant, %d overdue, %d due soon",
        summary.compliance_percentage,
        len(summary.overdue),
        len(summary.due_soon),
    )
    return summary
