"""Inventory dashboard metrics computed from ``inventory_items`` rows."""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from fleetops.utils.logger import get_logger

from .dates import as_date

logger = get_logger(__name__)


@dataclass
class StockAlert:
    item_id: str | None
    name: str
    quantity: float
    min_stock: float
    priority: str


@dataclass
class InventorySummary:
    """Headline figures for the inventory dashboard."""

    total_items: int = 0
    total_quantity: float = 0.0
    total_value: float = 0.0
    low_stock_alerts: list[StockAlert] = field(default_factory=list)
    expired_items: int = 0
    maintenance_due: int = 0
    by_location: dict[str, int] = field(default_factory=dict)
    by_category: dict[str, int] = field(default_factory=dict)

    @property
    def low_stock_count(self) -> int:
        return len(self.low_stock_alerts)

    @property
    def critical_alerts(self) -> int:
        return sum(1 for a in self.low_stock_alerts if a.priority == "critical")


def _number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def stock_priority(quantity: float, min_stock: float) -> str:
    """``critical`` when out of stock, ``high`` at half the minimum or less."""
    if quantity <= 0:
        return "critical"
    if quantity <= min_stock * 0.5:
        return "high"
    return "medium"


def summarize_inventory(
    items: list[dict[str, Any]], today: date | None = None
) -> InventorySummary:
    """Compute inventory totals, alerts and breakdowns.

    Args:
        items: ``inventory_items`` rows.
        today: Reference date for expiry and maintenance checks.

    Returns:
        Inventory summary.
    """
    today = today or date.today()
    summary = InventorySummary(total_items=len(items))
    by_location: dict[str, int] = defaultdict(int)
    by_category: dict[str, int] = defaultdict(int)

    for item in items:
        quantity = _number(item.get("quantity"))
        summary.total_quantity += quantity
        summary.total_value += _number(item.get("unit_price")) * quantity

        min_stock = item.get("min_stock")
        if min_stock is not None and quantity <= _number(min_stock):
            summary.low_stock_alerts.append(
                StockAlert(
                    item_id=item.get("id"),
                    name=item.get("name", ""),
                    quantity=quantity,
                    min_stock=_number(min_stock),
                    priority=stock_priority(quantity, _number(min_stock)),
                )
            )

        expiry = as_date(item.get("expiry_date"))
        if expiry is not None and expiry < today:
            summary.expired_items += 1

        maintenance = as_date(item.get("next_maintenance_date"))
        if maintenance is not None and maintenance <= today:
            summary.maintenance_due += 1

        by_location[item.get("location") or "Unassigned"] += 1
        by_category[item.get("folder") or item.get("category") or "Uncategorized"] += 1

    summary.by_location = dict(by_location)
    summary.by_category = dict(by_category)
    summary.total_value = round(summary.total_value, 2)
    logger.info(
        "Inventory summary: %d items, %d low stock, %d expired",
        summary.total_items,
        summary.low_stock_count,
        summary.expired_items,
    )
    return summary
