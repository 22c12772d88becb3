"""Stock reservation checks for line items staged in one debt operation"""

from dataclasses import dataclass
from typing import Dict, List, Mapping

from crediario.domain.models import LineItem

OUT_OF_STOCK = "out_of_stock"
INSUFFICIENT_STOCK = "insufficient_stock"


@dataclass
class StockIssue:
    """A line item the catalog cannot cover"""

    product_id: str
    product_name: str
    available: int
    requested: int
    reason: str  # OUT_OF_STOCK | INSUFFICIENT_STOCK


def _check(item: LineItem, in_catalog: int, already_staged: int) -> StockIssue | None:
    # Zero catalog stock is rejected outright, distinct from an over-quantity request
    if in_catalog <= 0:
        return StockIssue(item.product_id, item.product_name, 0, item.quantity, OUT_OF_STOCK)

    available = max(in_catalog - already_staged, 0)
    if item.quantity > available:
        return StockIssue(item.product_id, item.product_name, available, item.quantity, INSUFFICIENT_STOCK)
    return None


def validate_line_items(items: List[LineItem], catalog_snapshot: Mapping[str, int]) -> List[StockIssue]:
    """
    Check every item against the snapshot, in order.

    An item's available stock is the snapshot value minus the quantity of the
    same product already accepted earlier in ``items``. Products missing from
    the snapshot count as zero stock. Returns an empty list when all items fit.
    """
    staged: Dict[str, int] = {}
    issues = []

    for item in items:
        issue = _check(item, catalog_snapshot.get(item.product_id, 0), staged.get(item.product_id, 0))
        if issue:
            issues.append(issue)
        else:
            staged[item.product_id] = staged.get(item.product_id, 0) + item.quantity

    return issues


def stage_line_item(
    staged: List[LineItem],
    item: LineItem,
    catalog_snapshot: Mapping[str, int],
) -> StockIssue | None:
    """Interactive check for adding ``item`` to an operation that already holds ``staged``"""
    already = sum(s.quantity for s in staged if s.product_id == item.product_id)
    return _check(item, catalog_snapshot.get(item.product_id, 0), already)
