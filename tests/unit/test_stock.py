"""Unit tests for stock reservation checks"""

from conftest import line_item
from crediario.domain.stock import (
    INSUFFICIENT_STOCK,
    OUT_OF_STOCK,
    stage_line_item,
    validate_line_items,
)


def test_validate_line_items_all_fit():
    items = [line_item("prod-a", 2), line_item("prod-b", 1)]

    assert validate_line_items(items, {"prod-a": 2, "prod-b": 5}) == []


def test_validate_line_items_out_of_stock():
    """Zero catalog stock is OutOfStock, not an over-quantity request"""
    issues = validate_line_items([line_item("prod-a", 1)], {"prod-a": 0})

    assert len(issues) == 1
    assert issues[0].reason == OUT_OF_STOCK
    assert issues[0].available == 0
    assert issues[0].requested == 1


def test_validate_line_items_unknown_product_is_out_of_stock():
    issues = validate_line_items([line_item("ghost", 1)], {})

    assert issues[0].reason == OUT_OF_STOCK


def test_validate_line_items_insufficient_stock():
    issues = validate_line_items([line_item("prod-a", 4)], {"prod-a": 3})

    assert issues[0].reason == INSUFFICIENT_STOCK
    assert (issues[0].available, issues[0].requested) == (3, 4)


def test_validate_line_items_accumulates_repeated_product():
    """Same product added several times draws from one stock"""
    items = [line_item("prod-x", 1), line_item("prod-x", 1), line_item("prod-x", 1)]

    issues = validate_line_items(items, {"prod-x": 2})

    assert len(issues) == 1
    assert issues[0].reason == INSUFFICIENT_STOCK
    assert (issues[0].available, issues[0].requested) == (0, 1)


def test_validate_line_items_reports_each_offender():
    items = [line_item("prod-a", 5), line_item("prod-b", 1), line_item("prod-c", 1)]

    issues = validate_line_items(items, {"prod-a": 2, "prod-b": 1, "prod-c": 0})

    assert [i.product_id for i in issues] == ["prod-a", "prod-c"]


def test_validate_line_items_rejected_item_does_not_consume_stock():
    """A rejected request leaves the stock for later items of the same product"""
    items = [line_item("prod-a", 5), line_item("prod-a", 2)]

    issues = validate_line_items(items, {"prod-a": 3})

    assert len(issues) == 1
    assert issues[0].requested == 5


def test_stage_line_item_sequential_adds():
    """Stock 2: two single adds succeed, the third is rejected with nothing left"""
    snapshot = {"prod-x": 2}
    staged = []

    for _ in range(2):
        item = line_item("prod-x", 1)
        assert stage_line_item(staged, item, snapshot) is None
        staged.append(item)

    issue = stage_line_item(staged, line_item("prod-x", 1), snapshot)

    assert issue is not None
    assert issue.reason == INSUFFICIENT_STOCK
    assert (issue.available, issue.requested) == (0, 1)


def test_stage_line_item_ignores_other_products():
    staged = [line_item("prod-b", 9)]

    assert stage_line_item(staged, line_item("prod-a", 2), {"prod-a": 2, "prod-b": 9}) is None
