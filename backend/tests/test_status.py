import pytest
from types import SimpleNamespace
from unittest.mock import patch
from datetime import date

from backend.app.models.models import MonthlyBudget, BudgetItem, BudgetItemType, BudgetItemStatus
from backend.app.services.status_service import (
    classify, compute_status, status_sort_key, sort_items_by_status
)

TODAY = date(2024, 3, 10)


def build_item(item_type=BudgetItemType.PAYMENT, is_paid=False, due_day=None, month=3, year=2024, name="Bill"):
    """Unsaved item attached to an unsaved budget of the given period"""
    item = BudgetItem(item_type=item_type, is_paid=is_paid, due_day=due_day, name=name)
    item.budget = MonthlyBudget(user_id="user", month=month, year=year)
    return item


@pytest.mark.parametrize("due_day, expected", [
    (5, BudgetItemStatus.OVERDUE),
    (10, BudgetItemStatus.DUE_TODAY),
    (15, BudgetItemStatus.UPCOMING),
    (17, BudgetItemStatus.UPCOMING),
    (18, BudgetItemStatus.UNPAID),
    (25, BudgetItemStatus.UNPAID),
])
def test_current_month_due_day_rules(due_day, expected):
    """Overdue, due today, inside the 7 day window, or plain unpaid"""
    assert classify(build_item(due_day=due_day), TODAY) == expected


def test_missing_due_day_defaults_to_end_of_month():
    # 31 - 10 = 21 days away
    assert classify(build_item(due_day=None), TODAY) == BudgetItemStatus.UNPAID
    assert classify(build_item(due_day=None), date(2024, 3, 28)) == BudgetItemStatus.UPCOMING


@pytest.mark.parametrize("month, year", [(4, 2024), (1, 2025), (12, 2024)])
def test_future_period_is_upcoming(month, year):
    for due_day in (1, 10, 31, None):
        item = build_item(due_day=due_day, month=month, year=year)
        assert classify(item, TODAY) == BudgetItemStatus.UPCOMING


@pytest.mark.parametrize("month, year", [(2, 2024), (12, 2023), (6, 2023)])
def test_past_period_is_overdue(month, year):
    for due_day in (1, 28, 31, None):
        item = build_item(due_day=due_day, month=month, year=year)
        assert classify(item, TODAY) == BudgetItemStatus.OVERDUE


def test_limit_items_are_always_unpaid():
    for is_paid in (True, False):
        for due_day in (None, 1, 10, 31):
            for month, year in ((3, 2024), (1, 2020), (8, 2030)):
                item = build_item(BudgetItemType.LIMIT, is_paid=is_paid, due_day=due_day, month=month, year=year)
                assert classify(item, TODAY) == BudgetItemStatus.UNPAID


def test_paid_payment_items_are_paid_in_any_period():
    for due_day in (None, 1, 10, 31):
        for month, year in ((3, 2024), (1, 2020), (8, 2030)):
            item = build_item(is_paid=True, due_day=due_day, month=month, year=year)
            assert classify(item, TODAY) == BudgetItemStatus.PAID


def test_classify_is_deterministic():
    item = build_item(due_day=15)
    results = {classify(item, date(2024, 3, 10)) for _ in range(5)}
    assert results == {BudgetItemStatus.UPCOMING}


def test_compute_status_custom_window():
    status = compute_status(BudgetItemType.PAYMENT, False, 15, 3, 2024, TODAY, upcoming_window_days=3)
    assert status == BudgetItemStatus.UNPAID


def test_status_display_order():
    ordered = sorted(BudgetItemStatus, key=status_sort_key)
    assert ordered == [
        BudgetItemStatus.OVERDUE,
        BudgetItemStatus.DUE_TODAY,
        BudgetItemStatus.UPCOMING,
        BudgetItemStatus.UNPAID,
        BudgetItemStatus.PAID,
    ]
    assert status_sort_key("due_today") == 1


def test_sort_items_by_status():
    paid = build_item(is_paid=True, due_day=1, name="paid")
    unpaid = build_item(due_day=25, name="unpaid")
    overdue = build_item(due_day=5, name="overdue")
    due_today = build_item(due_day=10, name="due_today")

    result = sort_items_by_status([paid, unpaid, overdue, due_today], TODAY)

    assert [i.name for i in result] == ["overdue", "due_today", "unpaid", "paid"]


def test_classify_uses_configured_window_by_default():
    item = build_item(due_day=15)

    with patch("backend.app.services.status_service.get_settings",
               return_value=SimpleNamespace(upcoming_window_days=3)):
        assert classify(item, TODAY) == BudgetItemStatus.UNPAID

    with patch("backend.app.services.status_service.get_settings",
               return_value=SimpleNamespace(upcoming_window_days=7)):
        assert classify(item, TODAY) == BudgetItemStatus.UPCOMING


def test_sort_items_by_status_uses_configured_window():
    inside_default = build_item(due_day=15, name="inside_default")
    unpaid = build_item(due_day=12, name="unpaid")
    paid = build_item(is_paid=True, due_day=1, name="paid")

    with patch("backend.app.services.status_service.get_settings",
               return_value=SimpleNamespace(upcoming_window_days=1)):
        result = sort_items_by_status([inside_default, paid, unpaid], TODAY)

    # With a one day window neither bill counts as upcoming
    assert [i.name for i in result] == ["inside_default", "unpaid", "paid"]

    result = sort_items_by_status([inside_default, paid, unpaid], TODAY, upcoming_window_days=2)
    assert [i.name for i in result] == ["unpaid", "inside_default", "paid"]
