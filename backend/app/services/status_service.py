from datetime import date
from typing import List, Optional, Sequence

from backend.app.config import get_settings
from backend.app.models.models import BudgetItem, BudgetItemType, BudgetItemStatus

DEFAULT_DUE_DAY = 31
UPCOMING_WINDOW_DAYS = 7

# Display order for mixed lists, most urgent first
STATUS_ORDER = {
    BudgetItemStatus.OVERDUE: 0,
    BudgetItemStatus.DUE_TODAY: 1,
    BudgetItemStatus.UPCOMING: 2,
    BudgetItemStatus.UNPAID: 3,
    BudgetItemStatus.PAID: 4,
}

def compute_status(
    item_type: BudgetItemType,
    is_paid: bool,
    due_day: Optional[int],
    month: int,
    year: int,
    today: date,
    upcoming_window_days: int = UPCOMING_WINDOW_DAYS
) -> BudgetItemStatus:
    """
    Status of an item in the budget period (month, year) as seen on `today`.

    Limits have no due-date lifecycle and always report UNPAID.
    """
    if item_type == BudgetItemType.LIMIT:
        return BudgetItemStatus.UNPAID
    if is_paid:
        return BudgetItemStatus.PAID

    period = (year, month)
    current = (today.year, today.month)
    if period > current:
        return BudgetItemStatus.UPCOMING
    if period < current:
        return BudgetItemStatus.OVERDUE

    due = due_day or DEFAULT_DUE_DAY
    if today.day > due:
        return BudgetItemStatus.OVERDUE
    if today.day == due:
        return BudgetItemStatus.DUE_TODAY
    if due - today.day <= upcoming_window_days:
        return BudgetItemStatus.UPCOMING
    return BudgetItemStatus.UNPAID

def classify(item: BudgetItem, today: date, upcoming_window_days: Optional[int] = None) -> BudgetItemStatus:
    """Status of a stored item, using its budget's period and the configured look-ahead window"""
    if upcoming_window_days is None:
        upcoming_window_days = get_settings().upcoming_window_days
    return compute_status(
        item.item_type,
        bool(item.is_paid),
        item.due_day,
        item.budget.month,
        item.budget.year,
        today,
        upcoming_window_days=upcoming_window_days
    )

def status_sort_key(status: BudgetItemStatus) -> int:
    return STATUS_ORDER[BudgetItemStatus(status)]

def sort_items_by_status(items: Sequence[BudgetItem], today: date,
                         upcoming_window_days: Optional[int] = None) -> List[BudgetItem]:
    if upcoming_window_days is None:
        upcoming_window_days = get_settings().upcoming_window_days
    # sorted() is stable, so items sharing a status keep their incoming order
    return sorted(
        items,
        key=lambda item: status_sort_key(classify(item, today, upcoming_window_days=upcoming_window_days))
    )
