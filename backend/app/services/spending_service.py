import calendar
from collections import namedtuple
from datetime import date
from decimal import Decimal
from typing import Dict, Optional, Tuple

from sqlalchemy.orm import Session

from backend.app.models.models import BudgetItem, BudgetItemType
from backend.app.services.transaction_service import sum_by_category

ZERO = Decimal("0")

LimitProgress = namedtuple("LimitProgress", ["remaining", "is_over_budget", "percent_used"])

def month_window(month: int, year: int) -> Tuple[date, date]:
    """First and last day of a month, both inclusive"""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)

def actual_spent(db: Session, item: BudgetItem, month: Optional[int] = None, year: Optional[int] = None) -> Decimal:
    """
    Amount spent against a limit item during its budget month.

    Always computed from the transaction ledger, never stored on the item.
    Payment items and limits without a category report zero.
    """
    if item.item_type != BudgetItemType.LIMIT or not item.category_id:
        return ZERO

    month = month or item.budget.month
    year = year or item.budget.year
    start_date, end_date = month_window(month, year)
    totals = sum_by_category(db, item.budget.user_id, start_date, end_date, category_id=item.category_id)
    return totals.get(item.category_id, ZERO)

def spending_by_category(db: Session, user_id: str, month: int, year: int) -> Dict[str, Decimal]:
    """Spending per category for a whole month in one query"""
    start_date, end_date = month_window(month, year)
    totals = sum_by_category(db, user_id, start_date, end_date)
    return {category_id: total for category_id, total in totals.items() if category_id is not None}

def limit_progress(amount: Decimal, spent: Decimal) -> LimitProgress:
    amount = Decimal(amount)
    spent = Decimal(spent)
    percent_used = (spent / amount * 100) if amount > 0 else ZERO
    return LimitProgress(
        remaining=amount - spent,
        is_over_budget=spent > amount,
        percent_used=percent_used.quantize(Decimal("0.01"))
    )
