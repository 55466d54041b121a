import logging
from typing import Tuple

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from backend.app.models.models import MonthlyBudget, BudgetItem
from backend.app.exceptions import ConflictOnCreateError, UpstreamFailureError
from backend.app.services import obligation_store as store

logger = logging.getLogger(__name__)

def previous_period(month: int, year: int) -> Tuple[int, int]:
    """The (month, year) immediately before the given one"""
    if month == 1:
        return 12, year - 1
    return month - 1, year

def clone_recurring_item(item: BudgetItem, budget: MonthlyBudget) -> BudgetItem:
    """Copy a recurring item into another budget with its payment state reset"""
    return BudgetItem(
        budget_id=budget.id,
        user_id=budget.user_id,
        item_type=item.item_type,
        category_id=item.category_id,
        name=item.name,
        amount=item.amount,
        due_day=item.due_day,
        is_recurring=True,
        is_paid=False,
        paid_date=None,
        paid_amount=None,
        account_id=item.account_id,
        transaction_id=None,
        notes=item.notes
    )

def _create_with_rollover(db: Session, user_id: str, month: int, year: int) -> MonthlyBudget:
    with store.atomic(db):
        try:
            budget = store.create_budget(db, user_id, month, year)
        except IntegrityError as exc:
            # Only the budget insert can hit the unique (user, month, year) constraint
            raise ConflictOnCreateError() from exc

        prev_month, prev_year = previous_period(month, year)
        prev_budget = store.find_budget(db, user_id, prev_month, prev_year)
        cloned = []
        if prev_budget:
            recurring = store.list_recurring_items(db, prev_budget.id)
            cloned = store.insert_items(db, budget.id, [clone_recurring_item(item, budget) for item in recurring])

    db.refresh(budget)
    logger.info("Created budget %s for user %s %02d/%d with %d recurring items",
                budget.id, user_id, month, year, len(cloned))
    return budget

def get_or_create_budget(db: Session, user_id: str, month: int, year: int) -> MonthlyBudget:
    """
    Get the budget of a user for a month, creating it on first access.

    A new budget receives clones of the previous month's recurring items.
    Creation and cloning commit together or not at all. When a concurrent
    request wins the unique (user, month, year) constraint, the budget it
    created is fetched and returned instead.
    """
    budget = store.find_budget(db, user_id, month, year)
    if budget:
        return budget

    try:
        return _create_with_rollover(db, user_id, month, year)
    except ConflictOnCreateError:
        logger.warning("Concurrent creation of budget for user %s %02d/%d, re-fetching", user_id, month, year)
        budget = store.find_budget(db, user_id, month, year)
        if budget:
            return budget
        raise
    except SQLAlchemyError as exc:
        raise UpstreamFailureError("Failed to create monthly budget") from exc
