import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from backend.app.config import get_settings
from backend.app.models.models import BudgetItem, BudgetItemType, BudgetItemStatus
from backend.app.schemas.budgets import (
    BudgetItemCreate, BudgetItemUpdate, MonthlyBudgetUpdate, BudgetItemResponse,
    MonthlyBudgetResponse, BudgetSummary, LimitsSummary, PaymentsSummary, BudgetWithItemsResponse
)
from backend.app.exceptions import NotFoundError, InvalidInputError
from backend.app.services import obligation_store as store
from backend.app.services.rollover_service import get_or_create_budget
from backend.app.services.status_service import classify
from backend.app.services.spending_service import spending_by_category, actual_spent, limit_progress, ZERO
from backend.app.services.category_service import ensure_user_category
from backend.app.services.account_service import ensure_user_account

logger = logging.getLogger(__name__)

ALL = "all"

def annotate_item(item: BudgetItem, today: date, spending: Dict[str, Decimal],
                  upcoming_window_days: int) -> BudgetItemResponse:
    """Attach the derived status and, for limits, the spending figures"""
    response = BudgetItemResponse.model_validate(item)
    response.status = classify(item, today, upcoming_window_days=upcoming_window_days)

    if item.item_type == BudgetItemType.LIMIT:
        spent = spending.get(item.category_id, ZERO) if item.category_id else ZERO
        progress = limit_progress(item.amount, spent)
        response.actual_spent = spent
        response.remaining = progress.remaining
        response.is_over_budget = progress.is_over_budget
        response.percent_used = progress.percent_used
    return response

def describe_item(db: Session, item: BudgetItem, today: date) -> BudgetItemResponse:
    """Annotate a single item, reading spending only for its own category"""
    spending = {}
    if item.item_type == BudgetItemType.LIMIT and item.category_id:
        spending[item.category_id] = actual_spent(db, item)
    return annotate_item(item, today, spending, get_settings().upcoming_window_days)

def summarize(items: List[BudgetItemResponse], month: int, year: int) -> BudgetSummary:
    limits = [i for i in items if i.item_type == BudgetItemType.LIMIT]
    payments = [i for i in items if i.item_type == BudgetItemType.PAYMENT]
    paid = [i for i in payments if i.status == BudgetItemStatus.PAID]
    unpaid = [i for i in payments if i.status != BudgetItemStatus.PAID]

    limits_total = sum((i.amount for i in limits), ZERO)
    limits_spent = sum((i.actual_spent for i in limits), ZERO)

    return BudgetSummary(
        month=month,
        year=year,
        total_budgeted=sum((i.amount for i in items), ZERO),
        total_spent=limits_spent,
        remaining=limits_total - limits_spent,
        limits=LimitsSummary(total=limits_total, spent=limits_spent, count=len(limits)),
        payments=PaymentsSummary(
            total=sum((i.amount for i in payments), ZERO),
            paid=len(paid),
            unpaid=len(unpaid),
            overdue=len([i for i in payments if i.status == BudgetItemStatus.OVERDUE]),
            # Items paid without an amount count at their budgeted amount
            paid_amount=sum((i.paid_amount or i.amount for i in paid), ZERO),
            unpaid_amount=sum((i.amount for i in unpaid), ZERO)
        )
    )

def get_budget_with_items(db: Session, user_id: str, month: int, year: int, today: date,
                          item_type: Optional[str] = None,
                          status: Optional[str] = None) -> BudgetWithItemsResponse:
    """Get or create the month's budget and return its annotated items with a summary"""
    budget = get_or_create_budget(db, user_id, month, year)
    window_days = get_settings().upcoming_window_days

    spending = spending_by_category(db, user_id, month, year)
    items = [
        annotate_item(item, today, spending, window_days)
        for item in store.list_items(db, budget.id)
    ]

    if item_type and item_type != ALL:
        items = [i for i in items if i.item_type == item_type]
    if status and status != ALL:
        items = [i for i in items if i.status == status]

    return BudgetWithItemsResponse(
        budget=MonthlyBudgetResponse.model_validate(budget),
        items=items,
        limits=[i for i in items if i.item_type == BudgetItemType.LIMIT],
        payments=[i for i in items if i.item_type == BudgetItemType.PAYMENT],
        summary=summarize(items, month, year),
        month=month,
        year=year
    )

def update_budget_notes(db: Session, user_id: str, month: int, year: int,
                        budget_update: MonthlyBudgetUpdate):
    budget = get_or_create_budget(db, user_id, month, year)
    with store.atomic(db):
        budget.notes = budget_update.notes
    db.refresh(budget)
    return budget

def create_budget_item(db: Session, user_id: str, item_data: BudgetItemCreate, today: date) -> BudgetItem:
    """Create an item in the requested month, defaulting to the current one"""
    month = item_data.month or today.month
    year = item_data.year or today.year

    if item_data.item_type == BudgetItemType.LIMIT and not item_data.category_id:
        raise InvalidInputError("A spending limit needs a category")
    ensure_user_category(db, user_id, item_data.category_id)
    ensure_user_account(db, user_id, item_data.account_id)

    budget = get_or_create_budget(db, user_id, month, year)

    fields = item_data.model_dump(exclude={"month", "year"})
    with store.atomic(db):
        item = store.insert_items(db, budget.id, [BudgetItem(user_id=user_id, **fields)])[0]
    db.refresh(item)
    logger.info("Created %s item %s in budget %s", item.item_type.value, item.id, budget.id)
    return item

def get_user_item(db: Session, user_id: str, item_id: str) -> BudgetItem:
    item = store.find_item(db, item_id, user_id=user_id)
    if not item:
        raise NotFoundError(f"Budget item with id {item_id} not found")
    return item

def update_budget_item(db: Session, user_id: str, item_id: str, item_update: BudgetItemUpdate) -> BudgetItem:
    item = get_user_item(db, user_id, item_id)
    patch = item_update.model_dump(exclude_unset=True)

    ensure_user_category(db, user_id, patch.get("category_id"))
    ensure_user_account(db, user_id, patch.get("account_id"))

    item_type = patch.get("item_type", item.item_type)
    category_id = patch["category_id"] if "category_id" in patch else item.category_id
    if item_type == BudgetItemType.LIMIT and not category_id:
        raise InvalidInputError("A spending limit needs a category")

    with store.atomic(db):
        store.update_item(db, item.id, patch)
    db.refresh(item)
    return item

def delete_budget_item(db: Session, user_id: str, item_id: str) -> Dict[str, bool]:
    item = get_user_item(db, user_id, item_id)
    with store.atomic(db):
        store.delete_item(db, item)
    logger.info("Deleted budget item %s", item_id)
    return {"success": True}
