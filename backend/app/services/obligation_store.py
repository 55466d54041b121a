"""
Persistence boundary for monthly budgets and their items.

Functions here only add and flush; committing is owned by the caller through
``atomic`` so a multi-step operation lands in a single database transaction.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from backend.app.models.models import MonthlyBudget, BudgetItem, BudgetItemType

logger = logging.getLogger(__name__)


@contextmanager
def atomic(db: Session):
    """Commit everything done inside the block, or roll all of it back"""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        logger.warning("Rolled back budget transaction")
        raise


def find_budget(db: Session, user_id: str, month: int, year: int) -> Optional[MonthlyBudget]:
    return db.query(MonthlyBudget).filter(
        MonthlyBudget.user_id == user_id,
        MonthlyBudget.month == month,
        MonthlyBudget.year == year
    ).first()


def create_budget(db: Session, user_id: str, month: int, year: int, notes: Optional[str] = None) -> MonthlyBudget:
    budget = MonthlyBudget(user_id=user_id, month=month, year=year, notes=notes)
    db.add(budget)
    db.flush()
    return budget


def list_recurring_items(db: Session, budget_id: str) -> List[BudgetItem]:
    return db.query(BudgetItem).filter(
        BudgetItem.budget_id == budget_id,
        BudgetItem.is_recurring == True
    ).all()


def insert_items(db: Session, budget_id: str, items: Iterable[BudgetItem]) -> List[BudgetItem]:
    inserted = []
    for item in items:
        item.budget_id = budget_id
        db.add(item)
        inserted.append(item)
    db.flush()
    return inserted


def find_item(db: Session, item_id: str, user_id: Optional[str] = None) -> Optional[BudgetItem]:
    """Find an item, restricted to the owner of its budget when user_id is given"""
    query = db.query(BudgetItem).filter(BudgetItem.id == item_id)
    if user_id is not None:
        query = query.join(MonthlyBudget, BudgetItem.budget_id == MonthlyBudget.id)\
            .filter(MonthlyBudget.user_id == user_id)
    return query.first()


def update_item(db: Session, item_id: str, patch: Dict[str, Any]) -> Optional[BudgetItem]:
    item = db.query(BudgetItem).filter(BudgetItem.id == item_id).first()
    if item is None:
        return None
    for key, value in patch.items():
        setattr(item, key, value)
    db.flush()
    return item


def list_items(db: Session, budget_id: str, item_type: Optional[BudgetItemType] = None) -> List[BudgetItem]:
    """Items of a budget, newest first"""
    query = db.query(BudgetItem).filter(BudgetItem.budget_id == budget_id)
    if item_type is not None:
        query = query.filter(BudgetItem.item_type == item_type)
    return query.order_by(BudgetItem.created_at.desc()).all()


def delete_item(db: Session, item: BudgetItem) -> None:
    db.delete(item)
    db.flush()
