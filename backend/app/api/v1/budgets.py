from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Dict, Literal, Optional
from datetime import date

from backend.app.database import get_db_session
from backend.app.schemas.budgets import (
    BudgetItemCreate, BudgetItemUpdate, BudgetItemPayment, BudgetItemResponse,
    BudgetItemPaymentResponse, BudgetWithItemsResponse, MonthlyBudgetResponse, MonthlyBudgetUpdate
)
from backend.app.schemas.transactions import TransactionResponse
from backend.app.services.budget_service import (
    get_budget_with_items, update_budget_notes, create_budget_item,
    update_budget_item, delete_budget_item, describe_item
)
from backend.app.services.payment_service import mark_paid

router = APIRouter()

def get_today() -> date:
    """Reference date for item statuses and default periods"""
    return date.today()

@router.get("/", response_model=BudgetWithItemsResponse)
def get_budget_endpoint(
    user_id: str = Query(..., description="ID of the user"),
    month: Optional[int] = Query(None, ge=1, le=12, description="Month (1-12)"),
    year: Optional[int] = Query(None, ge=2000, le=2100, description="Year"),
    item_type: Optional[Literal["limit", "payment", "all"]] = Query(None, description="Item type filter"),
    status: Optional[Literal["paid", "unpaid", "overdue", "due_today", "upcoming", "all"]] = Query(
        None, description="Status filter"
    ),
    today: date = Depends(get_today),
    db: Session = Depends(get_db_session)
):
    """
    Get the monthly budget with its items, creating it on first access
    """
    return get_budget_with_items(
        db, user_id, month or today.month, year or today.year, today,
        item_type=item_type, status=status
    )

@router.patch("/", response_model=MonthlyBudgetResponse)
def update_budget_notes_endpoint(
    budget_update: MonthlyBudgetUpdate,
    user_id: str = Query(..., description="ID of the user"),
    month: Optional[int] = Query(None, ge=1, le=12, description="Month (1-12)"),
    year: Optional[int] = Query(None, ge=2000, le=2100, description="Year"),
    today: date = Depends(get_today),
    db: Session = Depends(get_db_session)
):
    """
    Update the notes of a monthly budget
    """
    return update_budget_notes(db, user_id, month or today.month, year or today.year, budget_update)

@router.post("/items", response_model=BudgetItemResponse)
def create_budget_item_endpoint(
    item_data: BudgetItemCreate,
    user_id: str = Query(..., description="ID of the user"),
    today: date = Depends(get_today),
    db: Session = Depends(get_db_session)
):
    """
    Create a spending limit or payment item in a monthly budget
    """
    item = create_budget_item(db, user_id, item_data, today)
    return describe_item(db, item, today)

@router.patch("/items/{item_id}", response_model=BudgetItemResponse)
def update_budget_item_endpoint(
    item_id: str,
    item_update: BudgetItemUpdate,
    user_id: str = Query(..., description="ID of the user"),
    today: date = Depends(get_today),
    db: Session = Depends(get_db_session)
):
    """
    Update fields of a budget item
    """
    item = update_budget_item(db, user_id, item_id, item_update)
    return describe_item(db, item, today)

@router.delete("/items/{item_id}", response_model=Dict[str, bool])
def delete_budget_item_endpoint(
    item_id: str,
    user_id: str = Query(..., description="ID of the user"),
    db: Session = Depends(get_db_session)
):
    """
    Delete a budget item
    """
    return delete_budget_item(db, user_id, item_id)

@router.post("/items/{item_id}/pay", response_model=BudgetItemPaymentResponse)
def pay_budget_item_endpoint(
    item_id: str,
    payment: BudgetItemPayment,
    user_id: str = Query(..., description="ID of the user"),
    today: date = Depends(get_today),
    db: Session = Depends(get_db_session)
):
    """
    Mark a payment item as paid, recording the matching transaction
    """
    item = mark_paid(db, user_id, item_id, payment)
    return BudgetItemPaymentResponse(
        item=describe_item(db, item, today),
        transaction=TransactionResponse.model_validate(item.transaction)
    )
