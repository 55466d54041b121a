from typing import List, Optional, Literal
from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, Field, field_validator

from backend.app.models.models import BudgetItemType, BudgetItemStatus
from backend.app.schemas.transactions import TransactionResponse

PaymentType = Literal["needs", "wants", "savings", "investments"]

class BudgetItemBase(BaseModel):
    item_type: BudgetItemType
    category_id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=100)
    amount: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2)
    due_day: Optional[int] = Field(None, ge=1, le=31)
    is_recurring: bool = False
    account_id: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=1000)

class BudgetItemCreate(BudgetItemBase):
    # Defaults to the current month when omitted
    month: Optional[int] = Field(None, ge=1, le=12)
    year: Optional[int] = Field(None, ge=2000, le=2100)

class BudgetItemUpdate(BaseModel):
    item_type: Optional[BudgetItemType] = None
    category_id: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=15, decimal_places=2)
    due_day: Optional[int] = Field(None, ge=1, le=31)
    is_recurring: Optional[bool] = None
    account_id: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("item_type", "name", "amount", "is_recurring")
    @classmethod
    def reject_null(cls, value, info):
        # These columns are NOT NULL; omit the field to leave it unchanged
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value

class BudgetItemPayment(BaseModel):
    type: PaymentType
    paid_date: date
    paid_amount: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2)
    account_id: str

class MonthlyBudgetUpdate(BaseModel):
    notes: Optional[str] = Field(None, max_length=1000)

class MonthlyBudgetResponse(BaseModel):
    id: str
    user_id: str
    month: int
    year: int
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

class BudgetItemResponse(BudgetItemBase):
    id: str
    budget_id: str
    user_id: str
    is_paid: bool = False
    paid_date: Optional[date] = None
    paid_amount: Optional[Decimal] = None
    transaction_id: Optional[str] = None
    created_at: datetime

    # Derived on every read
    status: BudgetItemStatus = BudgetItemStatus.UNPAID
    actual_spent: Decimal = Decimal("0")
    remaining: Optional[Decimal] = None
    is_over_budget: Optional[bool] = None
    percent_used: Optional[Decimal] = None

    class Config:
        from_attributes = True

class BudgetItemPaymentResponse(BaseModel):
    item: BudgetItemResponse
    transaction: TransactionResponse

class LimitsSummary(BaseModel):
    total: Decimal
    spent: Decimal
    count: int

class PaymentsSummary(BaseModel):
    total: Decimal
    paid: int
    unpaid: int
    overdue: int
    paid_amount: Decimal
    unpaid_amount: Decimal

class BudgetSummary(BaseModel):
    month: int
    year: int
    total_budgeted: Decimal
    total_spent: Decimal
    remaining: Decimal
    limits: LimitsSummary
    payments: PaymentsSummary

class BudgetWithItemsResponse(BaseModel):
    budget: MonthlyBudgetResponse
    items: List[BudgetItemResponse]
    limits: List[BudgetItemResponse]
    payments: List[BudgetItemResponse]
    summary: BudgetSummary
    month: int
    year: int
