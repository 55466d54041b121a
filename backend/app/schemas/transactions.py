from pydantic import BaseModel
from typing import Optional
from datetime import datetime, date
from decimal import Decimal

from backend.app.models.models import TransactionType

class TransactionCreate(BaseModel):
    user_id: str
    type: TransactionType
    account_id: Optional[str] = None
    category_id: Optional[str] = None
    amount: Decimal
    description: Optional[str] = None
    notes: Optional[str] = None
    date: date

class TransactionResponse(BaseModel):
    id: str
    user_id: str
    type: TransactionType
    account_id: Optional[str] = None
    category_id: Optional[str] = None
    amount: Decimal
    description: Optional[str] = None
    notes: Optional[str] = None
    date: date
    created_at: datetime

    class Config:
        from_attributes = True
