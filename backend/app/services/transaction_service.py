import logging
from decimal import Decimal
from sqlalchemy.orm import Session
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from typing import Dict, Optional
from datetime import date

from backend.app.models.models import Transaction
from backend.app.schemas.transactions import TransactionCreate
from backend.app.exceptions import UpstreamFailureError

logger = logging.getLogger(__name__)

def record_transaction(db: Session, transaction: TransactionCreate) -> Transaction:
    """
    Append a transaction to the ledger.

    The row is flushed, not committed, so it joins the caller's unit of work.
    """
    db_transaction = Transaction(
        user_id=transaction.user_id,
        type=transaction.type,
        account_id=transaction.account_id,
        category_id=transaction.category_id,
        amount=transaction.amount,
        description=transaction.description,
        notes=transaction.notes,
        date=transaction.date
    )
    try:
        db.add(db_transaction)
        db.flush()
    except SQLAlchemyError as exc:
        logger.error("Ledger rejected transaction for user %s: %s", transaction.user_id, exc)
        raise UpstreamFailureError("Failed to record transaction") from exc
    return db_transaction

def sum_by_category(db: Session, user_id: str, start_date: date, end_date: date,
                    category_id: Optional[str] = None) -> Dict[Optional[str], Decimal]:
    """Total transaction amount per category between two dates, both inclusive"""
    query = db.query(
        Transaction.category_id,
        func.sum(Transaction.amount)
    ).filter(
        Transaction.user_id == user_id,
        Transaction.date >= start_date,
        Transaction.date <= end_date
    )
    if category_id is not None:
        query = query.filter(Transaction.category_id == category_id)

    try:
        rows = query.group_by(Transaction.category_id).all()
    except SQLAlchemyError as exc:
        logger.error("Failed to read transactions for user %s: %s", user_id, exc)
        raise UpstreamFailureError("Failed to read transactions") from exc

    return {row_category: Decimal(str(total or 0)) for row_category, total in rows}

