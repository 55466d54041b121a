import logging
from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from backend.app.config import get_settings
from backend.app.models.models import BudgetItem, BudgetItemType, TransactionType
from backend.app.schemas.budgets import BudgetItemPayment
from backend.app.schemas.transactions import TransactionCreate
from backend.app.exceptions import NotFoundError, InvalidInputError, UpstreamFailureError
from backend.app.services import obligation_store as store
from backend.app.services.account_service import ensure_user_account
from backend.app.services.transaction_service import record_transaction

logger = logging.getLogger(__name__)

def mark_paid(db: Session, user_id: str, item_id: str, payment: BudgetItemPayment,
              allow_repayment: Optional[bool] = None) -> BudgetItem:
    """
    Record the payment of a budget payment item.

    Writes a transaction to the ledger and links it to the item. Both writes
    commit together; on any failure the item is left exactly as it was.
    """
    if allow_repayment is None:
        allow_repayment = get_settings().allow_repayment

    item = store.find_item(db, item_id, user_id=user_id)
    if not item:
        raise NotFoundError(f"Budget item with id {item_id} not found")

    if item.item_type != BudgetItemType.PAYMENT:
        raise InvalidInputError("Only payment items can be marked as paid")

    if item.is_paid and not allow_repayment:
        raise InvalidInputError("This item is already marked as paid")

    ensure_user_account(db, user_id, payment.account_id)

    budget = item.budget
    try:
        with store.atomic(db):
            transaction = record_transaction(db, TransactionCreate(
                user_id=user_id,
                type=TransactionType(payment.type),
                account_id=payment.account_id,
                category_id=item.category_id,
                amount=payment.paid_amount,
                description=item.name,
                notes=f"Budget payment for {budget.month}/{budget.year}",
                date=payment.paid_date
            ))
            store.update_item(db, item.id, {
                "is_paid": True,
                "paid_date": payment.paid_date,
                "paid_amount": payment.paid_amount,
                "account_id": payment.account_id,
                "transaction_id": transaction.id
            })
    except SQLAlchemyError as exc:
        raise UpstreamFailureError("Failed to record payment") from exc

    db.refresh(item)
    logger.info("Recorded payment of %s for budget item %s with transaction %s",
                payment.paid_amount, item.id, transaction.id)
    return item
