from sqlalchemy.orm import Session
from typing import Optional

from backend.app.models.models import Account
from backend.app.exceptions import InvalidInputError

def find_user_account(db: Session, user_id: str, account_id: str) -> Optional[Account]:
    """Get an account only if it belongs to the user"""
    return db.query(Account).filter(
        Account.id == account_id,
        Account.user_id == user_id
    ).first()

def ensure_user_account(db: Session, user_id: str, account_id: Optional[str]) -> Optional[Account]:
    """Validate an optional account reference coming from a request"""
    if not account_id:
        return None
    account = find_user_account(db, user_id, account_id)
    if not account:
        raise InvalidInputError(f"Invalid account {account_id}")
    return account
