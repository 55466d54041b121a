from sqlalchemy.orm import Session
from typing import Optional

from backend.app.models.models import Category
from backend.app.exceptions import InvalidInputError

def find_user_category(db: Session, user_id: str, category_id: str) -> Optional[Category]:
    """Get a category only if it belongs to the user"""
    return db.query(Category).filter(
        Category.id == category_id,
        Category.user_id == user_id
    ).first()

def ensure_user_category(db: Session, user_id: str, category_id: Optional[str]) -> Optional[Category]:
    """Validate an optional category reference coming from a request"""
    if not category_id:
        return None
    category = find_user_category(db, user_id, category_id)
    if not category:
        raise InvalidInputError(f"Invalid category {category_id}")
    return category
