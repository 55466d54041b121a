from uuid import uuid4
from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Column, String, Integer, DateTime, Numeric, Boolean, ForeignKey, Enum as PgEnum, Date, Text, UniqueConstraint
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

# --- ENUMS ---

class BudgetItemType(str, Enum):
    LIMIT = "limit"
    PAYMENT = "payment"

class BudgetItemStatus(str, Enum):
    """Derived lifecycle status of a budget item, never persisted"""
    PAID = "paid"
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    UPCOMING = "upcoming"
    UNPAID = "unpaid"

class TransactionType(str, Enum):
    INCOME = "income"
    NEEDS = "needs"
    WANTS = "wants"
    SAVINGS = "savings"
    INVESTMENTS = "investments"

class AccountType(str, Enum):
    BANK = "bank"
    CASH = "cash"
    CREDIT_CARD = "credit_card"
    WALLET = "wallet"

# --- SQLALCHEMY MODELS ---

class User(Base):
    __tablename__ = "users"
    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    email = Column(String, unique=True, nullable=False)
    display_name = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    monthly_budgets = relationship("MonthlyBudget", back_populates="user")

class Category(Base):
    __tablename__ = "categories"

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    name = Column(String(100), nullable=False)
    icon = Column(String(50), nullable=True, default="circle")
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    transactions = relationship("Transaction", back_populates="category")

class Account(Base):
    __tablename__ = "accounts"
    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    name = Column(String(100), nullable=False)
    type = Column(PgEnum(AccountType), default=AccountType.BANK)
    balance = Column(Numeric(15, 2), default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    transactions = relationship("Transaction", back_populates="account")

class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    type = Column(PgEnum(TransactionType), nullable=False)
    account_id = Column(String, ForeignKey("accounts.id"), nullable=True)
    category_id = Column(String, ForeignKey("categories.id"), nullable=True)
    amount = Column(Numeric(15, 2), nullable=False)
    description = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    account = relationship("Account", back_populates="transactions")
    category = relationship("Category", back_populates="transactions")

class MonthlyBudget(Base):
    """One budget per user and calendar month, created on first access"""
    __tablename__ = "monthly_budgets"
    __table_args__ = (
        UniqueConstraint("user_id", "month", "year", name="uq_monthly_budget_user_period"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    month = Column(Integer, nullable=False)  # 1-12
    year = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="monthly_budgets")
    items = relationship("BudgetItem", back_populates="budget", cascade="all, delete-orphan")

class BudgetItem(Base):
    """A spending limit or an expected payment inside a monthly budget"""
    __tablename__ = "budget_items"

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    budget_id = Column(String, ForeignKey("monthly_budgets.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    item_type = Column(PgEnum(BudgetItemType), nullable=False)
    category_id = Column(String, ForeignKey("categories.id"), nullable=True)
    name = Column(String(100), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    due_day = Column(Integer, nullable=True)  # 1-31, payments only
    is_recurring = Column(Boolean, default=False)

    # Payment state
    is_paid = Column(Boolean, default=False)
    paid_date = Column(Date, nullable=True)
    paid_amount = Column(Numeric(15, 2), nullable=True)
    account_id = Column(String, ForeignKey("accounts.id"), nullable=True)
    transaction_id = Column(String, ForeignKey("transactions.id"), nullable=True)

    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    budget = relationship("MonthlyBudget", back_populates="items")
    category = relationship("Category")
    account = relationship("Account")
    transaction = relationship("Transaction")
