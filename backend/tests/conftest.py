import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient
from datetime import date
from decimal import Decimal
import os
from uuid import uuid4

from backend.app.models.models import (
    Base, User, Category, Account, Transaction, MonthlyBudget, BudgetItem,
    BudgetItemType, TransactionType
)
from backend.app.database import get_db_session
from backend.app.api.v1.budgets import get_today
from backend.app.main import app

# Use a test database
TEST_DATABASE_URL = "sqlite:///./test.db"

@pytest.fixture(scope="session")
def db_engine():
    engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    yield engine
    # Teardown - drop all tables
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if os.path.exists("./test.db"):
        os.remove("./test.db")

@pytest.fixture(scope="function")
def db_session(db_engine):
    """Returns a fresh SQLAlchemy session for each test"""
    Session = sessionmaker(bind=db_engine)
    session = Session()

    # Clear out test data from previous run
    session.query(BudgetItem).delete()
    session.query(MonthlyBudget).delete()
    session.query(Transaction).delete()
    session.query(Account).delete()
    session.query(Category).delete()
    session.query(User).delete()
    session.commit()

    yield session
    session.close()

@pytest.fixture
def today():
    """Pinned reference date for statuses"""
    return date(2024, 3, 10)

@pytest.fixture
def client(db_session, today):
    """Test client fixture that uses the db_session fixture"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db_session] = override_get_db
    app.dependency_overrides[get_today] = lambda: today
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

@pytest.fixture
def test_user(db_session):
    """Creates a test user and returns it"""
    user = User(
        id=str(uuid4()),
        email="test@example.com",
        display_name="Test User"
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user

@pytest.fixture
def other_user(db_session):
    """A second user who must never see the first user's data"""
    user = User(
        id=str(uuid4()),
        email="other@example.com",
        display_name="Other User"
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user

@pytest.fixture
def test_category(db_session, test_user):
    """Creates a test category and returns it"""
    category = Category(
        id=str(uuid4()),
        user_id=test_user.id,
        name="Groceries",
        icon="cart"
    )
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category

@pytest.fixture
def test_account(db_session, test_user):
    """Creates a test account and returns it"""
    account = Account(
        id=str(uuid4()),
        user_id=test_user.id,
        name="Salary Account",
        balance=Decimal("50000.00")
    )
    db_session.add(account)
    db_session.commit()
    db_session.refresh(account)
    return account

@pytest.fixture
def make_budget(db_session, test_user):
    """Factory for a stored monthly budget of the test user"""
    def _make_budget(month, year, user_id=None):
        budget = MonthlyBudget(user_id=user_id or test_user.id, month=month, year=year)
        db_session.add(budget)
        db_session.commit()
        db_session.refresh(budget)
        return budget
    return _make_budget

@pytest.fixture
def make_item(db_session):
    """Factory for a stored budget item"""
    def _make_item(budget, **fields):
        values = {
            "item_type": BudgetItemType.PAYMENT,
            "name": "Rent",
            "amount": Decimal("15000.00"),
            "due_day": 5,
            "is_recurring": False,
        }
        values.update(fields)
        item = BudgetItem(budget_id=budget.id, user_id=budget.user_id, **values)
        db_session.add(item)
        db_session.commit()
        db_session.refresh(item)
        return item
    return _make_item

@pytest.fixture
def make_transaction(db_session, test_user):
    """Factory for a stored ledger transaction of the test user"""
    def _make_transaction(amount, on, category_id=None, user_id=None):
        transaction = Transaction(
            user_id=user_id or test_user.id,
            type=TransactionType.NEEDS,
            category_id=category_id,
            amount=Decimal(amount),
            description="Test purchase",
            date=on
        )
        db_session.add(transaction)
        db_session.commit()
        db_session.refresh(transaction)
        return transaction
    return _make_transaction
