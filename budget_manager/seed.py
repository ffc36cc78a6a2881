"""
Load sample data for local development.

    python -m budget_manager.seed

Wipes every table first, then creates a demo user with the current and
previous month's budgets, a handful of expenses, one borrowing and one
lending (with its automatic expense).
"""

from datetime import date

import structlog
from passlib.hash import bcrypt
from sqlalchemy.orm import Session

from . import crud, repayments
from .database import Base, SessionLocal, engine
from .logging_config import configure_logging
from .models import Borrowing, Budget, Expense, Lending, User

log = structlog.get_logger(__name__)

DEMO_EMAIL = "john.doe@example.com"
DEMO_PASSWORD = "password123"

SAMPLE_EXPENSES = [
    ("Grocery shopping", "Food & Dining", 3500, "Weekly groceries"),
    ("Metro card recharge", "Transportation", 1000, None),
    ("Electricity bill", "Bills & Utilities", 2200, "Monthly electricity"),
    ("Movie night", "Entertainment", 800, None),
    ("Gym membership", "Sports & Fitness", 1500, None),
]


def previous_period(year: int, month: int):
    if month == 1:
        return year - 1, 12
    return year, month - 1


def clear_data(db: Session):
    for model in (Expense, Borrowing, Lending, Budget, User):
        db.query(model).delete()
    db.commit()


def seed(db: Session, today: date = None):
    today = today or date.today()
    clear_data(db)

    user = crud.create_user(db, "John Doe", DEMO_EMAIL, bcrypt.hash(DEMO_PASSWORD))

    current = crud.create_budget(db, user.id, today.year, today.month, 75000)
    prev_year, prev_month = previous_period(today.year, today.month)
    previous = crud.create_budget(db, user.id, prev_year, prev_month, 72000)

    for day, (name, category, amount, notes) in enumerate(SAMPLE_EXPENSES, start=1):
        crud.create_expense(db, user.id, current.id, name, category, amount, today.replace(day=day), notes)
        crud.create_expense(db, user.id, previous.id, name, category, amount * 0.9,
                            date(prev_year, prev_month, day), notes)

    crud.create_borrowing(db, user.id, current.id, "Rahul", 5000, today.replace(day=1), "Emergency funds")
    repayments.record_lending(db, user.id, current.id, "Priya", 2000, today.replace(day=2), None)

    log.info("seed_complete", user_id=user.id, email=DEMO_EMAIL, budgets=2)
    return user


def main():
    configure_logging()
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
