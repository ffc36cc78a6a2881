from sqlalchemy.orm import Session, selectinload

from .models import Borrowing, Budget, Expense, Lending, User

# Columns a partial update may set to null
NULLABLE_FIELDS = {"notes", "repaid_date"}


def apply_changes(db: Session, record, changes: dict):
    for field, value in changes.items():
        if value is None and field not in NULLABLE_FIELDS:
            continue
        setattr(record, field, value)
    db.commit()
    db.refresh(record)
    return record


def delete_record(db: Session, record):
    db.delete(record)
    db.commit()


def _filter_dates(query, model, start_date, end_date):
    if start_date:
        query = query.filter(model.date >= start_date)
    if end_date:
        query = query.filter(model.date <= end_date)
    return query


# Users
def get_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == email).first()


def get_user(db: Session, user_id: int):
    return db.query(User).filter(User.id == user_id).first()


def create_user(db: Session, name: str, email: str, password_hash: str):
    user = User(name=name, email=email, password=password_hash)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


# Budgets
def get_budget(db: Session, budget_id: int, user_id: int, with_records: bool = False):
    query = db.query(Budget).filter(Budget.id == budget_id, Budget.user_id == user_id)
    if with_records:
        query = query.options(
            selectinload(Budget.expenses),
            selectinload(Budget.borrowings),
            selectinload(Budget.lendings),
        )
    return query.first()


def get_budget_for_period(db: Session, user_id: int, year: int, month_number: int):
    return db.query(Budget).filter_by(user_id=user_id, year=year, month_number=month_number).first()


def list_budgets(db: Session, user_id: int):
    return (
        db.query(Budget)
        .options(
            selectinload(Budget.expenses),
            selectinload(Budget.borrowings),
            selectinload(Budget.lendings),
        )
        .filter(Budget.user_id == user_id)
        .order_by(Budget.year.desc(), Budget.month_number.desc())
        .all()
    )


def create_budget(db: Session, user_id: int, year: int, month_number: int, income: float):
    budget = Budget(user_id=user_id, year=year, month_number=month_number, income=income)
    db.add(budget)
    db.commit()
    db.refresh(budget)
    return budget


# Expenses
def get_expense(db: Session, expense_id: int, user_id: int):
    return db.query(Expense).filter(Expense.id == expense_id, Expense.user_id == user_id).first()


def list_expenses(db: Session, user_id: int, budget_id=None, category=None, start_date=None, end_date=None):
    query = db.query(Expense).filter(Expense.user_id == user_id)
    if budget_id is not None:
        query = query.filter(Expense.budget_id == budget_id)
    if category:
        query = query.filter(Expense.category == category)
    query = _filter_dates(query, Expense, start_date, end_date)
    return query.order_by(Expense.date.desc(), Expense.id.desc()).all()


def create_expense(db: Session, user_id: int, budget_id: int, name: str, category: str, amount: float,
                   date, notes: str = None):
    expense = Expense(
        user_id=user_id,
        budget_id=budget_id,
        name=name,
        category=category,
        amount=amount,
        date=date,
        notes=notes,
    )
    db.add(expense)
    db.commit()
    db.refresh(expense)
    return expense


def find_expense(db: Session, user_id: int, budget_id: int, name: str, amount: float):
    """Look up an expense by its owner, budget, name and amount."""
    return (
        db.query(Expense)
        .filter(
            Expense.user_id == user_id,
            Expense.budget_id == budget_id,
            Expense.name == name,
            Expense.amount == amount,
        )
        .order_by(Expense.id.desc())
        .first()
    )


# Borrowings
def get_borrowing(db: Session, borrowing_id: int, user_id: int):
    return db.query(Borrowing).filter(Borrowing.id == borrowing_id, Borrowing.user_id == user_id).first()


def list_borrowings(db: Session, user_id: int, budget_id=None, is_repaid=None, start_date=None, end_date=None):
    query = db.query(Borrowing).filter(Borrowing.user_id == user_id)
    if budget_id is not None:
        query = query.filter(Borrowing.budget_id == budget_id)
    if is_repaid is not None:
        query = query.filter(Borrowing.is_repaid == is_repaid)
    query = _filter_dates(query, Borrowing, start_date, end_date)
    return query.order_by(Borrowing.date.desc(), Borrowing.id.desc()).all()


def create_borrowing(db: Session, user_id: int, budget_id: int, lender_name: str, amount: float, date,
                     notes: str = None):
    borrowing = Borrowing(
        user_id=user_id,
        budget_id=budget_id,
        lender_name=lender_name,
        amount=amount,
        date=date,
        notes=notes,
        is_repaid=False,
    )
    db.add(borrowing)
    db.commit()
    db.refresh(borrowing)
    return borrowing


# Lendings
def get_lending(db: Session, lending_id: int, user_id: int):
    return db.query(Lending).filter(Lending.id == lending_id, Lending.user_id == user_id).first()


def list_lendings(db: Session, user_id: int, budget_id=None, is_repaid=None, start_date=None, end_date=None):
    query = db.query(Lending).filter(Lending.user_id == user_id)
    if budget_id is not None:
        query = query.filter(Lending.budget_id == budget_id)
    if is_repaid is not None:
        query = query.filter(Lending.is_repaid == is_repaid)
    query = _filter_dates(query, Lending, start_date, end_date)
    return query.order_by(Lending.date.desc(), Lending.id.desc()).all()


def create_lending(db: Session, user_id: int, budget_id: int, borrower_name: str, amount: float, date,
                   notes: str = None):
    lending = Lending(
        user_id=user_id,
        budget_id=budget_id,
        borrower_name=borrower_name,
        amount=amount,
        date=date,
        notes=notes,
        is_repaid=False,
    )
    db.add(lending)
    db.commit()
    db.refresh(lending)
    return lending
