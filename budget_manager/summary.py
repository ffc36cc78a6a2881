from sqlalchemy import case, func
from sqlalchemy.orm import Session

from .models import Borrowing, Budget, Expense, Lending


def get_category_totals(db: Session, budget_id: int):
    """Sum of signed expense amounts per category for one budget"""
    rows = db.query(
        Expense.category,
        func.sum(Expense.amount).label("total")
    ).filter(
        Expense.budget_id == budget_id
    ).group_by(Expense.category).all()
    return {row.category: float(row.total) for row in rows}


def _outstanding(db: Session, model, budget_id: int):
    total, count = db.query(
        func.coalesce(func.sum(case((model.is_repaid.is_(False), model.amount), else_=0)), 0),
        func.count(model.id)
    ).filter(model.budget_id == budget_id).one()
    return float(total), count


def get_budget_summary(db: Session, budget: Budget):
    total_expenses, expense_count = db.query(
        func.coalesce(func.sum(Expense.amount), 0),
        func.count(Expense.id)
    ).filter(Expense.budget_id == budget.id).one()
    total_expenses = float(total_expenses)

    # Only loans still open count towards the totals
    total_borrowings, borrowing_count = _outstanding(db, Borrowing, budget.id)
    total_lendings, lending_count = _outstanding(db, Lending, budget.id)

    return {
        "income": budget.income,
        "total_expenses": total_expenses,
        "remaining": budget.income - total_expenses,
        "total_borrowings": total_borrowings,
        "total_lendings": total_lendings,
        "by_category": get_category_totals(db, budget.id),
        "expense_count": expense_count,
        "borrowing_count": borrowing_count,
        "lending_count": lending_count,
    }
