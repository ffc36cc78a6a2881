# budget_manager/expenses.py

import csv
from datetime import date
from io import StringIO
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from . import crud
from .auth import get_current_user
from .budgets import require_budget
from .categories import ExpenseCategory
from .database import get_db
from .schemas import ExpenseCreate, ExpenseOut, ExpenseUpdate

router = APIRouter(prefix="/api/expenses", tags=["expenses"])

log = structlog.get_logger(__name__)


def require_expense(db: Session, expense_id: int, user_id: int):
    expense = crud.get_expense(db, expense_id, user_id)
    if not expense:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Expense not found")
    return expense


def _filtered_expenses(db, user, budget_id, category, start_date, end_date):
    if budget_id is not None:
        require_budget(db, budget_id, user.id)
    return crud.list_expenses(
        db,
        user.id,
        budget_id=budget_id,
        category=category.value if category else None,
        start_date=start_date,
        end_date=end_date,
    )


@router.post("", status_code=status.HTTP_201_CREATED)
def create_expense(payload: ExpenseCreate, user=Depends(get_current_user), db: Session = Depends(get_db)):
    require_budget(db, payload.budget_id, user.id)
    expense = crud.create_expense(db, user_id=user.id, **payload.model_dump())
    log.info("expense_created", user_id=user.id, expense_id=expense.id, budget_id=expense.budget_id)
    return {"message": "Expense created successfully", "expense": ExpenseOut.model_validate(expense)}


@router.get("")
def list_expenses(
    budget_id: Optional[int] = Query(None, alias="budgetId"),
    category: Optional[ExpenseCategory] = None,
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    user=Depends(get_current_user),
    db: Session = Depends(get_db),
):
    expenses = _filtered_expenses(db, user, budget_id, category, start_date, end_date)
    return {"expenses": [ExpenseOut.model_validate(e) for e in expenses]}


@router.get("/export")
def export_csv(
    budget_id: Optional[int] = Query(None, alias="budgetId"),
    category: Optional[ExpenseCategory] = None,
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    user=Depends(get_current_user),
    db: Session = Depends(get_db),
):
    expenses = _filtered_expenses(db, user, budget_id, category, start_date, end_date)

    def generate():
        data = StringIO()
        writer = csv.writer(data)
        writer.writerow(["Date", "Name", "Category", "Amount", "Budget", "Notes"])
        for expense in expenses:
            period = f"{expense.budget.month_name} {expense.budget.year}"
            writer.writerow([expense.date, expense.name, expense.category, expense.amount, period,
                             expense.notes or ""])
        data.seek(0)
        return data

    return StreamingResponse(generate(), media_type="text/csv", headers={
        "Content-Disposition": "attachment; filename=expenses.csv"
    })


@router.get("/{expense_id}")
def get_expense(expense_id: int, user=Depends(get_current_user), db: Session = Depends(get_db)):
    expense = require_expense(db, expense_id, user.id)
    return {"expense": ExpenseOut.model_validate(expense)}


@router.put("/{expense_id}")
def update_expense(expense_id: int, payload: ExpenseUpdate, user=Depends(get_current_user),
                   db: Session = Depends(get_db)):
    expense = require_expense(db, expense_id, user.id)
    expense = crud.apply_changes(db, expense, payload.model_dump(exclude_unset=True))
    return {"message": "Expense updated successfully", "expense": ExpenseOut.model_validate(expense)}


@router.delete("/{expense_id}")
def delete_expense(expense_id: int, user=Depends(get_current_user), db: Session = Depends(get_db)):
    expense = require_expense(db, expense_id, user.id)
    crud.delete_record(db, expense)
    log.info("expense_deleted", user_id=user.id, expense_id=expense_id)
    return {"message": "Expense deleted successfully"}
