# budget_manager/budgets.py

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from . import crud
from .auth import get_current_user
from .database import get_db
from .schemas import BudgetCreate, BudgetDetailOut, BudgetOut, BudgetSummary, BudgetUpdate
from .summary import get_budget_summary

router = APIRouter(prefix="/api/budgets", tags=["budgets"])

log = structlog.get_logger(__name__)


def require_budget(db: Session, budget_id: int, user_id: int, with_records: bool = False):
    budget = crud.get_budget(db, budget_id, user_id, with_records=with_records)
    if not budget:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Budget not found")
    return budget


@router.post("", status_code=status.HTTP_201_CREATED)
def create_budget(payload: BudgetCreate, user=Depends(get_current_user), db: Session = Depends(get_db)):
    if crud.get_budget_for_period(db, user.id, payload.year, payload.month_number):
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Budget already exists for this month and year")

    budget = crud.create_budget(db, user.id, payload.year, payload.month_number, payload.income)
    log.info("budget_created", user_id=user.id, budget_id=budget.id, year=budget.year, month=budget.month_number)
    return {"message": "Budget created successfully", "budget": BudgetOut.model_validate(budget)}


@router.get("")
def list_budgets(user=Depends(get_current_user), db: Session = Depends(get_db)):
    budgets = crud.list_budgets(db, user.id)
    return {"budgets": [BudgetDetailOut.model_validate(b) for b in budgets]}


@router.get("/{budget_id}")
def get_budget(budget_id: int, user=Depends(get_current_user), db: Session = Depends(get_db)):
    budget = require_budget(db, budget_id, user.id, with_records=True)
    return {"budget": BudgetDetailOut.model_validate(budget)}


@router.put("/{budget_id}")
def update_budget(budget_id: int, payload: BudgetUpdate, user=Depends(get_current_user),
                  db: Session = Depends(get_db)):
    budget = require_budget(db, budget_id, user.id)
    budget = crud.apply_changes(db, budget, {"income": payload.income})
    return {"message": "Budget updated successfully", "budget": BudgetOut.model_validate(budget)}


@router.delete("/{budget_id}")
def delete_budget(budget_id: int, user=Depends(get_current_user), db: Session = Depends(get_db)):
    budget = require_budget(db, budget_id, user.id)
    # Expenses, borrowings and lendings go with it (cascade)
    crud.delete_record(db, budget)
    log.info("budget_deleted", user_id=user.id, budget_id=budget_id)
    return {"message": "Budget and associated data deleted successfully"}


@router.get("/{budget_id}/summary")
def budget_summary(budget_id: int, user=Depends(get_current_user), db: Session = Depends(get_db)):
    budget = require_budget(db, budget_id, user.id)
    return {"summary": BudgetSummary(**get_budget_summary(db, budget))}
