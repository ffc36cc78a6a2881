# budget_manager/lendings.py

from datetime import date
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from . import crud, repayments
from .auth import get_current_user
from .budgets import require_budget
from .database import get_db
from .schemas import ExpenseOut, LendingCreate, LendingOut, LendingUpdate

router = APIRouter(prefix="/api/lendings", tags=["lendings"])

log = structlog.get_logger(__name__)


def require_lending(db: Session, lending_id: int, user_id: int):
    lending = crud.get_lending(db, lending_id, user_id)
    if not lending:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Lending not found")
    return lending


@router.post("", status_code=status.HTTP_201_CREATED)
def create_lending(payload: LendingCreate, user=Depends(get_current_user), db: Session = Depends(get_db)):
    require_budget(db, payload.budget_id, user.id)
    lending, expense = repayments.record_lending(
        db,
        user_id=user.id,
        budget_id=payload.budget_id,
        borrower_name=payload.borrower_name,
        amount=payload.amount,
        on=payload.date,
        notes=payload.notes,
    )
    log.info("lending_created", user_id=user.id, lending_id=lending.id, amount=lending.amount)

    if expense is None:
        return {
            "message": "Lending created but expense creation failed",
            "lending": LendingOut.model_validate(lending),
        }
    return {
        "message": "Lending created successfully with automatic expense entry",
        "lending": LendingOut.model_validate(lending),
        "expense": ExpenseOut.model_validate(expense),
    }


@router.get("")
def list_lendings(
    budget_id: Optional[int] = Query(None, alias="budgetId"),
    is_repaid: Optional[bool] = Query(None, alias="isRepaid"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    user=Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if budget_id is not None:
        require_budget(db, budget_id, user.id)
    lendings = crud.list_lendings(db, user.id, budget_id, is_repaid, start_date, end_date)
    return {"lendings": [LendingOut.model_validate(item) for item in lendings]}


@router.get("/{lending_id}")
def get_lending(lending_id: int, user=Depends(get_current_user), db: Session = Depends(get_db)):
    lending = require_lending(db, lending_id, user.id)
    return {"lending": LendingOut.model_validate(lending)}


@router.put("/{lending_id}")
def update_lending(lending_id: int, payload: LendingUpdate, user=Depends(get_current_user),
                   db: Session = Depends(get_db)):
    lending = require_lending(db, lending_id, user.id)
    lending = repayments.update_lending(db, lending, payload.model_dump(exclude_unset=True))
    return {"message": "Lending updated successfully", "lending": LendingOut.model_validate(lending)}


@router.delete("/{lending_id}")
def delete_lending(lending_id: int, user=Depends(get_current_user), db: Session = Depends(get_db)):
    lending = require_lending(db, lending_id, user.id)
    repayments.delete_lending(db, lending)
    log.info("lending_deleted", user_id=user.id, lending_id=lending_id)
    return {"message": "Lending deleted successfully"}


@router.put("/{lending_id}/repay")
def repay_lending(lending_id: int, user=Depends(get_current_user), db: Session = Depends(get_db)):
    lending = require_lending(db, lending_id, user.id)
    if lending.is_repaid:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Lending is already marked as repaid")

    lending, income = repayments.repay_lending(db, lending)
    if income is None:
        message = "Lending marked as repaid but income entry failed"
    else:
        message = "Lending marked as repaid and income recorded"
    return {
        "message": message,
        "lending": LendingOut.model_validate(lending),
        "expense": ExpenseOut.model_validate(income) if income else None,
    }
