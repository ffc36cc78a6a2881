# budget_manager/borrowings.py

from datetime import date
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from . import crud, repayments
from .auth import get_current_user
from .budgets import require_budget
from .database import get_db
from .schemas import BorrowingCreate, BorrowingOut, BorrowingUpdate, ExpenseOut

router = APIRouter(prefix="/api/borrowings", tags=["borrowings"])

log = structlog.get_logger(__name__)


def require_borrowing(db: Session, borrowing_id: int, user_id: int):
    borrowing = crud.get_borrowing(db, borrowing_id, user_id)
    if not borrowing:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Borrowing not found")
    return borrowing


@router.post("", status_code=status.HTTP_201_CREATED)
def create_borrowing(payload: BorrowingCreate, user=Depends(get_current_user), db: Session = Depends(get_db)):
    require_budget(db, payload.budget_id, user.id)
    borrowing = crud.create_borrowing(db, user_id=user.id, **payload.model_dump())
    log.info("borrowing_created", user_id=user.id, borrowing_id=borrowing.id, amount=borrowing.amount)
    return {"message": "Borrowing created successfully", "borrowing": BorrowingOut.model_validate(borrowing)}


@router.get("")
def list_borrowings(
    budget_id: Optional[int] = Query(None, alias="budgetId"),
    is_repaid: Optional[bool] = Query(None, alias="isRepaid"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    user=Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if budget_id is not None:
        require_budget(db, budget_id, user.id)
    borrowings = crud.list_borrowings(db, user.id, budget_id, is_repaid, start_date, end_date)
    return {"borrowings": [BorrowingOut.model_validate(b) for b in borrowings]}


@router.get("/{borrowing_id}")
def get_borrowing(borrowing_id: int, user=Depends(get_current_user), db: Session = Depends(get_db)):
    borrowing = require_borrowing(db, borrowing_id, user.id)
    return {"borrowing": BorrowingOut.model_validate(borrowing)}


@router.put("/{borrowing_id}")
def update_borrowing(borrowing_id: int, payload: BorrowingUpdate, user=Depends(get_current_user),
                     db: Session = Depends(get_db)):
    borrowing = require_borrowing(db, borrowing_id, user.id)
    borrowing = repayments.update_borrowing(db, borrowing, payload.model_dump(exclude_unset=True))
    return {"message": "Borrowing updated successfully", "borrowing": BorrowingOut.model_validate(borrowing)}


@router.delete("/{borrowing_id}")
def delete_borrowing(borrowing_id: int, user=Depends(get_current_user), db: Session = Depends(get_db)):
    borrowing = require_borrowing(db, borrowing_id, user.id)
    repayments.delete_borrowing(db, borrowing)
    log.info("borrowing_deleted", user_id=user.id, borrowing_id=borrowing_id)
    return {"message": "Borrowing deleted successfully"}


@router.put("/{borrowing_id}/repay")
def repay_borrowing(borrowing_id: int, user=Depends(get_current_user), db: Session = Depends(get_db)):
    borrowing = require_borrowing(db, borrowing_id, user.id)
    if borrowing.is_repaid:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Borrowing is already marked as repaid")

    borrowing, expense = repayments.repay_borrowing(db, borrowing)
    if expense is None:
        message = "Borrowing marked as repaid but expense creation failed"
    else:
        message = "Borrowing marked as repaid and expense created"
    return {
        "message": message,
        "borrowing": BorrowingOut.model_validate(borrowing),
        "expense": ExpenseOut.model_validate(expense) if expense else None,
    }
