"""
Paired transactions for borrowings and lendings.

Money lent out is logged as an expense ("Money lent to X"). Settling a loan
adds a second expense: repaying a lender counts as spend, while a repayment
from a borrower is stored as a negative expense, i.e. income. Paired expenses
are found again by owner, budget, name and amount, so a record edited outside
these helpers can fall out of step with its pair.

Side effects are best-effort. The parent record is committed first; if the
expense write then fails it is rolled back and logged and the caller still
gets the parent back.
"""

from datetime import date

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import crud
from .categories import ExpenseCategory
from .models import Borrowing, Expense, Lending

log = structlog.get_logger(__name__)

BORROWING_REPAYMENT_CATEGORY = ExpenseCategory.BILLS_AND_UTILITIES.value
LENDING_CATEGORY = ExpenseCategory.OTHER.value


def lent_out_name(borrower_name: str) -> str:
    return f"Money lent to {borrower_name}"


def repayment_to_name(lender_name: str) -> str:
    return f"Loan Repayment to {lender_name}"


def repayment_from_name(borrower_name: str) -> str:
    return f"Loan Repayment from {borrower_name}"


def _kind(record) -> str:
    return "lending" if isinstance(record, Lending) else "borrowing"


def _add_paired(db: Session, record, name: str, category: str, amount: float, on: date, notes: str):
    try:
        expense = crud.create_expense(
            db,
            user_id=record.user_id,
            budget_id=record.budget_id,
            name=name,
            category=category,
            amount=amount,
            date=on,
            notes=notes,
        )
    except SQLAlchemyError:
        db.rollback()
        log.exception("paired_expense_create_failed", kind=_kind(record), record_id=record.id, name=name)
        return None
    log.info("paired_expense_created", kind=_kind(record), record_id=record.id, expense_id=expense.id,
             amount=amount)
    return expense


def _find_paired(db: Session, record, name: str, amount: float):
    return crud.find_expense(db, record.user_id, record.budget_id, name, amount)


def _remove_paired(db: Session, record, expense) -> bool:
    if expense is None:
        log.warning("paired_expense_missing", kind=_kind(record), record_id=record.id)
        return False
    expense_id = expense.id
    try:
        crud.delete_record(db, expense)
    except SQLAlchemyError:
        db.rollback()
        log.exception("paired_expense_delete_failed", kind=_kind(record), record_id=record.id,
                      expense_id=expense_id)
        return False
    log.info("paired_expense_deleted", kind=_kind(record), record_id=record.id, expense_id=expense_id)
    return True


def _sync_paired(db: Session, record, expense: Expense, **changes):
    try:
        crud.apply_changes(db, expense, changes)
    except SQLAlchemyError:
        db.rollback()
        log.exception("paired_expense_sync_failed", kind=_kind(record), record_id=record.id,
                      expense_id=expense.id)


def _repaid_changes(record, changes: dict) -> dict:
    """Fill in ``repaid_date`` for a repaid toggle in a partial update."""
    changes = dict(changes)
    if changes.get("is_repaid") is True and not record.is_repaid and not changes.get("repaid_date"):
        changes["repaid_date"] = date.today()
    if changes.get("is_repaid") is False:
        changes["repaid_date"] = None
    return changes


# =============================================================================
# BORROWINGS
# =============================================================================

def _add_borrowing_repayment(db: Session, borrowing: Borrowing):
    return _add_paired(
        db,
        borrowing,
        name=repayment_to_name(borrowing.lender_name),
        category=BORROWING_REPAYMENT_CATEGORY,
        amount=borrowing.amount,
        on=date.today(),
        notes=f"Automatic expense for repaying loan to {borrowing.lender_name}",
    )


def repay_borrowing(db: Session, borrowing: Borrowing):
    """Mark a borrowing repaid today and log the repayment as an expense."""
    borrowing = crud.apply_changes(db, borrowing, {"is_repaid": True, "repaid_date": date.today()})
    expense = _add_borrowing_repayment(db, borrowing)
    return borrowing, expense


def update_borrowing(db: Session, borrowing: Borrowing, changes: dict) -> Borrowing:
    changes = _repaid_changes(borrowing, changes)
    was_repaid = borrowing.is_repaid
    marking = not was_repaid and changes.get("is_repaid") is True
    unmarking = was_repaid and changes.get("is_repaid") is False

    repayment = None
    if was_repaid:
        repayment = _find_paired(db, borrowing, repayment_to_name(borrowing.lender_name), borrowing.amount)
    if unmarking:
        _remove_paired(db, borrowing, repayment)

    borrowing = crud.apply_changes(db, borrowing, changes)

    if marking:
        _add_borrowing_repayment(db, borrowing)
    elif was_repaid and not unmarking and repayment is not None:
        _sync_paired(db, borrowing, repayment, name=repayment_to_name(borrowing.lender_name),
                     amount=borrowing.amount)
    return borrowing


def delete_borrowing(db: Session, borrowing: Borrowing) -> None:
    if borrowing.is_repaid:
        repayment = _find_paired(db, borrowing, repayment_to_name(borrowing.lender_name), borrowing.amount)
        _remove_paired(db, borrowing, repayment)
    crud.delete_record(db, borrowing)


# =============================================================================
# LENDINGS
# =============================================================================

def _add_lending_repayment(db: Session, lending: Lending):
    return _add_paired(
        db,
        lending,
        name=repayment_from_name(lending.borrower_name),
        category=LENDING_CATEGORY,
        amount=-lending.amount,
        on=date.today(),
        notes=f"Automatic income for loan repayment from {lending.borrower_name}",
    )


def record_lending(db: Session, user_id: int, budget_id: int, borrower_name: str, amount: float, on: date,
                   notes: str = None):
    """Create a lending together with the expense for the money lent out."""
    lending = crud.create_lending(db, user_id, budget_id, borrower_name, amount, on, notes)
    expense = _add_paired(
        db,
        lending,
        name=lent_out_name(borrower_name),
        category=LENDING_CATEGORY,
        amount=amount,
        on=on,
        notes=f"Automatic expense for lending: {notes or 'Money lent out'}",
    )
    return lending, expense


def repay_lending(db: Session, lending: Lending):
    """Mark a lending repaid today and log the repayment as income."""
    lending = crud.apply_changes(db, lending, {"is_repaid": True, "repaid_date": date.today()})
    income = _add_lending_repayment(db, lending)
    return lending, income


def update_lending(db: Session, lending: Lending, changes: dict) -> Lending:
    changes = _repaid_changes(lending, changes)
    was_repaid = lending.is_repaid
    marking = not was_repaid and changes.get("is_repaid") is True
    unmarking = was_repaid and changes.get("is_repaid") is False

    lent_out = _find_paired(db, lending, lent_out_name(lending.borrower_name), lending.amount)
    repayment = None
    if was_repaid:
        repayment = _find_paired(db, lending, repayment_from_name(lending.borrower_name), -lending.amount)
    if unmarking:
        _remove_paired(db, lending, repayment)

    lending = crud.apply_changes(db, lending, changes)

    if lent_out is not None:
        _sync_paired(db, lending, lent_out, name=lent_out_name(lending.borrower_name), amount=lending.amount,
                     date=lending.date)
    if marking:
        _add_lending_repayment(db, lending)
    elif was_repaid and not unmarking and repayment is not None:
        _sync_paired(db, lending, repayment, name=repayment_from_name(lending.borrower_name),
                     amount=-lending.amount)
    return lending


def delete_lending(db: Session, lending: Lending) -> None:
    lent_out = _find_paired(db, lending, lent_out_name(lending.borrower_name), lending.amount)
    _remove_paired(db, lending, lent_out)
    if lending.is_repaid:
        repayment = _find_paired(db, lending, repayment_from_name(lending.borrower_name), -lending.amount)
        _remove_paired(db, lending, repayment)
    crud.delete_record(db, lending)
