"""
Request and response schemas.

JSON bodies use camelCase keys (``budgetId``, ``monthNumber``, ``isRepaid``)
to match the single-page frontend; Python code uses the snake_case names.
"""

import datetime as dt
import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .categories import ExpenseCategory

EMAIL_PATTERN = re.compile(r"^[\w\.+-]+@[\w-]+(\.[\w-]+)*\.[A-Za-z]{2,}$")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
        use_enum_values=True,
    )


# =============================================================================
# AUTH
# =============================================================================

class RegisterIn(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email format (e.g. name@gmail.com).")
        return v.lower()


class LoginIn(CamelModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class UserOut(CamelModel):
    id: int
    name: str
    email: str
    created_at: Optional[dt.datetime] = None


# =============================================================================
# BUDGETS
# =============================================================================

class BudgetCreate(CamelModel):
    year: int = Field(..., ge=2020, le=2050)
    month_number: int = Field(..., ge=1, le=12)
    income: float = Field(0, ge=0)


class BudgetUpdate(CamelModel):
    income: float = Field(..., ge=0)


class BudgetRef(CamelModel):
    """Short form of a budget embedded in transaction records."""
    id: int
    year: int
    month_number: int
    month_name: str


class BudgetOut(BudgetRef):
    income: float
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


# =============================================================================
# EXPENSES
# =============================================================================

class ExpenseCreate(CamelModel):
    budget_id: int
    name: str = Field(..., min_length=1, max_length=100)
    category: ExpenseCategory
    amount: float = Field(..., ge=0.01)
    date: dt.date = Field(default_factory=dt.date.today)
    notes: Optional[str] = Field(None, max_length=500)


class ExpenseUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[ExpenseCategory] = None
    amount: Optional[float] = Field(None, ge=0.01)
    date: Optional[dt.date] = None
    notes: Optional[str] = Field(None, max_length=500)


class ExpenseOut(CamelModel):
    id: int
    budget_id: int
    budget: Optional[BudgetRef] = None
    name: str
    category: str
    amount: float
    date: dt.date
    notes: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


# =============================================================================
# BORROWINGS / LENDINGS
# =============================================================================

class LoanBase(CamelModel):
    budget_id: int
    amount: float = Field(..., ge=0.01)
    date: dt.date = Field(default_factory=dt.date.today)
    notes: Optional[str] = Field(None, max_length=500)


class LoanUpdate(CamelModel):
    amount: Optional[float] = Field(None, ge=0.01)
    date: Optional[dt.date] = None
    notes: Optional[str] = Field(None, max_length=500)
    is_repaid: Optional[bool] = None
    repaid_date: Optional[dt.date] = None


class LoanOut(CamelModel):
    id: int
    budget_id: int
    budget: Optional[BudgetRef] = None
    amount: float
    date: dt.date
    notes: Optional[str] = None
    is_repaid: bool
    repaid_date: Optional[dt.date] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class BorrowingCreate(LoanBase):
    lender_name: str = Field(..., min_length=1, max_length=100)


class BorrowingUpdate(LoanUpdate):
    lender_name: Optional[str] = Field(None, min_length=1, max_length=100)


class BorrowingOut(LoanOut):
    lender_name: str


class LendingCreate(LoanBase):
    borrower_name: str = Field(..., min_length=1, max_length=100)


class LendingUpdate(LoanUpdate):
    borrower_name: Optional[str] = Field(None, min_length=1, max_length=100)


class LendingOut(LoanOut):
    borrower_name: str


class BudgetDetailOut(BudgetOut):
    expenses: List[ExpenseOut] = []
    borrowings: List[BorrowingOut] = []
    lendings: List[LendingOut] = []


class BudgetSummary(CamelModel):
    income: float
    total_expenses: float
    remaining: float
    total_borrowings: float
    total_lendings: float
    by_category: dict[str, float]
    expense_count: int
    borrowing_count: int
    lending_count: int
