from datetime import date

import pytest
from pydantic import ValidationError

from budget_manager.categories import ExpenseCategory
from budget_manager.schemas import (
    BorrowingUpdate,
    BudgetCreate,
    ExpenseCreate,
    LendingCreate,
    RegisterIn,
)


class TestSchemas:
    def test_twelve_categories(self):
        assert len(ExpenseCategory) == 12
        assert ExpenseCategory("Food & Dining") is ExpenseCategory.FOOD_AND_DINING
        assert ExpenseCategory("Other") is ExpenseCategory.OTHER

    def test_accepts_camel_and_snake_keys(self):
        assert BudgetCreate(year=2024, monthNumber=4, income=10).month_number == 4
        assert BudgetCreate(year=2024, month_number=4, income=10).month_number == 4

    def test_expense_date_defaults_to_today(self):
        expense = ExpenseCreate(budgetId=1, name="Tea", category="Other", amount=10)
        assert expense.date == date.today()
        assert expense.category == "Other"

    def test_strips_names(self):
        lending = LendingCreate(budgetId=1, borrowerName="  Meera ", amount=5, date="2024-01-02")
        assert lending.borrower_name == "Meera"

    def test_rejects_blank_name(self):
        with pytest.raises(ValidationError):
            LendingCreate(budgetId=1, borrowerName="   ", amount=5)

    def test_update_only_reports_sent_fields(self):
        update = BorrowingUpdate(isRepaid=False)
        assert update.model_dump(exclude_unset=True) == {"is_repaid": False}

    def test_register_lowercases_email(self):
        payload = RegisterIn(name="Asha", email="Asha@Example.COM", password="secret123")
        assert payload.email == "asha@example.com"

    def test_register_short_password(self):
        with pytest.raises(ValidationError):
            RegisterIn(name="Asha", email="asha@example.com", password="123")
