# budget_manager/models.py

import calendar

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from .database import Base


class TimestampMixin:
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    password = Column(String, nullable=False)

    budgets = relationship("Budget", back_populates="owner", cascade="all, delete-orphan")


class Budget(TimestampMixin, Base):
    __tablename__ = "budgets"
    __table_args__ = (
        UniqueConstraint("user_id", "year", "month_number", name="uq_budget_period"),
        CheckConstraint("month_number BETWEEN 1 AND 12", name="ck_budget_month"),
        CheckConstraint("income >= 0", name="ck_budget_income"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    year = Column(Integer, nullable=False)
    month_number = Column(Integer, nullable=False)  # 1 to 12
    income = Column(Float, nullable=False, default=0)

    owner = relationship("User", back_populates="budgets")
    expenses = relationship(
        "Expense", back_populates="budget", cascade="all, delete-orphan", order_by="Expense.date.desc()"
    )
    borrowings = relationship(
        "Borrowing", back_populates="budget", cascade="all, delete-orphan", order_by="Borrowing.date.desc()"
    )
    lendings = relationship(
        "Lending", back_populates="budget", cascade="all, delete-orphan", order_by="Lending.date.desc()"
    )

    @property
    def month_name(self):
        return calendar.month_name[self.month_number]


class Expense(TimestampMixin, Base):
    __tablename__ = "expenses"
    __table_args__ = (CheckConstraint("amount != 0", name="ck_expense_amount_nonzero"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    budget_id = Column(Integer, ForeignKey("budgets.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    category = Column(String, nullable=False, index=True)
    amount = Column(Float, nullable=False)  # positive = spend, negative = income offset
    date = Column(Date, nullable=False)
    notes = Column(String(500))

    budget = relationship("Budget", back_populates="expenses")


class Borrowing(TimestampMixin, Base):
    __tablename__ = "borrowings"
    __table_args__ = (CheckConstraint("amount > 0", name="ck_borrowing_amount"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    budget_id = Column(Integer, ForeignKey("budgets.id"), nullable=False, index=True)
    lender_name = Column(String(100), nullable=False)
    amount = Column(Float, nullable=False)
    date = Column(Date, nullable=False)
    notes = Column(String(500))
    is_repaid = Column(Boolean, nullable=False, default=False, index=True)
    repaid_date = Column(Date)

    budget = relationship("Budget", back_populates="borrowings")


class Lending(TimestampMixin, Base):
    __tablename__ = "lendings"
    __table_args__ = (CheckConstraint("amount > 0", name="ck_lending_amount"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    budget_id = Column(Integer, ForeignKey("budgets.id"), nullable=False, index=True)
    borrower_name = Column(String(100), nullable=False)
    amount = Column(Float, nullable=False)
    date = Column(Date, nullable=False)
    notes = Column(String(500))
    is_repaid = Column(Boolean, nullable=False, default=False, index=True)
    repaid_date = Column(Date)

    budget = relationship("Budget", back_populates="lendings")
