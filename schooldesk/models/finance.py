# schooldesk/models/finance.py - Income and expense ledger entries
from __future__ import annotations
from datetime import date
from decimal import Decimal
from sqlalchemy import String, Date, Numeric, Text, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from schooldesk.models.base import Base, TenantMixin


class Income(TenantMixin, Base):
    __tablename__ = "incomes"

    head: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    invoice_no: Mapped[str | None] = mapped_column(String(64))
    entry_date: Mapped[date] = mapped_column(Date, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_incomes_amount"),
    )


class Expense(TenantMixin, Base):
    __tablename__ = "expenses"

    head: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    invoice_no: Mapped[str | None] = mapped_column(String(64))
    entry_date: Mapped[date] = mapped_column(Date, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_expenses_amount"),
    )
