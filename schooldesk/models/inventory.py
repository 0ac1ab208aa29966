# schooldesk/models/inventory.py - Stores, items and item issues
from __future__ import annotations
import uuid
from datetime import date
from sqlalchemy import String, Integer, Date, ForeignKey, Text, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from schooldesk.models.base import Base, TenantMixin


class ItemStore(TenantMixin, Base):
    __tablename__ = "item_stores"

    name: Mapped[str] = mapped_column(String(64), nullable=False)
    code: Mapped[str] = mapped_column(String(16), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        UniqueConstraint("school_id", "name", name="uq_item_stores_school_name"),
        UniqueConstraint("school_id", "code", name="uq_item_stores_school_code"),
    )


class Item(TenantMixin, Base):
    __tablename__ = "items"

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    category: Mapped[str | None] = mapped_column(String(64))
    unit: Mapped[str | None] = mapped_column(String(16))
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    description: Mapped[str | None] = mapped_column(Text)
    store_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("item_stores.id", ondelete="RESTRICT"), index=True)

    store: Mapped["ItemStore"] = relationship("ItemStore", lazy="joined")

    __table_args__ = (
        UniqueConstraint("school_id", "name", name="uq_items_school_name"),
        CheckConstraint("quantity >= 0", name="ck_items_quantity"),
    )

    @property
    def store_name(self) -> str | None:
        return self.store.name if self.store else None


class ItemIssue(TenantMixin, Base):
    __tablename__ = "item_issues"

    item_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("items.id", ondelete="RESTRICT"), nullable=False, index=True)
    issue_to: Mapped[str] = mapped_column(String(128), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    issue_date: Mapped[date] = mapped_column(Date, nullable=False)
    return_date: Mapped[date | None] = mapped_column(Date)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="issued")
    note: Mapped[str | None] = mapped_column(Text)
    issued_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"))

    item: Mapped["Item"] = relationship("Item", lazy="joined")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_item_issues_quantity"),
        CheckConstraint("status IN ('issued','returned')", name="ck_item_issues_status"),
    )

    @property
    def item_name(self) -> str | None:
        return self.item.name if self.item else None
