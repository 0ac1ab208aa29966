# schooldesk/models/user.py - Principals, roles and the global permission catalogue
from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy import String, Boolean, DateTime, ForeignKey, Text, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from schooldesk.models.base import Base, TimestampMixin, TenantMixin


class Permission(TimestampMixin, Base):
    """Global capability slug, shared by every school"""
    __tablename__ = "permissions"

    name: Mapped[str] = mapped_column(String(64), nullable=False)
    slug: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    module: Mapped[str] = mapped_column(String(32), nullable=False, index=True)


class Role(TenantMixin, Base):
    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(String(64), nullable=False)
    slug: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    is_system: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    role_permissions: Mapped[list["RolePermission"]] = relationship(
        "RolePermission", cascade="all, delete-orphan", passive_deletes=True, lazy="selectin"
    )

    __table_args__ = (
        UniqueConstraint("school_id", "name", name="uq_roles_school_name"),
        UniqueConstraint("school_id", "slug", name="uq_roles_school_slug"),
    )

    @property
    def permission_ids(self) -> list[uuid.UUID]:
        return [rp.permission_id for rp in self.role_permissions]


class RolePermission(Base):
    __tablename__ = "role_permissions"

    role_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True)
    permission_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True)


class User(TenantMixin, Base):
    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    email: Mapped[str | None] = mapped_column(String(128))
    full_name: Mapped[str | None] = mapped_column(String(128))
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    user_type: Mapped[str] = mapped_column(String(16), nullable=False, default="admin")
    role_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("roles.id", ondelete="RESTRICT"), nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_login: Mapped[datetime | None] = mapped_column(DateTime)

    # Optional 1:1 profile links
    staff_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("staff.id", ondelete="SET NULL"), unique=True)
    student_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("students.id", ondelete="SET NULL"), unique=True)
    parent_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("parents.id", ondelete="SET NULL"), unique=True)

    role: Mapped["Role"] = relationship("Role", lazy="joined")

    __table_args__ = (
        CheckConstraint("user_type IN ('admin','staff','student','parent')", name="ck_users_user_type"),
    )

    @property
    def role_name(self) -> str | None:
        return self.role.name if self.role else None
