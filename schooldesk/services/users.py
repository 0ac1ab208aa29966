# schooldesk/services/users.py - Roles, permissions and user accounts
from typing import List, Optional
import logging
import re
import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from schooldesk.core.errors import ConflictError, ValidationFailed
from schooldesk.core.security import hash_password
from schooldesk.models.staff import Staff
from schooldesk.models.student import Parent, Student
from schooldesk.models.user import Permission, Role, RolePermission, User
from schooldesk.services.crud import Dependent, Reference, RelatedCount, TenantCRUDService, unique

logger = logging.getLogger(__name__)


def slugify(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


def list_permissions(db: Session, module: Optional[str] = None) -> List[Permission]:
    """The global permission catalogue, grouped by module"""
    stmt = select(Permission).order_by(Permission.module, Permission.slug)
    if module:
        stmt = stmt.where(Permission.module == module)
    return list(db.execute(stmt).scalars().all())


class RoleService(TenantCRUDService[Role]):
    model = Role
    resource_name = "Role"
    unique_rules = (unique("name"), unique("slug"))
    dependents = (
        Dependent(User, "role_id", "{count} user(s) have it"),
        Dependent(Staff, "role_id", "{count} staff member(s) have it"),
    )
    related_counts = (RelatedCount("user_count", User, "role_id"),)
    search_fields = ("name", "slug")
    extra_fields = ("permission_ids",)

    def ordering(self):
        return [Role.name, Role.id]

    def _check_permissions(self, permission_ids: List[uuid.UUID]) -> List[uuid.UUID]:
        wanted = list(dict.fromkeys(permission_ids))
        if not wanted:
            return []
        found = set(self.db.execute(
            select(Permission.id).where(Permission.id.in_(wanted))
        ).scalars().all())
        if len(found) != len(wanted):
            raise ValidationFailed("permission_ids: One or more permissions were not found", field="permission_ids")
        return wanted

    def prepare_create(self, values, extra):
        values["slug"] = slugify(values.get("slug") or values["name"])
        values["is_system"] = False
        extra["permission_ids"] = self._check_permissions(extra.get("permission_ids") or [])

    def prepare_update(self, obj, values, extra):
        if obj.is_system:
            raise ValidationFailed("Cannot modify system role")
        if values.get("slug"):
            values["slug"] = slugify(values["slug"])
        if extra.get("permission_ids") is None:
            extra.pop("permission_ids", None)
        else:
            extra["permission_ids"] = self._check_permissions(extra["permission_ids"])

    def validate_delete(self, obj):
        if obj.is_system:
            raise ValidationFailed("Cannot delete system role")

    def _grant(self, role: Role, permission_ids: List[uuid.UUID]) -> None:
        wanted = set(permission_ids)
        for link in list(role.role_permissions):
            if link.permission_id not in wanted:
                role.role_permissions.remove(link)
        held = {link.permission_id for link in role.role_permissions}
        for permission_id in permission_ids:
            if permission_id not in held:
                role.role_permissions.append(RolePermission(role_id=role.id, permission_id=permission_id))

    def after_create(self, obj, extra):
        self._grant(obj, extra["permission_ids"])

    def after_update(self, obj, extra):
        if "permission_ids" in extra:
            self._grant(obj, extra["permission_ids"])


class UserService(TenantCRUDService[User]):
    model = User
    resource_name = "User"
    unique_rules = (
        unique("staff_id", label="staff profile"),
        unique("student_id", label="student profile"),
        unique("parent_id", label="parent profile"),
    )
    references = {
        "role_id": Reference(Role, "Role"),
        "staff_id": Reference(Staff, "Staff member"),
        "student_id": Reference(Student, "Student"),
        "parent_id": Reference(Parent, "Parent"),
    }
    search_fields = ("username", "email", "full_name")
    filter_fields = ("role_id", "user_type")
    extra_fields = ("password",)

    def ordering(self):
        return [User.username, User.id]

    def _check_username(self, username: str, exclude: Optional[uuid.UUID] = None) -> None:
        # Usernames are global because login happens before the school is known
        stmt = select(User.id).where(User.username == username)
        if exclude is not None:
            stmt = stmt.where(User.id != exclude)
        if self.db.execute(stmt).first() is not None:
            raise ConflictError("User with this username already exists", field="username")

    def prepare_create(self, values, extra):
        values["username"] = values["username"].lower()
        self._check_username(values["username"])
        values["password_hash"] = hash_password(extra["password"])

    def prepare_update(self, obj, values, extra):
        if values.get("username"):
            values["username"] = values["username"].lower()
            self._check_username(values["username"], exclude=obj.id)
        if obj.id == self.ctx.user_id and values.get("is_active") is False:
            raise ValidationFailed("You cannot deactivate your own account")

    def validate_delete(self, obj):
        if obj.id == self.ctx.user_id:
            raise ValidationFailed("You cannot delete your own account")
        if obj.staff_id or obj.student_id or obj.parent_id:
            raise ConflictError("Cannot delete user. It is linked to a profile, deactivate it instead.")

    def conflict_from_integrity(self, exc):
        if "username" in str(exc.orig).lower():
            return ConflictError("User with this username already exists", field="username")
        return super().conflict_from_integrity(exc)

    def reset_password(self, user_id: uuid.UUID, password: str) -> User:
        obj = self.get_object(user_id)
        with self.atomic():
            obj.password_hash = hash_password(password)
        logger.info(f"Password reset for user {obj.username} by {self.ctx.username}")
        return self.get(obj.id)
