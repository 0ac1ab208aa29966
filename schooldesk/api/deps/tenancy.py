# schooldesk/api/deps/tenancy.py - Resolve the caller's school from the session only
from typing import Dict, Any, Callable

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from schooldesk.api.deps.auth import get_current_user
from schooldesk.core.context import TenantContext
from schooldesk.core.db import get_db
from schooldesk.core.errors import ForbiddenError, UnauthorizedError
from schooldesk.models.school import School
from schooldesk.models.user import Permission, RolePermission


def load_permissions(db: Session, role_id) -> frozenset:
    slugs = db.execute(
        select(Permission.slug)
        .join(RolePermission, RolePermission.permission_id == Permission.id)
        .where(RolePermission.role_id == role_id)
    ).scalars().all()
    return frozenset(slugs)


def require_school(
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TenantContext:
    """
    Build the tenant context for the request.

    The school comes from the signed session claim and must match the user's
    own school; headers, query parameters and bodies are never consulted.
    """
    user = ctx["user"]
    claimed = ctx["claims"].get("school_id")

    if not claimed or str(user.school_id) != claimed:
        raise UnauthorizedError("Invalid session")

    school_active = db.execute(
        select(School.is_active).where(School.id == user.school_id)
    ).scalar_one_or_none()
    if not school_active:
        raise UnauthorizedError("School is not active")

    return TenantContext(
        school_id=user.school_id,
        user_id=user.id,
        username=user.username,
        permissions=load_permissions(db, user.role_id),
        role_name=user.role_name,
    )


def require_permission(slug: str) -> Callable[..., TenantContext]:
    """
    Dependency factory requiring a permission slug on the caller's role.
    Usage: ctx: TenantContext = Depends(require_permission("students.view"))
    """
    def permission_checker(ctx: TenantContext = Depends(require_school)) -> TenantContext:
        if not ctx.can(slug):
            raise ForbiddenError(f"Missing permission: {slug}")
        return ctx

    return permission_checker
