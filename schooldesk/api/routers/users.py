# schooldesk/api/routers/users.py - Users, roles and the permission catalogue
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from schooldesk.api.deps.tenancy import require_permission
from schooldesk.api.routers.resource import build_resource_router
from schooldesk.core.context import TenantContext
from schooldesk.core.db import get_db
from schooldesk.core.responses import success_response
from schooldesk.schemas.user import (
    PermissionOut, ResetPasswordIn, RoleCreate, RoleOut, RoleUpdate, UserCreate, UserOut, UserUpdate,
)
from schooldesk.services.users import RoleService, UserService, list_permissions

users_router = APIRouter()
roles_router = APIRouter()
permissions_router = APIRouter()


@users_router.post("/{record_id}/reset-password")
def reset_password(
    record_id: UUID,
    payload: ResetPasswordIn,
    ctx: TenantContext = Depends(require_permission("settings.edit")),
    db: Session = Depends(get_db),
):
    user = UserService(db, ctx).reset_password(record_id, payload.password)
    return success_response(UserOut.model_validate(user), message="Password reset successfully")


build_resource_router(UserService, UserCreate, UserUpdate, UserOut, "settings", router=users_router)
build_resource_router(RoleService, RoleCreate, RoleUpdate, RoleOut, "settings", router=roles_router)


@permissions_router.get("")
def get_permissions(
    module: Optional[str] = Query(None),
    ctx: TenantContext = Depends(require_permission("settings.view")),
    db: Session = Depends(get_db),
):
    return success_response([PermissionOut.model_validate(p) for p in list_permissions(db, module)])
