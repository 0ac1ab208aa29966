# schooldesk/api/routers/auth.py - Login, logout, current principal and password change
from typing import Any, Dict
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from schooldesk.api.deps.auth import get_current_user
from schooldesk.api.deps.tenancy import require_school
from schooldesk.core.config import settings
from schooldesk.core.context import TenantContext
from schooldesk.core.db import get_db
from schooldesk.core.responses import success_response
from schooldesk.schemas.auth import ChangePasswordIn, LoginIn, LoginOut, PrincipalOut
from schooldesk.services.auth import AuthService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/login")
def login(credentials: LoginIn, db: Session = Depends(get_db)):
    """Authenticate and open a session bound to the user's school"""
    service = AuthService(db)
    user = service.authenticate(credentials.username, credentials.password)
    token = service.issue_token(user)

    body = LoginOut(token=token, user=PrincipalOut(**service.principal(user)))
    response = success_response(body, message="Login successful")
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite=settings.SESSION_COOKIE_SAMESITE,
    )
    return response


@router.post("/logout")
def logout():
    response = success_response(None, message="Logged out successfully")
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response


@router.get("/me")
def me(
    ctx: TenantContext = Depends(require_school),
    current: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    principal = AuthService(db).principal(current["user"])
    return success_response(PrincipalOut(**principal))


@router.post("/change-password")
def change_password(
    payload: ChangePasswordIn,
    ctx: TenantContext = Depends(require_school),
    current: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    AuthService(db).change_password(current["user"], payload.current_password, payload.new_password)
    return success_response(None, message="Password changed successfully")
