# schooldesk/api/deps/auth.py - Session extraction and principal lookup
from typing import Dict, Any, Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select
from sqlalchemy.orm import Session

from schooldesk.core.config import settings
from schooldesk.core.db import get_db
from schooldesk.core.errors import UnauthorizedError
from schooldesk.core.security import decode_token
from schooldesk.models.user import User

bearer = HTTPBearer(auto_error=False)


def get_session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> str:
    """Session token from the session cookie, or from an Authorization bearer header"""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token and credentials is not None:
        token = credentials.credentials
    if not token:
        raise UnauthorizedError()
    return token


def get_current_user(
    token: str = Depends(get_session_token),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Decode the session and return user + claims.
    Returns: {"user": User, "claims": dict}
    """
    claims = decode_token(token)

    try:
        user_id = UUID(claims.get("sub", ""))
    except ValueError:
        raise UnauthorizedError("Invalid session")

    user = db.execute(select(User).where(User.id == user_id)).scalar_one_or_none()
    if user is None:
        raise UnauthorizedError("Invalid session")
    if not user.is_active:
        raise UnauthorizedError("Account deactivated")

    return {"user": user, "claims": claims}
