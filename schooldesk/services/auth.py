# schooldesk/services/auth.py - Authentication business logic
from datetime import datetime
from typing import Any, Dict
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from schooldesk.api.deps.tenancy import load_permissions
from schooldesk.core.errors import UnauthorizedError, ValidationFailed
from schooldesk.core.security import create_session_token, hash_password, verify_password
from schooldesk.models.school import School
from schooldesk.models.user import User

logger = logging.getLogger(__name__)


class AuthService:
    """Service class for authentication operations"""

    def __init__(self, db: Session):
        self.db = db

    def authenticate(self, username: str, password: str) -> User:
        """
        Verify credentials and record the login

        Raises:
            UnauthorizedError: Unknown user, wrong password, or inactive account or school
        """
        username = username.lower().strip()
        user = self.db.execute(
            select(User).where(User.username == username)
        ).scalar_one_or_none()

        if user is None or not verify_password(password, user.password_hash):
            logger.warning(f"Failed login for username: {username}")
            raise UnauthorizedError("Invalid username or password")
        if not user.is_active:
            raise UnauthorizedError("Account deactivated")

        school = self.db.get(School, user.school_id)
        if school is None or not school.is_active:
            raise UnauthorizedError("School is not active")

        user.last_login = datetime.utcnow()
        self.db.commit()

        logger.info(f"User authenticated: {username}")
        return user

    def issue_token(self, user: User) -> str:
        return create_session_token(user.id, user.school_id)

    def principal(self, user: User) -> Dict[str, Any]:
        """Session principal with role and permission slugs"""
        school = self.db.get(School, user.school_id)
        return {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "full_name": user.full_name,
            "user_type": user.user_type,
            "school_id": user.school_id,
            "school_name": school.name if school else None,
            "role_id": user.role_id,
            "role_name": user.role_name,
            "permissions": sorted(load_permissions(self.db, user.role_id)),
        }

    def change_password(self, user: User, current_password: str, new_password: str) -> None:
        if not verify_password(current_password, user.password_hash):
            raise ValidationFailed("Current password is incorrect", field="current_password")
        if current_password == new_password:
            raise ValidationFailed("New password must differ from the current password", field="new_password")

        user.password_hash = hash_password(new_password)
        self.db.commit()
        logger.info(f"Password changed for user: {user.username}")
