# schooldesk/core/security.py - Session tokens (JWT) and password hashing
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional, Union
import secrets

import jwt
from passlib.context import CryptContext

from schooldesk.core.config import settings
from schooldesk.core.errors import UnauthorizedError

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
    bcrypt__ident="2b"
)

MIN_PASSWORD_LENGTH = 6

RESERVED_CLAIMS = {"sub", "iat", "exp", "iss", "aud", "type", "jti"}


class SecurityError(Exception):
    """Raised when a token cannot be issued"""
    pass


class TokenManager:
    """Issues and validates signed session tokens"""

    def __init__(self):
        self.secret_key = settings.JWT_SECRET
        self.algorithm = settings.JWT_ALGORITHM
        self.issuer = settings.JWT_ISSUER
        self.audience = settings.JWT_AUDIENCE
        self.expire_minutes = settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES

    def create_session_token(
        self,
        subject: Union[str, Any],
        school_id: Union[str, Any],
        expires_delta: Optional[timedelta] = None,
        additional_claims: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Create a signed session token bound to one user and one school.

        Args:
            subject: User id
            school_id: Tenant the session is bound to
            expires_delta: Custom lifetime, defaults to JWT_ACCESS_TOKEN_EXPIRE_MINUTES
            additional_claims: Extra non-reserved claims

        Returns:
            Encoded JWT string

        Raises:
            SecurityError: If a reserved claim is overridden or encoding fails
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=self.expire_minutes))

        payload = {
            "sub": str(subject),
            "school_id": str(school_id),
            "iat": now,
            "exp": expire,
            "iss": self.issuer,
            "aud": self.audience,
            "type": "access",
            "jti": secrets.token_hex(16),
        }

        if additional_claims:
            for claim in additional_claims:
                if claim in RESERVED_CLAIMS or claim == "school_id":
                    raise SecurityError(f"Cannot override reserved JWT claim: {claim}")
            payload.update(additional_claims)

        try:
            return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        except jwt.PyJWTError as e:
            raise SecurityError(f"Failed to create session token: {e}")

    def decode_token(self, token: str) -> Dict[str, Any]:
        """
        Decode and validate a session token.

        Raises:
            UnauthorizedError: If the token is expired, tampered with or of the wrong type
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
            )
        except jwt.ExpiredSignatureError:
            raise UnauthorizedError("Session has expired")
        except jwt.InvalidTokenError:
            raise UnauthorizedError("Invalid session")

        if payload.get("type") != "access":
            raise UnauthorizedError("Invalid session")
        return payload


class PasswordManager:
    """Password hashing and verification"""

    @staticmethod
    def hash_password(password: str) -> str:
        if not password:
            raise SecurityError("Password cannot be empty")
        return pwd_context.hash(password)

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        if not plain_password or not hashed_password:
            return False
        try:
            return pwd_context.verify(plain_password, hashed_password)
        except ValueError:
            return False


token_manager = TokenManager()
password_manager = PasswordManager()


def create_session_token(user_id: Any, school_id: Any) -> str:
    return token_manager.create_session_token(user_id, school_id)


def decode_token(token: str) -> Dict[str, Any]:
    return token_manager.decode_token(token)


def hash_password(password: str) -> str:
    return password_manager.hash_password(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return password_manager.verify_password(plain_password, hashed_password)


__all__ = [
    "TokenManager", "PasswordManager", "SecurityError",
    "token_manager", "password_manager",
    "create_session_token", "decode_token", "hash_password", "verify_password",
    "MIN_PASSWORD_LENGTH",
]
