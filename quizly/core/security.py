"""
Security utilities for authentication and authorization
Handles JWT tokens, password hashing and the bearer-token dependencies
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from quizly.core.config import settings
from quizly.core.database import get_db
from quizly.core.exceptions import AuthenticationException, AuthorizationException
from quizly.models.user import User

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)

# Missing credentials are reported by get_current_user as 401, not by FastAPI as 403
bearer_scheme = HTTPBearer(auto_error=False)


class SecurityUtils:
    """Security utility functions"""

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify a plain password against hashed password"""
        try:
            return pwd_context.verify(plain_password, hashed_password)
        except ValueError:
            return False

    @staticmethod
    def get_password_hash(password: str) -> str:
        """Hash a password using bcrypt"""
        return pwd_context.hash(password)

    @staticmethod
    def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
        """
        Create JWT access token

        Args:
            data: Claims to encode in token
            expires_delta: Token lifetime, defaults to ACCESS_TOKEN_EXPIRE_MINUTES

        Returns:
            Encoded JWT token
        """
        to_encode = data.copy()
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        )
        to_encode.update({"exp": expire, "type": "access"})
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def decode_token(token: str) -> Dict[str, Any]:
        """
        Decode JWT token

        Raises:
            AuthenticationException: If token is invalid or expired
        """
        try:
            return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except JWTError:
            raise AuthenticationException("Could not validate credentials")


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the caller from the bearer token

    The returned user is passed explicitly into every service call.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("Not authenticated")

    payload = SecurityUtils.decode_token(credentials.credentials)
    user_id = payload.get("sub")
    if user_id is None or payload.get("type") != "access":
        raise AuthenticationException("Invalid authentication credentials")

    try:
        user = db.get(User, int(user_id))
    except ValueError:
        raise AuthenticationException("Invalid authentication credentials")

    if user is None:
        raise AuthenticationException("User no longer exists")
    if not user.is_active:
        raise AuthorizationException("Inactive user")
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Dependency to require admin role"""
    if not current_user.is_admin:
        raise AuthorizationException("Admin access required")
    return current_user
