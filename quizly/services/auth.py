"""
Authentication service for Quizly
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quizly.core.exceptions import AuthenticationException, AuthorizationException
from quizly.core.security import SecurityUtils
from quizly.models.user import UserRole
from quizly.repositories import UserRepository
from quizly.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from quizly.services.users import UserService

logger = logging.getLogger(__name__)


class AuthService:
    """Authentication service"""

    @staticmethod
    def register(db: Session, request: RegisterRequest) -> AuthResponse:
        """Create a USER account; duplicates raise before anything is written"""
        logger.info(f"Registering user {request.username}")
        user = UserService.create_user(
            db,
            username=request.username,
            email=request.email,
            password=request.password,
            first_name=request.first_name,
            last_name=request.last_name,
            role=UserRole.USER,
        )
        try:
            db.commit()
        except SQLAlchemyError:
            logger.exception(f"Failed to save user {request.username}")
            raise

        logger.info(f"User {user.username} registered with id {user.id}")
        return AuthResponse(message="User registered successfully")

    @staticmethod
    def login(db: Session, request: LoginRequest) -> AuthResponse:
        user = UserRepository(db).get_by_username(request.username)
        if user is None or not SecurityUtils.verify_password(request.password, user.hashed_password):
            logger.warning(f"Failed login for {request.username}")
            raise AuthenticationException("Invalid username or password")
        if not user.is_active:
            raise AuthorizationException("Account is disabled")

        token = SecurityUtils.create_access_token(
            {"sub": str(user.id), "username": user.username, "role": user.role.value}
        )
        logger.info(f"User {user.username} logged in")

        return AuthResponse(
            token=token,
            id=user.id,
            username=user.username,
            email=user.email,
            role=user.role.value,
            message="Login successful",
        )
