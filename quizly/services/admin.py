"""
Admin service for Quizly
Platform statistics and user management
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from quizly.core.exceptions import AuthorizationException, BadRequestException, NotFoundException
from quizly.core.logging import get_audit_logger
from quizly.models.user import User
from quizly.repositories import QuestionRepository, QuizAttemptRepository, QuizRepository, UserRepository
from quizly.schemas.admin import AdminStats
from quizly.schemas.user import AdminUserCreate, UserResponse
from quizly.services.users import UserService

logger = logging.getLogger(__name__)
audit_logger = get_audit_logger()


def _ensure_admin(current_user: User) -> None:
    if not current_user.is_admin:
        raise AuthorizationException("Admin access required")


class AdminService:
    """Admin service"""

    @staticmethod
    def get_stats(db: Session, current_user: User) -> AdminStats:
        _ensure_admin(current_user)
        return AdminStats(
            total_quizzes=QuizRepository(db).count(),
            total_questions=QuestionRepository(db).count(),
            total_users=UserRepository(db).count(),
            total_attempts=QuizAttemptRepository(db).count(),
        )

    @staticmethod
    def list_users(db: Session, current_user: User) -> List[UserResponse]:
        _ensure_admin(current_user)
        return UserService.list_users(db)

    @staticmethod
    def create_user(db: Session, user_data: AdminUserCreate, current_user: User) -> UserResponse:
        """Create an account with an explicit role"""
        _ensure_admin(current_user)
        user = UserService.create_user(
            db,
            username=user_data.username,
            email=user_data.email,
            password=user_data.password,
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            role=user_data.role,
        )
        db.commit()
        db.refresh(user)

        audit_logger.info(
            "User created by admin",
            extra={"user_id": user.id, "role": user.role.value, "admin_id": current_user.id},
        )
        return UserService.to_response(user)

    @staticmethod
    def delete_user(db: Session, user_id: int, current_user: User) -> None:
        """
        Delete an account together with its attempts and answers

        Raises:
            BadRequestException: deleting yourself, or the user still owns quizzes
            NotFoundException: no such user
        """
        _ensure_admin(current_user)
        if user_id == current_user.id:
            raise BadRequestException("You cannot delete your own account")

        users = UserRepository(db)
        if users.get(user_id) is None:
            raise NotFoundException(f"User not found with id: {user_id}")
        if QuizRepository(db).count_by_creator(user_id):
            raise BadRequestException("User still owns quizzes; delete or reassign them first")

        users.delete_by_id(user_id)
        db.commit()
        audit_logger.info("User deleted", extra={"user_id": user_id, "admin_id": current_user.id})
