"""
User service for Quizly
Profiles, per-user statistics and account creation shared by auth and admin
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from quizly.core.exceptions import DuplicateException, NotFoundException
from quizly.core.security import SecurityUtils
from quizly.models.user import User, UserRole
from quizly.repositories import QuizAttemptRepository, UserRepository
from quizly.schemas.user import UserResponse, UserStats, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """User service"""

    @staticmethod
    def to_response(user: User) -> UserResponse:
        return UserResponse.model_validate(user)

    @staticmethod
    def get_user(db: Session, user_id: int) -> UserResponse:
        user = UserRepository(db).get(user_id)
        if user is None:
            raise NotFoundException(f"User not found with id: {user_id}")
        return UserService.to_response(user)

    @staticmethod
    def get_profile(current_user: User) -> UserResponse:
        return UserService.to_response(current_user)

    @staticmethod
    def update_profile(db: Session, current_user: User, user_update: UserUpdate) -> UserResponse:
        """Only the caller's own names can change here"""
        current_user.first_name = user_update.first_name
        current_user.last_name = user_update.last_name
        db.commit()
        db.refresh(current_user)
        logger.info(f"User {current_user.id} updated profile")
        return UserService.to_response(current_user)

    @staticmethod
    def list_users(db: Session) -> List[UserResponse]:
        return [UserService.to_response(user) for user in UserRepository(db).list_all()]

    @staticmethod
    def get_stats(db: Session, current_user: User) -> UserStats:
        """Aggregate the caller's completed attempts"""
        attempts = QuizAttemptRepository(db).list_completed_by_user(current_user.id)
        if not attempts:
            return UserStats()

        percentages = [attempt.percentage_score or 0.0 for attempt in attempts]
        return UserStats(
            total_quizzes_taken=len(attempts),
            average_score=sum(percentages) / len(percentages),
            best_score=max(percentages),
            total_points=sum(attempt.score_obtained or 0 for attempt in attempts),
        )

    @staticmethod
    def create_user(
        db: Session,
        *,
        username: str,
        email: str,
        password: str,
        first_name: str = None,
        last_name: str = None,
        role: UserRole = UserRole.USER,
    ) -> User:
        """
        Add a user to the session without committing

        Raises:
            DuplicateException: username or email already taken
        """
        users = UserRepository(db)
        if users.exists_by_username(username):
            raise DuplicateException("Username already exists")
        if users.exists_by_email(email):
            raise DuplicateException("Email already exists")

        user = User(
            username=username,
            email=email,
            hashed_password=SecurityUtils.get_password_hash(password),
            first_name=first_name,
            last_name=last_name,
            role=role,
            is_active=True,
        )
        return users.add(user)
