"""
Quiz service for Quizly
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from quizly.core.exceptions import AuthorizationException, NotFoundException
from quizly.core.logging import get_audit_logger
from quizly.models.quiz import Quiz
from quizly.models.user import User
from quizly.repositories import QuizRepository
from quizly.schemas.quiz import QuizCreate, QuizResponse, QuizUpdate
from quizly.services.questions import QuestionService, build_question, can_manage_quiz

logger = logging.getLogger(__name__)
audit_logger = get_audit_logger()


class QuizService:
    """Quiz service"""

    @staticmethod
    def to_response(quiz: Quiz, include_questions: bool = False, reveal_answers: bool = False) -> QuizResponse:
        response = QuizResponse(
            id=quiz.id,
            title=quiz.title,
            description=quiz.description,
            topic=quiz.topic,
            difficulty_level=quiz.difficulty_level,
            time_limit_minutes=quiz.time_limit_minutes,
            passing_score=quiz.passing_score,
            is_active=quiz.is_active,
            created_by_id=quiz.created_by,
            created_by_username=quiz.creator.username if quiz.creator else None,
            total_questions=len(quiz.questions),
            total_points=quiz.total_points,
            created_at=quiz.created_at,
            updated_at=quiz.updated_at,
        )
        if include_questions:
            response.questions = [
                QuestionService.to_response(question, reveal_answers=reveal_answers)
                for question in sorted(quiz.questions, key=lambda q: (q.question_order, q.id))
            ]
        return response

    @staticmethod
    def _get_or_404(db: Session, quiz_id: int) -> Quiz:
        quiz = QuizRepository(db).get(quiz_id)
        if quiz is None:
            raise NotFoundException(f"Quiz not found with id: {quiz_id}")
        return quiz

    @staticmethod
    def create_quiz(db: Session, quiz_data: QuizCreate, current_user: User) -> QuizResponse:
        """Create a quiz, optionally with its questions, in one transaction"""
        if not current_user.is_admin:
            raise AuthorizationException("Only admins can create quizzes")

        quiz = Quiz(
            title=quiz_data.title,
            description=quiz_data.description,
            topic=quiz_data.topic,
            difficulty_level=quiz_data.difficulty_level,
            time_limit_minutes=quiz_data.time_limit_minutes,
            passing_score=quiz_data.passing_score,
            is_active=quiz_data.is_active,
            created_by=current_user.id,
        )
        for position, question_data in enumerate(quiz_data.questions, start=1):
            quiz.questions.append(build_question(question_data, default_order=position))

        QuizRepository(db).add(quiz)
        db.commit()
        db.refresh(quiz)

        audit_logger.info(
            "Quiz created",
            extra={"quiz_id": quiz.id, "user_id": current_user.id, "questions": len(quiz.questions)},
        )
        return QuizService.to_response(quiz, include_questions=True, reveal_answers=True)

    @staticmethod
    def update_quiz(db: Session, quiz_id: int, quiz_data: QuizUpdate, current_user: User) -> QuizResponse:
        quiz = QuizService._get_or_404(db, quiz_id)
        if not can_manage_quiz(current_user, quiz):
            raise AuthorizationException("You don't have permission to update this quiz")

        for field, value in quiz_data.model_dump().items():
            setattr(quiz, field, value)

        db.commit()
        db.refresh(quiz)
        audit_logger.info("Quiz updated", extra={"quiz_id": quiz.id, "user_id": current_user.id})
        return QuizService.to_response(quiz)

    @staticmethod
    def delete_quiz(db: Session, quiz_id: int, current_user: User) -> None:
        """Questions, options, attempts and answers go with it via ON DELETE CASCADE"""
        quiz = QuizService._get_or_404(db, quiz_id)
        if not can_manage_quiz(current_user, quiz):
            raise AuthorizationException("You don't have permission to delete this quiz")

        QuizRepository(db).delete_by_id(quiz_id)
        db.commit()
        audit_logger.info("Quiz deleted", extra={"quiz_id": quiz_id, "user_id": current_user.id})

    @staticmethod
    def get_quiz(db: Session, quiz_id: int, current_user: User) -> QuizResponse:
        quiz = QuizService._get_or_404(db, quiz_id)
        return QuizService.to_response(
            quiz, include_questions=True, reveal_answers=can_manage_quiz(current_user, quiz)
        )

    @staticmethod
    def get_quizzes(db: Session) -> List[QuizResponse]:
        return [QuizService.to_response(quiz) for quiz in QuizRepository(db).list_all()]

    @staticmethod
    def get_quizzes_by_topic(db: Session, topic: str) -> List[QuizResponse]:
        return [QuizService.to_response(quiz) for quiz in QuizRepository(db).list_by_topic(topic)]

    @staticmethod
    def get_topics(db: Session) -> List[str]:
        return QuizRepository(db).distinct_topics()

    @staticmethod
    def get_my_quizzes(db: Session, current_user: User) -> List[QuizResponse]:
        return [
            QuizService.to_response(quiz)
            for quiz in QuizRepository(db).list_by_creator(current_user.id)
        ]
