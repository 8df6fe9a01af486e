"""
Question service for Quizly
"""

import logging
from typing import Iterable, List

from sqlalchemy.orm import Session

from quizly.core.exceptions import AuthorizationException, BadRequestException, NotFoundException
from quizly.core.logging import get_audit_logger
from quizly.models.quiz import Question, QuestionOption, Quiz
from quizly.models.user import User
from quizly.repositories import QuestionRepository, QuizRepository
from quizly.schemas.quiz import OptionCreate, OptionResponse, QuestionBase, QuestionCreate, QuestionResponse

logger = logging.getLogger(__name__)
audit_logger = get_audit_logger()


def can_manage_quiz(user: User, quiz: Quiz) -> bool:
    """Creators and admins may change a quiz and its questions"""
    return user.is_admin or quiz.created_by == user.id


def build_options(options: Iterable[OptionCreate]) -> List[QuestionOption]:
    """Options without an explicit order take their 1-based position"""
    return [
        QuestionOption(
            option_text=option.option_text,
            is_correct=option.is_correct,
            option_order=option.option_order if option.option_order is not None else index,
        )
        for index, option in enumerate(options, start=1)
    ]


def build_question(data: QuestionBase, default_order: int) -> Question:
    if not any(option.is_correct for option in data.options):
        raise BadRequestException("At least one option must be marked as correct")

    question = Question(
        question_text=data.question_text,
        question_type=data.question_type,
        points=data.points,
        question_order=data.question_order if data.question_order is not None else default_order,
        explanation=data.explanation,
    )
    question.options.extend(build_options(data.options))
    return question


class QuestionService:
    """Question service"""

    @staticmethod
    def to_response(question: Question, reveal_answers: bool = False) -> QuestionResponse:
        """
        Convert a question to its response schema

        Args:
            question: Question with options loaded
            reveal_answers: include each option's is_correct flag
        """
        return QuestionResponse(
            id=question.id,
            quiz_id=question.quiz_id,
            question_text=question.question_text,
            question_type=question.question_type,
            points=question.points,
            question_order=question.question_order,
            explanation=question.explanation,
            options=[
                OptionResponse(
                    id=option.id,
                    option_text=option.option_text,
                    option_order=option.option_order,
                    is_correct=option.is_correct if reveal_answers else None,
                )
                for option in sorted(question.options, key=lambda o: (o.option_order, o.id))
            ],
        )

    @staticmethod
    def create_question(db: Session, question_data: QuestionCreate, current_user: User) -> QuestionResponse:
        quiz = QuizRepository(db).get(question_data.quiz_id)
        if quiz is None:
            raise NotFoundException(f"Quiz not found with id: {question_data.quiz_id}")
        if not can_manage_quiz(current_user, quiz):
            raise AuthorizationException("You don't have permission to add questions to this quiz")

        questions = QuestionRepository(db)
        question = build_question(question_data, default_order=questions.next_order(quiz.id))
        question.quiz_id = quiz.id
        questions.add(question)
        db.commit()
        db.refresh(question)

        audit_logger.info(
            "Question created",
            extra={"question_id": question.id, "quiz_id": quiz.id, "user_id": current_user.id},
        )
        return QuestionService.to_response(question, reveal_answers=True)

    @staticmethod
    def delete_question(db: Session, question_id: int, current_user: User) -> None:
        questions = QuestionRepository(db)
        question = questions.get(question_id)
        if question is None:
            raise NotFoundException(f"Question not found with id: {question_id}")

        quiz = QuizRepository(db).get(question.quiz_id)
        if not can_manage_quiz(current_user, quiz):
            raise AuthorizationException("You don't have permission to delete this question")

        questions.delete_by_id(question_id)
        db.commit()
        audit_logger.info(
            "Question deleted",
            extra={"question_id": question_id, "quiz_id": quiz.id, "user_id": current_user.id},
        )

    @staticmethod
    def get_question(db: Session, question_id: int, current_user: User) -> QuestionResponse:
        question = QuestionRepository(db).get(question_id)
        if question is None:
            raise NotFoundException(f"Question not found with id: {question_id}")
        quiz = QuizRepository(db).get(question.quiz_id)
        return QuestionService.to_response(question, reveal_answers=can_manage_quiz(current_user, quiz))

    @staticmethod
    def get_questions_by_quiz(db: Session, quiz_id: int, current_user: User) -> List[QuestionResponse]:
        quiz = QuizRepository(db).get(quiz_id)
        if quiz is None:
            raise NotFoundException(f"Quiz not found with id: {quiz_id}")
        reveal = can_manage_quiz(current_user, quiz)
        return [
            QuestionService.to_response(question, reveal_answers=reveal)
            for question in QuestionRepository(db).list_by_quiz(quiz_id)
        ]
