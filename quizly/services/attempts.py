"""
Attempt service for Quizly
Starts attempts, records answers and scores completed attempts
"""

import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quizly.core.exceptions import AuthorizationException, BadRequestException, NotFoundException
from quizly.core.logging import get_audit_logger
from quizly.models.attempt import AttemptStatus, QuizAttempt, UserAnswer
from quizly.models.quiz import Question
from quizly.models.user import User
from quizly.repositories import (
    QuestionOptionRepository,
    QuestionRepository,
    QuizAttemptRepository,
    QuizRepository,
    UserAnswerRepository,
)
from quizly.schemas.attempt import (
    CompleteQuizRequest,
    QuizAttemptResponse,
    StartQuizRequest,
    SubmitAnswerRequest,
    UserAnswerResponse,
)
from quizly.services.questions import QuestionService

logger = logging.getLogger(__name__)
audit_logger = get_audit_logger()


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the attempt time columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def is_answer_correct(selected_option_ids: Iterable[int], correct_option_ids: Iterable[int]) -> bool:
    """Exact set equality: a subset or superset of the key is wrong"""
    return set(selected_option_ids) == set(correct_option_ids)


def percentage_of(score_obtained: int, total_score: int) -> float:
    if total_score <= 0:
        return 0.0
    return score_obtained / total_score * 100


def elapsed_minutes(start_time: datetime, end_time: datetime) -> int:
    """Whole minutes between start and end, rounded down"""
    return int((end_time - start_time).total_seconds() // 60)


def score_attempt(
    attempt: QuizAttempt,
    answers: Iterable[UserAnswer],
    passing_score: Optional[int],
    end_time: datetime,
) -> Dict[str, object]:
    """
    Compute the columns written when an attempt completes

    Unanswered questions simply contribute nothing. With no scored questions
    the attempt is 0% and not passed; with no passing score configured
    is_passed stays unset.
    """
    score_obtained = sum(answer.points_earned or 0 for answer in answers)
    values = {
        "end_time": end_time,
        "status": AttemptStatus.COMPLETED,
        "score_obtained": score_obtained,
        "time_taken_minutes": elapsed_minutes(attempt.start_time, end_time),
    }

    if attempt.total_score > 0:
        percentage = percentage_of(score_obtained, attempt.total_score)
        values["percentage_score"] = percentage
        if passing_score is not None:
            values["is_passed"] = percentage >= passing_score
    else:
        values["percentage_score"] = 0.0
        values["is_passed"] = False
    return values


class AttemptService:
    """Quiz attempt lifecycle"""

    @staticmethod
    def answer_to_response(answer: UserAnswer) -> UserAnswerResponse:
        return UserAnswerResponse(
            id=answer.id,
            question_id=answer.question_id,
            question_text=answer.question.question_text if answer.question else None,
            selected_option_ids=sorted(answer.selected_option_ids),
            is_correct=answer.is_correct,
            points_earned=answer.points_earned,
            explanation=answer.question.explanation if answer.question else None,
        )

    @staticmethod
    def to_response(
        attempt: QuizAttempt,
        answers: Optional[List[UserAnswer]] = None,
        attempt_count: Optional[int] = None,
    ) -> QuizAttemptResponse:
        response = QuizAttemptResponse(
            id=attempt.id,
            user_id=attempt.user_id,
            username=attempt.user.username if attempt.user else None,
            quiz_id=attempt.quiz_id,
            quiz_title=attempt.quiz.title if attempt.quiz else None,
            time_limit_minutes=attempt.quiz.time_limit_minutes if attempt.quiz else None,
            start_time=attempt.start_time,
            end_time=attempt.end_time,
            score_obtained=attempt.score_obtained,
            total_score=attempt.total_score,
            percentage_score=attempt.percentage_score,
            is_passed=attempt.is_passed,
            status=attempt.status,
            time_taken_minutes=attempt.time_taken_minutes,
            total_questions=len(attempt.quiz.questions) if attempt.quiz else 0,
            attempt_count=attempt_count,
        )
        if answers is not None:
            response.answers = [AttemptService.answer_to_response(answer) for answer in answers]
        return response

    @staticmethod
    def _get_owned_attempt(db: Session, attempt_id: int, current_user: User) -> QuizAttempt:
        attempt = QuizAttemptRepository(db).get(attempt_id)
        if attempt is None:
            raise NotFoundException(f"Quiz attempt not found with id: {attempt_id}")
        if attempt.user_id != current_user.id:
            raise AuthorizationException("This attempt does not belong to you")
        return attempt

    @staticmethod
    def start_quiz(db: Session, request: StartQuizRequest, current_user: User) -> QuizAttemptResponse:
        """
        Open a new attempt

        The total score is a snapshot of the quiz's points right now and is
        never recalculated. Returned questions hide the answer key.
        """
        quiz = QuizRepository(db).get(request.quiz_id)
        if quiz is None:
            raise NotFoundException(f"Quiz not found with id: {request.quiz_id}")

        attempt = QuizAttempt(
            user_id=current_user.id,
            quiz_id=quiz.id,
            start_time=utcnow(),
            status=AttemptStatus.IN_PROGRESS,
            total_score=quiz.total_points,
        )
        QuizAttemptRepository(db).add(attempt)
        db.commit()
        db.refresh(attempt)

        audit_logger.info(
            "Attempt started",
            extra={"attempt_id": attempt.id, "quiz_id": quiz.id, "user_id": current_user.id},
        )

        response = AttemptService.to_response(attempt)
        response.questions = [
            QuestionService.to_response(question, reveal_answers=False) for question in quiz.questions
        ]
        return response

    @staticmethod
    def submit_answer(db: Session, request: SubmitAnswerRequest, current_user: User) -> UserAnswerResponse:
        attempt = AttemptService._get_owned_attempt(db, request.attempt_id, current_user)
        if attempt.status != AttemptStatus.IN_PROGRESS:
            raise BadRequestException("This quiz attempt is not in progress")

        question = QuestionRepository(db).get(request.question_id)
        if question is None:
            raise NotFoundException(f"Question not found with id: {request.question_id}")
        if question.quiz_id != attempt.quiz_id:
            raise BadRequestException("This question does not belong to the quiz")

        selected_options = QuestionOptionRepository(db).list_by_ids(request.selected_option_ids)
        found_ids = {option.id for option in selected_options}
        missing = sorted(set(request.selected_option_ids) - found_ids)
        if missing:
            raise NotFoundException(f"Option not found with id: {missing[0]}")
        if any(option.question_id != question.id for option in selected_options):
            raise BadRequestException("Option does not belong to this question")

        correct = is_answer_correct(found_ids, question.correct_option_ids())

        answer = UserAnswerRepository(db).get_for_question(attempt.id, question.id)
        if answer is None:
            answer = AttemptService._insert_answer(db, attempt.id, question)

        answer.selected_options = selected_options
        answer.is_correct = correct
        answer.points_earned = question.points if correct else 0
        db.commit()
        db.refresh(answer)

        logger.debug(
            f"Answer recorded for attempt {attempt.id} question {question.id}: correct={correct}"
        )
        return AttemptService.answer_to_response(answer)

    @staticmethod
    def _insert_answer(db: Session, attempt_id: int, question: Question) -> UserAnswer:
        """
        Insert the (attempt, question) row inside a savepoint

        If a concurrent request inserted it first the unique constraint fires
        and the existing row is returned for overwriting instead.
        """
        try:
            with db.begin_nested():
                answer = UserAnswer(quiz_attempt_id=attempt_id, question_id=question.id)
                db.add(answer)
            return answer
        except IntegrityError:
            logger.info(f"Answer for attempt {attempt_id} question {question.id} already exists, overwriting")
            existing = UserAnswerRepository(db).get_for_question(attempt_id, question.id)
            if existing is None:
                raise
            return existing

    @staticmethod
    def complete_quiz(db: Session, request: CompleteQuizRequest, current_user: User) -> QuizAttemptResponse:
        attempt = AttemptService._get_owned_attempt(db, request.attempt_id, current_user)
        if attempt.status != AttemptStatus.IN_PROGRESS:
            raise BadRequestException("This quiz attempt is already completed or abandoned")

        answers = UserAnswerRepository(db).list_by_attempt(attempt.id)
        values = score_attempt(attempt, answers, attempt.quiz.passing_score, utcnow())

        # conditional on status so two racing completions cannot both succeed
        claimed = (
            db.query(QuizAttempt)
            .filter(QuizAttempt.id == attempt.id, QuizAttempt.status == AttemptStatus.IN_PROGRESS)
            .update(values, synchronize_session=False)
        )
        if claimed != 1:
            db.rollback()
            raise BadRequestException("This quiz attempt is already completed or abandoned")

        db.commit()
        db.refresh(attempt)

        audit_logger.info(
            "Attempt completed",
            extra={
                "attempt_id": attempt.id,
                "user_id": current_user.id,
                "score_obtained": attempt.score_obtained,
                "total_score": attempt.total_score,
            },
        )
        return AttemptService.to_response(attempt, answers=answers)

    @staticmethod
    def get_attempt(db: Session, attempt_id: int, current_user: User) -> QuizAttemptResponse:
        attempt = QuizAttemptRepository(db).get(attempt_id)
        if attempt is None:
            raise NotFoundException(f"Quiz attempt not found with id: {attempt_id}")
        if attempt.user_id != current_user.id and not current_user.is_admin:
            raise AuthorizationException("You don't have permission to view this attempt")

        answers = UserAnswerRepository(db).list_by_attempt(attempt.id)
        return AttemptService.to_response(attempt, answers=answers)

    @staticmethod
    def get_my_attempts(db: Session, current_user: User) -> List[QuizAttemptResponse]:
        """
        Completed attempts, newest first

        attempt_count is the attempt's ordinal among the caller's completed
        attempts on the same quiz.
        """
        completed = QuizAttemptRepository(db).list_completed_by_user(current_user.id)

        by_quiz: Dict[int, List[QuizAttempt]] = defaultdict(list)
        for attempt in completed:
            by_quiz[attempt.quiz_id].append(attempt)

        ordinals: Dict[int, int] = {}
        for quiz_attempts in by_quiz.values():
            quiz_attempts.sort(key=lambda a: (a.start_time, a.id))
            for position, attempt in enumerate(quiz_attempts, start=1):
                ordinals[attempt.id] = position

        completed.sort(key=lambda a: a.end_time, reverse=True)
        return [
            AttemptService.to_response(attempt, attempt_count=ordinals[attempt.id])
            for attempt in completed
        ]

    @staticmethod
    def get_attempts_by_quiz(db: Session, quiz_id: int, current_user: User) -> List[QuizAttemptResponse]:
        return [
            AttemptService.to_response(attempt)
            for attempt in QuizAttemptRepository(db).list_by_user_and_quiz(current_user.id, quiz_id)
        ]
