"""
Leaderboard service for Quizly
Ranks users by their completed attempts, globally or per quiz
"""

import logging
from typing import Dict, Iterable, List

from sqlalchemy.orm import Session

from quizly.core.exceptions import NotFoundException
from quizly.models.attempt import QuizAttempt
from quizly.models.user import User
from quizly.repositories import QuizAttemptRepository, QuizRepository
from quizly.schemas.leaderboard import LeaderboardEntry

logger = logging.getLogger(__name__)


def _entry(user, **values) -> LeaderboardEntry:
    return LeaderboardEntry(
        rank=0,
        user_id=user.id,
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
        **values,
    )


def _assign_ranks(entries: List[LeaderboardEntry], limit: int) -> List[LeaderboardEntry]:
    """Stable sort by total score descending, then number from 1 and truncate"""
    entries.sort(key=lambda entry: entry.total_score, reverse=True)
    for position, entry in enumerate(entries, start=1):
        entry.rank = position
    return entries[:limit]


def rank_global(attempts: Iterable[QuizAttempt], limit: int) -> List[LeaderboardEntry]:
    """
    Fold completed attempts into one entry per user

    A user's total is the sum of every attempt's score, so many modest
    attempts can outrank a single perfect one. Users keep the order in which
    they were first seen when totals tie.
    """
    grouped: Dict[int, List[QuizAttempt]] = {}
    for attempt in attempts:
        grouped.setdefault(attempt.user_id, []).append(attempt)

    entries = []
    for user_attempts in grouped.values():
        percentages = [attempt.percentage_score or 0.0 for attempt in user_attempts]
        entries.append(
            _entry(
                user_attempts[0].user,
                total_score=sum(attempt.score_obtained or 0 for attempt in user_attempts),
                average_score=sum(percentages) / len(percentages),
                attempt_count=len(user_attempts),
            )
        )
    return _assign_ranks(entries, limit)


def rank_quiz(attempts: Iterable[QuizAttempt], limit: int) -> List[LeaderboardEntry]:
    """Keep each user's best attempt on the quiz; the first one seen wins ties"""
    best: Dict[int, QuizAttempt] = {}
    for attempt in attempts:
        current = best.get(attempt.user_id)
        if current is None or (attempt.score_obtained or 0) > (current.score_obtained or 0):
            best[attempt.user_id] = attempt

    entries = [
        _entry(
            attempt.user,
            total_score=attempt.score_obtained or 0,
            average_score=attempt.percentage_score or 0.0,
            attempt_count=1,
            quiz_id=attempt.quiz_id,
            quiz_title=attempt.quiz.title,
            total_questions=len(attempt.quiz.questions),
        )
        for attempt in best.values()
    ]
    return _assign_ranks(entries, limit)


class LeaderboardService:
    """Leaderboard service"""

    @staticmethod
    def get_global_leaderboard(db: Session, limit: int, current_user: User) -> List[LeaderboardEntry]:
        attempts = QuizAttemptRepository(db).list_completed_ordered_by_score()
        logger.debug(f"Global leaderboard for user {current_user.id} over {len(attempts)} attempts")
        return rank_global(attempts, limit)

    @staticmethod
    def get_quiz_leaderboard(
        db: Session, quiz_id: int, limit: int, current_user: User
    ) -> List[LeaderboardEntry]:
        if QuizRepository(db).get(quiz_id) is None:
            raise NotFoundException(f"Quiz not found with id: {quiz_id}")
        attempts = QuizAttemptRepository(db).list_completed_ordered_by_score(quiz_id=quiz_id)
        logger.debug(f"Quiz {quiz_id} leaderboard for user {current_user.id} over {len(attempts)} attempts")
        return rank_quiz(attempts, limit)
