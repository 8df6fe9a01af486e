from typing import List, Optional

from quizly.models.attempt import AttemptStatus, QuizAttempt, UserAnswer
from quizly.repositories.base import BaseRepository


class QuizAttemptRepository(BaseRepository[QuizAttempt]):
    model = QuizAttempt

    def list_by_user_and_quiz(self, user_id: int, quiz_id: int) -> List[QuizAttempt]:
        return (
            self.db.query(QuizAttempt)
            .filter(QuizAttempt.user_id == user_id, QuizAttempt.quiz_id == quiz_id)
            .order_by(QuizAttempt.id)
            .all()
        )

    def list_completed_by_user(self, user_id: int) -> List[QuizAttempt]:
        return (
            self.db.query(QuizAttempt)
            .filter(QuizAttempt.user_id == user_id, QuizAttempt.status == AttemptStatus.COMPLETED)
            .order_by(QuizAttempt.end_time.desc())
            .all()
        )

    def list_completed_ordered_by_score(self, quiz_id: Optional[int] = None) -> List[QuizAttempt]:
        query = self.db.query(QuizAttempt).filter(QuizAttempt.status == AttemptStatus.COMPLETED)
        if quiz_id is not None:
            query = query.filter(QuizAttempt.quiz_id == quiz_id)
        return query.order_by(QuizAttempt.score_obtained.desc(), QuizAttempt.id).all()


class UserAnswerRepository(BaseRepository[UserAnswer]):
    model = UserAnswer

    def get_for_question(self, attempt_id: int, question_id: int) -> Optional[UserAnswer]:
        return (
            self.db.query(UserAnswer)
            .filter(UserAnswer.quiz_attempt_id == attempt_id, UserAnswer.question_id == question_id)
            .first()
        )

    def list_by_attempt(self, attempt_id: int) -> List[UserAnswer]:
        return (
            self.db.query(UserAnswer)
            .filter(UserAnswer.quiz_attempt_id == attempt_id)
            .order_by(UserAnswer.id)
            .all()
        )
