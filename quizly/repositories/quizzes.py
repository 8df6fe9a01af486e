from typing import List

from sqlalchemy import func

from quizly.models.quiz import Question, QuestionOption, Quiz
from quizly.repositories.base import BaseRepository


class QuizRepository(BaseRepository[Quiz]):
    model = Quiz

    def list_by_topic(self, topic: str) -> List[Quiz]:
        return self.db.query(Quiz).filter(Quiz.topic == topic).order_by(Quiz.id).all()

    def list_by_creator(self, user_id: int) -> List[Quiz]:
        return self.db.query(Quiz).filter(Quiz.created_by == user_id).order_by(Quiz.id).all()

    def distinct_topics(self) -> List[str]:
        rows = self.db.query(Quiz.topic).distinct().order_by(Quiz.topic).all()
        return [topic for (topic,) in rows]

    def count_by_creator(self, user_id: int) -> int:
        return self.db.query(Quiz).filter(Quiz.created_by == user_id).count()


class QuestionRepository(BaseRepository[Question]):
    model = Question

    def list_by_quiz(self, quiz_id: int) -> List[Question]:
        return (
            self.db.query(Question)
            .filter(Question.quiz_id == quiz_id)
            .order_by(Question.question_order, Question.id)
            .all()
        )

    def next_order(self, quiz_id: int) -> int:
        current = (
            self.db.query(func.max(Question.question_order))
            .filter(Question.quiz_id == quiz_id)
            .scalar()
        )
        return (current or 0) + 1


class QuestionOptionRepository(BaseRepository[QuestionOption]):
    model = QuestionOption

    def list_by_ids(self, option_ids) -> List[QuestionOption]:
        if not option_ids:
            return []
        return self.db.query(QuestionOption).filter(QuestionOption.id.in_(list(option_ids))).all()
