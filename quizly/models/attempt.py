"""
Quiz attempt and answer models for Quizly
"""

import enum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    Table,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from quizly.core.database import Base


class AttemptStatus(str, enum.Enum):
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    ABANDONED = "ABANDONED"


user_answer_options = Table(
    "user_answer_options",
    Base.metadata,
    Column("user_answer_id", Integer, ForeignKey("user_answers.id", ondelete="CASCADE"), primary_key=True),
    Column("option_id", Integer, ForeignKey("question_options.id", ondelete="CASCADE"), primary_key=True),
)


class QuizAttempt(Base):
    """Quiz attempt tracking"""
    __tablename__ = "quiz_attempts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)

    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=True)
    status = Column(Enum(AttemptStatus), default=AttemptStatus.IN_PROGRESS, nullable=False, index=True)

    score_obtained = Column(Integer, nullable=True)
    total_score = Column(Integer, nullable=False, default=0)  # snapshot taken at start
    percentage_score = Column(Float, nullable=True)
    is_passed = Column(Boolean, nullable=True)
    time_taken_minutes = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    answers = relationship(
        "UserAnswer",
        order_by="UserAnswer.id",
        lazy="selectin",
        passive_deletes=True,
    )
    user = relationship("User", lazy="joined", viewonly=True)
    quiz = relationship("Quiz", lazy="joined", viewonly=True)


class UserAnswer(Base):
    """One answer per (attempt, question); resubmission overwrites it"""
    __tablename__ = "user_answers"
    __table_args__ = (
        UniqueConstraint("quiz_attempt_id", "question_id", name="uq_user_answer_attempt_question"),
    )

    id = Column(Integer, primary_key=True, index=True)
    quiz_attempt_id = Column(
        Integer, ForeignKey("quiz_attempts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    question_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False)

    is_correct = Column(Boolean, default=False, nullable=False)
    points_earned = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    selected_options = relationship("QuestionOption", secondary=user_answer_options, lazy="selectin")
    question = relationship("Question", lazy="joined", viewonly=True)

    @property
    def selected_option_ids(self) -> set[int]:
        return {option.id for option in self.selected_options}
