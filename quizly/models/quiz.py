"""
Quiz, question and option models for Quizly

Ownership runs one way: a quiz holds its ordered questions and a question
holds its ordered options. Children only keep their parent's id.
"""

import enum

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from quizly.core.database import Base


class DifficultyLevel(str, enum.Enum):
    """Quiz difficulty levels"""
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class QuestionType(str, enum.Enum):
    SINGLE_CHOICE = "SINGLE_CHOICE"
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"


class Quiz(Base):
    """Quiz model"""
    __tablename__ = "quizzes"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    topic = Column(String(100), nullable=False, index=True)
    difficulty_level = Column(Enum(DifficultyLevel), default=DifficultyLevel.MEDIUM, nullable=False)

    time_limit_minutes = Column(Integer, nullable=True)  # stored, not enforced
    passing_score = Column(Integer, nullable=True)  # percentage
    is_active = Column(Boolean, default=True, nullable=False)

    created_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    questions = relationship(
        "Question",
        order_by="[Question.question_order, Question.id]",
        lazy="selectin",
        passive_deletes=True,
    )
    creator = relationship("User", lazy="joined", viewonly=True)

    @property
    def total_points(self) -> int:
        return sum(question.points for question in self.questions)


class Question(Base):
    """Question model"""
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)

    question_text = Column(Text, nullable=False)
    question_type = Column(Enum(QuestionType), default=QuestionType.SINGLE_CHOICE, nullable=False)
    points = Column(Integer, default=1, nullable=False)
    question_order = Column(Integer, nullable=True)
    explanation = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    options = relationship(
        "QuestionOption",
        order_by="[QuestionOption.option_order, QuestionOption.id]",
        lazy="selectin",
        passive_deletes=True,
    )

    def correct_option_ids(self) -> set[int]:
        return {option.id for option in self.options if option.is_correct}


class QuestionOption(Base):
    """Answer option of a question"""
    __tablename__ = "question_options"

    id = Column(Integer, primary_key=True, index=True)
    question_id = Column(
        Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True
    )

    option_text = Column(Text, nullable=False)
    is_correct = Column(Boolean, default=False, nullable=False)
    option_order = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
