"""
Quiz and question schemas for Quizly
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from quizly.models.quiz import DifficultyLevel, QuestionType


class OptionCreate(BaseModel):
    option_text: str = Field(..., min_length=1)
    is_correct: bool
    option_order: Optional[int] = None


class QuestionBase(BaseModel):
    """Base question schema"""
    question_text: str = Field(..., min_length=1)
    question_type: QuestionType = QuestionType.SINGLE_CHOICE
    points: int = Field(1, ge=0)
    question_order: Optional[int] = None
    explanation: Optional[str] = None
    options: List[OptionCreate] = Field(..., min_length=1)


class QuestionInQuizCreate(QuestionBase):
    """Question created together with its quiz"""
    pass


class QuestionCreate(QuestionBase):
    """Question added to an existing quiz"""
    quiz_id: int


class OptionResponse(BaseModel):
    id: int
    option_text: str
    option_order: Optional[int] = None
    # None when the caller may not see the answer key
    is_correct: Optional[bool] = None


class QuestionResponse(BaseModel):
    """Question response schema"""
    id: int
    quiz_id: int
    question_text: str
    question_type: QuestionType
    points: int
    question_order: Optional[int] = None
    explanation: Optional[str] = None
    options: List[OptionResponse] = []


class QuizBase(BaseModel):
    """Base quiz schema"""
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    topic: str = Field(..., min_length=1, max_length=100)
    difficulty_level: DifficultyLevel = DifficultyLevel.MEDIUM
    time_limit_minutes: Optional[int] = Field(None, ge=1)
    passing_score: Optional[int] = Field(None, ge=0, le=100)
    is_active: bool = True


class QuizCreate(QuizBase):
    """Quiz creation schema"""
    questions: List[QuestionInQuizCreate] = []


class QuizUpdate(QuizBase):
    """Full replacement of a quiz's own fields; questions are managed separately"""
    pass


class QuizResponse(QuizBase):
    """Quiz response schema"""
    id: int
    created_by_id: int
    created_by_username: Optional[str] = None
    total_questions: int
    total_points: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    questions: Optional[List[QuestionResponse]] = None
