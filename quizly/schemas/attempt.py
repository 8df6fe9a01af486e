"""Attempt schemas"""

from datetime import datetime
from typing import List, Optional, Set

from pydantic import BaseModel

from quizly.models.attempt import AttemptStatus
from quizly.schemas.quiz import QuestionResponse


class StartQuizRequest(BaseModel):
    quiz_id: int


class SubmitAnswerRequest(BaseModel):
    attempt_id: int
    question_id: int
    selected_option_ids: Set[int]


class CompleteQuizRequest(BaseModel):
    attempt_id: int


class UserAnswerResponse(BaseModel):
    id: int
    question_id: int
    question_text: Optional[str] = None
    selected_option_ids: List[int]
    is_correct: bool
    points_earned: int
    explanation: Optional[str] = None


class QuizAttemptResponse(BaseModel):
    id: int
    user_id: int
    username: Optional[str] = None
    quiz_id: int
    quiz_title: Optional[str] = None
    time_limit_minutes: Optional[int] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    score_obtained: Optional[int] = None
    total_score: int
    percentage_score: Optional[float] = None
    is_passed: Optional[bool] = None
    status: AttemptStatus
    time_taken_minutes: Optional[int] = None
    total_questions: int = 0
    attempt_count: Optional[int] = None
    answers: Optional[List[UserAnswerResponse]] = None
    questions: Optional[List[QuestionResponse]] = None
