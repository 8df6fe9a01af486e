"""
Quiz attempt endpoints
Start, answer, complete and review attempts
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from quizly.core.database import get_db
from quizly.core.security import get_current_user
from quizly.models.user import User
from quizly.schemas.attempt import (
    CompleteQuizRequest,
    QuizAttemptResponse,
    StartQuizRequest,
    SubmitAnswerRequest,
    UserAnswerResponse,
)
from quizly.schemas.common import ApiResponse, success_response
from quizly.services.attempts import AttemptService

router = APIRouter()


@router.post("/start", response_model=ApiResponse[QuizAttemptResponse], status_code=status.HTTP_201_CREATED)
def start_quiz(
    request: StartQuizRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Open a new attempt and return the questions to answer"""
    attempt = AttemptService.start_quiz(db, request, current_user)
    return success_response(attempt, "Quiz started successfully")


@router.post("/submit-answer", response_model=ApiResponse[UserAnswerResponse])
def submit_answer(
    request: SubmitAnswerRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Record or overwrite the answer to one question"""
    answer = AttemptService.submit_answer(db, request, current_user)
    return success_response(answer, "Answer submitted successfully")


@router.post("/complete", response_model=ApiResponse[QuizAttemptResponse])
def complete_quiz(
    request: CompleteQuizRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Score and close an attempt"""
    attempt = AttemptService.complete_quiz(db, request, current_user)
    return success_response(attempt, "Quiz completed successfully")


@router.get("/my-attempts", response_model=ApiResponse[List[QuizAttemptResponse]])
def get_my_attempts(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """The caller's completed attempts, newest first"""
    return success_response(AttemptService.get_my_attempts(db, current_user), "Attempts retrieved successfully")


@router.get("/quiz/{quiz_id}", response_model=ApiResponse[List[QuizAttemptResponse]])
def get_attempts_by_quiz(
    quiz_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    attempts = AttemptService.get_attempts_by_quiz(db, quiz_id, current_user)
    return success_response(attempts, "Attempts retrieved successfully")


@router.get("/{attempt_id}", response_model=ApiResponse[QuizAttemptResponse])
def get_attempt(
    attempt_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get one attempt with its answers (owner or admin)"""
    attempt = AttemptService.get_attempt(db, attempt_id, current_user)
    return success_response(attempt, "Attempt retrieved successfully")
