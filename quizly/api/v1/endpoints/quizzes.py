"""
Quiz endpoints
Static paths are declared before /{quiz_id} so they are not parsed as IDs
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from quizly.core.database import get_db
from quizly.core.security import get_current_user, require_admin
from quizly.models.user import User
from quizly.schemas.common import ApiResponse, success_response
from quizly.schemas.quiz import QuizCreate, QuizResponse, QuizUpdate
from quizly.services.quizzes import QuizService

router = APIRouter()


@router.get("", response_model=ApiResponse[List[QuizResponse]])
def get_quizzes(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """List all quizzes"""
    return success_response(QuizService.get_quizzes(db), "Quizzes retrieved successfully")


@router.get("/topics", response_model=ApiResponse[List[str]])
def get_topics(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Distinct quiz topics, sorted"""
    return success_response(QuizService.get_topics(db), "Topics retrieved successfully")


@router.get("/my-quizzes", response_model=ApiResponse[List[QuizResponse]])
def get_my_quizzes(current_user: User = Depends(require_admin), db: Session = Depends(get_db)):
    """Quizzes created by the caller (admin only)"""
    return success_response(QuizService.get_my_quizzes(db, current_user), "Quizzes retrieved successfully")


@router.get("/topic/{topic}", response_model=ApiResponse[List[QuizResponse]])
def get_quizzes_by_topic(
    topic: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List quizzes on one topic"""
    return success_response(QuizService.get_quizzes_by_topic(db, topic), "Quizzes retrieved successfully")


@router.post("", response_model=ApiResponse[QuizResponse], status_code=status.HTTP_201_CREATED)
def create_quiz(
    quiz_data: QuizCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Create a quiz, optionally with nested questions (admin only)"""
    quiz = QuizService.create_quiz(db, quiz_data, current_user)
    return success_response(quiz, "Quiz created successfully")


@router.get("/{quiz_id}", response_model=ApiResponse[QuizResponse])
def get_quiz(quiz_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get a quiz with its questions"""
    return success_response(QuizService.get_quiz(db, quiz_id, current_user), "Quiz retrieved successfully")


@router.put("/{quiz_id}", response_model=ApiResponse[QuizResponse])
def update_quiz(
    quiz_id: int,
    quiz_data: QuizUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update a quiz (creator or admin)"""
    quiz = QuizService.update_quiz(db, quiz_id, quiz_data, current_user)
    return success_response(quiz, "Quiz updated successfully")


@router.delete("/{quiz_id}", response_model=ApiResponse)
def delete_quiz(quiz_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Delete a quiz with everything that hangs off it (creator or admin)"""
    QuizService.delete_quiz(db, quiz_id, current_user)
    return success_response(message="Quiz deleted successfully")
