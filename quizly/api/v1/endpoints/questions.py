"""
Question endpoints
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from quizly.core.database import get_db
from quizly.core.security import get_current_user
from quizly.models.user import User
from quizly.schemas.common import ApiResponse, success_response
from quizly.schemas.quiz import QuestionCreate, QuestionResponse
from quizly.services.questions import QuestionService

router = APIRouter()


@router.post("", response_model=ApiResponse[QuestionResponse], status_code=status.HTTP_201_CREATED)
def create_question(
    question_data: QuestionCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add a question to a quiz (creator or admin)"""
    question = QuestionService.create_question(db, question_data, current_user)
    return success_response(question, "Question created successfully")


@router.get("/quiz/{quiz_id}", response_model=ApiResponse[List[QuestionResponse]])
def get_questions_by_quiz(
    quiz_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    questions = QuestionService.get_questions_by_quiz(db, quiz_id, current_user)
    return success_response(questions, "Questions retrieved successfully")


@router.get("/{question_id}", response_model=ApiResponse[QuestionResponse])
def get_question(
    question_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    question = QuestionService.get_question(db, question_id, current_user)
    return success_response(question, "Question retrieved successfully")


@router.delete("/{question_id}", response_model=ApiResponse)
def delete_question(
    question_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete a question, its options and the answers given to it"""
    QuestionService.delete_question(db, question_id, current_user)
    return success_response(message="Question deleted successfully")
