"""
Leaderboard endpoints
Handles global and quiz-specific leaderboards
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from quizly.core.config import settings
from quizly.core.database import get_db
from quizly.core.security import get_current_user
from quizly.models.user import User
from quizly.schemas.common import ApiResponse, success_response
from quizly.schemas.leaderboard import LeaderboardEntry
from quizly.services.leaderboard import LeaderboardService

router = APIRouter()


@router.get("/global", response_model=ApiResponse[List[LeaderboardEntry]])
def get_global_leaderboard(
    limit: int = Query(settings.LEADERBOARD_DEFAULT_LIMIT, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get global leaderboard"""
    entries = LeaderboardService.get_global_leaderboard(db, limit, current_user)
    return success_response(entries, "Leaderboard retrieved successfully")


@router.get("/quiz/{quiz_id}", response_model=ApiResponse[List[LeaderboardEntry]])
def get_quiz_leaderboard(
    quiz_id: int,
    limit: int = Query(settings.LEADERBOARD_DEFAULT_LIMIT, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get quiz-specific leaderboard"""
    entries = LeaderboardService.get_quiz_leaderboard(db, quiz_id, limit, current_user)
    return success_response(entries, "Leaderboard retrieved successfully")
