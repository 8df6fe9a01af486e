"""
User endpoints
Profile, statistics and user lookup
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from quizly.core.database import get_db
from quizly.core.security import get_current_user, require_admin
from quizly.models.user import User
from quizly.schemas.common import ApiResponse, success_response
from quizly.schemas.user import UserResponse, UserStats, UserUpdate
from quizly.services.users import UserService

router = APIRouter()


@router.get("/me", response_model=ApiResponse[UserResponse])
def get_profile(current_user: User = Depends(get_current_user)):
    """Get the caller's profile"""
    return success_response(UserService.get_profile(current_user), "Profile retrieved successfully")


@router.put("/me", response_model=ApiResponse[UserResponse])
def update_profile(
    user_update: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update the caller's first and last name"""
    user = UserService.update_profile(db, current_user, user_update)
    return success_response(user, "Profile updated successfully")


@router.get("/me/stats", response_model=ApiResponse[UserStats])
def get_my_stats(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Aggregate statistics over the caller's completed attempts"""
    return success_response(UserService.get_stats(db, current_user), "Statistics retrieved successfully")


@router.get("", response_model=ApiResponse[List[UserResponse]])
def list_users(current_user: User = Depends(require_admin), db: Session = Depends(get_db)):
    """List every user (admin only)"""
    return success_response(UserService.list_users(db), "Users retrieved successfully")


@router.get("/{user_id}", response_model=ApiResponse[UserResponse])
def get_user(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get a user by ID"""
    return success_response(UserService.get_user(db, user_id), "User retrieved successfully")
