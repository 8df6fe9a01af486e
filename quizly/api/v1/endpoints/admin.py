"""
Admin endpoints
Platform statistics and user management
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from quizly.core.database import get_db
from quizly.core.security import require_admin
from quizly.models.user import User
from quizly.schemas.admin import AdminStats
from quizly.schemas.common import ApiResponse, success_response
from quizly.schemas.user import AdminUserCreate, UserResponse
from quizly.services.admin import AdminService

router = APIRouter()


@router.get("/stats", response_model=ApiResponse[AdminStats])
def get_admin_stats(current_user: User = Depends(require_admin), db: Session = Depends(get_db)):
    """Counts of quizzes, questions, users and attempts"""
    return success_response(AdminService.get_stats(db, current_user), "Statistics retrieved successfully")


@router.get("/users", response_model=ApiResponse[List[UserResponse]])
def get_all_users(current_user: User = Depends(require_admin), db: Session = Depends(get_db)):
    return success_response(AdminService.list_users(db, current_user), "Users retrieved successfully")


@router.post("/users", response_model=ApiResponse[UserResponse], status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: AdminUserCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Create a user with an explicit role"""
    user = AdminService.create_user(db, user_data, current_user)
    return success_response(user, "User created successfully")


@router.delete("/users/{user_id}", response_model=ApiResponse)
def delete_user(
    user_id: int,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Delete a user together with their attempts"""
    AdminService.delete_user(db, user_id, current_user)
    return success_response(message="User deleted successfully")
