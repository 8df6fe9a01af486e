"""
User schemas for Quizly
"""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from quizly.models.user import UserRole


class UserResponse(BaseModel):
    """User response schema"""
    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: UserRole
    is_active: bool

    class Config:
        from_attributes = True


class UserUpdate(BaseModel):
    """Profile fields a user may change on their own account"""
    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)


class AdminUserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)
    role: UserRole = UserRole.USER


class UserStats(BaseModel):
    total_quizzes_taken: int = 0
    average_score: float = 0.0
    best_score: float = 0.0
    total_points: int = 0
