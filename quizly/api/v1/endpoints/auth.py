"""
Authentication endpoints
Registration and token issue; the only API routes open without a token
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from quizly.core.database import get_db
from quizly.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from quizly.schemas.common import ApiResponse, success_response
from quizly.services.auth import AuthService

router = APIRouter()


@router.post("/register", response_model=ApiResponse[AuthResponse], status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, db: Session = Depends(get_db)):
    """Register a new user account"""
    response = AuthService.register(db, request)
    return success_response(response, response.message)


@router.post("/login", response_model=ApiResponse[AuthResponse])
def login(request: LoginRequest, db: Session = Depends(get_db)):
    """Exchange credentials for a bearer token"""
    response = AuthService.login(db, request)
    return success_response(response, response.message)
