"""Admin schemas"""

from pydantic import BaseModel


class AdminStats(BaseModel):
    total_quizzes: int
    total_questions: int
    total_users: int
    total_attempts: int
