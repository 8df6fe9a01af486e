"""Leaderboard schemas"""

from typing import Optional

from pydantic import BaseModel


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: int
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    total_score: int
    average_score: float
    attempt_count: int
    quiz_id: Optional[int] = None
    quiz_title: Optional[str] = None
    total_questions: Optional[int] = None
