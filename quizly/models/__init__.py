"""
Quizly Models Package
"""

from quizly.models.user import User, UserRole
from quizly.models.quiz import Quiz, Question, QuestionOption, DifficultyLevel, QuestionType
from quizly.models.attempt import QuizAttempt, UserAnswer, AttemptStatus, user_answer_options

__all__ = [
    "User", "UserRole",
    "Quiz", "Question", "QuestionOption", "DifficultyLevel", "QuestionType",
    "QuizAttempt", "UserAnswer", "AttemptStatus", "user_answer_options",
]
