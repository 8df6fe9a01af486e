from quizly.repositories.attempts import QuizAttemptRepository, UserAnswerRepository
from quizly.repositories.quizzes import QuestionOptionRepository, QuestionRepository, QuizRepository
from quizly.repositories.users import UserRepository

__all__ = [
    "UserRepository",
    "QuizRepository",
    "QuestionRepository",
    "QuestionOptionRepository",
    "QuizAttemptRepository",
    "UserAnswerRepository",
]
