"""Quizly: quiz authoring, attempts and leaderboards"""

__version__ = "1.0.0"
