"""
Shared fixtures: an in-memory SQLite database per test and a TestClient
bound to it through the get_db dependency override
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "testing"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from quizly.core.database import Base, build_engine, get_db
from quizly.core.security import SecurityUtils
from quizly.main import app
from quizly.models.user import User, UserRole

API = "/api/v1"


@pytest.fixture
def engine():
    test_engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(session_factory, username, role=UserRole.USER, is_active=True, password="password123"):
    user = User(
        username=username,
        email=f"{username}@example.com",
        hashed_password=SecurityUtils.get_password_hash(password),
        first_name=username.capitalize(),
        last_name="Tester",
        role=role,
        is_active=is_active,
    )
    # one short-lived session at a time: in-memory SQLite shares a single connection
    with session_factory() as session:
        session.add(user)
        session.commit()
    return user


def auth_headers(user):
    token = SecurityUtils.create_access_token({"sub": str(user.id), "username": user.username})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(session_factory):
    return make_user(session_factory, "admin", role=UserRole.ADMIN)


@pytest.fixture
def user(session_factory):
    return make_user(session_factory, "alice")


@pytest.fixture
def other_user(session_factory):
    return make_user(session_factory, "bob")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def user_headers(user):
    return auth_headers(user)


@pytest.fixture
def other_headers(other_user):
    return auth_headers(other_user)


def quiz_payload(**overrides):
    """Two questions: Q1 single choice worth 2, Q2 multiple choice worth 3"""
    payload = {
        "title": "Python Basics",
        "description": "Warm-up quiz",
        "topic": "python",
        "difficulty_level": "EASY",
        "time_limit_minutes": 10,
        "passing_score": 60,
        "questions": [
            {
                "question_text": "What does len([1, 2]) return?",
                "question_type": "SINGLE_CHOICE",
                "points": 2,
                "explanation": "Two elements",
                "options": [
                    {"option_text": "1", "is_correct": False},
                    {"option_text": "2", "is_correct": True},
                    {"option_text": "3", "is_correct": False},
                ],
            },
            {
                "question_text": "Which are immutable?",
                "question_type": "MULTIPLE_CHOICE",
                "points": 3,
                "options": [
                    {"option_text": "tuple", "is_correct": True},
                    {"option_text": "list", "is_correct": False},
                    {"option_text": "str", "is_correct": True},
                ],
            },
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def create_quiz(client, admin_headers):
    def _create(**overrides):
        response = client.post(f"{API}/quizzes", json=quiz_payload(**overrides), headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


@pytest.fixture
def quiz(create_quiz):
    return create_quiz()


def correct_ids(question):
    return [option["id"] for option in question["options"] if option["is_correct"]]


def wrong_ids(question):
    return [option["id"] for option in question["options"] if not option["is_correct"]]
