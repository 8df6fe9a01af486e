"""
Tests for the command-line runner
"""

import argparse

import pytest

import run
from quizly.core.database import Base, SessionLocal, engine
from quizly.core.security import SecurityUtils
from quizly.models.user import User, UserRole


@pytest.fixture
def app_database():
    """The application's own engine, in-memory under test settings"""
    yield engine
    Base.metadata.drop_all(bind=engine)


def admin_args(**overrides):
    values = {
        "username": "root",
        "email": "root@example.com",
        "password": "bootstrap-pass",
        "first_name": "Root",
        "last_name": None,
    }
    values.update(overrides)
    return argparse.Namespace(**values)


def test_create_admin_bootstraps_administrator(app_database):
    assert run.create_admin(admin_args()) == 0

    with SessionLocal() as session:
        user = session.query(User).filter(User.username == "root").one()
        assert user.role == UserRole.ADMIN
        assert user.is_active is True
        assert user.first_name == "Root"
        assert SecurityUtils.verify_password("bootstrap-pass", user.hashed_password)


def test_create_admin_refuses_duplicates(app_database):
    assert run.create_admin(admin_args()) == 0

    assert run.create_admin(admin_args(email="other@example.com")) == 1
    assert run.create_admin(admin_args(username="root2")) == 1

    with SessionLocal() as session:
        assert session.query(User).count() == 1


def test_parser_routes_subcommands():
    parser = run.build_parser()

    serve_args = parser.parse_args(["serve", "--port", "9000"])
    admin_cli = parser.parse_args(["create-admin", "--username", "a", "--email", "a@x.io", "--password", "p"])

    assert serve_args.func is run.serve
    assert serve_args.port == 9000
    assert admin_cli.func is run.create_admin
    assert admin_cli.first_name is None
