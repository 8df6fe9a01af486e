#!/usr/bin/env python3
"""
Quizly runner
    python run.py serve [--host HOST] [--port PORT]
    python run.py create-admin --username NAME --email EMAIL --password SECRET
"""

import argparse
import logging
import os
import sys

import uvicorn

from quizly.core.config import settings
from quizly.core.database import get_db_session, init_db
from quizly.core.exceptions import QuizlyException
from quizly.core.logging import setup_logging
from quizly.models.user import UserRole
from quizly.services.users import UserService

logger = logging.getLogger("quizly.run")


def serve(args: argparse.Namespace) -> int:
    uvicorn.run(
        "quizly.main:app",
        host=args.host,
        port=args.port,
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
        access_log=False,
    )
    return 0


def create_admin(args: argparse.Namespace) -> int:
    """Bootstrap an administrator account"""
    init_db()
    try:
        with get_db_session() as db:
            user = UserService.create_user(
                db,
                username=args.username,
                email=args.email,
                password=args.password,
                first_name=args.first_name,
                last_name=args.last_name,
                role=UserRole.ADMIN,
            )
            user_id = user.id
    except QuizlyException as e:
        logger.error(f"Could not create admin: {e.message}")
        return 1

    logger.info(f"Admin {args.username} created with id {user_id}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="run.py", description=settings.APP_DESCRIPTION)
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="run the API server")
    serve_parser.add_argument("--host", default=os.environ.get("HOST", "0.0.0.0"))
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", 8000)))
    serve_parser.set_defaults(func=serve)

    admin_parser = subparsers.add_parser("create-admin", help="create an administrator account")
    admin_parser.add_argument("--username", required=True)
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--password", required=True)
    admin_parser.add_argument("--first-name", dest="first_name")
    admin_parser.add_argument("--last-name", dest="last_name")
    admin_parser.set_defaults(func=create_admin)

    return parser


if __name__ == "__main__":
    setup_logging()
    arguments = build_parser().parse_args()
    sys.exit(arguments.func(arguments))
