"""Utility script to create a portal user in the database."""

from __future__ import annotations

import argparse
from getpass import getpass

from sqlalchemy.exc import SQLAlchemyError

from college_portal.application.use_cases.users import create_user
from college_portal.domain.entities import USER_ROLES
from college_portal.infrastructure.database import SessionLocal, initialize_database


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for user creation."""

    parser = argparse.ArgumentParser(
        description="Create a user for the college portal notification service.",
    )
    parser.add_argument("--name", default="Administrator", help="Full name of the user")
    parser.add_argument("--email", default="admin@example.com", help="Login email address")
    parser.add_argument(
        "--role",
        default="admin",
        choices=USER_ROLES,
        help="Role of the user (default: admin)",
    )
    parser.add_argument("--department", default=None, help="Department the user belongs to")
    parser.add_argument(
        "--semester",
        type=int,
        default=None,
        help="Current semester, required for students",
    )
    parser.add_argument(
        "--password",
        default=None,
        help="Password of the user. Prompted interactively when omitted.",
    )
    parser.add_argument(
        "--unverified",
        action="store_true",
        help="Leave the email unverified; unverified users receive no notification emails.",
    )
    return parser.parse_args()


def main() -> None:
    """Create a user using the provided command line arguments."""

    args = parse_args()

    password = args.password or getpass("Password for the new user: ")
    if not password:
        raise SystemExit("No password was provided.")

    initialize_database()

    session = SessionLocal()
    try:
        user = create_user(
            session,
            name=args.name,
            email=args.email,
            password=password,
            role=args.role,
            department=args.department,
            semester=args.semester,
            is_email_verified=not args.unverified,
        )
    except ValueError as exc:
        session.rollback()
        raise SystemExit(f"Could not create the user: {exc}") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not save the user to the database: {exc}") from exc
    else:
        print(
            "User created:\n"
            f"  ID: {user.id}\n"
            f"  Name: {user.name}\n"
            f"  Email: {user.email}\n"
            f"  Role: {user.role}\n"
            f"  Department: {user.department or '-'}\n"
            f"  Semester: {user.semester or '-'}"
        )
    finally:
        session.close()


if __name__ == "__main__":
    main()
