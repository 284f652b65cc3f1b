"""Use case for creating users."""

from sqlalchemy.orm import Session

from college_portal.domain.entities import (
    MAX_SEMESTER,
    MIN_SEMESTER,
    ROLE_STUDENT,
    USER_ROLES,
    User,
)
from college_portal.infrastructure.repositories import UserRepository
from college_portal.infrastructure.security import get_password_hash
from college_portal.utils import portal_now


def create_user(
    session: Session,
    *,
    name: str,
    email: str,
    password: str,
    role: str,
    department: str | None = None,
    semester: int | None = None,
    is_email_verified: bool = False,
) -> User:
    """Create a new user ensuring unique email addresses."""

    repository = UserRepository(session)
    normalized_email = email.strip().lower()

    if repository.get_by_email(normalized_email):
        raise ValueError("Email address is already registered")

    role = role.strip().lower()
    if role not in USER_ROLES:
        raise ValueError(f"Role must be one of: {', '.join(USER_ROLES)}")

    if role == ROLE_STUDENT:
        if semester is None or not MIN_SEMESTER <= semester <= MAX_SEMESTER:
            raise ValueError(
                f"Students need a semester between {MIN_SEMESTER} and {MAX_SEMESTER}"
            )
    else:
        semester = None

    user = User(
        id=None,
        name=name.strip(),
        email=normalized_email,
        password=get_password_hash(password),
        role=role,
        department=department.strip() if department else None,
        semester=semester,
        is_email_verified=is_email_verified,
        is_active=True,
        created_at=portal_now(),
    )
    return repository.create(user)
