"""Use case for exchanging portal credentials for the stored account."""

import logging

from sqlalchemy.orm import Session

from college_portal.domain.entities import User
from college_portal.domain.exceptions import AuthenticationError, ForbiddenError
from college_portal.infrastructure.repositories import UserRepository
from college_portal.infrastructure.security import verify_password

logger = logging.getLogger(__name__)


def authenticate_user(session: Session, email: str, password: str) -> User:
    """Return the account registered under ``email`` when ``password`` matches.

    Unknown emails and wrong passwords are indistinguishable to the caller.
    Deactivated accounts are refused even with valid credentials.
    """

    user = UserRepository(session).get_by_email(email)
    if user is None or not verify_password(password, user.password):
        raise AuthenticationError("Incorrect email or password")
    if not user.is_active:
        logger.info("Refused sign-in for deactivated account %s", user.id)
        raise ForbiddenError("Inactive user")
    return user
