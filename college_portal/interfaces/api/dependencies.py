"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from college_portal.domain.entities import ROLE_ADMIN, ROLE_TEACHER, User, Viewer
from college_portal.infrastructure.database import get_db
from college_portal.infrastructure.notifications import NotificationDispatchQueue
from college_portal.infrastructure.repositories import UserRepository
from college_portal.infrastructure.security import decode_access_token, password_signature

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def _credentials_error(detail: str = "Invalid credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_user(token: str, db: Session) -> User:
    """Resolve the authenticated user for the provided token."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _credentials_error() from exc

    email = payload.get("sub")
    signature_claim = payload.get("pwd_sig")
    if not isinstance(email, str) or not isinstance(signature_claim, str):
        raise _credentials_error()

    user = UserRepository(db).get_by_email(email)
    if user is None:
        raise _credentials_error("User not found")

    # Changing the password or the active flag invalidates issued tokens.
    if signature_claim != password_signature(user.password, user.is_active):
        raise _credentials_error()

    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Return the authenticated user from the provided token."""

    return resolve_current_user(token, db)


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Ensure the authenticated user is active."""

    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )
    return current_user


def get_viewer(current_user: User = Depends(get_current_active_user)) -> Viewer:
    """Identity of the requesting user as seen by the notification rules."""

    return current_user.as_viewer()


def require_teacher_or_admin(viewer: Viewer = Depends(get_viewer)) -> Viewer:
    if viewer.role not in (ROLE_TEACHER, ROLE_ADMIN):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Teacher or admin access required",
        )
    return viewer


def require_admin(viewer: Viewer = Depends(get_viewer)) -> Viewer:
    """Ensure the authenticated user has administrator privileges."""

    if not viewer.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return viewer


def get_dispatch_queue(request: Request) -> NotificationDispatchQueue | None:
    """Return the email dispatch queue started by the application lifespan."""

    return getattr(request.app.state, "dispatch_queue", None)
