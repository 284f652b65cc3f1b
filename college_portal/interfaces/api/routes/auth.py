"""Endpoints related to authentication."""

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from college_portal.application.use_cases.users import authenticate_user
from college_portal.infrastructure.database import get_db
from college_portal.infrastructure.security import create_access_token, password_signature
from college_portal.interfaces.api.schemas import Token

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/token", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    """Authenticate the user by email and return a JWT bearer token."""

    user = authenticate_user(db, form_data.username, form_data.password)
    access_token = create_access_token(
        data={
            "sub": user.email,
            "role": user.role,
            "pwd_sig": password_signature(user.password, user.is_active),
        },
    )
    return {"access_token": access_token, "token_type": "bearer", "role": user.role}
