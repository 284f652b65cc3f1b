"""Use cases for managing users."""

from .authenticate_user import authenticate_user
from .create_user import create_user

__all__ = [
    "authenticate_user",
    "create_user",
]
