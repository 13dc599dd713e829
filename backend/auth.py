from typing import Optional

from sqlmodel import Session

from logger import logger
from . import errors
from .models import User
from .repository import UserRepository
from .security import create_user_token, get_password_hash

MIN_PASSWORD_LENGTH = 6
BAD_CREDENTIALS = "Incorrect email or password."


class AuthService:
    """Registration, login and account-level password operations."""

    def __init__(self, session: Session):
        self.users = UserRepository(session)

    def register(self, email: Optional[str], password: Optional[str]) -> User:
        if not email or not password:
            raise errors.ValidationError("Email and password are required.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise errors.ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
        if self.users.get_by_email(email) is not None:
            raise errors.Conflict("An account with this email already exists.")

        user = self.users.create(email, get_password_hash(password))
        logger.info(f"Registered user {user.id}")
        return user

    def login(self, email: Optional[str], password: Optional[str]) -> str:
        """Return a signed token; unknown email and wrong password look the same."""
        if not email or not password:
            raise errors.ValidationError("Email and password are required.")

        user = self.users.get_by_email(email)
        if not user or not user.verify_password(password):
            logger.warning(f"Failed login attempt for user: {email}")
            raise errors.Unauthenticated(BAD_CREDENTIALS)

        logger.info(f"Successful login for user: {email}")
        return create_user_token(user.id, user.email)

    def get_user(self, user_id: int) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise errors.NotFound("User not found.")
        return user

    def update_profile(self, user_id: int, display_name: Optional[str]) -> User:
        if not display_name or not display_name.strip():
            raise errors.ValidationError("Display name is required.")
        user = self.get_user(user_id)
        return self.users.update_display_name(user, display_name.strip())

    def change_password(self, user_id: int, current: Optional[str], new: Optional[str]) -> None:
        if not current or not new:
            raise errors.ValidationError("Current and new password are required.")
        if len(new) < MIN_PASSWORD_LENGTH:
            raise errors.ValidationError(
                f"New password must be at least {MIN_PASSWORD_LENGTH} characters.")
        user = self.get_user(user_id)
        if not user.verify_password(current):
            raise errors.Unauthenticated("Current password is incorrect.")

        self.users.set_password_hash(user, get_password_hash(new))
        logger.info(f"Password changed for user {user_id}")

    def delete_account(self, user_id: int, password: Optional[str]) -> None:
        """Irreversibly delete the user and all data they own."""
        if not password:
            raise errors.ValidationError("Password is required to delete your account.")
        user = self.get_user(user_id)
        if not user.verify_password(password):
            raise errors.Unauthenticated("Incorrect password.")

        self.users.delete_with_owned_data(user)
        logger.info(f"Deleted account {user_id} and all owned data")
