"""
User Service - signup, login and identity lookups
"""
import logging
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from trekhub.core.db import store_operation
from trekhub.core.exceptions import DuplicateEmailError, InvalidCredentialsError, NotFoundError
from trekhub.core.security import hash_password, verify_password
from trekhub.models.user import User

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """Credential store operations"""

    def __init__(self, db: Session):
        self.db = db

    @store_operation
    def get_by_email(self, email: str):
        stmt = select(User).where(User.email == normalize_email(email))
        return self.db.execute(stmt).scalar_one_or_none()

    @store_operation
    def get_user(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    @store_operation
    def register(self, name: str, email: str, password: str) -> User:
        """
        Create a user with a bcrypt-hashed password.

        Args:
            name: Display name
            email: Login email, compared case-insensitively
            password: Plaintext password; only its hash is stored

        Returns:
            The stored user

        Raises:
            DuplicateEmailError: if the email is already registered
        """
        email = normalize_email(email)
        if self.get_by_email(email) is not None:
            raise DuplicateEmailError()

        user = User(name=name, email=email, hashed_password=hash_password(password))
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same address
            self.db.rollback()
            raise DuplicateEmailError()
        self.db.refresh(user)
        logger.info("User registered", extra={"user_id": user.id})
        return user

    @store_operation
    def authenticate(self, email: str, password: str) -> User:
        """
        Check a login attempt.

        Raises:
            InvalidCredentialsError: for an unknown email and for a wrong
                password alike
        """
        user = self.get_by_email(email)
        # An unknown email still pays for a bcrypt check
        if not verify_password(password, user.hashed_password if user is not None else None):
            logger.warning("Login rejected")
            raise InvalidCredentialsError()
        logger.info("User logged in", extra={"user_id": user.id})
        return user
