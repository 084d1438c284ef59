"""Registration and credential checks."""
import logging

from studyqa.core.errors import DuplicateKey, Unauthorized
from studyqa.core.security import get_password_hash, verify_password
from studyqa.schemas import User, UserCreate
from studyqa.storage.base import Storage

logger = logging.getLogger(__name__)


class AuthService:

    def __init__(self, storage: Storage):
        self.storage = storage

    def register(self, username: str, email: str, password: str) -> User:
        """
        Create a user with a bcrypt-hashed password.

        Raises:
            DuplicateKey: username or email already taken
        """
        if self.storage.get_user_by_username(username):
            raise DuplicateKey("username")
        if self.storage.get_user_by_email(email):
            raise DuplicateKey("email")

        # the store enforces uniqueness again for concurrent registrations
        user = self.storage.create_user(
            UserCreate(username=username, email=email, password=get_password_hash(password))
        )
        logger.info("Registered user %s (id %s)", username, user.id)
        return user

    def authenticate(self, username: str, password: str) -> User:
        """
        Return the user whose credentials match.

        Raises:
            Unauthorized: unknown username or wrong password
        """
        user = self.storage.get_user_by_username(username)
        if user is None or not verify_password(password, user.password):
            raise Unauthorized("Invalid username or password")
        return user
