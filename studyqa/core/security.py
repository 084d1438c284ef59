"""Password hashing utilities."""
import logging

from passlib.context import CryptContext

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Force passlib to initialize the bcrypt backend with a short password so that
# later calls with long passwords don't trigger backend detection using the
# user's long password (which would raise a ValueError when >72 bytes).
try:
    pwd_context.hash("__init__")
except ValueError as e:
    logger.warning("bcrypt backend initialisation failed: %s", e)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hashed password."""
    return pwd_context.verify(_truncate_for_bcrypt(plain_password), hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(_truncate_for_bcrypt(password))


def _truncate_for_bcrypt(password: str) -> str:
    """Truncate password to bcrypt's 72-byte limit.

    Bcrypt rejects inputs longer than 72 bytes. We truncate on the UTF-8
    encoded bytes and decode with 'ignore' to avoid splitting multi-byte
    sequences.
    """
    b = password.encode("utf-8")[:72]
    return b.decode("utf-8", "ignore")
