import logging
import bcrypt
from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import jwt
from app.core.config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES

logger = logging.getLogger(__name__)

# bcrypt hard limit
MAX_PASSWORD_BYTES = 72

# passlib only verifies hashes created before we switched to bcrypt directly
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def _password_bytes(password: str) -> bytes:
    """Encode a password, truncating to the bcrypt limit on a character boundary."""
    encoded = password.encode("utf-8")
    if len(encoded) <= MAX_PASSWORD_BYTES:
        return encoded
    logger.warning("Password exceeds 72 bytes, truncating before hashing")
    return encoded[:MAX_PASSWORD_BYTES].decode("utf-8", errors="ignore").encode("utf-8")


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Hashed password string

    Raises:
        ValueError: If the password cannot be hashed
    """
    try:
        return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt()).decode("utf-8")
    except Exception as e:
        logger.error(f"Password hashing failed: {e}", exc_info=True)
        raise ValueError("Invalid password") from e


def verify_password(password: str, hashed: Optional[str]) -> bool:
    """Verify a password against its bcrypt hash."""
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        try:
            return pwd_context.verify(password, hashed)
        except Exception as e:
            logger.error(f"Password verification failed: {e}")
            return False


def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
