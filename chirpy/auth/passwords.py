"""Password hashing with bcrypt"""

import bcrypt

from ..utils.exceptions import HashingError

DEFAULT_ROUNDS = 10


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password using bcrypt"""
    if not isinstance(password, str) or not password:
        raise HashingError("Password must be a non-empty string")
    try:
        salt = bcrypt.gensalt(rounds=rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")
    except ValueError as e:
        # bcrypt refuses passwords longer than 72 bytes
        raise HashingError(f"Could not hash password: {e}") from e


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash"""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False
