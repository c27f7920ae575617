"""One-way password hashing with bcrypt."""

import bcrypt

from todolist.config import config


def hash_password(plain: str, rounds: int = None) -> str:
    """Hash a plaintext password, returning the bcrypt hash as text."""
    salt = bcrypt.gensalt(rounds=rounds or config.bcrypt_rounds)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def check_password(plain: str, hashed: str) -> bool:
    """
    Compare a plaintext password against a stored bcrypt hash.

    A stored value that is not a valid bcrypt hash never verifies.
    """
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False
