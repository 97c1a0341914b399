"""bcrypt password hashing helpers."""

from __future__ import annotations

import bcrypt

from app.core.config import settings

# bcrypt ignores or rejects input past this many bytes
MAX_PASSWORD_BYTES = 72


def hash_password(plain_password: str, *, rounds: int | None = None) -> str:
    """Hash a password with a fresh bcrypt salt.

    Args:
        plain_password: Password to hash.
        rounds: bcrypt cost factor; defaults to ``settings.app.bcrypt_rounds``.

    Returns:
        The encoded hash as text.

    Raises:
        ValueError: If the password is empty.
    """
    if not plain_password:
        raise ValueError("Password must be a non-empty string")

    salt = bcrypt.gensalt(rounds=rounds or settings.app.bcrypt_rounds)
    return bcrypt.hashpw(plain_password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash.

    Malformed hashes verify as False rather than raising.
    """
    if not plain_password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False
