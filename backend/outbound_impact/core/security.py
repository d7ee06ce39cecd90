from __future__ import annotations

from typing import Optional

from passlib.hash import bcrypt

DEFAULT_BCRYPT_ROUNDS = 12


def hash_password(plain: str, rounds: Optional[int] = None) -> str:
    """
    Salted bcrypt hash. The plaintext never leaves this function.
    """
    if not plain:
        raise ValueError("password must not be empty")
    return bcrypt.using(rounds=rounds or DEFAULT_BCRYPT_ROUNDS).hash(plain)


def verify_password(plain: str, hashed: Optional[str]) -> bool:
    if not plain or not hashed:
        return False
    try:
        return bcrypt.verify(plain, hashed)
    except ValueError:
        # malformed / non-bcrypt hash stored in the column
        return False
