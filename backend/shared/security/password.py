"""
Password hashing utilities using bcrypt.

Accounts never store plaintext: every stored password is a salted
bcrypt hash produced by hash_password().
"""

import bcrypt

from shared.config.logging import get_logger

logger = get_logger(__name__)

BCRYPT_ROUNDS = 12
_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Returns:
        Hashed password string (includes salt and cost factor), e.g. "$2b$12$...".
    """
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its stored hash.

    Returns False for anything that is not a bcrypt hash.
    """
    if not hashed_password or not hashed_password.startswith(_BCRYPT_PREFIXES):
        logger.warning("Stored password is not a bcrypt hash; rejecting")
        return False

    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def needs_rehash(hashed_password: str) -> bool:
    """
    Check whether a stored hash should be replaced after a successful login.

    True for non-bcrypt values and for hashes made with a different cost factor.
    """
    if not hashed_password.startswith(_BCRYPT_PREFIXES):
        return True

    # "$2b$12$..." -> cost factor is the second field
    try:
        rounds = int(hashed_password.split("$")[2])
    except (IndexError, ValueError):
        return True
    return rounds != BCRYPT_ROUNDS
