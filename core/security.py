# PASSWORD HASHING

import logging

from passlib.context import CryptContext # Import CryptContext for password hashing.

from core.errors import HashingError

logger = logging.getLogger(__name__)

# --- Password Hashing ---
# Create a CryptContext instance, specifying bcrypt as the hashing scheme.
# The cost factor is fixed at 10 rounds; it is not read from configuration.
BCRYPT_ROUNDS = 10
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


# Function to hash a plain-text password.
def hash_password(password: str) -> str:
    try:
        return pwd_context.hash(password)
    except (ValueError, TypeError, RuntimeError, OSError) as e:
        logger.error("[Security] Password hashing failed: %s", type(e).__name__)
        raise HashingError() from e


# Function to verify a plain-text password against a hashed one.
# Malformed or empty digests count as a mismatch.
def verify_password(plain: str, hashed: str) -> bool:
    if not plain or not hashed:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False
