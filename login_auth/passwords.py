"""Password hashing and random secrets."""

import hashlib
import hmac
import secrets
import string

from .exceptions import AuthenticationFailed

ALPHABET = string.ascii_letters + string.digits
ITERATIONS = 100_000


def random_string(length: int) -> str:
    """Generate a random string of ``[a-zA-Z0-9]`` characters."""
    return ''.join(secrets.choice(ALPHABET) for _ in range(length))


def hash_password(password: str, salt: str) -> bytes:
    """Derive a key from a password and salt with PBKDF2-HMAC-SHA256."""
    return hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'),
                               salt.encode('utf-8'), ITERATIONS)


def check_password(password: str, salt: str, encrypted: bytes) -> None:
    """Check a password against a derived key."""
    if not hmac.compare_digest(hash_password(password, salt), encrypted):
        raise AuthenticationFailed('Incorrect password')
