"""Security and authentication utilities."""
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional
import argon2
import jwt

from festgate.core import config
from festgate.core.constants import (
    CANTEEN_TOKEN_MARKER,
    CANTEEN_TOKEN_PREFIX,
    MEMBER_TOKEN_RANDOM_BYTES,
)

# Argon2 hasher for user passwords
ph = argon2.PasswordHasher(
    time_cost=2,
    memory_cost=65536,
    parallelism=1,
    hash_len=32,
    salt_len=16
)


def generate_canteen_token(slug: str) -> str:
    """Generate the station token displayed at an event's food counter."""
    return f"{CANTEEN_TOKEN_PREFIX}{slug.upper()}{CANTEEN_TOKEN_MARKER}{uuid.uuid4()}"


def generate_member_token(slug: str, team_id: int, index: int) -> str:
    """Generate a member's personal QR token.

    Format: <SLUG>_T<team id>_M<position in team>_<random hex>. The random
    suffix keeps tokens unguessable even though the prefix is predictable.
    """
    suffix = secrets.token_hex(MEMBER_TOKEN_RANDOM_BYTES)
    return f"{slug.upper()}_T{team_id}_M{index}_{suffix}"


def get_password_hash(password: str) -> str:
    """Hash a password using Argon2."""
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its Argon2 hash."""
    try:
        ph.verify(password_hash, password)
        return True
    except argon2.exceptions.VerifyMismatchError:
        return False
    except argon2.exceptions.InvalidHashError:
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=config.settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, config.settings.SECRET_KEY, algorithm=config.settings.ALGORITHM)
    return encoded_jwt


def decode_access_token(token: str) -> dict:
    """Decode and verify a JWT access token.

    Raises:
        jwt.ExpiredSignatureError: token is past its expiry
        jwt.PyJWTError: token is malformed or signed with another key
    """
    return jwt.decode(token, config.settings.SECRET_KEY, algorithms=[config.settings.ALGORITHM])
