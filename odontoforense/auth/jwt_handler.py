from datetime import datetime, timedelta, timezone

import jwt
from passlib.hash import pbkdf2_sha256 as hasher

from odontoforense.core.config import Settings


def hash_password(password: str) -> str:
    return hasher.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return hasher.verify(password, hashed_password)
    except ValueError:
        # stored value is not a pbkdf2 hash
        return False


def create_access_token(
    settings: Settings,
    subject: str,
    role: str,
    expires_minutes: int | None = None,
) -> str:
    expire_minutes = expires_minutes or settings.jwt_expires_minutes
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=expire_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(settings: Settings, token: str) -> dict:
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
