"""
utils/security.py

- Password hashing: PBKDF2-HMAC-SHA256 with a random per-user salt.
  Stored as "pbkdf2_sha256$<iterations>$<salt hex>$<hash hex>".
- Session token: "<user_id>.<expires_at>.<signature>" signed with SECRET_KEY.
All comparisons go through hmac.compare_digest.
"""

import hashlib
import hmac
import secrets
import time
from typing import Optional

from config.settings import settings

_ALGORITHM = "pbkdf2_sha256"


def hash_password(password: str, iterations: Optional[int] = None) -> str:
    iterations = iterations or settings.PASSWORD_HASH_ITERATIONS
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return f"{_ALGORITHM}${iterations}${salt.hex()}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        algorithm, iterations, salt_hex, digest_hex = stored.split("$")
        if algorithm != _ALGORITHM:
            return False
        digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), bytes.fromhex(salt_hex), int(iterations))
    except ValueError:
        return False

    return hmac.compare_digest(digest.hex(), digest_hex)


def _sign(payload: str) -> str:
    return hmac.new(settings.SECRET_KEY.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()


def create_session_token(user_id: int, ttl_minutes: Optional[int] = None) -> str:
    ttl = ttl_minutes if ttl_minutes is not None else settings.SESSION_TTL_MINUTES
    expires_at = int(time.time()) + ttl * 60
    payload = f"{user_id}.{expires_at}"
    return f"{payload}.{_sign(payload)}"


def read_session_token(token: str) -> Optional[int]:
    """Returns the user id of a valid, unexpired token, otherwise None."""
    try:
        user_id, expires_at, signature = token.strip().split(".")
    except ValueError:
        return None

    if not hmac.compare_digest(signature, _sign(f"{user_id}.{expires_at}")):
        return None
    if not expires_at.isdigit() or int(expires_at) < time.time():
        return None
    if not user_id.isdigit():
        return None
    return int(user_id)
