# storefront/utils/security.py
"""
Hasla (argon2id) i tokeny tozsamosci podpisywane HMAC.

Token: base64url(json claims) + "." + base64url(hmac_sha256(secret, czesc1)).
Claims: sub (id usera), role, exp (unix ts).
"""
import base64
import hashlib
import hmac
import json
import time

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerifyMismatchError

from storefront.utils.settings import (
    ARGON2_MEMORY_COST,
    ARGON2_PARALLELISM,
    ARGON2_TIME_COST,
    AUTH_SECRET,
    AUTH_TOKEN_TTL_SECONDS,
)

_hasher = PasswordHasher(
    time_cost=ARGON2_TIME_COST,
    memory_cost=ARGON2_MEMORY_COST,
    parallelism=ARGON2_PARALLELISM,
)


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return _hasher.verify(password_hash, password)
    except (VerifyMismatchError, InvalidHash):
        return False


def _sign(message: bytes, secret: str) -> str:
    return _b64encode(hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest())


def sign_token(
    user_id: int,
    role: str,
    secret: str = AUTH_SECRET,
    ttl: int = AUTH_TOKEN_TTL_SECONDS,
) -> str:
    claims = {"sub": user_id, "role": role, "exp": int(time.time()) + ttl}
    body = _b64encode(json.dumps(claims, separators=(",", ":")).encode("utf-8"))
    return f"{body}.{_sign(body.encode('ascii'), secret)}"


def verify_token(token: str, secret: str = AUTH_SECRET) -> dict | None:
    """Zwraca claims albo None, bez rozrozniania powodu odrzucenia."""
    try:
        body, signature = token.split(".", 1)
        if not hmac.compare_digest(_sign(body.encode("ascii"), secret), signature):
            return None
        claims = json.loads(_b64decode(body))
    except (ValueError, TypeError, UnicodeError):
        return None

    if not isinstance(claims, dict) or not isinstance(claims.get("sub"), int):
        return None
    if int(claims.get("exp", 0)) < time.time():
        return None
    return claims
