# File: app/core/security.py

"""
Low-level security primitives.

Password hashing goes through a passlib CryptContext so the stored format
is self-describing (``$pbkdf2-sha256$...``) and can be recognised later.
API tokens are random secrets; only their SHA-256 digest is persisted.
"""

import hashlib
import hmac
import secrets

from passlib.context import CryptContext


_pwd = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

TOKEN_SECRET_BYTES = 20


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("password_blank")
    return _pwd.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password or not password_hash:
        return False
    try:
        return _pwd.verify(password, password_hash)
    except ValueError:
        # Unrecognised or malformed hash
        return False


def is_password_hash(value: str | None) -> bool:
    """True when ``value`` is a hash produced by our CryptContext."""
    if not value:
        return False
    return _pwd.identify(value) is not None


def generate_token_secret() -> str:
    return secrets.token_hex(TOKEN_SECRET_BYTES)


def hash_token(secret: str) -> str:
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()


def tokens_match(secret: str, token_hash: str) -> bool:
    return hmac.compare_digest(hash_token(secret), token_hash)
