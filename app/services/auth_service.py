# File: app/services/auth_service.py

"""
Login / logout.

Login failures are deliberately uniform: an unknown identifier, a wrong
password and an inactive account all produce the same error so the
endpoint cannot be used to enumerate accounts.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from typing import Optional

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.orm import Session

from app.core.exceptions import ValidationError
from app.core.security import hash_password, verify_password
from app.models.token import PersonalAccessToken
from app.models.user import User
from app.services.token_service import default_expiry, issue_token, revoke_token
from app.services.user_service import find_user_by_email, find_user_by_username

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Credentials are incorrect."


@dataclass(frozen=True)
class LoginResult:
    user: User
    token: str
    expires_at: Optional[datetime]


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("dummy-password-for-timing")


def looks_like_email(identifier: str) -> bool:
    try:
        validate_email(identifier, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def authenticate_user(
    db: Session,
    *,
    identifier: str,
    password: str,
) -> Optional[User]:
    """Return the active user matching ``identifier`` and ``password``, else None."""
    identifier = identifier.strip()
    if looks_like_email(identifier):
        user = find_user_by_email(db, identifier)
    else:
        user = find_user_by_username(db, identifier)

    if user is None:
        # Burn the same hashing time as a real check
        verify_password(password, _dummy_hash())
        return None
    if not user.check_password(password) or not user.is_active:
        return None
    return user


def login(db: Session, *, identifier: str, password: str) -> LoginResult:
    user = authenticate_user(db, identifier=identifier, password=password)
    if user is None:
        logger.info("Failed login attempt for identifier=%r", identifier)
        raise ValidationError(
            INVALID_CREDENTIALS,
            errors={"email_or_username": [INVALID_CREDENTIALS]},
        )

    issued = issue_token(db, user, expires_at=default_expiry())
    return LoginResult(user=user, token=issued.plain_text, expires_at=issued.expires_at)


def logout(db: Session, token: PersonalAccessToken) -> None:
    revoke_token(db, token)
