# File: app/services/token_service.py

"""
Bearer token issuing, lookup and revocation.

Plain tokens look like ``"<id>|<secret>"``. The id makes lookup a primary
key fetch; the secret is compared against the stored SHA-256 digest.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import Unauthenticated
from app.core.security import generate_token_secret, hash_token, tokens_match
from app.models.token import PersonalAccessToken
from app.models.user import User

logger = logging.getLogger(__name__)

ALL_ABILITIES = ("*",)


@dataclass(frozen=True)
class IssuedToken:
    plain_text: str
    token: PersonalAccessToken
    expires_at: Optional[datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; everything is stored as UTC.
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def default_expiry(now: Optional[datetime] = None) -> Optional[datetime]:
    if settings.token_expire_minutes <= 0:
        return None
    return (now or utcnow()) + timedelta(minutes=settings.token_expire_minutes)


def issue_token(
    db: Session,
    user: User,
    *,
    name: str = "auth_token",
    abilities: Iterable[str] = ALL_ABILITIES,
    expires_at: Optional[datetime] = None,
) -> IssuedToken:
    secret = generate_token_secret()
    token = PersonalAccessToken(
        user_id=user.id,
        name=name,
        token=hash_token(secret),
        abilities=list(abilities),
        expires_at=expires_at,
    )
    db.add(token)
    db.commit()
    db.refresh(token)

    logger.info("Issued token id=%s for user id=%s abilities=%s", token.id, user.id, token.abilities)
    return IssuedToken(plain_text=f"{token.id}|{secret}", token=token, expires_at=expires_at)


def find_token(db: Session, presented: Optional[str]) -> Optional[PersonalAccessToken]:
    if not presented:
        return None

    if "|" not in presented:
        return db.scalar(
            select(PersonalAccessToken).where(PersonalAccessToken.token == hash_token(presented))
        )

    token_id, secret = presented.split("|", 1)
    if not token_id.isdigit():
        return None
    token = db.get(PersonalAccessToken, int(token_id))
    if token is None or not tokens_match(secret, token.token):
        return None
    return token


def is_expired(token: PersonalAccessToken, now: Optional[datetime] = None) -> bool:
    if token.expires_at is None:
        return False
    return _as_utc(token.expires_at) <= (now or utcnow())


def resolve_token(db: Session, presented: Optional[str]) -> PersonalAccessToken:
    """Return the live token for ``presented`` or raise Unauthenticated."""
    token = find_token(db, presented)
    if token is None:
        raise Unauthenticated()
    if is_expired(token):
        raise Unauthenticated("Token has expired.")
    if not token.user.is_active:
        raise Unauthenticated()

    token.last_used_at = utcnow()
    db.commit()
    return token


def revoke_token(db: Session, token: PersonalAccessToken) -> None:
    token_id, user_id = token.id, token.user_id
    db.delete(token)
    db.commit()
    logger.info("Revoked token id=%s for user id=%s", token_id, user_id)


def token_can(token: PersonalAccessToken, ability: str) -> bool:
    return token.can(ability)


def prune_expired_tokens(db: Session, now: Optional[datetime] = None) -> int:
    result = db.execute(
        delete(PersonalAccessToken).where(
            PersonalAccessToken.expires_at.is_not(None),
            PersonalAccessToken.expires_at <= (now or utcnow()),
        )
    )
    db.commit()
    return result.rowcount or 0
