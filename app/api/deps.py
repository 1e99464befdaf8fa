# File: app/api/deps.py

from collections.abc import Callable, Generator
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.exceptions import Unauthenticated
from app.db.session import SessionLocal
from app.models.token import PersonalAccessToken
from app.models.user import User
from app.services.authorization import token_allows
from app.services.storage import ImageStorage, default_storage
from app.services.token_service import resolve_token

_bearer = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that provides a SQLAlchemy session.

    Usage in route functions:
        db: Session = Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_storage() -> ImageStorage:
    return default_storage()


def get_current_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    db: Session = Depends(get_db),
) -> PersonalAccessToken:
    """Resolve ``Authorization: Bearer <token>`` to a live token row."""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("You are not authenticated.")
    return resolve_token(db, credentials.credentials)


def get_current_user(token: PersonalAccessToken = Depends(get_current_token)) -> User:
    return token.user


def require_ability(ability: str) -> Callable[..., PersonalAccessToken]:
    def dependency(token: PersonalAccessToken = Depends(get_current_token)) -> PersonalAccessToken:
        token_allows(token, ability).enforce()
        return token

    return dependency
