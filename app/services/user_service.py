# File: app/services/user_service.py

"""
User persistence: create, look up, update and delete user records.

Uniqueness of email and username is checked up front so every clash can be
reported together with password problems; the database unique constraints
still decide concurrent inserts, which surface as ConflictError.
"""

import logging
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, FieldErrors, NotFound, ValidationError, merge_errors
from app.core.pagination import paginate
from app.core.slug import unique_slug
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate
from app.services.password_policy import password_violations

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "The email address is already in use."
USERNAME_TAKEN = "The username is already taken."
CONFIRMATION_MISMATCH = "The password confirmation does not match."

# Columns that cannot be cleared through an update
_NOT_NULLABLE = ("email", "username", "is_active", "is_staff")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _taken(db: Session, clause, exclude_id: Optional[int] = None) -> bool:
    stmt = select(User.id).where(clause)
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    return db.scalar(stmt.limit(1)) is not None


def _uniqueness_errors(
    db: Session,
    *,
    email: Optional[str] = None,
    username: Optional[str] = None,
    exclude_id: Optional[int] = None,
) -> FieldErrors:
    errors: FieldErrors = {}
    if email is not None and _taken(db, User.email == email, exclude_id):
        errors["email"] = [EMAIL_TAKEN]
    if username is not None and _taken(db, User.username == username, exclude_id):
        errors["username"] = [USERNAME_TAKEN]
    return errors


def _password_errors(password: Optional[str], confirmation: Optional[str]) -> FieldErrors:
    errors: FieldErrors = {}
    violations = password_violations(password)
    if violations:
        errors["password"] = violations
    if password != confirmation:
        errors["password_confirmation"] = [CONFIRMATION_MISMATCH]
    return errors


def slug_for_email(db: Session, email: str, exclude_id: Optional[int] = None) -> str:
    return unique_slug(email, lambda candidate: _taken(db, User.slug == candidate, exclude_id))


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Unique constraint violation while saving user: %s", exc.orig)
        raise ConflictError("The email address or username is already in use.") from exc


def create_user(
    db: Session,
    payload: UserCreate,
    *,
    is_active: bool = True,
    is_staff: bool = False,
) -> User:
    email = normalize_email(payload.email)
    errors = merge_errors(
        _uniqueness_errors(db, email=email, username=payload.username),
        _password_errors(payload.password, payload.password_confirmation),
    )
    if errors:
        raise ValidationError(errors=errors)

    user = User(
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=email,
        username=payload.username,
        slug=slug_for_email(db, email),
        is_active=is_active,
        is_staff=is_staff,
    )
    user.set_password(payload.password)
    db.add(user)
    _commit(db)
    db.refresh(user)

    logger.info("Created user id=%s username=%s", user.id, user.username)
    return user


def find_user(db: Session, identifier: str) -> Optional[User]:
    """Look a user up by numeric id, then slug, then username."""
    identifier = (identifier or "").strip()
    if not identifier:
        return None
    if identifier.isdigit():
        user = db.get(User, int(identifier))
        if user is not None:
            return user
    user = db.scalar(select(User).where(User.slug == identifier))
    if user is not None:
        return user
    return db.scalar(select(User).where(User.username == identifier))


def get_user_or_404(db: Session, identifier: str) -> User:
    user = find_user(db, identifier)
    if user is None:
        raise NotFound("User not found.")
    return user


def find_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.scalar(select(User).where(User.email == normalize_email(email)))


def find_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.scalar(select(User).where(User.username == username.strip()))


def list_users(db: Session, *, page: int, per_page: int, path: str) -> dict[str, Any]:
    return paginate(db, select(User).order_by(User.id), page=page, per_page=per_page, path=path)


def update_user(db: Session, user: User, payload: UserUpdate) -> User:
    """Apply the fields present in ``payload``; nothing is written unless all checks pass."""
    changes = payload.model_dump(exclude_unset=True)
    password = changes.pop("password", None)
    confirmation = changes.pop("password_confirmation", None)
    for key in _NOT_NULLABLE:
        if key in changes and changes[key] is None:
            del changes[key]
    if "email" in changes:
        changes["email"] = normalize_email(changes["email"])

    errors = _uniqueness_errors(
        db,
        email=changes.get("email"),
        username=changes.get("username"),
        exclude_id=user.id,
    )
    if password is not None:
        errors = merge_errors(errors, _password_errors(password, confirmation))
    if errors:
        raise ValidationError(errors=errors)

    email_changed = "email" in changes and changes["email"] != user.email
    for key, value in changes.items():
        setattr(user, key, value)
    if email_changed:
        user.slug = slug_for_email(db, user.email, exclude_id=user.id)
    if password is not None:
        user.set_password(password)

    _commit(db)
    db.refresh(user)
    logger.info("Updated user id=%s fields=%s", user.id, sorted(changes) + (["password"] if password else []))
    return user


def delete_user(db: Session, user: User) -> None:
    user_id = user.id
    db.delete(user)
    db.commit()
    logger.info("Deleted user id=%s", user_id)
