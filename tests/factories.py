# File: tests/factories.py

"""Test-data builders."""

import itertools
from decimal import Decimal
from functools import lru_cache
from typing import Iterable

from sqlalchemy.orm import Session

from app.core.security import hash_password
from app.models.product import Product
from app.models.user import User
from app.services.token_service import issue_token
from app.services.user_service import slug_for_email

DEFAULT_PASSWORD = "Password123!"

_sequence = itertools.count(1)


@lru_cache(maxsize=1)
def default_password_hash() -> str:
    # Hash once; assign_password stores an existing hash untouched
    return hash_password(DEFAULT_PASSWORD)


def make_user(db: Session, **overrides) -> User:
    n = next(_sequence)
    email = overrides.pop("email", f"user{n}@example.com")
    password = overrides.pop("password", None)
    user = User(
        first_name=overrides.pop("first_name", "Test"),
        last_name=overrides.pop("last_name", f"User{n}"),
        email=email,
        username=overrides.pop("username", f"user{n}"),
        slug=overrides.pop("slug", None) or slug_for_email(db, email),
        is_active=overrides.pop("is_active", True),
        is_staff=overrides.pop("is_staff", False),
    )
    for key, value in overrides.items():
        setattr(user, key, value)
    user.assign_password(password or default_password_hash())
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_product(db: Session, **overrides) -> Product:
    n = next(_sequence)
    product = Product(
        name=overrides.pop("name", f"Sample {n} Product"),
        description=overrides.pop("description", "A product used in tests."),
        price=overrides.pop("price", Decimal("19.99")),
        stock=overrides.pop("stock", 10),
        image=overrides.pop("image", None),
    )
    for key, value in overrides.items():
        setattr(product, key, value)
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def auth_headers(db: Session, user: User, abilities: Iterable[str] = ("*",)) -> dict[str, str]:
    issued = issue_token(db, user, abilities=abilities)
    return {"Authorization": f"Bearer {issued.plain_text}"}
