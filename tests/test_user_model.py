# File: tests/test_user_model.py

import pytest

from app.core.exceptions import ValidationError
from app.core.security import hash_password, is_password_hash
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate
from app.services import user_service
from tests.factories import DEFAULT_PASSWORD, make_user


def _create(db, **fields):
    data = {
        "email": "john.doe@example.com",
        "username": "johndoe",
        "password": "StrongPass123!",
        "password_confirmation": "StrongPass123!",
    }
    data.update(fields)
    return user_service.create_user(db, UserCreate(**data))


def test_factory_user_can_check_default_password(db):
    user = make_user(db)

    assert user.id is not None
    assert user.check_password(DEFAULT_PASSWORD)
    assert not user.check_password("WrongPassword1!")


def test_create_user_defaults(db):
    user = _create(db)

    assert user.is_active is True
    assert user.is_staff is False
    assert user.slug == "john-doe-example-com"


def test_password_is_hashed_on_set():
    user = User()
    user.set_password("StrongPassword123!")

    assert user.password != "StrongPassword123!"
    assert is_password_hash(user.password)
    assert user.check_password("StrongPassword123!")


def test_set_password_rejects_weak_password():
    user = User()
    with pytest.raises(ValidationError) as exc_info:
        user.set_password("nouppercase123!")

    assert exc_info.value.errors["password"] == ["Password must contain at least one uppercase letter."]
    assert user.password is None


def test_assign_password_keeps_existing_hash():
    hashed = hash_password("StrongPassword123!")
    user = User()
    user.assign_password(hashed)

    assert user.password == hashed
    assert user.check_password("StrongPassword123!")


def test_assign_password_validates_plaintext():
    user = User()
    with pytest.raises(ValidationError):
        user.assign_password("weak")


def test_create_user_reports_duplicates_and_weak_password_together(db):
    existing = make_user(db, email="taken@example.com", username="taken")

    with pytest.raises(ValidationError) as exc_info:
        _create(db, email=existing.email, username=existing.username, password="weak", password_confirmation="weak")

    errors = exc_info.value.errors
    assert errors["email"] == ["The email address is already in use."]
    assert errors["username"] == ["The username is already taken."]
    assert len(errors["password"]) == 4
    assert db.query(User).count() == 1


def test_slug_collision_gets_suffix(db):
    first = _create(db, email="a.b@example.com", username="first")
    second = _create(db, email="a-b@example.com", username="second")

    assert first.slug == "a-b-example-com"
    assert second.slug == "a-b-example-com-2"


def test_slug_is_recomputed_when_email_changes(db):
    user = _create(db)
    user_service.update_user(db, user, UserUpdate(email="new.address@example.com"))

    assert user.email == "new.address@example.com"
    assert user.slug == "new-address-example-com"


def test_find_user_by_id_slug_or_username(db):
    user = _create(db)

    assert user_service.find_user(db, str(user.id)).id == user.id
    assert user_service.find_user(db, user.slug).id == user.id
    assert user_service.find_user(db, "johndoe").id == user.id
    assert user_service.find_user(db, "nobody") is None
