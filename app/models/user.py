# File: app/models/user.py

"""
User model.

Passwords are never assigned directly: ``set_password`` runs the strength
policy and hashes, ``set_password_hash`` stores a value that is already a
hash. ``assign_password`` picks between the two and is what seeding uses.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.security import hash_password, is_password_hash, verify_password
from app.models.base import Base, TimestampMixin
from app.services.password_policy import validate_password_strength


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    first_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    username: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)

    # Hash only; never serialized (UserRead has no password field)
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_staff: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    email_verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    tokens = relationship(
        "PersonalAccessToken",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def set_password(self, plaintext: str) -> None:
        validate_password_strength(plaintext)
        self.password = hash_password(plaintext)

    def set_password_hash(self, password_hash: str) -> None:
        self.password = password_hash

    def assign_password(self, value: str) -> None:
        """Store ``value`` as-is when it is already a hash, otherwise validate and hash it."""
        if is_password_hash(value):
            self.set_password_hash(value)
        else:
            self.set_password(value)

    def check_password(self, plaintext: str) -> bool:
        return verify_password(plaintext, self.password)

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r}>"
