# File: app/services/authorization.py

"""
Per-endpoint authorization checks.

Each check takes the acting principal and the target and returns a
``Decision``; routes call ``enforce()`` to turn a denial into a 403.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from app.core.exceptions import Forbidden
from app.models.token import PersonalAccessToken
from app.models.user import User
from app.services.token_service import token_can


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[str] = None

    def enforce(self) -> None:
        if not self.allowed:
            raise Forbidden(self.reason)


ALLOW = Decision(True)


def _is_self_or_staff(actor: User, target: User) -> bool:
    return actor.id == target.id or actor.is_staff


def can_update_user(actor: User, target: User, fields: Iterable[str] = ()) -> Decision:
    if not _is_self_or_staff(actor, target):
        return Decision(False, "You are not authorized to update this user.")
    if "is_staff" in set(fields) and not actor.is_staff:
        return Decision(False, "You are not authorized to change staff status.")
    return ALLOW


def can_delete_user(actor: User, target: User) -> Decision:
    if not _is_self_or_staff(actor, target):
        return Decision(False, "You are not authorized to delete this user.")
    return ALLOW


def token_allows(token: PersonalAccessToken, ability: str) -> Decision:
    if not token_can(token, ability):
        return Decision(False, f"This token does not have the '{ability}' ability.")
    return ALLOW
