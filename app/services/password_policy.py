# File: app/services/password_policy.py

"""
Password strength rules.

All rules are evaluated so the client gets the complete list of problems in
one response instead of fixing them one round-trip at a time.
"""

import re
from typing import List

from app.core.exceptions import ValidationError

MIN_LENGTH = 8
SYMBOLS = "!@#$%^&*(),.?\":{}|<>[]~/'"

_RULES = (
    (lambda p: len(p) >= MIN_LENGTH, f"Password must be at least {MIN_LENGTH} characters."),
    (lambda p: re.search(r"[a-z]", p) is not None, "Password must contain at least one lowercase letter."),
    (lambda p: re.search(r"[A-Z]", p) is not None, "Password must contain at least one uppercase letter."),
    (lambda p: re.search(r"[0-9]", p) is not None, "Password must contain at least one number."),
    (lambda p: any(c in SYMBOLS for c in p), "Password must contain at least one special character."),
)


def password_violations(candidate: str | None) -> List[str]:
    candidate = candidate or ""
    return [message for check, message in _RULES if not check(candidate)]


def validate_password_strength(candidate: str | None) -> None:
    violations = password_violations(candidate)
    if violations:
        raise ValidationError(errors={"password": violations})
