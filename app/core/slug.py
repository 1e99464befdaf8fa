# File: app/core/slug.py

import re
import unicodedata
from typing import Callable


def slugify(value: str | None) -> str:
    """Lowercase ASCII slug, runs of other characters collapsed to ``-``.

    >>> slugify("John.Doe@Example.com")
    'john-doe-example-com'
    """
    ascii_value = (
        unicodedata.normalize("NFKD", (value or "").strip().lower())
        .encode("ascii", "ignore")
        .decode("ascii")
    )
    return re.sub(r"[^a-z0-9]+", "-", ascii_value).strip("-")


def unique_slug(base: str, is_taken: Callable[[str], bool]) -> str:
    """Return ``base`` or the first free ``base-2``, ``base-3``..."""
    slug = slugify(base) or "user"
    candidate = slug
    suffix = 2
    while is_taken(candidate):
        candidate = f"{slug}-{suffix}"
        suffix += 1
    return candidate
