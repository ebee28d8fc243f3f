"""Slug and label normalisation shared by the directory and the templates."""

import re
import unicodedata
from datetime import datetime, timezone


def normalize_slug(value: str) -> str:
    """Return *value* as a URL slug.

    The slug is lowercased, stripped of accents, and uses hyphens as separators,
    so ``"Corte Clásico"`` and ``"corte-clasico"`` normalise to the same value.
    """
    # Normalise unicode and drop combining marks (accents)
    slug = unicodedata.normalize("NFD", value.lower())
    slug = "".join(ch for ch in slug if not unicodedata.combining(ch))

    # Replace runs of non-alphanumeric chars with a single hyphen
    slug = re.sub(r"[^a-z0-9]+", "-", slug)
    return slug.strip("-")


def title_case(value: str) -> str:
    """Uppercase the first letter of every word longer than one character.

    The rest of each word is left untouched so acronyms and mixed-case names
    survive: ``"providencia"`` -> ``"Providencia"``, ``"y"`` stays ``"y"``.
    """
    return " ".join(
        word[0].upper() + word[1:] if len(word) > 1 else word
        for word in value.split(" ")
    )


def as_utc(value: datetime) -> datetime:
    """Return *value* in UTC; naive datetimes are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def iso_timestamp(value: datetime) -> str:
    """Format *value* as a millisecond-precision UTC ISO string (``...T12:00:00.000Z``)."""
    value = as_utc(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
