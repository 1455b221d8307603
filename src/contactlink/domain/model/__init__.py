"""Domain model for contact records."""

from __future__ import annotations

from .contact import Contact, older_of
from .enums import LinkPrecedence

__all__ = [
    "Contact",
    "LinkPrecedence",
    "older_of",
]
