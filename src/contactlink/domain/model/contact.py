"""Contact records and the primary/secondary hierarchy they form.

A cluster is one primary plus every secondary whose ``linked_id`` points at it.
Secondaries never point at other secondaries; the merge operations below keep
that shape when two clusters collapse into one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .enums import LinkPrecedence

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(eq=False, kw_only=True)
class Contact:
    """One stored (email, phone number) observation of a person."""

    email: str | None = None
    phone_number: str | None = None
    link_precedence: LinkPrecedence = LinkPrecedence.PRIMARY
    linked_id: int | None = None

    # assigned by the store
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.link_precedence is LinkPrecedence.SECONDARY and self.linked_id is None:
            raise ValueError("secondary contacts must be linked to a primary")
        if self.link_precedence is LinkPrecedence.PRIMARY and self.linked_id is not None:
            raise ValueError("primary contacts cannot be linked")

    @classmethod
    def new_primary(cls, *, email: str | None, phone_number: str | None) -> Contact:
        return cls(email=email, phone_number=phone_number)

    @classmethod
    def new_secondary(
        cls,
        *,
        email: str | None,
        phone_number: str | None,
        linked_id: int,
    ) -> Contact:
        return cls(
            email=email,
            phone_number=phone_number,
            link_precedence=LinkPrecedence.SECONDARY,
            linked_id=linked_id,
        )

    @property
    def is_primary(self) -> bool:
        return self.link_precedence is LinkPrecedence.PRIMARY

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def persisted_id(self) -> int:
        if self.id is None:
            raise ValueError("contact has not been persisted yet")
        return self.id

    @property
    def root_id(self) -> int:
        """Id of the primary this contact resolves to."""
        if self.is_primary:
            return self.persisted_id
        if self.linked_id is None:
            raise ValueError(f"secondary contact {self.id} has no linked primary")
        return self.linked_id

    @property
    def seniority(self) -> tuple[datetime, int]:
        """Total order used to pick the surviving primary: creation time, then id."""
        if self.created_at is None:
            raise ValueError(f"contact {self.id} has no creation timestamp")
        return (self.created_at, self.persisted_id)

    def demote_to(self, primary_id: int) -> None:
        """Turn this primary into a secondary of ``primary_id``."""
        if primary_id == self.id:
            raise ValueError("a contact cannot be linked to itself")
        self.link_precedence = LinkPrecedence.SECONDARY
        self.linked_id = primary_id

    def relink_to(self, primary_id: int) -> None:
        if self.is_primary:
            raise ValueError("only secondary contacts can be re-linked")
        self.linked_id = primary_id


def older_of(a: Contact, b: Contact) -> Contact:
    """Return the senior of two contacts; ties on ``created_at`` go to the lower id."""

    return a if a.seniority <= b.seniority else b
