"""Ports for persisting contact records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contactlink.domain.model import Contact
    from contactlink.domain.reconciliation.contracts import MergePlan


@runtime_checkable
class ContactRepository(Protocol):
    """Query/command contract the reconciliation pipeline consumes.

    Every finder excludes soft-deleted rows unless stated otherwise and returns
    contacts ordered by ``(created_at, id)`` ascending.
    """

    def find_matching(
        self,
        *,
        email: str | None,
        phone_number: str | None,
    ) -> tuple[Contact, ...]:
        """Contacts sharing the email OR the phone number."""
        ...

    def find_by_ids(self, ids: Iterable[int]) -> tuple[Contact, ...]:
        """Contacts with the given ids, soft-deleted rows included."""
        ...

    def find_cluster(self, primary_id: int) -> tuple[Contact, ...]:
        """The primary and every secondary linked to it."""
        ...

    def create(self, contact: Contact) -> Contact:
        """Store a new contact, assigning ``id`` and ``created_at``."""
        ...

    def merge_clusters(self, plan: MergePlan) -> None:
        """Demote ``plan.demoted_ids`` and re-link their secondaries to the survivor.

        Both writes belong to the surrounding unit of work and only become
        visible together when it commits. Raises ``MergeConflictError`` when a
        demoted id is no longer a live primary, e.g. after a concurrent merge.
        """
        ...
