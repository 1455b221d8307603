"""Build the consolidated view of a cluster."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .contracts import ConsolidatedContact

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contactlink.domain.model import Contact


def compose_cluster(primary_id: int, cluster: Iterable[Contact]) -> ConsolidatedContact:
    """De-duplicate emails and phone numbers, primary first, then creation order.

    ``cluster`` is expected oldest first. A primary missing from ``cluster``
    (soft-deleted) still names the cluster but contributes no values.
    """

    members = list(cluster)
    emails: list[str] = []
    phone_numbers: list[str] = []
    secondary_ids: list[int] = []

    primary = next((contact for contact in members if contact.id == primary_id), None)
    if primary is not None:
        if primary.email:
            emails.append(primary.email)
        if primary.phone_number:
            phone_numbers.append(primary.phone_number)

    for contact in members:
        if contact.id == primary_id:
            continue
        if contact.email and contact.email not in emails:
            emails.append(contact.email)
        if contact.phone_number and contact.phone_number not in phone_numbers:
            phone_numbers.append(contact.phone_number)
        secondary_ids.append(contact.persisted_id)

    return ConsolidatedContact(
        primary_id=primary_id,
        emails=tuple(emails),
        phone_numbers=tuple(phone_numbers),
        secondary_ids=tuple(secondary_ids),
    )
