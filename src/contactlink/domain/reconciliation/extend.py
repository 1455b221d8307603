"""Append a secondary when a request carries info the cluster does not know yet."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from contactlink.domain.model import Contact

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contactlink.domain.ports import ContactRepository

    from .contracts import IdentifyRequest

log = logging.getLogger(__name__)


def has_new_information(cluster: Iterable[Contact], request: IdentifyRequest) -> bool:
    known_emails: set[str] = set()
    known_phone_numbers: set[str] = set()
    for contact in cluster:
        if contact.email:
            known_emails.add(contact.email)
        if contact.phone_number:
            known_phone_numbers.add(contact.phone_number)

    email_is_new = request.email is not None and request.email not in known_emails
    phone_is_new = (
        request.phone_number is not None and request.phone_number not in known_phone_numbers
    )
    return email_is_new or phone_is_new


def extend_cluster(
    contacts: ContactRepository,
    *,
    primary_id: int,
    cluster: Iterable[Contact],
    request: IdentifyRequest,
) -> Contact | None:
    """Create a secondary under ``primary_id`` carrying the request, if anything is new.

    The new row stores both supplied fields even when only one of them is new.
    """

    if not has_new_information(cluster, request):
        return None
    created = contacts.create(
        Contact.new_secondary(
            email=request.email,
            phone_number=request.phone_number,
            linked_id=primary_id,
        )
    )
    log.info("Extended cluster %s with secondary contact %s", primary_id, created.id)
    return created
