"""Find stored contacts sharing the incoming email or phone number."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contactlink.domain.model import Contact
    from contactlink.domain.ports import ContactRepository

    from .contracts import IdentifyRequest

log = logging.getLogger(__name__)


def match_contacts(contacts: ContactRepository, request: IdentifyRequest) -> tuple[Contact, ...]:
    """Return non-deleted contacts matching on either field, oldest first."""

    if request.is_empty:
        return ()
    matches = contacts.find_matching(email=request.email, phone_number=request.phone_number)
    log.debug("Matched %d stored contact(s)", len(matches))
    return matches
