"""Collapse several clusters into the one rooted at the most senior primary.

The two writes of a merge (demoting the junior primaries, re-pointing their
secondaries) are handed to the repository as one plan and committed together.
A failure anywhere in that unit of work, including a junior primary that a
concurrent merge demoted first, rolls it back and surfaces as
``MergeConflictError``; the caller decides whether to retry the request.
"""

from __future__ import annotations

import logging
from functools import reduce
from typing import TYPE_CHECKING

from contactlink.domain.errors import (
    MergeConflictError,
    ReconciliationError,
    StorageUnavailableError,
)
from contactlink.domain.model import older_of

from .contracts import MergePlan

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from contactlink.domain.model import Contact
    from contactlink.domain.ports import ContactRepository, ContactUnitOfWork

log = logging.getLogger(__name__)


def plan_merge(primaries: Sequence[Contact]) -> MergePlan:
    """Keep the oldest live primary; every other live one is demoted under it.

    Soft-deleted primaries take no part: they neither survive a merge of live
    clusters nor get demoted.
    """

    if not primaries:
        raise ValueError("cannot plan a merge without primaries")
    if any(not contact.is_primary for contact in primaries):
        raise ValueError("only primary contacts can take part in a merge")

    live = [contact for contact in primaries if not contact.is_deleted]
    if not live:
        return MergePlan(survivor_id=reduce(older_of, primaries).persisted_id)

    survivor = reduce(older_of, live)
    demoted = sorted(
        (contact for contact in live if contact is not survivor),
        key=lambda contact: contact.seniority,
    )
    return MergePlan(
        survivor_id=survivor.persisted_id,
        demoted_ids=tuple(contact.persisted_id for contact in demoted),
    )


def current_primaries(contacts: ContactRepository, root_ids: Iterable[int]) -> tuple[Contact, ...]:
    """Load the given roots, following any that have been demoted since they were read."""

    pending = set(root_ids)
    visited: set[int] = set()
    primaries: dict[int, Contact] = {}
    while pending:
        found = contacts.find_by_ids(sorted(pending))
        missing = pending - {contact.persisted_id for contact in found}
        if missing:
            raise ReconciliationError(f"primary contacts {sorted(missing)} do not exist")
        visited |= pending
        pending = set()
        for contact in found:
            if contact.is_primary:
                primaries[contact.persisted_id] = contact
            elif contact.root_id not in visited:
                pending.add(contact.root_id)
    return tuple(sorted(primaries.values(), key=lambda contact: contact.seniority))


def merge_clusters(unit_of_work: ContactUnitOfWork, root_ids: Iterable[int]) -> MergePlan:
    """Merge the clusters behind ``root_ids`` and commit the result."""

    contacts = unit_of_work.repositories.contacts
    plan = plan_merge(current_primaries(contacts, root_ids))
    if plan.is_noop:
        return plan

    try:
        contacts.merge_clusters(plan)
        unit_of_work.commit()
    except MergeConflictError:
        unit_of_work.rollback()
        raise
    except StorageUnavailableError as exc:
        unit_of_work.rollback()
        raise MergeConflictError(
            f"merging contacts {list(plan.demoted_ids)} into {plan.survivor_id} failed"
        ) from exc

    log.info(
        "Merged primary contacts %s into %s",
        list(plan.demoted_ids),
        plan.survivor_id,
    )
    return plan
