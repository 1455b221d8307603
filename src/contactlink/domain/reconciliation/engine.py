"""Orchestrator for identity reconciliation.

Stages run strictly in order: match, resolve, merge, extend, compose. Each
request gets its own unit of work; the merge and the extension commit
separately, and a request that only reads commits nothing.

Two concurrent requests carrying overlapping new info can both decide to create
a primary (or both extend the same cluster); only the merge is guarded against
concurrent writers.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from contactlink.domain.model import Contact

from .compose import compose_cluster
from .contracts import ReconciliationOutcome
from .extend import extend_cluster
from .match import match_contacts
from .merge import current_primaries, merge_clusters
from .resolve import resolve_roots

if TYPE_CHECKING:
    from collections.abc import Callable

    from contactlink.domain.ports import ContactUnitOfWork

    from .contracts import IdentifyRequest, MergePlan

log = logging.getLogger(__name__)


def reconcile(
    request: IdentifyRequest,
    *,
    unit_of_work_factory: Callable[[], ContactUnitOfWork],
) -> ReconciliationOutcome:
    """Resolve or grow the cluster ``request`` belongs to and return its consolidated view."""

    if request.is_empty:
        raise ValueError("an identify request needs an email or a phone number")

    with unit_of_work_factory() as uow:
        contacts = uow.repositories.contacts
        resolution = resolve_roots(match_contacts(contacts, request))
        log.debug("Resolved %d root(s): %s", len(resolution.root_ids), resolution.root_ids)

        if resolution.is_new:
            primary = contacts.create(
                Contact.new_primary(email=request.email, phone_number=request.phone_number)
            )
            uow.commit()
            log.info("Created primary contact %s", primary.id)
            return ReconciliationOutcome(
                contact=compose_cluster(primary.persisted_id, (primary,)),
                created=primary,
            )

        merge: MergePlan | None = None
        if resolution.needs_merge:
            merge = merge_clusters(uow, resolution.root_ids)
            primary_id = merge.survivor_id
        else:
            # the matched root may have been demoted by a concurrent merge since
            (primary,) = current_primaries(contacts, (resolution.single_root,))
            primary_id = primary.persisted_id

        cluster = contacts.find_cluster(primary_id)
        created = extend_cluster(contacts, primary_id=primary_id, cluster=cluster, request=request)
        if created is not None:
            uow.commit()
            cluster = (*cluster, created)

        return ReconciliationOutcome(
            contact=compose_cluster(primary_id, cluster),
            created=created,
            merge=merge,
        )
