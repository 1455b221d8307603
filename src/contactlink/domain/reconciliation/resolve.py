"""Derive the distinct primaries ("roots") touched by a match set."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .contracts import RootResolution

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contactlink.domain.model import Contact


def resolve_roots(matches: Iterable[Contact]) -> RootResolution:
    """Collect each match's root id once, keeping first-seen order.

    - no roots: the request describes a new identity
    - one root: that primary survives as is
    - several roots: the clusters have to be merged
    """

    roots: dict[int, None] = {}
    for contact in matches:
        roots.setdefault(contact.root_id, None)
    return RootResolution(root_ids=tuple(roots))
