"""Reconciliation core: link contact records that belong to the same person.

Flow:
1) match stored contacts on email OR phone number
2) resolve the distinct primaries they belong to
3) merge when more than one primary is touched (oldest survives)
4) extend the cluster with a secondary when the request brings new info
5) compose the consolidated view
"""

from __future__ import annotations

from .compose import compose_cluster
from .contracts import (
    ConsolidatedContact,
    IdentifyRequest,
    MergePlan,
    ReconciliationOutcome,
    RootResolution,
)
from .engine import reconcile
from .extend import extend_cluster, has_new_information
from .match import match_contacts
from .merge import current_primaries, merge_clusters, plan_merge
from .resolve import resolve_roots

__all__ = [
    "ConsolidatedContact",
    "IdentifyRequest",
    "MergePlan",
    "ReconciliationOutcome",
    "RootResolution",
    "compose_cluster",
    "current_primaries",
    "extend_cluster",
    "has_new_information",
    "match_contacts",
    "merge_clusters",
    "plan_merge",
    "reconcile",
    "resolve_roots",
]
