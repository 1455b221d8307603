"""Typed values passed between reconciliation stages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contactlink.domain.model import Contact


@dataclass(frozen=True, slots=True)
class IdentifyRequest:
    """Partial contact info presented for reconciliation.

    Empty strings count as "not supplied".
    """

    email: str | None = None
    phone_number: str | None = None

    def __post_init__(self) -> None:
        if not self.email:
            object.__setattr__(self, "email", None)
        if not self.phone_number:
            object.__setattr__(self, "phone_number", None)

    @property
    def is_empty(self) -> bool:
        return self.email is None and self.phone_number is None


@dataclass(frozen=True, slots=True)
class RootResolution:
    """Distinct primary ids touched by a match set, in first-seen order."""

    root_ids: tuple[int, ...] = ()

    @property
    def is_new(self) -> bool:
        return not self.root_ids

    @property
    def needs_merge(self) -> bool:
        return len(self.root_ids) > 1

    @property
    def single_root(self) -> int:
        if len(self.root_ids) != 1:
            raise ValueError(f"expected exactly one root, got {len(self.root_ids)}")
        return self.root_ids[0]


@dataclass(frozen=True, slots=True)
class MergePlan:
    """Collapse of several clusters into the one rooted at ``survivor_id``.

    The demote half turns every id in ``demoted_ids`` into a secondary of the
    survivor; the relink half re-points every contact linked to one of those ids.
    """

    survivor_id: int
    demoted_ids: tuple[int, ...] = ()

    @property
    def relink_from_ids(self) -> tuple[int, ...]:
        return self.demoted_ids

    @property
    def is_noop(self) -> bool:
        return not self.demoted_ids


@dataclass(frozen=True, slots=True)
class ConsolidatedContact:
    primary_id: int
    emails: tuple[str, ...] = ()
    phone_numbers: tuple[str, ...] = ()
    secondary_ids: tuple[int, ...] = ()


@dataclass(slots=True)
class ReconciliationOutcome:
    """Result of one reconciliation run."""

    contact: ConsolidatedContact
    created: Contact | None = None
    merge: MergePlan | None = None
