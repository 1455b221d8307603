"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from functools import wraps
from typing import TYPE_CHECKING, cast

from sqlalchemy import or_, select, update
from sqlalchemy.exc import SQLAlchemyError

from contactlink.adapters.sqlalchemy.mappings import contact_table
from contactlink.domain.errors import MergeConflictError, StorageUnavailableError
from contactlink.domain.model import Contact, LinkPrecedence

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from sqlalchemy import ColumnElement, Select
    from sqlalchemy.orm import Session

    from contactlink.domain.reconciliation.contracts import MergePlan


def translate_storage_errors[**P, R](func: Callable[P, R]) -> Callable[P, R]:
    """Re-raise SQLAlchemy failures as ``StorageUnavailableError``."""

    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(f"{func.__qualname__} failed") from exc

    return wrapper


class SqlAlchemyContactRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    @translate_storage_errors
    def find_matching(
        self,
        *,
        email: str | None,
        phone_number: str | None,
    ) -> tuple[Contact, ...]:
        criteria: list[ColumnElement[bool]] = []
        if email:
            criteria.append(contact_table.c.email == email)
        if phone_number:
            criteria.append(contact_table.c.phone_number == phone_number)
        if not criteria:
            return ()
        stmt = self._live().where(or_(*criteria))
        return self._fetch(stmt)

    @translate_storage_errors
    def find_by_ids(self, ids: Iterable[int]) -> tuple[Contact, ...]:
        wanted = list(ids)
        if not wanted:
            return ()
        stmt = self._ordered(select(Contact)).where(contact_table.c.id.in_(wanted))
        return self._fetch(stmt)

    @translate_storage_errors
    def find_cluster(self, primary_id: int) -> tuple[Contact, ...]:
        stmt = self._live().where(
            or_(contact_table.c.id == primary_id, contact_table.c.linked_id == primary_id)
        )
        return self._fetch(stmt)

    @translate_storage_errors
    def create(self, contact: Contact) -> Contact:
        self.session.add(contact)
        self.session.flush()
        return contact

    @translate_storage_errors
    def merge_clusters(self, plan: MergePlan) -> None:
        if plan.is_noop:
            return
        self._demote(plan)
        self._check_demoted(plan)
        self._relink(plan)

    def _demote(self, plan: MergePlan) -> None:
        # rows a concurrent merge already demoted are not touched here
        stmt = (
            update(Contact)
            .where(contact_table.c.id.in_(plan.demoted_ids))
            .where(contact_table.c.link_precedence == LinkPrecedence.PRIMARY)
            .where(contact_table.c.deleted_at.is_(None))
            .values(link_precedence=LinkPrecedence.SECONDARY, linked_id=plan.survivor_id)
            .execution_options(synchronize_session="fetch")
        )
        self.session.execute(stmt)

    def _check_demoted(self, plan: MergePlan) -> None:
        stmt = (
            select(contact_table.c.id)
            .where(contact_table.c.id.in_(plan.demoted_ids))
            .where(contact_table.c.link_precedence == LinkPrecedence.SECONDARY)
            .where(contact_table.c.linked_id == plan.survivor_id)
        )
        demoted = set(self.session.execute(stmt).scalars())
        stale = sorted(set(plan.demoted_ids) - demoted)
        if stale:
            raise MergeConflictError(
                f"contacts {stale} are no longer primaries; cannot link them to {plan.survivor_id}"
            )

    def _relink(self, plan: MergePlan) -> None:
        stmt = (
            update(Contact)
            .where(contact_table.c.linked_id.in_(plan.relink_from_ids))
            .where(contact_table.c.deleted_at.is_(None))
            .values(linked_id=plan.survivor_id)
            .execution_options(synchronize_session="fetch")
        )
        self.session.execute(stmt)

    def _live(self) -> Select[tuple[Contact]]:
        return self._ordered(select(Contact)).where(contact_table.c.deleted_at.is_(None))

    @staticmethod
    def _ordered(stmt: Select[tuple[Contact]]) -> Select[tuple[Contact]]:
        return stmt.order_by(contact_table.c.created_at, contact_table.c.id)

    def _fetch(self, stmt: Select[tuple[Contact]]) -> tuple[Contact, ...]:
        stmt = stmt.execution_options(populate_existing=True)
        return tuple(self.session.execute(stmt).scalars())


if TYPE_CHECKING:
    from contactlink.domain.ports.persistence import ContactRepository

    _session_stub = cast("Session", object())
    _repo_check: ContactRepository = SqlAlchemyContactRepository(_session_stub)
