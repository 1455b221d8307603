"""Tests for the SQLAlchemy contact repository."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session  # noqa: TC002

from contactlink.adapters.sqlalchemy.repositories import SqlAlchemyContactRepository
from contactlink.domain.errors import MergeConflictError, StorageUnavailableError
from contactlink.domain.model import Contact, LinkPrecedence
from contactlink.domain.reconciliation import MergePlan

BASE_TIME = datetime(2024, 1, 1, tzinfo=UTC)


def _store(
    repository: SqlAlchemyContactRepository,
    *,
    email: str | None = None,
    phone_number: str | None = None,
    linked_id: int | None = None,
    minutes: int = 0,
    deleted: bool = False,
) -> Contact:
    if linked_id is None:
        contact = Contact.new_primary(email=email, phone_number=phone_number)
    else:
        contact = Contact.new_secondary(
            email=email, phone_number=phone_number, linked_id=linked_id
        )
    contact.created_at = BASE_TIME + timedelta(minutes=minutes)
    if deleted:
        contact.deleted_at = BASE_TIME
    return repository.create(contact)


@pytest.fixture
def repository(sqlite_session: Session) -> SqlAlchemyContactRepository:
    return SqlAlchemyContactRepository(sqlite_session)


def test_create_assigns_id_and_timestamps(repository: SqlAlchemyContactRepository) -> None:
    contact = repository.create(Contact.new_primary(email="a@x.com", phone_number="111"))

    assert contact.id is not None
    assert contact.created_at is not None
    assert contact.created_at.tzinfo is not None
    assert contact.updated_at is not None


def test_find_matching_uses_or_and_orders_by_creation(
    repository: SqlAlchemyContactRepository, sqlite_session: Session
) -> None:
    by_phone = _store(repository, phone_number="222", minutes=5)
    by_email = _store(repository, email="a@x.com", minutes=1)
    _store(repository, email="b@x.com", phone_number="333", minutes=2)
    sqlite_session.commit()

    matches = repository.find_matching(email="a@x.com", phone_number="222")

    assert [contact.id for contact in matches] == [by_email.id, by_phone.id]


def test_find_matching_ignores_missing_fields_and_deleted_rows(
    repository: SqlAlchemyContactRepository, sqlite_session: Session
) -> None:
    _store(repository, email="a@x.com", deleted=True)
    _store(repository, phone_number="111")
    sqlite_session.commit()

    assert repository.find_matching(email="a@x.com", phone_number=None) == ()
    assert repository.find_matching(email=None, phone_number=None) == ()
    assert len(repository.find_matching(email="", phone_number="111")) == 1


def test_find_by_ids_includes_deleted_rows(
    repository: SqlAlchemyContactRepository, sqlite_session: Session
) -> None:
    kept = _store(repository, email="a@x.com", minutes=2)
    deleted = _store(repository, email="b@x.com", minutes=1, deleted=True)
    sqlite_session.commit()

    found = repository.find_by_ids([kept.persisted_id, deleted.persisted_id])

    assert [contact.id for contact in found] == [deleted.id, kept.id]
    assert repository.find_by_ids([]) == ()


def test_find_cluster_returns_primary_and_live_secondaries(
    repository: SqlAlchemyContactRepository, sqlite_session: Session
) -> None:
    primary = _store(repository, email="a@x.com")
    secondary = _store(repository, phone_number="111", linked_id=primary.id, minutes=1)
    _store(repository, phone_number="999", linked_id=primary.id, minutes=2, deleted=True)
    _store(repository, email="other@x.com", minutes=3)
    sqlite_session.commit()

    cluster = repository.find_cluster(primary.persisted_id)

    assert [contact.id for contact in cluster] == [primary.id, secondary.id]


def test_merge_clusters_demotes_and_relinks(
    repository: SqlAlchemyContactRepository, sqlite_session: Session
) -> None:
    survivor = _store(repository, email="a@x.com")
    demoted = _store(repository, phone_number="222", minutes=1)
    follower = _store(repository, email="b@x.com", linked_id=demoted.id, minutes=2)
    sqlite_session.commit()

    repository.merge_clusters(
        MergePlan(survivor_id=survivor.persisted_id, demoted_ids=(demoted.persisted_id,))
    )
    sqlite_session.commit()

    rows = {contact.id: contact for contact in repository.find_cluster(survivor.persisted_id)}
    assert set(rows) == {survivor.id, demoted.id, follower.id}
    assert rows[demoted.id].link_precedence is LinkPrecedence.SECONDARY
    assert rows[demoted.id].linked_id == survivor.id
    assert rows[follower.id].linked_id == survivor.id
    assert rows[survivor.id].is_primary


def test_merge_clusters_rejects_plan_for_already_demoted_row(
    repository: SqlAlchemyContactRepository, sqlite_session: Session
) -> None:
    first = _store(repository, email="a@x.com")
    second = _store(repository, email="b@x.com", minutes=1)
    third = _store(repository, email="c@x.com", linked_id=second.id, minutes=2)
    follower = _store(repository, phone_number="444", linked_id=third.id, minutes=3)
    sqlite_session.commit()

    # a stale plan still treating ``third`` as a primary
    with pytest.raises(MergeConflictError, match=rf"\[{third.id}\]"):
        repository.merge_clusters(
            MergePlan(survivor_id=first.persisted_id, demoted_ids=(third.persisted_id,))
        )
    sqlite_session.rollback()

    reloaded = {
        contact.id: contact
        for contact in repository.find_by_ids([third.persisted_id, follower.persisted_id])
    }
    assert reloaded[third.id].linked_id == second.id
    assert reloaded[follower.id].linked_id == third.id


def test_merge_clusters_rolls_back_partial_demotion_on_conflict(
    repository: SqlAlchemyContactRepository, sqlite_session: Session
) -> None:
    survivor = _store(repository, email="a@x.com")
    live = _store(repository, phone_number="222", minutes=1)
    elsewhere = _store(repository, phone_number="333", minutes=2)
    demoted = _store(repository, email="d@x.com", linked_id=elsewhere.id, minutes=3)
    sqlite_session.commit()

    with pytest.raises(MergeConflictError):
        repository.merge_clusters(
            MergePlan(
                survivor_id=survivor.persisted_id,
                demoted_ids=(live.persisted_id, demoted.persisted_id),
            )
        )
    sqlite_session.rollback()

    (reloaded,) = repository.find_by_ids([live.persisted_id])
    assert reloaded.is_primary
    assert reloaded.linked_id is None


def test_storage_errors_are_translated(sqlite_session: Session) -> None:
    sqlite_session.execute(text("DROP TABLE contact"))
    repository = SqlAlchemyContactRepository(sqlite_session)

    with pytest.raises(StorageUnavailableError) as excinfo:
        repository.find_matching(email="a@x.com", phone_number=None)

    assert isinstance(excinfo.value.__cause__, OperationalError)
