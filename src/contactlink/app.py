"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from http import HTTPStatus
from logging import getLogger
from typing import Any

from contactlink.adapters.identify import (
    IdentifyResponse,
    parse_identify_payload,
    to_error_response,
    to_identify_response,
)
from contactlink.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyContactUnitOfWork,
    is_started,
    ping,
    startup,
)
from contactlink.domain.errors import InvalidInputError
from contactlink.domain.ports.unit_of_work import ContactUnitOfWork
from contactlink.domain.reconciliation import reconcile

UnitOfWorkFactory = Callable[[], ContactUnitOfWork]

SERVICE_NAME = "Identity Reconciliation Service"

log = getLogger(__name__)


def _default_unit_of_work_factory() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyContactUnitOfWork


def identify_contact(
    payload: Any,  # noqa: ANN401
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> IdentifyResponse:
    """Validate ``payload``, reconcile it against the store, and return the consolidated contact.

    Raises ``InvalidInputError`` for unacceptable payloads; storage and merge
    failures propagate unchanged.
    """

    request = parse_identify_payload(payload)
    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    outcome = reconcile(request, unit_of_work_factory=effective_uow)
    log.info(
        "Identified contact cluster %s (created=%s, merged=%s)",
        outcome.contact.primary_id,
        outcome.created.id if outcome.created else None,
        list(outcome.merge.demoted_ids) if outcome.merge else [],
    )
    return to_identify_response(outcome.contact)


def handle_identify(
    payload: Any,  # noqa: ANN401
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> tuple[HTTPStatus, dict[str, Any]]:
    """Run ``identify_contact`` and render the result or failure as a status and JSON body."""

    try:
        response = identify_contact(payload, unit_of_work_factory=unit_of_work_factory)
    except InvalidInputError as exc:
        log.info("Rejected identify request: %s", exc)
        status, error = to_error_response(exc)
        return status, error.model_dump(by_alias=True, exclude_none=True)
    except Exception as exc:
        log.exception("Identify request failed")
        status, error = to_error_response(exc)
        return status, error.model_dump(by_alias=True, exclude_none=True)
    return HTTPStatus.OK, response.model_dump(by_alias=True)


def check_health() -> dict[str, str]:
    """Verify the store is reachable."""

    if not is_started():
        startup()
    ping()
    return {"status": "ok", "message": SERVICE_NAME}
