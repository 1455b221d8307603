"""Translate between the identify wire contract and domain values."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import TYPE_CHECKING, Any, Final

from pydantic import ValidationError

from contactlink.domain.errors import InvalidInputError, ValidationIssue
from contactlink.domain.reconciliation import IdentifyRequest

from .schema import ContactView, ErrorDetail, ErrorResponse, IdentifyPayload, IdentifyResponse

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails

    from contactlink.domain.reconciliation import ConsolidatedContact

log = logging.getLogger(__name__)

ROOT_PATH: Final[str] = "(root)"
VALIDATION_FAILED: Final[str] = "Validation failed"
INTERNAL_ERROR: Final[str] = "Internal server error"


def parse_identify_payload(payload: Any) -> IdentifyRequest:  # noqa: ANN401
    """Validate a decoded request body into an ``IdentifyRequest``."""

    try:
        parsed = IdentifyPayload.model_validate(payload)
    except ValidationError as exc:
        raise InvalidInputError(tuple(_issue(error) for error in exc.errors())) from exc
    return IdentifyRequest(email=parsed.email, phone_number=parsed.phone_number)


def _issue(error: ErrorDetails) -> ValidationIssue:
    path = ".".join(str(part) for part in error["loc"]) or ROOT_PATH
    message = error["msg"]
    if error["type"] == "value_error":
        # pydantic prefixes custom messages with "Value error, "
        cause = error.get("ctx", {}).get("error")
        if cause is not None:
            message = str(cause)
    return ValidationIssue(path=path, message=message)


def to_identify_response(contact: ConsolidatedContact) -> IdentifyResponse:
    return IdentifyResponse(
        contact=ContactView(
            primary_contact_id=contact.primary_id,
            emails=list(contact.emails),
            phone_numbers=list(contact.phone_numbers),
            secondary_contact_ids=list(contact.secondary_ids),
        )
    )


def to_error_response(error: BaseException) -> tuple[HTTPStatus, ErrorResponse]:
    """Map a failure to a status and a body that leaks nothing about internals."""

    if isinstance(error, InvalidInputError):
        details = [ErrorDetail(path=issue.path, message=issue.message) for issue in error.issues]
        return HTTPStatus.BAD_REQUEST, ErrorResponse(error=VALIDATION_FAILED, details=details)
    return HTTPStatus.INTERNAL_SERVER_ERROR, ErrorResponse(error=INTERNAL_ERROR)
