"""Identify request/response contract."""

from __future__ import annotations

from .schema import (
    ContactView,
    ErrorDetail,
    ErrorResponse,
    IdentifyPayload,
    IdentifyResponse,
)
from .translator import parse_identify_payload, to_error_response, to_identify_response

__all__ = [
    "ContactView",
    "ErrorDetail",
    "ErrorResponse",
    "IdentifyPayload",
    "IdentifyResponse",
    "parse_identify_payload",
    "to_error_response",
    "to_identify_response",
]
