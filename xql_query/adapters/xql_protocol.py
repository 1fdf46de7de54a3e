"""Canonical XQL API endpoint names, query statuses and envelope helpers."""

from __future__ import annotations

from enum import Enum
import json
from typing import Any, Final

from xql_query.domain import MalformedResponseError

from .interfaces import TransportResponse

XQL_API_ROOT_PATH: Final[str] = "/public_api/v1/xql/"
XQL_START_QUERY_ENDPOINT: Final[str] = "start_xql_query/"
XQL_GET_RESULTS_ENDPOINT: Final[str] = "get_query_results/"
XQL_GET_RESULTS_STREAM_ENDPOINT: Final[str] = "get_query_results_stream/"

XQL_SUCCESS_HTTP_STATUS: Final[int] = 200
XQL_INLINE_RESULT_THRESHOLD: Final[int] = 1000
XQL_RESULT_FORMAT: Final[str] = "json"


class XqlQueryStatus(str, Enum):
    """Query states reported by the get-results endpoint."""

    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAIL = "FAIL"


XQL_TERMINAL_STATUSES: Final[frozenset[XqlQueryStatus]] = frozenset(
    {XqlQueryStatus.SUCCESS, XqlQueryStatus.FAIL}
)


def xql_parse_query_status(raw_status: object, diagnostic_payload: Any = None) -> XqlQueryStatus:
    """Map a raw reply status value onto the known status enum.

    Args:
        raw_status: Value of `reply.status` from the get-results response.
        diagnostic_payload: Raw reply attached to the error on failure.

    Returns:
        XqlQueryStatus: Parsed status.

    Raises:
        MalformedResponseError: Raised when the status is missing or unknown.
    """

    normalized_status = raw_status.strip().upper() if isinstance(raw_status, str) else ""
    try:
        return XqlQueryStatus(normalized_status)
    except ValueError as error:
        raise MalformedResponseError(
            f"unknown query status {raw_status!r}",
            stage="poll",
            diagnostic_payload=diagnostic_payload,
        ) from error


def xql_decode_envelope(response: TransportResponse, stage: str) -> dict[str, Any]:
    """Decode a JSON response body and return its `reply` field container.

    Args:
        response: Successful transport response.
        stage: Protocol stage label used in error reporting.

    Returns:
        dict[str, Any]: Decoded top-level JSON object containing `reply`.

    Raises:
        MalformedResponseError: Raised when the body is not a JSON object with a `reply` key.
    """

    try:
        envelope = json.loads(response.content)
    except (UnicodeDecodeError, json.JSONDecodeError) as error:
        raise MalformedResponseError(
            f"{stage} response body is not valid JSON",
            stage=stage,
            status_code=response.status_code,
            diagnostic_payload=xql_body_preview(response.content),
        ) from error

    if not isinstance(envelope, dict) or "reply" not in envelope:
        raise MalformedResponseError(
            f"{stage} response is missing the reply field",
            stage=stage,
            status_code=response.status_code,
            diagnostic_payload=envelope,
        )
    return envelope


def xql_body_preview(content: bytes, limit: int = 2048) -> str:
    """Return a bounded text rendering of a raw response body for diagnostics."""

    return content[:limit].decode("utf-8", errors="replace")


def xql_diagnostic_payload(content: bytes) -> Any:
    """Return the upstream error body as decoded JSON when possible, else as bounded text."""

    try:
        return json.loads(content)
    except (UnicodeDecodeError, json.JSONDecodeError):
        return xql_body_preview(content)
