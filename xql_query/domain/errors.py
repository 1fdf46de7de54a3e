"""Project-native typed exceptions for XQL query workflow failures."""

from __future__ import annotations

from typing import Any


class XqlClientError(Exception):
    """Base exception for every XQL query workflow failure.

    Attributes:
        stage: Protocol stage that failed (`time_window`, `submit`, `poll`, `stream`, `transport`).
        status_code: Optional HTTP status code returned by the upstream API.
        diagnostic_payload: Raw upstream diagnostic payload, when one was received.
        stage_timeline: Stage events of the orchestrated run that raised this error, if any.
    """

    default_stage = "query"

    def __init__(
        self,
        message: str,
        stage: str | None = None,
        status_code: int | None = None,
        diagnostic_payload: Any = None,
    ):
        super().__init__(message)
        self.stage = stage or self.default_stage
        self.status_code = status_code
        self.diagnostic_payload = diagnostic_payload
        self.stage_timeline: list[dict[str, Any]] = []


class InvalidTimeFormatError(XqlClientError, ValueError):
    """Relative time token does not match `<digits><d|h|m>`."""

    default_stage = "time_window"


class UnsupportedTimeUnitError(XqlClientError, ValueError):
    """Relative time token matched but its unit has no millisecond multiplier."""

    default_stage = "time_window"


class SubmitFailedError(XqlClientError, RuntimeError):
    """Start-query request returned a non-200 HTTP status."""

    default_stage = "submit"


class QueryPollFailedError(XqlClientError, RuntimeError):
    """Get-results request returned a non-200 HTTP status."""

    default_stage = "poll"


class QueryFailedError(XqlClientError, RuntimeError):
    """Upstream reported `FAIL` status for the query."""

    default_stage = "poll"


class QueryPollTimeoutError(XqlClientError, TimeoutError):
    """Query stayed `PENDING` past the poll attempt or deadline budget."""

    default_stage = "poll"


class QueryCancelledError(XqlClientError, RuntimeError):
    """Caller cancelled the query while it was being polled."""

    default_stage = "poll"


class MalformedResponseError(XqlClientError, ValueError):
    """Upstream response envelope violated the expected contract."""


class StreamFetchFailedError(XqlClientError, RuntimeError):
    """Result-stream request returned a non-200 HTTP status."""

    default_stage = "stream"


class StreamDecodeError(XqlClientError, ValueError):
    """Result-stream body could not be decoded.

    Attributes:
        line_number: One-based line number of the offending record, when known.
    """

    default_stage = "stream"

    def __init__(
        self,
        message: str,
        line_number: int | None = None,
        diagnostic_payload: Any = None,
    ):
        super().__init__(message=message, diagnostic_payload=diagnostic_payload)
        self.line_number = line_number


class XqlTransportConnectionError(XqlClientError, ConnectionError):
    """Network-level failure while talking to the XQL API."""

    default_stage = "transport"


class XqlTransportTimeoutError(XqlClientError, TimeoutError):
    """HTTP request to the XQL API timed out."""

    default_stage = "transport"
