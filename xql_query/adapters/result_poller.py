"""Get-results polling step of the XQL request/poll/fetch protocol."""

from __future__ import annotations

from dataclasses import dataclass
import threading
import time
from typing import Any, Callable

from xql_query.domain import (
    InlineResultPayload,
    MalformedResponseError,
    QueryCancelledError,
    QueryFailedError,
    QueryPollFailedError,
    QueryPollTimeoutError,
    ResultPayload,
    StreamResultPayload,
    domain_build_stage_event,
)

from .interfaces import XqlTransportPort
from .xql_protocol import (
    XQL_GET_RESULTS_ENDPOINT,
    XQL_RESULT_FORMAT,
    XQL_SUCCESS_HTTP_STATUS,
    XQL_TERMINAL_STATUSES,
    XqlQueryStatus,
    xql_decode_envelope,
    xql_diagnostic_payload,
    xql_parse_query_status,
)


@dataclass(frozen=True)
class _PollStrategy:
    """Immutable poll cadence and budget configuration.

    Attributes:
        interval_seconds: Fixed delay between `PENDING` responses and the next poll.
        max_attempts: Maximum number of get-results requests, or None for no cap.
        timeout_seconds: Wall-clock budget for the whole poll loop, or None for no deadline.
        monotonic_clock: Monotonic time source in seconds.
    """

    interval_seconds: float
    max_attempts: int | None
    timeout_seconds: float | None
    monotonic_clock: Callable[[], float]

    def strategy_deadline(self) -> float | None:
        """Return absolute monotonic deadline for a poll loop starting now."""

        if self.timeout_seconds is None:
            return None
        return self.monotonic_clock() + self.timeout_seconds

    def strategy_attempts_exhausted(self, attempt_number: int) -> bool:
        """Return whether the one-based attempt number used up the attempt budget."""

        return self.max_attempts is not None and attempt_number >= self.max_attempts

    def strategy_wait_seconds(self, deadline: float | None) -> float | None:
        """Return the next sleep duration, or None when the deadline has passed."""

        if deadline is None:
            return self.interval_seconds
        remaining_seconds = deadline - self.monotonic_clock()
        if remaining_seconds <= 0:
            return None
        return min(self.interval_seconds, remaining_seconds)


class XqlResultPoller:
    """Poll query results until the query reaches a terminal status."""

    def __init__(
        self,
        transport: XqlTransportPort,
        poll_interval_seconds: float = 2.0,
        max_attempts: int | None = None,
        timeout_seconds: float | None = 300.0,
        monotonic_clock: Callable[[], float] | None = None,
    ):
        """Initialize result poller.

        Args:
            transport: XQL transport implementation.
            poll_interval_seconds: Fixed delay between polls while the query is `PENDING`.
            max_attempts: Optional cap on get-results requests per query.
            timeout_seconds: Optional wall-clock budget for one poll loop.
            monotonic_clock: Optional monotonic time source.

        Raises:
            ValueError: Raised when config values are invalid.
        """

        if transport is None:
            raise ValueError("transport must not be None")
        if poll_interval_seconds < 0:
            raise ValueError("poll_interval_seconds must be >= 0")
        if max_attempts is not None and max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if timeout_seconds is not None and timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")

        self._transport = transport
        self._strategy = _PollStrategy(
            interval_seconds=float(poll_interval_seconds),
            max_attempts=max_attempts,
            timeout_seconds=timeout_seconds,
            monotonic_clock=monotonic_clock or time.monotonic,
        )

    def poller_poll(
        self,
        query_id: str,
        limit: int,
        cancel_token: threading.Event | None = None,
        stage_timeline: list[dict[str, object]] | None = None,
    ) -> ResultPayload:
        """Poll get-results until `SUCCESS` or `FAIL`.

        Args:
            query_id: Query identifier returned by the submit step.
            limit: Maximum number of inline result records to request.
            cancel_token: Optional event; once set, polling stops before the next request.
            stage_timeline: Optional diagnostics timeline receiving one event per `PENDING` reply.

        Returns:
            ResultPayload: Inline records or a stream handle.

        Raises:
            ValueError: Raised when inputs are invalid.
            QueryPollFailedError: Raised when a get-results request returns non-200.
            QueryFailedError: Raised when upstream reports `FAIL`.
            QueryPollTimeoutError: Raised when the attempt or deadline budget is exhausted.
            QueryCancelledError: Raised when the cancel token is set.
            MalformedResponseError: Raised when a reply violates the response contract.
        """

        if not isinstance(query_id, str) or not query_id.strip():
            raise ValueError("query_id must not be blank")
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValueError("limit must be a positive integer")

        request_body = {
            "request_data": {
                "query_id": query_id,
                "pending_flag": False,
                "limit": limit,
                "format": XQL_RESULT_FORMAT,
            }
        }
        deadline = self._strategy.strategy_deadline()
        attempt_number = 0

        while True:
            self._poller_raise_if_cancelled(query_id=query_id, cancel_token=cancel_token)
            attempt_number += 1
            reply = self._poller_request_reply(request_body=request_body)
            status = xql_parse_query_status(reply.get("status"), diagnostic_payload=reply)

            if status in XQL_TERMINAL_STATUSES:
                if status is XqlQueryStatus.FAIL:
                    raise QueryFailedError(
                        f"XQL query {query_id} failed upstream",
                        diagnostic_payload=reply,
                    )
                return self._poller_extract_payload(reply=reply)

            if self._strategy.strategy_attempts_exhausted(attempt_number):
                raise QueryPollTimeoutError(
                    f"XQL query {query_id} still pending after {attempt_number} poll attempts",
                    diagnostic_payload=reply,
                )
            wait_seconds = self._strategy.strategy_wait_seconds(deadline)
            if wait_seconds is None:
                raise QueryPollTimeoutError(
                    f"XQL query {query_id} still pending after {self._strategy.timeout_seconds} seconds",
                    diagnostic_payload=reply,
                )
            if stage_timeline is not None:
                stage_timeline.append(
                    domain_build_stage_event(
                        stage="poll",
                        status="retrying",
                        details={"poll_attempt": attempt_number, "retry_after_seconds": wait_seconds},
                    )
                )
            self._poller_wait(query_id=query_id, wait_seconds=wait_seconds, cancel_token=cancel_token)

    def _poller_request_reply(self, request_body: dict[str, Any]) -> dict[str, Any]:
        """Send one get-results request and return its `reply` object."""

        response = self._transport.transport_post(XQL_GET_RESULTS_ENDPOINT, request_body)
        if response.status_code != XQL_SUCCESS_HTTP_STATUS:
            raise QueryPollFailedError(
                f"XQL get query results failed: HTTP {response.status_code}",
                status_code=response.status_code,
                diagnostic_payload=xql_diagnostic_payload(response.content),
            )

        envelope = xql_decode_envelope(response, stage="poll")
        reply = envelope["reply"]
        if not isinstance(reply, dict):
            raise MalformedResponseError(
                "XQL get query results reply is not an object",
                stage="poll",
                status_code=response.status_code,
                diagnostic_payload=envelope,
            )
        return reply

    def _poller_extract_payload(self, reply: dict[str, Any]) -> ResultPayload:
        """Resolve a `SUCCESS` reply into inline records or a stream handle.

        Raises:
            MalformedResponseError: Raised when results carry neither data nor a stream id.
        """

        results = reply.get("results")
        if isinstance(results, dict):
            data = results.get("data")
            if isinstance(data, list):
                return InlineResultPayload(records=tuple(data))
            stream_id = results.get("stream_id")
            if isinstance(stream_id, str) and stream_id.strip():
                return StreamResultPayload(stream_id=stream_id)

        raise MalformedResponseError(
            "XQL query succeeded but results carry neither inline data nor a stream id",
            stage="poll",
            diagnostic_payload=reply,
        )

    def _poller_wait(
        self,
        query_id: str,
        wait_seconds: float,
        cancel_token: threading.Event | None,
    ) -> None:
        """Sleep between polls; a set cancel token interrupts the wait."""

        if cancel_token is None:
            if wait_seconds > 0:
                time.sleep(wait_seconds)
            return
        if cancel_token.wait(wait_seconds):
            raise QueryCancelledError(f"XQL query {query_id} polling cancelled")

    def _poller_raise_if_cancelled(self, query_id: str, cancel_token: threading.Event | None) -> None:
        if cancel_token is not None and cancel_token.is_set():
            raise QueryCancelledError(f"XQL query {query_id} polling cancelled")
