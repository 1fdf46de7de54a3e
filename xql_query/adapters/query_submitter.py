"""Start-query step of the XQL request/poll/fetch protocol."""

from __future__ import annotations

from xql_query.domain import MalformedResponseError, QueryRequest, SubmitFailedError

from .interfaces import XqlTransportPort
from .xql_protocol import (
    XQL_START_QUERY_ENDPOINT,
    XQL_SUCCESS_HTTP_STATUS,
    xql_decode_envelope,
    xql_diagnostic_payload,
)


class XqlQuerySubmitter:
    """Submit XQL queries and return the upstream query identifier."""

    def __init__(self, transport: XqlTransportPort):
        if transport is None:
            raise ValueError("transport must not be None")
        self._transport = transport

    def submitter_submit(self, query_text: str, relative_time_ms: int) -> str:
        """Send one start-query request.

        Args:
            query_text: Raw XQL query text.
            relative_time_ms: Relative timeframe in milliseconds.

        Returns:
            str: Opaque query identifier; ownership passes to the caller.

        Raises:
            ValueError: Raised when the request inputs are invalid.
            SubmitFailedError: Raised when upstream answers with any status other than 200.
            MalformedResponseError: Raised when the reply does not carry a query identifier.
        """

        query_request = QueryRequest(query_text=query_text, relative_time_ms=relative_time_ms)
        response = self._transport.transport_post(XQL_START_QUERY_ENDPOINT, query_request.request_body())
        if response.status_code != XQL_SUCCESS_HTTP_STATUS:
            raise SubmitFailedError(
                f"XQL start query failed: HTTP {response.status_code}",
                status_code=response.status_code,
                diagnostic_payload=xql_diagnostic_payload(response.content),
            )

        envelope = xql_decode_envelope(response, stage="submit")
        query_id = envelope["reply"]
        if not isinstance(query_id, str) or not query_id.strip():
            raise MalformedResponseError(
                "XQL start query reply does not contain a query identifier",
                stage="submit",
                status_code=response.status_code,
                diagnostic_payload=envelope,
            )
        return query_id
