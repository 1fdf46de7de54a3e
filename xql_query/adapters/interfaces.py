"""Typed interfaces for adapter-layer responsibilities."""

from dataclasses import dataclass
from typing import Any
from typing import Protocol


@dataclass(frozen=True)
class TransportResponse:
    """Raw HTTP response contract returned by transport implementations.

    Attributes:
        status_code: HTTP status code.
        content: Immutable raw response body bytes.
    """

    status_code: int
    content: bytes


class XqlTransportPort(Protocol):
    """Port definition for posting JSON requests to the XQL public API."""

    def transport_post(self, endpoint: str, payload: dict[str, Any]) -> TransportResponse:
        """Send one POST request with a JSON body to an XQL endpoint.

        Args:
            endpoint: Endpoint name relative to the XQL API root, e.g. `start_xql_query/`.
            payload: JSON-serializable request body.

        Returns:
            TransportResponse: Status code and raw body; non-2xx statuses are returned, not raised.

        Raises:
            ConnectionError: Raised when the upstream connection fails.
            TimeoutError: Raised when the request exceeds the timeout.
        """
