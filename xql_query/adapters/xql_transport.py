"""HTTP transport for the XQL public API built on a pooled `httpx.Client`."""

from __future__ import annotations

from datetime import datetime, timezone
import hashlib
import secrets
import string
from typing import Any, Callable, Final

import httpx

from xql_query.domain import XqlTransportConnectionError, XqlTransportTimeoutError

from .interfaces import TransportResponse, XqlTransportPort
from .xql_protocol import XQL_API_ROOT_PATH

API_KEY_TYPE_STANDARD: Final[str] = "standard"
API_KEY_TYPE_ADVANCED: Final[str] = "advanced"

_NONCE_ALPHABET: Final[str] = string.ascii_letters + string.digits
_NONCE_LENGTH: Final[int] = 64


def _default_nonce_provider() -> str:
    return "".join(secrets.choice(_NONCE_ALPHABET) for _ in range(_NONCE_LENGTH))


def _default_timestamp_ms_provider() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


class HttpxXqlTransport(XqlTransportPort):
    """Transport implementation posting JSON bodies to `{base_url}/public_api/v1/xql/`.

    Authentication headers are rebuilt for every request. Standard API keys are
    sent as-is; advanced API keys are signed with a fresh nonce and timestamp.
    """

    _USER_AGENT: Final[str] = "xql-query-client/1.0 (Python/httpx)"

    def __init__(
        self,
        base_url: str,
        api_key_id: str,
        api_key: str,
        api_key_type: str = API_KEY_TYPE_STANDARD,
        request_timeout_seconds: float = 30.0,
        client: httpx.Client | None = None,
        nonce_provider: Callable[[], str] | None = None,
        timestamp_ms_provider: Callable[[], int] | None = None,
    ):
        """Initialize XQL HTTP transport.

        Args:
            base_url: Tenant API base URL, e.g. `https://api-tenant.xdr.us.paloaltonetworks.com`.
            api_key_id: API key identifier sent as `x-xdr-auth-id`.
            api_key: API key secret.
            api_key_type: `standard` or `advanced`.
            request_timeout_seconds: HTTP request timeout in seconds.
            client: Optional preconfigured `httpx.Client`; one is created when omitted.
            nonce_provider: Optional nonce source for advanced key signing.
            timestamp_ms_provider: Optional epoch-millisecond source for advanced key signing.

        Raises:
            ValueError: Raised when required config values are invalid.
        """

        normalized_base_url = base_url.strip()
        normalized_api_key_id = str(api_key_id).strip()
        normalized_api_key = api_key.strip()
        normalized_api_key_type = api_key_type.strip().lower()

        if not normalized_base_url:
            raise ValueError("base_url must not be blank")
        if not normalized_api_key_id:
            raise ValueError("api_key_id must not be blank")
        if not normalized_api_key:
            raise ValueError("api_key must not be blank")
        if normalized_api_key_type not in (API_KEY_TYPE_STANDARD, API_KEY_TYPE_ADVANCED):
            raise ValueError("api_key_type must be 'standard' or 'advanced'")
        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")

        self._api_root_url = normalized_base_url.rstrip("/") + XQL_API_ROOT_PATH
        self._api_key_id = normalized_api_key_id
        self._api_key = normalized_api_key
        self._api_key_type = normalized_api_key_type
        self._nonce_provider = nonce_provider or _default_nonce_provider
        self._timestamp_ms_provider = timestamp_ms_provider or _default_timestamp_ms_provider
        self._client = client or httpx.Client(
            timeout=request_timeout_seconds,
            headers={"User-Agent": self._USER_AGENT},
        )

    def __enter__(self) -> HttpxXqlTransport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.transport_close()

    def transport_close(self) -> None:
        """Close the pooled HTTP client."""

        self._client.close()

    def transport_endpoint_url(self, endpoint: str) -> str:
        """Return the absolute URL for one XQL endpoint name."""

        return self._api_root_url + endpoint.lstrip("/")

    def transport_build_headers(self) -> dict[str, str]:
        """Build authentication and content headers for one request.

        Returns:
            dict[str, str]: Request headers.
        """

        headers = {
            "x-xdr-auth-id": self._api_key_id,
            "Content-Type": "application/json",
        }
        if self._api_key_type == API_KEY_TYPE_STANDARD:
            headers["Authorization"] = self._api_key
            return headers

        nonce = self._nonce_provider()
        timestamp_ms = str(self._timestamp_ms_provider())
        auth_key = f"{self._api_key}{nonce}{timestamp_ms}"
        headers["x-xdr-timestamp"] = timestamp_ms
        headers["x-xdr-nonce"] = nonce
        headers["Authorization"] = hashlib.sha256(auth_key.encode("utf-8")).hexdigest()
        return headers

    def transport_post(self, endpoint: str, payload: dict[str, Any]) -> TransportResponse:
        """Send one POST request and return status code and raw body.

        Args:
            endpoint: Endpoint name relative to the XQL API root.
            payload: JSON-serializable request body.

        Returns:
            TransportResponse: Status code and raw body bytes.

        Raises:
            XqlTransportTimeoutError: Raised when the request times out.
            XqlTransportConnectionError: Raised for network-level failures.
        """

        url = self.transport_endpoint_url(endpoint)
        try:
            response = self._client.post(url, json=payload, headers=self.transport_build_headers())
        except httpx.TimeoutException as error:
            raise XqlTransportTimeoutError(f"XQL request to {endpoint} timed out") from error
        except httpx.HTTPError as error:
            raise XqlTransportConnectionError(f"XQL request to {endpoint} failed: {error}") from error

        return TransportResponse(status_code=int(response.status_code), content=bytes(response.content))
