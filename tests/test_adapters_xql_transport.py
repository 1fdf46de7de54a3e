"""Regression tests for the httpx-based XQL transport."""

from __future__ import annotations

import hashlib
import json

import httpx
import pytest

from xql_query.adapters import HttpxXqlTransport
from xql_query.domain import XqlTransportConnectionError, XqlTransportTimeoutError


def _build_transport(handler, **kwargs: object) -> HttpxXqlTransport:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpxXqlTransport(
        base_url="https://api-tenant.example.test/",
        api_key_id="42",
        api_key="secret-key",
        client=client,
        **kwargs,
    )


def test_adapters_xql_transport_posts_json_with_standard_headers() -> None:
    """Post JSON body to the XQL endpoint with auth-id and authorization headers.

    Returns:
        None: Assertions validate URL, headers and body.

    Raises:
        AssertionError: Raised when request composition is incorrect.
    """

    captured_requests: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        captured_requests.append(request)
        return httpx.Response(200, json={"reply": "Q1"})

    transport = _build_transport(_handler)
    response = transport.transport_post("start_xql_query/", {"request_data": {"query": "dataset = xdr_data"}})

    assert response.status_code == 200
    assert json.loads(response.content) == {"reply": "Q1"}
    request = captured_requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api-tenant.example.test/public_api/v1/xql/start_xql_query/"
    assert request.headers["x-xdr-auth-id"] == "42"
    assert request.headers["Authorization"] == "secret-key"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {"request_data": {"query": "dataset = xdr_data"}}


def test_adapters_xql_transport_returns_non_success_status_without_raising() -> None:
    """Return non-2xx responses to the caller as status code plus body.

    Returns:
        None: Assertions validate status passthrough.

    Raises:
        AssertionError: Raised when non-2xx statuses raise or lose the body.
    """

    def _handler(request: httpx.Request) -> httpx.Response:
        _ = request
        return httpx.Response(500, content=b"boom")

    transport = _build_transport(_handler)
    response = transport.transport_post("get_query_results/", {})

    assert response.status_code == 500
    assert response.content == b"boom"


def test_adapters_xql_transport_advanced_key_signs_nonce_and_timestamp() -> None:
    """Sign advanced API keys with SHA-256 over key, nonce and timestamp.

    Returns:
        None: Assertions validate advanced header composition.

    Raises:
        AssertionError: Raised when advanced signing is incorrect.
    """

    transport = _build_transport(
        lambda request: httpx.Response(200),
        api_key_type="advanced",
        nonce_provider=lambda: "n" * 64,
        timestamp_ms_provider=lambda: 1700000000000,
    )

    headers = transport.transport_build_headers()

    expected_signature = hashlib.sha256(("secret-key" + "n" * 64 + "1700000000000").encode("utf-8")).hexdigest()
    assert headers["x-xdr-nonce"] == "n" * 64
    assert headers["x-xdr-timestamp"] == "1700000000000"
    assert headers["Authorization"] == expected_signature
    assert headers["x-xdr-auth-id"] == "42"


def test_adapters_xql_transport_timeout_maps_to_typed_timeout_error() -> None:
    """Raise XqlTransportTimeoutError when httpx reports a timeout.

    Returns:
        None: Assertions validate timeout mapping.

    Raises:
        AssertionError: Raised when timeout mapping is incorrect.
    """

    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    transport = _build_transport(_handler)

    with pytest.raises(XqlTransportTimeoutError, match="timed out") as error_info:
        transport.transport_post("get_query_results/", {})
    assert isinstance(error_info.value, TimeoutError)


def test_adapters_xql_transport_connect_error_maps_to_typed_connection_error() -> None:
    """Raise XqlTransportConnectionError for network failures.

    Returns:
        None: Assertions validate connection error mapping.

    Raises:
        AssertionError: Raised when connection error mapping is incorrect.
    """

    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    transport = _build_transport(_handler)

    with pytest.raises(XqlTransportConnectionError) as error_info:
        transport.transport_post("start_xql_query/", {})
    assert isinstance(error_info.value, ConnectionError)
    assert error_info.value.stage == "transport"


@pytest.mark.parametrize(
    ("field_name", "field_value"),
    [("base_url", " "), ("api_key_id", ""), ("api_key", " "), ("api_key_type", "other"), ("request_timeout_seconds", 0)],
)
def test_adapters_xql_transport_rejects_invalid_config(field_name: str, field_value: object) -> None:
    """Reject blank credentials, unknown key types and non-positive timeouts.

    Args:
        field_name: Constructor argument under test.
        field_value: Invalid value.

    Returns:
        None: Assertions validate config validation.

    Raises:
        AssertionError: Raised when invalid config is accepted.
    """

    config: dict[str, object] = {"base_url": "https://api.example.test", "api_key_id": "1", "api_key": "key"}
    config[field_name] = field_value

    with pytest.raises(ValueError):
        HttpxXqlTransport(**config)  # type: ignore[arg-type]


def test_adapters_xql_transport_context_manager_closes_client() -> None:
    """Close the pooled client when leaving the context manager.

    Returns:
        None: Assertions validate client lifecycle.

    Raises:
        AssertionError: Raised when the client stays open.
    """

    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    with HttpxXqlTransport(base_url="https://api.example.test", api_key_id="1", api_key="key", client=client):
        assert not client.is_closed

    assert client.is_closed
