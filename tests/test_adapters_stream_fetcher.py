"""Regression tests for XQL large-result stream retrieval and decoding."""

from __future__ import annotations

import gzip

import pytest

from xql_query.adapters import TransportResponse, XqlStreamFetcher, fetcher_decode_ndjson
from xql_query.domain import StreamDecodeError, StreamFetchFailedError

STREAM_ENDPOINT = "get_query_results_stream/"


def test_adapters_stream_fetcher_decodes_records_in_line_order(scripted_transport) -> None:
    """Decode each line as one record and skip the trailing empty segment.

    Args:
        scripted_transport: Scripted transport factory fixture.

    Returns:
        None: Assertions validate decode order and request body.

    Raises:
        AssertionError: Raised when stream decoding is incorrect.
    """

    transport = scripted_transport(
        {STREAM_ENDPOINT: [TransportResponse(status_code=200, content=b'{"a":1}\n{"a":2}\n')]}
    )

    records = XqlStreamFetcher(transport=transport).fetcher_fetch(stream_id="S1")

    assert records == [{"a": 1}, {"a": 2}]
    assert transport.calls == [(STREAM_ENDPOINT, {"request_data": {"stream_id": "S1", "is_gzip_compressed": False}})]


def test_adapters_stream_fetcher_bad_line_raises_decode_error_with_line_number(scripted_transport) -> None:
    """Fail the whole fetch on the first undecodable line and name it.

    Args:
        scripted_transport: Scripted transport factory fixture.

    Returns:
        None: Assertions validate strict per-line decoding.

    Raises:
        AssertionError: Raised when bad lines are dropped silently.
    """

    transport = scripted_transport(
        {STREAM_ENDPOINT: [TransportResponse(status_code=200, content=b'{"a":1}\n{bad}\n')]}
    )

    with pytest.raises(StreamDecodeError, match="line 2") as error_info:
        XqlStreamFetcher(transport=transport).fetcher_fetch(stream_id="S1")

    assert error_info.value.line_number == 2
    assert error_info.value.diagnostic_payload == "{bad}"
    assert error_info.value.stage == "stream"


def test_adapters_stream_fetcher_non_200_raises_fetch_failed_with_status(scripted_transport) -> None:
    """Raise StreamFetchFailedError carrying the HTTP status code.

    Args:
        scripted_transport: Scripted transport factory fixture.

    Returns:
        None: Assertions validate HTTP failure mapping.

    Raises:
        AssertionError: Raised when non-200 responses are decoded.
    """

    transport = scripted_transport(
        {STREAM_ENDPOINT: [TransportResponse(status_code=404, content=b'{"reply": {"err_msg": "stream expired"}}')]}
    )

    with pytest.raises(StreamFetchFailedError) as error_info:
        XqlStreamFetcher(transport=transport).fetcher_fetch(stream_id="S1")

    assert error_info.value.status_code == 404
    assert error_info.value.diagnostic_payload == {"reply": {"err_msg": "stream expired"}}


def test_adapters_stream_fetcher_gzip_mode_requests_and_decompresses(scripted_transport) -> None:
    """Request gzip streams and decompress them before decoding.

    Args:
        scripted_transport: Scripted transport factory fixture.

    Returns:
        None: Assertions validate gzip request flag and decoding.

    Raises:
        AssertionError: Raised when gzip streams are mishandled.
    """

    compressed_body = gzip.compress(b'{"a":1}\n{"a":2}\n{"a":3}')
    transport = scripted_transport({STREAM_ENDPOINT: [TransportResponse(status_code=200, content=compressed_body)]})

    records = XqlStreamFetcher(transport=transport, gzip_compressed=True).fetcher_fetch(stream_id="S1")

    assert records == [{"a": 1}, {"a": 2}, {"a": 3}]
    assert transport.calls[0][1]["request_data"]["is_gzip_compressed"] is True


def test_adapters_stream_fetcher_gzip_mode_rejects_plain_body(scripted_transport) -> None:
    """Raise StreamDecodeError when a gzip stream body is not gzip data.

    Args:
        scripted_transport: Scripted transport factory fixture.

    Returns:
        None: Assertions validate gzip failure mapping.

    Raises:
        AssertionError: Raised when corrupt gzip is accepted.
    """

    transport = scripted_transport({STREAM_ENDPOINT: [TransportResponse(status_code=200, content=b'{"a":1}\n')]})

    with pytest.raises(StreamDecodeError, match="gzip"):
        XqlStreamFetcher(transport=transport, gzip_compressed=True).fetcher_fetch(stream_id="S1")


def test_adapters_stream_fetcher_rejects_blank_stream_id(scripted_transport) -> None:
    """Reject blank stream ids without calling upstream.

    Args:
        scripted_transport: Scripted transport factory fixture.

    Returns:
        None: Assertions validate input checks.

    Raises:
        AssertionError: Raised when blank ids are sent.
    """

    transport = scripted_transport({})

    with pytest.raises(ValueError):
        XqlStreamFetcher(transport=transport).fetcher_fetch(stream_id=" ")
    assert transport.calls == []


def test_adapters_stream_decode_skips_blank_and_crlf_lines() -> None:
    """Skip blank lines anywhere in the body and tolerate CRLF endings.

    Returns:
        None: Assertions validate blank-line handling.

    Raises:
        AssertionError: Raised when blank lines break decoding.
    """

    assert fetcher_decode_ndjson(b'{"a":1}\r\n\r\n{"a":2}\r\n') == [{"a": 1}, {"a": 2}]
    assert fetcher_decode_ndjson(b"") == []
    assert fetcher_decode_ndjson(b"\n\n") == []


def test_adapters_stream_decode_invalid_utf8_raises_decode_error() -> None:
    """Raise StreamDecodeError when the body is not UTF-8.

    Returns:
        None: Assertions validate encoding failure mapping.

    Raises:
        AssertionError: Raised when invalid bytes are accepted.
    """

    with pytest.raises(StreamDecodeError, match="UTF-8") as error_info:
        fetcher_decode_ndjson(b'{"a":"\xff"}\n')
    assert error_info.value.line_number is None
