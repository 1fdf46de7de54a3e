"""Large-result stream step of the XQL request/poll/fetch protocol."""

from __future__ import annotations

import gzip
import json
import zlib
from typing import Any

from xql_query.domain import StreamDecodeError, StreamFetchFailedError

from .interfaces import XqlTransportPort
from .xql_protocol import (
    XQL_GET_RESULTS_STREAM_ENDPOINT,
    XQL_SUCCESS_HTTP_STATUS,
    xql_body_preview,
    xql_diagnostic_payload,
)


class XqlStreamFetcher:
    """Download and decode newline-delimited JSON result streams."""

    def __init__(self, transport: XqlTransportPort, gzip_compressed: bool = False):
        """Initialize stream fetcher.

        Args:
            transport: XQL transport implementation.
            gzip_compressed: Ask upstream for a gzip-compressed stream body.
        """

        if transport is None:
            raise ValueError("transport must not be None")
        self._transport = transport
        self._gzip_compressed = bool(gzip_compressed)

    def fetcher_fetch(self, stream_id: str) -> list[Any]:
        """Fetch one result stream and decode it into records.

        Args:
            stream_id: Stream identifier from a successful get-results reply.

        Returns:
            list[Any]: Decoded records in stream line order.

        Raises:
            ValueError: Raised when stream id is blank.
            StreamFetchFailedError: Raised when upstream answers with any status other than 200.
            StreamDecodeError: Raised when the body or any line cannot be decoded.
        """

        if not isinstance(stream_id, str) or not stream_id.strip():
            raise ValueError("stream_id must not be blank")

        response = self._transport.transport_post(
            XQL_GET_RESULTS_STREAM_ENDPOINT,
            {"request_data": {"stream_id": stream_id, "is_gzip_compressed": self._gzip_compressed}},
        )
        if response.status_code != XQL_SUCCESS_HTTP_STATUS:
            raise StreamFetchFailedError(
                f"XQL result stream fetch failed: HTTP {response.status_code}",
                status_code=response.status_code,
                diagnostic_payload=xql_diagnostic_payload(response.content),
            )

        payload = response.content
        if self._gzip_compressed:
            payload = self._fetcher_decompress(payload)
        return fetcher_decode_ndjson(payload)

    def _fetcher_decompress(self, payload: bytes) -> bytes:
        try:
            return gzip.decompress(payload)
        except (OSError, EOFError, zlib.error) as error:
            raise StreamDecodeError(
                "XQL result stream is not valid gzip data",
                diagnostic_payload=xql_body_preview(payload, limit=64),
            ) from error


def fetcher_decode_ndjson(payload: bytes) -> list[Any]:
    """Decode a newline-delimited JSON body strictly, one record per non-blank line.

    Args:
        payload: Raw UTF-8 stream body.

    Returns:
        list[Any]: Decoded records in line order.

    Raises:
        StreamDecodeError: Raised on invalid UTF-8 or on the first line that is not valid JSON.
    """

    try:
        text = payload.decode("utf-8")
    except UnicodeDecodeError as error:
        raise StreamDecodeError(
            "XQL result stream is not valid UTF-8",
            diagnostic_payload=xql_body_preview(payload),
        ) from error

    records: list[Any] = []
    for line_number, line in enumerate(text.split("\n"), start=1):
        if not line.strip():
            continue
        try:
            records.append(json.loads(line))
        except json.JSONDecodeError as error:
            raise StreamDecodeError(
                f"XQL result stream line {line_number} is not valid JSON: {error.msg}",
                line_number=line_number,
                diagnostic_payload=line[:2048],
            ) from error
    return records
