"""Adapter layer package for XQL public API integration boundaries."""

from .interfaces import TransportResponse, XqlTransportPort
from .query_submitter import XqlQuerySubmitter
from .result_poller import XqlResultPoller
from .stream_fetcher import XqlStreamFetcher, fetcher_decode_ndjson
from .xql_protocol import XQL_INLINE_RESULT_THRESHOLD, XqlQueryStatus
from .xql_transport import HttpxXqlTransport

__all__ = [
	"HttpxXqlTransport",
	"TransportResponse",
	"XQL_INLINE_RESULT_THRESHOLD",
	"XqlQueryStatus",
	"XqlQuerySubmitter",
	"XqlResultPoller",
	"XqlStreamFetcher",
	"XqlTransportPort",
	"fetcher_decode_ndjson",
]
