"""Domain models, errors and helpers used across application layer boundaries."""

from .errors import (
    InvalidTimeFormatError,
    MalformedResponseError,
    QueryCancelledError,
    QueryFailedError,
    QueryPollFailedError,
    QueryPollTimeoutError,
    StreamDecodeError,
    StreamFetchFailedError,
    SubmitFailedError,
    UnsupportedTimeUnitError,
    XqlClientError,
    XqlTransportConnectionError,
    XqlTransportTimeoutError,
)
from .models import InlineResultPayload, QueryRequest, QueryRunResult, ResultPayload, StreamResultPayload
from .time_window import domain_parse_relative_time
from .timeline import domain_build_stage_event

__all__ = [
    "InlineResultPayload",
    "InvalidTimeFormatError",
    "MalformedResponseError",
    "QueryCancelledError",
    "QueryFailedError",
    "QueryPollFailedError",
    "QueryPollTimeoutError",
    "QueryRequest",
    "QueryRunResult",
    "ResultPayload",
    "StreamDecodeError",
    "StreamFetchFailedError",
    "StreamResultPayload",
    "SubmitFailedError",
    "UnsupportedTimeUnitError",
    "XqlClientError",
    "XqlTransportConnectionError",
    "XqlTransportTimeoutError",
    "domain_build_stage_event",
    "domain_parse_relative_time",
]
