"""Typed domain models shared across runtime layers.

Results of a finished query come back in one of two shapes: inline records
embedded in the get-results reply, or a stream handle pointing at the
large-result stream endpoint. Both are modelled as separate frozen
dataclasses joined by the `ResultPayload` union.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Union


@dataclass(frozen=True)
class QueryRequest:
    """Immutable start-query request contract.

    Attributes:
        query_text: Raw XQL query text.
        relative_time_ms: Relative timeframe in milliseconds.
    """

    query_text: str
    relative_time_ms: int

    def __post_init__(self) -> None:
        if not isinstance(self.query_text, str) or not self.query_text.strip():
            raise ValueError("query_text must not be blank")
        if isinstance(self.relative_time_ms, bool) or not isinstance(self.relative_time_ms, int):
            raise ValueError("relative_time_ms must be an integer")
        if self.relative_time_ms < 0:
            raise ValueError("relative_time_ms must be >= 0")

    def request_body(self) -> dict[str, Any]:
        """Return the JSON body for the start-query endpoint."""

        return {
            "request_data": {
                "query": self.query_text,
                "timeframe": {"relativeTime": self.relative_time_ms},
            }
        }


@dataclass(frozen=True)
class InlineResultPayload:
    """Result records returned inline by the get-results reply.

    Attributes:
        records: Ordered result records; empty when the query matched nothing.
    """

    records: tuple[Any, ...]


@dataclass(frozen=True)
class StreamResultPayload:
    """Stream handle returned when the result set exceeds the inline threshold.

    Attributes:
        stream_id: Opaque stream identifier for the stream endpoint.
    """

    stream_id: str


ResultPayload = Union[InlineResultPayload, StreamResultPayload]


@dataclass(frozen=True)
class QueryRunResult:
    """Detailed outcome of one orchestrated query run.

    Attributes:
        query_id: Upstream query identifier issued by the submit step.
        result_source: Which result path produced the records (`inline` or `stream`).
        records: Ordered result records.
        stage_timeline: Structured stage events captured during the run.
    """

    query_id: str
    result_source: Literal["inline", "stream"]
    records: list[Any]
    stage_timeline: list[dict[str, Any]]
