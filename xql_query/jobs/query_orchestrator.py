"""Job-layer query orchestrator composing submit, poll and stream steps."""

from __future__ import annotations

import threading
from typing import Any

from xql_query.adapters import XqlQuerySubmitter, XqlResultPoller, XqlStreamFetcher
from xql_query.domain import (
    InlineResultPayload,
    QueryRunResult,
    StreamResultPayload,
    XqlClientError,
    domain_build_stage_event,
    domain_parse_relative_time,
)

from .interfaces import QueryOrchestratorPort


class XqlQueryOrchestrator(QueryOrchestratorPort):
    """Single entry point hiding inline versus streamed results behind one record list.

    The orchestrator keeps no per-query state; every run builds its own
    request, identifier and timeline.
    """

    def __init__(
        self,
        submitter: XqlQuerySubmitter,
        poller: XqlResultPoller,
        stream_fetcher: XqlStreamFetcher,
    ):
        """Initialize query orchestrator dependencies.

        Args:
            submitter: Start-query step.
            poller: Get-results polling step.
            stream_fetcher: Large-result stream step.

        Raises:
            ValueError: Raised when dependencies are missing.
        """

        if submitter is None:
            raise ValueError("submitter must not be None")
        if poller is None:
            raise ValueError("poller must not be None")
        if stream_fetcher is None:
            raise ValueError("stream_fetcher must not be None")

        self._submitter = submitter
        self._poller = poller
        self._stream_fetcher = stream_fetcher

    def orchestrator_run_query(
        self,
        query_text: str,
        relative_time: str,
        result_limit: int,
        cancel_token: threading.Event | None = None,
    ) -> list[Any]:
        """Run one query and return its records regardless of result path."""

        return self.orchestrator_run_query_detailed(
            query_text=query_text,
            relative_time=relative_time,
            result_limit=result_limit,
            cancel_token=cancel_token,
        ).records

    def orchestrator_run_query_detailed(
        self,
        query_text: str,
        relative_time: str,
        result_limit: int,
        cancel_token: threading.Event | None = None,
    ) -> QueryRunResult:
        """Run parse, submit, poll and optional stream fetch for one query.

        Args:
            query_text: Raw XQL query text.
            relative_time: Relative time token such as `1d`, `2h` or `15m`.
            result_limit: Maximum number of inline records requested from upstream.
            cancel_token: Optional event that cancels polling once set.

        Returns:
            QueryRunResult: Query id, result source, records and stage timeline.

        Raises:
            XqlClientError: Raised with the failing stage when any protocol step fails; the
                error carries the run timeline, ending in a `failed` event, as `stage_timeline`.
            ValueError: Raised when inputs are invalid.
        """

        stage_timeline: list[dict[str, Any]] = []
        current_stage = "time_window"
        try:
            relative_time_ms = domain_parse_relative_time(relative_time)
            stage_timeline.append(
                domain_build_stage_event(
                    stage="time_window",
                    status="completed",
                    details={"relative_time": relative_time, "relative_time_ms": relative_time_ms},
                )
            )

            current_stage = "submit"
            stage_timeline.append(domain_build_stage_event(stage="submit", status="started"))
            query_id = self._submitter.submitter_submit(query_text=query_text, relative_time_ms=relative_time_ms)
            stage_timeline.append(
                domain_build_stage_event(stage="submit", status="completed", details={"query_id": query_id})
            )

            current_stage = "poll"
            stage_timeline.append(domain_build_stage_event(stage="poll", status="started"))
            payload = self._poller.poller_poll(
                query_id=query_id,
                limit=result_limit,
                cancel_token=cancel_token,
                stage_timeline=stage_timeline,
            )

            if isinstance(payload, InlineResultPayload):
                records = list(payload.records)
                stage_timeline.append(
                    domain_build_stage_event(
                        stage="poll",
                        status="completed",
                        details={"result_source": "inline", "record_count": len(records)},
                    )
                )
                return QueryRunResult(
                    query_id=query_id,
                    result_source="inline",
                    records=records,
                    stage_timeline=stage_timeline,
                )

            if not isinstance(payload, StreamResultPayload):
                raise TypeError(f"unsupported result payload type {type(payload).__name__}")

            stage_timeline.append(
                domain_build_stage_event(
                    stage="poll",
                    status="completed",
                    details={"result_source": "stream", "stream_id": payload.stream_id},
                )
            )

            current_stage = "stream"
            stage_timeline.append(domain_build_stage_event(stage="stream", status="started"))
            records = self._stream_fetcher.fetcher_fetch(stream_id=payload.stream_id)
            stage_timeline.append(
                domain_build_stage_event(stage="stream", status="completed", details={"record_count": len(records)})
            )
        except XqlClientError as error:
            stage_timeline.append(
                domain_build_stage_event(
                    stage=current_stage,
                    status="failed",
                    details={
                        "error_type": type(error).__name__,
                        "error_stage": error.stage,
                        "error_message": str(error),
                        "status_code": error.status_code,
                    },
                )
            )
            error.stage_timeline = stage_timeline
            raise

        return QueryRunResult(
            query_id=query_id,
            result_source="stream",
            records=records,
            stage_timeline=stage_timeline,
        )
