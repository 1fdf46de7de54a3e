"""Typed interfaces for job-layer orchestration responsibilities."""

from __future__ import annotations

import threading
from typing import Any, Protocol

from xql_query.domain import QueryRunResult


class QueryOrchestratorPort(Protocol):
    """Port definition for the end-to-end submit, wait and fetch flow."""

    def orchestrator_run_query(
        self,
        query_text: str,
        relative_time: str,
        result_limit: int,
        cancel_token: threading.Event | None = None,
    ) -> list[Any]:
        """Run one query and return its records regardless of result path.

        Args:
            query_text: Raw XQL query text.
            relative_time: Relative time token such as `1d`, `2h` or `15m`.
            result_limit: Maximum number of inline records requested from upstream.
            cancel_token: Optional event that cancels polling once set.

        Returns:
            list[Any]: Ordered result records.

        Raises:
            XqlClientError: Raised with the failing stage when any protocol step fails.
        """

    def orchestrator_run_query_detailed(
        self,
        query_text: str,
        relative_time: str,
        result_limit: int,
        cancel_token: threading.Event | None = None,
    ) -> QueryRunResult:
        """Run one query and return records together with run diagnostics.

        Returns:
            QueryRunResult: Query id, result source, records and stage timeline.

        Raises:
            XqlClientError: Raised with the failing stage when any protocol step fails.
        """
