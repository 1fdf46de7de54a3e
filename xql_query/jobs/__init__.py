"""Job-layer orchestration package for end-to-end query runs."""

from .interfaces import QueryOrchestratorPort
from .query_orchestrator import XqlQueryOrchestrator

__all__ = ["QueryOrchestratorPort", "XqlQueryOrchestrator"]
