"""Client bootstrap wiring for startup validation and dependency assembly."""

from xql_query.adapters import (
    HttpxXqlTransport,
    XqlQuerySubmitter,
    XqlResultPoller,
    XqlStreamFetcher,
    XqlTransportPort,
)
from xql_query.config import AppSettings, config_load_settings
from xql_query.jobs import XqlQueryOrchestrator


def bootstrap_create_transport(settings: AppSettings) -> HttpxXqlTransport:
    """Build the pooled HTTP transport from validated settings.

    Args:
        settings: Validated runtime settings.

    Returns:
        HttpxXqlTransport: Transport owning one `httpx.Client`; callers close it.
    """

    return HttpxXqlTransport(
        base_url=settings.xql_base_url,
        api_key_id=settings.xql_api_key_id,
        api_key=settings.xql_api_key,
        api_key_type=settings.xql_api_key_type,
        request_timeout_seconds=settings.xql_request_timeout_seconds,
    )


def bootstrap_create_query_orchestrator(
    settings: AppSettings | None = None,
    transport: XqlTransportPort | None = None,
) -> XqlQueryOrchestrator:
    """Assemble the query orchestrator after validating startup configuration.

    Args:
        settings: Optional preloaded settings; loaded from environment when omitted.
        transport: Optional transport override; built from settings when omitted.

    Returns:
        XqlQueryOrchestrator: Fully wired orchestrator instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    resolved_transport = transport or bootstrap_create_transport(resolved_settings)
    return XqlQueryOrchestrator(
        submitter=XqlQuerySubmitter(transport=resolved_transport),
        poller=XqlResultPoller(
            transport=resolved_transport,
            poll_interval_seconds=resolved_settings.xql_poll_interval_seconds,
            max_attempts=resolved_settings.xql_poll_max_attempts,
            timeout_seconds=resolved_settings.xql_poll_timeout_seconds,
        ),
        stream_fetcher=XqlStreamFetcher(
            transport=resolved_transport,
            gzip_compressed=resolved_settings.xql_stream_gzip_compressed,
        ),
    )
