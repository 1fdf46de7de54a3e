"""Main module entrypoint for running one XQL query from the command line.

This module validates startup configuration, runs the query and writes one
JSON record per line to stdout.
"""

import argparse
import json
import sys

from xql_query.bootstrap import bootstrap_create_query_orchestrator, bootstrap_create_transport
from xql_query.config import config_load_settings
from xql_query.domain import XqlClientError


def main(argv: list[str] | None = None) -> None:
    """Run one query with validated startup configuration.

    Args:
        argv: Optional argument list; defaults to `sys.argv[1:]`.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
        SystemExit: Raised with code 1 when the query fails.
    """

    argument_parser = argparse.ArgumentParser(description="Run one XQL query and print its records as JSON lines")
    argument_parser.add_argument("query", type=str, help="XQL query text")
    argument_parser.add_argument(
        "--relative-time",
        dest="relative_time",
        type=str,
        default=None,
        help="Relative timeframe token such as `1d`, `2h` or `15m`; defaults to XQL_DEFAULT_RELATIVE_TIME",
    )
    argument_parser.add_argument(
        "--limit",
        dest="limit",
        type=main_parse_positive_int,
        default=None,
        help="Maximum number of inline result records; defaults to XQL_DEFAULT_RESULT_LIMIT",
    )
    argument_parser.add_argument(
        "--show-timeline",
        dest="show_timeline",
        action="store_true",
        help="Print the stage timeline to stderr after the run",
    )
    parsed_arguments = argument_parser.parse_args(argv)
    if not parsed_arguments.query.strip():
        argument_parser.error("query must not be blank")

    settings = config_load_settings()
    relative_time = parsed_arguments.relative_time or settings.xql_default_relative_time
    result_limit = settings.xql_default_result_limit if parsed_arguments.limit is None else parsed_arguments.limit

    with bootstrap_create_transport(settings) as transport:
        orchestrator = bootstrap_create_query_orchestrator(settings=settings, transport=transport)
        try:
            run_result = orchestrator.orchestrator_run_query_detailed(
                query_text=parsed_arguments.query,
                relative_time=relative_time,
                result_limit=result_limit,
            )
        except XqlClientError as error:
            print(f"XQL_QUERY_FAILED stage={error.stage}: {error}", file=sys.stderr)
            if error.diagnostic_payload is not None:
                print(json.dumps(error.diagnostic_payload, default=str), file=sys.stderr)
            if parsed_arguments.show_timeline:
                main_print_stage_timeline(error.stage_timeline)
            raise SystemExit(1) from error

    for record in run_result.records:
        print(json.dumps(record))
    if parsed_arguments.show_timeline:
        main_print_stage_timeline(run_result.stage_timeline)


def main_parse_positive_int(raw_value: str) -> int:
    """Parse a positive integer command-line value."""

    try:
        parsed_value = int(raw_value)
    except ValueError as error:
        raise argparse.ArgumentTypeError(f"invalid integer value: {raw_value!r}") from error
    if parsed_value < 1:
        raise argparse.ArgumentTypeError(f"value must be >= 1, got {parsed_value}")
    return parsed_value


def main_print_stage_timeline(stage_timeline: list[dict[str, object]]) -> None:
    """Print stage timeline events to stderr, one JSON object per line."""

    for event in stage_timeline:
        print(json.dumps(event, default=str), file=sys.stderr)


if __name__ == "__main__":
    main()
