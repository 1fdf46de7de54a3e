"""Relative time-window token parsing for XQL query timeframes."""

from __future__ import annotations

import re
from typing import Final

from .errors import InvalidTimeFormatError, UnsupportedTimeUnitError

RELATIVE_TIME_PATTERN: Final[re.Pattern[str]] = re.compile(r"(\d+)([dhm])", re.ASCII)

RELATIVE_TIME_UNIT_MILLISECONDS: Final[dict[str, int]] = {
    "d": 86_400_000,
    "h": 3_600_000,
    "m": 60_000,
}


def domain_parse_relative_time(
    token: str,
    unit_milliseconds: dict[str, int] | None = None,
) -> int:
    """Convert a relative time token such as `2h` into milliseconds.

    Args:
        token: Relative time token, digits followed by exactly one unit letter.
        unit_milliseconds: Optional multiplier table override.

    Returns:
        int: Duration in milliseconds.

    Raises:
        InvalidTimeFormatError: Raised when the token does not match the pattern or its
            amount exceeds the interpreter integer-conversion digit limit.
        UnsupportedTimeUnitError: Raised when the unit has no multiplier.
    """

    match = RELATIVE_TIME_PATTERN.fullmatch(token) if isinstance(token, str) else None
    if match is None:
        raise InvalidTimeFormatError(
            f"invalid relative time token {token!r}; expected digits followed by d, h or m",
            diagnostic_payload=token,
        )

    amount_text, unit = match.groups()
    multipliers = RELATIVE_TIME_UNIT_MILLISECONDS if unit_milliseconds is None else unit_milliseconds
    if unit not in multipliers:
        raise UnsupportedTimeUnitError(f"unsupported relative time unit {unit!r}", diagnostic_payload=token)
    try:
        amount = int(amount_text)
    except ValueError as error:
        raise InvalidTimeFormatError(
            f"relative time token amount has too many digits ({len(amount_text)})",
            diagnostic_payload=token,
        ) from error
    return amount * multipliers[unit]
