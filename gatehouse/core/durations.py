"""Duration notation used by refresh intervals and token lifespans."""

from __future__ import annotations

from datetime import timedelta
import re


_DURATION_RE = re.compile(r"^([0-9]+)([smhdwMy])$")
_UNIT_SECONDS = {
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 24 * 60 * 60,
    "w": 7 * 24 * 60 * 60,
    "M": 30 * 24 * 60 * 60,
    "y": 365 * 24 * 60 * 60,
}


def parse_duration_string(value: str) -> timedelta:
    """Parse ``<n><unit>`` durations such as ``5m`` or ``1y``.

    A bare integer is read as seconds. Units are case sensitive because ``m``
    (minutes) and ``M`` (months of 30 days) differ.
    """
    candidate = value.strip()
    match = _DURATION_RE.match(candidate)
    if match is not None:
        amount, unit = match.groups()
        return timedelta(seconds=int(amount) * _UNIT_SECONDS[unit])
    if candidate.isascii() and candidate.isdigit():
        return timedelta(seconds=int(candidate))
    raise ValueError(f"could not convert the input string of {value} into a duration")
