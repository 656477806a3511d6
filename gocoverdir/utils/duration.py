"""
Go duration strings.

`go test -timeout` takes a Go duration ("3s", "1m30s", "250ms"). The tool
accepts the same syntax on its own command line and hands the value back to
the runner in Go's canonical form.
"""

import re
from decimal import Decimal

NANOS_PER_SECOND = 1_000_000_000

_UNITS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # micro sign
    "μs": 1_000,  # greek mu
    "ms": 1_000_000,
    "s": NANOS_PER_SECOND,
    "m": 60 * NANOS_PER_SECOND,
    "h": 3600 * NANOS_PER_SECOND,
}

_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(text: str) -> float:
    """
    Parse a Go duration string.

    Args:
        text: Duration such as "3s", "1m30s", "-1.5h" or "0"

    Returns:
        The duration in seconds

    Raises:
        ValueError: If the text is not a valid Go duration
    """
    value = text
    sign = 1
    if value and value[0] in "+-":
        if value[0] == "-":
            sign = -1
        value = value[1:]

    if value == "0":
        return 0.0
    if not value:
        raise ValueError(f"invalid duration {text!r}")

    nanos = Decimal(0)
    pos = 0
    while pos < len(value):
        match = _COMPONENT.match(value, pos)
        if not match:
            raise ValueError(f"invalid duration {text!r}")
        nanos += Decimal(match.group(1)) * _UNITS[match.group(2)]
        pos = match.end()

    return sign * float(nanos / NANOS_PER_SECOND)


def _format_fraction(value: int, unit_size: int) -> str:
    whole, frac = divmod(value, unit_size)
    if not frac:
        return str(whole)
    digits = len(str(unit_size)) - 1
    return f"{whole}.{frac:0{digits}d}".rstrip("0")


def format_duration(seconds: float) -> str:
    """Format seconds the way Go's time.Duration.String does, e.g. "1m30s"."""
    nanos = round(seconds * NANOS_PER_SECOND)
    if nanos == 0:
        return "0s"

    sign = "-" if nanos < 0 else ""
    nanos = abs(nanos)

    if nanos < NANOS_PER_SECOND:
        for unit, size in (("ms", 1_000_000), ("µs", 1_000), ("ns", 1)):
            if nanos >= size:
                return sign + _format_fraction(nanos, size) + unit

    hours, rest = divmod(nanos, 3600 * NANOS_PER_SECOND)
    minutes, rest = divmod(rest, 60 * NANOS_PER_SECOND)
    text = _format_fraction(rest, NANOS_PER_SECOND) + "s"
    if hours or minutes:
        text = f"{minutes}m{text}"
    if hours:
        text = f"{hours}h{text}"
    return sign + text
