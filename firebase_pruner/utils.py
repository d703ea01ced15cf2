from typing import Any, Iterator, List, Sequence
from datetime import datetime
import re


_TIMESTAMP_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>Z|z|[+-]\d{2}:\d{2})?$"
)


def first_set(*values: Any) -> Any:
    for value in values:
        if value is not None and value != "":
            return value
    return None


def parse_non_negative_int(value: Any, field: str) -> int:
    """Coerce a CLI/env/TOML value to an int >= 0.

    Raises ValueError with a message naming the field; callers turn it into
    a configuration error.
    """
    if isinstance(value, bool):
        raise ValueError(f"'{field}' must be a non-negative integer, got {value!r}")
    try:
        number = value if isinstance(value, int) else int(str(value).strip())
    except ValueError:
        raise ValueError(
            f"'{field}' must be a non-negative integer, got {value!r}"
        ) from None
    if number < 0:
        raise ValueError(f"'{field}' must be a non-negative integer, got {number}")
    return number


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 timestamp as returned by Google APIs.

    The service may send up to nanosecond precision; the fraction is
    truncated to microseconds. Timestamps without an offset are UTC.
    """
    match = _TIMESTAMP_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValueError(f"Invalid timestamp: {value!r}")
    fraction = (match.group("fraction") or "0")[:6].ljust(6, "0")
    offset = match.group("offset") or "Z"
    if offset in ("Z", "z"):
        offset = "+00:00"
    base = match.group("base").replace(" ", "T")
    return datetime.fromisoformat(f"{base}.{fraction}{offset}")


def chunked(items: Sequence[str], size: int) -> Iterator[List[str]]:
    if size <= 0:
        raise ValueError("chunk size must be positive")
    for i in range(0, len(items), size):
        yield list(items[i : i + size])
