"""
Value Parsing

Best-effort numeric and date parsing for raw cell values.
Returns None for anything that cannot be parsed; never coerces to zero.
"""

import math
import re
from datetime import date, datetime, timezone
from typing import Any, Optional, Sequence

import polars as pl

from core.models import ColumnDescriptor, SemanticType

# Everything except digits, sign, decimal point and exponent marker
_NON_NUMERIC_CHARS = re.compile(r"[^0-9eE+\-.]")
_LEADING_FLOAT = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# Text columns with these fragments in their name are treated as time axes
TEMPORAL_NAME_PATTERN = re.compile(r"date|time|created|updated|timestamp", re.IGNORECASE)

# Tried first; offsets are converted to UTC
ISO_FORMATS = (
    "%Y-%m-%dT%H:%M:%S%.f%z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%d %H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S%.f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%d",
)

DATE_FORMATS = (
    "%m/%d/%Y",       # 01/15/2024
    "%d/%m/%Y",       # 15/01/2024
    "%Y/%m/%d",       # 2024/01/15
    "%m-%d-%Y",       # 01-15-2024
    "%d-%m-%Y",       # 15-01-2024
    "%B %d, %Y",      # January 15, 2024
    "%b %d, %Y",      # Jan 15, 2024
    "%d %B %Y",       # 15 January 2024
    "%d %b %Y",       # 15 Jan 2024
)


def parse_numeric(value: Any) -> Optional[float]:
    """
    Parse a cell value as a finite float.

    Native numbers pass through (booleans are rejected). Strings are
    stripped down to numeric characters and the longest leading float
    is used, so "$1,234.50" parses as 1234.5 and "N/A" as None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        match = _LEADING_FLOAT.match(_NON_NUMERIC_CHARS.sub("", value))
        if match is None:
            return None
        number = float(match.group(0))
    else:
        return None
    return number if math.isfinite(number) else None


def _naive_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def _parse_native_date(value: Any) -> Optional[datetime]:
    """datetime/date objects and epoch milliseconds."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc).replace(tzinfo=None)
        except (OverflowError, OSError, ValueError):
            return None
    return None


def _parse_date_strings(texts: list[str]) -> list[Optional[datetime]]:
    """
    Parse date strings with polars, trying each known format in turn.

    The first format that parses a value wins, so ambiguous day/month
    strings resolve month-first.
    """
    df = pl.DataFrame({"raw": texts}, schema={"raw": pl.Utf8})
    cleaned = pl.col("raw").str.strip_chars().str.replace(r"[Zz]$", "+00:00")

    candidates = []
    for fmt in ISO_FORMATS + DATE_FORMATS:
        parsed = cleaned.str.to_datetime(fmt, strict=False, time_unit="us")
        if "%z" in fmt:
            parsed = parsed.dt.convert_time_zone("UTC").dt.replace_time_zone(None)
        candidates.append(parsed)

    return df.select(pl.coalesce(candidates).alias("parsed"))["parsed"].to_list()


def parse_dates(values: Sequence[Any]) -> list[Optional[datetime]]:
    """
    Parse a column of cell values as datetimes.

    Accepts datetime/date objects, epoch milliseconds, ISO-8601 strings
    and a set of common day/month/year formats. Timezone-aware values are
    normalised to naive UTC so all parsed values are comparable.
    """
    results: list[Optional[datetime]] = [None] * len(values)
    text_positions = []
    texts = []
    for i, value in enumerate(values):
        if isinstance(value, str):
            text_positions.append(i)
            texts.append(value)
        else:
            results[i] = _parse_native_date(value)

    if texts:
        for i, parsed in zip(text_positions, _parse_date_strings(texts)):
            results[i] = parsed
    return results


def parse_date(value: Any) -> Optional[datetime]:
    """Parse a single cell value; see ``parse_dates``."""
    return parse_dates([value])[0]


def format_date_label(dt: datetime) -> str:
    """Short month/day/year label used on chart axes."""
    return f"{dt.month}/{dt.day}/{dt.year}"


def is_temporal_column(column: Optional[ColumnDescriptor]) -> bool:
    """Temporal columns, plus text columns whose name looks like a timestamp."""
    if column is None:
        return False
    if column.semantic_type == SemanticType.TEMPORAL:
        return True
    return (
        column.semantic_type == SemanticType.TEXT
        and TEMPORAL_NAME_PATTERN.search(column.name) is not None
    )
