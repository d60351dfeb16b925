"""
Query result model.

This module defines the immutable data structures that a query response
is decoded into. The TUI never looks at raw JSON; everything it renders
is derived from a QueryResult.

Purpose:
    The service answers a query with three things:
    - matches: raw events, each with a timestamp and a field mapping
    - buckets.series: per-interval aggregates, split by group
    - buckets.totals: whole-range aggregates, split by group
    These classes give that payload a fixed shape so the projection code
    can walk it without defensive dictionary lookups everywhere.

Design Decisions:
    - All types are frozen dataclasses; a result is never mutated after
      decoding
    - Values are wrapped in Scalar so that "is this a number" is decided
      once, at decode time, instead of by isinstance checks scattered
      through the renderer
    - Decoding is lenient: missing arrays become empty tuples and bad
      timestamps are kept as raw text
"""

import datetime
import json
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union


# Kinds a Scalar can carry
FLOAT = "float"
INT = "int"
STRING = "string"
OTHER = "other"


@dataclass(frozen=True)
class Scalar:
    """
    A single heterogeneous value from the wire (group value, aggregation
    value or match field).

    Attributes:
        kind: One of FLOAT, INT, STRING, OTHER.
        value: The decoded Python value.

    Example:
        >>> Scalar.from_json(3.5).as_float_or_nan()
        3.5
        >>> str(Scalar.from_json(3.0))
        '3'
    """
    kind: str
    value: Any

    @classmethod
    def from_json(cls, raw: Any, numbers_as_float: bool = False) -> "Scalar":
        """
        Wrap a decoded JSON value.

        Args:
            raw: Value as produced by json.loads.
            numbers_as_float: Treat every JSON number as FLOAT. Aggregation
                values use this because the service sends doubles, and a
                count of 3 must still be plottable.

        Returns:
            Scalar: The tagged value.
        """
        # bool is a subclass of int, so check it first
        if isinstance(raw, bool):
            return cls(OTHER, raw)
        if isinstance(raw, float):
            return cls(FLOAT, raw)
        if isinstance(raw, int):
            if numbers_as_float:
                return cls(FLOAT, float(raw))
            return cls(INT, raw)
        if isinstance(raw, str):
            return cls(STRING, raw)
        return cls(OTHER, raw)

    def is_float(self) -> bool:
        return self.kind == FLOAT

    def as_float_or_nan(self) -> float:
        """
        Return the value for finite FLOAT scalars, NaN for everything else.

        The JSON decoder accepts Infinity, which no graph can plot.
        """
        if self.is_float() and math.isfinite(self.value):
            return float(self.value)
        return math.nan

    def __str__(self) -> str:
        return format_value(self.value)


def format_float(value: float) -> str:
    """
    Format a float in its natural decimal form.

    Integral values print without a fractional part (3.0 -> "3"); the rest
    use the shortest representation that round-trips.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def format_value(value: Any) -> str:
    """
    Stringify any decoded JSON value for display.

    Floats and ints use their natural decimal form, strings pass through,
    and everything else falls back to a generic representation.
    """
    if isinstance(value, Scalar):
        return format_value(value.value)
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_float(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (list, dict)):
        return json.dumps(value, separators=(",", ":"), sort_keys=True)
    return str(value)


# RFC 3339 with an optional fractional part of any length.
# datetime.fromisoformat only accepts up to microseconds, so longer
# fractions (the service sends nanoseconds) are trimmed before parsing.
_TIMESTAMP_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<frac>\d+))?"
    r"(?P<tz>Z|[+-]\d{2}:?\d{2})?$"
)


def parse_timestamp(text: Any) -> Union[datetime.datetime, str, None]:
    """
    Parse an RFC 3339 timestamp into an aware datetime.

    Args:
        text: Timestamp text from the wire.

    Returns:
        datetime if the text parses, the original text if it doesn't,
        or None when no timestamp was sent.
    """
    if text is None:
        return None
    if not isinstance(text, str):
        return str(text)

    match = _TIMESTAMP_RE.match(text.strip())
    if not match:
        return text

    iso = match.group("base").replace(" ", "T")
    frac = match.group("frac")
    if frac:
        # Pad or trim to exactly microseconds
        iso += "." + frac[:6].ljust(6, "0")

    tz = match.group("tz")
    if tz is None or tz == "Z":
        iso += "+00:00"
    elif ":" not in tz:
        iso += tz[:3] + ":" + tz[3:]
    else:
        iso += tz

    try:
        return datetime.datetime.fromisoformat(iso)
    except ValueError:
        return text


@dataclass(frozen=True)
class Aggregation:
    """One named aggregate value (e.g. alias "count", value 42.0)."""
    alias: str
    value: Scalar


@dataclass(frozen=True)
class EntryGroup:
    """
    A group-dimension assignment and its aggregations.

    Used both for a single interval of a series and for the whole-range
    totals.

    Attributes:
        group: Mapping of group dimension name to its value.
        aggregations: Aggregations in the order the service sent them.
        id: Service-assigned group identifier (informational).
    """
    group: Dict[str, Scalar]
    aggregations: Tuple[Aggregation, ...]
    id: Optional[int] = None


@dataclass(frozen=True)
class Interval:
    """A time bucket holding zero or more entry groups."""
    groups: Tuple[EntryGroup, ...]
    start_time: Union[datetime.datetime, str, None] = None
    end_time: Union[datetime.datetime, str, None] = None


@dataclass(frozen=True)
class Buckets:
    series: Tuple[Interval, ...] = ()
    totals: Tuple[EntryGroup, ...] = ()


@dataclass(frozen=True)
class Match:
    """
    A single raw event.

    Attributes:
        time: Event timestamp (datetime, or raw text if it didn't parse).
        data: Field mapping in the order the service sent it.
        raw: The original JSON object, used for the detail pane.
    """
    time: Union[datetime.datetime, str, None]
    data: Dict[str, Scalar]
    raw: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class QueryResult:
    """
    A complete decoded query response.

    Example:
        >>> result = QueryResult.from_dict({"buckets": {"series": [], "totals": []}})
        >>> len(result.buckets.series)
        0
    """
    matches: Tuple[Match, ...] = ()
    buckets: Buckets = field(default_factory=Buckets)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "QueryResult":
        """
        Decode the tabular legacy response shape.

        Args:
            payload: The parsed JSON body of a query response.

        Returns:
            QueryResult: The decoded, immutable result.

        Raises:
            ValueError: If the payload is not a JSON object.
        """
        if not isinstance(payload, dict):
            raise ValueError("query response is not a JSON object")

        matches = tuple(
            _decode_match(obj)
            for obj in (payload.get("matches") or [])
            if isinstance(obj, dict)
        )

        buckets_obj = payload.get("buckets") or {}
        series = tuple(
            Interval(
                groups=tuple(
                    _decode_entry_group(g)
                    for g in (interval.get("groups") or [])
                    if isinstance(g, dict)
                ),
                start_time=parse_timestamp(interval.get("startTime")),
                end_time=parse_timestamp(interval.get("endTime")),
            )
            for interval in (buckets_obj.get("series") or [])
            if isinstance(interval, dict)
        )
        totals = tuple(
            _decode_entry_group(g)
            for g in (buckets_obj.get("totals") or [])
            if isinstance(g, dict)
        )

        return cls(matches=matches, buckets=Buckets(series=series, totals=totals))


def _decode_entry_group(obj: Dict[str, Any]) -> EntryGroup:
    group = {
        str(key): Scalar.from_json(value)
        for key, value in (obj.get("group") or {}).items()
    }
    aggregations = tuple(
        Aggregation(
            # The legacy format names the alias "op"
            alias=str(agg.get("op", agg.get("alias", ""))),
            value=Scalar.from_json(agg.get("value"), numbers_as_float=True),
        )
        for agg in (obj.get("aggregations") or [])
        if isinstance(agg, dict)
    )
    return EntryGroup(group=group, aggregations=aggregations, id=obj.get("id"))


def _decode_match(obj: Dict[str, Any]) -> Match:
    data = {
        str(key): Scalar.from_json(value)
        for key, value in (obj.get("data") or {}).items()
    }
    return Match(time=parse_timestamp(obj.get("_time")), data=data, raw=obj)
