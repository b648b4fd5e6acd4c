"""Breakpoint tables and width -> column count resolution.

A breakpoint table maps width thresholds to column counts, plus a mandatory
``default`` used when the width exceeds every threshold.

The smallest threshold that is >= width wins (ascending scan, first match).
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Union

logger = logging.getLogger(__name__)

DEFAULT_COLUMNS = 2
DEFAULT_KEY = "default"

Number = Union[int, float]


@dataclass(frozen=True)
class BreakpointTable:
    """Width thresholds -> column counts, plus ``default``.

    Raises ValueError when a column count is not a positive int or a
    threshold is negative.
    """

    default: int = DEFAULT_COLUMNS
    thresholds: Mapping[Number, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _check_count(DEFAULT_KEY, self.default)
        for threshold, count in self.thresholds.items():
            if threshold < 0:
                raise ValueError(f"breakpoint threshold must be >= 0, got {threshold}")
            _check_count(f"breakpoint {threshold}", count)
        # Freeze a private copy so callers can't mutate the table afterwards.
        object.__setattr__(self, "thresholds", dict(self.thresholds))

    def sorted_thresholds(self) -> list[Number]:
        return sorted(self.thresholds)

    def as_dict(self) -> dict[str, int]:
        out = {_format_threshold(t): c for t, c in sorted(self.thresholds.items())}
        out[DEFAULT_KEY] = self.default
        return out


class MalformedBreakpoints(ValueError):
    """Raw breakpoint config that can't be read as a table."""


def _check_count(name: str, count: Any) -> None:
    if isinstance(count, bool) or not isinstance(count, int):
        raise ValueError(f"{name} column count must be an int, got {count!r}")
    if count <= 0:
        raise ValueError(f"{name} column count must be > 0, got {count}")


def _format_threshold(threshold: Number) -> str:
    if isinstance(threshold, float) and threshold.is_integer():
        return str(int(threshold))
    return str(threshold)


def _to_threshold(key: Any) -> Number:
    if isinstance(key, bool):
        raise MalformedBreakpoints(f"threshold key {key!r} is not a number")
    if isinstance(key, (int, float)):
        value = key
    else:
        try:
            value = float(str(key).strip())
        except ValueError:
            raise MalformedBreakpoints(f"threshold key {key!r} is not a number") from None
    # NaN never compares <= anything and would break the sort.
    if isinstance(value, float) and not math.isfinite(value):
        raise MalformedBreakpoints(f"threshold key {key!r} is not a finite number")
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _to_count(value: Any) -> Any:
    # JSON has no int/float split: accept 3.0 as 3, leave the rest to validation.
    if isinstance(value, float):
        if not math.isfinite(value):
            raise MalformedBreakpoints(f"column count {value!r} is not a finite number")
        if value.is_integer():
            return int(value)
    return value


def _reject_constant(token: str) -> Any:
    # json accepts NaN/Infinity/-Infinity; JSON proper doesn't.
    raise MalformedBreakpoints(f"invalid JSON token {token}")


def _table_from_mapping(raw: Mapping[Any, Any]) -> BreakpointTable:
    thresholds: dict[Number, int] = {}
    default: Any = None
    for key, value in raw.items():
        if key == DEFAULT_KEY:
            default = _to_count(value)
            continue
        # Later keys overwrite earlier ones that parse to the same number.
        thresholds[_to_threshold(key)] = _to_count(value)

    if default is None:
        logger.warning(
            "Breakpoint table has no %r entry; using %d columns",
            DEFAULT_KEY,
            DEFAULT_COLUMNS,
        )
        default = DEFAULT_COLUMNS
    return BreakpointTable(default=default, thresholds=thresholds)


def _decode(raw: Any) -> Any:
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    if isinstance(raw, str):
        try:
            return json.loads(raw, parse_constant=_reject_constant)
        except json.JSONDecodeError as e:
            raise MalformedBreakpoints(f"invalid JSON: {e}") from e
    return raw


FALLBACK_TABLE = BreakpointTable(default=DEFAULT_COLUMNS)


def parse_breakpoints(raw: Any) -> BreakpointTable:
    """Build a table from a JSON string, a mapping, or a bare column count.

    Input that can't be read as a table is logged and replaced with
    ``FALLBACK_TABLE``. Readable input with a non-positive column count
    raises ValueError.
    """

    if isinstance(raw, BreakpointTable):
        return raw

    try:
        decoded = _decode(raw)
        if isinstance(decoded, Mapping):
            return _table_from_mapping(decoded)
        if isinstance(decoded, (int, float)) and not isinstance(decoded, bool):
            if isinstance(decoded, float) and not math.isfinite(decoded):
                raise MalformedBreakpoints(f"column count {decoded!r} is not a finite number")
            return BreakpointTable(default=int(decoded))
        raise MalformedBreakpoints(f"expected an object or a number, got {type(decoded).__name__}")
    except MalformedBreakpoints as e:
        logger.error("Invalid breakpoint config %r (%s); falling back to %s", raw, e, FALLBACK_TABLE.as_dict())
        return FALLBACK_TABLE


def resolve_columns(width: Number, table: Any, *, debug: bool = False) -> int:
    """Resolve the column count for ``width``.

    ``table`` may be a BreakpointTable or anything parse_breakpoints accepts.
    """

    if not isinstance(table, BreakpointTable):
        table = parse_breakpoints(table)

    for threshold in table.sorted_thresholds():
        if width <= threshold:
            count = table.thresholds[threshold]
            if debug:
                logger.debug("Matched breakpoint: %spx -> %d columns", _format_threshold(threshold), count)
            return count
    return table.default
