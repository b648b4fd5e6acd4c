"""Masonry configuration: placement strategy, option flags and host attributes.

UI layers build a MasonryConfig once (directly or from host markup attributes
via ``MasonryConfig.from_attributes``); the layout core only ever sees the
resulting structure.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass, field
from typing import Mapping, Optional

from app.masonrygrid.layout.breakpoints import BreakpointTable, parse_breakpoints

logger = logging.getLogger(__name__)

DEFAULT_THROTTLE_WINDOW_S = 0.2

BREAKPOINTS_ATTR = "data-breakpoint-cols"
COLUMN_CLASS_ATTR = "data-column-class"
OPTION_ATTR_PREFIX = "data-masonry-"


class Strategy(enum.Enum):
    SEQUENTIAL = "sequential"
    FEWEST_ITEMS = "fewest-items"
    SHORTEST_HEIGHT = "shortest-height"


@dataclass(frozen=True)
class MasonryOptions:
    sort_by_height: bool = False
    horizontal_order: bool = False
    debug: bool = False

    @property
    def strategy(self) -> Strategy:
        # sort_by_height is checked first and wins when both are set.
        if self.sort_by_height:
            return Strategy.SHORTEST_HEIGHT
        if self.horizontal_order:
            return Strategy.FEWEST_ITEMS
        return Strategy.SEQUENTIAL


_OPTION_FIELDS = ("sort_by_height", "horizontal_order", "debug")


def _option_name(attr_name: str) -> str:
    """``data-masonry-sort-by-height`` -> ``sort_by_height``."""

    return attr_name[len(OPTION_ATTR_PREFIX):].strip().lower().replace("-", "_")


def _parse_flag(attr_name: str, value: Optional[str]) -> bool:
    # A bare attribute (no value) counts as set.
    text = "" if value is None else str(value).strip().lower()
    if text in ("", "true"):
        return True
    if text == "false":
        return False
    raise ValueError(f"{attr_name} must be 'true' or 'false', got {value!r}")


def options_from_attributes(attrs: Mapping[str, Optional[str]]) -> MasonryOptions:
    """Read ``data-masonry-*`` flags into MasonryOptions."""

    values: dict[str, bool] = {}
    for name, value in attrs.items():
        name = name.lower()
        if not name.startswith(OPTION_ATTR_PREFIX):
            continue
        option = _option_name(name)
        if option not in _OPTION_FIELDS:
            logger.debug("Ignoring unrecognized masonry option %s", name)
            continue
        values[option] = _parse_flag(name, value)
    return MasonryOptions(**values)


@dataclass(frozen=True)
class MasonryConfig:
    """Everything a LayoutController needs, built once by the UI layer."""

    breakpoints: BreakpointTable = field(default_factory=BreakpointTable)
    options: MasonryOptions = field(default_factory=MasonryOptions)
    column_class: str = ""
    throttle_window_s: float = DEFAULT_THROTTLE_WINDOW_S

    def __post_init__(self) -> None:
        if self.throttle_window_s < 0:
            raise ValueError("throttle_window_s must be >= 0")
        if not isinstance(self.breakpoints, BreakpointTable):
            object.__setattr__(self, "breakpoints", parse_breakpoints(self.breakpoints))

    @property
    def strategy(self) -> Strategy:
        return self.options.strategy

    @classmethod
    def from_attributes(
        cls,
        attrs: Mapping[str, Optional[str]],
        *,
        throttle_window_s: float = DEFAULT_THROTTLE_WINDOW_S,
    ) -> "MasonryConfig":
        """Build a config from host element attributes.

        A missing ``data-breakpoint-cols`` is malformed input and falls back
        to the default table.
        """

        lowered = {k.lower(): v for k, v in attrs.items()}
        config = cls(
            breakpoints=parse_breakpoints(lowered.get(BREAKPOINTS_ATTR)),
            options=options_from_attributes(lowered),
            column_class=str(lowered.get(COLUMN_CLASS_ATTR) or ""),
            throttle_window_s=throttle_window_s,
        )
        if config.options.debug:
            logger.debug("Parsed breakpoints: %s", config.breakpoints.as_dict())
            logger.debug("Masonry options: %s", config.options)
        return config


def describe(config: MasonryConfig) -> str:
    return f"{config.strategy.value} strategy, breakpoints {config.breakpoints.as_dict()}"
