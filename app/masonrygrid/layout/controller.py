"""LayoutController: keeps a column layout in step with the available width.

The controller owns the breakpoint table and the placement strategy. Width
signals go through a Throttle; a signal only triggers a redistribution when
the resolved column count actually changes.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Iterable, Optional

from app.masonrygrid.layout.breakpoints import resolve_columns
from app.masonrygrid.layout.distribute import ColumnHeightProvider
from app.masonrygrid.layout.options import MasonryConfig, Strategy
from app.masonrygrid.layout.state import LayoutState, build_layout
from app.masonrygrid.layout.throttle import Schedule, Throttle

logger = logging.getLogger(__name__)

WidthCallback = Callable[[float], None]
# subscribe(callback) registers a width listener and returns its unsubscribe.
Subscribe = Callable[[WidthCallback], Callable[[], None]]


class LayoutController:
    def __init__(
        self,
        items: Iterable[Any],
        config: MasonryConfig,
        render: Callable[[LayoutState], None],
        *,
        schedule: Schedule,
        column_height: Optional[ColumnHeightProvider] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._items = tuple(items)
        self._config = config
        self._strategy = config.strategy
        if self._strategy is Strategy.SHORTEST_HEIGHT and column_height is None:
            raise ValueError("sort_by_height needs a column_height provider")

        self._render = render
        self._column_height = column_height
        self._throttle = Throttle(self.handle_width, config.throttle_window_s, schedule, clock)

        self._state: Optional[LayoutState] = None
        self._initialized = False
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._closed = False

    @property
    def state(self) -> Optional[LayoutState]:
        return self._state

    @property
    def column_count(self) -> Optional[int]:
        return self._state.column_count if self._state else None

    @property
    def strategy(self) -> Strategy:
        return self._strategy

    @property
    def initialized(self) -> bool:
        """False until the first layout is rendered, and while rebuilding."""

        return self._initialized

    @property
    def debug(self) -> bool:
        return self._config.options.debug

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("LayoutController is closed")

    def _resolve(self, width: float) -> int:
        return resolve_columns(width, self._config.breakpoints, debug=self.debug)

    def _rebuild(self, column_count: int) -> LayoutState:
        self._initialized = False
        state = build_layout(
            items=self._items,
            column_count=column_count,
            strategy=self._strategy,
            column_height=self._column_height,
        )
        self._render(state)
        # Only a rendered layout counts; a failed render is retried next width.
        self._state = state
        self._initialized = True
        return state

    def start(self, width: float) -> LayoutState:
        """Build and render the initial layout for ``width``."""

        self._check_open()
        if self.debug:
            logger.debug("Parsed breakpoints: %s", self._config.breakpoints.as_dict())
            logger.debug("Masonry options: %s", self._config.options)
        return self._rebuild(self._resolve(width))

    def handle_width(self, width: float) -> bool:
        """Re-evaluate for ``width`` now. Returns True if items were redistributed."""

        self._check_open()
        if self._state is None:
            self.start(width)
            return True

        new_count = self._resolve(width)
        if new_count == self._state.column_count:
            return False

        if self.debug:
            logger.debug(
                "Resizing: changing column count from %d to %d",
                self._state.column_count,
                new_count,
            )
        self._rebuild(new_count)
        return True

    def on_width_changed(self, width: float) -> None:
        """Rate-limited entry point for width signals."""

        if self._closed:
            return
        self._throttle(width)

    def attach(self, subscribe: Subscribe) -> None:
        """Listen to a width source until close()."""

        self._check_open()
        if self._unsubscribe is not None:
            raise RuntimeError("LayoutController is already attached to a width source")
        self._unsubscribe = subscribe(self.on_width_changed)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._throttle.cancel()
        if self._unsubscribe is not None:
            unsubscribe, self._unsubscribe = self._unsubscribe, None
            unsubscribe()

    def __enter__(self) -> "LayoutController":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
