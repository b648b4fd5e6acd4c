"""Layout state: the resolved column count and who sits in which column.

UI layers take a LayoutState and physically move items into columns; they
never see a half-built state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from app.masonrygrid.layout.distribute import ColumnHeightProvider, distribute
from app.masonrygrid.layout.options import Strategy


@dataclass(frozen=True)
class LayoutState:
    column_count: int
    columns: Tuple[Tuple[Any, ...], ...]

    def __post_init__(self) -> None:
        if self.column_count < 1:
            raise ValueError("column_count must be >= 1")
        if len(self.columns) != self.column_count:
            raise ValueError(
                f"expected {self.column_count} columns, got {len(self.columns)}"
            )

    @property
    def item_counts(self) -> List[int]:
        return [len(column) for column in self.columns]

    @property
    def column_width_percent(self) -> float:
        return column_width_percent(self.column_count)

    def column_of(self, item: Any) -> int:
        for index, column in enumerate(self.columns):
            if item in column:
                return index
        raise KeyError(item)

    def as_mapping(self) -> Dict[int, List[Any]]:
        return {index: list(column) for index, column in enumerate(self.columns)}


def column_width_percent(column_count: int) -> float:
    """Share of the container width each column gets."""

    if column_count <= 0:
        raise ValueError("column_count must be > 0")
    return 100 / column_count


def build_layout(
    *,
    items: Iterable[Any],
    column_count: int,
    strategy: Strategy,
    column_height: Optional[ColumnHeightProvider] = None,
) -> LayoutState:
    """Distribute items and freeze the result."""

    assignment = distribute(list(items), column_count, strategy, column_height)
    return LayoutState(
        column_count=column_count,
        columns=tuple(tuple(assignment[index]) for index in range(column_count)),
    )
