"""Assign an ordered item list to columns.

This module is intentionally UI-framework agnostic: items are opaque, and the
only rendering-time input (column height) comes in through a callback.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, TypeVar

from app.masonrygrid.layout.options import Strategy

T = TypeVar("T")

# Given the items currently in a column, return the column's height.
ColumnHeightProvider = Callable[[Sequence[T]], float]


def summed_heights(item_height: Callable[[T], float]) -> ColumnHeightProvider:
    """Column height provider that adds up a per-item height."""

    def column_height(column: Sequence[T]) -> float:
        return sum(item_height(item) for item in column)

    return column_height


def _check_column_count(column_count: int) -> None:
    if isinstance(column_count, bool) or not isinstance(column_count, int):
        raise ValueError(f"column_count must be an int, got {column_count!r}")
    if column_count < 1:
        raise ValueError(f"column_count must be >= 1, got {column_count}")


def _lowest(values: Sequence[float]) -> int:
    # Stable: choose lowest index on ties.
    return min(range(len(values)), key=lambda c: values[c])


def distribute(
    items: Sequence[T],
    column_count: int,
    strategy: Strategy,
    column_height: Optional[ColumnHeightProvider] = None,
) -> Dict[int, List[T]]:
    """Distribute ``items`` over ``column_count`` columns.

    - SEQUENTIAL: item i goes to column i % column_count.
    - FEWEST_ITEMS: each item goes to the column holding the fewest items.
    - SHORTEST_HEIGHT: each item goes to the column whose
      ``column_height(items_in_column)`` is smallest.

    Ties go to the lowest column index. Every call rebuilds from scratch;
    an empty item list yields ``column_count`` empty columns.
    """

    _check_column_count(column_count)
    if strategy is Strategy.SHORTEST_HEIGHT and column_height is None:
        raise ValueError("shortest-height strategy needs a column_height provider")

    columns: List[List[T]] = [[] for _ in range(column_count)]

    if strategy is Strategy.SEQUENTIAL:
        for index, item in enumerate(items):
            columns[index % column_count].append(item)

    elif strategy is Strategy.FEWEST_ITEMS:
        counts = [0] * column_count
        for item in items:
            col = _lowest(counts)
            columns[col].append(item)
            counts[col] += 1

    elif strategy is Strategy.SHORTEST_HEIGHT:
        heights = [column_height(column) for column in columns]
        for item in items:
            col = _lowest(heights)
            columns[col].append(item)
            # Only the column we just extended can have changed.
            heights[col] = column_height(columns[col])

    else:
        raise ValueError(f"unknown strategy: {strategy!r}")

    return {index: column for index, column in enumerate(columns)}
