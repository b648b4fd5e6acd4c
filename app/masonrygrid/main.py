from __future__ import annotations

import argparse
import logging
from typing import List, Optional, Sequence

from app.masonrygrid.layout.breakpoints import parse_breakpoints, resolve_columns
from app.masonrygrid.layout.distribute import summed_heights
from app.masonrygrid.layout.options import MasonryConfig, MasonryOptions, describe
from app.masonrygrid.layout.state import LayoutState, build_layout

# Synthetic card heights (px) used for the shortest-height strategy.
DEMO_HEIGHTS = (180, 240, 120, 300, 200, 160)


def demo_items(count: int) -> List[str]:
    if count < 0:
        raise ValueError("count must be >= 0")
    return [f"item-{i}" for i in range(count)]


def demo_height(item: str) -> int:
    index = int(item.rsplit("-", 1)[1])
    return DEMO_HEIGHTS[index % len(DEMO_HEIGHTS)]


def build_config(
    breakpoints: str,
    *,
    sort_by_height: bool = False,
    horizontal_order: bool = False,
    debug: bool = False,
) -> MasonryConfig:
    return MasonryConfig(
        breakpoints=parse_breakpoints(breakpoints),
        options=MasonryOptions(
            sort_by_height=sort_by_height,
            horizontal_order=horizontal_order,
            debug=debug,
        ),
    )


def run_cli_smoke(
    config: MasonryConfig, widths: Sequence[float], item_count: int
) -> List[LayoutState]:
    """Lay out ``item_count`` demo items for each width, printing each layout.

    Like a resize, a width that resolves to the current column count keeps
    the previous layout.
    """

    items = demo_items(item_count)
    states: List[LayoutState] = []
    current: Optional[LayoutState] = None

    print(f"Masonry: {describe(config)}")
    for width in widths:
        count = resolve_columns(width, config.breakpoints, debug=config.options.debug)
        if current is not None and current.column_count == count:
            print(f"width={width:g}: {count} columns (unchanged)")
            states.append(current)
            continue

        current = build_layout(
            items=items,
            column_count=count,
            strategy=config.strategy,
            column_height=summed_heights(demo_height),
        )
        states.append(current)
        print(f"width={width:g}: {count} columns ({current.column_width_percent:.2f}% each)")
        for index, column in enumerate(current.columns):
            print(f"  [{index}] {', '.join(column) or '-'}")
    return states


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Masonry column layout smoke runner")
    parser.add_argument(
        "--breakpoints",
        default='{"default": 2}',
        help='Breakpoint table as JSON, e.g. \'{"600": 1, "900": 2, "default": 3}\'',
    )
    parser.add_argument(
        "--width",
        type=float,
        action="append",
        dest="widths",
        help="Viewport width to lay out for (repeatable)",
    )
    parser.add_argument("--items", type=int, default=12, help="Number of demo items")
    strategy = parser.add_mutually_exclusive_group()
    strategy.add_argument("--sort-by-height", action="store_true", help="Place each item in the shortest column")
    strategy.add_argument("--horizontal-order", action="store_true", help="Place each item in the column with fewest items")
    parser.add_argument("--debug", action="store_true", help="Log layout diagnostics")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = build_config(
        args.breakpoints,
        sort_by_height=args.sort_by_height,
        horizontal_order=args.horizontal_order,
        debug=args.debug,
    )
    widths = args.widths or [1024]
    run_cli_smoke(config, widths, args.items)


if __name__ == "__main__":
    main()
