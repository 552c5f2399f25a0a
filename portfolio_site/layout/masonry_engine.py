"""Shortest-column-first masonry layout computation.

The computation is pure: given container width, options and an ordered list of
items with aspect ratios it returns placements without touching any host.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field


@dataclass(frozen=True)
class MasonryBreakpoint:
    """Column count and gap used at or above one width breakpoint."""

    columns: int
    gap: float


def _masonry_default_breakpoints() -> dict[int, MasonryBreakpoint]:
    return {
        640: MasonryBreakpoint(columns=2, gap=16),
        1024: MasonryBreakpoint(columns=3, gap=20),
        1280: MasonryBreakpoint(columns=4, gap=24),
        1920: MasonryBreakpoint(columns=5, gap=24),
    }


@dataclass(frozen=True)
class MasonryOptions:
    """Layout tuning values.

    Attributes:
        gap: Gap used by the width-based fallback, in pixels.
        min_column_width: Minimum column width for the fallback column count.
        max_columns: Upper clamp for the fallback column count.
        card_chrome_height: Fixed card content allowance added below each image.
        fallback_aspect_ratio: Ratio used when an image cannot be measured.
        responsive: Breakpoint table keyed by minimum width in pixels.
    """

    gap: float = 24
    min_column_width: float = 280
    max_columns: int = 5
    card_chrome_height: float = 80
    fallback_aspect_ratio: float = 1.5
    responsive: dict[int, MasonryBreakpoint] = field(default_factory=_masonry_default_breakpoints)

    def __post_init__(self) -> None:
        if self.gap < 0:
            raise ValueError("gap must not be negative")
        if self.min_column_width <= 0:
            raise ValueError("min_column_width must be positive")
        if self.max_columns < 1:
            raise ValueError("max_columns must be at least 1")
        if self.fallback_aspect_ratio <= 0:
            raise ValueError("fallback_aspect_ratio must be positive")
        for breakpoint_width, breakpoint in self.responsive.items():
            if breakpoint.columns < 1 or breakpoint.gap < 0:
                raise ValueError(f"invalid responsive breakpoint at {breakpoint_width}px")


@dataclass(frozen=True)
class MasonryColumnConfig:
    """Column count and gap chosen for one layout pass."""

    columns: int
    gap: float


@dataclass(frozen=True)
class MasonryItemInput:
    """One item entering a layout pass.

    Attributes:
        item_id: Stable item identifier.
        aspect_ratio: Measured width/height ratio, or None while unmeasured.
    """

    item_id: str
    aspect_ratio: float | None


@dataclass(frozen=True)
class MasonryPlacement:
    """Computed position and size for one item."""

    item_id: str
    column: int
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class MasonryLayoutResult:
    """Output of one completed layout pass.

    Attributes:
        columns: Column count used.
        gap: Gap used.
        column_width: Uniform column width.
        placements: Placements in input order.
        column_heights: Final per-column accumulators (heights plus trailing gaps).
        container_height: Height the container must take.
    """

    columns: int
    gap: float
    column_width: float
    placements: list[MasonryPlacement]
    column_heights: list[float]
    container_height: float


def masonry_resolve_column_config(
    options: MasonryOptions,
    container_width: float,
    viewport_width: float | None = None,
) -> MasonryColumnConfig:
    """Pick column count and gap for the current widths.

    Breakpoints are scanned from widest to narrowest; the first one not wider
    than the measured width wins. The measured width is the viewport width
    when given, else the container width.

    Args:
        options: Layout options with the breakpoint table.
        container_width: Container width in pixels.
        viewport_width: Optional viewport width in pixels.

    Returns:
        MasonryColumnConfig: Chosen columns and gap.
    """

    measured_width = container_width if viewport_width is None else viewport_width
    for breakpoint_width in sorted(options.responsive, reverse=True):
        if measured_width >= breakpoint_width:
            breakpoint = options.responsive[breakpoint_width]
            return MasonryColumnConfig(columns=breakpoint.columns, gap=breakpoint.gap)

    fallback_columns = math.floor(container_width / options.min_column_width)
    return MasonryColumnConfig(
        columns=min(max(1, fallback_columns), options.max_columns),
        gap=options.gap,
    )


def masonry_compute_layout(
    items: Sequence[MasonryItemInput],
    container_width: float,
    options: MasonryOptions | None = None,
    viewport_width: float | None = None,
    column_config: MasonryColumnConfig | None = None,
) -> MasonryLayoutResult | None:
    """Place items into balanced columns, shortest column first.

    Items without an aspect ratio are left out of the pass. A pass with no
    width, no usable column width or no measured items is skipped.

    Args:
        items: Items in stable display order.
        container_width: Container width in pixels.
        options: Optional layout options.
        viewport_width: Optional viewport width for breakpoint selection.
        column_config: Optional explicit column config overriding breakpoints.

    Returns:
        MasonryLayoutResult | None: Layout result, or None when skipped.

    Raises:
        ValueError: Raised when an item carries a non-positive aspect ratio.
    """

    resolved_options = options or MasonryOptions()
    if not container_width or container_width <= 0:
        return None

    measured_items = [item for item in items if item.aspect_ratio is not None]
    if not measured_items:
        return None

    config = column_config or masonry_resolve_column_config(resolved_options, container_width, viewport_width)
    column_width = (container_width - (config.columns - 1) * config.gap) / config.columns
    if column_width <= 0:
        return None

    column_heights = [0.0] * config.columns
    placements: list[MasonryPlacement] = []
    for item in measured_items:
        if item.aspect_ratio <= 0:
            raise ValueError(f"aspect_ratio must be positive for item {item.item_id}")

        # min() returns the first minimum, so ties go to the lowest column index.
        column = min(range(config.columns), key=column_heights.__getitem__)
        item_height = column_width / item.aspect_ratio + resolved_options.card_chrome_height
        placements.append(
            MasonryPlacement(
                item_id=item.item_id,
                column=column,
                x=column * (column_width + config.gap),
                y=column_heights[column],
                width=column_width,
                height=item_height,
            )
        )
        column_heights[column] += item_height + config.gap

    return MasonryLayoutResult(
        columns=config.columns,
        gap=config.gap,
        column_width=column_width,
        placements=placements,
        column_heights=column_heights,
        container_height=max(column_heights) - config.gap,
    )


__all__ = [
    "MasonryBreakpoint",
    "MasonryColumnConfig",
    "MasonryItemInput",
    "MasonryLayoutResult",
    "MasonryOptions",
    "MasonryPlacement",
    "masonry_compute_layout",
    "masonry_resolve_column_config",
]
