"""Tests for shortest-column-first masonry placement."""

from __future__ import annotations

import random

import pytest

from portfolio_site.layout import (
    MasonryColumnConfig,
    MasonryItemInput,
    MasonryOptions,
    masonry_compute_layout,
    masonry_resolve_column_config,
)


def _build_items(aspect_ratios: list[float | None]) -> list[MasonryItemInput]:
    """Build ordered layout inputs named `item-<index>`.

    Args:
        aspect_ratios: Ratio per item; None marks an unmeasured item.

    Returns:
        list[MasonryItemInput]: Layout inputs.
    """

    return [
        MasonryItemInput(item_id=f"item-{index}", aspect_ratio=aspect_ratio)
        for index, aspect_ratio in enumerate(aspect_ratios)
    ]


def test_masonry_compute_layout_places_items_in_shortest_column() -> None:
    """Place five cards across three columns, shortest column first.

    Returns:
        None: Assertions validate column choice and geometry.

    Raises:
        AssertionError: Raised when placements diverge.
    """

    result = masonry_compute_layout(
        items=_build_items([1.0, 2.0, 0.5, 1.0, 1.5]),
        container_width=900,
        column_config=MasonryColumnConfig(columns=3, gap=24),
    )

    assert result is not None
    assert result.column_width == pytest.approx(284)
    assert [placement.column for placement in result.placements] == [0, 1, 2, 1, 0]
    assert [placement.x for placement in result.placements] == pytest.approx([0, 308, 616, 308, 0])
    assert [placement.y for placement in result.placements] == pytest.approx([0, 0, 0, 246, 388])
    assert [placement.height for placement in result.placements] == pytest.approx(
        [364, 222, 648, 364, 284 / 1.5 + 80]
    )
    assert result.column_heights == pytest.approx([388 + 284 / 1.5 + 80 + 24, 634, 672])
    assert result.container_height == pytest.approx(max(result.column_heights) - 24)


def test_masonry_compute_layout_breaks_ties_on_lowest_column() -> None:
    """Fill equal-height columns left to right."""

    result = masonry_compute_layout(
        items=_build_items([1.0, 1.0, 1.0, 1.0]),
        container_width=1000,
        column_config=MasonryColumnConfig(columns=4, gap=0),
    )

    assert result is not None
    assert [placement.column for placement in result.placements] == [0, 1, 2, 3]
    assert all(placement.y == 0 for placement in result.placements)


@pytest.mark.parametrize(
    "width,columns,gap",
    [
        (500, 1, 24),
        (640, 2, 16),
        (900, 2, 16),
        (1024, 3, 20),
        (1300, 4, 24),
        (2000, 5, 24),
    ],
)
def test_masonry_resolve_column_config_uses_breakpoint_table(width: float, columns: int, gap: float) -> None:
    """Pick the widest breakpoint not wider than the width, else fall back.

    Args:
        width: Container width.
        columns: Expected columns.
        gap: Expected gap.

    Returns:
        None: Assertions validate column config.

    Raises:
        AssertionError: Raised when breakpoint selection diverges.
    """

    assert masonry_resolve_column_config(MasonryOptions(), container_width=width) == MasonryColumnConfig(
        columns=columns, gap=gap
    )


def test_masonry_resolve_column_config_prefers_viewport_width() -> None:
    """Select breakpoints from the viewport width when one is supplied."""

    config = masonry_resolve_column_config(MasonryOptions(), container_width=900, viewport_width=1920)

    assert config == MasonryColumnConfig(columns=5, gap=24)


def test_masonry_resolve_column_config_fallback_clamps_columns() -> None:
    """Derive columns from the minimum column width, clamped to one through max.

    Returns:
        None: Assertions validate fallback clamping.

    Raises:
        AssertionError: Raised when clamping diverges.
    """

    options = MasonryOptions(responsive={})

    assert masonry_resolve_column_config(options, container_width=100).columns == 1
    assert masonry_resolve_column_config(options, container_width=850).columns == 3
    assert masonry_resolve_column_config(options, container_width=5000).columns == 5
    assert masonry_resolve_column_config(options, container_width=850).gap == 24


def test_masonry_compute_layout_skips_without_width_or_items() -> None:
    """Skip passes with no width, no items, or only unmeasured items."""

    assert masonry_compute_layout(items=_build_items([1.0]), container_width=0) is None
    assert masonry_compute_layout(items=[], container_width=900) is None
    assert masonry_compute_layout(items=_build_items([None, None]), container_width=900) is None


def test_masonry_compute_layout_skips_when_gaps_consume_width() -> None:
    """Skip passes whose gaps leave no room for columns."""

    result = masonry_compute_layout(
        items=_build_items([1.0]),
        container_width=40,
        column_config=MasonryColumnConfig(columns=3, gap=24),
    )

    assert result is None


def test_masonry_compute_layout_leaves_out_unmeasured_items() -> None:
    """Exclude items without a ratio from the pass."""

    result = masonry_compute_layout(
        items=_build_items([1.0, None, 2.0]),
        container_width=600,
        column_config=MasonryColumnConfig(columns=2, gap=0),
    )

    assert result is not None
    assert [placement.item_id for placement in result.placements] == ["item-0", "item-2"]


def test_masonry_compute_layout_rejects_non_positive_ratio() -> None:
    """Reject zero aspect ratios."""

    with pytest.raises(ValueError):
        masonry_compute_layout(items=_build_items([1.0, 0.0]), container_width=900)


def test_masonry_compute_layout_keeps_columns_balanced() -> None:
    """Keep column accumulators within one card of each other.

    Returns:
        None: Assertions validate the balance bound for random inputs.

    Raises:
        AssertionError: Raised when a column outgrows the bound.
    """

    generator = random.Random(7)
    for columns in (1, 2, 3, 5):
        aspect_ratios = [generator.uniform(0.4, 2.5) for _ in range(40)]
        result = masonry_compute_layout(
            items=_build_items(aspect_ratios),
            container_width=1200,
            column_config=MasonryColumnConfig(columns=columns, gap=16),
        )

        assert result is not None
        largest_increment = max(placement.height + result.gap for placement in result.placements)
        assert max(result.column_heights) - min(result.column_heights) <= largest_increment + 1e-9
        for placement in result.placements:
            assert placement.x == pytest.approx(placement.column * (result.column_width + result.gap))
            assert placement.width == result.column_width


def test_masonry_compute_layout_is_deterministic_and_removal_relayouts_from_scratch() -> None:
    """Produce identical output for identical input, including after a removal.

    Returns:
        None: Assertions validate determinism.

    Raises:
        AssertionError: Raised when repeated passes diverge.
    """

    items = _build_items([1.2, 0.8, 1.6, 0.5, 2.0, 1.0])
    options = MasonryOptions()

    first_result = masonry_compute_layout(items=items, container_width=1100, options=options)
    second_result = masonry_compute_layout(items=items, container_width=1100, options=options)
    remaining_items = [item for item in items if item.item_id != "item-2"]
    after_removal = masonry_compute_layout(items=remaining_items, container_width=1100, options=options)
    fresh_layout = masonry_compute_layout(items=list(remaining_items), container_width=1100, options=options)

    assert first_result == second_result
    assert after_removal == fresh_layout
    assert "item-2" not in {placement.item_id for placement in after_removal.placements}


def test_masonry_options_reject_invalid_values() -> None:
    """Reject negative gaps and zero column bounds."""

    with pytest.raises(ValueError):
        MasonryOptions(gap=-1)
    with pytest.raises(ValueError):
        MasonryOptions(max_columns=0)
    with pytest.raises(ValueError):
        MasonryOptions(min_column_width=0)
