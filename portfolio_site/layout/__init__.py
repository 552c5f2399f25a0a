"""Layout layer package for masonry placement and its event-driven controller."""

from .debounce import AsyncioTimerScheduler, Debouncer, TimerHandlePort, TimerSchedulerPort
from .masonry_controller import (
    MASONRY_MUTATION_DELAY_SECONDS,
    MASONRY_RESIZE_DELAY_SECONDS,
    LayoutPhase,
    MasonryContainerPort,
    MasonryItem,
    MasonryLayoutController,
)
from .masonry_engine import (
    MasonryBreakpoint,
    MasonryColumnConfig,
    MasonryItemInput,
    MasonryLayoutResult,
    MasonryOptions,
    MasonryPlacement,
    masonry_compute_layout,
    masonry_resolve_column_config,
)
from .measurement import ImageDimensions, ImageMeasurePort, ImageMeasurementError, PillowImageMeasureService

__all__ = [
    "AsyncioTimerScheduler",
    "Debouncer",
    "ImageDimensions",
    "ImageMeasurePort",
    "ImageMeasurementError",
    "LayoutPhase",
    "MASONRY_MUTATION_DELAY_SECONDS",
    "MASONRY_RESIZE_DELAY_SECONDS",
    "MasonryBreakpoint",
    "MasonryColumnConfig",
    "MasonryContainerPort",
    "MasonryItem",
    "MasonryItemInput",
    "MasonryLayoutController",
    "MasonryLayoutResult",
    "MasonryOptions",
    "MasonryPlacement",
    "PillowImageMeasureService",
    "TimerHandlePort",
    "TimerSchedulerPort",
    "masonry_compute_layout",
    "masonry_resolve_column_config",
]
