"""Event-driven masonry controller owning mounted items and layout passes."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Protocol

from .debounce import AsyncioTimerScheduler, Debouncer, TimerSchedulerPort
from .masonry_engine import MasonryItemInput, MasonryLayoutResult, MasonryOptions, masonry_compute_layout
from .measurement import ImageMeasurePort, ImageMeasurementError

logger = logging.getLogger(__name__)

MASONRY_RESIZE_DELAY_SECONDS = 0.15
MASONRY_MUTATION_DELAY_SECONDS = 0.01
_MASONRY_DEFAULT_ITEM_HEIGHT = 300.0


class LayoutPhase(str, Enum):
    """Controller lifecycle phases."""

    IDLE = "idle"
    MEASURING = "measuring"
    LAYING_OUT = "laying-out"


@dataclass
class MasonryItem:
    """Mounted item tracked by the controller.

    Attributes:
        item_id: Stable item identifier.
        node: Host node handle carrying the item's image.
        aspect_ratio: Measured (or fallback) width/height ratio.
        height: Rendered height from the latest pass.
    """

    item_id: str
    node: object
    aspect_ratio: float
    height: float = _MASONRY_DEFAULT_ITEM_HEIGHT


class MasonryContainerPort(Protocol):
    """Port for the host container that receives layout results."""

    def layout_container_width(self) -> float:
        """Return current container width in pixels (0 when not mounted)."""

    def layout_viewport_width(self) -> float | None:
        """Return current viewport width in pixels, or None to use the container width."""

    def layout_item_order(self) -> Sequence[str]:
        """Return item identifiers in display order."""

    def layout_apply(self, result: MasonryLayoutResult) -> None:
        """Apply item positions and the container height.

        Raises:
            RuntimeError: Raised when the host cannot apply the layout.
        """


class MasonryLayoutController:
    """Track mounted items and run debounced layout passes.

    Phases move `idle -> measuring -> laying-out -> idle`. Items join the
    layout only after their image is measured.
    """

    def __init__(
        self,
        container: MasonryContainerPort,
        measure_service: ImageMeasurePort,
        options: MasonryOptions | None = None,
        scheduler: TimerSchedulerPort | None = None,
        resize_delay_seconds: float = MASONRY_RESIZE_DELAY_SECONDS,
        mutation_delay_seconds: float = MASONRY_MUTATION_DELAY_SECONDS,
    ):
        """Initialize controller for one mounted container.

        Args:
            container: Host container port.
            measure_service: Async image measurement port.
            options: Optional layout options.
            scheduler: Optional timer scheduler; asyncio loop timers by default.
            resize_delay_seconds: Quiet period after the last resize.
            mutation_delay_seconds: Quiet period after the last item mutation.

        Raises:
            ValueError: Raised when container or measure service is missing.
        """

        if container is None:
            raise ValueError("container must not be None")
        if measure_service is None:
            raise ValueError("measure_service must not be None")
        self._container = container
        self._measure_service = measure_service
        self._options = options or MasonryOptions()
        resolved_scheduler = scheduler or AsyncioTimerScheduler()
        self._resize_debouncer = Debouncer(resize_delay_seconds, self._layout_run_scheduled_pass, resolved_scheduler)
        self._mutation_debouncer = Debouncer(mutation_delay_seconds, self._layout_run_scheduled_pass, resolved_scheduler)
        self._items: dict[str, MasonryItem] = {}
        # item id -> token of the latest in-flight measurement
        self._pending_measurements: dict[str, int] = {}
        self._measurement_tokens = itertools.count()
        self._laying_out = False
        self._last_result: MasonryLayoutResult | None = None

    @property
    def phase(self) -> LayoutPhase:
        """Return the current controller phase."""

        if self._laying_out:
            return LayoutPhase.LAYING_OUT
        if self._pending_measurements:
            return LayoutPhase.MEASURING
        return LayoutPhase.IDLE

    @property
    def is_loading(self) -> bool:
        """Return whether consumers should gate interaction."""

        return self.phase is not LayoutPhase.IDLE

    @property
    def items(self) -> Mapping[str, MasonryItem]:
        """Return a read-only view of measured items."""

        return MappingProxyType(self._items)

    @property
    def last_result(self) -> MasonryLayoutResult | None:
        """Return the result of the latest completed pass."""

        return self._last_result

    async def layout_add_item(self, node: object, item_id: str) -> MasonryItem | None:
        """Measure a node's image and add it to the layout.

        Unmeasurable images use the fallback aspect ratio. An item removed
        while its measurement is in flight is dropped. When the same id is
        added again before an earlier measurement finishes, the latest add wins.

        Args:
            node: Host node handle carrying exactly one image.
            item_id: Stable item identifier.

        Returns:
            MasonryItem | None: Tracked item, or None when removed or superseded
                mid-measurement.

        Raises:
            ValueError: Raised when item_id is blank.
        """

        normalized_item_id = (item_id or "").strip()
        if not normalized_item_id:
            raise ValueError("item_id must not be blank")

        measurement_token = next(self._measurement_tokens)
        self._pending_measurements[normalized_item_id] = measurement_token
        try:
            aspect_ratio = await self._layout_measure_aspect_ratio(node, normalized_item_id)
        finally:
            is_latest = self._pending_measurements.get(normalized_item_id) == measurement_token
            if is_latest:
                del self._pending_measurements[normalized_item_id]

        if not is_latest:
            return None

        item = MasonryItem(item_id=normalized_item_id, node=node, aspect_ratio=aspect_ratio)
        self._items[normalized_item_id] = item
        self._mutation_debouncer.trigger()
        return item

    def layout_remove_item(self, item_id: str) -> bool:
        """Remove an item and schedule a full re-layout of the rest.

        Args:
            item_id: Item identifier.

        Returns:
            bool: True when an item (or its pending measurement) was dropped.
        """

        pending_dropped = self._pending_measurements.pop(item_id, None) is not None
        removed_item = self._items.pop(item_id, None)
        if removed_item is None:
            return pending_dropped
        self._mutation_debouncer.trigger()
        return True

    def layout_recalculate(self) -> None:
        """Request a pass after the mutation delay."""

        self._mutation_debouncer.trigger()

    def layout_handle_resize(self) -> None:
        """Request a pass after the resize delay; earlier resize requests are superseded."""

        self._resize_debouncer.trigger()

    def layout_run_pass(self) -> MasonryLayoutResult | None:
        """Run one layout pass now and apply it to the container.

        Returns:
            MasonryLayoutResult | None: Applied result, or None when the pass was skipped.

        Raises:
            RuntimeError: Raised when the container fails to apply the layout.
        """

        container_width = self._container.layout_container_width()
        if not container_width or container_width <= 0 or not self._items:
            logger.debug("masonry pass skipped width=%s items=%d", container_width, len(self._items))
            return None

        self._laying_out = True
        try:
            result = masonry_compute_layout(
                items=[
                    MasonryItemInput(item_id=item.item_id, aspect_ratio=item.aspect_ratio)
                    for item in self._layout_ordered_items()
                ],
                container_width=container_width,
                options=self._options,
                viewport_width=self._container.layout_viewport_width(),
            )
            if result is None:
                return None
            self._container.layout_apply(result)
        finally:
            self._laying_out = False

        for placement in result.placements:
            self._items[placement.item_id].height = placement.height
        self._last_result = result
        return result

    def layout_close(self) -> None:
        """Cancel pending passes and discard every item (unmount)."""

        self._resize_debouncer.cancel()
        self._mutation_debouncer.cancel()
        self._items.clear()
        self._pending_measurements.clear()
        self._last_result = None

    def _layout_ordered_items(self) -> list[MasonryItem]:
        ordered_items: list[MasonryItem] = []
        seen_ids: set[str] = set()
        for item_id in self._container.layout_item_order():
            item = self._items.get(item_id)
            if item is None or item_id in seen_ids:
                continue
            seen_ids.add(item_id)
            ordered_items.append(item)
        ordered_items.extend(item for item_id, item in self._items.items() if item_id not in seen_ids)
        return ordered_items

    async def _layout_measure_aspect_ratio(self, node: object, item_id: str) -> float:
        try:
            dimensions = await self._measure_service.layout_measure_image(node)
        except ImageMeasurementError as error:
            logger.debug("masonry item %s uses fallback aspect ratio: %s", item_id, error)
            return self._options.fallback_aspect_ratio

        aspect_ratio = dimensions.aspect_ratio()
        if aspect_ratio is None:
            return self._options.fallback_aspect_ratio
        return aspect_ratio

    def _layout_run_scheduled_pass(self) -> None:
        self.layout_run_pass()


__all__ = [
    "LayoutPhase",
    "MASONRY_MUTATION_DELAY_SECONDS",
    "MASONRY_RESIZE_DELAY_SECONDS",
    "MasonryContainerPort",
    "MasonryItem",
    "MasonryLayoutController",
]
