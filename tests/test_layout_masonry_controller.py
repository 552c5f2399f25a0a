"""Tests for the masonry controller lifecycle and debounced layout passes."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import pytest

from portfolio_site.layout import (
    MASONRY_MUTATION_DELAY_SECONDS,
    MASONRY_RESIZE_DELAY_SECONDS,
    AsyncioTimerScheduler,
    Debouncer,
    ImageDimensions,
    ImageMeasurementError,
    LayoutPhase,
    MasonryItemInput,
    MasonryLayoutController,
    MasonryLayoutResult,
    masonry_compute_layout,
)


class _ManualTimerHandle:
    """Timer handle fired explicitly by the test."""

    def __init__(self, delay_seconds: float, callback: Callable[[], None]):
        """Initialize handle state.

        Args:
            delay_seconds: Requested delay.
            callback: Scheduled callback.
        """

        self.delay_seconds = delay_seconds
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        """Mark the timer as cancelled."""

        self.cancelled = True


class _ManualScheduler:
    """Scheduler collecting timers until the test runs them."""

    def __init__(self):
        """Initialize empty timer list."""

        self.handles: list[_ManualTimerHandle] = []

    def timer_schedule(self, delay_seconds: float, callback: Callable[[], None]) -> _ManualTimerHandle:
        """Record one timer.

        Args:
            delay_seconds: Requested delay.
            callback: Scheduled callback.

        Returns:
            _ManualTimerHandle: Recorded handle.
        """

        handle = _ManualTimerHandle(delay_seconds=delay_seconds, callback=callback)
        self.handles.append(handle)
        return handle

    def pending_handles(self) -> list[_ManualTimerHandle]:
        """Return timers neither cancelled nor fired."""

        return [handle for handle in self.handles if not handle.cancelled and not handle.fired]

    def run_pending(self) -> int:
        """Fire every live timer once.

        Returns:
            int: Number of callbacks fired.
        """

        live_handles = self.pending_handles()
        for handle in live_handles:
            handle.fired = True
            handle.callback()
        return len(live_handles)


class _DictMeasureService:
    """Measurement stub resolving dimensions from a node-keyed mapping."""

    def __init__(self, dimensions_by_node: dict[str, ImageDimensions], gate: asyncio.Event | None = None):
        """Initialize stub state.

        Args:
            dimensions_by_node: Dimensions per node; missing nodes fail measurement.
            gate: Optional event awaited before answering.
        """

        self._dimensions_by_node = dimensions_by_node
        self._gate = gate

    async def layout_measure_image(self, node: object) -> ImageDimensions:
        """Return canned dimensions for a node.

        Args:
            node: Node key.

        Returns:
            ImageDimensions: Canned dimensions.

        Raises:
            ImageMeasurementError: Raised for unknown nodes.
        """

        if self._gate is not None:
            await self._gate.wait()
        dimensions = self._dimensions_by_node.get(node)
        if dimensions is None:
            raise ImageMeasurementError(f"no image for {node}")
        return dimensions


class _ContainerStub:
    """Host container stub recording applied layouts."""

    def __init__(self, width: float = 900, viewport_width: float | None = None, fail: bool = False):
        """Initialize container state.

        Args:
            width: Container width.
            viewport_width: Optional viewport width.
            fail: Whether apply raises.
        """

        self.width = width
        self.viewport_width = viewport_width
        self.order: list[str] = []
        self.applied: list[MasonryLayoutResult] = []
        self._fail = fail

    def layout_container_width(self) -> float:
        """Return container width."""

        return self.width

    def layout_viewport_width(self) -> float | None:
        """Return viewport width."""

        return self.viewport_width

    def layout_item_order(self) -> list[str]:
        """Return display order."""

        return self.order

    def layout_apply(self, result: MasonryLayoutResult) -> None:
        """Record or reject one layout.

        Args:
            result: Layout result.

        Raises:
            RuntimeError: Raised when configured to fail.
        """

        if self._fail:
            raise RuntimeError("container detached")
        self.applied.append(result)


_DIMENSIONS = {
    "wide.jpg": ImageDimensions(width=800, height=400),
    "square.jpg": ImageDimensions(width=500, height=500),
    "tall.jpg": ImageDimensions(width=300, height=600),
    "empty.jpg": ImageDimensions(width=0, height=0),
}


class _NodeGatedMeasureService:
    """Measurement stub answering each node only once its gate is released."""

    def __init__(self, gates_by_node: dict[str, asyncio.Event]):
        """Initialize per-node gates.

        Args:
            gates_by_node: Event awaited before measuring each node.
        """

        self._gates_by_node = gates_by_node

    async def layout_measure_image(self, node: object) -> ImageDimensions:
        """Wait for the node's gate and return its canned dimensions.

        Args:
            node: Node key.

        Returns:
            ImageDimensions: Canned dimensions.
        """

        await self._gates_by_node[node].wait()
        return _DIMENSIONS[node]


def _build_controller(
    container: _ContainerStub | None = None,
    measure_service: _DictMeasureService | None = None,
) -> tuple[MasonryLayoutController, _ContainerStub, _ManualScheduler]:
    """Build a controller wired to manual timers.

    Args:
        container: Optional container stub.
        measure_service: Optional measurement stub.

    Returns:
        tuple: Controller, container stub and scheduler.
    """

    resolved_container = container or _ContainerStub()
    scheduler = _ManualScheduler()
    controller = MasonryLayoutController(
        container=resolved_container,
        measure_service=measure_service or _DictMeasureService(_DIMENSIONS),
        scheduler=scheduler,
    )
    return controller, resolved_container, scheduler


def test_layout_add_item_measures_and_schedules_mutation_pass() -> None:
    """Measure an added item and lay out after the mutation delay.

    Returns:
        None: Assertions validate measurement and scheduling.

    Raises:
        AssertionError: Raised when the pass is not scheduled or applied.
    """

    controller, container, scheduler = _build_controller()
    container.order = ["a", "b"]

    async def _scenario() -> None:
        await controller.layout_add_item("wide.jpg", "a")
        await controller.layout_add_item("tall.jpg", "b")

    asyncio.run(_scenario())

    assert controller.items["a"].aspect_ratio == 2.0
    assert controller.items["b"].aspect_ratio == 0.5
    assert container.applied == []
    assert [handle.delay_seconds for handle in scheduler.pending_handles()] == [MASONRY_MUTATION_DELAY_SECONDS]

    assert scheduler.run_pending() == 1

    assert len(container.applied) == 1
    assert [placement.item_id for placement in container.applied[0].placements] == ["a", "b"]
    assert controller.items["a"].height == container.applied[0].placements[0].height
    assert controller.last_result is container.applied[0]


def test_layout_add_item_uses_fallback_ratio_for_unmeasurable_images() -> None:
    """Fall back to the default ratio for failed or zero-sized images."""

    controller, _, _ = _build_controller()

    async def _scenario() -> None:
        await controller.layout_add_item("missing.jpg", "missing")
        await controller.layout_add_item("empty.jpg", "empty")

    asyncio.run(_scenario())

    assert controller.items["missing"].aspect_ratio == 1.5
    assert controller.items["empty"].aspect_ratio == 1.5


def test_layout_add_item_rejects_blank_id() -> None:
    """Reject blank item identifiers."""

    controller, _, _ = _build_controller()

    with pytest.raises(ValueError):
        asyncio.run(controller.layout_add_item("wide.jpg", "  "))


def test_layout_phase_reports_measuring_while_images_load() -> None:
    """Report the measuring phase and loading flag during measurement.

    Returns:
        None: Assertions validate phase transitions.

    Raises:
        AssertionError: Raised when phases diverge.
    """

    observed_phases: list[tuple[LayoutPhase, bool]] = []

    async def _scenario() -> None:
        gate = asyncio.Event()
        controller, _, _ = _build_controller(measure_service=_DictMeasureService(_DIMENSIONS, gate=gate))
        observed_phases.append((controller.phase, controller.is_loading))
        add_task = asyncio.create_task(controller.layout_add_item("wide.jpg", "a"))
        await asyncio.sleep(0)
        observed_phases.append((controller.phase, controller.is_loading))
        gate.set()
        await add_task
        observed_phases.append((controller.phase, controller.is_loading))

    asyncio.run(_scenario())

    assert observed_phases == [
        (LayoutPhase.IDLE, False),
        (LayoutPhase.MEASURING, True),
        (LayoutPhase.IDLE, False),
    ]


def test_layout_remove_item_during_measurement_drops_item() -> None:
    """Drop items removed while their measurement is in flight."""

    results: list[object] = []

    async def _scenario() -> None:
        gate = asyncio.Event()
        controller, _, _ = _build_controller(measure_service=_DictMeasureService(_DIMENSIONS, gate=gate))
        add_task = asyncio.create_task(controller.layout_add_item("wide.jpg", "a"))
        await asyncio.sleep(0)
        results.append(controller.layout_remove_item("a"))
        gate.set()
        results.append(await add_task)
        results.append(dict(controller.items))

    asyncio.run(_scenario())

    assert results == [True, None, {}]



def test_layout_add_item_overlapping_adds_keep_latest_node() -> None:
    """Keep the most recent add when one id is added twice during measurement.

    Returns:
        None: Assertions validate that the re-added node survives.

    Raises:
        AssertionError: Raised when the latest add is dropped.
    """

    results: list[object] = []

    async def _scenario() -> None:
        gates = {"wide.jpg": asyncio.Event(), "tall.jpg": asyncio.Event()}
        controller, _, _ = _build_controller(measure_service=_NodeGatedMeasureService(gates))
        first_add = asyncio.create_task(controller.layout_add_item("wide.jpg", "card-1"))
        second_add = asyncio.create_task(controller.layout_add_item("tall.jpg", "card-1"))
        await asyncio.sleep(0)
        gates["wide.jpg"].set()
        results.append(await first_add)
        results.append(controller.phase)
        gates["tall.jpg"].set()
        second_item = await second_add
        results.append((second_item.node, second_item.aspect_ratio))
        results.append((controller.items["card-1"].node, controller.phase))

    asyncio.run(_scenario())

    assert results == [
        None,
        LayoutPhase.MEASURING,
        ("tall.jpg", 0.5),
        ("tall.jpg", LayoutPhase.IDLE),
    ]

def test_layout_remove_item_relayouts_remaining_items_from_scratch() -> None:
    """Re-layout survivors exactly as a fresh pass over the survivors would.

    Returns:
        None: Assertions validate the post-removal layout.

    Raises:
        AssertionError: Raised when removal leaves stale placements.
    """

    controller, container, scheduler = _build_controller()
    container.order = ["a", "b", "c"]

    async def _scenario() -> None:
        await controller.layout_add_item("wide.jpg", "a")
        await controller.layout_add_item("square.jpg", "b")
        await controller.layout_add_item("tall.jpg", "c")

    asyncio.run(_scenario())
    scheduler.run_pending()

    assert controller.layout_remove_item("b") is True
    assert controller.layout_remove_item("b") is False
    scheduler.run_pending()

    expected = masonry_compute_layout(
        items=[MasonryItemInput("a", 2.0), MasonryItemInput("c", 0.5)],
        container_width=900,
    )
    assert container.applied[-1] == expected


def test_layout_handle_resize_coalesces_bursts() -> None:
    """Run one pass for a burst of resize notifications.

    Returns:
        None: Assertions validate debouncing.

    Raises:
        AssertionError: Raised when each resize triggers its own pass.
    """

    controller, container, scheduler = _build_controller()
    asyncio.run(controller.layout_add_item("wide.jpg", "a"))
    scheduler.run_pending()
    applied_before = len(container.applied)

    for width in (700, 800, 1300):
        container.width = width
        controller.layout_handle_resize()

    live_handles = scheduler.pending_handles()
    assert [handle.delay_seconds for handle in live_handles] == [MASONRY_RESIZE_DELAY_SECONDS]
    assert scheduler.run_pending() == 1
    assert len(container.applied) == applied_before + 1
    assert container.applied[-1].columns == 4


def test_layout_run_pass_skips_zero_width_container() -> None:
    """Skip passes while the container has no width."""

    controller, container, _ = _build_controller(container=_ContainerStub(width=0))
    asyncio.run(controller.layout_add_item("wide.jpg", "a"))

    assert controller.layout_run_pass() is None
    assert container.applied == []


def test_layout_run_pass_orders_by_container_then_insertion() -> None:
    """Follow container order and append items it does not list."""

    controller, container, _ = _build_controller()

    async def _scenario() -> None:
        await controller.layout_add_item("wide.jpg", "a")
        await controller.layout_add_item("square.jpg", "b")
        await controller.layout_add_item("tall.jpg", "c")

    asyncio.run(_scenario())
    container.order = ["c", "a"]

    result = controller.layout_run_pass()

    assert [placement.item_id for placement in result.placements] == ["c", "a", "b"]


def test_layout_run_pass_resets_phase_when_apply_fails() -> None:
    """Propagate container failures and return to idle."""

    controller, _, _ = _build_controller(container=_ContainerStub(fail=True))
    asyncio.run(controller.layout_add_item("wide.jpg", "a"))

    with pytest.raises(RuntimeError, match="container detached"):
        controller.layout_run_pass()
    assert controller.phase is LayoutPhase.IDLE
    assert controller.last_result is None


def test_layout_close_cancels_pending_passes() -> None:
    """Cancel scheduled passes and forget items on unmount."""

    controller, container, scheduler = _build_controller()
    asyncio.run(controller.layout_add_item("wide.jpg", "a"))
    controller.layout_handle_resize()

    controller.layout_close()

    assert scheduler.pending_handles() == []
    assert scheduler.run_pending() == 0
    assert container.applied == []
    assert len(controller.items) == 0


def test_debouncer_last_trigger_wins() -> None:
    """Cancel earlier timers so only the last trigger fires."""

    scheduler = _ManualScheduler()
    calls: list[str] = []
    debouncer = Debouncer(0.15, lambda: calls.append("fired"), scheduler)

    debouncer.trigger()
    debouncer.trigger()
    debouncer.trigger()

    assert [handle.cancelled for handle in scheduler.handles] == [True, True, False]
    assert debouncer.pending is True
    scheduler.run_pending()
    assert calls == ["fired"]
    assert debouncer.pending is False


def test_debouncer_rejects_negative_delay() -> None:
    """Reject negative delays."""

    with pytest.raises(ValueError):
        Debouncer(-0.1, lambda: None, _ManualScheduler())


def test_asyncio_timer_scheduler_fires_once_after_burst() -> None:
    """Coalesce triggers on a real event loop.

    Returns:
        None: Assertions validate loop-backed debouncing.

    Raises:
        AssertionError: Raised when the callback fires more than once.
    """

    calls: list[int] = []

    async def _scenario() -> None:
        debouncer = Debouncer(0.01, lambda: calls.append(1), AsyncioTimerScheduler())
        for _ in range(5):
            debouncer.trigger()
        await asyncio.sleep(0.1)

    asyncio.run(_scenario())

    assert calls == [1]
