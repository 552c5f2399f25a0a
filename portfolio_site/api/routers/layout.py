"""Layout API router computing masonry placements for gallery renderers."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from portfolio_site.layout import (
    ImageMeasurementError,
    ImageMeasurePort,
    MasonryColumnConfig,
    MasonryItemInput,
    MasonryLayoutResult,
    MasonryOptions,
    masonry_compute_layout,
    masonry_resolve_column_config,
)

from .responses import api_error_response


class MasonryLayoutItemRequest(BaseModel):
    """One card to place; measured from `image_path` when no ratio is given."""

    id: str = Field(min_length=1, max_length=255)
    aspect_ratio: float | None = Field(default=None, gt=0)
    image_path: str | None = Field(default=None, min_length=1, max_length=1024)


class MasonryLayoutRequest(BaseModel):
    """Request body for one masonry layout computation."""

    container_width: float = Field(ge=0)
    viewport_width: float | None = Field(default=None, gt=0)
    columns: int | None = Field(default=None, ge=1, le=12)
    gap: float | None = Field(default=None, ge=0)
    items: list[MasonryLayoutItemRequest] = Field(default_factory=list, max_length=1000)


def api_create_layout_router(
    measure_service: ImageMeasurePort,
    options: MasonryOptions | None = None,
) -> APIRouter:
    """Create layout router exposing masonry computation.

    Args:
        measure_service: Image measurement port for items sent without a ratio.
        options: Optional masonry options.

    Returns:
        APIRouter: Router exposing `/layout/masonry`.

    Raises:
        ValueError: Raised when measure_service is invalid.
    """

    if measure_service is None:
        raise ValueError("measure_service must not be None")
    resolved_options = options or MasonryOptions()

    router = APIRouter(prefix="/layout", tags=["layout"])

    @router.post("/masonry")
    async def api_layout_masonry(body: MasonryLayoutRequest) -> JSONResponse:
        """Compute placements for the requested cards.

        Args:
            body: Container widths, optional column override and cards.

        Returns:
            JSONResponse: Placements, a `skipped` payload, or an error envelope.
        """

        item_ids = [item.id for item in body.items]
        if len(set(item_ids)) != len(item_ids):
            return api_error_response(
                code="DUPLICATE_ITEM_ID",
                message="item ids must be unique",
                status_code=status.HTTP_400_BAD_REQUEST,
                field_name="items",
            )

        aspect_ratios = await asyncio.gather(
            *(api_layout_resolve_aspect_ratio(item, measure_service, resolved_options) for item in body.items)
        )
        column_config = None
        if body.columns is not None:
            column_config = MasonryColumnConfig(
                columns=body.columns,
                gap=resolved_options.gap if body.gap is None else body.gap,
            )
        elif body.gap is not None:
            # gap alone overrides the breakpoint gap, keeping its column count
            resolved_config = masonry_resolve_column_config(resolved_options, body.container_width, body.viewport_width)
            column_config = MasonryColumnConfig(columns=resolved_config.columns, gap=body.gap)

        result = masonry_compute_layout(
            items=[
                MasonryItemInput(item_id=item.id, aspect_ratio=aspect_ratio)
                for item, aspect_ratio in zip(body.items, aspect_ratios)
            ],
            container_width=body.container_width,
            options=resolved_options,
            viewport_width=body.viewport_width,
            column_config=column_config,
        )
        if result is None:
            payload = {"status": "skipped", "placements": [], "container_height": 0}
            return JSONResponse(content=payload, status_code=status.HTTP_200_OK)
        return JSONResponse(content=api_serialize_masonry_layout(result), status_code=status.HTTP_200_OK)

    return router


async def api_layout_resolve_aspect_ratio(
    item: MasonryLayoutItemRequest,
    measure_service: ImageMeasurePort,
    options: MasonryOptions,
) -> float | None:
    """Resolve one card's aspect ratio, measuring its image when needed.

    Args:
        item: Requested card.
        measure_service: Image measurement port.
        options: Options carrying the fallback ratio.

    Returns:
        float | None: Ratio, fallback ratio on measurement failure, or None when
            the card carries neither a ratio nor an image.
    """

    if item.aspect_ratio is not None:
        return item.aspect_ratio
    if item.image_path is None:
        return None
    try:
        dimensions = await measure_service.layout_measure_image(item.image_path)
    except ImageMeasurementError:
        return options.fallback_aspect_ratio
    return dimensions.aspect_ratio() or options.fallback_aspect_ratio


def api_serialize_masonry_layout(result: MasonryLayoutResult) -> dict[str, object]:
    """Serialize one layout result to JSON payload."""

    return {
        "status": "ok",
        "columns": result.columns,
        "gap": result.gap,
        "column_width": result.column_width,
        "container_height": result.container_height,
        "placements": [
            {
                "id": placement.item_id,
                "column": placement.column,
                "x": placement.x,
                "y": placement.y,
                "width": placement.width,
                "height": placement.height,
            }
            for placement in result.placements
        ],
    }


__all__ = [
    "MasonryLayoutItemRequest",
    "MasonryLayoutRequest",
    "api_create_layout_router",
    "api_layout_resolve_aspect_ratio",
    "api_serialize_masonry_layout",
]
