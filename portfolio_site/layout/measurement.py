"""Asynchronous image measurement for masonry items."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


class ImageMeasurementError(RuntimeError):
    """Raised when an item's image cannot report natural dimensions."""


@dataclass(frozen=True)
class ImageDimensions:
    """Natural image size in pixels."""

    width: int
    height: int

    def aspect_ratio(self) -> float | None:
        """Return width/height, or None when either side is zero."""

        if self.width <= 0 or self.height <= 0:
            return None
        return self.width / self.height


class ImageMeasurePort(Protocol):
    """Port resolving natural dimensions for an item's node handle."""

    async def layout_measure_image(self, node: object) -> ImageDimensions:
        """Measure the single image carried by a node.

        Args:
            node: Host-specific node handle.

        Returns:
            ImageDimensions: Natural image size.

        Raises:
            ImageMeasurementError: Raised when the image cannot be measured.
        """


class PillowImageMeasureService(ImageMeasurePort):
    """Measure image files on disk with Pillow, off the event loop."""

    def __init__(self, media_root: str | Path):
        """Initialize measurement service.

        Args:
            media_root: Directory that relative image paths resolve against.

        Raises:
            ValueError: Raised when media_root is blank.
        """

        if not str(media_root).strip():
            raise ValueError("media_root must not be blank")
        self._media_root = Path(media_root)

    async def layout_measure_image(self, node: object) -> ImageDimensions:
        """Measure an image file given its path.

        Args:
            node: Path under the media root; a leading `/` is read as the media root.

        Returns:
            ImageDimensions: Natural image size.

        Raises:
            ImageMeasurementError: Raised when the path leaves the media root, or the
                file is missing or not an image.
        """

        image_path = self._layout_resolve_path(node)
        return await asyncio.to_thread(self._layout_read_dimensions, image_path)

    def _layout_resolve_path(self, node: object) -> Path:
        if not isinstance(node, (str, Path)) or not str(node).strip():
            raise ImageMeasurementError(f"unsupported image node: {node!r}")
        media_root = self._media_root.resolve()
        candidate_path = (media_root / str(node).strip().lstrip("/")).resolve()
        if not candidate_path.is_relative_to(media_root):
            raise ImageMeasurementError(f"image path escapes media root: {node!r}")
        return candidate_path

    @staticmethod
    def _layout_read_dimensions(image_path: Path) -> ImageDimensions:
        try:
            with Image.open(image_path) as image:
                width, height = image.size
        except (OSError, UnidentifiedImageError) as error:
            logger.debug("image measurement failed path=%s: %s", image_path, error)
            raise ImageMeasurementError(f"cannot measure image {image_path}") from error
        return ImageDimensions(width=width, height=height)


__all__ = ["ImageDimensions", "ImageMeasurePort", "ImageMeasurementError", "PillowImageMeasureService"]
