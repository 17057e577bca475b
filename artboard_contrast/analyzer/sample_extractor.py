"""Background sampling: corner sample points and raster pixel lookup.

The rater never touches image data directly. It asks a :class:`RasterSource`
for the colour at a pixel and treats ``None`` as "no data here".
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from PIL import Image

from artboard_contrast.analyzer.color_math import Color

SamplePoint = tuple[int, int]


@dataclass(frozen=True)
class Rectangle:
    """An axis-aligned rectangle in raster pixel coordinates.

    Attributes:
        x: Left edge.
        y: Top edge.
        w: Width.
        h: Height.
    """

    x: float
    y: float
    w: float
    h: float

    def offset(self, dx: float, dy: float) -> Rectangle:
        """Return a copy translated by ``(dx, dy)``."""
        return Rectangle(self.x + dx, self.y + dy, self.w, self.h)

    def to_dict(self) -> dict[str, float]:
        """Serialise to a JSON-safe dictionary."""
        return {"x": self.x, "y": self.y, "w": self.w, "h": self.h}


class RasterSource(Protocol):
    """Anything that can report the colour of a background pixel."""

    def get_pixel(self, x: int, y: int) -> Color | None:
        """Return the colour at ``(x, y)``, or ``None`` when out of bounds."""
        ...


class PillowRaster:
    """A :class:`RasterSource` backed by a Pillow image.

    The image is converted to RGBA once so lookups always yield four channels.
    """

    def __init__(self, image: Image.Image) -> None:
        """Wrap an already-loaded image.

        Args:
            image: Any Pillow image; it is converted to RGBA.
        """
        self._image = image if image.mode == "RGBA" else image.convert("RGBA")

    @classmethod
    def open(cls, path: str | Path) -> PillowRaster:
        """Load a raster from an image file on disk.

        Args:
            path: Path to a PNG, TIFF, or any format Pillow can read.

        Returns:
            The raster source.
        """
        with Image.open(path) as image:
            image.load()
            return cls(image.convert("RGBA"))

    @property
    def image(self) -> Image.Image:
        """Return the underlying RGBA image."""
        return self._image

    @property
    def size(self) -> tuple[int, int]:
        """Return ``(width, height)`` in pixels."""
        return self._image.size

    def get_pixel(self, x: int, y: int) -> Color | None:
        width, height = self._image.size
        if not (0 <= x < width and 0 <= y < height):
            return None
        r, g, b, a = self._image.getpixel((x, y))
        return Color(r, g, b, a)


def corner_sample_points(rect: Rectangle, fix_fourth_corner: bool = False) -> list[SamplePoint]:
    """Return the four corner sample points of a text rectangle.

    The order is top-left, top-right, bottom-left, then ``(x+h-1, y+h-1)``.
    The last point historically offsets ``x`` by the height rather than the
    width; pass *fix_fourth_corner* to sample the true bottom-right corner.
    Fractional coordinates are truncated toward zero, so an origin of
    ``-0.5`` samples pixel ``0``.

    Args:
        rect: The text rectangle in raster coordinates.
        fix_fourth_corner: Use ``x+w-1`` for the last point.

    Returns:
        Four ``(x, y)`` integer pixel coordinates.
    """
    x, y, w, h = rect.x, rect.y, rect.w, rect.h
    fourth_dx = w if fix_fourth_corner else h
    points = [
        (x, y),
        (x + w - 1, y),
        (x, y + h - 1),
        (x + fourth_dx - 1, y + h - 1),
    ]
    return [(int(px), int(py)) for px, py in points]


def sample(raster: RasterSource, point: SamplePoint) -> Color | None:
    """Look up the background colour at *point*.

    Args:
        raster: The background raster.
        point: ``(x, y)`` pixel coordinate.

    Returns:
        The colour, or ``None`` if the point lies outside the raster.
    """
    x, y = point
    return raster.get_pixel(x, y)
