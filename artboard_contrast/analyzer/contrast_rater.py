"""WCAG AA contrast rating for text rendered over a sampled background.

Each text element is rated independently: its colour is composited over the
background at four corner samples, every sample is classified against the
normal- or large-text threshold, and the samples are aggregated into a single
``pass``, ``fail``, ``mixed``, or ``unknown`` rating.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable

from loguru import logger

from artboard_contrast.analyzer.color_math import Color, contrast_ratio, luminance, mix
from artboard_contrast.analyzer.sample_extractor import (
    RasterSource,
    Rectangle,
    corner_sample_points,
    sample,
)
from artboard_contrast.core.config import ContrastConfig


class RatingStatus(str, Enum):
    """Aggregated outcome of a rating."""

    PASS = "pass"
    FAIL = "fail"
    MIXED = "mixed"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


class UnknownCause(str, Enum):
    """Why a rating came back ``unknown``. Reported, never raised."""

    UNRESOLVED_COLOR = "unresolved_color"
    OUT_OF_BOUNDS = "out_of_bounds"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TextElementInfo:
    """One text element to rate.

    Attributes:
        text_color: Resolved text colour, or ``None`` if it could not be
            determined.
        effective_opacity: Product of ancestor opacities, in [0, 1].
        rectangle: Screen-space bounds in raster coordinates.
        font_size_px: Font size in CSS pixels.
        is_bold: Whether the face counts as bold.
        name: Display path of the layer, used in logs and reports only.
    """

    text_color: Color | None
    effective_opacity: float
    rectangle: Rectangle
    font_size_px: float
    is_bold: bool
    name: str = ""


@dataclass(frozen=True)
class RatingResult:
    """The rating of one text element.

    Attributes:
        status: Aggregated status.
        contrast_ratio: Minimum observed ratio for ``pass``, ``fail``, and
            ``mixed``; ``0`` when every sample was out of bounds; ``"NA"``
            when the text colour was unresolved.
        note: ``"<min>:1 - <max>:1"`` range, only for ``mixed``.
        passing_threshold: The ratio this element had to reach.
        large_text: Whether the large-text threshold applied.
        samples_in_bounds: How many corner samples hit the raster.
        max_ratio: Maximum observed ratio, when any sample was taken.
        cause: Why the status is ``unknown``, if it is.
    """

    status: RatingStatus
    contrast_ratio: float | str
    note: str | None = None
    passing_threshold: float | None = None
    large_text: bool | None = None
    samples_in_bounds: int = 0
    max_ratio: float | None = None
    cause: UnknownCause | None = None

    @property
    def display_ratio(self) -> str:
        """Return the contrast ratio formatted for display."""
        return format_ratio(self.contrast_ratio)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-safe dictionary.

        Returns:
            Plain dictionary.
        """
        ratio = self.contrast_ratio
        return {
            "status": self.status.value,
            "contrast_ratio": round(ratio, 2) if isinstance(ratio, float) else ratio,
            "max_ratio": round(self.max_ratio, 2) if self.max_ratio is not None else None,
            "display_ratio": self.display_ratio,
            "note": self.note,
            "passing_threshold": self.passing_threshold,
            "large_text": self.large_text,
            "samples_in_bounds": self.samples_in_bounds,
            "cause": self.cause.value if self.cause else None,
        }


def format_ratio(value: float | str) -> str:
    """Format a contrast ratio as ``"X.XX:1"``.

    ``NaN`` formats as ``"NA"``; strings are returned unchanged.
    """
    if isinstance(value, str):
        return value
    if math.isnan(value):
        return "NA"
    return f"{value:.2f}:1"


def is_bold_font(font_name: str | None, config: ContrastConfig | None = None) -> bool:
    """Return whether a font name denotes a bold-weight face."""
    if not font_name:
        return False
    pattern = (config or ContrastConfig()).bold_font_pattern
    return re.search(pattern, font_name, re.IGNORECASE) is not None


def is_large_text(
    font_size_px: float, is_bold: bool, config: ContrastConfig | None = None
) -> tuple[bool, float]:
    """Apply the WCAG large-text rule.

    Large text is ≥ 18pt, or ≥ 14pt and bold. Pixel sizes are converted to
    points by dividing by ``config.px_per_pt``.

    Args:
        font_size_px: Font size in CSS pixels.
        is_bold: Whether the face is bold.
        config: Optional configuration overrides.

    Returns:
        ``(large_text, passing_threshold)``.
    """
    config = config or ContrastConfig()
    point_size = font_size_px / config.px_per_pt
    large = point_size >= config.large_text_threshold_pt or (
        is_bold and point_size >= config.large_text_bold_threshold_pt
    )
    return large, config.passing_threshold(large)


class ContrastRater:
    """Rates text elements against a rasterised background.

    The rater holds no per-call state, so one instance can rate any number of
    elements, in any order, from any thread.
    """

    def __init__(self, config: ContrastConfig | None = None) -> None:
        """Initialise the rater.

        Args:
            config: Optional configuration overrides.
        """
        self._config = config or ContrastConfig()

    def rate(self, element: TextElementInfo, background: RasterSource) -> RatingResult:
        """Rate one text element.

        Never raises for missing data: an unresolved text colour or a
        rectangle entirely off the raster yields an ``unknown`` rating.

        Args:
            element: The text element.
            background: The background raster, with text layers hidden.

        Returns:
            The rating.
        """
        text_color = element.text_color
        if text_color is None:
            logger.warning("Can't get text color for text layer {}", element.name or "<unnamed>")
            return RatingResult(
                status=RatingStatus.UNKNOWN,
                contrast_ratio="NA",
                cause=UnknownCause.UNRESOLVED_COLOR,
            )

        large, threshold = is_large_text(element.font_size_px, element.is_bold, self._config)
        amount = (text_color.a * element.effective_opacity) / 255 * 100

        passes = 0
        fails = 0
        min_ratio = math.inf
        max_ratio = -math.inf

        points = corner_sample_points(element.rectangle, self._config.fix_fourth_corner)
        for point in points:
            bg_color = sample(background, point)
            if bg_color is None:
                continue

            blended = mix(bg_color, text_color, amount)
            ratio = contrast_ratio(luminance(blended), luminance(bg_color))
            if ratio < threshold:
                fails += 1
            else:
                passes += 1
            min_ratio = min(min_ratio, ratio)
            max_ratio = max(max_ratio, ratio)

        in_bounds = passes + fails
        if not in_bounds:
            logger.debug("All samples out of bounds for text layer {}", element.name or "<unnamed>")
            return RatingResult(
                status=RatingStatus.UNKNOWN,
                contrast_ratio=0,
                passing_threshold=threshold,
                large_text=large,
                cause=UnknownCause.OUT_OF_BOUNDS,
            )

        note = None
        if not fails:
            status = RatingStatus.PASS
        elif not passes:
            status = RatingStatus.FAIL
        else:
            status = RatingStatus.MIXED
            note = f"{format_ratio(min_ratio)} - {format_ratio(max_ratio)}"

        return RatingResult(
            status=status,
            contrast_ratio=min_ratio,
            note=note,
            passing_threshold=threshold,
            large_text=large,
            samples_in_bounds=in_bounds,
            max_ratio=max_ratio,
        )

    def rate_all(
        self, elements: Iterable[TextElementInfo], background: RasterSource
    ) -> list[RatingResult]:
        """Rate every element, preserving input order.

        Args:
            elements: Text elements to rate.
            background: The shared background raster.

        Returns:
            One rating per element.
        """
        return [self.rate(element, background) for element in elements]
