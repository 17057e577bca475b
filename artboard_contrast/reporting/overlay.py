"""Visual contrast report: overlay primitives, builder, and sinks.

The builder turns ratings into coloured rectangles and ratio labels. A sink
decides what happens to them: :class:`ImageReportSink` paints them onto an
image for export, :class:`InlineReportSink` collects them into a layer group
the host tool can place back into the document.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, Sequence, Union

from PIL import Image, ImageDraw, ImageFilter, ImageFont

from artboard_contrast.analyzer.color_math import Color
from artboard_contrast.analyzer.contrast_rater import RatingResult, RatingStatus, TextElementInfo
from artboard_contrast.analyzer.sample_extractor import Rectangle
from artboard_contrast.core.config import ContrastConfig


@dataclass(frozen=True)
class OverlayRect:
    """A translucent rectangle covering one rated text element.

    Attributes:
        rect: Bounds in raster coordinates.
        fill: Fill colour, alpha included.
        status: The rating status it represents.
        name: Name of the rated text layer.
    """

    rect: Rectangle
    fill: Color
    status: RatingStatus
    name: str = ""


@dataclass(frozen=True)
class OverlayLabel:
    """A centred ratio label drawn over a rated text element.

    Attributes:
        rect: Bounds in raster coordinates; text is centred in both axes.
        text: The label text.
        font_size: Font size in pixels.
        text_color: Label colour.
        shadow_color: Colour of the 1px drop shadow.
        name: Name of the rated text layer.
    """

    rect: Rectangle
    text: str
    font_size: int
    text_color: Color
    shadow_color: Color
    name: str = ""


OverlayPrimitive = Union[OverlayRect, OverlayLabel]


class ReportSink(Protocol):
    """Receives overlay primitives in drawing order."""

    def add(self, primitive: OverlayPrimitive) -> None:
        """Accept one primitive."""
        ...


class ReportBuilder:
    """Converts ratings into overlay primitives."""

    def __init__(self, config: ContrastConfig | None = None) -> None:
        """Initialise the builder.

        Args:
            config: Optional configuration overrides.
        """
        self._config = config or ContrastConfig()

    def build(
        self, elements: Sequence[TextElementInfo], results: Sequence[RatingResult]
    ) -> list[OverlayPrimitive]:
        """Build the primitives for a set of rated elements.

        Every element gets a rectangle tinted by its status. Elements that did
        not pass also get a label: the ratio range for ``mixed``, ``"NA"`` for
        ``unknown``, and the minimum ratio for ``fail``.

        Args:
            elements: The rated elements.
            results: Their ratings, in the same order.

        Returns:
            Primitives in drawing order.

        Raises:
            ValueError: If the two sequences differ in length.
        """
        if len(elements) != len(results):
            raise ValueError(
                f"Got {len(elements)} elements but {len(results)} ratings"
            )

        primitives: list[OverlayPrimitive] = []
        for element, result in zip(elements, results):
            primitives.append(
                OverlayRect(
                    rect=element.rectangle,
                    fill=self._config.get_status_fill(result.status),
                    status=result.status,
                    name=element.name,
                )
            )
            if result.status != RatingStatus.PASS:
                primitives.append(
                    OverlayLabel(
                        rect=self._label_rect(element.rectangle),
                        text=self._label_text(result),
                        font_size=self._config.label_font_size,
                        text_color=self._config.label_text_color,
                        shadow_color=self._config.label_shadow_color,
                        name=element.name,
                    )
                )
        return primitives

    def emit(
        self,
        sink: ReportSink,
        elements: Sequence[TextElementInfo],
        results: Sequence[RatingResult],
    ) -> int:
        """Build the primitives and push them into *sink*.

        Returns:
            The number of primitives emitted.
        """
        primitives = self.build(elements, results)
        for primitive in primitives:
            sink.add(primitive)
        return len(primitives)

    def _label_rect(self, rect: Rectangle) -> Rectangle:
        """Widen narrow label boxes symmetrically to the minimum width."""
        min_width = self._config.label_min_width
        if rect.w >= min_width:
            return rect
        delta = min_width - rect.w
        return Rectangle(rect.x - delta / 2, rect.y, min_width, rect.h)

    @staticmethod
    def _label_text(result: RatingResult) -> str:
        if result.status == RatingStatus.MIXED and result.note:
            return result.note
        if result.status == RatingStatus.UNKNOWN:
            return "NA"
        return result.display_ratio


class ImageReportSink:
    """Paints overlay primitives onto a copy of an image."""

    def __init__(self, base_image: Image.Image) -> None:
        """Initialise the sink.

        Args:
            base_image: The image to draw over, typically the artboard
                rendered with its text visible. It is not modified.
        """
        self._canvas = base_image.convert("RGBA")

    @property
    def image(self) -> Image.Image:
        """Return the image drawn so far."""
        return self._canvas

    def add(self, primitive: OverlayPrimitive) -> None:
        if isinstance(primitive, OverlayRect):
            self._draw_rect(primitive)
        elif isinstance(primitive, OverlayLabel):
            self._draw_label(primitive)
        else:
            raise TypeError(f"Unsupported overlay primitive: {type(primitive).__name__}")

    def save(self, path: str | Path) -> Path:
        """Export the annotated image as PNG.

        Args:
            path: Destination file path.

        Returns:
            The path of the written file.
        """
        filepath = Path(path)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        self._canvas.save(filepath, format="PNG")
        return filepath

    def _draw_rect(self, primitive: OverlayRect) -> None:
        layer = Image.new("RGBA", self._canvas.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)
        draw.rectangle(_pixel_box(primitive.rect), fill=primitive.fill.to_rgba())
        self._canvas = Image.alpha_composite(self._canvas, layer)

    def _draw_label(self, primitive: OverlayLabel) -> None:
        font = ImageFont.load_default(size=primitive.font_size)
        measure = ImageDraw.Draw(self._canvas)
        left, top, right, bottom = measure.textbbox((0, 0), primitive.text, font=font)
        rect = primitive.rect
        x = rect.x + (rect.w - (right - left)) / 2 - left
        y = rect.y + (rect.h - (bottom - top)) / 2 - top

        shadow = Image.new("RGBA", self._canvas.size, (0, 0, 0, 0))
        ImageDraw.Draw(shadow).text(
            (x, y + 1), primitive.text, font=font, fill=primitive.shadow_color.to_rgba()
        )
        self._canvas = Image.alpha_composite(
            self._canvas, shadow.filter(ImageFilter.GaussianBlur(1))
        )

        text_layer = Image.new("RGBA", self._canvas.size, (0, 0, 0, 0))
        ImageDraw.Draw(text_layer).text(
            (x, y), primitive.text, font=font, fill=primitive.text_color.to_rgba()
        )
        self._canvas = Image.alpha_composite(self._canvas, text_layer)


class InlineReportSink:
    """Collects overlay primitives into a layer group for the host document.

    The group uses the same node shape as the layer documents read by
    :class:`~artboard_contrast.analyzer.layer_tree.LayerTreeWalker`, so a host
    can append it to the artboard's ``layers`` as-is.
    """

    def __init__(self, config: ContrastConfig | None = None) -> None:
        """Initialise the sink.

        Args:
            config: Optional configuration overrides.
        """
        self._config = config or ContrastConfig()
        self._layers: list[dict[str, Any]] = []

    def add(self, primitive: OverlayPrimitive) -> None:
        if isinstance(primitive, OverlayRect):
            self._layers.append({
                "type": "rectangle",
                "name": f"{primitive.status} {primitive.name}".strip(),
                "frame": primitive.rect.to_dict(),
                "fill": primitive.fill.to_hex(),
            })
        elif isinstance(primitive, OverlayLabel):
            self._layers.append({
                "type": "text",
                "name": primitive.text,
                "frame": primitive.rect.to_dict(),
                "text": primitive.text,
                "font_size": primitive.font_size,
                "font_name": "System-Bold",
                "text_color": primitive.text_color.to_hex(),
                "alignment": "center",
                "vertical_alignment": "middle",
                "shadow": {
                    "x": 0,
                    "y": 1,
                    "blur": 1,
                    "color": primitive.shadow_color.to_hex(),
                },
            })
        else:
            raise TypeError(f"Unsupported overlay primitive: {type(primitive).__name__}")

    @property
    def layers(self) -> list[dict[str, Any]]:
        """Return the collected layer nodes."""
        return list(self._layers)

    def to_group(self) -> dict[str, Any]:
        """Return the collected layers wrapped in the report meta group."""
        return {
            "type": "group",
            "name": self._config.meta_group_name,
            "frame": {"x": 0, "y": 0, "w": 0, "h": 0},
            "layers": self.layers,
        }


def _pixel_box(rect: Rectangle) -> tuple[int, int, int, int]:
    """Return inclusive integer pixel corners for *rect*."""
    x0 = round(rect.x)
    y0 = round(rect.y)
    return (x0, y0, x0 + max(round(rect.w), 1) - 1, y0 + max(round(rect.h), 1) - 1)
