"""Layer-tree walker: turns a layer document into text elements to rate.

The document is a JSON-serialisable export of a design file's layer tree.
Each node has a ``type`` (``artboard``, ``group``, ``symbol_instance``,
``text``, or any other shape type, which is ignored), a ``name``, a
``frame`` with ``x``, ``y``, ``w``, ``h`` relative to its parent, and
optional ``visible``, ``opacity``, and ``layers`` keys. Text nodes add
``text_color``, ``font_size`` (CSS px), and ``font_name``; groups may add a
``tint`` colour override. Symbol instances reference a master in the
document's top-level ``symbols`` map by ``symbol_id``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger

from artboard_contrast.analyzer.color_math import Color
from artboard_contrast.analyzer.contrast_rater import TextElementInfo, is_bold_font
from artboard_contrast.analyzer.sample_extractor import Rectangle
from artboard_contrast.core.config import ContrastConfig

CONTAINER_TYPES = {"group", "symbol_instance"}


class LayerDocumentError(ValueError):
    """Raised when a layer document is malformed."""


def load_document(path: str | Path) -> dict[str, Any]:
    """Read a layer document from a JSON file.

    Args:
        path: Path to the document.

    Returns:
        The parsed document.

    Raises:
        LayerDocumentError: If the file is not a JSON object.
    """
    try:
        document = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise LayerDocumentError(f"{path}: invalid JSON ({exc})") from exc
    if not isinstance(document, dict):
        raise LayerDocumentError(f"{path}: expected a JSON object at the top level")
    return document


def find_artboards(document: dict[str, Any]) -> list[dict[str, Any]]:
    """Return the artboards at the top level of a page document."""
    return [
        layer
        for layer in document.get("layers", [])
        if isinstance(layer, dict) and layer.get("type") == "artboard"
    ]


class LayerTreeWalker:
    """Collects every visible text layer of an artboard with its effective
    rectangle, opacity, and colour.

    Rectangles are expressed in the artboard's own pixel space, which is the
    space of the artboard's rasterised background.
    """

    def __init__(
        self,
        symbols: dict[str, Any] | None = None,
        config: ContrastConfig | None = None,
    ) -> None:
        """Initialise the walker.

        Args:
            symbols: Symbol masters by id, used to expand symbol instances.
            config: Optional configuration overrides.
        """
        self._symbols = symbols or {}
        self._config = config or ContrastConfig()

    @classmethod
    def for_document(
        cls, document: dict[str, Any], config: ContrastConfig | None = None
    ) -> LayerTreeWalker:
        """Create a walker that resolves symbols from *document*."""
        return cls(symbols=document.get("symbols"), config=config)

    def find_text_elements(self, artboard: dict[str, Any]) -> list[TextElementInfo]:
        """Find all visible text layers under *artboard*, in document order.

        Args:
            artboard: The artboard node.

        Returns:
            One :class:`TextElementInfo` per visible text layer.

        Raises:
            LayerDocumentError: If a node on the way is malformed.
        """
        elements: list[TextElementInfo] = []
        path = [str(artboard.get("name", "artboard"))]
        for child in artboard.get("layers", []):
            elements.extend(
                self._walk(child, path, dx=0.0, dy=0.0, opacity=1.0, tint=None, depth=1)
            )
        return elements

    def _walk(
        self,
        node: dict[str, Any],
        path: list[str],
        dx: float,
        dy: float,
        opacity: float,
        tint: Color | None,
        depth: int,
    ) -> list[TextElementInfo]:
        """Recursively collect text elements under *node*.

        Args:
            node: The current layer.
            path: Names of the ancestors, outermost first.
            dx: Horizontal offset accumulated from ancestors.
            dy: Vertical offset accumulated from ancestors.
            opacity: Product of ancestor opacities.
            tint: Nearest ancestor tint, if any.
            depth: Current recursion depth.

        Returns:
            Text elements found under *node*, including itself.
        """
        if depth > self._config.max_tree_depth:
            logger.warning("Layer tree deeper than {} at {}", self._config.max_tree_depth, " > ".join(path))
            return []
        if not isinstance(node, dict) or not node.get("visible", True):
            return []
        if node.get("name") == self._config.meta_group_name:
            return []

        layer_type = node.get("type")
        if layer_type == "text":
            return [self._text_element(node, path, dx, dy, opacity, tint)]
        if layer_type not in CONTAINER_TYPES:
            return []

        name = str(node.get("name", layer_type))
        frame = self._frame(node, path)
        children = node.get("layers", [])
        if layer_type == "symbol_instance":
            children = self._symbol_layers(node, path)

        own_tint = node.get("tint")
        if own_tint is not None:
            parsed = Color.parse(own_tint)
            if parsed is None:
                logger.warning("Ignoring unparsable tint {!r} on {}", own_tint, name)
            else:
                tint = parsed

        child_path = [*path, name]
        child_opacity = opacity * self._opacity(node, child_path)
        elements: list[TextElementInfo] = []
        for child in children:
            elements.extend(
                self._walk(
                    child,
                    child_path,
                    dx=dx + frame.x,
                    dy=dy + frame.y,
                    opacity=child_opacity,
                    tint=tint,
                    depth=depth + 1,
                )
            )
        return elements

    def _text_element(
        self,
        node: dict[str, Any],
        path: list[str],
        dx: float,
        dy: float,
        opacity: float,
        tint: Color | None,
    ) -> TextElementInfo:
        """Build the :class:`TextElementInfo` for a text layer."""
        name = " > ".join([*path, str(node.get("name", "text"))])
        frame = self._frame(node, path)
        try:
            font_size = float(node["font_size"])
        except (KeyError, TypeError, ValueError) as exc:
            raise LayerDocumentError(f"Text layer {name} has no usable font_size") from exc

        text_color = tint if tint is not None else Color.parse(node.get("text_color"))
        return TextElementInfo(
            text_color=text_color,
            effective_opacity=opacity,
            rectangle=frame.offset(dx, dy),
            font_size_px=font_size,
            is_bold=is_bold_font(node.get("font_name"), self._config),
            name=name,
        )

    def _symbol_layers(self, node: dict[str, Any], path: list[str]) -> list[Any]:
        """Return the layers of a symbol instance's master."""
        symbol_id = node.get("symbol_id")
        master = self._symbols.get(symbol_id) if symbol_id is not None else None
        if not isinstance(master, dict):
            logger.warning(
                "Symbol instance {} references unknown symbol {!r}",
                " > ".join([*path, str(node.get("name", "symbol"))]),
                symbol_id,
            )
            return []
        return master.get("layers", [])

    @staticmethod
    def _frame(node: dict[str, Any], path: list[str]) -> Rectangle:
        """Parse a node's ``frame`` into a :class:`Rectangle`.

        Raises:
            LayerDocumentError: If the frame is missing or not numeric.
        """
        frame = node.get("frame")
        try:
            return Rectangle(
                float(frame["x"]),
                float(frame["y"]),
                float(frame["w"]),
                float(frame["h"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            name = " > ".join([*path, str(node.get("name", node.get("type", "layer")))])
            raise LayerDocumentError(f"Layer {name} has no usable frame") from exc

    @staticmethod
    def _opacity(node: dict[str, Any], path: list[str]) -> float:
        """Return a node's own opacity, defaulting to fully opaque."""
        raw = node.get("opacity", 1.0)
        try:
            return float(raw)
        except (TypeError, ValueError) as exc:
            raise LayerDocumentError(f"Layer {' > '.join(path)} has invalid opacity {raw!r}") from exc
