"""Report runner: orchestrates traversal, rating, rendering, and reporting.

The runner is the primary entry point for scripts. It coordinates all
subsystems into a single, linear pipeline per artboard.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from loguru import logger
from PIL import Image

from artboard_contrast.analyzer.contrast_rater import ContrastRater, RatingResult, TextElementInfo
from artboard_contrast.analyzer.layer_tree import LayerTreeWalker
from artboard_contrast.analyzer.sample_extractor import RasterSource
from artboard_contrast.core.config import ContrastConfig
from artboard_contrast.core.logger import timed
from artboard_contrast.reporting.json_serializer import JsonSerializer
from artboard_contrast.reporting.overlay import ImageReportSink, InlineReportSink, ReportBuilder


@dataclass(frozen=True)
class ArtboardReport:
    """Everything produced for one artboard.

    Attributes:
        artboard_name: Name of the artboard.
        elements: The text elements that were rated.
        results: Their ratings, in the same order.
        report: The JSON-serialisable report dictionary.
    """

    artboard_name: str
    elements: list[TextElementInfo]
    results: list[RatingResult]
    report: dict[str, Any]


class ContrastReportRunner:
    """Runs the contrast pipeline for artboards of a layer document.

    Typical usage::

        runner = ContrastReportRunner()
        result = runner.evaluate(document, artboard, PillowRaster.open("bg.png"))
        runner.render_image(result, preview_image).save("report.png")
        runner.save_report("report.json")

    """

    def __init__(self, config: ContrastConfig | None = None) -> None:
        """Initialise the runner.

        Args:
            config: Optional configuration overrides.
        """
        self._config = config or ContrastConfig()
        self._rater = ContrastRater(self._config)
        self._builder = ReportBuilder(self._config)
        self._serializer = JsonSerializer(self._config)
        self._reports: list[ArtboardReport] = []

    @property
    def config(self) -> ContrastConfig:
        """Return the active configuration."""
        return self._config

    @property
    def rater(self) -> ContrastRater:
        """Return the contrast rater."""
        return self._rater

    @property
    def reports(self) -> list[ArtboardReport]:
        """Return the reports produced so far, oldest first."""
        return list(self._reports)

    @timed("find_text_elements")
    def find_text_elements(
        self, document: dict[str, Any], artboard: dict[str, Any]
    ) -> list[TextElementInfo]:
        """Collect the visible text elements of *artboard*.

        Args:
            document: The layer document, used to resolve symbols.
            artboard: The artboard node.

        Returns:
            Text elements in document order.
        """
        walker = LayerTreeWalker.for_document(document, self._config)
        return walker.find_text_elements(artboard)

    @timed("rate_elements")
    def rate_elements(
        self, elements: Sequence[TextElementInfo], background: RasterSource
    ) -> list[RatingResult]:
        """Rate *elements* against *background*.

        Args:
            elements: Text elements to rate.
            background: The artboard rendered with its text hidden.

        Returns:
            One rating per element.
        """
        return self._rater.rate_all(elements, background)

    def evaluate(
        self,
        document: dict[str, Any],
        artboard: dict[str, Any],
        background: RasterSource,
    ) -> ArtboardReport:
        """Run traversal and rating for one artboard and build its report.

        Args:
            document: The layer document.
            artboard: The artboard node to rate.
            background: The artboard rendered with its text hidden.

        Returns:
            The artboard report, also kept for :meth:`save_report`.
        """
        name = str(artboard.get("name", "artboard"))
        elements = self.find_text_elements(document, artboard)
        results = self.rate_elements(elements, background)
        report = self._serializer.build_report(name, elements, results)

        summary = report["summary"]
        logger.info(
            "Artboard {}: {} text layers, {} pass, {} fail, {} mixed, {} unknown",
            name,
            summary["total"],
            summary["pass"],
            summary["fail"],
            summary["mixed"],
            summary["unknown"],
        )

        artboard_report = ArtboardReport(name, elements, results, report)
        self._reports.append(artboard_report)
        return artboard_report

    @timed("render_image")
    def render_image(self, report: ArtboardReport, base_image: Image.Image) -> ImageReportSink:
        """Paint the visual report over *base_image*.

        Args:
            report: An artboard report from :meth:`evaluate`.
            base_image: The image to annotate; not modified.

        Returns:
            The sink holding the annotated image.
        """
        sink = ImageReportSink(base_image)
        self._builder.emit(sink, report.elements, report.results)
        return sink

    @timed("render_inline")
    def render_inline(self, report: ArtboardReport) -> dict[str, Any]:
        """Build the inline report group for *report*.

        Args:
            report: An artboard report from :meth:`evaluate`.

        Returns:
            A layer group the host can append to the artboard.
        """
        sink = InlineReportSink(self._config)
        self._builder.emit(sink, report.elements, report.results)
        return sink.to_group()

    def save_inline(
        self, group: dict[str, Any] | list[dict[str, Any]], path: str | Path, indent: int = 2
    ) -> Path:
        """Write inline report groups from :meth:`render_inline` to a JSON file."""
        return self._serializer.save(group, path, indent=indent)

    def serialise(self, indent: int = 2) -> str:
        """Serialise every report produced so far to a JSON string.

        Raises:
            RuntimeError: If :meth:`evaluate` has not been called yet.
        """
        return self._serializer.serialise(self._payload(), indent=indent)

    def save_report(self, path: str | Path, indent: int = 2) -> Path:
        """Save every report produced so far to a JSON file.

        A single artboard is saved as one report object; several are saved
        as a list.

        Args:
            path: Destination file path.
            indent: JSON indentation level.

        Returns:
            The path of the written file.

        Raises:
            RuntimeError: If :meth:`evaluate` has not been called yet.
        """
        return self._serializer.save(self._payload(), path, indent=indent)

    def _payload(self) -> dict[str, Any] | list[dict[str, Any]]:
        if not self._reports:
            raise RuntimeError("No report available. Call evaluate() first.")
        if len(self._reports) == 1:
            return self._reports[0].report
        return [r.report for r in self._reports]
