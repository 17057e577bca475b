"""JSON report serialiser.

Compiles text elements and their ratings into the JSON report format, one
report per artboard.
"""

from __future__ import annotations

import datetime
import json
import platform
from collections import Counter
from pathlib import Path
from typing import Any, Sequence

from artboard_contrast import __version__
from artboard_contrast.analyzer.contrast_rater import RatingResult, RatingStatus, TextElementInfo
from artboard_contrast.core.config import ContrastConfig


class JsonSerializer:
    """Assembles and serialises the contrast report.

    The output follows the schema:

    .. code-block:: json

        {
            "metadata": {...},
            "artboard": "Home",
            "results": [...],
            "summary": {
                "pass": int,
                "fail": int,
                "mixed": int,
                "unknown": int,
                "total": int,
                "pass_rate": float
            }
        }
    """

    def __init__(self, config: ContrastConfig | None = None) -> None:
        """Initialise the serialiser.

        Args:
            config: Optional configuration overrides.
        """
        self._config = config or ContrastConfig()

    def build_report(
        self,
        artboard_name: str,
        elements: Sequence[TextElementInfo],
        results: Sequence[RatingResult],
    ) -> dict[str, Any]:
        """Build the complete report dictionary.

        Args:
            artboard_name: Name of the rated artboard.
            elements: The rated text elements.
            results: Their ratings, in the same order.

        Returns:
            The report dictionary, ready for JSON serialisation.
        """
        entries = []
        for element, result in zip(elements, results):
            entry = {
                "name": element.name,
                "rectangle": element.rectangle.to_dict(),
                "text_color": element.text_color.to_hex() if element.text_color else None,
                "effective_opacity": element.effective_opacity,
                "font_size_px": element.font_size_px,
                "is_bold": element.is_bold,
            }
            entry.update(result.to_dict())
            entries.append(entry)

        return {
            "metadata": self._build_metadata(),
            "artboard": artboard_name,
            "results": entries,
            "summary": self._build_summary(results),
        }

    def serialise(self, report: dict[str, Any], indent: int = 2) -> str:
        """Serialise the report dictionary to a JSON string.

        Args:
            report: The report dictionary.
            indent: JSON indentation level.

        Returns:
            Formatted JSON string.
        """
        return json.dumps(report, indent=indent, default=str, ensure_ascii=False)

    def save(self, report: dict[str, Any] | list[dict[str, Any]], path: str | Path, indent: int = 2) -> Path:
        """Write the report to a JSON file.

        Args:
            report: The report dictionary, or a list of them.
            path: Destination file path.
            indent: JSON indentation level.

        Returns:
            The path of the written file.
        """
        filepath = Path(path)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        filepath.write_text(self.serialise(report, indent=indent), encoding="utf-8")
        return filepath

    def _build_metadata(self) -> dict[str, Any]:
        """Build the metadata section of the report.

        Returns:
            Metadata dictionary.
        """
        return {
            "tool": "Artboard Contrast",
            "version": __version__,
            "timestamp": datetime.datetime.now(tz=datetime.timezone.utc).isoformat(),
            "python_version": platform.python_version(),
            "platform": platform.platform(),
            "thresholds": {
                "normal_text": self._config.min_contrast_ratio_normal,
                "large_text": self._config.min_contrast_ratio_large,
            },
        }

    @staticmethod
    def _build_summary(results: Sequence[RatingResult]) -> dict[str, Any]:
        """Count ratings per status.

        The pass rate is the share of ``pass`` ratings, or 100 when nothing
        was rated.

        Args:
            results: The ratings.

        Returns:
            Summary dictionary.
        """
        counts = Counter(result.status for result in results)
        summary: dict[str, Any] = {status.value: counts.get(status, 0) for status in RatingStatus}
        summary["total"] = len(results)
        if results:
            summary["pass_rate"] = round(counts.get(RatingStatus.PASS, 0) / len(results) * 100.0, 2)
        else:
            summary["pass_rate"] = 100.0
        return summary
