"""Contrast report configuration with sensible defaults for all thresholds.

All numeric thresholds are configurable. The defaults follow WCAG 2.0 AA
for text contrast; overlay colours mark passing text green, failing text
red, mixed text orange, and unrated text yellow.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from artboard_contrast.analyzer.color_math import Color


@dataclass(frozen=False)
class ContrastConfig:
    """Central configuration for rating and report rendering.

    Attributes:
        min_contrast_ratio_normal: WCAG AA minimum contrast for normal text (4.5:1).
        min_contrast_ratio_large: WCAG AA minimum contrast for large text (3:1).
        large_text_threshold_pt: Point size at or above which text is "large".
        large_text_bold_threshold_pt: Point size at or above which bold text is "large".
        px_per_pt: Divisor converting CSS pixel font sizes to points.
        bold_font_pattern: Case-insensitive regex matched against font names
            to decide whether a face is bold.
        fix_fourth_corner: Sample the true bottom-right corner ``(x+w-1, y+h-1)``
            instead of the historical ``(x+h-1, y+h-1)``.
        status_fills: Overlay fill colour (with alpha) per rating status.
        label_min_width: Labels narrower than this are widened around their centre.
        label_font_size: Font size of the ratio labels, in pixels.
        label_text_color: Colour of the ratio labels.
        label_shadow_color: Colour of the 1px drop shadow behind labels.
        meta_group_name: Name of the layer group holding inline reports.
        log_level: Minimum level for the console log sink.
        max_tree_depth: Safety limit for recursive layer traversal.
    """

    min_contrast_ratio_normal: float = 4.5
    min_contrast_ratio_large: float = 3.0
    large_text_threshold_pt: float = 18
    large_text_bold_threshold_pt: float = 14
    px_per_pt: float = 1.333333333
    bold_font_pattern: str = r"(medium|bold|black)"
    fix_fourth_corner: bool = False
    status_fills: dict[str, Color] = field(
        default_factory=lambda: {
            "pass": Color(0, 179, 0, 102),
            "fail": Color(255, 0, 0, 102),
            "mixed": Color(255, 140, 0, 102),
            "unknown": Color(220, 200, 0, 51),
        }
    )
    label_min_width: float = 100
    label_font_size: int = 10
    label_text_color: Color = field(default_factory=lambda: Color(255, 255, 255))
    label_shadow_color: Color = field(default_factory=lambda: Color(0, 0, 0, 128))
    meta_group_name: str = "___CONTRAST___"
    log_level: str = "INFO"
    max_tree_depth: int = 50

    def get_status_fill(self, status: str) -> Color:
        """Return the overlay fill colour for a rating status.

        Args:
            status: One of ``'pass'``, ``'fail'``, ``'mixed'``, ``'unknown'``.

        Returns:
            The fill colour; unknown statuses fall back to the ``unknown`` fill.
        """
        return self.status_fills.get(str(status), self.status_fills["unknown"])

    def passing_threshold(self, large_text: bool) -> float:
        """Return the minimum passing contrast ratio for normal or large text."""
        return self.min_contrast_ratio_large if large_text else self.min_contrast_ratio_normal
