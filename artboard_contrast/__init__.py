"""Artboard Contrast - WCAG text contrast ratings for design artboards."""

__version__ = "1.0.0"
__author__ = "Artboard Contrast Team"

from artboard_contrast.analyzer.color_math import Color, contrast_ratio, luminance, mix
from artboard_contrast.analyzer.contrast_rater import (
    ContrastRater,
    RatingResult,
    RatingStatus,
    TextElementInfo,
    format_ratio,
)
from artboard_contrast.analyzer.layer_tree import LayerDocumentError, LayerTreeWalker
from artboard_contrast.analyzer.sample_extractor import (
    PillowRaster,
    RasterSource,
    Rectangle,
    corner_sample_points,
)
from artboard_contrast.core.config import ContrastConfig
from artboard_contrast.core.runner import ArtboardReport, ContrastReportRunner

__all__ = [
    "ContrastReportRunner",
    "ArtboardReport",
    "ContrastConfig",
    "ContrastRater",
    "RatingResult",
    "RatingStatus",
    "TextElementInfo",
    "Color",
    "Rectangle",
    "RasterSource",
    "PillowRaster",
    "LayerTreeWalker",
    "LayerDocumentError",
    "luminance",
    "mix",
    "contrast_ratio",
    "corner_sample_points",
    "format_ratio",
]
