from __future__ import annotations

import sys
from pathlib import Path

import pytest
from PIL import Image, ImageDraw


ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from artboard_contrast.analyzer.sample_extractor import PillowRaster  # noqa: E402


@pytest.fixture
def white_raster() -> PillowRaster:
    return PillowRaster(Image.new("RGB", (100, 100), (255, 255, 255)))


@pytest.fixture
def split_raster() -> PillowRaster:
    """100x100 raster, white for x < 50 and black for x >= 50."""
    image = Image.new("RGB", (100, 100), (255, 255, 255))
    ImageDraw.Draw(image).rectangle((50, 0, 99, 99), fill=(0, 0, 0))
    return PillowRaster(image)


@pytest.fixture
def loguru_messages():
    from loguru import logger

    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
