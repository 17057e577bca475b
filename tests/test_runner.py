from __future__ import annotations

import io
import json
import sys

import pytest
from PIL import Image

from artboard_contrast.analyzer.contrast_rater import RatingStatus
from artboard_contrast.analyzer.layer_tree import find_artboards
from artboard_contrast.analyzer.sample_extractor import PillowRaster
from artboard_contrast.core.config import ContrastConfig
from artboard_contrast.core.logger import configure_logging, timed
from artboard_contrast.core.runner import ContrastReportRunner
from examples.sample_document import create_background, create_document


@pytest.fixture
def sample():
    document = create_document()
    return document, find_artboards(document)[0], PillowRaster(create_background())


def test_sample_artboard_ratings(sample) -> None:
    document, artboard, background = sample
    result = ContrastReportRunner().evaluate(document, artboard, background)

    statuses = {e.name.split(" > ")[-1]: r.status for e, r in zip(result.elements, result.results)}
    assert statuses == {
        "Title": RatingStatus.PASS,
        "Caption": RatingStatus.FAIL,
        "Banner": RatingStatus.MIXED,
        "Legal": RatingStatus.FAIL,
        "Badge label": RatingStatus.UNKNOWN,
        "Badge count": RatingStatus.PASS,
        "Stray": RatingStatus.UNKNOWN,
    }
    assert result.report["summary"]["total"] == 7


def test_save_report_requires_evaluate(tmp_path) -> None:
    with pytest.raises(RuntimeError, match="evaluate"):
        ContrastReportRunner().save_report(tmp_path / "report.json")


def test_reports_for_several_artboards_are_saved_as_list(sample, tmp_path) -> None:
    document, artboard, background = sample
    runner = ContrastReportRunner()
    runner.evaluate(document, artboard, background)
    runner.evaluate(document, artboard, background)

    path = runner.save_report(tmp_path / "report.json")
    loaded = json.loads(path.read_text(encoding="utf-8"))
    assert isinstance(loaded, list) and len(loaded) == 2
    assert len(runner.reports) == 2


def test_render_image_annotates_a_copy(sample) -> None:
    document, artboard, background = sample
    runner = ContrastReportRunner()
    result = runner.evaluate(document, artboard, background)

    image = runner.render_image(result, background.image).image
    assert image.size == background.size
    assert image.getpixel((25, 25)) != (255, 255, 255, 255)
    assert background.image.getpixel((25, 25)) == (255, 255, 255, 255)


def test_render_inline_builds_meta_group(sample, tmp_path) -> None:
    document, artboard, background = sample
    config = ContrastConfig(meta_group_name="__report__")
    runner = ContrastReportRunner(config)
    group = runner.render_inline(runner.evaluate(document, artboard, background))

    assert group["name"] == "__report__"
    rects = [layer for layer in group["layers"] if layer["type"] == "rectangle"]
    assert len(rects) == 7

    path = runner.save_inline(group, tmp_path / "overlay.json")
    assert json.loads(path.read_text(encoding="utf-8"))["name"] == "__report__"


def test_phases_are_timed(sample, loguru_messages) -> None:
    document, artboard, background = sample
    ContrastReportRunner().evaluate(document, artboard, background)
    assert any(m.startswith("rate_elements took") for m in loguru_messages)
    assert any(m.startswith("Artboard Sign up: 7 text layers") for m in loguru_messages)


def test_timed_logs_even_when_the_call_raises(loguru_messages) -> None:
    @timed()
    def explode() -> None:
        raise KeyError("boom")

    with pytest.raises(KeyError):
        explode()
    assert any("explode took" in m for m in loguru_messages)


def test_configure_logging_replaces_default_handler(monkeypatch) -> None:
    from loguru import logger

    buffer = io.StringIO()
    monkeypatch.setattr(sys, "stderr", buffer)
    try:
        configure_logging("WARNING", colorize=False)
        logger.info("quiet")
        logger.warning("loud")
    finally:
        logger.remove()
        logger.add(sys.__stderr__)

    assert "loud" in buffer.getvalue()
    assert "quiet" not in buffer.getvalue()


def test_artboard_without_text_gives_empty_report() -> None:
    raster = PillowRaster(Image.new("RGB", (1, 1)))
    document = {"layers": [{"type": "artboard", "name": "Empty", "layers": []}]}
    result = ContrastReportRunner().evaluate(document, document["layers"][0], raster)
    assert result.results == []
    assert result.report["summary"]["pass_rate"] == 100.0
