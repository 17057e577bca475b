from __future__ import annotations

import copy
import json
import sys

import pytest
from loguru import logger
from PIL import Image

from artboard_contrast.__main__ import main
from examples.sample_document import create_background, create_document


@pytest.fixture(autouse=True)
def _restore_loguru():
    yield
    logger.remove()
    logger.add(sys.__stderr__)


@pytest.fixture
def inputs(tmp_path):
    document_path = tmp_path / "page.json"
    document_path.write_text(json.dumps(create_document()), encoding="utf-8")
    background_path = tmp_path / "bg.png"
    create_background().save(background_path)
    return document_path, background_path


def test_image_mode_writes_report_and_png(inputs, tmp_path, capsys) -> None:
    document_path, background_path = inputs
    main([
        "--document", str(document_path),
        "--background", str(background_path),
        "--output", str(tmp_path / "report.json"),
        "--image-output", str(tmp_path / "report.png"),
        "--log-level", "ERROR",
    ])

    report = json.loads((tmp_path / "report.json").read_text(encoding="utf-8"))
    assert report["artboard"] == "Sign up"
    assert report["summary"]["total"] == 7
    with Image.open(tmp_path / "report.png") as image:
        assert image.size == (400, 300)

    out = capsys.readouterr().out
    assert "Text layers: 7" in out
    assert "pass: 2" in out


def test_inline_mode_writes_overlay_group(inputs, tmp_path) -> None:
    document_path, background_path = inputs
    main([
        "--document", str(document_path),
        "--background", str(background_path),
        "--artboard", "Sign up",
        "--mode", "inline",
        "--output", str(tmp_path / "report.json"),
        "--inline-output", str(tmp_path / "overlay.json"),
        "--log-level", "ERROR",
    ])

    group = json.loads((tmp_path / "overlay.json").read_text(encoding="utf-8"))
    assert group["name"] == "___CONTRAST___"
    assert not (tmp_path / "contrast_report.png").exists()


def test_threshold_overrides_change_ratings(inputs, tmp_path) -> None:
    document_path, background_path = inputs
    main([
        "--document", str(document_path),
        "--background", str(background_path),
        "--output", str(tmp_path / "report.json"),
        "--image-output", str(tmp_path / "report.png"),
        "--min-contrast", "1.0",
        "--log-level", "ERROR",
    ])

    report = json.loads((tmp_path / "report.json").read_text(encoding="utf-8"))
    assert report["metadata"]["thresholds"]["normal_text"] == 1.0
    assert report["summary"]["fail"] == 0


def test_unknown_artboard_exits_with_error(inputs, tmp_path, capsys) -> None:
    document_path, background_path = inputs
    with pytest.raises(SystemExit) as excinfo:
        main([
            "--document", str(document_path),
            "--background", str(background_path),
            "--artboard", "Missing",
            "--output", str(tmp_path / "report.json"),
            "--log-level", "ERROR",
        ])
    assert excinfo.value.code == 1
    assert "'Missing'" in capsys.readouterr().err


def test_missing_background_exits_with_error(inputs, tmp_path, capsys) -> None:
    document_path, _ = inputs
    with pytest.raises(SystemExit) as excinfo:
        main([
            "--document", str(document_path),
            "--background", str(tmp_path / "nope.png"),
            "--log-level", "ERROR",
        ])
    assert excinfo.value.code == 1
    assert capsys.readouterr().err.startswith("Error:")


@pytest.fixture
def page(tmp_path):
    document = create_document()
    second = copy.deepcopy(document["layers"][0])
    second["name"] = "Sign in"
    document["layers"].append(second)
    document_path = tmp_path / "page.json"
    document_path.write_text(json.dumps(document), encoding="utf-8")

    background_dir = tmp_path / "backgrounds"
    background_dir.mkdir()
    create_background().save(background_dir / "Sign up.png")
    create_background().save(background_dir / "Sign in.png")
    return document_path, background_dir


def test_all_artboards_inline_saves_one_group_per_artboard(page, tmp_path, capsys) -> None:
    document_path, background_dir = page
    main([
        "--document", str(document_path),
        "--all-artboards",
        "--background-dir", str(background_dir),
        "--mode", "inline",
        "--output", str(tmp_path / "report.json"),
        "--inline-output", str(tmp_path / "overlays.json"),
        "--log-level", "ERROR",
    ])

    overlays = json.loads((tmp_path / "overlays.json").read_text(encoding="utf-8"))
    assert [entry["artboard"] for entry in overlays] == ["Sign up", "Sign in"]
    assert all(entry["group"]["name"] == "___CONTRAST___" for entry in overlays)
    assert all(len(entry["group"]["layers"]) > 7 for entry in overlays)

    reports = json.loads((tmp_path / "report.json").read_text(encoding="utf-8"))
    assert [r["artboard"] for r in reports] == ["Sign up", "Sign in"]
    out = capsys.readouterr().out
    assert "Sign up: Text layers: 7" in out
    assert "Sign in: Text layers: 7" in out


def test_all_artboards_image_mode_writes_an_image_per_artboard(page, tmp_path) -> None:
    document_path, background_dir = page
    main([
        "--document", str(document_path),
        "--all-artboards",
        "--background-dir", str(background_dir),
        "--output", str(tmp_path / "report.json"),
        "--image-output", str(tmp_path / "report.png"),
        "--log-level", "ERROR",
    ])

    assert (tmp_path / "report-Sign up.png").exists()
    assert (tmp_path / "report-Sign in.png").exists()
    assert not (tmp_path / "report.png").exists()


def test_all_artboards_requires_background_dir(page, tmp_path) -> None:
    document_path, _ = page
    with pytest.raises(SystemExit) as excinfo:
        main(["--document", str(document_path), "--all-artboards", "--log-level", "ERROR"])
    assert excinfo.value.code == 2


def test_all_artboards_with_missing_background_exits_with_error(page, tmp_path, capsys) -> None:
    document_path, background_dir = page
    (background_dir / "Sign in.png").unlink()
    with pytest.raises(SystemExit) as excinfo:
        main([
            "--document", str(document_path),
            "--all-artboards",
            "--background-dir", str(background_dir),
            "--output", str(tmp_path / "report.json"),
            "--image-output", str(tmp_path / "report.png"),
            "--log-level", "ERROR",
        ])
    assert excinfo.value.code == 1
    assert "Sign in.png" in capsys.readouterr().err
