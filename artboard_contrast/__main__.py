"""Command-line interface for Artboard Contrast.

Usage::

    python -m artboard_contrast --document page.json --background home.png \
        --artboard Home --output report.json --image-output report.png

    python -m artboard_contrast --document page.json --all-artboards \
        --background-dir backgrounds/ --mode inline --inline-output overlays.json

With --all-artboards each artboard is rated against its own background and
the image report is written once per artboard, suffixed with its name.

"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, NoReturn

from PIL import Image

from artboard_contrast.analyzer.layer_tree import LayerDocumentError, find_artboards, load_document
from artboard_contrast.analyzer.sample_extractor import PillowRaster
from artboard_contrast.core.config import ContrastConfig
from artboard_contrast.core.logger import configure_logging
from artboard_contrast.core.runner import ContrastReportRunner


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="artboard-contrast",
        description="WCAG AA text contrast report for a design artboard",
    )
    parser.add_argument(
        "--document",
        required=True,
        help="Path to the JSON layer document of the page",
    )
    parser.add_argument(
        "--background",
        default=None,
        help="Path to the artboard rendered with all text layers hidden",
    )
    parser.add_argument(
        "--all-artboards",
        action="store_true",
        default=False,
        help="Rate every artboard of the page instead of a single one",
    )
    parser.add_argument(
        "--background-dir",
        default=None,
        help=(
            "Directory holding one background per artboard, named "
            "<artboard name>.png (used with --all-artboards)"
        ),
    )
    parser.add_argument(
        "--artboard",
        default=None,
        help="Name of the artboard to rate (default: the first artboard)",
    )
    parser.add_argument(
        "--mode",
        choices=("image", "inline"),
        default="image",
        help="Render the report as an image or as an inline layer group (default: image)",
    )
    parser.add_argument(
        "--output",
        "-o",
        default="contrast_report.json",
        help="Output path for the JSON report (default: contrast_report.json)",
    )
    parser.add_argument(
        "--image-output",
        default="contrast_report.png",
        help="Output path for the annotated image in image mode (default: contrast_report.png)",
    )
    parser.add_argument(
        "--inline-output",
        default="contrast_overlay.json",
        help="Output path for the overlay group in inline mode (default: contrast_overlay.json)",
    )
    parser.add_argument(
        "--base-image",
        default=None,
        help=(
            "Image to draw the report over in image mode, typically the artboard "
            "with text visible (default: the background; ignored with --all-artboards)"
        ),
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation level (default: 2)",
    )
    parser.add_argument(
        "--min-contrast",
        type=float,
        default=None,
        help="Override minimum contrast ratio for normal text",
    )
    parser.add_argument(
        "--min-contrast-large",
        type=float,
        default=None,
        help="Override minimum contrast ratio for large text",
    )
    parser.add_argument(
        "--fix-fourth-corner",
        action="store_true",
        default=False,
        help="Sample the true bottom-right corner of each text box",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Console log level (default: INFO)",
    )
    parser.add_argument(
        "--print",
        action="store_true",
        dest="print_report",
        help="Print the report to stdout in addition to saving",
    )
    return parser


def _fail(message: object) -> NoReturn:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _open_base_image(path: str) -> Image.Image:
    try:
        with Image.open(path) as opened:
            return opened.convert("RGBA")
    except OSError as exc:
        _fail(exc)


def _per_artboard_path(path: str | Path, artboard_name: str) -> Path:
    path = Path(path)
    return path.with_name(f"{path.stem}-{artboard_name}{path.suffix}")


def _print_summary(report: dict[str, Any]) -> None:
    summary = report["summary"]
    print(
        f"{report['artboard']}: Text layers: {summary['total']}  pass: {summary['pass']}  "
        f"fail: {summary['fail']}  mixed: {summary['mixed']}  unknown: {summary['unknown']}"
    )
    print(f"Pass rate: {summary['pass_rate']:.1f}%")


def main(argv: list[str] | None = None) -> None:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.all_artboards:
        if args.background_dir is None:
            parser.error("--all-artboards requires --background-dir")
        if args.artboard is not None:
            parser.error("--artboard cannot be combined with --all-artboards")
    elif args.background is None:
        parser.error("--background is required unless --all-artboards is given")

    config = ContrastConfig(log_level=args.log_level)
    if args.min_contrast is not None:
        config.min_contrast_ratio_normal = args.min_contrast
    if args.min_contrast_large is not None:
        config.min_contrast_ratio_large = args.min_contrast_large
    config.fix_fourth_corner = args.fix_fourth_corner

    configure_logging(config.log_level)

    try:
        document = load_document(args.document)
    except (OSError, LayerDocumentError) as exc:
        _fail(exc)

    artboards = find_artboards(document)
    if args.artboard is not None:
        artboards = [a for a in artboards if a.get("name") == args.artboard]
    if not artboards:
        target = f"'{args.artboard}'" if args.artboard else "any artboard"
        _fail(f"document does not contain {target}")
    if not args.all_artboards:
        artboards = artboards[:1]

    runner = ContrastReportRunner(config)
    overlays: list[dict[str, Any]] = []
    for artboard in artboards:
        name = str(artboard.get("name", "artboard"))
        if args.all_artboards:
            background_path = Path(args.background_dir) / f"{name}.png"
        else:
            background_path = Path(args.background)
        try:
            background = PillowRaster.open(background_path)
            result = runner.evaluate(document, artboard, background)
        except (OSError, LayerDocumentError) as exc:
            _fail(exc)

        if args.mode == "image":
            if args.all_artboards:
                base_image = background.image
                image_output = _per_artboard_path(args.image_output, name)
            else:
                base_image = background.image if args.base_image is None else _open_base_image(args.base_image)
                image_output = Path(args.image_output)
            image_path = runner.render_image(result, base_image).save(image_output)
            print(f"Image report saved to {image_path.resolve()}")
        else:
            overlays.append({"artboard": name, "group": runner.render_inline(result)})

    if overlays:
        payload = overlays if args.all_artboards else overlays[0]["group"]
        inline_path = runner.save_inline(payload, args.inline_output, indent=args.indent)
        print(f"Overlay group saved to {inline_path.resolve()}")

    output_path = runner.save_report(args.output, indent=args.indent)
    if args.print_report:
        print(runner.serialise(indent=args.indent))

    print(f"Report saved to {Path(output_path).resolve()}")
    for artboard_report in runner.reports:
        _print_summary(artboard_report.report)


if __name__ == "__main__":
    main()
