"""Sample script that demonstrates the full contrast report pipeline.

This script:
1. Builds the sample layer document and background raster
2. Collects the visible text layers of the artboard
3. Rates every text layer against the background
4. Prints the JSON report to stdout
5. Saves ``sample_report.json`` and the annotated ``sample_report.png``

Usage::

    python -m examples.sample_run

Or from the project root::

    python examples/sample_run.py
"""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from artboard_contrast.analyzer.layer_tree import find_artboards
from artboard_contrast.analyzer.sample_extractor import PillowRaster
from artboard_contrast.core.config import ContrastConfig
from artboard_contrast.core.logger import configure_logging
from artboard_contrast.core.runner import ContrastReportRunner
from examples.sample_document import create_background, create_document


def main() -> None:
    """Run the full pipeline and output the report."""
    config = ContrastConfig(log_level="DEBUG")
    configure_logging(config.log_level)

    document = create_document()
    background = PillowRaster(create_background())
    artboard = find_artboards(document)[0]

    runner = ContrastReportRunner(config)
    result = runner.evaluate(document, artboard, background)

    out_dir = Path(__file__).resolve().parent
    image_path = runner.render_image(result, background.image).save(out_dir / "sample_report.png")
    report_path = runner.save_report(out_dir / "sample_report.json")

    print(runner.serialise(indent=2))
    print()
    print("-" * 60)
    for element, rating in zip(result.elements, result.results):
        print(f"  {element.name:<40} {rating.status.value:<8} {rating.note or rating.display_ratio}")
    print("-" * 60)
    print(f"Report saved to: {report_path}")
    print(f"Image saved to:  {image_path}")


if __name__ == "__main__":
    main()
