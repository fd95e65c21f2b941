"""
main.py
─────────────────────────────────────────────
Entry point for the PDF → PNG rasterizer.

    python main.py <pdf_path> <output_dir> <scale>

Writes <output_dir>/page-1.png … page-N.png. Scale 1.0 renders one
pixel per PDF point.

Examples:
    python main.py input/report.pdf output 1.0
    python main.py input/report.pdf output 2     # double resolution
"""

import argparse
import time
from pathlib import Path

from rasterizer.exceptions import InvalidArgument
from rasterizer.logger import get_logger
from rasterizer.renderer import parse_scale, render

log = get_logger("main")


def _path(value: str) -> Path:
    if not value.strip():
        raise argparse.ArgumentTypeError("must not be empty")
    return Path(value)


def _scale(value: str) -> float:
    try:
        return parse_scale(value)
    except InvalidArgument as exc:
        raise argparse.ArgumentTypeError(exc.message) from exc


def main() -> None:
    # ── Parse arguments ─────────────────────────
    parser = argparse.ArgumentParser(
        description="Rasterize every page of a PDF to PNG files"
    )
    parser.add_argument("pdf_path", type=_path, help="PDF file to render")
    parser.add_argument("output_dir", type=_path, help="Directory that receives page-<N>.png")
    parser.add_argument("scale", type=_scale, help="Scale factor, 1.0 = native PDF point size")
    args = parser.parse_args()

    # ── Banner ──────────────────────────────────
    log.info("=" * 68)
    log.info("  PDF Rasterizer")
    log.info("=" * 68)
    log.info(f"  Input   : {args.pdf_path}")
    log.info(f"  Output  : {args.output_dir}")
    log.info(f"  Scale   : {args.scale}")
    log.info("=" * 68)

    start = time.time()
    try:
        pages = render(args.pdf_path, args.output_dir, args.scale)
    except InvalidArgument as exc:
        raise SystemExit(f"❌ {exc.message}")

    elapsed = round(time.time() - start, 2)
    log.info(f"✅ {len(pages)} page(s) written to {args.output_dir} in {elapsed}s")


if __name__ == "__main__":
    main()
