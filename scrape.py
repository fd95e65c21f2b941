"""
scrape.py
─────────────────────────────────────────────
Disposable scrape script: open the test page in headless Chromium,
wait for #done, then log what was found.

Usage:
    python scrape.py                    # log the <img> element handle
    python scrape.py --mode ids         # log element ids
    python scrape.py --mode screenshot  # 1920x1080 full-page screenshot + step timings
"""

import argparse
import asyncio

from config.settings import SCRAPE_URL, SCREENSHOT_PATH
from rasterizer.logger import get_logger
from rasterizer.scrape import capture_screenshot, scrape

log = get_logger("scrape_script")


def main() -> None:
    parser = argparse.ArgumentParser(description="Scrape the rendered test page")
    parser.add_argument(
        "--mode",
        choices=["image", "ids", "screenshot"],
        default="image",
        help="What to extract once the page signals completion (default: image)",
    )
    parser.add_argument("--url", default=SCRAPE_URL, help=f"Page to open (default: {SCRAPE_URL})")
    args = parser.parse_args()

    if args.mode == "screenshot":
        result = asyncio.run(capture_screenshot(args.url, SCREENSHOT_PATH))
    else:
        result = asyncio.run(scrape(args.url, args.mode))

    for step, elapsed in result.timings.items():
        log.info(f"  {step:<10} {elapsed} ms")


if __name__ == "__main__":
    main()
