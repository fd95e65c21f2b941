"""
settings.py
─────────────────────────────────────────────
Single source of truth for all runtime configuration.
Reads from .env file (or environment variables).
"""

from pathlib import Path
from dotenv import load_dotenv
import os

# Load .env from project root
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)

# ── Logging ──────────────────────────────────
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()
if LOG_LEVEL not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
    raise ValueError(f"LOG_LEVEL must be DEBUG, INFO, WARNING, ERROR or CRITICAL, got {LOG_LEVEL!r}")

# ── Rasterization ────────────────────────────
OUTPUT_FILENAME_TEMPLATE: str = os.environ.get("OUTPUT_FILENAME_TEMPLATE", "page-{page_number}.png")
PNG_COMPRESS_LEVEL:       int = int(os.environ.get("PNG_COMPRESS_LEVEL", "6"))

# Class names of engine paint targets the canvas shim converts on sight
_tags_str = os.environ.get("FOREIGN_ELEMENT_TAGS", "Pixmap,CanvasElement")
FOREIGN_ELEMENT_TAGS: tuple = tuple(t.strip() for t in _tags_str.split(",") if t.strip())

# ── Scraping ─────────────────────────────────
SCRAPE_URL:             str  = os.environ.get("SCRAPE_URL",             "http://127.0.0.1:5500/test.html")
SCRAPE_DONE_SELECTOR:   str  = os.environ.get("SCRAPE_DONE_SELECTOR",   "#done")
SCRAPE_IMAGE_SELECTOR:  str  = os.environ.get("SCRAPE_IMAGE_SELECTOR",  "img")
SCRAPE_ID_SELECTOR:     str  = os.environ.get("SCRAPE_ID_SELECTOR",     "[id]")
SCRAPE_HEADLESS:        bool = os.environ.get("SCRAPE_HEADLESS", "true").lower() == "true"
SCRAPE_VIEWPORT_WIDTH:  int  = int(os.environ.get("SCRAPE_VIEWPORT_WIDTH",  "1920"))
SCRAPE_VIEWPORT_HEIGHT: int  = int(os.environ.get("SCRAPE_VIEWPORT_HEIGHT", "1080"))

# ── Paths ────────────────────────────────────
_PROJECT_ROOT = Path(__file__).resolve().parent.parent

LOG_FOLDER:      Path = (_PROJECT_ROOT / os.environ.get("LOG_FOLDER",      "logs")).resolve()
SCREENSHOT_PATH: Path = (_PROJECT_ROOT / os.environ.get("SCREENSHOT_PATH", "out.png")).resolve()
