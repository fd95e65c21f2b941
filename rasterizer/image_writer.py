"""
image_writer.py
─────────────────────────────────────────────
Responsible for one thing: persist a finished Surface as
<output_dir>/page-<N>.png. Existing files are overwritten.
"""

from pathlib import Path
from typing import Union

from config.settings import OUTPUT_FILENAME_TEMPLATE
from rasterizer.canvas import Surface
from rasterizer.logger import get_logger

log = get_logger("image_writer")


def page_path(output_dir: Union[str, Path], page_number: int) -> Path:
    return Path(output_dir) / OUTPUT_FILENAME_TEMPLATE.format(page_number=page_number)


def write_page(surface: Surface, output_dir: Union[str, Path], page_number: int) -> Path:
    """
    Encode *surface* as PNG and write it for *page_number*.

    Raises
    ------
    OSError
        Whatever the filesystem raises; nothing is retried.
    """
    path = page_path(output_dir, page_number)
    path.write_bytes(surface.to_buffer())
    log.info(f"Page {page_number} rendered and saved as {path}")
    return path
