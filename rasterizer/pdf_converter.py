"""
pdf_converter.py
─────────────────────────────────────────────
The poppler backend: rasterise an in-memory PDF with pdf2image
(Poppler's pdftoppm) and encode each page through a provider surface,
so its PNGs come out the same way as the PyMuPDF pipeline's.
"""

from typing import List, Optional

from PIL import Image
from pdf2image import convert_from_bytes

from rasterizer.canvas_provider import CanvasProvider
from rasterizer.exceptions import EngineFailure
from rasterizer.logger import get_logger

log = get_logger("pdf_converter")

# PDF user space is 72 points per inch; scale 1.0 is one pixel per point.
POINTS_PER_INCH = 72


def pdf_to_images(pdf_bytes: bytes, scale: float) -> List[Image.Image]:
    """
    Rasterise every page of *pdf_bytes* with Poppler at *scale*.

    Raises
    ------
    EngineFailure
        If Poppler is missing or fails on the document.
    """
    dpi = POINTS_PER_INCH * scale
    log.info(f"Converting PDF → images with poppler at {dpi:g} DPI …")

    try:
        images: List[Image.Image] = convert_from_bytes(bytes(pdf_bytes), dpi=dpi)
    except Exception as exc:
        raise EngineFailure(f"pdf2image failed: {exc}") from exc

    log.info(f"  → {len(images)} page(s) extracted")
    return images


def render_pages(pdf_bytes: bytes, scale: float, provider: Optional[CanvasProvider] = None) -> List[bytes]:
    """Render every page with Poppler and return one PNG buffer per page."""
    provider = provider or CanvasProvider()
    buffers: List[bytes] = []

    for page_number, image in enumerate(pdf_to_images(pdf_bytes, scale), start=1):
        canvas_and_context = provider.create(image.width, image.height)
        try:
            canvas_and_context.context.draw_image(image, 0, 0)
            buffers.append(canvas_and_context.canvas.to_buffer())
            log.debug(f"Page {page_number}: {image.width}x{image.height}")
        finally:
            provider.destroy(canvas_and_context)
            image.close()

    return buffers
