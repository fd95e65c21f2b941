"""
renderer.py
─────────────────────────────────────────────
Drives PyMuPDF page by page:
  1. load page → viewport at the requested scale
  2. surface from the CanvasProvider, sized to the viewport
  3. engine rasterizes into its Pixmap, drawn onto the surface context
     (the adapting context converts the Pixmap on the way in)
  4. hand the surface to a sink (PNG file or in-memory buffer)
  5. release engine caches, destroy the surface
Pages are processed strictly in order, one surface alive at a time.
render_as_png() can also run the poppler backend (pdf_converter) instead.
"""

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterator, List, Optional, Tuple, Union

import fitz  # PyMuPDF

from rasterizer import pdf_converter
from rasterizer.canvas import Context2D, Surface
from rasterizer.canvas_provider import CanvasAndContext, CanvasProvider
from rasterizer.canvas_shim import AdaptingSurface
from rasterizer.exceptions import EngineFailure, InvalidArgument
from rasterizer.image_writer import write_page
from rasterizer.logger import get_logger

log = get_logger("renderer")

BACKENDS = ("mupdf", "poppler")


@dataclass(frozen=True)
class Viewport:
    page_number: int
    scale: float
    width: int
    height: int
    matrix: fitz.Matrix

    @classmethod
    def for_page(cls, page: fitz.Page, page_number: int, scale: float) -> "Viewport":
        """Pixel box of *page* at *scale*; 1.0 is one pixel per PDF point."""
        matrix = fitz.Matrix(scale, scale)
        box = (page.rect * matrix).irect
        return cls(page_number, scale, box.width, box.height, matrix)


@dataclass(frozen=True)
class RenderedPage:
    page_number: int
    path: Path
    viewport: Viewport


def parse_scale(value: Any) -> float:
    try:
        scale = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"Invalid scale factor: {value!r}") from exc
    if not math.isfinite(scale) or scale <= 0:
        raise InvalidArgument(f"Scale factor must be a positive number, got {value!r}")
    return scale


def open_document(source: Union[str, Path, bytes]) -> fitz.Document:
    """Open a PDF from a path or raw bytes; any failure becomes EngineFailure."""
    try:
        data = bytes(source) if isinstance(source, (bytes, bytearray)) else Path(source).read_bytes()
        return fitz.open(stream=data, filetype="pdf")
    except Exception as exc:
        raise EngineFailure(f"Failed to load PDF document: {exc}") from exc


def release_page_caches(page: fitz.Page) -> None:
    """Drop fonts, images and display lists PyMuPDF cached for the page."""
    fitz.TOOLS.store_shrink(100)


def draw_page(page: fitz.Page, context: Context2D, viewport: Viewport) -> None:
    try:
        pixmap = page.get_pixmap(matrix=viewport.matrix, alpha=False)
    except Exception as exc:
        raise EngineFailure(f"Page {viewport.page_number} failed to render: {exc}") from exc
    context.draw_image(pixmap, 0, 0)


class PageRenderer:
    """Renders each page of a document onto a provider-owned surface."""

    def __init__(
        self,
        provider: Optional[CanvasProvider] = None,
        cleanup: Callable[[fitz.Page], None] = release_page_caches,
    ):
        self.provider = provider or CanvasProvider(AdaptingSurface)
        self._cleanup = cleanup

    def render_to_surface(self, page: fitz.Page, viewport: Viewport) -> CanvasAndContext:
        canvas_and_context = self.provider.create(viewport.width, viewport.height)
        try:
            draw_page(page, canvas_and_context.context, viewport)
        except Exception:
            self.provider.destroy(canvas_and_context)
            raise
        return canvas_and_context

    def iter_pages(
        self,
        document: fitz.Document,
        scale: float,
        sink: Callable[[Surface, int], Any],
    ) -> Iterator[Tuple[Viewport, Any]]:
        """Yield (viewport, sink result) for pages 1..N, in order."""
        for page_number in range(1, document.page_count + 1):
            try:
                page = document.load_page(page_number - 1)
            except Exception as exc:
                raise EngineFailure(f"Failed to load page {page_number}: {exc}") from exc

            viewport = Viewport.for_page(page, page_number, scale)
            canvas_and_context = self.render_to_surface(page, viewport)
            try:
                result = sink(canvas_and_context.canvas, page_number)
            finally:
                self._cleanup(page)
                self.provider.destroy(canvas_and_context)
            yield viewport, result


def render(pdf_path: Union[str, Path], output_dir: Union[str, Path], scale: Any) -> List[RenderedPage]:
    """
    Rasterize every page of *pdf_path* into ``<output_dir>/page-<N>.png``.

    Any failure while loading or rendering stops the run but is not
    raised: it is logged and the pages written so far are returned.

    Raises
    ------
    InvalidArgument
        If any of the three arguments is missing, or *scale* is not a
        positive number. Checked before any I/O.
    """
    if not pdf_path:
        raise InvalidArgument("No PDF path provided")
    if not output_dir:
        raise InvalidArgument("No output root directory provided")
    if scale is None or scale == "":
        raise InvalidArgument("No scale factor provided")
    scale = parse_scale(scale)
    output_dir = Path(output_dir)

    renderer = PageRenderer()
    written: List[RenderedPage] = []

    def to_file(surface: Surface, page_number: int) -> Path:
        return write_page(surface, output_dir, page_number)

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        with open_document(pdf_path) as document:
            log.info(f"# PDF document loaded with {document.page_count} pages.")
            for viewport, path in renderer.iter_pages(document, scale, to_file):
                written.append(RenderedPage(viewport.page_number, path, viewport))
    except Exception as exc:
        log.error(f"❌ Rendering stopped after {len(written)} page(s): {type(exc).__name__}: {exc}")

    return written


def render_as_png(pdf_bytes: bytes, scale: Any = 1.0, backend: str = "mupdf") -> List[bytes]:
    """
    Render every page of an in-memory PDF to PNG buffers with *backend*.

    ``mupdf`` runs the PyMuPDF page pipeline, ``poppler`` runs pdf2image.
    Both encode through provider surfaces, so their outputs can be compared
    page by page. Errors propagate.
    """
    scale = parse_scale(scale)
    if backend not in BACKENDS:
        raise InvalidArgument(f"Unknown backend {backend!r}, expected one of {', '.join(BACKENDS)}")
    if backend == "poppler":
        return pdf_converter.render_pages(pdf_bytes, scale)

    renderer = PageRenderer()

    def to_buffer(surface: Surface, page_number: int) -> bytes:
        return surface.to_buffer()

    with open_document(pdf_bytes) as document:
        return [buf for _, buf in renderer.iter_pages(document, scale, to_buffer)]
