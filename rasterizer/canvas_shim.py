"""
canvas_shim.py
─────────────────────────────────────────────
Reconciles the PDF engine's paint targets with the local canvas backend.

PyMuPDF hands back its own raster objects (``fitz.Pixmap``) and other
engines expose canvas-like "CanvasElement" objects. Neither is a Surface,
so the backend's draw_image() / create_pattern() reject them. The adapter
recognises them by class-name tag and converts them into a Surface:

  1. pixel snapshot   (2D context ``get_image_data`` or Pixmap ``samples``)
  2. encoded export   (``to_data_url()`` or Pixmap ``tobytes("png")``)
  3. otherwise blank  (logged; the draw still goes ahead)

AdaptingSurface / AdaptingContext2D apply the adapter to every draw.
"""

import base64
from io import BytesIO
from typing import Any, Iterable, Optional
from urllib.parse import unquote_to_bytes

from PIL import Image

from config.settings import FOREIGN_ELEMENT_TAGS
from rasterizer.canvas import MODE, Context2D, ImageData, Pattern, Surface
from rasterizer.logger import get_logger

log = get_logger("canvas_shim")

# (channels, has_alpha) → (PIL mode, raw decoder mode). MuPDF stores
# alpha pixmaps premultiplied.
_PIXMAP_LAYOUTS = {
    (1, False): ("L", "L"),
    (3, False): ("RGB", "RGB"),
    (4, True): ("RGBA", "RGBa"),
}


def decode_data_url(url: str) -> bytes:
    """Return the payload of a ``data:`` URL."""
    if not url.startswith("data:") or "," not in url:
        raise ValueError("Not a data URL")
    header, payload = url[5:].split(",", 1)
    if header.endswith(";base64"):
        return base64.b64decode(payload)
    return unquote_to_bytes(payload)


def _pixmap_image(candidate: Any, samples: bytes) -> Image.Image:
    width, height = int(candidate.width), int(candidate.height)
    layout = (int(candidate.n), bool(candidate.alpha))
    if layout not in _PIXMAP_LAYOUTS:
        raise ValueError(f"Unsupported pixmap layout n={layout[0]} alpha={layout[1]}")
    mode, rawmode = _PIXMAP_LAYOUTS[layout]
    stride = int(getattr(candidate, "stride", width * layout[0]))
    image = Image.frombuffer(mode, (width, height), bytes(samples), "raw", rawmode, stride, 1)
    return image.convert(MODE)


def _dimension(candidate: Any, name: str) -> int:
    """Read a non-negative pixel size, or 0 if the attribute is unusable."""
    try:
        return max(int(getattr(candidate, name, 0) or 0), 0)
    except Exception:
        return 0


class CanvasElementAdapter:
    """Converts foreign paint targets into native Surfaces; never raises."""

    def __init__(self, tags: Iterable[str] = FOREIGN_ELEMENT_TAGS):
        self._tags = frozenset(tags)

    def is_foreign(self, candidate: Any) -> bool:
        return candidate is not None and type(candidate).__name__ in self._tags

    def adapt(self, candidate: Any) -> Any:
        """Return *candidate* unchanged, or a Surface copy if it is foreign."""
        if not self.is_foreign(candidate):
            return candidate

        tag = type(candidate).__name__
        width = _dimension(candidate, "width")
        height = _dimension(candidate, "height")
        surface = Surface(width, height)

        try:
            snapshot = self._read_snapshot(candidate, width, height)
        except Exception as exc:
            log.debug(f"{tag} {width}x{height}: pixel snapshot failed ({exc})")
            snapshot = None

        if snapshot is not None:
            pixels = ImageData(snapshot.width, snapshot.height, snapshot.tobytes())
            surface.get_context("2d").put_image_data(pixels, 0, 0)
            return surface

        exported = self._read_export(candidate, tag)
        if exported is not None:
            surface.get_context("2d").draw_image(exported, 0, 0)
            return surface

        log.warning(f"{tag} {width}x{height}: no readable pixels, drawing a blank region")
        return surface

    # ── internals ───────────────────────────────
    def _read_snapshot(self, candidate: Any, width: int, height: int) -> Optional[Image.Image]:
        get_context = getattr(candidate, "get_context", None)
        if callable(get_context):
            source = get_context("2d")
            if source is None or not hasattr(source, "get_image_data"):
                return None
            data = source.get_image_data(0, 0, width, height)
            if data is None or data.data is None:
                return None
            return ImageData(data.width, data.height, bytes(data.data)).to_image()

        samples = getattr(candidate, "samples", None)
        if samples is None:
            return None
        return _pixmap_image(candidate, samples)

    def _read_export(self, candidate: Any, tag: str) -> Optional[Image.Image]:
        try:
            to_data_url = getattr(candidate, "to_data_url", None)
            tobytes = getattr(candidate, "tobytes", None)
            if callable(to_data_url):
                payload = decode_data_url(to_data_url())
            elif callable(tobytes):
                payload = tobytes("png")
            else:
                return None
            with Image.open(BytesIO(payload)) as decoded:
                return decoded.convert(MODE)
        except Exception as exc:
            log.debug(f"{tag}: encoded export failed ({exc})")
            return None


class AdaptingContext2D(Context2D):
    """Context2D that adapts image arguments before delegating."""

    def __init__(self, surface: Surface, adapter: CanvasElementAdapter):
        super().__init__(surface)
        self._adapter = adapter

    def draw_image(self, image: Any, *args: float) -> None:
        return super().draw_image(self._adapter.adapt(image), *args)

    def create_pattern(self, image: Any, repetition: Optional[str] = "repeat") -> Pattern:
        return super().create_pattern(self._adapter.adapt(image), repetition)


class AdaptingSurface(Surface):
    """Surface whose 2D context is always an AdaptingContext2D."""

    def __init__(self, width: int, height: int, adapter: Optional[CanvasElementAdapter] = None):
        super().__init__(width, height)
        self._adapter = adapter or CanvasElementAdapter()

    def get_context(self, kind: str = "2d") -> Optional[Context2D]:
        if kind == "2d" and self._context is None and not self.released:
            self._context = AdaptingContext2D(self, self._adapter)
        return super().get_context(kind)
