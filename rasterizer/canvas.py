"""
canvas.py
─────────────────────────────────────────────
A small HTML-canvas-style drawing surface on top of Pillow.
  • Surface    → owns one RGBA image, hands out a 2D context, encodes PNG.
  • Context2D  → draw_image / create_pattern / fill_rect / image data.
Knows nothing about PDFs; only native Surfaces and PIL images can be drawn.
"""

from dataclasses import dataclass
from io import BytesIO
from typing import Optional, Tuple, Union

from PIL import Image, ImageDraw

from config.settings import PNG_COMPRESS_LEVEL
from rasterizer.exceptions import MissingSurface

MODE = "RGBA"
TRANSPARENT = (0, 0, 0, 0)

_REPETITIONS = ("repeat", "repeat-x", "repeat-y", "no-repeat")


@dataclass
class ImageData:
    """Unpremultiplied RGBA pixels, row-major, like the canvas ImageData."""

    width: int
    height: int
    data: bytes

    def to_image(self) -> Image.Image:
        return Image.frombytes(MODE, (self.width, self.height), bytes(self.data))


@dataclass
class Pattern:
    image: Image.Image
    repetition: str = "repeat"


class Surface:
    """Owned RGBA raster target with a lazily created 2D context."""

    def __init__(self, width: int, height: int):
        self._width = int(width)
        self._height = int(height)
        self._image: Optional[Image.Image] = Image.new(MODE, (self._width, self._height), TRANSPARENT)
        self._context: Optional["Context2D"] = None

    # ── geometry ────────────────────────────────
    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> Tuple[int, int]:
        return self._width, self._height

    @property
    def released(self) -> bool:
        return self._image is None

    @property
    def image(self) -> Image.Image:
        if self._image is None:
            raise MissingSurface("Surface has been released")
        return self._image

    def resize(self, width: int, height: int) -> None:
        """Resize in place. Like a canvas, the previous content is discarded."""
        if self._image is None:
            raise MissingSurface("Surface has been released")
        self._width = int(width)
        self._height = int(height)
        self._image = Image.new(MODE, (self._width, self._height), TRANSPARENT)

    def release(self) -> None:
        self._width = 0
        self._height = 0
        self._image = None
        self._context = None

    # ── context / export ────────────────────────
    def get_context(self, kind: str = "2d") -> Optional["Context2D"]:
        """Return the 2D context, or None for any other context kind."""
        if kind != "2d":
            return None
        if self._image is None:
            raise MissingSurface("Surface has been released")
        if self._context is None:
            self._context = Context2D(self)
        return self._context

    def to_buffer(self) -> bytes:
        """Encode the surface as PNG bytes."""
        buf = BytesIO()
        self.image.save(buf, format="PNG", compress_level=PNG_COMPRESS_LEVEL)
        return buf.getvalue()

    def __repr__(self) -> str:
        state = "released" if self.released else f"{self._width}x{self._height}"
        return f"<{type(self).__name__} {state}>"


Drawable = Union[Surface, Image.Image]


def as_pil(image: Drawable) -> Image.Image:
    """Return an RGBA PIL view of a drawable, rejecting anything else."""
    if isinstance(image, Surface):
        return image.image
    if isinstance(image, Image.Image):
        return image if image.mode == MODE else image.convert(MODE)
    raise TypeError(
        f"Image argument must be a Surface or PIL image, not {type(image).__name__}"
    )


def _composite(target: Image.Image, overlay: Image.Image, dx: int, dy: int) -> None:
    """Alpha-composite *overlay* onto *target* at (dx, dy), clipping negatives."""
    if dx < 0 or dy < 0:
        left, top = max(0, -dx), max(0, -dy)
        if left >= overlay.width or top >= overlay.height:
            return
        overlay = overlay.crop((left, top, overlay.width, overlay.height))
        dx, dy = max(dx, 0), max(dy, 0)
    if overlay.width == 0 or overlay.height == 0:
        return
    if dx >= target.width or dy >= target.height:
        return
    target.alpha_composite(overlay, dest=(dx, dy))


class Context2D:
    """Drawing context bound to one Surface; reads the surface image per call."""

    def __init__(self, surface: Surface):
        self._surface = surface
        self.fill_style: Union[str, Tuple[int, ...], Pattern] = (0, 0, 0, 255)

    @property
    def canvas(self) -> Surface:
        return self._surface

    def draw_image(self, image: Drawable, *args: float) -> None:
        """
        Composite *image* onto the surface, following the three canvas forms.

            draw_image(image, dx, dy)
            draw_image(image, dx, dy, dw, dh)
            draw_image(image, sx, sy, sw, sh, dx, dy, dw, dh)
        """
        source = as_pil(image)
        if len(args) == 2:
            dx, dy = args
            region = source
            dw, dh = source.size
        elif len(args) == 4:
            dx, dy, dw, dh = args
            region = source
        elif len(args) == 8:
            sx, sy, sw, sh, dx, dy, dw, dh = args
            region = source.crop((int(sx), int(sy), int(sx + sw), int(sy + sh)))
        else:
            raise TypeError(f"draw_image() takes 2, 4 or 8 coordinates ({len(args)} given)")

        size = (int(round(dw)), int(round(dh)))
        if size[0] <= 0 or size[1] <= 0:
            return
        if region.size != size:
            region = region.resize(size, Image.BILINEAR)
        _composite(self._surface.image, region, int(dx), int(dy))

    def create_pattern(self, image: Drawable, repetition: Optional[str] = "repeat") -> Pattern:
        repetition = repetition or "repeat"
        if repetition not in _REPETITIONS:
            raise ValueError(f"Unknown pattern repetition: {repetition!r}")
        return Pattern(as_pil(image).copy(), repetition)

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        target = self._surface.image
        if width <= 0 or height <= 0:
            return
        box = (int(x), int(y), int(x + width) - 1, int(y + height) - 1)
        layer = Image.new(MODE, target.size, TRANSPARENT)
        if isinstance(self.fill_style, Pattern):
            self._tile(layer, self.fill_style)
            mask = Image.new("L", target.size, 0)
            ImageDraw.Draw(mask).rectangle(box, fill=255)
            clipped = Image.new(MODE, target.size, TRANSPARENT)
            clipped.paste(layer, (0, 0), mask)
            layer = clipped
        else:
            ImageDraw.Draw(layer).rectangle(box, fill=self.fill_style)
        target.alpha_composite(layer)

    def get_image_data(self, x: int, y: int, width: int, height: int) -> ImageData:
        region = self._surface.image.crop((x, y, x + width, y + height))
        return ImageData(width, height, region.tobytes())

    def put_image_data(self, data: ImageData, dx: int, dy: int) -> None:
        """Replace pixels at (dx, dy) with *data*, without compositing."""
        self._surface.image.paste(data.to_image(), (int(dx), int(dy)))

    @staticmethod
    def _tile(layer: Image.Image, pattern: Pattern) -> None:
        tile = pattern.image
        if tile.width == 0 or tile.height == 0:
            return
        xs = range(0, layer.width, tile.width) if pattern.repetition in ("repeat", "repeat-x") else [0]
        ys = range(0, layer.height, tile.height) if pattern.repetition in ("repeat", "repeat-y") else [0]
        for ty in ys:
            for tx in xs:
                layer.paste(tile, (tx, ty))
