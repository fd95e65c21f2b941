"""
canvas_provider.py
─────────────────────────────────────────────
The create / reset / destroy contract the page renderer allocates
surfaces through. The provider owns surface lifetime: every create()
is paired with exactly one destroy().
"""

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from rasterizer.canvas import Context2D, Surface
from rasterizer.exceptions import InvalidDimension, MissingSurface
from rasterizer.logger import get_logger

log = get_logger("canvas_provider")


@dataclass
class CanvasAndContext:
    canvas: Optional[Surface]
    context: Optional[Context2D]


def _pixel_size(width: float, height: float) -> Tuple[int, int]:
    """Validate the requested size, then truncate it to whole pixels (at least 1)."""
    if width <= 0 or height <= 0:
        raise InvalidDimension(f"Invalid canvas size: {width}x{height}")
    return max(int(width), 1), max(int(height), 1)


class CanvasProvider:
    """Allocates surfaces of the configured class and releases them explicitly."""

    def __init__(self, surface_class: Callable[[int, int], Surface] = Surface):
        self._surface_class = surface_class

    def create(self, width: float, height: float) -> CanvasAndContext:
        width, height = _pixel_size(width, height)

        canvas = self._surface_class(width, height)
        context = canvas.get_context("2d")
        log.debug(f"Created {canvas!r}")
        return CanvasAndContext(canvas, context)

    def reset(self, canvas_and_context: Optional[CanvasAndContext], width: float, height: float) -> None:
        if canvas_and_context is None or canvas_and_context.canvas is None:
            raise MissingSurface()
        width, height = _pixel_size(width, height)

        canvas_and_context.canvas.resize(width, height)

    def destroy(self, canvas_and_context: Optional[CanvasAndContext]) -> None:
        if canvas_and_context is None or canvas_and_context.canvas is None:
            raise MissingSurface()

        # Zero the size and drop both references so reuse fails fast
        canvas_and_context.canvas.release()
        canvas_and_context.canvas = None
        canvas_and_context.context = None
