"""PDF page rasterizer with a canvas-compatibility shim."""

__version__ = '1.0.0'

from .canvas import Context2D, ImageData, Pattern, Surface
from .canvas_provider import CanvasAndContext, CanvasProvider
from .canvas_shim import AdaptingContext2D, AdaptingSurface, CanvasElementAdapter
from .exceptions import (
    EngineFailure,
    InvalidArgument,
    InvalidDimension,
    MissingSurface,
    RasterizerError,
)
from .image_writer import write_page
from .renderer import BACKENDS, PageRenderer, RenderedPage, Viewport, render, render_as_png

__all__ = [
    'BACKENDS',
    'AdaptingContext2D',
    'AdaptingSurface',
    'CanvasAndContext',
    'CanvasElementAdapter',
    'CanvasProvider',
    'Context2D',
    'EngineFailure',
    'ImageData',
    'InvalidArgument',
    'InvalidDimension',
    'MissingSurface',
    'PageRenderer',
    'Pattern',
    'RasterizerError',
    'RenderedPage',
    'Surface',
    'Viewport',
    'render',
    'render_as_png',
    'write_page',
]
