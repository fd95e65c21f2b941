"""
exceptions.py
─────────────────────────────────────────────
Error taxonomy for the rasterizer.
  • InvalidArgument                → bad render() / CLI input, raised before any I/O
  • InvalidDimension, MissingSurface → surface lifecycle misuse
  • EngineFailure                  → anything PyMuPDF raises while loading or rendering
"""


class RasterizerError(Exception):
    """Base exception for all rasterizer errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown rasterizer error occurred."


class InvalidArgument(RasterizerError):
    """Raised when a required render argument is missing or malformed."""

    @property
    def default_message(self) -> str:
        return "Missing or invalid render argument."


class InvalidDimension(RasterizerError):
    """Raised when a surface is created or reset with a non-positive size."""

    @property
    def default_message(self) -> str:
        return "Invalid canvas size."


class MissingSurface(RasterizerError):
    """Raised when a surface is absent or has already been destroyed."""

    @property
    def default_message(self) -> str:
        return "Canvas is not specified."


class EngineFailure(RasterizerError):
    """Raised when the PDF engine fails to load a document or render a page."""

    @property
    def default_message(self) -> str:
        return "The PDF engine failed."
