"""Exceptions raised by the conversion pipeline."""
from __future__ import annotations


class ConversionError(Exception):
    pass


class UnreadableImage(ConversionError):
    """The input path does not resolve to an image Pillow can decode."""

    def __init__(self, path, reason: str = ''):
        self.path = str(path)
        self.reason = reason
        message = f"Could not read image from {self.path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class PaletteOverflow(ConversionError):
    def __init__(self, count: int, limit: int = 16):
        self.count = count
        self.limit = limit
        super().__init__(
            f"Image uses {count} distinct colors; only the first {limit} fit the palette "
            f"(pixels of the remaining {count - limit} fall back to index 0)."
        )


class UnsupportedWidth(ConversionError):
    def __init__(self, width: int):
        self.width = width
        super().__init__(f"Image width {width} is not a multiple of 8 pixels.")
