"""Shared library modules for the IIGS image converter."""
from .color import Color, quantize_channel, quantize_pixels
from .emitter import DrawPlan, check_limits, generate_assembly, limit_violations, resolve_label
from .errors import ConversionError, PaletteOverflow, UnreadableImage, UnsupportedWidth
from .indexer import IndexedImage, IndexStream, convert, load_image, render_preview
from .palette import Palette

__all__ = [
    'Color', 'quantize_channel', 'quantize_pixels',
    'DrawPlan', 'check_limits', 'limit_violations', 'generate_assembly', 'resolve_label',
    'ConversionError', 'PaletteOverflow', 'UnreadableImage', 'UnsupportedWidth',
    'IndexedImage', 'IndexStream', 'convert', 'load_image', 'render_preview',
    'Palette',
]
