"""Decode an image, quantize it and resolve every pixel to a palette nibble."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from .color import Color, quantize_pixels
from .errors import UnreadableImage
from .palette import Palette


@dataclass
class IndexStream:
    width: int
    height: int
    indices: List[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.indices)

    @property
    def hex(self) -> str:
        return ''.join(f"{i:X}" for i in self.indices)

    def rows(self) -> List[str]:
        """One line of hex digits per source row, for visual inspection."""
        digits = self.hex
        if self.width <= 0:
            return []
        return [digits[pos:pos + self.width] for pos in range(0, len(digits), self.width)]

    @classmethod
    def from_hex(cls, digits: str, width: int) -> 'IndexStream':
        indices = [int(ch, 16) for ch in digits if not ch.isspace()]
        height = len(indices) // width if width else 0
        return cls(width, height, indices)


@dataclass
class IndexedImage:
    palette: Palette
    stream: IndexStream

    @property
    def width(self) -> int:
        return self.stream.width

    @property
    def height(self) -> int:
        return self.stream.height


ImageSource = Union[str, Path, Image.Image, np.ndarray]


def load_image(path: Union[str, Path]) -> np.ndarray:
    """Decode ``path`` into an (H, W, 4) RGBA uint8 array."""
    try:
        with Image.open(path) as img:
            rgba = img.convert('RGBA')
    except FileNotFoundError as exc:
        raise UnreadableImage(path, 'file not found') from exc
    except UnidentifiedImageError as exc:
        raise UnreadableImage(path, 'unrecognised image format') from exc
    except OSError as exc:
        raise UnreadableImage(path, str(exc)) from exc
    return np.asarray(rgba, dtype=np.uint8)


def _as_array(source: ImageSource) -> np.ndarray:
    if isinstance(source, Image.Image):
        return np.asarray(source.convert('RGBA'), dtype=np.uint8)
    if isinstance(source, np.ndarray):
        return source
    return load_image(source)


def index_pixels(quantized: np.ndarray) -> IndexedImage:
    """Walk a quantized (H, W, 3) grid in row-major order.

    The palette and the stream are filled in the same pass: each pixel is
    registered first and then looked up in the active (16 entry) palette.
    """
    height, width = quantized.shape[:2]
    palette = Palette()
    stream = IndexStream(width, height)
    for row in quantized.tolist():
        for r, g, b in row:
            color = Color(r, g, b)
            palette.add_color(color)
            stream.indices.append(palette.index_of(color))
    return IndexedImage(palette, stream)


def convert(source: ImageSource) -> IndexedImage:
    """Load (if needed), quantize and index an image."""
    pixels = _as_array(source)
    return index_pixels(quantize_pixels(pixels))


def render_preview(indexed: IndexedImage) -> Image.Image:
    """Rebuild the image as the IIGS would show it from palette and nibbles."""
    active = indexed.palette.colors()
    lut = [c.to_rgb8() for c in active] or [(0, 0, 0)]
    img = Image.new('RGB', (indexed.width, indexed.height))
    img.putdata([lut[i] if i < len(lut) else lut[0] for i in indexed.stream.indices])
    return img
