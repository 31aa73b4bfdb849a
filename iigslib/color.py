"""Apple IIGS color depth conversion.

The IIGS palette stores 4 bits per channel. Channels are scaled down with a
rounding bias (``(v * 15 + 135) >> 8``) so that 0 and 255 land exactly on 0
and 15 and the values in between round to nearest instead of truncating.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np


def quantize_channel(value: int) -> int:
    """Map an 8-bit channel value to the IIGS 4-bit range."""
    return (int(value) * 15 + 135) >> 8


def quantize_pixels(pixels: np.ndarray) -> np.ndarray:
    """Quantize an (H, W, 3|4) uint8 array; alpha is dropped."""
    arr = np.asarray(pixels)
    if arr.ndim != 3 or arr.shape[2] < 3:
        raise ValueError(f"expected an (H, W, 3) or (H, W, 4) array, got shape {arr.shape}")
    rgb = arr[:, :, :3].astype(np.int32)
    return ((rgb * 15 + 135) >> 8).astype(np.uint8)


@dataclass(frozen=True)
class Color:
    red: int
    green: int
    blue: int

    def __post_init__(self):
        for channel in (self.red, self.green, self.blue):
            if not 0 <= channel <= 15:
                raise ValueError(f"channel value {channel} outside 0-15")

    @classmethod
    def from_rgb8(cls, r: int, g: int, b: int) -> 'Color':
        return cls(quantize_channel(r), quantize_channel(g), quantize_channel(b))

    @property
    def hex(self) -> str:
        return f"{self.red:X}{self.green:X}{self.blue:X}"

    @property
    def word(self) -> str:
        # palette entries are 0RGB words
        return f"0{self.hex}"

    def to_rgb8(self) -> Tuple[int, int, int]:
        return (self.red * 17, self.green * 17, self.blue * 17)
