"""First-seen IIGS palette and its assembly routines.

Colors are registered in scan order; the order of first appearance is the
nibble written to the pixel stream, so it must never be reshuffled. Only the
first 16 entries are loaded into the hardware palette.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Dict, Iterator, List, Tuple

import webcolors

from .color import Color

PALETTE_SIZE = 16
PALETTE_BASE = 0xE19E00

LABEL_WIDTH = 16
SETUP_LABEL = 'SetupPalette'

ASM_SET_PALETTE_SUBROUTINE = """\
****************************************
* A= color values (0RGB)               *
* X= color/palette offset              *
*   (0-F = pal0, 10-1F = pal1, etc.)   *
****************************************
SetPaletteColor  pha                         ;save accumulator
                 txa
                 asl                         ;X*2 = real offset to color table
                 tax
                 pla
                 stal  $E19E00,x             ;palettes are stored from $E19E00-FF
                 rts                         ;yup, that's it"""


class Palette:
    """Ordered, deduplicating collection of :class:`Color`."""

    def __init__(self):
        self._positions: Dict[Color, int] = {}
        self._order: List[Color] = []

    def add_color(self, color: Color) -> None:
        if color in self._positions:
            return
        self._positions[color] = len(self._order)
        self._order.append(color)

    def colors(self) -> List[Color]:
        """The active palette: the first 16 colors in first-seen order."""
        return self._order[:PALETTE_SIZE]

    def all_colors(self) -> List[Color]:
        return list(self._order)

    def overflow(self) -> List[Color]:
        return self._order[PALETTE_SIZE:]

    def index_of(self, color: Color) -> int:
        """Position of ``color`` in the active palette.

        Colors registered after the 16th are not in the hardware palette;
        they resolve to index 0.
        """
        pos = self._positions.get(color)
        if pos is None or pos >= PALETTE_SIZE:
            return 0
        return pos

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, color) -> bool:
        return color in self._positions

    def __iter__(self) -> Iterator[Color]:
        return iter(self._order)


def asm_set_colors(palette: Palette) -> str:
    """Build the ``SetupPalette`` routine loading every active color."""
    lines = []
    for index, color in enumerate(palette.colors()):
        label = SETUP_LABEL if index == 0 else ''
        lines.append(f"{label:<{LABEL_WIDTH}} lda #${color.word}")
        lines.append(f"{'':<{LABEL_WIDTH}} ldx #${index:04X}")
        lines.append(f"{'':<{LABEL_WIDTH}} jsr SetPaletteColor")
    lines.append(f"{'':<{LABEL_WIDTH}} rts")
    return '\n'.join(lines)


@lru_cache(maxsize=4096)
def nearest_css_name(color: Color) -> str:
    """Closest CSS3 color name to the 8-bit expansion of ``color``."""
    target = color.to_rgb8()
    best = 'black'
    best_d = 10 ** 9
    for name in webcolors.names('css3'):
        rgb = webcolors.name_to_rgb(name)
        d = (target[0] - rgb.red) ** 2 + (target[1] - rgb.green) ** 2 + (target[2] - rgb.blue) ** 2
        if d < best_d:
            best_d = d
            best = name
    return best


def describe(palette: Palette) -> List[Tuple[int, Color, str]]:
    """Rows of (index, color, css name) for every registered color.

    Entries past the hardware limit are reported with index -1.
    """
    rows = []
    for pos, color in enumerate(palette):
        index = pos if pos < PALETTE_SIZE else -1
        rows.append((index, color, nearest_css_name(color)))
    return rows
