"""Merlin assembly generation for an indexed image.

Every function here takes fully resolved data (palette, index stream,
label) and returns a block of text; ``generate_assembly`` joins the blocks.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .errors import ConversionError, PaletteOverflow, UnsupportedWidth
from .indexer import IndexedImage, IndexStream
from .palette import ASM_SET_PALETTE_SUBROUTINE, PALETTE_SIZE, asm_set_colors

DEFAULT_LABEL = 'PIC'
MAX_LABEL_LENGTH = 16

SCREEN_BASE = 0xE12000
LINE_STRIDE = 0xA0
PIXELS_PER_WRITE = 4
DIGITS_PER_HEX_LINE = 20
HEX_INDENT = ' ' * 8


def resolve_label(label: Optional[str]) -> str:
    if label is None:
        return DEFAULT_LABEL
    return label[:MAX_LABEL_LENGTH]


def limit_violations(indexed: IndexedImage) -> List[ConversionError]:
    """Conditions the draw routine does not handle, in reporting order."""
    problems: List[ConversionError] = []
    if len(indexed.palette) > PALETTE_SIZE:
        problems.append(PaletteOverflow(len(indexed.palette), PALETTE_SIZE))
    if indexed.width % 8:
        problems.append(UnsupportedWidth(indexed.width))
    return problems


def check_limits(indexed: IndexedImage) -> None:
    """Raise for images the draw routine cannot reproduce faithfully."""
    problems = limit_violations(indexed)
    if problems:
        raise problems[0]


@dataclass(frozen=True)
class DrawPlan:
    """Counters and cursor arithmetic used by the generated draw routine."""
    width: int
    length: int

    @classmethod
    def for_stream(cls, stream: IndexStream) -> 'DrawPlan':
        return cls(stream.width, len(stream))

    @property
    def total_writes(self) -> int:
        return self.length // PIXELS_PER_WRITE

    @property
    def writes_per_line(self) -> int:
        return self.width // PIXELS_PER_WRITE

    @property
    def bytes_per_line(self) -> int:
        # two pixels per byte
        return self.width // 2

    @property
    def line_advance(self) -> int:
        return LINE_STRIDE - self.bytes_per_line

    def simulate(self, start: int = 0) -> Tuple[List[Tuple[int, int]], int]:
        """Run the routine's state machine.

        Returns the ``(graphic_offset, screen_offset)`` pair of every 2-byte
        write plus the number of line wraps taken. The screen cursor is a
        16-bit value, as on the machine.
        """
        writes: List[Tuple[int, int]] = []
        wraps = 0
        if self.total_writes <= 0:
            return writes, wraps
        curpos = start & 0xFFFF
        offset = 0
        total_left = self.total_writes
        line_left = self.writes_per_line
        while True:
            writes.append((offset, curpos))
            total_left -= 1
            if total_left == 0:
                return writes, wraps
            offset += 2
            curpos = (curpos + 2) & 0xFFFF
            line_left -= 1
            if line_left == 0:
                curpos = (curpos + self.line_advance) & 0xFFFF
                line_left = self.writes_per_line
                wraps += 1


def asm_header(label: str) -> str:
    return '\n'.join([
        '* Merlin-compatible ASM generated by iigstool',
        '*',
        '* Use cadius INDENTFILE to fix the indentation on this file',
        '*',
        '* Initialize SHR graphics mode and set the scanline control bytes to palette 0 before',
        f'* calling DRAW{label} to draw the graphics',
    ])


def asm_draw(stream: IndexStream, label: str) -> str:
    """Data-driven draw routine copying the packed block to SHR memory."""
    plan = DrawPlan.for_stream(stream)
    total = plan.total_writes
    per_line = plan.writes_per_line
    return f"""\
* Draw {label} at screen offset X
]curpos          ds    2
]totalWritesLeft ds    2
]lineWritesLeft  ds    2


DRAW{label}    stx ]curpos
                        lda #${total:04X}        ; number of writes: {total}
                        sta ]totalWritesLeft
                        lda #${per_line:04X}   ; number of writes per line: {per_line}
                        stal ]lineWritesLeft
                        ldy #$0000                  ; Y is current graphic offset of write

:drawLoop               lda {label},Y      ; load graphic data with graphical offset
                        ldx ]curpos
                        stal ${SCREEN_BASE:x},x              ; write to screen

                        dec ]totalWritesLeft        ; decrement number of writes left to do
                        beq :drawFinish

                        iny
                        iny
                        inc ]curpos
                        inc ]curpos
                        dec ]lineWritesLeft         ; decrement number of writes left on this line
                        beq :nextline
                        jmp :drawLoop

:nextline               lda ]curpos
                        adc #${LINE_STRIDE:02X}                    ; go to next line
                        sbc #{plan.bytes_per_line}       ; number of bytes written per line (2 pixels/byte)
                        sta ]curpos
                        lda #${per_line:04X}   ; reset number of writes per line
                        sta ]lineWritesLeft
                        jmp :drawLoop

:drawFinish             rts"""


def asm_hex_data(stream: IndexStream, label: str) -> str:
    """Packed pixel data, 20 nibbles (10 bytes) per ``hex`` line."""
    digits = stream.hex
    lines = []
    for pos in range(0, len(digits), DIGITS_PER_HEX_LINE):
        prefix = label if not lines else ''
        lines.append(f"{prefix}{HEX_INDENT}hex {digits[pos:pos + DIGITS_PER_HEX_LINE]}")
    return '\n'.join(lines)


def hex_data_digits(text: str) -> str:
    """Concatenate the digits of every ``hex`` directive in ``text``."""
    digits = []
    for line in text.splitlines():
        parts = line.split()
        if 'hex' in parts:
            digits.extend(parts[parts.index('hex') + 1:])
    return ''.join(digits)


def generate_assembly(indexed: IndexedImage, label: Optional[str] = None) -> str:
    name = resolve_label(label)
    blocks = [
        asm_header(name),
        asm_draw(indexed.stream, name),
        asm_set_colors(indexed.palette),
        ASM_SET_PALETTE_SUBROUTINE,
        asm_hex_data(indexed.stream, name),
    ]
    return '\n\n'.join(blocks) + '\n'
