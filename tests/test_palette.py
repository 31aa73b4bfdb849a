from iigslib.color import Color
from iigslib.palette import (
    ASM_SET_PALETTE_SUBROUTINE,
    PALETTE_SIZE,
    Palette,
    asm_set_colors,
    describe,
    nearest_css_name,
)


def test_add_color_deduplicates_in_first_seen_order():
    palette = Palette()
    for c in [Color(1, 0, 0), Color(0, 2, 0), Color(1, 0, 0), Color(0, 0, 3)]:
        palette.add_color(c)
    assert palette.colors() == [Color(1, 0, 0), Color(0, 2, 0), Color(0, 0, 3)]
    assert len(palette) == 3
    assert Color(0, 2, 0) in palette
    assert palette.index_of(Color(0, 0, 3)) == 2


def test_colors_is_bounded_but_all_colors_are_kept():
    palette = Palette()
    extra = [Color(r, 0, 0) for r in range(16)] + [Color(0, 15, 0), Color(0, 0, 15)]
    for c in extra:
        palette.add_color(c)
    assert len(palette.colors()) == PALETTE_SIZE
    assert palette.colors() == extra[:16]
    assert palette.all_colors() == extra
    assert palette.overflow() == [Color(0, 15, 0), Color(0, 0, 15)]


def test_overflow_colors_resolve_to_zero():
    palette = Palette()
    for r in range(16):
        palette.add_color(Color(r, 0, 0))
    palette.add_color(Color(0, 15, 0))
    assert palette.index_of(Color(15, 0, 0)) == 15
    assert palette.index_of(Color(0, 15, 0)) == 0
    # never registered at all
    assert palette.index_of(Color(0, 0, 9)) == 0


def test_asm_set_colors_layout():
    palette = Palette()
    palette.add_color(Color(15, 0, 0))
    palette.add_color(Color(0, 0, 0))
    assert asm_set_colors(palette).splitlines() == [
        'SetupPalette     lda #$0F00',
        '                 ldx #$0000',
        '                 jsr SetPaletteColor',
        '                 lda #$0000',
        '                 ldx #$0001',
        '                 jsr SetPaletteColor',
        '                 rts',
    ]


def test_asm_set_colors_only_loads_active_palette():
    palette = Palette()
    for r in range(16):
        palette.add_color(Color(r, 1, 1))
    palette.add_color(Color(0, 15, 15))
    text = asm_set_colors(palette)
    assert text.count('jsr SetPaletteColor') == 16
    assert 'ldx #$000F' in text
    assert '$00FF' not in text


def test_asm_set_colors_empty_palette_still_returns():
    assert asm_set_colors(Palette()).strip() == 'rts'


def test_subroutine_is_constant():
    assert ASM_SET_PALETTE_SUBROUTINE.startswith('****')
    assert 'SetPaletteColor  pha' in ASM_SET_PALETTE_SUBROUTINE
    assert 'stal  $E19E00,x' in ASM_SET_PALETTE_SUBROUTINE
    assert ASM_SET_PALETTE_SUBROUTINE.rstrip().endswith("rts                         ;yup, that's it")


def test_nearest_css_name():
    assert nearest_css_name(Color(15, 0, 0)) == 'red'
    assert nearest_css_name(Color(0, 0, 0)) == 'black'
    assert nearest_css_name(Color(15, 15, 15)) == 'white'


def test_describe_marks_overflow_entries():
    palette = Palette()
    for r in range(16):
        palette.add_color(Color(r, 0, 0))
    palette.add_color(Color(0, 15, 0))
    rows = describe(palette)
    assert len(rows) == 17
    assert rows[0] == (0, Color(0, 0, 0), 'black')
    assert rows[-1][0] == -1
    assert rows[-1][1] == Color(0, 15, 0)
