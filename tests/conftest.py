from __future__ import annotations

import pytest
from PIL import Image


def build_image(rows):
    """Build an RGB image from a list of rows of (r, g, b) tuples."""
    height = len(rows)
    width = len(rows[0]) if height else 0
    img = Image.new('RGB', (width, height))
    img.putdata([px for row in rows for px in row])
    return img


@pytest.fixture
def image_file(tmp_path):
    def _write(rows, name='image.png'):
        path = tmp_path / name
        build_image(rows).save(path)
        return path
    return _write


@pytest.fixture
def seventeen_colors():
    # 16 shades of red fill the palette, pure green is the 17th color
    row = [(r * 17, 0, 0) for r in range(16)] + [(0, 255, 0), (0, 255, 0), (255, 0, 0)]
    return [row]
