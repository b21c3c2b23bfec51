"""
Raised identification text for printed parts.

Text is drawn with a simple block font whose glyphs are rectangles on a
5 x 7 grid, so every stroke is at least one grid cell wide and prints
cleanly at small sizes.

Example usage:

    from brickrail.text3d import text_solid, label_text

    label = text_solid(label_text(56, 20), height=4.0, depth=0.6)
"""

from __future__ import annotations

from shapely.geometry import box as shapely_box
from shapely.ops import unary_union

from . import solids

# Grid dimensions for block font (5 wide x 7 tall)
CHAR_WIDTH = 5
CHAR_HEIGHT = 7

# Block font definition: each character is a list of rectangles
# Rectangle format: (x, y, width, height) in grid units
# Origin is bottom-left of character cell
BLOCK_FONT = {
    '0': [(0, 0, 1, 7), (4, 0, 1, 7), (1, 6, 3, 1), (1, 0, 3, 1)],
    '1': [(2, 0, 1, 7), (1, 5, 1, 1), (1, 0, 3, 1)],
    '2': [(0, 6, 5, 1), (4, 3, 1, 3), (0, 3, 5, 1), (0, 0, 1, 3), (0, 0, 5, 1)],
    '3': [(0, 6, 5, 1), (4, 0, 1, 7), (1, 3, 3, 1), (0, 0, 5, 1)],
    '4': [(0, 3, 1, 4), (0, 3, 5, 1), (4, 0, 1, 7)],
    '5': [(0, 6, 5, 1), (0, 3, 1, 3), (0, 3, 5, 1), (4, 0, 1, 3), (0, 0, 5, 1)],
    '6': [(0, 0, 1, 7), (1, 6, 4, 1), (1, 3, 4, 1), (4, 0, 1, 3), (1, 0, 4, 1)],
    '7': [(0, 6, 5, 1), (4, 0, 1, 6)],
    '8': [(0, 0, 1, 7), (4, 0, 1, 7), (1, 6, 3, 1), (1, 3, 3, 1), (1, 0, 3, 1)],
    '9': [(0, 3, 1, 4), (4, 0, 1, 7), (1, 6, 3, 1), (1, 3, 3, 1), (0, 0, 4, 1)],
    'L': [(0, 0, 1, 7), (1, 0, 4, 1)],
    'R': [(0, 0, 1, 7), (1, 6, 3, 1), (4, 3, 1, 4), (1, 3, 3, 1), (3, 0, 1, 3)],
    '.': [(2, 0, 1, 1)],
    '-': [(1, 3, 3, 1)],
    ' ': [],
}

# Drawn for characters missing from the font
_PLACEHOLDER = [(1, 1, 3, 5)]


def label_text(radius, angle) -> str:
    """Identification label for a curve, e.g. ``R56 L20``."""
    return f"R{radius:g} L{angle:g}"


def text_width(text, height=5.0, spacing=1.0):
    """Total width of rendered text in mm."""
    if not text:
        return 0.0
    scale = height / CHAR_HEIGHT
    return len(text) * CHAR_WIDTH * scale + (len(text) - 1) * spacing * scale


def text_shape(text, height=5.0, spacing=1.0):
    """Text outline as a shapely geometry.

    Args:
        text: String to render
        height: Character height in mm
        spacing: Gap between characters in grid units

    Returns:
        Polygon or MultiPolygon with its bottom-left corner at the origin,
        or None for text with no strokes
    """
    scale = height / CHAR_HEIGHT
    advance = (CHAR_WIDTH + spacing) * scale

    cells = []
    for i, char in enumerate(text.upper()):
        x_offset = i * advance
        for x, y, w, h in BLOCK_FONT.get(char, _PLACEHOLDER):
            cells.append(shapely_box(x_offset + x * scale, y * scale,
                                     x_offset + (x + w) * scale, (y + h) * scale))
    if not cells:
        return None
    return unary_union(cells)


def text_solid(text, height=5.0, depth=1.0, spacing=1.0, base_z=0.0):
    """Create extruded 3D text standing on ``base_z``.

    Returns:
        trimesh solid, or None for text with no strokes
    """
    shape = text_shape(text, height, spacing)
    if shape is None:
        return None
    return solids.extrude(shape, base_z, base_z + depth)
