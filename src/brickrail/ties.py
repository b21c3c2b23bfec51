"""Crossbars (ties) between the rails.

Ties are built centred on their local origin: x across the track, y along
it, z up from the print bed.
"""

from __future__ import annotations

from typing import Tuple

import trimesh

from . import solids
from .brick import (
    FULL_TIE_BAR_WIDTH,
    FULL_TIE_PAD_SIZE,
    PLATE_HEIGHT,
    SIMPLE_TIE_SIZE,
    SOCKET_DEPTH,
    STUD_PITCH,
)
from .config import Calibration
from .primitives import peg, socket
from .rails import RAIL_OFFSET

__all__ = ["simple_tie", "full_tie", "tie", "tie_footprint"]

# Peg and socket columns of an H tie, mirrored about the centreline.
_PEG_COLUMNS = (-STUD_PITCH / 2.0, STUD_PITCH / 2.0)
_SOCKET_COLUMNS = (-1.5 * STUD_PITCH, 1.5 * STUD_PITCH)


def simple_tie() -> trimesh.Trimesh:
    """Plain rectangular spacer bar."""
    length, width, height = SIMPLE_TIE_SIZE
    return solids.box_between((-length / 2.0, -width / 2.0, 0.0), (length / 2.0, width / 2.0, height))


def full_tie(calibration: Calibration) -> trimesh.Trimesh:
    """H-shaped tie: a pad under each rail joined by a one-stud bar.

    Pegs on top of the bar and sockets in its underside follow the stud
    grid of the endpoint attach pattern, mirrored left to right.
    """
    pad_x, pad_y = FULL_TIE_PAD_SIZE
    sections = calibration.cylinder_sections
    parts = [solids.box_between((-RAIL_OFFSET, -FULL_TIE_BAR_WIDTH / 2.0, 0.0),
                                (RAIL_OFFSET, FULL_TIE_BAR_WIDTH / 2.0, PLATE_HEIGHT))]
    for side in (-1, 1):
        x = side * RAIL_OFFSET
        parts.append(solids.box_between((x - pad_x / 2.0, -pad_y / 2.0, 0.0),
                                        (x + pad_x / 2.0, pad_y / 2.0, PLATE_HEIGHT)))
    parts.extend(peg((x, 0.0, PLATE_HEIGHT), sections=sections) for x in _PEG_COLUMNS)

    cutters = [socket(calibration.socket_clearance, SOCKET_DEPTH, (x, 0.0, 0.0), sections=sections)
               for x in _SOCKET_COLUMNS]
    return solids.difference(solids.union(parts), cutters)


def tie(full: bool, calibration: Calibration) -> trimesh.Trimesh:
    return full_tie(calibration) if full else simple_tie()


def tie_footprint(full: bool) -> Tuple[float, float]:
    """(across, along) extent of a tie seen from above."""
    if full:
        pad_x, pad_y = FULL_TIE_PAD_SIZE
        return 2 * RAIL_OFFSET + pad_x, pad_y
    length, width, _ = SIMPLE_TIE_SIZE
    return length, width
