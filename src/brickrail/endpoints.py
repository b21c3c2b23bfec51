"""Endpoint units: rail-end connectors plus the attach block between them.

One endpoint unit serves both ends of a curve.  At the start it is used as
built; at the end it is turned 180 degrees about its vertical axis, so the
end of one segment presents the mirror image of the next segment's start.

Local frame: x across the track (0 on the centreline), y into the segment
(the mating face is y = 0), z up from the print bed.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

import trimesh

from . import solids
from .brick import (
    ATTACH_POLY_INDEX,
    CUT_MARGIN,
    ENDPOINT_DEPTH,
    LABEL_DEPTH,
    LABEL_HEIGHT,
    PLATE_HEIGHT,
    SOCKET_DEPTH,
    STUD_PITCH,
    TAPER_SOCKET_INDEX,
    attach_offsets,
)
from .config import Calibration
from .primitives import attach_poly, peg, socket, taper_socket
from .profiles import LEFT_ENDPOINT_PROFILE, RAIL_PROFILE, RIGHT_ENDPOINT_PROFILE, half_width
from .rails import RAIL_OFFSET
from .text3d import text_solid, text_width

__all__ = [
    "ATTACH_HALF_WIDTH",
    "LABEL_MAX_WIDTH",
    "peg_positions",
    "keyed_positions",
    "attach_block",
    "rail_connector",
    "full_endpoint",
    "label_height",
    "label_plate",
]

ATTACH_HALF_WIDTH = max(abs(x) for x in attach_offsets()) + STUD_PITCH / 2.0

# Margin of the label plate around the text
_LABEL_BORDER = 1.0
# Clearance between the label plate and the rail feet
_LABEL_GAP = 0.5

LABEL_MAX_WIDTH = 2 * (RAIL_OFFSET - half_width(RAIL_PROFILE) - _LABEL_BORDER - _LABEL_GAP)


def peg_positions() -> List[Tuple[float, float]]:
    """Local (x, y) centres of the pegs and their sockets."""
    keyed = (ATTACH_POLY_INDEX, TAPER_SOCKET_INDEX)
    y = ENDPOINT_DEPTH / 2.0
    return [(x, y) for i, x in enumerate(attach_offsets()) if i not in keyed]


def keyed_positions() -> Dict[str, Tuple[float, float]]:
    """Local (x, y) centres of the tapered socket and the trapezoid slot."""
    offsets = attach_offsets()
    y = ENDPOINT_DEPTH / 2.0
    return {"taper": (offsets[TAPER_SOCKET_INDEX], y), "slot": (offsets[ATTACH_POLY_INDEX], y)}


def attach_block(calibration: Calibration) -> trimesh.Trimesh:
    """Connector block spanning both rails.

    Pegs on top and sockets underneath sit at the attach positions, half a
    stud in from the mating face, so the block continues the stud grid of
    its neighbour.  The two centre positions carry a keyed pair instead: a
    tapered socket on one side of the centreline and a trapezoid slot on
    the other, both open underneath.  They locate a separate joining clip.
    Because the end unit is turned around, every joint lines up the taper
    socket of one segment with the slot of the other, so a clip with a
    tapered pin on one half and a trapezoid key on the other seats only one
    way round.
    """
    sections = calibration.cylinder_sections
    block = solids.box_between((-ATTACH_HALF_WIDTH, 0.0, 0.0),
                               (ATTACH_HALF_WIDTH, ENDPOINT_DEPTH, PLATE_HEIGHT))
    pegs = [peg((x, y, PLATE_HEIGHT), sections=sections) for x, y in peg_positions()]
    cutters = [socket(calibration.socket_clearance, SOCKET_DEPTH, (x, y, 0.0), sections=sections)
               for x, y in peg_positions()]

    keyed = keyed_positions()
    taper_x, taper_y = keyed["taper"]
    cutters.append(taper_socket(calibration.taper_tolerance, PLATE_HEIGHT,
                                (taper_x, taper_y, 0.0), sections=sections))
    cutters.append(attach_poly(SOCKET_DEPTH, ENDPOINT_DEPTH, keyed["slot"][0]))

    return solids.difference(solids.union([block] + pegs), cutters)


def rail_connector(profile, height_offset: float, x: float) -> trimesh.Trimesh:
    """Rail-end connector extruded over the endpoint depth."""
    mesh = solids.extrude_profile(profile, ENDPOINT_DEPTH)
    mesh.apply_translation([x, 0.0, height_offset])
    return mesh


def full_endpoint(calibration: Calibration) -> trimesh.Trimesh:
    """Left connector, right connector and attach block as one solid."""
    left = rail_connector(LEFT_ENDPOINT_PROFILE, calibration.left_height_offset, -RAIL_OFFSET)
    right = rail_connector(RIGHT_ENDPOINT_PROFILE, calibration.right_height_offset, RAIL_OFFSET)
    return solids.union([left, right, attach_block(calibration)])


def label_height(text: str) -> float:
    """Text height for ``text``: LABEL_HEIGHT, reduced for labels that
    would otherwise reach the rails."""
    unit_width = text_width(text, 1.0)
    if unit_width == 0:
        return LABEL_HEIGHT
    return min(LABEL_HEIGHT, LABEL_MAX_WIDTH / unit_width)


def label_plate(text: str) -> trimesh.Trimesh:
    """Thin plate with raised text, centred on x and starting at y = 0.

    The plate reaches one border width behind y = 0 so it fuses with the
    endpoint it is placed against.
    """
    height = label_height(text)
    width = text_width(text, height)
    half = width / 2.0 + _LABEL_BORDER
    plate = solids.box_between((-half, -_LABEL_BORDER, 0.0),
                               (half, height + _LABEL_BORDER, LABEL_DEPTH))
    glyphs = text_solid(text, height, depth=LABEL_DEPTH + CUT_MARGIN,
                        base_z=LABEL_DEPTH - CUT_MARGIN)
    if glyphs is None:
        return plate
    glyphs.apply_translation([-width / 2.0, 0.0, 0.0])
    return solids.union([plate, glyphs])
