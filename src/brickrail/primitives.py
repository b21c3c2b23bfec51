"""Reusable feature builders: pegs, sockets, studs, tubes and sectors.

Every feature is built at the origin of its own local frame; callers move
it into place with :mod:`brickrail.placement`.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np
import trimesh
from shapely.geometry import Polygon

from . import solids
from .brick import (
    CUT_MARGIN,
    PEG_DIAMETER,
    STUD_DIAMETER,
    STUD_HEIGHT,
    TAPER_SOCKET_RADII,
    TUBE_INNER_DIAMETER,
    TUBE_OUTER_DIAMETER,
)
from .placement import Placement, place_all
from .profiles import attach_poly_profile

__all__ = [
    "peg",
    "socket",
    "taper_socket",
    "attach_poly",
    "stud",
    "grip_tube",
    "annular_sector",
    "sector_solid",
    "stud_row",
]


def _rooted_cylinder(radius, height, base, sections):
    x, y, z = base
    return solids.cylinder(radius, height + CUT_MARGIN, (x, y, z - CUT_MARGIN), sections)


def peg(base=(0.0, 0.0, 0.0), *, height: float = STUD_HEIGHT, sections: int = 32) -> trimesh.Trimesh:
    """Male connector peg standing on ``base``.

    The peg is rooted CUT_MARGIN below ``base`` so a union with the surface
    it stands on never meets coplanar faces.
    """
    return _rooted_cylinder(PEG_DIAMETER / 2.0, height, base, sections)


def socket(clearance: float, depth: float, base=(0.0, 0.0, 0.0), *, sections: int = 32) -> trimesh.Trimesh:
    """Cutting tool for a female peg socket opening downward from ``base``.

    The tool reaches CUT_MARGIN below ``base`` so it breaks through the
    underside cleanly.
    """
    radius = PEG_DIAMETER / 2.0 + clearance
    x, y, z = base
    return solids.cylinder(radius, depth + CUT_MARGIN, (x, y, z - CUT_MARGIN), sections)


def taper_socket(tolerance: float, height: float, base=(0.0, 0.0, 0.0), *,
                 sections: int = 32) -> trimesh.Trimesh:
    """Cutting tool for the tapered socket, narrow at the bottom."""
    bottom, top = TAPER_SOCKET_RADII
    x, y, z = base
    return solids.frustum(bottom + tolerance, top + tolerance, height + 2 * CUT_MARGIN,
                          (x, y, z - CUT_MARGIN), sections)


def attach_poly(height: float, length: float, center_x: float = 0.0) -> trimesh.Trimesh:
    """Cutting tool for the trapezoidal attach slot running along y.

    The slot opens on the underside and passes through ``length`` plus a
    margin at both ends.
    """
    profile = [(x, z - CUT_MARGIN) for x, z in attach_poly_profile(height + CUT_MARGIN)]
    tool = solids.extrude_profile(profile, length + 2 * CUT_MARGIN)
    tool.apply_translation([center_x, -CUT_MARGIN, 0.0])
    return tool


def stud(base=(0.0, 0.0, 0.0), *, sections: int = 32) -> trimesh.Trimesh:
    """Brick-standard stud standing on ``base``, rooted like :func:`peg`."""
    return _rooted_cylinder(STUD_DIAMETER / 2.0, STUD_HEIGHT, base, sections)


def grip_tube(height: float, base=(0.0, 0.0, 0.0), *, sections: int = 32) -> trimesh.Trimesh:
    """Anti-stud tube that grips a stud pushed into it from below."""
    return solids.tube(TUBE_OUTER_DIAMETER / 2.0, TUBE_INNER_DIAMETER / 2.0, height, base, sections)


def annular_sector(inner_radius: float, outer_radius: float, angle: float,
                   start: float = 0.0, *, segment_length: float = 1.0) -> Polygon:
    """2D ring segment between two radii and two angles (degrees).

    A 360 degree sector is a full ring; an inner radius of 0 gives a
    circular sector or disc.
    """
    if inner_radius < 0 or outer_radius <= inner_radius:
        raise ValueError(f"sector radii must satisfy 0 <= {inner_radius} < {outer_radius}")
    if not 0 < angle <= 360:
        raise ValueError(f"sector angle must be in (0, 360], got {angle}")

    n = max(2, int(math.ceil(math.radians(angle) * outer_radius / segment_length)))
    if angle >= 360:
        n = max(n, 16)
        outer = solids.circle_polygon(outer_radius, sections=n)
        if inner_radius == 0:
            return outer
        inner = solids.circle_polygon(inner_radius, sections=n)
        return Polygon(outer.exterior.coords, [inner.exterior.coords])

    t = np.radians(start + angle * np.arange(n + 1) / n)
    outer = np.column_stack([outer_radius * np.cos(t), outer_radius * np.sin(t)])
    if inner_radius == 0:
        return Polygon(np.vstack([[[0.0, 0.0]], outer]))
    inner = np.column_stack([inner_radius * np.cos(t), inner_radius * np.sin(t)])[::-1]
    return Polygon(np.vstack([outer, inner]))


def sector_solid(inner_radius: float, outer_radius: float, angle: float, z0: float, z1: float,
                 start: float = 0.0, *, segment_length: float = 1.0) -> trimesh.Trimesh:
    """Annular sector extruded between two heights."""
    shape = annular_sector(inner_radius, outer_radius, angle, start, segment_length=segment_length)
    return solids.extrude(shape, z0, z1)


def stud_row(placements: Sequence[Placement], centerline_radius: float, *,
             sections: int = 32) -> list:
    """Studs at every placement; each placement's height is the stud base."""
    return place_all(stud(sections=sections), placements, centerline_radius)
