"""Placement transforms and repeated-feature layout.

Every repeated feature (ties, studs, tubes, endpoints) is first laid out as
a list of :class:`Placement` values by pure functions in this module and only
then folded through the geometry kernel with :func:`place_all`.  Angles are
degrees measured counter-clockwise about the curve centre, with 0 at the
segment start; the same convention positions trim boxes, endpoints, ties,
cutouts and studs, so parts built from the same parameters line up.

Local frame of a placement: x points radially outward, y along the track in
the direction of increasing angle, z up.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

import numpy as np
from trimesh import transformations as tf

from .brick import DIAGNOSTIC_OFFSET, STUD_PITCH

__all__ = [
    "Placement",
    "SkipRegion",
    "arc_length",
    "diagnostic_arc_length",
    "tie_count",
    "tie_angles",
    "angular_half_span",
    "arc_stud_angles",
    "endpoint_placements",
    "place",
    "place_all",
]

_Z_AXIS = [0.0, 0.0, 1.0]


@dataclass(frozen=True)
class Placement:
    """Position of a feature relative to the curve centre.

    Attributes:
        angle: Angular position along the arc (degrees)
        radial: Offset outward from the centreline (mm)
        tangential: Offset along the track at that angle (mm)
        height: Offset along z (mm)
        turn: Rotation of the feature about its own vertical axis (degrees)
    """
    angle: float = 0.0
    radial: float = 0.0
    tangential: float = 0.0
    height: float = 0.0
    turn: float = 0.0

    def matrix(self, centerline_radius: float) -> np.ndarray:
        """Homogeneous 4x4 transform for a curve of ``centerline_radius`` mm."""
        m = tf.rotation_matrix(math.radians(self.angle), _Z_AXIS)
        m = m @ tf.translation_matrix(
            [centerline_radius + self.radial, self.tangential, self.height])
        if self.turn:
            m = m @ tf.rotation_matrix(math.radians(self.turn), _Z_AXIS)
        return m


@dataclass(frozen=True)
class SkipRegion:
    """Closed angular interval in which a repeated feature is suppressed.

    Both bounds belong to the region: a stud whose angle equals a bound is
    inside it.
    """
    start: float
    end: float

    def __post_init__(self):
        if self.end < self.start:
            raise ValueError(f"skip region end {self.end} precedes start {self.start}")

    def contains(self, angle: float) -> bool:
        return self.start <= angle <= self.end

    __contains__ = contains

    @classmethod
    def around(cls, center: float, half_span: float) -> "SkipRegion":
        return cls(center - half_span, center + half_span)


def arc_length(radius: float, angle: float) -> float:
    """Centreline arc length in mm for a radius in stud units."""
    return math.radians(angle) * radius * STUD_PITCH


def diagnostic_arc_length(radius: float, angle: float) -> float:
    """Arc length figure reported with every build for print-time estimates."""
    return (angle * 2 * math.pi * radius * STUD_PITCH + DIAGNOSTIC_OFFSET) / 360.0


def tie_count(length: float, spacing: float) -> int:
    """Number of tie intervals for an arc, rounded half away from zero."""
    if spacing <= 0:
        raise ValueError(f"tie spacing must be positive, got {spacing}")
    return int(math.floor(length / spacing + 0.5))


def tie_angles(angle: float, count: int) -> List[float]:
    """Angles of the ties along an arc.

    The arc is divided into ``count`` equal intervals and a tie sits on every
    interior division; 0 and ``angle`` belong to the endpoints.  A count of 0
    or 1 places no ties.
    """
    if count < 0:
        raise ValueError(f"tie count must be non-negative, got {count}")
    return [angle * i / count for i in range(1, count)]


def angular_half_span(half_width: float, radius: float) -> float:
    """Half-angle (degrees) over which a point at ``radius`` lies within
    ``half_width`` of a radial line."""
    if radius <= 0:
        raise ValueError(f"radius must be positive, got {radius}")
    return math.degrees(math.asin(min(1.0, half_width / radius)))


def arc_stud_angles(
    row_radius: float,
    angle: float,
    skip_regions: Iterable[SkipRegion] = (),
    *,
    pitch: float = STUD_PITCH,
) -> List[float]:
    """Stud centre angles along an arc of ``row_radius`` mm.

    Studs are ``pitch`` apart along the row and centred on the arc, so the
    leftover is split evenly between both ends.  Any stud whose angle falls
    inside a skip region (bounds included) is dropped.
    """
    if row_radius <= 0:
        raise ValueError(f"row radius must be positive, got {row_radius}")
    step = math.degrees(pitch / row_radius)
    count = int(math.floor(angle / step + 1e-9))
    if count <= 0:
        return []
    first = (angle - count * step) / 2.0 + step / 2.0
    regions = list(skip_regions)
    angles = []
    for k in range(count):
        a = first + k * step
        if any(a in region for region in regions):
            continue
        angles.append(a)
    return angles


def endpoint_placements(angle: float) -> Tuple[Placement, Placement]:
    """Placements of the start and end endpoint units.

    The end unit is the start unit turned 180 degrees about its vertical
    axis, so both present their mating faces outward.
    """
    return Placement(angle=0.0), Placement(angle=angle, turn=180.0)


def place(solid, placement: Placement, centerline_radius: float):
    """Return a transformed copy of ``solid``."""
    moved = solid.copy()
    moved.apply_transform(placement.matrix(centerline_radius))
    return moved


def place_all(solid, placements: Sequence[Placement], centerline_radius: float) -> list:
    """Copies of ``solid`` at every placement."""
    return [place(solid, p, centerline_radius) for p in placements]
