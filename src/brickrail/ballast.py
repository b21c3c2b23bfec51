"""Two-layer ballast plate that a curved segment clips into.

The lower layer is a wide plate with a rim stud row on each side and
shallow recesses under both ends, where a row of grip tubes locks onto the
studs of whatever the plate is joined to.  The upper layer is as wide as
the track and has the cutouts that seat the segment: a centre gap, one band
under each rail, a notch at each end for the endpoint blocks and one pocket
per tie.  Studs fill whatever room is left on the upper layer.

Ties are laid out with :func:`~brickrail.placement.tie_angles`, the same
function the segment assembler uses, so a plate built for ``n`` ties has
its pockets exactly where a segment with a tie count of ``n`` has its ties.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import trimesh

from . import solids
from .brick import (
    CUT_MARGIN,
    ENDPOINT_DEPTH,
    PLATE_HEIGHT,
    SOCKET_DEPTH,
    STUD_DIAMETER,
    STUD_PITCH,
    TRACK_WIDTH,
    TUBE_OUTER_DIAMETER,
)
from .config import Calibration, load_calibration
from .metadata import record_build
from .params import BallastParams
from .placement import (
    Placement,
    SkipRegion,
    angular_half_span,
    arc_stud_angles,
    place_all,
    tie_angles,
)
from .primitives import grip_tube, sector_solid, stud_row
from .profiles import RAIL_PROFILE, half_width
from .rails import RAIL_OFFSET
from .ties import tie_footprint

logger = logging.getLogger(__name__)

__all__ = [
    "LOWER_WIDTH",
    "UPPER_WIDTH",
    "RadialBand",
    "TieCutout",
    "BallastLayout",
    "BallastPlate",
    "ballast_layout",
    "build_ballast",
]

LOWER_WIDTH = 12 * STUD_PITCH
UPPER_WIDTH = TRACK_WIDTH
RECESS_DEPTH = SOCKET_DEPTH
RECESS_WALL = 1.2

_STUD_RADIUS = STUD_DIAMETER / 2.0
_TUBE_RADIUS = TUBE_OUTER_DIAMETER / 2.0


@dataclass(frozen=True)
class RadialBand:
    """Band of the upper layer removed along the whole arc.

    ``inner`` and ``outer`` are offsets from the centreline in mm.
    """
    inner: float
    outer: float

    def __post_init__(self):
        if self.outer <= self.inner:
            raise ValueError(f"band outer {self.outer} must exceed inner {self.inner}")

    def overlaps(self, lo: float, hi: float) -> bool:
        """True if the offset interval [lo, hi] touches the band."""
        return lo <= self.outer and hi >= self.inner


@dataclass(frozen=True)
class TieCutout:
    """Rectangular pocket for one tie, long side radial."""
    placement: Placement
    across: float
    along: float

    @property
    def angle(self) -> float:
        return self.placement.angle

    def radial_span(self, centerline_radius: float) -> Tuple[float, float]:
        """Offsets from the centreline that the pocket reaches.

        The outer corners of a straight pocket stick out past its outer
        edge, so the outward reach is measured at the corners.
        """
        half = self.across / 2.0
        outer = math.hypot(centerline_radius + half, self.along / 2.0) - centerline_radius
        return -half, outer


@dataclass(frozen=True)
class BallastLayout:
    """Placements and cutouts of a ballast plate, without geometry.

    Attributes:
        params: The plate parameters
        centerline_radius: Centreline radius in mm
        tie_angles: Angles of the tie pockets
        notch_angle: Angular depth of the upper layer end notches
        recess_angle: Angular depth of the lower layer end recesses
        bands: Centre gap and rail bands of the upper layer
        cutouts: Tie pockets of the upper layer
        lower_studs: Rim studs of the lower layer
        upper_studs: Studs of the upper layer
        tubes: Grip tubes inside the end recesses
    """
    params: BallastParams
    centerline_radius: float
    tie_angles: List[float]
    notch_angle: float
    recess_angle: float
    bands: Tuple[RadialBand, ...]
    cutouts: Tuple[TieCutout, ...]
    lower_studs: Tuple[Placement, ...] = ()
    upper_studs: Tuple[Placement, ...] = ()
    tubes: Tuple[Placement, ...] = ()

    @property
    def stud_count(self) -> int:
        return len(self.lower_studs) + len(self.upper_studs)


@dataclass
class BallastPlate:
    """A finished ballast plate and the layout it was built from."""
    solid: trimesh.Trimesh
    layout: BallastLayout
    calibration: Calibration = field(repr=False, default_factory=Calibration)

    @property
    def params(self) -> BallastParams:
        return self.layout.params

    @property
    def tie_angles(self) -> List[float]:
        return self.layout.tie_angles

    @property
    def stud_count(self) -> int:
        return self.layout.stud_count


def _grid_offsets(limit: float, radius: float) -> List[float]:
    """Stud grid offsets (half a pitch off the centreline) whose feature of
    ``radius`` stays within ``limit`` of the centreline."""
    offsets = []
    u = STUD_PITCH / 2.0
    while u + radius <= limit + 1e-9:
        offsets.extend((-u, u))
        u += STUD_PITCH
    return sorted(offsets)


def _rail_bands(params: BallastParams, calibration: Calibration) -> Tuple[RadialBand, ...]:
    bands = []
    if calibration.center_gap > 0:
        bands.append(RadialBand(-calibration.center_gap / 2.0, calibration.center_gap / 2.0))
    reach = half_width(RAIL_PROFILE) + calibration.rail_clearance + params.rail_thickness / 2.0
    for side in (-1.0, 1.0):
        bands.append(RadialBand(side * RAIL_OFFSET - reach, side * RAIL_OFFSET + reach))
    return tuple(sorted(bands, key=lambda b: b.inner))


def _end_regions(angle: float, depth: float, half_span: float) -> List[SkipRegion]:
    return [SkipRegion(0.0, min(angle, depth + half_span)),
            SkipRegion(max(0.0, angle - depth - half_span), angle)]


def _upper_stud_angles(offset: float, radius: float, angle: float, notch_angle: float,
                       cutouts: Sequence[TieCutout]) -> List[float]:
    row = radius + offset
    stud_span = angular_half_span(_STUD_RADIUS, row)
    regions = _end_regions(angle, notch_angle, stud_span)
    for cutout in cutouts:
        lo, hi = cutout.radial_span(radius)
        if offset + _STUD_RADIUS >= lo and offset - _STUD_RADIUS <= hi:
            span = angular_half_span(cutout.along / 2.0 + _STUD_RADIUS, row)
            regions.append(SkipRegion.around(cutout.angle, span))
    return arc_stud_angles(row, angle, regions)


def ballast_layout(params: BallastParams,
                   calibration: Optional[Calibration] = None) -> BallastLayout:
    """Lay out a ballast plate.

    Raises:
        ValueError: If the plate would reach the curve centre
    """
    calibration = calibration or load_calibration()
    radius = params.centerline_radius
    angle = params.angle
    if radius - LOWER_WIDTH / 2.0 <= 0:
        raise ValueError(
            f"radius {params.radius} too small for a {LOWER_WIDTH:g} mm ballast plate")

    ties = tie_angles(angle, params.num_ties)
    bands = _rail_bands(params, calibration)
    across, along = tie_footprint(params.full)
    clearance = 2 * calibration.tie_clearance
    cutouts = tuple(TieCutout(Placement(angle=a), across + clearance, along + clearance)
                    for a in ties)

    inner_edge = radius - UPPER_WIDTH / 2.0
    notch_angle = math.degrees(math.atan2(ENDPOINT_DEPTH + calibration.notch_margin, inner_edge))
    recess_angle = math.degrees(STUD_PITCH / radius)

    upper = []
    for u in _grid_offsets(UPPER_WIDTH / 2.0, _STUD_RADIUS):
        if any(b.overlaps(u - _STUD_RADIUS, u + _STUD_RADIUS) for b in bands):
            continue
        upper.extend(Placement(angle=a, radial=u, height=2 * PLATE_HEIGHT)
                     for a in _upper_stud_angles(u, radius, angle, notch_angle, cutouts))

    rim = UPPER_WIDTH / 2.0 + (LOWER_WIDTH - UPPER_WIDTH) / 4.0
    lower = []
    for u in (-rim, rim):
        row = radius + u
        regions = _end_regions(angle, 0.0, angular_half_span(_STUD_RADIUS, row))
        lower.extend(Placement(angle=a, radial=u, height=PLATE_HEIGHT)
                     for a in arc_stud_angles(row, angle, regions))

    tube_angles = [recess_angle / 2.0]
    if angle < 360:
        tube_angles.append(angle - recess_angle / 2.0)
    tubes = tuple(Placement(angle=a, radial=u)
                  for a in tube_angles
                  for u in _grid_offsets(LOWER_WIDTH / 2.0 - RECESS_WALL, _TUBE_RADIUS))

    layout = BallastLayout(
        params=params,
        centerline_radius=radius,
        tie_angles=ties,
        notch_angle=notch_angle,
        recess_angle=recess_angle,
        bands=bands,
        cutouts=cutouts,
        lower_studs=tuple(lower),
        upper_studs=tuple(upper),
        tubes=tubes,
    )
    logger.debug("R%g L%g ballast: %d tie pockets, %d + %d studs, %d tubes",
                 params.radius, angle, len(cutouts), len(lower), len(upper), len(tubes))
    return layout


def _full_span(inner: float, outer: float, z0: float, z1: float, angle: float,
               radius: float, segment_length: float) -> trimesh.Trimesh:
    """Sector covering the whole arc plus a sliver past both ends."""
    margin = math.degrees(CUT_MARGIN / radius)
    if angle + 2 * margin >= 360:
        return sector_solid(inner, outer, 360.0, z0, z1, segment_length=segment_length)
    return sector_solid(inner, outer, angle + 2 * margin, z0, z1, -margin,
                        segment_length=segment_length)


def _end_sectors(inner: float, outer: float, z0: float, z1: float, angle: float,
                 depth: float, segment_length: float) -> List[trimesh.Trimesh]:
    margin = math.degrees(CUT_MARGIN / inner)
    start = sector_solid(inner, outer, depth + margin, z0, z1, -margin,
                         segment_length=segment_length)
    end = sector_solid(inner, outer, depth + margin, z0, z1, angle - depth,
                       segment_length=segment_length)
    return [start, end]


def build_ballast(params: BallastParams,
                  calibration: Optional[Calibration] = None) -> BallastPlate:
    """Build the printable solid of a ballast plate."""
    calibration = calibration or load_calibration()
    layout = ballast_layout(params, calibration)
    radius = layout.centerline_radius
    angle = params.angle
    seg = calibration.segment_length
    sections = calibration.cylinder_sections
    top = 2 * PLATE_HEIGHT

    lower = sector_solid(radius - LOWER_WIDTH / 2.0, radius + LOWER_WIDTH / 2.0,
                         angle, 0.0, PLATE_HEIGHT, segment_length=seg)
    upper = sector_solid(radius - UPPER_WIDTH / 2.0, radius + UPPER_WIDTH / 2.0,
                         angle, PLATE_HEIGHT, top, segment_length=seg)

    recess_half = LOWER_WIDTH / 2.0 - RECESS_WALL
    cutters = _end_sectors(radius - recess_half, radius + recess_half,
                           -CUT_MARGIN, RECESS_DEPTH, angle, layout.recess_angle, seg)
    notch_half = UPPER_WIDTH / 2.0 + CUT_MARGIN
    cutters += _end_sectors(radius - notch_half, radius + notch_half,
                            PLATE_HEIGHT, top + CUT_MARGIN, angle, layout.notch_angle, seg)
    for band in layout.bands:
        cutters.append(_full_span(radius + band.inner, radius + band.outer,
                                  PLATE_HEIGHT, top + CUT_MARGIN, angle, radius, seg))
    for cutout in layout.cutouts:
        pocket = solids.box_between((-cutout.across / 2.0, -cutout.along / 2.0, PLATE_HEIGHT),
                                    (cutout.across / 2.0, cutout.along / 2.0, top + CUT_MARGIN))
        pocket.apply_transform(cutout.placement.matrix(radius))
        cutters.append(pocket)

    body = solids.difference(solids.union([lower, upper]), cutters)
    extras = stud_row(layout.lower_studs + layout.upper_studs, radius, sections=sections)
    extras += place_all(grip_tube(RECESS_DEPTH + CUT_MARGIN, sections=sections),
                        layout.tubes, radius)
    solid = solids.union([body] + extras)

    logger.info("R%g L%g ballast: %d studs, %d tie pockets",
                params.radius, angle, layout.stud_count, len(layout.cutouts))
    record_build(solid, "ballast", params,
                 tie_angles=list(layout.tie_angles),
                 stud_count=layout.stud_count)
    return BallastPlate(solid=solid, layout=layout, calibration=calibration)
