"""Track segment assembly.

:func:`segment_layout` computes where everything goes; :func:`build_segment`
folds that layout through the geometry kernel:

1. sweep the rail pair and trim both ends flat
2. place the endpoint unit at 0 and, turned around, at the arc angle
3. add the identification label (simple mode only)
4. place the ties
5. intersect everything with the untrimmed curve envelope
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import trimesh

from . import solids
from .brick import ENDPOINT_DEPTH
from .config import Calibration, load_calibration
from .endpoints import full_endpoint, label_plate
from .metadata import record_build
from .params import CurveParams
from .placement import (
    Placement,
    diagnostic_arc_length,
    endpoint_placements,
    place,
    place_all,
    tie_angles,
)
from .rails import check_curve_fits, envelope, rail_pair, trim_rails
from .text3d import label_text
from .ties import tie

logger = logging.getLogger(__name__)

__all__ = ["SegmentLayout", "TrackSegment", "segment_layout", "build_segment"]


@dataclass(frozen=True)
class SegmentLayout:
    """Where every part of a segment goes.

    Attributes:
        params: The segment parameters
        centerline_radius: Centreline radius in mm
        arc_length: Diagnostic arc length reported for the build
        tie_angles: Angles of the ties, excluding both endpoints
        endpoints: Start and end endpoint placements
        label: Label text, None in full mode
        label_placement: Where the label plate goes, None in full mode
    """
    params: CurveParams
    centerline_radius: float
    arc_length: float
    tie_angles: List[float]
    endpoints: Tuple[Placement, Placement]
    label: Optional[str] = None
    label_placement: Optional[Placement] = None

    @property
    def tie_placements(self) -> List[Placement]:
        return [Placement(angle=a) for a in self.tie_angles]


@dataclass
class TrackSegment:
    """A finished segment and the layout it was built from."""
    solid: trimesh.Trimesh
    layout: SegmentLayout
    calibration: Calibration = field(repr=False, default_factory=Calibration)

    @property
    def params(self) -> CurveParams:
        return self.layout.params

    @property
    def arc_length(self) -> float:
        return self.layout.arc_length

    @property
    def tie_angles(self) -> List[float]:
        return self.layout.tie_angles


def segment_layout(params: CurveParams, calibration: Optional[Calibration] = None) -> SegmentLayout:
    """Compute the placements of a segment without building geometry.

    Raises:
        ValueError: If the curve is too tight or too short for the endpoints
    """
    calibration = calibration or load_calibration()
    radius = params.centerline_radius
    check_curve_fits(radius, params.angle, calibration)

    label = None
    label_placement = None
    if not params.full:
        label = label_text(params.radius, params.angle)
        label_placement = Placement(angle=0.0, tangential=ENDPOINT_DEPTH)

    return SegmentLayout(
        params=params,
        centerline_radius=radius,
        arc_length=diagnostic_arc_length(params.radius, params.angle),
        tie_angles=tie_angles(params.angle, params.tie_count),
        endpoints=endpoint_placements(params.angle),
        label=label,
        label_placement=label_placement,
    )


def build_segment(params: CurveParams, calibration: Optional[Calibration] = None) -> TrackSegment:
    """Build the printable solid of one curved segment."""
    calibration = calibration or load_calibration()
    layout = segment_layout(params, calibration)
    radius = layout.centerline_radius
    angle = params.angle

    rails = rail_pair(radius, angle, calibration)
    parts = [trim_rails(rails, radius, angle, calibration)]
    parts.extend(place_all(full_endpoint(calibration), layout.endpoints, radius))
    if layout.label is not None:
        parts.append(place(label_plate(layout.label), layout.label_placement, radius))
    if layout.tie_angles:
        parts.extend(place_all(tie(params.full, calibration), layout.tie_placements, radius))
    logger.debug("R%g L%g: %d ties at %s", params.radius, angle,
                 len(layout.tie_angles), [round(a, 3) for a in layout.tie_angles])

    solid = solids.intersection(solids.union(parts), envelope(radius, angle, calibration))

    logger.info("R%g L%g arc length %.2f mm", params.radius, angle, layout.arc_length)
    record_build(solid, "segment", params,
                 arc_length=layout.arc_length,
                 tie_angles=list(layout.tie_angles),
                 label=layout.label)
    return TrackSegment(solid=solid, layout=layout, calibration=calibration)
