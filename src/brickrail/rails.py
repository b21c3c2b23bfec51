"""Swept rail pair, end trimming and the curve envelope."""

from __future__ import annotations

import math

import trimesh

from . import solids
from .brick import ENDPOINT_DEPTH, GAUGE, STUD_PITCH, TRACK_WIDTH
from .config import Calibration
from .placement import endpoint_placements, place
from .primitives import sector_solid
from .profiles import RAIL_PROFILE, half_width, profile_height

__all__ = [
    "RAIL_OFFSET",
    "RAIL_HEIGHT",
    "ENVELOPE_HEIGHT",
    "rail_offset",
    "sweep_sections",
    "check_curve_fits",
    "rail_pair",
    "trim_box",
    "trim_rails",
    "envelope",
]


def rail_offset(gauge: float = GAUGE, profile=RAIL_PROFILE) -> float:
    """Distance from the centreline to each rail's axis."""
    return gauge / 2.0 + half_width(profile)


RAIL_OFFSET = rail_offset()
RAIL_HEIGHT = profile_height(RAIL_PROFILE)
# Tall enough for the raised connectors and pegs on top of the rails.
ENVELOPE_HEIGHT = RAIL_HEIGHT + 2 * STUD_PITCH / 4


def sweep_sections(radius: float, angle: float, segment_length: float) -> int:
    """Subdivisions for an arc so no step is longer than ``segment_length``.

    The count grows with radius, which keeps the absolute chord error of
    large curves as small as that of tight ones.
    """
    return max(2, int(math.ceil(math.radians(angle) * radius / segment_length)))


def check_curve_fits(centerline_radius: float, angle: float, calibration: Calibration) -> None:
    """Reject curves too tight or too short for the fixed-size features.

    Raises:
        ValueError: If the inner edge of the track reaches the curve centre or
            the inner rail is too short to hold both trimmed ends
    """
    inner = centerline_radius - TRACK_WIDTH / 2.0
    if inner <= 0:
        raise ValueError(
            f"radius {centerline_radius / STUD_PITCH:g} is too small: the track is "
            f"{TRACK_WIDTH / STUD_PITCH:g} studs wide"
        )
    inner_rail = math.radians(angle) * (centerline_radius - RAIL_OFFSET - half_width(RAIL_PROFILE))
    needed = 2 * max(calibration.trim_depth, ENDPOINT_DEPTH)
    if angle < 360 and inner_rail <= needed:
        raise ValueError(
            f"arc of {angle:g} degrees is too short: inner rail {inner_rail:.1f} mm, "
            f"endpoints need {needed:.1f} mm"
        )


def rail_pair(centerline_radius: float, angle: float, calibration: Calibration) -> trimesh.Trimesh:
    """Both rails swept over the arc, untrimmed."""
    outer_radius = centerline_radius + RAIL_OFFSET
    sections = sweep_sections(outer_radius + half_width(RAIL_PROFILE), angle,
                              calibration.segment_length)
    rails = [solids.sweep_arc(RAIL_PROFILE, centerline_radius + side * RAIL_OFFSET, angle, sections)
             for side in (-1, 1)]
    return solids.concatenate(rails)


def trim_box(calibration: Calibration) -> trimesh.Trimesh:
    """Cutting box that removes ``trim_depth`` of both rails at a start end.

    The box is oversized across and above the rails so it clears them at any
    radius, but reaches back past the end face only as far as it cuts
    forward, so on a near-full circle it stays inside the far end's own trim.
    """
    reach = RAIL_OFFSET + half_width(RAIL_PROFILE) + STUD_PITCH
    return solids.box_between((-reach, -calibration.trim_depth, -STUD_PITCH),
                              (reach, calibration.trim_depth, RAIL_HEIGHT + STUD_PITCH))


def trim_rails(rails: trimesh.Trimesh, centerline_radius: float, angle: float,
               calibration: Calibration) -> trimesh.Trimesh:
    """Cut the rail ends flat using the endpoint placements."""
    tool = trim_box(calibration)
    cutters = [place(tool, p, centerline_radius) for p in endpoint_placements(angle)]
    return solids.difference(rails, cutters)


def envelope(centerline_radius: float, angle: float, calibration: Calibration) -> trimesh.Trimesh:
    """Footprint of the curve swept over its exact angle."""
    half = TRACK_WIDTH / 2.0
    return sector_solid(centerline_radius - half, centerline_radius + half, angle,
                        0.0, ENVELOPE_HEIGHT, segment_length=calibration.segment_length)
