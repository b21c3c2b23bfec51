"""Cross-section library.

Profiles are closed point lists in a local (x, z) plane, x across the track
and z up, wound counter-clockwise.  They are fixed design data: only the
attachment cutout varies, with its height.
"""

from typing import List, Tuple

Point2 = Tuple[float, float]

__all__ = [
    "RAIL_PROFILE",
    "LEFT_ENDPOINT_PROFILE",
    "RIGHT_ENDPOINT_PROFILE",
    "attach_poly_profile",
    "half_width",
    "profile_height",
]

# Rail: wide foot, thin web, rounded-off head.  The undercut under the head
# is what ballast and ties clip around.
RAIL_PROFILE: Tuple[Point2, ...] = (
    (-2.4, 0.0), (2.4, 0.0), (2.4, 1.2), (0.8, 1.2), (0.8, 4.4),
    (1.6, 5.0), (1.6, 6.4), (-1.6, 6.4), (-1.6, 5.0), (-0.8, 4.4),
    (-0.8, 1.2), (-2.4, 1.2),
)

# Rail-end connectors replace the trimmed rail ends.  The left one carries
# a key ridge on top of the head, the right one the matching groove.
LEFT_ENDPOINT_PROFILE: Tuple[Point2, ...] = (
    (-3.2, 0.0), (3.2, 0.0), (3.2, 3.2), (1.6, 3.2), (1.6, 6.4),
    (0.6, 6.4), (0.6, 7.2), (-0.6, 7.2), (-0.6, 6.4), (-1.6, 6.4),
    (-1.6, 3.2), (-3.2, 3.2),
)

RIGHT_ENDPOINT_PROFILE: Tuple[Point2, ...] = (
    (-3.2, 0.0), (3.2, 0.0), (3.2, 3.2), (1.6, 3.2), (1.6, 6.4),
    (0.7, 6.4), (0.7, 5.6), (-0.7, 5.6), (-0.7, 6.4), (-1.6, 6.4),
    (-1.6, 3.2), (-3.2, 3.2),
)

# Dovetail cutout: wide at the base, narrow at the top.
_ATTACH_BASE_HALF_WIDTH = 1.9
_ATTACH_TOP_HALF_WIDTH = 1.0


def attach_poly_profile(height: float) -> List[Point2]:
    """Trapezoidal attachment cutout of the given height, base on z=0."""
    if height <= 0:
        raise ValueError(f"attach cutout height must be positive, got {height}")
    return [
        (-_ATTACH_BASE_HALF_WIDTH, 0.0),
        (_ATTACH_BASE_HALF_WIDTH, 0.0),
        (_ATTACH_TOP_HALF_WIDTH, height),
        (-_ATTACH_TOP_HALF_WIDTH, height),
    ]


def half_width(profile) -> float:
    """Largest lateral extent of a profile from its axis."""
    return max(abs(x) for x, _ in profile)


def profile_height(profile) -> float:
    return max(z for _, z in profile)
