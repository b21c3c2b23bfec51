"""Parameter sets for track segments and ballast plates.

Parameters are explicit values handed to every builder; nothing in the
package reads module-level state set by a caller.
"""

import math
from dataclasses import dataclass
from typing import Optional

from .brick import DEFAULT_TIE_SPACING, STUD_PITCH
from .placement import tie_count as _tie_count


def _check_curve(radius: float, angle: float) -> None:
    if radius <= 0:
        raise ValueError(f"radius must be positive, got {radius}")
    if not 0 < angle <= 360:
        raise ValueError(f"angle must be in (0, 360], got {angle}")


@dataclass(frozen=True)
class CurveParams:
    """Parameters of one curved track segment.

    Attributes:
        radius: Centreline radius in stud units
        angle: Arc angle in degrees, measured from the segment start
        full: Build connector-bearing H ties instead of simple bars and
            omit the identification label
        tie_spacing: Target distance between ties along the centreline (mm)
        ties: Explicit tie count; derived from tie_spacing when None
    """
    radius: float
    angle: float
    full: bool = False
    tie_spacing: float = DEFAULT_TIE_SPACING
    ties: Optional[int] = None

    def __post_init__(self):
        _check_curve(self.radius, self.angle)
        if self.tie_spacing <= 0:
            raise ValueError(f"tie_spacing must be positive, got {self.tie_spacing}")
        if self.ties is not None and self.ties < 0:
            raise ValueError(f"ties must be non-negative, got {self.ties}")

    @property
    def centerline_radius(self) -> float:
        """Centreline radius in millimetres."""
        return self.radius * STUD_PITCH

    @property
    def arc_length(self) -> float:
        """Centreline arc length in millimetres."""
        return math.radians(self.angle) * self.centerline_radius

    @property
    def tie_count(self) -> int:
        """Number of tie intervals along the arc."""
        if self.ties is not None:
            return self.ties
        return _tie_count(self.arc_length, self.tie_spacing)


@dataclass(frozen=True)
class BallastParams:
    """Parameters of one ballast (bed) plate.

    ``num_ties`` has the meaning of :attr:`CurveParams.tie_count`: a plate
    built with the tie count of a segment gets its tie cutouts at exactly
    that segment's tie angles.

    Attributes:
        radius: Centreline radius in stud units
        angle: Arc angle in degrees
        num_ties: Number of tie intervals
        rail_thickness: Extra width added to each rail clearance band (mm)
        full: Size tie cutouts for H ties rather than simple bars
    """
    radius: float
    angle: float
    num_ties: int = 0
    rail_thickness: float = 0.0
    full: bool = False

    def __post_init__(self):
        _check_curve(self.radius, self.angle)
        if self.num_ties < 0:
            raise ValueError(f"num_ties must be non-negative, got {self.num_ties}")
        if self.num_ties > max(self.max_ties, 1):
            raise ValueError(
                f"num_ties {self.num_ties} leaves less than 4 studs between cutouts "
                f"(at most {self.max_ties} for a {self.arc_length:.1f} mm arc)"
            )
        if self.rail_thickness < 0:
            raise ValueError(f"rail_thickness must be non-negative, got {self.rail_thickness}")

    @classmethod
    def from_curve(cls, curve: CurveParams, rail_thickness: float = 0.0) -> "BallastParams":
        """Plate matching a track segment's radius, angle and ties."""
        return cls(radius=curve.radius, angle=curve.angle, num_ties=curve.tie_count,
                   rail_thickness=rail_thickness, full=curve.full)

    @property
    def centerline_radius(self) -> float:
        return self.radius * STUD_PITCH

    @property
    def arc_length(self) -> float:
        return math.radians(self.angle) * self.centerline_radius

    @property
    def max_ties(self) -> int:
        return int(self.arc_length // (4 * STUD_PITCH))
