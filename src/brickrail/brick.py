"""Dimensions of the 8 mm stud brick standard and of the track built on it.

All lengths are millimetres.  Curve radii elsewhere in the package are given
in stud units and converted with :data:`STUD_PITCH`.
"""

# Stud grid.  One stud unit is the centre-to-centre distance of two studs.
STUD_PITCH = 8.0
STUD_DIAMETER = 4.8
STUD_HEIGHT = 1.7
PLATE_HEIGHT = 3.2

# Anti-stud tubes on the underside of plates grip the studs below them.
TUBE_OUTER_DIAMETER = 6.51
TUBE_INNER_DIAMETER = 4.8

# Track connector ("attach") pattern.  Positions are measured along the
# connector's local axis; the pattern is symmetric about ATTACH_ORIGIN and
# every position lies on the stud grid, so an attach block also seats on a
# baseplate.
PEG_DIAMETER = 4.9
ATTACH_POSITIONS = (-4.0, 12.0, 20.0, 28.0, 36.0, 52.0)
ATTACH_ORIGIN = 24.0
# Index into ATTACH_POSITIONS of the two keyed features.  The trapezoid
# cutout and the tapered socket sit on opposite sides of ATTACH_ORIGIN and
# seat a separate joining clip that fits only one way round.
ATTACH_POLY_INDEX = 2
TAPER_SOCKET_INDEX = 3
TAPER_SOCKET_RADII = (1.0, 1.9)
SOCKET_DEPTH = 1.8

# Track cross-section.
GAUGE = 34.4
TRACK_WIDTH = 8 * STUD_PITCH
ENDPOINT_DEPTH = STUD_PITCH

# Ties (crossbars).
SIMPLE_TIE_SIZE = (35.0, 6.0, 1.5)
FULL_TIE_BAR_WIDTH = STUD_PITCH
FULL_TIE_PAD_SIZE = (STUD_PITCH, 2 * STUD_PITCH)
DEFAULT_TIE_SPACING = 6 * STUD_PITCH

# Label plate in front of the start endpoint.
LABEL_HEIGHT = 4.0
LABEL_DEPTH = 0.6

# Diagnostic arc length: (angle * 2 * pi * radius * STUD_PITCH + offset) / 360
DIAGNOSTIC_OFFSET = 64.0

# Overshoot applied to every cutting tool so no boolean sees coplanar faces.
CUT_MARGIN = 0.05


def attach_offsets():
    """Return ATTACH_POSITIONS relative to ATTACH_ORIGIN."""
    return tuple(p - ATTACH_ORIGIN for p in ATTACH_POSITIONS)
