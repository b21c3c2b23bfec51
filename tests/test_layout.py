"""Layout tests for segments and ballast plates.

These check where features go without running any boolean operation.
"""

import math

import numpy as np
import pytest
from trimesh import transformations as tf

from brickrail.ballast import (
    LOWER_WIDTH,
    RECESS_WALL,
    UPPER_WIDTH,
    ballast_layout,
)
from brickrail.brick import (
    ENDPOINT_DEPTH,
    PLATE_HEIGHT,
    STUD_DIAMETER,
    STUD_PITCH,
    TUBE_OUTER_DIAMETER,
)
from brickrail.config import Calibration
from brickrail.endpoints import keyed_positions, peg_positions
from brickrail.params import BallastParams, CurveParams
from brickrail.placement import angular_half_span, endpoint_placements
from brickrail.rails import RAIL_OFFSET, check_curve_fits
from brickrail.segment import segment_layout

STUD_RADIUS = STUD_DIAMETER / 2.0


@pytest.fixture
def calibration():
    return Calibration()


def _local(stud, cutout, radius):
    """Stud centre in the frame of a tie cutout."""
    r = radius + stud.radial
    delta = math.radians(stud.angle - cutout.angle)
    return r * math.cos(delta) - radius, r * math.sin(delta)


# ---------------------------------------------------------------------------
# Segment layout
# ---------------------------------------------------------------------------

class TestSegmentLayout:

    def test_r56_l20(self, calibration):
        layout = segment_layout(CurveParams(radius=56, angle=20), calibration)
        assert layout.centerline_radius == 448.0
        assert layout.tie_angles == pytest.approx([20 / 3, 40 / 3])
        assert layout.arc_length == pytest.approx(156.56, abs=0.01)
        assert layout.label == "R56 L20"
        assert layout.label_placement.tangential == ENDPOINT_DEPTH

    def test_endpoints(self, calibration):
        start, end = segment_layout(CurveParams(radius=56, angle=20), calibration).endpoints
        assert (start.angle, start.turn) == (0.0, 0.0)
        assert (end.angle, end.turn) == (20.0, 180.0)

    def test_full_mode_has_no_label(self, calibration):
        layout = segment_layout(CurveParams(radius=120, angle=11.25, full=True), calibration)
        assert layout.label is None
        assert layout.label_placement is None
        assert len(layout.tie_angles) == 3

    def test_tie_placements(self, calibration):
        layout = segment_layout(CurveParams(radius=56, angle=20), calibration)
        assert [p.angle for p in layout.tie_placements] == layout.tie_angles

    def test_radius_too_small(self, calibration):
        with pytest.raises(ValueError, match="too small"):
            segment_layout(CurveParams(radius=4, angle=20), calibration)

    def test_arc_too_short(self, calibration):
        with pytest.raises(ValueError, match="too short"):
            segment_layout(CurveParams(radius=24, angle=2), calibration)

    def test_full_circle_fits(self, calibration):
        check_curve_fits(8 * 24, 360, calibration)


# ---------------------------------------------------------------------------
# Joints between segments
# ---------------------------------------------------------------------------

def _into_next_start(points, radius, angle):
    """Map end-unit local points into the start frame of the next segment."""
    start, end = endpoint_placements(angle)
    following = tf.rotation_matrix(math.radians(angle), [0, 0, 1]) @ start.matrix(radius)
    to_local = np.linalg.inv(following) @ end.matrix(radius)
    return tf.transform_points(np.array([[x, y, 0.0] for x, y in points]), to_local)[:, :2]


class TestJoint:

    def test_pegs_on_stud_grid(self):
        for x, y in peg_positions():
            assert (x - STUD_PITCH / 2.0) % STUD_PITCH == pytest.approx(0.0)
            assert y == STUD_PITCH / 2.0

    @pytest.mark.parametrize("radius,angle", [(120, 11.25), (24, 45), (56, 20)])
    def test_end_pegs_continue_grid(self, radius, angle):
        end_pegs = _into_next_start(peg_positions(), radius * STUD_PITCH, angle)
        start_pegs = np.array(peg_positions())
        assert sorted(end_pegs[:, 0]) == pytest.approx(sorted(start_pegs[:, 0]), abs=1e-9)
        assert end_pegs[:, 1] == pytest.approx(start_pegs[:, 1] - STUD_PITCH, abs=1e-9)

    @pytest.mark.parametrize("radius,angle", [(120, 11.25), (24, 360)])
    def test_keyed_pair_faces_across_joint(self, radius, angle):
        keyed = keyed_positions()
        taper, slot = _into_next_start([keyed["taper"], keyed["slot"]], radius * STUD_PITCH, angle)
        assert taper == pytest.approx([keyed["slot"][0], -keyed["slot"][1]], abs=1e-9)
        assert slot == pytest.approx([keyed["taper"][0], -keyed["taper"][1]], abs=1e-9)

    def test_keyed_pair_straddles_centreline(self):
        keyed = keyed_positions()
        assert keyed["taper"][0] == -keyed["slot"][0]
        assert {keyed["taper"][0], keyed["slot"][0]}.isdisjoint(x for x, _ in peg_positions())


# ---------------------------------------------------------------------------
# Ballast layout
# ---------------------------------------------------------------------------

class TestBallastLayout:

    def test_ties_match_segment(self, calibration):
        curve = CurveParams(radius=56, angle=20)
        plate = ballast_layout(BallastParams.from_curve(curve), calibration)
        segment = segment_layout(curve, calibration)
        assert plate.tie_angles == pytest.approx(segment.tie_angles)

    def test_bands(self, calibration):
        layout = ballast_layout(BallastParams(radius=56, angle=20), calibration)
        assert len(layout.bands) == 3
        centre = layout.bands[1]
        assert (centre.inner, centre.outer) == pytest.approx((-3.0, 3.0))
        for band in (layout.bands[0], layout.bands[2]):
            assert abs((band.inner + band.outer) / 2.0) == pytest.approx(RAIL_OFFSET)

    def test_rail_thickness_widens_bands(self, calibration):
        thin = ballast_layout(BallastParams(radius=56, angle=20), calibration)
        thick = ballast_layout(BallastParams(radius=56, angle=20, rail_thickness=1.0), calibration)
        thin_w = thin.bands[2].outer - thin.bands[2].inner
        thick_w = thick.bands[2].outer - thick.bands[2].inner
        assert thick_w == pytest.approx(thin_w + 1.0)

    def test_no_centre_gap(self, calibration):
        layout = ballast_layout(BallastParams(radius=56, angle=20),
                                calibration.with_overrides(center_gap=0.0))
        assert len(layout.bands) == 2

    def test_notch_clears_endpoint(self, calibration):
        layout = ballast_layout(BallastParams(radius=56, angle=20), calibration)
        inner = 448.0 - UPPER_WIDTH / 2.0
        # the endpoint block reaches ENDPOINT_DEPTH along the track at its inner corner
        assert math.radians(layout.notch_angle) * inner > ENDPOINT_DEPTH

    @pytest.mark.parametrize("num_ties", range(0, 5))
    def test_upper_studs_avoid_cutouts(self, calibration, num_ties):
        params = BallastParams(radius=56, angle=20, num_ties=num_ties)
        layout = ballast_layout(params, calibration)
        radius = layout.centerline_radius
        assert layout.upper_studs
        for stud in layout.upper_studs:
            assert stud.height == pytest.approx(2 * PLATE_HEIGHT)
            lo, hi = stud.radial - STUD_RADIUS, stud.radial + STUD_RADIUS
            assert lo > -UPPER_WIDTH / 2.0 and hi < UPPER_WIDTH / 2.0
            for band in layout.bands:
                assert hi < band.inner or lo > band.outer

            span = angular_half_span(STUD_RADIUS, radius + stud.radial)
            assert stud.angle - span > layout.notch_angle
            assert stud.angle + span < params.angle - layout.notch_angle

            for cutout in layout.cutouts:
                x, y = _local(stud, cutout, radius)
                inside_x = abs(x) < cutout.across / 2.0 + STUD_RADIUS
                inside_y = abs(y) < cutout.along / 2.0 + STUD_RADIUS
                assert not (inside_x and inside_y), (stud, cutout)

    def test_lower_studs_on_rim(self, calibration):
        layout = ballast_layout(BallastParams(radius=56, angle=20), calibration)
        assert layout.lower_studs
        for stud in layout.lower_studs:
            assert abs(stud.radial) == pytest.approx((UPPER_WIDTH + LOWER_WIDTH) / 4.0)
            assert stud.height == pytest.approx(PLATE_HEIGHT)
            assert abs(stud.radial) - STUD_RADIUS > UPPER_WIDTH / 2.0

    def test_tubes_in_recesses(self, calibration):
        layout = ballast_layout(BallastParams(radius=56, angle=20), calibration)
        assert len(layout.tubes) == 20
        for tube in layout.tubes:
            assert abs(tube.radial) + TUBE_OUTER_DIAMETER / 2.0 <= LOWER_WIDTH / 2.0 - RECESS_WALL
            assert (tube.angle == pytest.approx(layout.recess_angle / 2.0)
                    or tube.angle == pytest.approx(20 - layout.recess_angle / 2.0))

    def test_full_circle_has_one_tube_row(self, calibration):
        layout = ballast_layout(BallastParams(radius=56, angle=360), calibration)
        assert len(layout.tubes) == 10

    def test_full_ties_cut_wider(self, calibration):
        simple = ballast_layout(BallastParams(radius=56, angle=20, num_ties=3), calibration)
        full = ballast_layout(BallastParams(radius=56, angle=20, num_ties=3, full=True), calibration)
        assert full.cutouts[0].across > simple.cutouts[0].across
        assert full.stud_count < simple.stud_count

    def test_radius_too_small(self, calibration):
        with pytest.raises(ValueError, match="too small"):
            ballast_layout(BallastParams(radius=5, angle=90), calibration)
