"""Tests for parameter validation."""

import math

import pytest

from brickrail.params import BallastParams, CurveParams


class TestCurveParams:

    def test_defaults(self):
        params = CurveParams(radius=56, angle=20)
        assert params.full is False
        assert params.tie_spacing == 48.0
        assert params.centerline_radius == 448.0
        assert params.arc_length == pytest.approx(math.radians(20) * 448.0)

    @pytest.mark.parametrize("radius", [0, -1])
    def test_radius_must_be_positive(self, radius):
        with pytest.raises(ValueError, match="radius"):
            CurveParams(radius=radius, angle=20)

    @pytest.mark.parametrize("angle", [0, -5, 360.5])
    def test_angle_range(self, angle):
        with pytest.raises(ValueError, match="angle"):
            CurveParams(radius=56, angle=angle)

    def test_full_circle_allowed(self):
        assert CurveParams(radius=56, angle=360).angle == 360

    def test_tie_spacing_must_be_positive(self):
        with pytest.raises(ValueError, match="tie_spacing"):
            CurveParams(radius=56, angle=20, tie_spacing=0)

    def test_frozen(self):
        params = CurveParams(radius=56, angle=20)
        with pytest.raises(AttributeError):
            params.radius = 10


class TestBallastParams:

    def test_from_curve_keeps_tie_count(self):
        curve = CurveParams(radius=56, angle=20, full=True)
        ballast = BallastParams.from_curve(curve, rail_thickness=0.5)
        assert ballast.num_ties == curve.tie_count == 3
        assert ballast.full is True
        assert ballast.rail_thickness == 0.5

    def test_max_ties(self):
        # 156.4 mm of arc leaves room for four 32 mm intervals
        assert BallastParams(radius=56, angle=20).max_ties == 4

    def test_too_many_ties_rejected(self):
        with pytest.raises(ValueError, match="num_ties"):
            BallastParams(radius=56, angle=20, num_ties=5)

    def test_one_interval_always_allowed(self):
        params = BallastParams(radius=24, angle=5, num_ties=1)
        assert params.max_ties == 0

    def test_negative_values_rejected(self):
        with pytest.raises(ValueError):
            BallastParams(radius=56, angle=20, num_ties=-1)
        with pytest.raises(ValueError):
            BallastParams(radius=56, angle=20, rail_thickness=-0.1)
