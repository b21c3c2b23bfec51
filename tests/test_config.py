"""Tests for calibration presets and the standard curve catalog."""

import pytest

from brickrail.catalog import segments_per_circle, standard_curves
from brickrail.config import (
    BRICKRAIL_CALIBRATION,
    Calibration,
    clear_cache,
    list_presets,
    load_calibration,
)


@pytest.fixture(autouse=True)
def fresh_cache(monkeypatch):
    monkeypatch.delenv(BRICKRAIL_CALIBRATION, raising=False)
    clear_cache()
    yield
    clear_cache()


def _write(path, body):
    path.write_text("schema: brickrail-calibration-v1\npresets:\n" + body)
    return path


# ---------------------------------------------------------------------------
# Bundled presets
# ---------------------------------------------------------------------------

class TestBundledPresets:

    def test_presets_listed(self):
        assert {"default", "loose"} <= set(list_presets())

    def test_default_values(self):
        cal = load_calibration()
        assert cal.left_height_offset == pytest.approx(-0.15)
        assert cal.right_height_offset == pytest.approx(0.515)
        assert cal.trim_depth == pytest.approx(8.0)

    def test_loose_is_looser(self):
        default = load_calibration("default")
        loose = load_calibration("loose")
        assert loose.socket_clearance > default.socket_clearance
        assert loose.tie_clearance > default.tie_clearance

    def test_unknown_preset(self):
        with pytest.raises(KeyError, match="tight"):
            load_calibration("tight")

    def test_default_matches_dataclass_defaults(self):
        assert load_calibration() == Calibration()


# ---------------------------------------------------------------------------
# External files
# ---------------------------------------------------------------------------

class TestExternalFiles:

    def test_explicit_path(self, tmp_path):
        path = _write(tmp_path / "cal.yaml", "  mine:\n    socket_clearance: 0.3\n")
        cal = load_calibration("mine", path)
        assert cal.socket_clearance == pytest.approx(0.3)
        # missing keys keep their defaults
        assert cal.trim_depth == pytest.approx(8.0)

    def test_environment_directory_wins(self, tmp_path, monkeypatch):
        _write(tmp_path / "calibration.yaml", "  default:\n    tie_clearance: 0.45\n")
        monkeypatch.setenv(BRICKRAIL_CALIBRATION, str(tmp_path))
        clear_cache()
        assert load_calibration().tie_clearance == pytest.approx(0.45)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_calibration(path=tmp_path / "nope.yaml")

    def test_unknown_key(self, tmp_path):
        path = _write(tmp_path / "cal.yaml", "  default:\n    wobble: 1\n")
        with pytest.raises(ValueError, match="wobble"):
            load_calibration(path=path)

    def test_wrong_schema(self, tmp_path):
        path = tmp_path / "cal.yaml"
        path.write_text("schema: other\npresets:\n  default: {}\n")
        with pytest.raises(ValueError, match="schema"):
            load_calibration(path=path)


class TestCalibrationValues:

    def test_negative_clearance_rejected(self):
        with pytest.raises(ValueError, match="socket_clearance"):
            Calibration(socket_clearance=-0.1)

    def test_too_few_sections_rejected(self):
        with pytest.raises(ValueError):
            Calibration(cylinder_sections=2)

    def test_with_overrides(self):
        cal = Calibration().with_overrides(center_gap=4.0)
        assert cal.center_gap == 4.0
        assert cal.trim_depth == Calibration().trim_depth


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class TestCatalog:

    def test_standard_curves(self):
        curves = standard_curves()
        assert (56.0, 20.0) in curves
        assert (120.0, 11.25) in curves
        assert len(curves) == 8

    def test_catalog_angles_close_a_circle(self):
        for _, angle in standard_curves():
            count = segments_per_circle(angle)
            assert count == pytest.approx(round(count))

    def test_segments_per_circle(self):
        assert segments_per_circle(20) == 18
        with pytest.raises(ValueError):
            segments_per_circle(0)
