"""Calibration loading with bundled presets and external override support.

Clearances and offsets in this package are empirical: they depend on the
printer and material rather than on the brick standard.  They are grouped in
:class:`Calibration` and read from YAML preset files.

Search order for ``calibration.yaml``:
    1. An explicit ``path`` argument
    2. Directories from the BRICKRAIL_CALIBRATION environment variable
    3. User config directory (~/.config/brickrail/)
    4. Bundled data directory

Example:
    export BRICKRAIL_CALIBRATION="/path/to/my/printer"
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, fields, replace
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

__all__ = [
    "BRICKRAIL_CALIBRATION",
    "Calibration",
    "load_calibration",
    "list_presets",
    "clear_cache",
]

# Environment variable name for custom calibration directories
BRICKRAIL_CALIBRATION = "BRICKRAIL_CALIBRATION"

_BUNDLED_DATA_DIR = Path(__file__).parent / "data"
_FILENAME = "calibration.yaml"
_SCHEMA = "brickrail-calibration-v1"


@dataclass(frozen=True)
class Calibration:
    """Empirically tuned clearances for one printer/material combination.

    Attributes:
        left_height_offset: Vertical shift of the left rail connector
        right_height_offset: Vertical shift of the right rail connector
        socket_clearance: Per-side clearance of peg sockets
        taper_tolerance: Added to both radii of the tapered socket
        trim_depth: Rail length removed at each end before the endpoints go on
        rail_clearance: Per-side clearance of the ballast rail bands
        tie_clearance: Per-side clearance of the ballast tie cutouts
        notch_margin: Extra tangential room in ballast end notches
        center_gap: Width of the ballast centre gap
        segment_length: Arc length covered by one sweep subdivision
        cylinder_sections: Facet count of pegs, studs and tubes
    """
    left_height_offset: float = -0.15
    right_height_offset: float = 0.515
    socket_clearance: float = 0.15
    taper_tolerance: float = 0.1
    trim_depth: float = 8.0
    rail_clearance: float = 0.2
    tie_clearance: float = 0.2
    notch_margin: float = 0.5
    center_gap: float = 6.0
    segment_length: float = 1.0
    cylinder_sections: int = 32

    def __post_init__(self):
        for name in ("socket_clearance", "taper_tolerance", "rail_clearance",
                     "tie_clearance", "notch_margin", "center_gap"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")
        if self.trim_depth <= 0:
            raise ValueError(f"trim_depth must be positive, got {self.trim_depth}")
        if self.segment_length <= 0:
            raise ValueError(f"segment_length must be positive, got {self.segment_length}")
        if self.cylinder_sections < 3:
            raise ValueError(f"cylinder_sections must be >= 3, got {self.cylinder_sections}")

    def with_overrides(self, **overrides) -> "Calibration":
        """Return a copy with some values replaced."""
        return replace(self, **overrides)


def clear_cache() -> None:
    """Clear cached calibration data.

    Call this if you modify external calibration files and want to reload.
    """
    _get_data_dirs.cache_clear()
    _load_file_cached.cache_clear()


@lru_cache(maxsize=None)
def _get_data_dirs() -> tuple[Path, ...]:
    """Return tuple of directories to search, in priority order."""
    dirs: List[Path] = []

    env_path = os.environ.get(BRICKRAIL_CALIBRATION)
    if env_path:
        for p in env_path.split(os.pathsep):
            p = p.strip()
            if p:
                path = Path(p).expanduser().resolve()
                if path.is_dir():
                    dirs.append(path)

    if sys.platform == "win32":
        config_base = Path(os.environ.get("APPDATA", "~")).expanduser()
    else:
        config_base = Path.home() / ".config"

    user_config = config_base / "brickrail"
    if user_config.is_dir():
        dirs.append(user_config)

    if _BUNDLED_DATA_DIR.is_dir():
        dirs.append(_BUNDLED_DATA_DIR)

    return tuple(dirs)


def _find_file(path: Optional[Path]) -> Path:
    if path is not None:
        if not path.exists():
            raise FileNotFoundError(f"Calibration file not found: {path}")
        return path

    for data_dir in _get_data_dirs():
        candidate = data_dir / _FILENAME
        if candidate.exists():
            return candidate

    searched = [str(d) for d in _get_data_dirs()]
    raise FileNotFoundError(
        f"No {_FILENAME} found.\n"
        f"Searched directories: {searched}"
    )


@lru_cache(maxsize=16)
def _load_file_cached(path_str: str) -> Dict[str, Any]:
    """Cached YAML loading (string path for hashability)."""
    path = Path(path_str)
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Invalid calibration format in {path}: expected dict at root")
    schema = data.get("schema")
    if schema != _SCHEMA:
        raise ValueError(f"Unsupported calibration schema '{schema}' in {path} (expected '{_SCHEMA}')")
    presets = data.get("presets")
    if not isinstance(presets, dict) or not presets:
        raise ValueError(f"Calibration file {path} defines no presets")
    return data


def list_presets(path: Optional[Path] = None) -> List[str]:
    """List preset names available in the active calibration file."""
    data = _load_file_cached(str(_find_file(path)))
    return sorted(data["presets"].keys())


def load_calibration(preset: str = "default", path: Optional[Path] = None) -> Calibration:
    """Load a calibration preset.

    Args:
        preset: Preset name inside the calibration file
        path: Explicit calibration file, bypassing the directory search

    Returns:
        Calibration built from the preset; keys missing from the preset keep
        their dataclass defaults

    Raises:
        FileNotFoundError: If no calibration file can be located
        KeyError: If the preset does not exist
        ValueError: If the preset holds unknown keys or invalid values
    """
    source = _find_file(Path(path) if path is not None else None)
    data = _load_file_cached(str(source))

    presets = data["presets"]
    if preset not in presets:
        raise KeyError(
            f"Calibration preset '{preset}' not found in {source}. "
            f"Available presets: {sorted(presets.keys())}"
        )

    values = presets[preset] or {}
    known = {f.name for f in fields(Calibration)}
    unknown = set(values) - known
    if unknown:
        raise ValueError(f"Unknown calibration keys in preset '{preset}': {sorted(unknown)}")

    return Calibration(**values)
