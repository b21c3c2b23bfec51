"""Catalog of standard radius/angle combinations.

The catalog documents the curves that tile a full circle with whole
segments.  Builders do not validate against it.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Tuple

import yaml

__all__ = ["standard_curves", "segments_per_circle"]

_CATALOG_PATH = Path(__file__).parent / "data" / "catalog.yaml"


@lru_cache(maxsize=4)
def _load(path_str: str) -> Tuple[Tuple[float, float], ...]:
    with open(path_str, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict) or not isinstance(data.get("curves"), list):
        raise ValueError(f"Invalid catalog format in {path_str}: expected a 'curves' list")
    entries = []
    for entry in data["curves"]:
        try:
            entries.append((float(entry["radius"]), float(entry["angle"])))
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Bad catalog entry {entry!r} in {path_str}") from exc
    return tuple(entries)


def standard_curves(path: Optional[Path] = None) -> List[Tuple[float, float]]:
    """Return the (radius, angle) pairs of the curve catalog."""
    return list(_load(str(path or _CATALOG_PATH)))


def segments_per_circle(angle: float) -> float:
    """Number of segments of ``angle`` degrees in a full circle."""
    if angle <= 0:
        raise ValueError(f"angle must be positive, got {angle}")
    return 360.0 / angle
