"""Thin layer over the trimesh kernel.

Builders create and combine solids only through this module.  Solids are
``trimesh.Trimesh`` instances; 2D shapes are shapely polygons.  Booleans
are dispatched to :mod:`trimesh.boolean` with the manifold engine, which
returns closed manifold meshes.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence, Tuple

import numpy as np
import trimesh
from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry.polygon import orient
from trimesh import transformations as tf

BOOLEAN_ENGINE = "manifold"

__all__ = [
    "BOOLEAN_ENGINE",
    "box",
    "box_between",
    "cylinder",
    "frustum",
    "tube",
    "circle_polygon",
    "extrude",
    "extrude_profile",
    "sweep_arc",
    "union",
    "difference",
    "intersection",
    "concatenate",
]


def box(extents: Sequence[float], center: Sequence[float] = (0.0, 0.0, 0.0)) -> trimesh.Trimesh:
    """Axis-aligned box of ``extents`` centred on ``center``."""
    mesh = trimesh.creation.box(extents=[float(e) for e in extents])
    mesh.apply_translation(center)
    return mesh


def box_between(lo: Sequence[float], hi: Sequence[float]) -> trimesh.Trimesh:
    """Axis-aligned box spanning the corners ``lo`` and ``hi``."""
    lo = np.asarray(lo, dtype=float)
    hi = np.asarray(hi, dtype=float)
    if np.any(hi <= lo):
        raise ValueError(f"box corners {lo.tolist()} -> {hi.tolist()} enclose no volume")
    return box(hi - lo, (lo + hi) / 2.0)


def cylinder(radius: float, height: float, base: Sequence[float] = (0.0, 0.0, 0.0),
             sections: int = 32) -> trimesh.Trimesh:
    """Vertical cylinder standing on ``base``."""
    mesh = trimesh.creation.cylinder(radius=radius, height=height, sections=sections)
    mesh.apply_translation([base[0], base[1], base[2] + height / 2.0])
    return mesh


def frustum(bottom_radius: float, top_radius: float, height: float,
            base: Sequence[float] = (0.0, 0.0, 0.0), sections: int = 32) -> trimesh.Trimesh:
    """Truncated cone standing on ``base``."""
    if bottom_radius <= 0 or top_radius <= 0 or height <= 0:
        raise ValueError("frustum radii and height must be positive")
    outline = [(0.0, 0.0), (bottom_radius, 0.0), (top_radius, height), (0.0, height), (0.0, 0.0)]
    mesh = trimesh.creation.revolve(outline, sections=sections)
    mesh.fix_normals()
    mesh.apply_translation(base)
    return mesh


def circle_polygon(radius: float, center: Sequence[float] = (0.0, 0.0),
                   sections: int = 32) -> Polygon:
    theta = np.linspace(0, 2 * np.pi, sections, endpoint=False)
    return Polygon(np.column_stack([center[0] + radius * np.cos(theta),
                                    center[1] + radius * np.sin(theta)]))


def tube(outer_radius: float, inner_radius: float, height: float,
         base: Sequence[float] = (0.0, 0.0, 0.0), sections: int = 32) -> trimesh.Trimesh:
    """Vertical tube standing on ``base``."""
    if not 0 < inner_radius < outer_radius:
        raise ValueError(f"tube radii must satisfy 0 < {inner_radius} < {outer_radius}")
    outer = circle_polygon(outer_radius, sections=sections)
    inner = circle_polygon(inner_radius, sections=sections)
    ring = Polygon(outer.exterior.coords, [inner.exterior.coords])
    return extrude(ring, base[2], base[2] + height, offset=(base[0], base[1]))


def extrude(shape, z0: float, z1: float, offset: Tuple[float, float] = (0.0, 0.0)) -> trimesh.Trimesh:
    """Extrude a shapely Polygon or MultiPolygon between two heights."""
    if z1 <= z0:
        raise ValueError(f"extrusion from z={z0} to z={z1} has no height")
    if isinstance(shape, MultiPolygon):
        polygons = list(shape.geoms)
    elif isinstance(shape, Polygon):
        polygons = [shape]
    else:
        raise ValueError(f"cannot extrude {type(shape).__name__}")
    polygons = [p for p in polygons if not p.is_empty]
    if not polygons:
        raise ValueError("cannot extrude an empty shape")

    meshes = [trimesh.creation.extrude_polygon(p, z1 - z0) for p in polygons]
    mesh = concatenate(meshes)
    mesh.apply_translation([offset[0], offset[1], z0])
    return mesh


def extrude_profile(profile: Sequence[Tuple[float, float]], length: float) -> trimesh.Trimesh:
    """Extrude a cross-section along +y.

    ``profile`` points are (x, z); the solid spans y in [0, length].
    """
    mesh = trimesh.creation.extrude_polygon(Polygon(profile), length)
    mesh.apply_transform(tf.rotation_matrix(math.pi / 2, [1.0, 0.0, 0.0]))
    mesh.apply_translation([0.0, length, 0.0])
    return mesh


def sweep_arc(profile: Sequence[Tuple[float, float]], radius: float, angle: float,
              sections: int) -> trimesh.Trimesh:
    """Sweep a cross-section along a circular arc about the z axis.

    ``profile`` points are (radial offset, z) relative to a circle of
    ``radius``.  The arc starts on the +x axis and runs counter-clockwise
    for ``angle`` degrees in ``sections`` steps.  A 360 degree sweep is
    closed onto itself; any shorter sweep is capped at both ends.
    """
    if sections < 1:
        raise ValueError(f"sweep needs at least one section, got {sections}")
    if not 0 < angle <= 360:
        raise ValueError(f"sweep angle must be in (0, 360], got {angle}")
    ring = orient(Polygon(profile), sign=1.0).exterior.coords
    outline = np.asarray(ring, dtype=float) + [radius, 0.0]
    if np.any(outline[:, 0] <= 0):
        raise ValueError(f"profile crosses the sweep axis at radius {radius}")

    closed = angle >= 360
    if closed and sections < 3:
        raise ValueError("a closed sweep needs at least three sections")
    mesh = trimesh.creation.revolve(
        outline,
        angle=None if closed else math.radians(angle),
        cap=not closed,
        sections=sections,
    )
    mesh.fix_normals()
    return mesh


def _boolean(operation: str, meshes: list) -> trimesh.Trimesh:
    func = getattr(trimesh.boolean, operation)
    try:
        result = func(meshes, engine=BOOLEAN_ENGINE, check_volume=False)
    except Exception as exc:
        raise RuntimeError(f"{operation} of {len(meshes)} solids failed: {exc}") from exc
    if result is None:
        raise RuntimeError(f"{operation} of {len(meshes)} solids returned nothing")
    return result


def union(solids: Iterable[trimesh.Trimesh]) -> trimesh.Trimesh:
    """Boolean union of all ``solids``."""
    meshes = [s for s in solids if s is not None and len(s.faces)]
    if not meshes:
        raise ValueError("union needs at least one non-empty solid")
    if len(meshes) == 1:
        return meshes[0].copy()
    return _boolean("union", meshes)


def difference(base: trimesh.Trimesh, cutters: Iterable[trimesh.Trimesh]) -> trimesh.Trimesh:
    """``base`` with every cutter removed."""
    tools = [c for c in cutters if c is not None and len(c.faces)]
    if not tools:
        return base.copy()
    return _boolean("difference", [base] + tools)


def intersection(a: trimesh.Trimesh, b: trimesh.Trimesh) -> trimesh.Trimesh:
    """Boolean intersection of two solids."""
    return _boolean("intersection", [a, b])


def concatenate(meshes: Sequence[trimesh.Trimesh]) -> trimesh.Trimesh:
    """Join disjoint meshes without a boolean."""
    if len(meshes) == 1:
        return meshes[0].copy()
    return trimesh.util.concatenate(list(meshes))
