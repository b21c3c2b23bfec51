"""Metadata helpers for generated solids.

Build records live under a ``brickrail`` namespace in ``mesh.metadata`` so
they travel with the mesh into exporters that keep metadata.
"""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from typing import Any, Dict, Iterable

_NAMESPACE = "brickrail"
_DEFAULT_SCHEMA = "brickrail-metadata-v1"


def get_solid_metadata(mesh, create: bool = False) -> Dict[str, Any]:
    """Return the brickrail metadata of ``mesh``.

    With ``create`` the namespace is added when missing; otherwise a
    missing namespace reads as an empty dict.
    """
    meta = mesh.metadata.get(_NAMESPACE)
    if isinstance(meta, dict):
        return meta
    if not create:
        return {}
    meta = {"schema": _DEFAULT_SCHEMA, "tags": []}
    mesh.metadata[_NAMESPACE] = meta
    return meta


def add_tags(meta: Dict[str, Any], tags: Iterable[str]) -> Dict[str, Any]:
    existing = meta.setdefault("tags", [])
    for tag in tags:
        if tag and tag not in existing:
            existing.append(tag)
    return meta


def record_build(mesh, kind: str, params, **values) -> Dict[str, Any]:
    """Store the parameters and diagnostics of a build on ``mesh``."""
    meta = get_solid_metadata(mesh, create=True)
    add_tags(meta, ["track", kind])
    meta["kind"] = kind
    meta["params"] = asdict(params) if is_dataclass(params) else dict(params)
    meta.update(values)
    return meta
