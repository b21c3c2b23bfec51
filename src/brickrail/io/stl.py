"""STL export for generated track parts."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import trimesh

logger = logging.getLogger(__name__)


def write_stl(mesh: trimesh.Trimesh, path_or_file, *, binary: bool = True) -> None:
    """Write ``mesh`` to STL.

    ``path_or_file`` can be a filesystem path or an open stream.
    """
    if isinstance(path_or_file, Path):
        path_or_file = str(path_or_file)
    mesh.export(path_or_file, file_type='stl' if binary else 'stl_ascii')


def export_solid(mesh: trimesh.Trimesh, path: Union[str, Path], *, binary: bool = True) -> Path:
    """Write ``mesh`` to ``path``, choosing the format from its suffix.

    ``.stl`` honours ``binary``; any other suffix goes to trimesh's
    exporter for that format.
    """
    path = Path(path)
    if path.suffix.lower() == '.stl':
        write_stl(mesh, path, binary=binary)
    else:
        mesh.export(str(path))
    logger.debug("wrote %d faces to %s", len(mesh.faces), path)
    return path
