import io
import struct

import trimesh

from brickrail.io import export_solid, write_stl
from brickrail.metadata import add_tags, get_solid_metadata, record_build
from brickrail.params import CurveParams


def _cube():
    return trimesh.creation.box(extents=[2.0, 2.0, 2.0])


def test_write_stl_binary(tmp_path):
    path = tmp_path / 'cube.stl'
    write_stl(_cube(), path, binary=True)

    data = path.read_bytes()
    assert len(data) == 80 + 4 + 12 * 50  # header + count + twelve triangles
    count = struct.unpack('<I', data[80:84])[0]
    assert count == 12


def test_write_stl_ascii():
    buf = io.BytesIO()
    write_stl(_cube(), buf, binary=False)

    text = buf.getvalue().decode('ascii')
    assert text.startswith('solid')
    assert text.count('facet normal') == 12
    assert text.count('vertex') == 36
    assert text.strip().splitlines()[-1].startswith('endsolid')


def test_write_stl_binary_stream():
    buf = io.BytesIO()
    write_stl(_cube(), buf)
    count = struct.unpack('<I', buf.getvalue()[80:84])[0]
    assert count == 12


def test_export_solid_reloads(tmp_path):
    path = export_solid(_cube(), tmp_path / 'cube.stl')
    loaded = trimesh.load(str(path))
    assert len(loaded.faces) == 12
    assert abs(loaded.volume - 8.0) < 1e-6


def test_export_solid_other_format(tmp_path):
    path = export_solid(_cube(), tmp_path / 'cube.ply')
    assert path.exists()
    assert path.stat().st_size > 0


def test_metadata_namespace():
    mesh = _cube()
    assert get_solid_metadata(mesh, create=False) == {}
    meta = get_solid_metadata(mesh, create=True)
    assert meta['tags'] == []
    add_tags(meta, ['track', 'track', 'r56'])
    assert get_solid_metadata(mesh)['tags'] == ['track', 'r56']


def test_record_build():
    mesh = _cube()
    meta = record_build(mesh, 'segment', CurveParams(radius=56, angle=20), arc_length=156.56)
    assert meta['params']['angle'] == 20
    assert meta['arc_length'] == 156.56
    assert set(meta['tags']) == {'track', 'segment'}


def test_export_solid_ascii(tmp_path):
    path = export_solid(_cube(), tmp_path / 'cube_ascii.stl', binary=False)
    assert path.read_text(encoding='ascii').startswith('solid')
