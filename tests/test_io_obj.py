import io
import logging

import pytest

from tinymesh.geom import vclose
from tinymesh.io import MeshIOError
from tinymesh.io.obj import parse_obj, read_obj, write_obj
from tinymesh.mesh import Face, Mesh
from tinymesh.mesh_util import cylinder_mesh, sphere_mesh
from tinymesh.primitives import Box, Cylinder, Sphere


def _box():
    return Mesh.from_box(Box.cube(1.0))


def _assert_same(a, b):
    assert a.vertex_count == b.vertex_count
    assert a.normal_count == b.normal_count
    assert a.vertex_index == b.vertex_index
    assert a.normal_index == b.normal_index
    for u, v in zip(a.vertices, b.vertices):
        assert vclose(u, v)
    for u, v in zip(a.normals, b.normals):
        assert vclose(u, v)


def test_write_obj_text():
    buf = io.StringIO()
    write_obj(_box(), buf, name='cube')
    lines = buf.getvalue().splitlines()

    assert lines[0] == 'g cube'
    assert sum(1 for l in lines if l.startswith('v ')) == 8
    assert sum(1 for l in lines if l.startswith('vn ')) == 6
    faces = [l for l in lines if l.startswith('f ')]
    assert len(faces) == 12
    # indices are written 1-based
    assert faces[0] == 'f 1//5 3//5 2//5'


def test_round_trip_file(tmp_path):
    mesh = cylinder_mesh(Cylinder((0, 0, 0), (1, 2, 3), 0.5), 7)
    path = tmp_path / 'cyl.obj'
    write_obj(mesh, path)
    _assert_same(mesh, read_obj(path))


def test_round_trip_stream():
    mesh = sphere_mesh(Sphere((1, 1, 1), 2.0), 5)
    buf = io.StringIO()
    write_obj(mesh, buf)
    buf.seek(0)
    _assert_same(mesh, read_obj(buf))


def test_read_bytes_stream():
    buf = io.StringIO()
    write_obj(_box(), buf)
    _assert_same(_box(), read_obj(io.BytesIO(buf.getvalue().encode('utf-8'))))


def test_parse_corner_forms_and_junk(caplog):
    text = """
# a triangle
mtllib tri.mtl
o tri
v 0 0 0
v 1 0 0
v 0 1 0
vt 0 0
vn 0 0 1
s off
usemtl red
f 1/1/1 2/1/1 3/1/1
f 1//1 3//1 2//1
f 1 2 3
f 1/1 2/1 3/1
f 1//1 2//1 3//1 1//1
v one two three
bogus line
"""
    with caplog.at_level(logging.DEBUG, logger='tinymesh.io.obj'):
        mesh = parse_obj(text.splitlines())

    assert mesh.vertex_count == 3
    assert mesh.normal_count == 1
    assert list(mesh.faces()) == [Face((0, 1, 2), (0, 0, 0)),
                                  Face((0, 2, 1), (0, 0, 0))]
    assert 'skipped 5' in caplog.text


@pytest.mark.parametrize("face", ["f 1//1 2//1 4//1", "f 1//1 2//1 3//2", "f 0//1 1//1 2//1"])
def test_bad_references(face):
    text = "v 0 0 0\nv 1 0 0\nv 0 1 0\nvn 0 0 1\n" + face + "\n"
    if face.startswith("f 0"):
        # index 0 is not a valid 1-based reference, so the line is skipped
        assert parse_obj(text.splitlines()).triangle_count == 0
    else:
        with pytest.raises(MeshIOError):
            parse_obj(text.splitlines())


def test_read_missing_file(tmp_path):
    with pytest.raises(MeshIOError):
        read_obj(tmp_path / 'missing.obj')


def test_write_bad_path(tmp_path):
    with pytest.raises(MeshIOError):
        write_obj(_box(), tmp_path)


class TestMeshFileBoundary:

    def test_save_and_load(self, tmp_path):
        path = tmp_path / 'box.obj'
        assert _box().save_obj(path)
        assert path.read_text(encoding='utf-8').startswith('g tinymesh')

        mesh = Mesh()
        assert mesh.load(path)
        _assert_same(_box(), mesh)

    def test_save_with_name(self, tmp_path):
        path = tmp_path / 'box.obj'
        assert _box().save_obj(path, name='würfel')
        assert path.read_text(encoding='utf-8').splitlines()[0] == 'g würfel'

    def test_load_missing_reports_failure(self, tmp_path, caplog):
        mesh = _box()
        with caplog.at_level(logging.WARNING, logger='tinymesh.mesh'):
            assert not mesh.load(tmp_path / 'missing.obj')
        assert mesh.vertex_count == 0
        assert mesh.triangle_count == 0
        assert 'could not load' in caplog.text

    def test_load_inconsistent_reports_failure(self, tmp_path):
        path = tmp_path / 'bad.obj'
        path.write_text("v 0 0 0\nvn 0 0 1\nf 1//1 2//1 3//1\n", encoding='utf-8')
        mesh = Mesh()
        assert not mesh.load(path)
        assert mesh.vertex_count == 0

    def test_save_to_directory_reports_failure(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger='tinymesh.mesh'):
            assert not _box().save_obj(tmp_path)
        assert 'could not save' in caplog.text


class _FullStream(io.StringIO):

    def write(self, s):
        raise OSError(28, 'No space left on device')


class _BrokenStream(io.StringIO):

    def read(self, *args):
        raise OSError(5, 'Input/output error')


def test_write_stream_failure():
    with pytest.raises(MeshIOError):
        write_obj(_box(), _FullStream())


def test_read_stream_failure():
    with pytest.raises(MeshIOError):
        read_obj(_BrokenStream())


def test_save_with_empty_name(tmp_path):
    path = tmp_path / 'box.obj'
    assert _box().save_obj(path, name='')
    assert path.read_text(encoding='utf-8').splitlines()[0] == 'g '
