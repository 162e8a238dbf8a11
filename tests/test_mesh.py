import math

import pytest

from tinymesh.geom import add, close, dot, mag, point, scale3, sub, vclose
from tinymesh.mesh import Face, Mesh
from tinymesh.mesh_util import disc_mesh, sphere_mesh
from tinymesh.primitives import Box, Disc, Sphere
from tinymesh.xform import Identity, RotationZ, Scaling


def _box():
    return Mesh.from_box(Box.cube(1.0))


class TestBoxMesh:

    def test_counts(self):
        mesh = _box()
        assert mesh.vertex_count == 8
        assert mesh.normal_count == 6
        assert len(mesh.vertex_index) == 36
        assert len(mesh.normal_index) == 36
        assert mesh.triangle_count == 12

    def test_bbox_matches_box(self):
        mesh = _box()
        assert mesh.bbox() == Box.cube(1.0)

    def test_faces_are_flat_and_outward(self):
        mesh = _box()
        for face in mesh.faces():
            na, nb, nc = face.normals
            assert na == nb == nc
            a, b, c = face.vertices
            centroid = scale3(add(add(mesh.vertex(a), mesh.vertex(b)), mesh.vertex(c)), 1.0 / 3.0)
            assert dot(mesh.normal(na), centroid) > 0

    def test_each_normal_used_by_two_triangles(self):
        mesh = _box()
        counts = [0] * 6
        for face in mesh.faces():
            counts[face.normals[0]] += 1
        assert counts == [2] * 6


class TestConstruction:

    def test_empty(self):
        mesh = Mesh()
        assert mesh.vertex_count == 0
        assert mesh.triangle_count == 0
        assert mesh.bbox().is_null()

    def test_raw_arrays(self):
        verts = [(0, 0, 0), (1, 0, 0), (0, 1, 0)]
        mesh = Mesh(verts, [(0, 0, 1)], [0, 1, 2], [0, 0, 0])
        assert mesh.vertex(1) == [1.0, 0.0, 0.0, 1.0]
        assert mesh.normal(0) == [0.0, 0.0, 1.0, 0.0]
        assert list(mesh.faces()) == [Face((0, 1, 2), (0, 0, 0))]

    def test_raw_arrays_without_normals(self):
        verts = [(0, 0, 0), (1, 0, 0), (0, 1, 0), (1, 1, 0)]
        mesh = Mesh(verts, vertex_index=[0, 1, 2, 2, 1, 3])
        assert mesh.normal_count == 4
        assert all(n[:3] == [0.0, 0.0, 1.0] for n in mesh.normals)
        assert mesh.normal_index == mesh.vertex_index

    @pytest.mark.parametrize("normal_index", [
        [0, 0],                # length mismatch
        [0, 0, 0, 0],          # length mismatch
    ])
    def test_mismatched_lengths(self, normal_index):
        verts = [(0, 0, 0), (1, 0, 0), (0, 1, 0)]
        with pytest.raises(ValueError):
            Mesh(verts, [(0, 0, 1)], [0, 1, 2], normal_index)

    def test_partial_triangle(self):
        verts = [(0, 0, 0), (1, 0, 0), (0, 1, 0)]
        with pytest.raises(ValueError):
            Mesh(verts, [(0, 0, 1)], [0, 1], [0, 0])

    def test_index_out_of_range(self):
        verts = [(0, 0, 0), (1, 0, 0), (0, 1, 0)]
        with pytest.raises(ValueError):
            Mesh(verts, [(0, 0, 1)], [0, 1, 3], [0, 0, 0])
        with pytest.raises(ValueError):
            Mesh(verts, [(0, 0, 1)], [0, 1, 2], [0, 0, 1])

    def test_add_face_keeps_streams_together(self):
        mesh = Mesh([(0, 0, 0), (1, 0, 0), (0, 1, 0), (1, 1, 0)])
        mesh.add_triangle(0, 1, 2, 0)
        mesh.add_quad(0, 1, 3, 2)
        assert mesh.vertex_index == (0, 1, 2, 0, 1, 3, 0, 3, 2)
        assert mesh.normal_index == (0, 0, 0, 0, 1, 3, 0, 3, 2)
        with pytest.raises(ValueError):
            mesh.add_face(Face((0, 1), (0, 0)))
        assert len(mesh.vertex_index) == len(mesh.normal_index) == 9

    def test_copy_is_independent(self):
        mesh = _box()
        other = mesh.copy()
        other.scale(2.0)
        assert mesh.bbox() == Box.cube(1.0)
        assert other.bbox() == Box.cube(2.0)


class TestScale:

    def test_positive_scalar(self):
        mesh = _box()
        normals = [list(n) for n in mesh.normals]
        mesh.scale(2.5)
        for i, v in enumerate(mesh.vertices):
            assert v[:3] == pytest.approx([2.5 * x for x in Box.cube(1.0).vertex(i)[:3]])
        assert mesh.normals == normals

    def test_negative_scalar_flips_normals(self):
        mesh = sphere_mesh(Sphere((0, 0, 0), 1.0), 4)
        normals = [list(n) for n in mesh.normals]
        vertices = [list(v) for v in mesh.vertices]
        mesh.scale(-1.0)
        for before, after in zip(normals, mesh.normals):
            assert after[:3] == [-x for x in before[:3]]
        for before, after in zip(vertices, mesh.vertices):
            assert after[:3] == [-x for x in before[:3]]

    def test_matrix_round_trip(self):
        mesh = sphere_mesh(Sphere((1, 2, 3), 1.5), 6)
        vertices = [list(v) for v in mesh.vertices]
        normals = [list(n) for n in mesh.normals]
        mesh.scale(Scaling(2, 3, 4))
        mesh.scale(Scaling(1 / 2, 1 / 3, 1 / 4))
        for before, after in zip(vertices, mesh.vertices):
            assert vclose(before, after)
        for before, after in zip(normals, mesh.normals):
            assert vclose(before, after)

    def test_matrix_scale_keeps_normals_perpendicular(self):
        mesh = disc_mesh(Disc((0, 0, 0), (1, 1, 0), 1.0), 12)
        mesh.scale(Scaling(3, 1, 0.5))
        n = mesh.normal(0)
        assert close(mag(n), 1.0)
        for tri in mesh.triangles():
            assert abs(dot(n, sub(tri.v1, tri.v0))) < 1e-9
            assert abs(dot(n, sub(tri.v2, tri.v0))) < 1e-9

    def test_matrix_scale_transforms_every_normal(self):
        # more normals than vertices
        mesh = Mesh([(0, 0, 0), (1, 0, 0), (0, 1, 0)],
                    [(1, 1, 0), (0, 1, 1), (1, 0, 1), (1, 1, 1)],
                    [0, 1, 2], [0, 1, 3])
        mesh.scale(Scaling(2, 1, 1))
        assert mesh.normal(3) == pytest.approx(
            [0.5 / math.sqrt(2.25), 1 / math.sqrt(2.25), 1 / math.sqrt(2.25), 0.0])

    def test_identity_matrix_is_noop(self):
        mesh = _box()
        mesh.scale(Identity())
        assert mesh.bbox() == Box.cube(1.0)

    def test_non_diagonal_matrix_rejected(self):
        mesh = _box()
        with pytest.raises(ValueError):
            mesh.scale(RotationZ(45))

    def test_bad_argument(self):
        with pytest.raises(ValueError):
            _box().scale("twice")


class TestRotateTranslate:

    def test_rotate(self):
        mesh = _box()
        mesh.scale(Scaling(2, 1, 1))
        mesh.rotate(RotationZ(90))
        assert mesh.bbox().isclose(Box((-1, -2, -1), (1, 2, 1)))
        # the +X face normal now points along +Y
        assert vclose(mesh.normal(1), point(0, 1, 0))
        assert mesh.normal(1)[3] == 0.0

    def test_rotate_rejects_non_matrix(self):
        with pytest.raises(ValueError):
            _box().rotate([1, 0, 0])

    def test_translate(self):
        mesh = _box()
        normals = [list(n) for n in mesh.normals]
        mesh.translate((1, 2, 3))
        assert mesh.bbox() == Box((0, 1, 2), (2, 3, 4))
        assert mesh.normals == normals


class TestSmoothNormals:

    def test_box_becomes_vertex_indexed(self):
        mesh = _box()
        mesh.smooth_normals()
        assert mesh.normal_count == mesh.vertex_count
        assert mesh.normal_index == mesh.vertex_index
        for v, n in zip(mesh.vertices, mesh.normals):
            assert close(mag(n), 1.0)
            assert dot(v, n) > 0

    def test_area_weighting(self):
        # a big triangle in z=0 and a small one in x=0 share vertex 0
        verts = [(0, 0, 0), (4, 0, 0), (0, 4, 0), (0, 1, 0), (0, 0, 1)]
        mesh = Mesh(verts, vertex_index=[0, 1, 2, 0, 3, 4])
        mesh.smooth_normals()
        n = mesh.normal(0)
        # area normals (0,0,16) and (1,0,0)
        assert n == pytest.approx([1 / math.sqrt(257), 0.0, 16 / math.sqrt(257), 0.0])

    def test_idempotent(self):
        mesh = sphere_mesh(Sphere((0, 0, 0), 1.0), 6)
        mesh.smooth_normals()
        once = [list(n) for n in mesh.normals]
        mesh.smooth_normals()
        for a, b in zip(once, mesh.normals):
            assert a == pytest.approx(b)

    def test_unreferenced_vertex_keeps_zero_normal(self):
        mesh = sphere_mesh(Sphere((0, 0, 0), 1.0), 4)
        mesh.smooth_normals()
        # the first pole vertex belongs to no triangle
        assert mesh.normal(0) == [0.0, 0.0, 0.0, 0.0]
        assert all(close(mag(n), 1.0) for n in mesh.normals[1:9])


class TestSphereWarp:

    def test_falloff(self):
        mesh = _box()
        mesh.sphere_warp((1, 1, 1), 2.0, (0, 0, 1))
        # vertex 7 sits on the warp center and does not move
        assert mesh.vertex(7)[:3] == pytest.approx([1, 1, 1])
        # everything else is at least one radius away: full displacement
        for i in range(7):
            expected = add(Box.cube(1.0).vertex(i), point(0, 0, 1))
            assert vclose(mesh.vertex(i), expected)

    def test_partial_displacement(self):
        mesh = _box()
        mesh.sphere_warp((0, 0, 0), 4.0, (0, 2, 0))
        t = math.sqrt(3) / 4
        for i, v in enumerate(mesh.vertices):
            expected = add(Box.cube(1.0).vertex(i), scale3(point(0, 2, 0), t))
            assert vclose(v, expected)

    def test_recomputes_normals(self):
        mesh = _box()
        mesh.sphere_warp((1, 1, 1), 2.0, (0, 0, 1))
        assert mesh.normal_count == mesh.vertex_count
        assert mesh.normal_index == mesh.vertex_index

    def test_bad_radius(self):
        with pytest.raises(ValueError):
            _box().sphere_warp((0, 0, 0), 0.0, (0, 0, 1))
