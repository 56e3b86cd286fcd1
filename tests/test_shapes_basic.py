"""
Unit tests for the shape face tables and reference solids.

Covers the six verification solids with an absolute tolerance of 1e-4.
"""

import pytest
import numpy as np
from polyvolume.shapes import (
    HEXAHEDRON_FACES, HEXAHEDRON_QUADS, PRISM_FACES, REFERENCE_SHAPES,
    box_vertices, get_reference_shape, hexahedron_volume, prism_volume, triangulate_quad
)
from polyvolume.volume import within_tolerance
from polyvolume.errors import InvalidGeometryError


EPSILON = 1e-4


def _face_normal(vertices, face):
    a, b, c = (np.asarray(vertices[i], dtype=float) for i in face)
    return np.cross(b - a, c - a)


class TestFaceTables:
    """Test suite for the hexahedron and prism face tables."""

    def test_triangulate_quad_preserves_winding(self):
        assert triangulate_quad(0, 1, 2, 3) == [(0, 1, 2), (0, 2, 3)]

    def test_hexahedron_table_size(self):
        assert len(HEXAHEDRON_QUADS) == 6
        assert len(HEXAHEDRON_FACES) == 12

    def test_prism_table_size(self):
        assert len(PRISM_FACES) == 8

    @pytest.mark.parametrize("faces,num_vertices", [
        (HEXAHEDRON_FACES, 8),
        (PRISM_FACES, 6),
    ])
    def test_every_edge_shared_by_two_faces(self, faces, num_vertices):
        """Each table describes a closed surface with consistent winding."""
        directed = {}
        for a, b, c in faces:
            for edge in ((a, b), (b, c), (c, a)):
                directed[edge] = directed.get(edge, 0) + 1

        # Every directed edge appears once and its reverse appears once
        assert all(count == 1 for count in directed.values())
        assert all((b, a) in directed for a, b in directed)
        assert {i for face in faces for i in face} == set(range(num_vertices))

    def test_hexahedron_faces_point_outward(self):
        vertices = box_vertices(2, 2, 2)
        center = vertices.mean(axis=0)
        for face in HEXAHEDRON_FACES:
            normal = _face_normal(vertices, face)
            assert np.dot(normal, vertices[face[0]] - center) > 0

    def test_prism_faces_point_outward(self):
        vertices = np.array(get_reference_shape("prism").vertices)
        center = vertices.mean(axis=0)
        for face in PRISM_FACES:
            normal = _face_normal(vertices, face)
            assert np.dot(normal, vertices[face[0]] - center) > 0


class TestShapeVolumes:
    """Test suite for hexahedron_volume and prism_volume."""

    def test_hexahedron_volume(self):
        assert hexahedron_volume(box_vertices(3, 2, 1)) == pytest.approx(6.0)

    def test_prism_volume(self):
        vertices = get_reference_shape("prism").vertices
        assert prism_volume(vertices) == pytest.approx(48.0)

    def test_prism_with_non_parallel_top(self):
        """Top and bottom of a prism need not be parallel."""
        vertices = [(0, 0, 0), (4, 0, 0), (0, 4, 0), (0, 0, 6), (4, 0, 6), (0, 4, 10)]
        # Right prism of height 6 plus a tetrahedron-shaped cap over the top
        expected = 48.0 + 4.0 * 4.0 * 4.0 / 6.0
        assert prism_volume(vertices) == pytest.approx(expected)

    def test_hexahedron_wrong_vertex_count(self):
        with pytest.raises(InvalidGeometryError, match="exactly 8 vertices"):
            hexahedron_volume(box_vertices(1, 1, 1)[:6])

    def test_prism_wrong_vertex_count(self):
        with pytest.raises(InvalidGeometryError, match="exactly 6 vertices"):
            prism_volume(box_vertices(1, 1, 1))

    def test_box_vertices_order(self):
        vertices = box_vertices(4, 2, 1)
        np.testing.assert_array_equal(vertices[0], [0, 0, 0])
        np.testing.assert_array_equal(vertices[2], [4, 2, 0])
        np.testing.assert_array_equal(vertices[4], [0, 0, 1])
        np.testing.assert_array_equal(vertices[6], [4, 2, 1])


class TestReferenceShapes:
    """End-to-end checks of the six reference solids."""

    @pytest.mark.parametrize("name,expected", [
        ("pyramid", 1 / 6.0),
        ("cube", 8.0),
        ("parallelepiped", 16.0),
        ("slanted_parallelepiped", 16.0),
        ("prism", 48.0),
        ("trapezium", 24.0),
    ])
    def test_reference_volume(self, name, expected):
        shape = get_reference_shape(name)
        assert shape.expected_volume == pytest.approx(expected)
        assert abs(shape.volume() - expected) < EPSILON

    def test_all_reference_shapes_within_tolerance(self):
        assert len(REFERENCE_SHAPES) == 6
        for shape in REFERENCE_SHAPES.values():
            assert within_tolerance(shape.volume(), shape.expected_volume, EPSILON)

    def test_pyramid_is_exact(self):
        assert get_reference_shape("pyramid").volume() == 1 / 6.0

    def test_slanted_top_is_shifted(self):
        vertices = np.array(get_reference_shape("slanted_parallelepiped").vertices)
        np.testing.assert_array_equal(vertices[4], [0, 1, 2])
        np.testing.assert_array_equal(vertices[6], [4, 3, 2])

    def test_hexahedron_helpers_agree(self):
        for name in ("cube", "parallelepiped", "slanted_parallelepiped", "trapezium"):
            shape = get_reference_shape(name)
            assert hexahedron_volume(shape.vertices) == pytest.approx(shape.volume())

    def test_unknown_shape(self):
        with pytest.raises(KeyError, match="known shapes"):
            get_reference_shape("dodecahedron")
