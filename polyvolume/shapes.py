"""
Face tables for common solids and the reference solids used for verification.

Vertex numbering of the quadrilaterally-faced hexahedron (a cube shown)::

       4  .__________. 7
         /|      6  /|
    5  ./_|_______./ |
       |  |       |  |
       |  |0      |  |
       |  |_______|__|3
       | /        | /
    1  |/_________|/ 2

Vertex numbering of the triangular prism; top and bottom need not be
parallel::

        3 .
         /|\\
     4 ./_|_\\. 5
       |  |  |
       |  |0 |
       |  |  |
       | / \\ |
    1  |/___\\| 2

All faces are wound counter-clockwise seen from outside.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

import numpy as np

from polyvolume.errors import InvalidGeometryError
from polyvolume.volume import as_vertex_array, polyhedron_volume

Face = Tuple[int, int, int]


def triangulate_quad(a: int, b: int, c: int, d: int) -> List[Face]:
    """Split the quadrilateral (a, b, c, d) into two triangles with the same winding."""
    return [(a, b, c), (a, c, d)]


def _triangulate(polygons) -> List[Face]:
    faces: List[Face] = []
    for polygon in polygons:
        if len(polygon) == 3:
            faces.append(tuple(polygon))
        else:
            faces.extend(triangulate_quad(*polygon))
    return faces


HEXAHEDRON_QUADS: List[Tuple[int, int, int, int]] = [
    (0, 3, 2, 1),  # base
    (4, 5, 6, 7),  # top
    (0, 1, 5, 4),  # left
    (1, 2, 6, 5),  # front
    (3, 7, 6, 2),  # right
    (0, 4, 7, 3),  # back
]

HEXAHEDRON_FACES: List[Face] = _triangulate(HEXAHEDRON_QUADS)

PRISM_POLYGONS = [
    (0, 2, 1),     # base
    (3, 4, 5),     # top
    (0, 1, 4, 3),  # left
    (1, 2, 5, 4),  # front
    (0, 3, 5, 2),  # right
]

PRISM_FACES: List[Face] = _triangulate(PRISM_POLYGONS)


def _shape_volume(vertices, faces: List[Face], expected_vertices: int, name: str) -> float:
    verts = as_vertex_array(vertices)
    if verts.shape[0] != expected_vertices:
        raise InvalidGeometryError(
            f"A {name} needs exactly {expected_vertices} vertices",
            details={"got": verts.shape[0]}
        )
    return polyhedron_volume(verts, faces)


def hexahedron_volume(vertices) -> float:
    """
    Volume of a quadrilaterally-faced hexahedron.

    Args:
        vertices: 8x3 vertex coordinates in the order shown in the module docstring

    Raises:
        InvalidGeometryError: If there are not exactly 8 vertices
    """
    return _shape_volume(vertices, HEXAHEDRON_FACES, 8, "hexahedron")


def prism_volume(vertices) -> float:
    """
    Volume of a triangular prism.

    Args:
        vertices: 6x3 vertex coordinates in the order shown in the module docstring

    Raises:
        InvalidGeometryError: If there are not exactly 6 vertices
    """
    return _shape_volume(vertices, PRISM_FACES, 6, "prism")


def box_vertices(length: float, width: float, height: float) -> np.ndarray:
    """Corners of the axis-aligned box [0, length] x [0, width] x [0, height] in hexahedron order."""
    return np.array([
        [0, 0, 0],
        [length, 0, 0],
        [length, width, 0],
        [0, width, 0],
        [0, 0, height],
        [length, 0, height],
        [length, width, height],
        [0, width, height],
    ], dtype=np.float64)


@dataclass(frozen=True)
class ReferenceShape:
    """
    A solid with a known volume.

    Attributes:
        name: Shape identifier
        vertices: Vertex coordinates
        faces: Triangle faces
        expected_volume: Exact volume of the solid
    """
    name: str
    vertices: Tuple[Tuple[float, float, float], ...]
    faces: Tuple[Face, ...] = field(repr=False)
    expected_volume: float

    def volume(self) -> float:
        return polyhedron_volume(self.vertices, self.faces)


def _reference(name, vertices, faces, expected_volume) -> ReferenceShape:
    return ReferenceShape(
        name=name,
        vertices=tuple(tuple(float(c) for c in v) for v in vertices),
        faces=tuple(tuple(f) for f in faces),
        expected_volume=expected_volume,
    )


_SLANTED = box_vertices(4, 2, 2)
_SLANTED[4:, 1] += 1.0

_TRAPEZIUM = box_vertices(4, 2, 2)
_TRAPEZIUM[[6, 7], 2] = 4.0

REFERENCE_SHAPES: Dict[str, ReferenceShape] = {
    shape.name: shape for shape in [
        _reference(
            "pyramid",
            [(0, 0, 0), (1, 0, 0), (0, 1, 0), (1, 1, 1)],
            [(1, 0, 2), (1, 3, 0), (2, 3, 0), (1, 2, 3)],
            1 / 6.0,
        ),
        _reference("cube", box_vertices(2, 2, 2), HEXAHEDRON_FACES, 8.0),
        _reference("parallelepiped", box_vertices(4, 2, 2), HEXAHEDRON_FACES, 16.0),
        # shear preserves volume
        _reference("slanted_parallelepiped", _SLANTED, HEXAHEDRON_FACES, 16.0),
        _reference(
            "prism",
            [(0, 0, 0), (4, 0, 0), (0, 4, 0), (0, 0, 6), (4, 0, 6), (0, 4, 6)],
            PRISM_FACES,
            48.0,
        ),
        # 4x2x2 box with a wedge on top
        _reference("trapezium", _TRAPEZIUM, HEXAHEDRON_FACES, 24.0),
    ]
}


def get_reference_shape(name: str) -> ReferenceShape:
    """
    Look up a reference shape by name.

    Raises:
        KeyError: If the name is unknown
    """
    try:
        return REFERENCE_SHAPES[name]
    except KeyError:
        raise KeyError(
            f"Unknown reference shape {name!r}; known shapes: "
            f"{', '.join(REFERENCE_SHAPES)}"
        ) from None
