"""
Polyhedron volume via the divergence theorem.

The volume of a closed polyhedron with consistently wound triangular faces is
the sum of the signed volumes of the tetrahedra formed by each face and one
fixed apex. The apex is always the polyhedron's first vertex: faces touching
it contribute degenerate, zero-volume tetrahedra, and the remaining signed
contributions telescope to the enclosed volume.

Faces must be wound counter-clockwise seen from outside the solid. Inconsistent
winding, open or non-manifold face lists are not detected and yield a wrong
(possibly negative) result.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

import numpy as np

from polyvolume.config import DEFAULT_TOLERANCE, VolumeConfig
from polyvolume.errors import (
    ConfigurationError, FaceIndexError, InvalidGeometryError, PolyVolumeError,
    VolumeCalculationError
)
from polyvolume.logging_config import PerformanceTimer, get_logger
from polyvolume.tetrahedron import Tetrahedron, signed_volumes

logger = get_logger(__name__)

# Index of the vertex used as the apex of every per-face tetrahedron
REFERENCE_VERTEX_INDEX = 0


@dataclass
class Mesh:
    """
    A triangulated polyhedron.

    Attributes:
        vertices: Nx3 array of vertex coordinates
        faces: Mx3 array of vertex indices, one row per triangle
    """
    vertices: np.ndarray
    faces: np.ndarray

    def __post_init__(self):
        self.vertices = as_vertex_array(self.vertices)
        self.faces = as_face_array(self.faces)

    @property
    def num_vertices(self) -> int:
        return self.vertices.shape[0]

    @property
    def num_faces(self) -> int:
        return self.faces.shape[0]

    @classmethod
    def from_trimesh(cls, tm) -> 'Mesh':
        """Build a Mesh from a ``trimesh.Trimesh`` instance."""
        return cls(vertices=np.asarray(tm.vertices), faces=np.asarray(tm.faces))

    def tetrahedra(self) -> List[Tetrahedron]:
        """The per-face tetrahedra whose signed volumes sum to the mesh volume."""
        apex = self.vertices[REFERENCE_VERTEX_INDEX]
        return [
            Tetrahedron.from_points(*self.vertices[face], apex)
            for face in self.faces
        ]


def as_vertex_array(vertices) -> np.ndarray:
    """
    Convert vertices to a non-empty Nx3 float64 array.

    Raises:
        InvalidGeometryError: If the data is not numeric, empty or not Nx3
    """
    try:
        arr = np.asarray(vertices, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidGeometryError(
            "Vertex coordinates must be numeric Nx3 data",
            details={"error": str(e)}
        ) from e
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise InvalidGeometryError(
            "Invalid vertex array dimensions",
            details={"expected": "Nx3", "got": arr.shape}
        )
    if arr.shape[0] == 0:
        raise InvalidGeometryError("Vertex array is empty", details={"num_vertices": 0})
    return arr


def as_face_array(faces) -> np.ndarray:
    """
    Convert faces to an Mx3 integer array.

    Accepts a sequence of index triples or a flat index sequence whose length
    is a multiple of three (face i is made of entries 3i, 3i+1 and 3i+2).

    Raises:
        InvalidGeometryError: If the indices are not integral or cannot be
            grouped into triples
    """
    try:
        arr = np.asarray(faces)
    except (TypeError, ValueError) as e:
        raise InvalidGeometryError(
            "Face indices must form a regular array",
            details={"error": str(e)}
        ) from e
    if arr.size == 0:
        return np.empty((0, 3), dtype=np.intp)

    if not np.issubdtype(arr.dtype, np.integer):
        if np.issubdtype(arr.dtype, np.floating) and np.all(np.mod(arr, 1) == 0):
            arr = arr.astype(np.intp)
        else:
            raise InvalidGeometryError(
                "Face indices must be integers",
                details={"dtype": arr.dtype}
            )

    if arr.ndim == 1:
        if arr.shape[0] % 3 != 0:
            raise InvalidGeometryError(
                "Flat face index list length must be a multiple of 3",
                details={"length": arr.shape[0]}
            )
        arr = arr.reshape(-1, 3)

    if arr.ndim != 2 or arr.shape[1] != 3:
        raise InvalidGeometryError(
            "Invalid face array dimensions",
            details={"expected": "Mx3", "got": arr.shape}
        )
    return arr.astype(np.intp, copy=False)


def validate_face_indices(faces: np.ndarray, num_vertices: int) -> None:
    """
    Check that every face index lies in [0, num_vertices).

    Raises:
        FaceIndexError: For the first face holding an out-of-range index
    """
    bad = (faces < 0) | (faces >= num_vertices)
    if np.any(bad):
        face_position = int(np.argmax(np.any(bad, axis=1)))
        index = int(faces[face_position][bad[face_position]][0])
        raise FaceIndexError(
            "Face references a vertex outside the vertex array",
            details={
                "face": face_position,
                "index": index,
                "num_vertices": num_vertices
            }
        )


def polyhedron_volume(vertices, faces, check_bounds: bool = True) -> float:
    """
    Calculate the volume of a closed, consistently wound polyhedron.

    One tetrahedron is formed per face from the face's three vertices and
    vertex 0 of the polyhedron; their signed volumes are summed.

    Args:
        vertices: Nx3 vertex coordinates, N >= 1
        faces: Mx3 (or flat, length 3M) vertex indices, counter-clockwise
            seen from outside
        check_bounds: Raise FaceIndexError for indices outside [0, N)
            before computing anything

    Returns:
        The enclosed volume; 0.0 for an empty face list

    Raises:
        InvalidGeometryError: If vertices or faces are malformed
        FaceIndexError: If check_bounds is set and an index is out of range
    """
    verts = as_vertex_array(vertices)
    tris = as_face_array(faces)

    if tris.shape[0] == 0:
        return 0.0

    if check_bounds:
        validate_face_indices(tris, verts.shape[0])

    corners = verts[tris]
    apex = verts[REFERENCE_VERTEX_INDEX]
    volumes = signed_volumes(corners[:, 0], corners[:, 1], corners[:, 2], apex)

    volume = float(np.sum(volumes))
    logger.debug(
        "Polyhedron volume calculated",
        num_vertices=verts.shape[0],
        num_faces=tris.shape[0],
        volume=f"{volume:.6f}"
    )
    return volume


total_volume = polyhedron_volume


def within_tolerance(volume: float, expected: float,
                     tolerance: float = DEFAULT_TOLERANCE,
                     one_sided: bool = False) -> bool:
    """
    Compare a computed volume with an expected one.

    Args:
        volume: Computed volume
        expected: Expected volume
        tolerance: Absolute tolerance
        one_sided: Legacy check that only bounds ``volume - expected`` from
            above. Any volume smaller than expected passes.

    Returns:
        True if the volume is accepted
    """
    if one_sided:
        return volume - expected < tolerance
    return abs(volume - expected) <= tolerance


class VolumeCalculator:
    """
    Configured front end for polyhedron volume calculation.

    Adds logging, timing and configuration on top of polyhedron_volume().
    Holds no per-call state, so one instance can be shared between threads.
    """

    def __init__(self, config: Optional[VolumeConfig] = None):
        """
        Initialize the VolumeCalculator.

        Args:
            config: Volume configuration. Defaults to VolumeConfig().

        Raises:
            ConfigurationError: If the configuration does not validate
        """
        self.config = config if config is not None else VolumeConfig()

        errors = self.config.validate()
        if errors:
            raise ConfigurationError(
                "Invalid volume configuration: " + "; ".join(errors),
                details={"num_errors": len(errors)}
            )

    def calculate_volume(self, mesh: Union[Mesh, Sequence, np.ndarray],
                         faces=None) -> float:
        """
        Calculate the volume of a mesh.

        Args:
            mesh: A Mesh, or a vertex array when faces is given
            faces: Face indices if mesh is a vertex array

        Returns:
            Volume in cubic units of the vertex coordinates

        Raises:
            InvalidGeometryError: If the input is malformed
            FaceIndexError: If bounds checking is enabled and an index is out of range
            VolumeCalculationError: If the calculation fails unexpectedly
        """
        if isinstance(mesh, Mesh):
            if faces is not None:
                raise InvalidGeometryError("faces must not be given together with a Mesh")
            vertices, faces = mesh.vertices, mesh.faces
        elif faces is None:
            raise InvalidGeometryError("faces are required when vertices are passed directly")
        else:
            vertices = mesh

        try:
            with PerformanceTimer(logger, "Volume calculation"):
                return polyhedron_volume(
                    vertices, faces, check_bounds=self.config.check_bounds
                )
        except PolyVolumeError:
            raise
        except Exception as e:
            logger.log_exception(e, context={"operation": "volume calculation"})
            raise VolumeCalculationError(
                "Volume calculation failed",
                details={"error": str(e)}
            ) from e

    def calculate_multiple_volumes(self, meshes: Sequence[Mesh]) -> List[float]:
        """
        Calculate volumes for several meshes.

        Args:
            meshes: Meshes to process

        Returns:
            List of volumes in input order
        """
        logger.debug("Calculating multiple volumes", num_meshes=len(meshes))
        return [self.calculate_volume(mesh) for mesh in meshes]

    def matches_expected(self, volume: float, expected: float) -> bool:
        """Check a volume against an expected value using the configured tolerance."""
        return within_tolerance(
            volume, expected,
            tolerance=self.config.tolerance,
            one_sided=self.config.one_sided_tolerance
        )
