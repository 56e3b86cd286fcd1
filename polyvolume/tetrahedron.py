"""
Signed tetrahedron volume.

The volume is computed by translating the tetrahedron so that its last
vertex lies at the origin and taking the scalar triple product of the three
remaining edge vectors (O'Rourke, Computational Geometry in C, Code 4.16):

    a = p0 - p3,  b = p1 - p3,  c = p2 - p3
    V = a . (b x c) / 6

The sign of V encodes the handedness of (p0, p1, p2) as seen from p3. It is
positive when the three points wind counter-clockwise seen from the side
opposite to p3.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple, Union

import numpy as np

from polyvolume.errors import InvalidGeometryError


Point3 = Union[Tuple[float, float, float], Sequence[float], np.ndarray]


def as_point(point: Point3) -> np.ndarray:
    """
    Convert a point-like value to a float64 array of shape (3,).

    Raises:
        InvalidGeometryError: If the value does not hold exactly three coordinates
    """
    arr = np.asarray(point, dtype=np.float64)
    if arr.shape != (3,):
        raise InvalidGeometryError(
            "Point must have exactly three coordinates",
            details={"expected": "(3,)", "got": arr.shape}
        )
    return arr


def tetrahedron_volume(p0: Point3, p1: Point3, p2: Point3, p3: Point3) -> float:
    """
    Calculate the signed volume of the tetrahedron (p0, p1, p2, p3).

    Args:
        p0, p1, p2: The face vertices
        p3: The vertex translated to the origin

    Returns:
        Signed volume. Swapping any two vertices flips the sign; NaN or Inf
        only appear if the inputs contain them.
    """
    d = as_point(p3)
    ax, ay, az = as_point(p0) - d
    bx, by, bz = as_point(p1) - d
    cx, cy, cz = as_point(p2) - d

    vol = (ax * (by * cz - bz * cy)
           + ay * (bz * cx - bx * cz)
           + az * (bx * cy - by * cx)) / 6.0

    return float(vol)


def signed_volumes(p0: np.ndarray, p1: np.ndarray, p2: np.ndarray,
                   p3: np.ndarray) -> np.ndarray:
    """
    Batched signed tetrahedron volumes.

    Each argument is either a Kx3 array of points or a single point of
    shape (3,), which is broadcast against the others.

    Returns:
        Array of K signed volumes
    """
    d = np.asarray(p3, dtype=np.float64)
    a = np.asarray(p0, dtype=np.float64) - d
    b = np.asarray(p1, dtype=np.float64) - d
    c = np.asarray(p2, dtype=np.float64) - d

    if a.shape[-1:] != (3,) or b.shape[-1:] != (3,) or c.shape[-1:] != (3,):
        raise InvalidGeometryError(
            "Points must have exactly three coordinates",
            details={"shapes": (a.shape, b.shape, c.shape)}
        )

    return np.einsum('...i,...i->...', a, np.cross(b, c)) / 6.0


@dataclass(frozen=True)
class Tetrahedron:
    """
    Four points: three face vertices followed by the reference vertex.

    Attributes:
        p0, p1, p2: Face vertices in winding order
        p3: Reference (apex) vertex
    """
    p0: Tuple[float, float, float]
    p1: Tuple[float, float, float]
    p2: Tuple[float, float, float]
    p3: Tuple[float, float, float]

    @classmethod
    def from_points(cls, p0: Point3, p1: Point3, p2: Point3, p3: Point3) -> 'Tetrahedron':
        """Build a tetrahedron, copying each point by value."""
        return cls(*(tuple(as_point(p).tolist()) for p in (p0, p1, p2, p3)))

    @property
    def volume(self) -> float:
        """Signed volume of the tetrahedron."""
        return tetrahedron_volume(self.p0, self.p1, self.p2, self.p3)

    def as_array(self) -> np.ndarray:
        """Return the four points as a 4x3 array."""
        return np.array([self.p0, self.p1, self.p2, self.p3], dtype=np.float64)
