"""Polyhedron volume calculation by signed tetrahedron decomposition."""

from polyvolume.tetrahedron import Tetrahedron, tetrahedron_volume, signed_volumes
from polyvolume.volume import (
    Mesh, VolumeCalculator, polyhedron_volume, total_volume, within_tolerance
)
from polyvolume.shapes import (
    HEXAHEDRON_FACES, PRISM_FACES, REFERENCE_SHAPES,
    hexahedron_volume, prism_volume
)
from polyvolume.config import VolumeConfig

__version__ = "1.0.0"

__all__ = [
    'Tetrahedron',
    'tetrahedron_volume',
    'signed_volumes',
    'Mesh',
    'VolumeCalculator',
    'polyhedron_volume',
    'total_volume',
    'within_tolerance',
    'HEXAHEDRON_FACES',
    'PRISM_FACES',
    'REFERENCE_SHAPES',
    'hexahedron_volume',
    'prism_volume',
    'VolumeConfig'
]
