#!/usr/bin/env python3
"""
Polyhedron volume calculator.

Command-line interface for computing polyhedron volumes and checking the
built-in reference solids.

Usage:
    # Check all reference solids against their known volumes
    python volume_calculator.py reference

    # Check a single reference solid
    python volume_calculator.py reference --shape prism

    # Compute the volume of a mesh file (JSON, STL, OBJ, PLY, ...)
    python volume_calculator.py compute mesh.json
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import trimesh

from polyvolume.config import VolumeConfig, create_default_config
from polyvolume.errors import InvalidGeometryError, PolyVolumeError
from polyvolume.logging_config import configure_logging
from polyvolume.shapes import REFERENCE_SHAPES, get_reference_shape
from polyvolume.volume import Mesh, VolumeCalculator


def load_mesh(path: str) -> Mesh:
    """
    Load a mesh from disk.

    JSON files hold ``{"vertices": [[x, y, z], ...], "faces": [[i, j, k], ...]}``;
    faces may also be a flat index list. Any other format is read with trimesh.
    """
    mesh_path = Path(path)
    if not mesh_path.exists():
        raise FileNotFoundError(f"Mesh file not found: {path}")

    if mesh_path.suffix.lower() == '.json':
        with open(mesh_path, 'r') as f:
            data = json.load(f)
        if not isinstance(data, dict) or 'vertices' not in data or 'faces' not in data:
            raise InvalidGeometryError(
                "JSON mesh must contain 'vertices' and 'faces'",
                details={"path": path}
            )
        return Mesh(vertices=data['vertices'], faces=data['faces'])

    try:
        loaded = trimesh.load(str(mesh_path), force='mesh')
    except Exception as e:
        raise InvalidGeometryError(
            "Could not read mesh file",
            details={"path": path, "error": str(e)}
        ) from e

    return Mesh.from_trimesh(loaded)


def load_config(path: Optional[str]) -> VolumeConfig:
    if path:
        return VolumeConfig.load_from_file(path)
    return create_default_config()


def reference_command(args) -> int:
    """Compute the reference solids and compare them with their known volumes."""
    config = load_config(args.config)
    configure_logging(config.log_level, config.log_dir)
    calculator = VolumeCalculator(config)

    if args.shape:
        shapes = [get_reference_shape(args.shape)]
    else:
        shapes = list(REFERENCE_SHAPES.values())

    print("=" * 60)
    print("REFERENCE SOLIDS")
    print("=" * 60)

    failures = 0
    for shape in shapes:
        volume = calculator.calculate_volume(shape.vertices, shape.faces)
        ok = calculator.matches_expected(volume, shape.expected_volume)
        if not ok:
            failures += 1
        print(
            f"{shape.name}: {volume:.6f} "
            f"(expected {shape.expected_volume:.6f}) {'OK' if ok else 'MISMATCH'}"
        )

    print("=" * 60)
    print(f"{len(shapes) - failures}/{len(shapes)} solids within tolerance {config.tolerance}")
    return 1 if failures else 0


def compute_command(args) -> int:
    """Compute the volume of a mesh file."""
    config = load_config(args.config)
    if args.no_bounds_check:
        config.check_bounds = False
    configure_logging(config.log_level, config.log_dir)

    mesh = load_mesh(args.mesh)
    volume = VolumeCalculator(config).calculate_volume(mesh)

    print(f"Vertices: {mesh.num_vertices}")
    print(f"Faces: {mesh.num_faces}")
    print(f"Volume: {volume:.6f}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Polyhedron volume calculator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check the reference solids
  python volume_calculator.py reference

  # Volume of a mesh file
  python volume_calculator.py compute part.stl
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')
    subparsers.required = True

    reference_parser = subparsers.add_parser('reference', help='Check the reference solids')
    reference_parser.add_argument('--shape', choices=sorted(REFERENCE_SHAPES), help='Check a single solid')
    reference_parser.add_argument('--config', help='Configuration file (JSON)')
    reference_parser.set_defaults(func=reference_command)

    compute_parser = subparsers.add_parser('compute', help='Compute the volume of a mesh file')
    compute_parser.add_argument('mesh', help='Mesh file (JSON or any format trimesh reads)')
    compute_parser.add_argument('--no-bounds-check', action='store_true',
                                help='Skip face index validation')
    compute_parser.add_argument('--config', help='Configuration file (JSON)')
    compute_parser.set_defaults(func=compute_command)

    args = parser.parse_args(argv)

    try:
        return args.func(args)
    except (PolyVolumeError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
