"""
Leaf placement at branch tips.
"""

from typing import Any, Dict, List, Optional
import logging

import numpy as np
from scipy.spatial import cKDTree
from scipy.spatial.transform import Rotation

from ..core.branch import LeafPlacement, Segment
from ..core.mesh import MeshBuffers
from ..backends.base import GeometryBackend

logger = logging.getLogger(__name__)

DEFAULT_DEDUP_TOLERANCE = 0.1


def find_leaf_positions(
    segments: List[Segment],
    tolerance: float = DEFAULT_DEDUP_TOLERANCE,
) -> List[np.ndarray]:
    """
    Unique segment end positions, first occurrence wins.

    Two ends are the same tip when every per-axis difference is strictly
    below ``tolerance``. An end is dropped only if it matches an end that
    was already kept.
    """
    if not segments:
        return []

    ends = np.array([s.end for s in segments], dtype=float)
    index = cKDTree(ends)
    kept = np.zeros(len(ends), dtype=bool)

    for i, end in enumerate(ends):
        # Chebyshev ball, then the strict per-axis check
        candidates = index.query_ball_point(end, r=tolerance, p=np.inf)
        duplicate = any(
            j < i and kept[j] and np.all(np.abs(ends[j] - end) < tolerance)
            for j in candidates
        )
        if not duplicate:
            kept[i] = True

    return [ends[i].copy() for i in np.flatnonzero(kept)]


def plan_leaf_placements(
    segments: List[Segment],
    rng: Optional[np.random.Generator] = None,
    tolerance: float = DEFAULT_DEDUP_TOLERANCE,
    max_tilt_rad: float = np.pi,
) -> List[LeafPlacement]:
    """One placement per unique tip with an independent random XYZ rotation."""
    if rng is None:
        rng = np.random.default_rng()

    placements = []
    for position in find_leaf_positions(segments, tolerance):
        rotation = (rng.random(3) - 0.5) * max_tilt_rad
        placements.append(LeafPlacement(position=position, rotation=rotation))
    return placements


def leaf_quad(size: float):
    """Flat square in the XY plane centred on the origin, facing +Z."""
    h = size / 2.0
    positions = np.array([
        [-h, h, 0.0],
        [h, h, 0.0],
        [-h, -h, 0.0],
        [h, -h, 0.0],
    ])
    normals = np.tile([0.0, 0.0, 1.0], (4, 1))
    indices = np.array([[0, 2, 1], [2, 3, 1]])
    return positions, normals, indices


def build_leaf_mesh(
    placement: LeafPlacement,
    leaf_size: float,
    backend: Optional[GeometryBackend],
    hints: Optional[Dict[str, Any]] = None,
) -> Optional[MeshBuffers]:
    """
    Rotate a leaf quad about X, then Y, then Z and move it to the tip.

    Returns None if no geometry backend is available.
    """
    if backend is None:
        return None

    positions, normals, indices = leaf_quad(leaf_size)
    rotation = Rotation.from_euler("xyz", placement.rotation)
    positions = rotation.apply(positions) + placement.position
    normals = rotation.apply(normals)

    return backend.build_buffers(positions, normals, indices, kind="leaf", hints=hints)


def place_leaves(
    segments: List[Segment],
    leaf_size: float,
    backend: Optional[GeometryBackend],
    rng: Optional[np.random.Generator] = None,
    tolerance: float = DEFAULT_DEDUP_TOLERANCE,
    max_tilt_rad: float = np.pi,
    hints: Optional[Dict[str, Any]] = None,
) -> List[MeshBuffers]:
    """
    Build one randomly oriented leaf quad per unique branch tip.

    Parameters
    ----------
    segments : list of Segment
        Segments whose ends are candidate tips
    leaf_size : float
        Edge length of each square leaf
    backend : GeometryBackend or None
        Mesh construction backend; None yields no leaves
    rng : np.random.Generator, optional
        Random source for the rotations
    tolerance : float
        Per-axis deduplication tolerance
    max_tilt_rad : float
        Full range of each axis rotation
    hints : dict, optional
        Opaque rendering hints

    Returns
    -------
    List[MeshBuffers]
        Leaf sub-meshes (empty without a backend)
    """
    if backend is None:
        logger.warning("Leaf placement skipped: no geometry backend available")
        return []

    placements = plan_leaf_placements(segments, rng, tolerance, max_tilt_rad)
    leaves = [build_leaf_mesh(p, leaf_size, backend, hints) for p in placements]
    logger.debug(f"Placed {len(leaves)} leaves on {len(segments)} segments")
    return leaves


__all__ = [
    "find_leaf_positions",
    "plan_leaf_placements",
    "leaf_quad",
    "build_leaf_mesh",
    "place_leaves",
]
