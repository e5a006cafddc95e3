"""
Geometry backend built on trimesh.
"""

from typing import Any, Dict, Optional
import logging

import numpy as np
import trimesh

from ..core.mesh import MeshBuffers
from .base import GeometryBackend

logger = logging.getLogger(__name__)


class TrimeshGeometryBackend(GeometryBackend):
    """
    Builds sub-meshes through trimesh.Trimesh.

    Meshes are constructed with ``process=False`` so vertex order and count
    match the input buffers exactly. With ``smooth_normals`` the approximate
    input normals are replaced by trimesh's area-weighted vertex normals.
    """

    name = "trimesh"

    def __init__(self, smooth_normals: bool = True):
        self.smooth_normals = smooth_normals

    def build_buffers(
        self,
        positions: np.ndarray,
        normals: np.ndarray,
        indices: np.ndarray,
        kind: str = "tube",
        hints: Optional[Dict[str, Any]] = None,
    ) -> MeshBuffers:
        mesh = trimesh.Trimesh(
            vertices=np.asarray(positions, dtype=float).reshape(-1, 3),
            faces=np.asarray(indices, dtype=np.int64).reshape(-1, 3),
            process=False,
        )

        out_normals = np.asarray(normals, dtype=float).reshape(-1, 3)
        if self.smooth_normals and len(mesh.faces) > 0:
            smoothed = np.array(mesh.vertex_normals, dtype=float)
            # Vertices on zero-area faces (collapsed tips) keep their input normal
            degenerate = ~np.all(np.isfinite(smoothed), axis=1)
            degenerate |= np.linalg.norm(np.nan_to_num(smoothed), axis=1) < 1e-12
            if np.any(degenerate):
                logger.debug(f"{int(degenerate.sum())} {kind} vertices kept approximate normals")
                smoothed[degenerate] = out_normals[degenerate]
            out_normals = smoothed

        return MeshBuffers(
            positions=mesh.vertices,
            normals=out_normals,
            indices=mesh.faces,
            kind=kind,
            hints=dict(hints or {}),
        )


__all__ = [
    "TrimeshGeometryBackend",
]
