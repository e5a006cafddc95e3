"""
Headless backends with no third-party mesh library behind them.
"""

from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ..core.mesh import MeshBuffers
from .base import GeometryBackend, IsosurfaceBackend


class NullGeometryBackend(GeometryBackend):
    """Wraps raw arrays in MeshBuffers without validation or normal smoothing."""

    name = "null"

    def build_buffers(
        self,
        positions: np.ndarray,
        normals: np.ndarray,
        indices: np.ndarray,
        kind: str = "tube",
        hints: Optional[Dict[str, Any]] = None,
    ) -> MeshBuffers:
        return MeshBuffers(
            positions=positions,
            normals=normals,
            indices=indices,
            kind=kind,
            hints=dict(hints or {}),
        )


class NullIsosurfaceBackend(IsosurfaceBackend):
    """Records balls for inspection and never produces a surface."""

    name = "null"

    def __init__(self, resolution: int = 64, isolation: float = 1.0):
        super().__init__(resolution, isolation)
        self.balls: List[Tuple[float, float, float, float, float]] = []

    def reset(self) -> None:
        self.balls = []

    def add_ball(self, x: float, y: float, z: float, radius: float, strength: float = 1.0) -> None:
        self.balls.append((x, y, z, radius, strength))

    def extract_isosurface(
        self,
        bounds_min: np.ndarray,
        extent: float,
        hints: Optional[Dict[str, Any]] = None,
    ) -> Optional[MeshBuffers]:
        return None


__all__ = [
    "NullGeometryBackend",
    "NullIsosurfaceBackend",
]
