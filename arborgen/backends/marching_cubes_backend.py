"""
Isosurface backend using scikit-image marching cubes.

The scalar field is a sum of inverse-square metaball contributions
sampled on a regular grid over the normalized unit cube:

    f(p) = sum_i strength_i * radius_i**2 / (|p - c_i|**2 + eps)

A lone ball of strength 1 at isolation 1 yields a sphere of its own
radius; nearby balls merge into one smooth blob.
"""

from typing import Any, Dict, List, Optional, Tuple
import logging

import numpy as np
from skimage.measure import marching_cubes

from ..core.mesh import MeshBuffers
from .base import IsosurfaceBackend

logger = logging.getLogger(__name__)

FIELD_EPSILON = 1e-6


class MarchingCubesBackend(IsosurfaceBackend):
    """Metaball field sampler with skimage.measure.marching_cubes extraction."""

    name = "skimage"

    def __init__(self, resolution: int = 64, isolation: float = 1.0):
        super().__init__(resolution, isolation)
        self._balls: List[Tuple[float, float, float, float, float]] = []

    @property
    def ball_count(self) -> int:
        return len(self._balls)

    def reset(self) -> None:
        self._balls = []

    def add_ball(self, x: float, y: float, z: float, radius: float, strength: float = 1.0) -> None:
        self._balls.append((float(x), float(y), float(z), float(radius), float(strength)))

    def sample_field(self) -> np.ndarray:
        """Evaluate the metaball field on a resolution^3 grid over [0, 1]^3."""
        n = self.resolution
        axis = np.linspace(0.0, 1.0, n)
        xx, yy, zz = np.meshgrid(axis, axis, axis, indexing="ij")

        field = np.zeros((n, n, n))
        for x, y, z, radius, strength in self._balls:
            d2 = (xx - x) ** 2 + (yy - y) ** 2 + (zz - z) ** 2
            field += strength * radius ** 2 / (d2 + FIELD_EPSILON)
        return field

    def extract_isosurface(
        self,
        bounds_min: np.ndarray,
        extent: float,
        hints: Optional[Dict[str, Any]] = None,
    ) -> Optional[MeshBuffers]:
        if not self._balls:
            return None
        if extent <= 0:
            logger.warning(f"Isosurface skipped: non-positive sampling extent {extent}")
            return None

        field = self.sample_field()
        if field.max() <= self.isolation or field.min() >= self.isolation:
            logger.warning(
                f"Isosurface skipped: field range [{field.min():.3g}, {field.max():.3g}] "
                f"does not cross isolation {self.isolation}"
            )
            return None

        step = extent / (self.resolution - 1)
        verts, faces, normals, _ = marching_cubes(
            field,
            level=self.isolation,
            spacing=(step, step, step),
        )
        verts = verts + np.asarray(bounds_min, dtype=float).reshape(1, 3)

        return MeshBuffers(
            positions=verts,
            normals=normals,
            indices=faces,
            kind="junction",
            hints=dict(hints or {}),
        )


__all__ = [
    "MarchingCubesBackend",
]
