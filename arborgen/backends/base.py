"""
Base interfaces for geometry and isosurface backends.

The mesh stages never touch a rendering or meshing library directly; they
go through these two interfaces so a headless no-op implementation can
stand in during tests and a missing backend degrades to "no mesh".
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import numpy as np

from ..core.mesh import MeshBuffers


class GeometryBackend(ABC):
    """
    Abstract base class for triangle-mesh construction.

    Implementations turn raw position/normal/index arrays into a
    MeshBuffers, optionally validating or post-processing them.
    """

    name: str = "abstract"

    @abstractmethod
    def build_buffers(
        self,
        positions: np.ndarray,
        normals: np.ndarray,
        indices: np.ndarray,
        kind: str = "tube",
        hints: Optional[Dict[str, Any]] = None,
    ) -> MeshBuffers:
        """
        Build a sub-mesh from raw buffers.

        Parameters
        ----------
        positions : np.ndarray
            (N, 3) vertex positions
        normals : np.ndarray
            (N, 3) approximate vertex normals
        indices : np.ndarray
            (M, 3) triangle vertex indices
        kind : str
            Sub-mesh kind ("tube", "junction", "leaf")
        hints : dict, optional
            Opaque rendering hints carried through unchanged

        Returns
        -------
        MeshBuffers
            The constructed sub-mesh
        """
        pass


class IsosurfaceBackend(ABC):
    """
    Abstract base class for metaball isosurface extraction.

    Ball centers and radii are given in the normalized [0, 1]^3 sampling
    cube; ``extract_isosurface`` maps the result back to world space.
    """

    name: str = "abstract"

    def __init__(self, resolution: int = 64, isolation: float = 1.0):
        self.resolution = resolution
        self.isolation = isolation

    def configure(self, resolution: int, isolation: float) -> None:
        """Set the sampling resolution and field threshold."""
        if resolution < 2:
            raise ValueError(f"resolution must be >= 2, got {resolution}")
        self.resolution = resolution
        self.isolation = isolation

    @abstractmethod
    def reset(self) -> None:
        """Discard all balls added since the last reset."""
        pass

    @abstractmethod
    def add_ball(self, x: float, y: float, z: float, radius: float, strength: float = 1.0) -> None:
        """Add a metaball at normalized coordinates."""
        pass

    @abstractmethod
    def extract_isosurface(
        self,
        bounds_min: np.ndarray,
        extent: float,
        hints: Optional[Dict[str, Any]] = None,
    ) -> Optional[MeshBuffers]:
        """
        Extract the isosurface of the current balls.

        Parameters
        ----------
        bounds_min : np.ndarray
            World-space corner of the sampling cube
        extent : float
            World-space edge length of the sampling cube
        hints : dict, optional
            Opaque rendering hints for the resulting sub-mesh

        Returns
        -------
        MeshBuffers or None
            Junction patch, or None if no surface was produced
        """
        pass


__all__ = [
    "GeometryBackend",
    "IsosurfaceBackend",
]
