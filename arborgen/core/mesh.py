"""
Renderer-agnostic mesh buffers.

A MeshBuffers is the positions/normals/indices triple produced for one
tube, junction patch or leaf. A MeshGroup is the ordered bundle handed to
the rendering layer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import trimesh


@dataclass(eq=False)
class MeshBuffers:
    """
    Vertex/normal/index buffers for a single sub-mesh.

    positions and normals are (N, 3) float arrays, indices is an (M, 3)
    integer array of triangle corners.
    """

    positions: np.ndarray
    normals: np.ndarray
    indices: np.ndarray
    kind: str = "tube"
    hints: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.positions = np.asarray(self.positions, dtype=float).reshape(-1, 3)
        self.normals = np.asarray(self.normals, dtype=float).reshape(-1, 3)
        self.indices = np.asarray(self.indices, dtype=np.int64).reshape(-1, 3)

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def triangle_count(self) -> int:
        return len(self.indices)

    def flat_positions(self) -> np.ndarray:
        return self.positions.ravel()

    def flat_indices(self) -> np.ndarray:
        return self.indices.ravel()

    def to_trimesh(self) -> "trimesh.Trimesh":
        import trimesh

        return trimesh.Trimesh(
            vertices=self.positions,
            faces=self.indices,
            vertex_normals=self.normals,
            process=False,
        )


@dataclass
class MeshGroup:
    """Ordered collection of sub-meshes produced by one generation call."""

    meshes: List[MeshBuffers] = field(default_factory=list)

    def add(self, mesh: Optional[MeshBuffers]) -> bool:
        """Append a sub-mesh; ``None`` (a skipped stage) is ignored."""
        if mesh is None:
            return False
        self.meshes.append(mesh)
        return True

    def by_kind(self, kind: str) -> List[MeshBuffers]:
        return [m for m in self.meshes if m.kind == kind]

    def __len__(self) -> int:
        return len(self.meshes)

    def __iter__(self) -> Iterator[MeshBuffers]:
        return iter(self.meshes)

    @property
    def vertex_count(self) -> int:
        return sum(m.vertex_count for m in self.meshes)

    @property
    def triangle_count(self) -> int:
        return sum(m.triangle_count for m in self.meshes)

    def summary(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for m in self.meshes:
            counts[m.kind] = counts.get(m.kind, 0) + 1
        return counts

    def to_scene(self) -> "trimesh.Scene":
        """Build a trimesh.Scene with one named geometry per sub-mesh."""
        import trimesh

        scene = trimesh.Scene()
        for i, m in enumerate(self.meshes):
            scene.add_geometry(m.to_trimesh(), geom_name=f"{m.kind}_{i:04d}")
        return scene

    def concatenate(self) -> "trimesh.Trimesh":
        """Merge every sub-mesh into a single trimesh.Trimesh."""
        import trimesh

        if not self.meshes:
            return trimesh.Trimesh()
        return trimesh.util.concatenate([m.to_trimesh() for m in self.meshes])


__all__ = [
    "MeshBuffers",
    "MeshGroup",
]
