"""
Policies for converting a branch tree into renderable surface geometry.

Colour fields are opaque hints forwarded to the rendering layer; nothing
in arborgen interprets them.
"""

from dataclasses import dataclass, field, asdict
from math import pi
from typing import Optional, Dict, Any, List

from .base import validate_policy


@dataclass
class TubeMeshPolicy:
    """
    Policy for Bezier tube sweeps along branch segments.

    JSON Schema:
    {
        "ring_segments": int (>= 3),
        "path_steps": int (>= 1),
        "handle_fraction": float (fraction of segment length),
        "tangent_epsilon": float,
        "trunk_radius": float | null (defaults to GrowthConfig.base_radius),
        "branch_radius_factor": float,
        "level_decay": float,
        "tip_radius_factor": float,
        "smooth_normals": bool
    }
    """
    ring_segments: int = 24
    path_steps: int = 24
    handle_fraction: float = 0.3
    tangent_epsilon: float = 1e-3
    trunk_radius: Optional[float] = None
    branch_radius_factor: float = 0.7
    level_decay: float = 0.8
    tip_radius_factor: float = 0.5
    smooth_normals: bool = True

    def validate(self) -> List[str]:
        errors = []
        if self.ring_segments < 3:
            errors.append(f"ring_segments must be >= 3, got {self.ring_segments}")
        if self.path_steps < 1:
            errors.append(f"path_steps must be >= 1, got {self.path_steps}")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "TubeMeshPolicy":
        return TubeMeshPolicy(**{k: v for k, v in d.items() if k in TubeMeshPolicy.__dataclass_fields__})


@dataclass
class JunctionBlendPolicy:
    """
    Policy for metaball blending at branch forks.

    JSON Schema:
    {
        "enabled": bool,
        "resolution": int (grid samples per axis, >= 2),
        "isolation": float (field threshold),
        "padding_factor": float (radius multiples around each stub),
        "strength": float (per-ball field strength),
        "stub_offset": float (radii to shift each ball into its branch)
    }
    """
    enabled: bool = True
    resolution: int = 64
    isolation: float = 1.0
    padding_factor: float = 2.0
    strength: float = 1.0
    stub_offset: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "JunctionBlendPolicy":
        return JunctionBlendPolicy(**{k: v for k, v in d.items() if k in JunctionBlendPolicy.__dataclass_fields__})


@dataclass
class FoliagePolicy:
    """
    Policy for leaf quads at branch tips.

    JSON Schema:
    {
        "enabled": bool,
        "leaf_size": float,
        "dedup_tolerance": float (per-axis),
        "max_tilt_rad": float (full range of each random rotation)
    }
    """
    enabled: bool = True
    leaf_size: float = 2.0
    dedup_tolerance: float = 0.1
    max_tilt_rad: float = pi

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "FoliagePolicy":
        return FoliagePolicy(**{k: v for k, v in d.items() if k in FoliagePolicy.__dataclass_fields__})


@dataclass
class TreeMeshPolicy:
    """
    Top-level policy for the tree mesh pipeline.

    JSON Schema:
    {
        "tube": TubeMeshPolicy,
        "junction": JunctionBlendPolicy,
        "foliage": FoliagePolicy,
        "geometry_backend": str,
        "isosurface_backend": str,
        "trunk_color": int, "branch_color": int,
        "leaf_color": int, "junction_color": int
    }
    """
    tube: TubeMeshPolicy = field(default_factory=TubeMeshPolicy)
    junction: JunctionBlendPolicy = field(default_factory=JunctionBlendPolicy)
    foliage: FoliagePolicy = field(default_factory=FoliagePolicy)
    geometry_backend: str = "trimesh"
    isosurface_backend: str = "skimage"
    trunk_color: int = 0x8B4513
    branch_color: int = 0xA0522D
    leaf_color: int = 0x228B22
    junction_color: int = 0xCCCC99

    def validate(self) -> List[str]:
        errors = validate_policy(self, ["tube", "geometry_backend", "isosurface_backend"])
        if self.tube is not None:
            errors.extend(self.tube.validate())
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "TreeMeshPolicy":
        d = dict(d)
        if isinstance(d.get("tube"), dict):
            d["tube"] = TubeMeshPolicy.from_dict(d["tube"])
        if isinstance(d.get("junction"), dict):
            d["junction"] = JunctionBlendPolicy.from_dict(d["junction"])
        if isinstance(d.get("foliage"), dict):
            d["foliage"] = FoliagePolicy.from_dict(d["foliage"])
        return TreeMeshPolicy(**{k: v for k, v in d.items() if k in TreeMeshPolicy.__dataclass_fields__})


__all__ = [
    "TubeMeshPolicy",
    "JunctionBlendPolicy",
    "FoliagePolicy",
    "TreeMeshPolicy",
]
