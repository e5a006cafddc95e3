"""
Operations for growing branch trees and turning them into meshes.

This module re-exports commonly used operations from submodules.
For full API access, import from specific submodules:
    - arborgen.ops.primitives: Bezier tube sweep
    - arborgen.ops.mesh: Junction blending
"""

from .growth import grow_branches, generate_tree, spherical_direction, GOLDEN_ANGLE
from .segments import extract_segments
from .primitives import sweep_bezier_tube
from .mesh import blend_junction, blend_junctions
from .foliage import find_leaf_positions, plan_leaf_placements, place_leaves

__all__ = [
    "grow_branches",
    "generate_tree",
    "spherical_direction",
    "GOLDEN_ANGLE",
    "extract_segments",
    "sweep_bezier_tube",
    "blend_junction",
    "blend_junctions",
    "find_leaf_positions",
    "plan_leaf_placements",
    "place_leaves",
]
