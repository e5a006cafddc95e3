"""
Mesh-level operations on branch trees.
"""

from .junction import (
    collect_metaballs,
    merged_influence_radius,
    metaball_bounds,
    sampling_cube,
    blend_junction,
    blend_junctions,
)

__all__ = [
    "collect_metaballs",
    "merged_influence_radius",
    "metaball_bounds",
    "sampling_cube",
    "blend_junction",
    "blend_junctions",
]
