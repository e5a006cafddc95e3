"""
arborgen - Procedural tree synthesis and tube meshing

This package grows a recursive branch hierarchy and turns it into
renderable surface geometry: Bezier tube sweeps for each branch span,
metaball blends at forks and flat leaf quads at the tips.

Main Entry Points:
    - generate_tree(): Grow a BranchNode hierarchy from a GrowthConfig
    - extract_segments(): Flatten a tree into parent->child segments
    - build_tree_mesh(): Mesh an existing tree
    - generate_tree_mesh(): One-call grow + mesh orchestration

Example:
    >>> from arbor_policies import GrowthConfig, TreeMeshPolicy
    >>> from arborgen import generate_tree_mesh
    >>>
    >>> config = GrowthConfig(levels=3, child_count=3, seed=7)
    >>> root, group, report = generate_tree_mesh(config, TreeMeshPolicy())
    >>> group.summary()
"""

from .core import (
    BranchNode,
    Segment,
    MetaballDescriptor,
    LeafPlacement,
    MeshBuffers,
    MeshGroup,
    count_nodes,
    validate_tree,
    tree_metrics,
)
from .ops import (
    grow_branches,
    generate_tree,
    extract_segments,
    sweep_bezier_tube,
    blend_junction,
    place_leaves,
)
from .api import build_tree_mesh, generate_tree_mesh, save_mesh_group

__all__ = [
    # High-level API
    "generate_tree_mesh",
    "build_tree_mesh",
    "save_mesh_group",
    # Operations
    "grow_branches",
    "generate_tree",
    "extract_segments",
    "sweep_bezier_tube",
    "blend_junction",
    "place_leaves",
    # Core types
    "BranchNode",
    "Segment",
    "MetaballDescriptor",
    "LeafPlacement",
    "MeshBuffers",
    "MeshGroup",
    "count_nodes",
    "validate_tree",
    "tree_metrics",
]
