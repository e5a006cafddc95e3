"""Core data structures for branch trees and their meshes."""

from .branch import (
    BranchNode,
    Segment,
    MetaballDescriptor,
    LeafPlacement,
    count_nodes,
    tree_depth,
    nodes_at_depth,
    iter_junctions,
    iter_tips,
    validate_tree,
    tree_to_graph,
    tree_metrics,
)
from .mesh import MeshBuffers, MeshGroup

__all__ = [
    "BranchNode",
    "Segment",
    "MetaballDescriptor",
    "LeafPlacement",
    "count_nodes",
    "tree_depth",
    "nodes_at_depth",
    "iter_junctions",
    "iter_tips",
    "validate_tree",
    "tree_to_graph",
    "tree_metrics",
    "MeshBuffers",
    "MeshGroup",
]
