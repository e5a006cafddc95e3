"""
Core branch tree data structures.

A tree is a strict hierarchy of BranchNode objects: each node exclusively
owns its children, with no back-references and no sharing.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

import networkx as nx
import numpy as np


def _as_vec3(value) -> np.ndarray:
    return np.asarray(value, dtype=float).reshape(3)


@dataclass(eq=False)
class BranchNode:
    """
    One branch of the tree.

    The child's origin always sits at the parent's distal end, so connected
    branches never gap or overlap.
    """

    origin: np.ndarray
    direction: np.ndarray
    length: float
    radius: float
    level: int = 0
    children: List["BranchNode"] = field(default_factory=list)

    def __post_init__(self):
        self.origin = _as_vec3(self.origin)
        self.direction = _as_vec3(self.direction)

    @property
    def distal_end(self) -> np.ndarray:
        """Point where this branch ends and its children start."""
        return self.origin + self.direction * self.length

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def iter_nodes(self) -> Iterator["BranchNode"]:
        """Pre-order traversal of this node and its subtree."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def to_dict(self) -> dict:
        """Flat description of this node (children are not included)."""
        return {
            "origin": self.origin.tolist(),
            "direction": self.direction.tolist(),
            "length": float(self.length),
            "radius": float(self.radius),
            "level": self.level,
            "child_count": len(self.children),
        }


@dataclass(frozen=True, eq=False)
class Segment:
    """
    Straight span emitted for one parent->child edge.

    ``start``/``end`` bound the parent branch. ``start_direction`` is the
    parent's direction and ``end_direction`` the child's, used as Bezier
    handle directions.
    """

    start: np.ndarray
    end: np.ndarray
    level: int
    start_direction: Optional[np.ndarray] = None
    end_direction: Optional[np.ndarray] = None
    radius: float = 1.0

    @property
    def length(self) -> float:
        return float(np.linalg.norm(self.end - self.start))


@dataclass(frozen=True, eq=False)
class MetaballDescriptor:
    """Implicit sphere placed at one stub end of a junction."""

    center: np.ndarray
    radius: float
    direction: np.ndarray


@dataclass(frozen=True, eq=False)
class LeafPlacement:
    """Leaf site at a unique branch tip with its XYZ rotation in radians."""

    position: np.ndarray
    rotation: np.ndarray


def count_nodes(root: BranchNode) -> int:
    """Total number of nodes in the tree rooted at ``root``."""
    return sum(1 for _ in root.iter_nodes())


def tree_depth(root: BranchNode) -> int:
    """Number of edges on the longest root-to-tip path."""
    if not root.children:
        return 0
    return 1 + max(tree_depth(child) for child in root.children)


def nodes_at_depth(root: BranchNode, depth: int) -> List[BranchNode]:
    """All nodes exactly ``depth`` edges below ``root``."""
    frontier = [root]
    for _ in range(depth):
        frontier = [child for node in frontier for child in node.children]
    return frontier


def iter_junctions(root: BranchNode) -> Iterator[BranchNode]:
    """Pre-order iteration over nodes with at least one child."""
    for node in root.iter_nodes():
        if node.children:
            yield node


def iter_tips(root: BranchNode) -> Iterator[BranchNode]:
    for node in root.iter_nodes():
        if node.is_leaf:
            yield node


def validate_tree(root: BranchNode, tol: float = 1e-6) -> List[str]:
    """
    Check the structural invariants of a branch tree.

    Parameters
    ----------
    root : BranchNode
        Tree to check
    tol : float
        Absolute tolerance for floating point comparisons

    Returns
    -------
    List[str]
        List of violation messages (empty if valid)
    """
    errors = []
    stack = [(root, None, "root")]

    while stack:
        node, parent, path = stack.pop()

        norm = float(np.linalg.norm(node.direction))
        if abs(norm - 1.0) > tol:
            errors.append(f"{path}: direction norm {norm:.9f} is not 1")
        if node.length < 0:
            errors.append(f"{path}: negative length {node.length}")
        if node.radius < 0:
            errors.append(f"{path}: negative radius {node.radius}")

        if parent is not None:
            gap = float(np.linalg.norm(node.origin - parent.distal_end))
            if gap > tol:
                errors.append(f"{path}: origin is {gap:.6g} away from parent end")
            if node.level != parent.level + 1:
                errors.append(
                    f"{path}: level {node.level} does not follow parent level {parent.level}"
                )

        for i, child in enumerate(node.children):
            stack.append((child, node, f"{path}.{i}"))

    return errors


def tree_to_graph(root: BranchNode) -> nx.DiGraph:
    """
    Convert a branch tree to a networkx DiGraph.

    Nodes are integer ids in pre-order (root is 0) carrying the
    ``BranchNode.to_dict()`` attributes; edges point parent -> child.
    """
    graph = nx.DiGraph()
    ids: Dict[int, int] = {}

    for node in root.iter_nodes():
        node_id = len(ids)
        ids[id(node)] = node_id
        graph.add_node(node_id, **node.to_dict())

    for node in root.iter_nodes():
        for child in node.children:
            graph.add_edge(ids[id(node)], ids[id(child)])

    return graph


def tree_metrics(root: BranchNode) -> Dict[str, Any]:
    """Structural summary of a tree, computed through its graph form."""
    graph = tree_to_graph(root)
    out_degrees = [d for _, d in graph.out_degree()]
    levels = nx.get_node_attributes(graph, "level")

    per_level: Dict[int, int] = {}
    for level in levels.values():
        per_level[level] = per_level.get(level, 0) + 1

    return {
        "node_count": graph.number_of_nodes(),
        "edge_count": graph.number_of_edges(),
        "depth": max(nx.shortest_path_length(graph, 0).values()) if graph.number_of_nodes() else 0,
        "tip_count": sum(1 for d in out_degrees if d == 0),
        "junction_count": sum(1 for d in out_degrees if d > 0),
        "nodes_per_level": per_level,
        "is_tree": nx.is_arborescence(graph),
    }


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
]
