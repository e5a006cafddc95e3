"""
Flattening of a branch tree into straight segments.
"""

from typing import List, Optional

from ..core.branch import BranchNode, Segment


def extract_segments(root: BranchNode, segments: Optional[List[Segment]] = None) -> List[Segment]:
    """
    Flatten a tree into one Segment per parent->child edge.

    Depth-first pre-order: for each child of a node, the node's own span
    (origin to distal end) is emitted, then the child is visited. A tree
    with N nodes yields N - 1 segments.

    Parameters
    ----------
    root : BranchNode
        Tree to flatten
    segments : list, optional
        List to append to (a new one is created if omitted)

    Returns
    -------
    List[Segment]
        Segments in traversal order
    """
    if segments is None:
        segments = []

    end = root.distal_end
    for child in root.children:
        segments.append(Segment(
            start=root.origin.copy(),
            end=end.copy(),
            level=root.level,
            start_direction=root.direction.copy(),
            end_direction=child.direction.copy(),
            radius=root.radius,
        ))
        extract_segments(child, segments)

    return segments


__all__ = [
    "extract_segments",
]
