"""
Metaball blending of branch forks.

At every node with children, the parent's distal stub and each child's
proximal stub become metaballs. An isosurface backend merges them into a
single organic patch that hides the seam where tubes meet.
"""

from typing import Any, Dict, List, Optional, Tuple
import logging

import numpy as np

from arbor_policies import JunctionBlendPolicy
from ...core.branch import BranchNode, MetaballDescriptor, iter_junctions
from ...core.mesh import MeshBuffers
from ...backends.base import IsosurfaceBackend

logger = logging.getLogger(__name__)

DEFAULT_STUB_RADIUS = 1.0
# Keeps the merged surface off the sampling cube faces
MERGED_PAD_MARGIN = 1.1


def _stub_radius(radius: float) -> float:
    return radius if radius > 0 else DEFAULT_STUB_RADIUS


def collect_metaballs(node: BranchNode, stub_offset: float = 0.0) -> List[MetaballDescriptor]:
    """
    Parent distal-end stub followed by each child's proximal stub.

    With ``stub_offset`` > 0 each ball is pushed that many radii back into
    its own branch (parent backward, children forward).
    """
    parent_radius = _stub_radius(node.radius)
    metaballs = [MetaballDescriptor(
        center=node.distal_end - node.direction * parent_radius * stub_offset,
        radius=parent_radius,
        direction=node.direction.copy(),
    )]
    for child in node.children:
        child_radius = _stub_radius(child.radius)
        metaballs.append(MetaballDescriptor(
            center=child.origin + child.direction * child_radius * stub_offset,
            radius=child_radius,
            direction=child.direction.copy(),
        ))
    return metaballs


def merged_influence_radius(
    metaballs: List[MetaballDescriptor],
    strength: float = 1.0,
    isolation: float = 1.0,
) -> float:
    """
    Distance beyond which the summed field of all balls stays below ``isolation``.

    Every ball contributes at most ``strength * r**2 / d**2``, so a point at
    least this far from every center lies outside the merged surface.
    """
    if isolation <= 0:
        return 0.0
    total = sum(strength * m.radius ** 2 for m in metaballs)
    return float(np.sqrt(max(total, 0.0) / isolation))


def metaball_bounds(
    metaballs: List[MetaballDescriptor],
    padding_factor: float = 2.0,
    strength: float = 1.0,
    isolation: float = 1.0,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Axis-aligned box enclosing every ball.

    Each ball is padded by ``padding_factor`` radii, or by the merged
    influence radius plus a margin when that is larger, so the blended
    surface closes inside the box.
    """
    centers = np.array([m.center for m in metaballs], dtype=float)
    merged = merged_influence_radius(metaballs, strength, isolation) * MERGED_PAD_MARGIN
    pads = np.array(
        [max(m.radius * padding_factor, merged) for m in metaballs],
        dtype=float,
    )[:, None]
    return (centers - pads).min(axis=0), (centers + pads).max(axis=0)


def sampling_cube(bounds_min: np.ndarray, bounds_max: np.ndarray) -> Tuple[np.ndarray, float]:
    """
    Smallest cube centred on the box that contains it.

    A cube keeps the normalization isotropic, so one radius scale applies
    on every axis.
    """
    extent = float(np.max(bounds_max - bounds_min))
    center = (bounds_min + bounds_max) / 2.0
    return center - extent / 2.0, extent


def blend_junction(
    node: BranchNode,
    backend: Optional[IsosurfaceBackend],
    policy: Optional[JunctionBlendPolicy] = None,
    hints: Optional[Dict[str, Any]] = None,
) -> Optional[MeshBuffers]:
    """
    Build one blended patch for the fork at ``node``.

    Parameters
    ----------
    node : BranchNode
        Node whose children fork from its distal end
    backend : IsosurfaceBackend or None
        Isosurface extractor; None leaves the junction as a hard seam
    policy : JunctionBlendPolicy, optional
        Sampling resolution, isolation, padding and ball strength
    hints : dict, optional
        Opaque rendering hints

    Returns
    -------
    MeshBuffers or None
        Junction patch, or None for leaf nodes, a missing backend or an
        empty isosurface
    """
    if not node.children:
        return None
    if backend is None:
        logger.warning("Junction blend skipped: no isosurface backend available")
        return None
    if policy is None:
        policy = JunctionBlendPolicy()

    metaballs = collect_metaballs(node, policy.stub_offset)
    bounds_min, bounds_max = metaball_bounds(
        metaballs, policy.padding_factor, policy.strength, policy.isolation,
    )
    origin, extent = sampling_cube(bounds_min, bounds_max)

    backend.configure(policy.resolution, policy.isolation)
    backend.reset()
    for m in metaballs:
        x, y, z = (m.center - origin) / extent
        backend.add_ball(x, y, z, m.radius / extent, policy.strength)

    return backend.extract_isosurface(origin, extent, hints=hints)


def blend_junctions(
    root: BranchNode,
    backend: Optional[IsosurfaceBackend],
    policy: Optional[JunctionBlendPolicy] = None,
    hints: Optional[Dict[str, Any]] = None,
) -> List[MeshBuffers]:
    """Blend every fork of the tree in pre-order; skipped forks are omitted."""
    patches = []
    for node in iter_junctions(root):
        patch = blend_junction(node, backend, policy, hints)
        if patch is not None:
            patches.append(patch)
    return patches


__all__ = [
    "collect_metaballs",
    "merged_influence_radius",
    "metaball_bounds",
    "sampling_cube",
    "blend_junction",
    "blend_junctions",
]
