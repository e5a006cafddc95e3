"""
One-call tree generation and meshing.

UNIT CONVENTIONS
----------------
Units are whatever GrowthConfig.base_length is expressed in; the leaf
deduplication tolerance shares those units.
"""

from typing import Any, Optional, Tuple
import logging

import numpy as np

from arbor_policies import GrowthConfig, TreeMeshPolicy, TubeMeshPolicy, OperationReport
from ..core.branch import BranchNode, Segment, iter_junctions, tree_metrics, validate_tree
from ..core.mesh import MeshGroup
from ..backends import get_geometry_backend, get_isosurface_backend, get_backend_load_error
from ..backends.base import GeometryBackend, IsosurfaceBackend
from ..ops.growth import generate_tree
from ..ops.segments import extract_segments
from ..ops.primitives.tube_sweep import sweep_bezier_tube
from ..ops.mesh.junction import blend_junction
from ..ops.foliage import place_leaves

logger = logging.getLogger(__name__)

# Sentinel: resolve the backend from the policy's backend name
USE_POLICY_BACKEND: Any = object()


def tube_radii(
    index: int,
    segment: Segment,
    trunk_radius: float,
    policy: TubeMeshPolicy,
) -> Tuple[float, float]:
    """
    Base and tip radius for the tube of the ``index``-th segment.

    The first segment is the trunk; later ones shrink geometrically with
    their level.
    """
    if index == 0:
        base = trunk_radius
    else:
        base = trunk_radius * policy.branch_radius_factor * policy.level_decay ** max(segment.level, 1)
    return base, base * policy.tip_radius_factor


def _resolve_geometry_backend(policy: TreeMeshPolicy, report: OperationReport) -> Optional[GeometryBackend]:
    kwargs = {"smooth_normals": policy.tube.smooth_normals} if policy.geometry_backend == "trimesh" else {}
    backend = get_geometry_backend(policy.geometry_backend, **kwargs)
    if backend is None:
        reason = get_backend_load_error(policy.geometry_backend) or "unavailable"
        report.add_warning(f"Geometry backend '{policy.geometry_backend}' missing: {reason}")
    return backend


def _resolve_isosurface_backend(policy: TreeMeshPolicy, report: OperationReport) -> Optional[IsosurfaceBackend]:
    backend = get_isosurface_backend(policy.isosurface_backend)
    if backend is None:
        reason = get_backend_load_error(policy.isosurface_backend) or "unavailable"
        report.add_warning(f"Isosurface backend '{policy.isosurface_backend}' missing: {reason}")
    return backend


def build_tree_mesh(
    root: BranchNode,
    config: Optional[GrowthConfig] = None,
    policy: Optional[TreeMeshPolicy] = None,
    rng: Optional[np.random.Generator] = None,
    geometry_backend: Optional[GeometryBackend] = USE_POLICY_BACKEND,
    isosurface_backend: Optional[IsosurfaceBackend] = USE_POLICY_BACKEND,
) -> Tuple[MeshGroup, OperationReport]:
    """
    Convert a grown tree into a MeshGroup.

    Junction patches come first (pre-order over forks), then one tube per
    segment, then leaves. A missing backend skips only the stages that
    need it and is recorded as a warning.

    Parameters
    ----------
    root : BranchNode
        Tree to mesh
    config : GrowthConfig, optional
        Supplies the default trunk radius
    policy : TreeMeshPolicy, optional
        Meshing policy
    rng : np.random.Generator, optional
        Random source for leaf orientation
    geometry_backend : GeometryBackend or None, optional
        Explicit backend; None means "missing". Defaults to the policy's
    isosurface_backend : IsosurfaceBackend or None, optional
        Explicit backend; None means "missing". Defaults to the policy's

    Returns
    -------
    group : MeshGroup
        Generated sub-meshes
    report : OperationReport
        Stage counts and degradation warnings

    Raises
    ------
    ValueError
        If the policy fails validation
    """
    if config is None:
        config = GrowthConfig()
    if policy is None:
        policy = TreeMeshPolicy()
    if rng is None:
        rng = np.random.default_rng()

    errors = policy.validate()
    if errors:
        raise ValueError(f"Invalid mesh policy: {'; '.join(errors)}")

    report = OperationReport(
        operation="build_tree_mesh",
        requested_policy=policy.to_dict(),
    )

    if geometry_backend is USE_POLICY_BACKEND:
        geometry_backend = _resolve_geometry_backend(policy, report)
    if isosurface_backend is USE_POLICY_BACKEND:
        isosurface_backend = _resolve_isosurface_backend(policy, report)

    group = MeshGroup()
    tube_policy = policy.tube
    trunk_radius = tube_policy.trunk_radius if tube_policy.trunk_radius is not None else config.base_radius

    junctions_attempted = 0
    if policy.junction.enabled:
        if isosurface_backend is None:
            logger.warning("Junction blending skipped: no isosurface backend")
        else:
            for node in iter_junctions(root):
                junctions_attempted += 1
                group.add(blend_junction(
                    node,
                    isosurface_backend,
                    policy.junction,
                    hints={"color": policy.junction_color},
                ))
    junction_count = len(group)

    segments = extract_segments(root)
    if geometry_backend is None and segments:
        logger.warning(f"Tube synthesis skipped for {len(segments)} segments: no geometry backend")
    else:
        for i, segment in enumerate(segments):
            base_radius, tip_radius = tube_radii(i, segment, trunk_radius, tube_policy)
            group.add(sweep_bezier_tube(
                segment,
                base_radius,
                tip_radius,
                tube_policy.ring_segments,
                tube_policy.path_steps,
                geometry_backend,
                handle_fraction=tube_policy.handle_fraction,
                tangent_epsilon=tube_policy.tangent_epsilon,
                hints={"color": policy.trunk_color if i == 0 else policy.branch_color},
            ))
    tube_count = len(group) - junction_count

    leaf_count = 0
    if policy.foliage.enabled and segments:
        leaves = place_leaves(
            segments,
            policy.foliage.leaf_size,
            geometry_backend,
            rng=rng,
            tolerance=policy.foliage.dedup_tolerance,
            max_tilt_rad=policy.foliage.max_tilt_rad,
            hints={"color": policy.leaf_color},
        )
        for leaf in leaves:
            group.add(leaf)
        leaf_count = len(leaves)

    has_junctions = bool(segments)
    degraded = (
        (geometry_backend is None and bool(segments))
        or (policy.junction.enabled and has_junctions and isosurface_backend is None)
        or junction_count < junctions_attempted
    )
    if junction_count < junctions_attempted:
        report.add_warning(
            f"{junctions_attempted - junction_count} of {junctions_attempted} junctions produced no surface"
        )

    report.effective_policy = {
        **policy.to_dict(),
        "trunk_radius": trunk_radius,
        "geometry_backend": getattr(geometry_backend, "name", None),
        "isosurface_backend": getattr(isosurface_backend, "name", None),
    }
    report.metadata.update({
        "segment_count": len(segments),
        "junction_count": junction_count,
        "tube_count": tube_count,
        "leaf_count": leaf_count,
        "vertex_count": group.vertex_count,
        "triangle_count": group.triangle_count,
        "degraded": bool(degraded),
    })

    logger.info(
        f"Built tree mesh: {tube_count} tubes, {junction_count} junctions, "
        f"{leaf_count} leaves ({group.triangle_count} triangles)"
    )
    return group, report


def generate_tree_mesh(
    config: Optional[GrowthConfig] = None,
    policy: Optional[TreeMeshPolicy] = None,
    seed: Optional[int] = None,
    origin=(0.0, 0.0, 0.0),
    direction=(0.0, 1.0, 0.0),
) -> Tuple[BranchNode, MeshGroup, OperationReport]:
    """
    Grow a tree and mesh it in one call.

    Parameters
    ----------
    config : GrowthConfig, optional
        Growth parameters
    policy : TreeMeshPolicy, optional
        Meshing policy
    seed : int, optional
        Random seed; falls back to ``config.seed``, then to a fresh seed.
        The seed actually used is recorded in ``report.metadata["seed"]``
    origin : array-like or dict
        Base of the trunk
    direction : array-like or dict
        Trunk direction

    Returns
    -------
    root : BranchNode
        Generated tree
    group : MeshGroup
        Generated sub-meshes
    report : OperationReport
        Mesh report merged with the growth report (seed, tree metrics and
        structural check failures)
    """
    if config is None:
        config = GrowthConfig()
    if seed is None:
        seed = config.seed
    if seed is None:
        seed = int(np.random.SeedSequence().entropy % (2 ** 32))

    rng = np.random.default_rng(seed)
    root = generate_tree(config, origin=origin, direction=direction, rng=rng)

    growth_report = OperationReport(
        operation="generate_tree",
        requested_policy=config.to_dict(),
        effective_policy=config.to_dict(),
        metadata={"seed": seed, "tree": tree_metrics(root)},
    )
    for error in validate_tree(root):
        growth_report.add_error(error)

    group, report = build_tree_mesh(root, config, policy, rng)
    report.merge(growth_report)

    report.operation = "generate_tree_mesh"
    report.requested_policy = {
        "growth": growth_report.requested_policy,
        "mesh": report.requested_policy,
    }

    return root, group, report


__all__ = [
    "USE_POLICY_BACKEND",
    "tube_radii",
    "build_tree_mesh",
    "generate_tree_mesh",
]
