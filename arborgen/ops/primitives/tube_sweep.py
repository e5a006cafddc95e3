"""
Bezier tube sweep primitive for branch segments.

A polygonal ring is swept along a cubic Bezier curve between a segment's
endpoints. Interior control points follow the parent and child
directions so consecutive tubes meet with matching tangents instead of
a faceted joint.
"""

from typing import Any, Dict, Optional, Tuple
import logging

import numpy as np

from ...core.branch import Segment
from ...core.mesh import MeshBuffers
from ...backends.base import GeometryBackend

logger = logging.getLogger(__name__)

WORLD_UP = np.array([0.0, 1.0, 0.0])
FALLBACK_UP = np.array([1.0, 0.0, 0.0])
PARALLEL_THRESHOLD = 0.99

BASE_EASE_EXPONENT = 0.7
TIP_EASE_EXPONENT = 1.3


def bezier_control_points(segment: Segment, handle_fraction: float = 0.3) -> np.ndarray:
    """
    Control polygon [P0, P1, P2, P3] for a segment.

    P1 leaves P0 along the parent direction and P2 arrives at P3 along the
    child direction, each offset by ``handle_fraction`` of the segment
    length. Missing directions fall back to the chord direction.
    """
    p0 = np.asarray(segment.start, dtype=float)
    p3 = np.asarray(segment.end, dtype=float)
    chord = p3 - p0
    seg_len = float(np.linalg.norm(chord))
    chord_dir = chord / seg_len if seg_len > 1e-12 else np.zeros(3)

    start_dir = chord_dir if segment.start_direction is None else _unit(segment.start_direction)
    end_dir = chord_dir if segment.end_direction is None else _unit(segment.end_direction)

    handle = seg_len * handle_fraction
    p1 = p0 + start_dir * handle
    p2 = p3 - end_dir * handle
    return np.array([p0, p1, p2, p3])


def cubic_bezier(control: np.ndarray, t) -> np.ndarray:
    """Evaluate a cubic Bezier at scalar or array ``t``; returns (..., 3)."""
    t = np.asarray(t, dtype=float)[..., None]
    u = 1.0 - t
    return (
        u ** 3 * control[0]
        + 3.0 * u ** 2 * t * control[1]
        + 3.0 * u * t ** 2 * control[2]
        + t ** 3 * control[3]
    )


def bezier_tangent(control: np.ndarray, t: float, eps: float = 1e-3) -> np.ndarray:
    """Symmetric finite-difference tangent, clamped to [0, 1]."""
    t1 = max(0.0, t - eps)
    t2 = min(1.0, t + eps)
    return cubic_bezier(control, t2) - cubic_bezier(control, t1)


def ring_frame(tangent: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Orthonormal (right, up) pair perpendicular to ``tangent``.

    Uses world up as the reference, switching to +X when the tangent is
    within the parallel threshold of it.
    """
    up = WORLD_UP
    t_norm = np.linalg.norm(tangent)
    if t_norm > 1e-12 and abs(np.dot(tangent, up)) / t_norm > PARALLEL_THRESHOLD:
        up = FALLBACK_UP

    right = np.cross(tangent, up)
    up = np.cross(right, tangent)
    return _unit(right), _unit(up)


def eased_radius(t, base_radius: float, tip_radius: float):
    """Radius that shrinks slowly near the base and faster toward the tip."""
    t = np.asarray(t, dtype=float)
    return base_radius * (1.0 - t) ** BASE_EASE_EXPONENT + tip_radius * t ** TIP_EASE_EXPONENT


def tube_indices(ring_segments: int, path_steps: int) -> np.ndarray:
    """Two triangles per ring quad, wrapping around each ring."""
    i = np.arange(path_steps)[:, None]
    j = np.arange(ring_segments)[None, :]
    j_next = (j + 1) % ring_segments

    a = i * ring_segments + j
    b = (i + 1) * ring_segments + j
    c = (i + 1) * ring_segments + j_next
    d = i * ring_segments + j_next

    first = np.stack([a, b, d], axis=-1).reshape(-1, 3)
    second = np.stack([b, c, d], axis=-1).reshape(-1, 3)
    # Interleave so each quad's two triangles are adjacent
    return np.stack([first, second], axis=1).reshape(-1, 3)


def sweep_bezier_tube(
    segment: Segment,
    base_radius: float,
    tip_radius: float,
    ring_segments: int,
    path_steps: int,
    backend: Optional[GeometryBackend],
    handle_fraction: float = 0.3,
    tangent_epsilon: float = 1e-3,
    hints: Optional[Dict[str, Any]] = None,
) -> Optional[MeshBuffers]:
    """
    Sweep a tapered ring along the Bezier path of a segment.

    Parameters
    ----------
    segment : Segment
        Span to sweep along
    base_radius : float
        Radius at the segment start
    tip_radius : float
        Radius at the segment end
    ring_segments : int
        Vertices per ring (>= 3)
    path_steps : int
        Intervals along the path; ``path_steps + 1`` rings are emitted
    backend : GeometryBackend or None
        Mesh construction backend; None skips the tube
    handle_fraction : float
        Bezier handle length as a fraction of the segment length
    tangent_epsilon : float
        Finite-difference step for tangent estimation
    hints : dict, optional
        Opaque rendering hints

    Returns
    -------
    MeshBuffers or None
        ``ring_segments * (path_steps + 1)`` vertices and
        ``2 * ring_segments * path_steps`` triangles, or None if no
        backend is available

    Raises
    ------
    ValueError
        If ring_segments < 3 or path_steps < 1
    """
    if ring_segments < 3:
        raise ValueError(f"ring_segments must be >= 3, got {ring_segments}")
    if path_steps < 1:
        raise ValueError(f"path_steps must be >= 1, got {path_steps}")
    if backend is None:
        logger.warning("Tube sweep skipped: no geometry backend available")
        return None

    control = bezier_control_points(segment, handle_fraction)
    ring_count = path_steps + 1
    ts = np.linspace(0.0, 1.0, ring_count)

    centers = cubic_bezier(control, ts)
    radii = eased_radius(ts, base_radius, tip_radius)

    angles = 2.0 * np.pi * np.arange(ring_segments) / ring_segments
    cos_a = np.cos(angles)[:, None]
    sin_a = np.sin(angles)[:, None]

    positions = np.empty((ring_count, ring_segments, 3))
    normals = np.empty((ring_count, ring_segments, 3))

    for i, t in enumerate(ts):
        tangent = bezier_tangent(control, float(t), tangent_epsilon)
        right, up = ring_frame(tangent)

        # Unit radial offsets double as approximate outward normals
        radial = cos_a * right + sin_a * up
        positions[i] = centers[i] + radii[i] * radial
        normals[i] = radial

    return backend.build_buffers(
        positions.reshape(-1, 3),
        normals.reshape(-1, 3),
        tube_indices(ring_segments, path_steps),
        kind="tube",
        hints=hints,
    )


def _unit(v) -> np.ndarray:
    v = np.asarray(v, dtype=float)
    norm = np.linalg.norm(v)
    return v / (norm if norm > 1e-12 else 1.0)


__all__ = [
    "bezier_control_points",
    "cubic_bezier",
    "bezier_tangent",
    "ring_frame",
    "eased_radius",
    "tube_indices",
    "sweep_bezier_tube",
]
