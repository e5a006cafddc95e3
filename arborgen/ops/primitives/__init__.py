"""
Geometric primitives for branch meshes.
"""

from .tube_sweep import (
    bezier_control_points,
    cubic_bezier,
    bezier_tangent,
    ring_frame,
    eased_radius,
    tube_indices,
    sweep_bezier_tube,
)

__all__ = [
    "bezier_control_points",
    "cubic_bezier",
    "bezier_tangent",
    "ring_frame",
    "eased_radius",
    "tube_indices",
    "sweep_bezier_tube",
]
