"""
High-level API for tree generation and export.
"""

from .generate import USE_POLICY_BACKEND, tube_radii, build_tree_mesh, generate_tree_mesh
from .export import save_mesh_group, write_report

__all__ = [
    "USE_POLICY_BACKEND",
    "tube_radii",
    "build_tree_mesh",
    "generate_tree_mesh",
    "save_mesh_group",
    "write_report",
]
