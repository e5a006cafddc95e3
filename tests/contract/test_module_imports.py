"""
Test that all modules can be imported without collisions.

This module validates that the key modules in the codebase can be
imported cleanly without circular dependencies or naming collisions.
"""

import pytest


class TestArborPoliciesImport:
    """Test arbor_policies package imports cleanly."""

    def test_arbor_policies_import(self):
        """Test arbor_policies package imports cleanly."""
        import arbor_policies

        assert hasattr(arbor_policies, "GrowthConfig")
        assert hasattr(arbor_policies, "TubeMeshPolicy")
        assert hasattr(arbor_policies, "JunctionBlendPolicy")
        assert hasattr(arbor_policies, "FoliagePolicy")
        assert hasattr(arbor_policies, "TreeMeshPolicy")
        assert hasattr(arbor_policies, "OperationReport")


class TestArborgenImport:
    """Test arborgen entry points import cleanly."""

    def test_top_level_api(self):
        """Test the public API is re-exported at the package root."""
        from arborgen import (
            generate_tree,
            extract_segments,
            sweep_bezier_tube,
            blend_junction,
            place_leaves,
            build_tree_mesh,
            generate_tree_mesh,
            count_nodes,
        )

        assert callable(generate_tree_mesh)

    def test_ops_submodules(self):
        """Test ops submodules resolve to the same callables."""
        from arborgen.ops import sweep_bezier_tube, blend_junction
        from arborgen.ops.primitives.tube_sweep import sweep_bezier_tube as sweep_direct
        from arborgen.ops.mesh.junction import blend_junction as blend_direct

        assert sweep_bezier_tube is sweep_direct
        assert blend_junction is blend_direct

    def test_backends_import_without_optional_libraries(self):
        """Test the registry loads even when a backend failed to import."""
        from arborgen.backends import get_available_backends, get_backend_load_error

        available = get_available_backends()
        for name in ("trimesh", "skimage"):
            if name not in available["geometry"] + available["isosurface"]:
                assert get_backend_load_error(name) is not None

    def test_cli_import(self):
        """Test CLI module exposes main."""
        from arborgen.cli import main

        assert callable(main)
