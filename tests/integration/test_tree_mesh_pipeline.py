"""
End-to-end tests for growing and meshing a tree.
"""

import json

import numpy as np
import pytest

from arbor_policies import GrowthConfig, TreeMeshPolicy, TubeMeshPolicy, JunctionBlendPolicy, FoliagePolicy
from arborgen import generate_tree, generate_tree_mesh, build_tree_mesh, save_mesh_group
from arborgen.api import tube_radii, write_report
from arborgen.backends import NullGeometryBackend, NullIsosurfaceBackend
from arborgen.core.branch import Segment


def _headless_policy(**overrides):
    values = {
        "tube": TubeMeshPolicy(ring_segments=6, path_steps=3),
        "junction": JunctionBlendPolicy(resolution=12),
        "foliage": FoliagePolicy(leaf_size=1.0),
        "geometry_backend": "null",
        "isosurface_backend": "null",
    }
    values.update(overrides)
    return TreeMeshPolicy(**values)


class TestHeadlessPipeline:
    """Pipeline runs with the null backends."""

    def test_counts(self):
        config = GrowthConfig(levels=2, child_count=3, seed=1)
        root, group, report = generate_tree_mesh(config, _headless_policy())

        assert report.success, report.errors
        meta = report.metadata
        assert meta["segment_count"] == 12
        assert meta["tube_count"] == 12
        # The null isosurface backend never produces a patch
        assert meta["junction_count"] == 0
        # Leaves sit on unique parent ends: the trunk end and three branch ends
        assert meta["leaf_count"] == 4
        assert meta["tree"]["node_count"] == 13
        assert meta["seed"] == 1
        assert len(group) == 16
        assert group.summary() == {"tube": 12, "leaf": 4}

    def test_tubes_have_configured_size(self):
        _, group, _ = generate_tree_mesh(GrowthConfig(levels=1, child_count=2, seed=1), _headless_policy())
        for tube in group.by_kind("tube"):
            assert tube.vertex_count == 6 * 4
            assert tube.triangle_count == 2 * 6 * 3

    def test_stage_order(self):
        """Tubes come before leaves in the group."""
        _, group, _ = generate_tree_mesh(GrowthConfig(levels=2, child_count=2, seed=1), _headless_policy())
        kinds = [m.kind for m in group]
        assert kinds == sorted(kinds, key=["junction", "tube", "leaf"].index)

    def test_hints_carry_colors(self):
        policy = _headless_policy()
        _, group, _ = generate_tree_mesh(GrowthConfig(levels=1, child_count=2, seed=1), policy)
        tubes = group.by_kind("tube")
        assert tubes[0].hints["color"] == policy.trunk_color
        assert tubes[1].hints["color"] == policy.branch_color
        assert group.by_kind("leaf")[0].hints["color"] == policy.leaf_color

    def test_seed_reproducible(self):
        config = GrowthConfig(levels=2, child_count=2)
        _, a, report_a = generate_tree_mesh(config, _headless_policy(), seed=123)
        _, b, report_b = generate_tree_mesh(config, _headless_policy(), seed=123)
        assert report_a.metadata["seed"] == report_b.metadata["seed"] == 123
        for ma, mb in zip(a, b):
            np.testing.assert_array_equal(ma.positions, mb.positions)

    def test_growth_report_merged(self):
        """Seed and tree metrics from the growth stage sit beside the mesh counts."""
        _, _, report = generate_tree_mesh(GrowthConfig(levels=1, child_count=2), _headless_policy(), seed=8)
        assert report.operation == "generate_tree_mesh"
        assert report.metadata["seed"] == 8
        assert report.metadata["tree"]["node_count"] == 3
        assert report.metadata["tube_count"] == 2
        assert report.requested_policy["growth"]["child_count"] == 2
        assert "tube" in report.requested_policy["mesh"]

    def test_custom_trunk(self):
        """The trunk origin and direction flow through to the tree."""
        root, group, _ = generate_tree_mesh(
            GrowthConfig(levels=1, child_count=2, seed=0),
            _headless_policy(),
            origin={"x": 5, "y": 0, "z": 0},
            direction=(1, 0, 0),
        )
        np.testing.assert_allclose(root.origin, [5.0, 0.0, 0.0])
        np.testing.assert_allclose(root.distal_end, [15.0, 0.0, 0.0])
        assert len(group.by_kind("tube")) == 2

    def test_fresh_seed_recorded(self):
        _, _, report = generate_tree_mesh(GrowthConfig(levels=1), _headless_policy())
        assert isinstance(report.metadata["seed"], int)

    def test_bare_trunk(self):
        """A tree without children produces no tubes, junctions or leaves."""
        _, group, report = generate_tree_mesh(GrowthConfig(levels=0, seed=0), _headless_policy())
        assert len(group) == 0
        assert report.metadata["segment_count"] == 0
        assert report.metadata["degraded"] is False

    def test_disabled_stages(self):
        policy = _headless_policy(
            junction=JunctionBlendPolicy(enabled=False),
            foliage=FoliagePolicy(enabled=False),
        )
        _, group, _ = generate_tree_mesh(GrowthConfig(levels=2, child_count=2, seed=0), policy)
        assert group.summary() == {"tube": 6}

    def test_invalid_policy_raises(self):
        root = generate_tree(GrowthConfig(levels=1, seed=0))
        with pytest.raises(ValueError, match="ring_segments"):
            build_tree_mesh(root, policy=_headless_policy(tube=TubeMeshPolicy(ring_segments=2)))

    def test_report_serializes(self, tmp_path):
        _, _, report = generate_tree_mesh(GrowthConfig(levels=1, seed=0), _headless_policy())
        path = write_report(report, tmp_path / "out" / "report.json")
        data = json.loads(path.read_text())
        assert data["operation"] == "generate_tree_mesh"
        assert data["requested_policy"]["growth"]["levels"] == 1
        assert data["effective_policy"]["geometry_backend"] == "null"


class TestDegradation:
    """Missing backends skip stages and leave warnings."""

    def test_missing_geometry_backend(self):
        root = generate_tree(GrowthConfig(levels=1, child_count=2, seed=0))
        group, report = build_tree_mesh(
            root,
            policy=_headless_policy(),
            geometry_backend=None,
            isosurface_backend=NullIsosurfaceBackend(),
        )
        assert report.success
        assert report.metadata["tube_count"] == 0
        assert report.metadata["leaf_count"] == 0
        assert report.metadata["degraded"] is True
        assert len(group) == 0

    def test_missing_isosurface_backend(self):
        root = generate_tree(GrowthConfig(levels=1, child_count=2, seed=0))
        group, report = build_tree_mesh(
            root,
            policy=_headless_policy(),
            geometry_backend=NullGeometryBackend(),
            isosurface_backend=None,
        )
        assert report.success
        assert report.metadata["degraded"] is True
        assert report.metadata["tube_count"] == 2
        assert report.effective_policy["isosurface_backend"] is None

    def test_empty_junctions_warn(self):
        """Forks that produce no surface are reported."""
        root = generate_tree(GrowthConfig(levels=1, child_count=2, seed=0))
        _, report = build_tree_mesh(
            root,
            policy=_headless_policy(),
            geometry_backend=NullGeometryBackend(),
            isosurface_backend=NullIsosurfaceBackend(),
        )
        assert any("junctions produced no surface" in w for w in report.warnings)


class TestTubeRadii:
    def test_trunk_and_branch_radii(self):
        policy = TubeMeshPolicy()
        seg = Segment(start=np.zeros(3), end=np.ones(3), level=0)
        assert tube_radii(0, seg, 2.0, policy) == pytest.approx((2.0, 1.0))
        # Level 0 segments after the first still use one decay step
        assert tube_radii(1, seg, 2.0, policy) == pytest.approx((2.0 * 0.7 * 0.8, 0.7 * 0.8))
        deep = Segment(start=np.zeros(3), end=np.ones(3), level=3)
        assert tube_radii(5, deep, 1.0, policy)[0] == pytest.approx(0.7 * 0.8 ** 3)


class TestFullPipeline:
    """Pipeline with trimesh and scikit-image."""

    def test_real_backends(self, tmp_path):
        pytest.importorskip("trimesh")
        pytest.importorskip("skimage")

        policy = TreeMeshPolicy(
            tube=TubeMeshPolicy(ring_segments=8, path_steps=4),
            junction=JunctionBlendPolicy(resolution=16),
        )
        root, group, report = generate_tree_mesh(GrowthConfig(levels=2, child_count=2, seed=5), policy)

        assert report.success, report.errors
        assert report.metadata["junction_count"] == 3
        assert report.metadata["tube_count"] == 6
        assert report.metadata["degraded"] is False
        kinds = [m.kind for m in group]
        assert kinds[:3] == ["junction"] * 3

        path = save_mesh_group(group, tmp_path / "tree.ply")
        assert path.exists() and path.stat().st_size > 0

    def test_export_rejects_unknown_format(self, tmp_path):
        _, group, _ = generate_tree_mesh(GrowthConfig(levels=1, seed=0), _headless_policy())
        with pytest.raises(ValueError, match="Unsupported"):
            save_mesh_group(group, tmp_path / "tree.fbx")
