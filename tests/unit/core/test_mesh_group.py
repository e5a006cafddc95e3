"""
Tests for MeshBuffers and MeshGroup.
"""

import numpy as np
import pytest

from arborgen.core.mesh import MeshBuffers, MeshGroup


def _triangle(kind="tube", offset=0.0):
    positions = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0]], dtype=float) + offset
    normals = np.tile([0.0, 0.0, 1.0], (3, 1))
    return MeshBuffers(positions=positions, normals=normals, indices=[[0, 1, 2]], kind=kind)


class TestMeshBuffers:
    def test_shapes_normalized(self):
        mesh = MeshBuffers(positions=np.zeros(9), normals=np.zeros(9), indices=[0, 1, 2])
        assert mesh.positions.shape == (3, 3)
        assert mesh.indices.shape == (1, 3)

    def test_flat_views(self):
        mesh = _triangle()
        assert mesh.flat_positions().shape == (9,)
        np.testing.assert_array_equal(mesh.flat_indices(), [0, 1, 2])


class TestMeshGroup:
    """Tests for grouping and summary."""

    def test_add_ignores_none(self):
        group = MeshGroup()
        assert group.add(None) is False
        assert group.add(_triangle()) is True
        assert len(group) == 1

    def test_counts_and_summary(self):
        group = MeshGroup()
        group.add(_triangle("junction"))
        group.add(_triangle("tube"))
        group.add(_triangle("tube"))
        group.add(_triangle("leaf"))
        assert group.vertex_count == 12
        assert group.triangle_count == 4
        assert group.summary() == {"junction": 1, "tube": 2, "leaf": 1}
        assert len(group.by_kind("tube")) == 2
        assert [m.kind for m in group] == ["junction", "tube", "tube", "leaf"]

    def test_trimesh_views(self):
        pytest.importorskip("trimesh")
        group = MeshGroup()
        group.add(_triangle("tube"))
        group.add(_triangle("leaf", offset=5.0))

        scene = group.to_scene()
        assert set(scene.geometry.keys()) == {"tube_0000", "leaf_0001"}

        merged = group.concatenate()
        assert len(merged.vertices) == 6
        assert len(merged.faces) == 2
