"""
Tests for the BranchNode tree structure and its helpers.
"""

import numpy as np
import pytest

from arborgen.core.branch import (
    BranchNode,
    Segment,
    count_nodes,
    tree_depth,
    nodes_at_depth,
    iter_junctions,
    iter_tips,
    validate_tree,
    tree_to_graph,
    tree_metrics,
)


def _small_tree():
    """Trunk with two children, the first of which has one child."""
    root = BranchNode(origin=(0, 0, 0), direction=(0, 1, 0), length=10.0, radius=1.0, level=0)
    a = BranchNode(origin=root.distal_end, direction=(1, 0, 0), length=5.0, radius=0.8, level=1)
    b = BranchNode(origin=root.distal_end, direction=(0, 0, 1), length=5.0, radius=0.8, level=1)
    c = BranchNode(origin=a.distal_end, direction=(0, 1, 0), length=2.0, radius=0.5, level=2)
    a.children.append(c)
    root.children.extend([a, b])
    return root, a, b, c


class TestBranchNode:
    """Tests for BranchNode basics."""

    def test_vectors_coerced_to_arrays(self):
        """Origin and direction become float arrays."""
        node = BranchNode(origin=[1, 2, 3], direction=(0, 1, 0), length=1.0, radius=0.1)
        assert isinstance(node.origin, np.ndarray)
        assert node.origin.dtype == float
        assert node.direction.shape == (3,)

    def test_distal_end(self):
        """Distal end is origin + direction * length."""
        node = BranchNode(origin=(1, 0, 0), direction=(0, 1, 0), length=4.0, radius=0.1)
        np.testing.assert_allclose(node.distal_end, [1.0, 4.0, 0.0])

    def test_pre_order_traversal(self):
        """iter_nodes visits a node before its children, left to right."""
        root, a, b, c = _small_tree()
        assert list(root.iter_nodes()) == [root, a, c, b]

    def test_to_dict(self):
        """to_dict reports the node fields and child count."""
        root, _, _, _ = _small_tree()
        d = root.to_dict()
        assert d["child_count"] == 2
        assert d["origin"] == [0.0, 0.0, 0.0]
        assert d["length"] == 10.0


class TestTreeHelpers:
    """Tests for counting and traversal helpers."""

    def test_counts(self):
        root, a, b, c = _small_tree()
        assert count_nodes(root) == 4
        assert tree_depth(root) == 2
        assert nodes_at_depth(root, 1) == [a, b]
        assert nodes_at_depth(root, 2) == [c]

    def test_junctions_and_tips(self):
        """Junctions have children, tips do not."""
        root, a, b, c = _small_tree()
        assert list(iter_junctions(root)) == [root, a]
        assert list(iter_tips(root)) == [c, b]


class TestValidateTree:
    """Tests for structural validation."""

    def test_valid_tree(self):
        root, _, _, _ = _small_tree()
        assert validate_tree(root) == []

    def test_detects_gap(self):
        """A child detached from its parent's end is reported."""
        root, a, _, _ = _small_tree()
        a.origin = a.origin + np.array([0.0, 0.5, 0.0])
        errors = validate_tree(root)
        assert any("away from parent end" in e for e in errors), errors

    def test_detects_non_unit_direction(self):
        root, _, b, _ = _small_tree()
        b.direction = np.array([0.0, 0.0, 2.0])
        errors = validate_tree(root)
        assert any("direction norm" in e for e in errors), errors

    def test_detects_level_mismatch(self):
        root, _, _, c = _small_tree()
        c.level = 5
        errors = validate_tree(root)
        assert any("level 5" in e for e in errors), errors


class TestGraphConversion:
    """Tests for the networkx view of a tree."""

    def test_graph_structure(self):
        """Graph has one node per branch and pre-order integer ids."""
        root, _, _, _ = _small_tree()
        graph = tree_to_graph(root)
        assert graph.number_of_nodes() == 4
        assert graph.number_of_edges() == 3
        assert set(graph.successors(0)) == {1, 3}
        assert graph.nodes[2]["level"] == 2

    def test_metrics(self):
        root, _, _, _ = _small_tree()
        metrics = tree_metrics(root)
        assert metrics["node_count"] == 4
        assert metrics["edge_count"] == 3
        assert metrics["depth"] == 2
        assert metrics["tip_count"] == 2
        assert metrics["junction_count"] == 2
        assert metrics["nodes_per_level"] == {0: 1, 1: 2, 2: 1}
        assert metrics["is_tree"] is True

    def test_single_node_metrics(self):
        """A bare trunk is a one-node tree with depth 0."""
        root = BranchNode(origin=(0, 0, 0), direction=(0, 1, 0), length=1.0, radius=1.0)
        metrics = tree_metrics(root)
        assert metrics["node_count"] == 1
        assert metrics["depth"] == 0
        assert metrics["tip_count"] == 1


class TestSegment:
    def test_length(self):
        seg = Segment(start=np.zeros(3), end=np.array([3.0, 4.0, 0.0]), level=0)
        assert seg.length == pytest.approx(5.0)
