"""
Tests for flattening branch trees into segments.
"""

import numpy as np

from arbor_policies import GrowthConfig
from arborgen.core.branch import BranchNode, count_nodes
from arborgen.ops.growth import generate_tree
from arborgen.ops.segments import extract_segments


class TestExtractSegments:
    """Tests for extract_segments."""

    def test_bare_trunk_has_no_segments(self):
        root = BranchNode(origin=(0, 0, 0), direction=(0, 1, 0), length=1.0, radius=1.0)
        assert extract_segments(root) == []

    def test_one_segment_per_edge(self):
        """A tree with N nodes yields N - 1 segments."""
        for levels, children in [(1, 2), (2, 3), (3, 2)]:
            root = generate_tree(GrowthConfig(levels=levels, child_count=children, seed=4))
            segments = extract_segments(root)
            assert len(segments) == count_nodes(root) - 1, (
                f"levels={levels} children={children}: {len(segments)} segments"
            )

    def test_segment_spans_parent(self):
        """Each segment runs from the parent origin to the parent distal end."""
        root = generate_tree(GrowthConfig(levels=1, child_count=2, seed=4))
        segments = extract_segments(root)
        for seg, child in zip(segments, root.children):
            np.testing.assert_allclose(seg.start, root.origin)
            np.testing.assert_allclose(seg.end, root.distal_end)
            np.testing.assert_allclose(seg.start_direction, root.direction)
            np.testing.assert_allclose(seg.end_direction, child.direction)
            assert seg.level == 0
            assert seg.radius == root.radius

    def test_pre_order(self):
        """Segments follow depth-first pre-order over parent->child edges."""
        root = BranchNode(origin=(0, 0, 0), direction=(0, 1, 0), length=1.0, radius=1.0, level=0)
        a = BranchNode(origin=root.distal_end, direction=(1, 0, 0), length=1.0, radius=0.5, level=1)
        b = BranchNode(origin=root.distal_end, direction=(0, 0, 1), length=1.0, radius=0.5, level=1)
        a1 = BranchNode(origin=a.distal_end, direction=(0, 1, 0), length=1.0, radius=0.2, level=2)
        a.children.append(a1)
        root.children.extend([a, b])

        segments = extract_segments(root)
        assert [s.level for s in segments] == [0, 1, 0]
        np.testing.assert_allclose(segments[0].end_direction, a.direction)
        np.testing.assert_allclose(segments[1].start, a.origin)
        np.testing.assert_allclose(segments[1].end, a.distal_end)
        np.testing.assert_allclose(segments[2].end_direction, b.direction)

    def test_appends_to_existing_list(self):
        root = generate_tree(GrowthConfig(levels=1, child_count=2, seed=4))
        existing = []
        result = extract_segments(root, existing)
        assert result is existing
        assert len(existing) == 2

    def test_segments_do_not_alias_tree(self):
        """Mutating the tree afterwards does not move extracted segments."""
        root = generate_tree(GrowthConfig(levels=1, child_count=1, seed=4))
        segments = extract_segments(root)
        root.origin[0] = 100.0
        assert segments[0].start[0] == 0.0
