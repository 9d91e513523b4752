#!/usr/bin/env python3
"""Tests for hit_test module.

Tests for window_at_point and xdnd_version. Uses mock windows instead of
a real X server.
"""

from unittest.mock import MagicMock

from conftest import ATOMS, make_xerror
from xdndpeer.hit_test import window_at_point, xdnd_version


def make_window(
    window_id: int,
    x: int = 0,
    y: int = 0,
    width: int = 0,
    height: int = 0,
    children: list[MagicMock] | None = None,
    border_width: int = 0,
) -> MagicMock:
    """Create a mock window with geometry and children (bottom to top)."""
    window = MagicMock()
    window.id = window_id
    window.get_geometry.return_value = MagicMock(
        x=x, y=y, width=width, height=height, border_width=border_width
    )
    window.query_tree.return_value = MagicMock(children=children or [])
    return window


class TestWindowAtPoint:
    """Tests for window_at_point."""

    def test_no_children_returns_start(self) -> None:
        root = make_window(1)
        assert window_at_point(root, 10, 10) is root

    def test_point_outside_children_returns_start(self) -> None:
        root = make_window(1, children=[make_window(2, 0, 0, 100, 100)])
        assert window_at_point(root, 150, 150) is root

    def test_topmost_sibling_wins(self) -> None:
        """Overlapping siblings resolve to the one stacked last."""
        bottom = make_window(2, 0, 0, 200, 200)
        top = make_window(3, 100, 0, 200, 200)
        root = make_window(1, children=[bottom, top])
        assert window_at_point(root, 150, 50) is top
        assert window_at_point(root, 50, 50) is bottom

    def test_descends_with_accumulated_origin(self) -> None:
        """Child geometry is relative to the parent."""
        leaf = make_window(4, 10, 10, 20, 20)
        frame = make_window(3, 200, 0, 220, 220, children=[leaf])
        root = make_window(1, children=[frame])
        assert window_at_point(root, 215, 15) is leaf
        assert window_at_point(root, 205, 5) is frame
        # Inside the leaf's parent-relative rectangle but not its absolute one
        assert window_at_point(root, 15, 15) is root

    def test_right_and_bottom_edges_are_exclusive(self) -> None:
        child = make_window(2, 0, 0, 100, 100)
        root = make_window(1, children=[child])
        assert window_at_point(root, 99, 99) is child
        assert window_at_point(root, 100, 50) is root

    def test_border_belongs_to_window(self) -> None:
        child = make_window(2, 10, 10, 100, 100, border_width=2)
        root = make_window(1, children=[child])
        assert window_at_point(root, 10, 10) is child
        assert window_at_point(root, 113, 113) is child
        assert window_at_point(root, 114, 50) is root

    def test_children_are_offset_by_parent_border(self) -> None:
        """Child geometry is relative to the inside of the parent border."""
        leaf = make_window(3, 0, 0, 10, 10)
        frame = make_window(2, 100, 100, 50, 50, children=[leaf], border_width=5)
        root = make_window(1, children=[frame])
        assert window_at_point(root, 105, 105) is leaf
        assert window_at_point(root, 114, 114) is leaf
        assert window_at_point(root, 102, 102) is frame
        assert window_at_point(root, 115, 110) is frame

    def test_vanished_child_is_skipped(self) -> None:
        """A child destroyed during the search does not abort it."""
        survivor = make_window(2, 0, 0, 100, 100)
        gone = make_window(3, 0, 0, 100, 100)
        gone.get_geometry.side_effect = make_xerror()
        root = make_window(1, children=[survivor, gone])
        assert window_at_point(root, 50, 50) is survivor

    def test_query_tree_failure_returns_current(self) -> None:
        frame = make_window(2, 0, 0, 100, 100)
        frame.query_tree.side_effect = make_xerror()
        root = make_window(1, children=[frame])
        assert window_at_point(root, 50, 50) is frame

    def test_deep_tree_does_not_recurse(self) -> None:
        """A very deep chain of windows resolves to the innermost one."""
        leaf = make_window(5000, 0, 0, 10, 10)
        node = leaf
        for i in range(2000):
            node = make_window(i + 2, 0, 0, 10, 10, children=[node])
        root = make_window(1, children=[node])
        assert window_at_point(root, 5, 5) is leaf


class TestXdndVersion:
    """Tests for xdnd_version."""

    def test_reads_version(self) -> None:
        window = MagicMock()
        window.get_full_property.return_value = MagicMock(value=[5])
        assert xdnd_version(window, ATOMS) == 5
        assert window.get_full_property.call_args[0][0] == ATOMS.aware

    def test_missing_property_is_zero(self) -> None:
        window = MagicMock()
        window.get_full_property.return_value = None
        assert xdnd_version(window, ATOMS) == 0

    def test_newer_version_is_unsupported(self) -> None:
        window = MagicMock()
        window.get_full_property.return_value = MagicMock(value=[6])
        assert xdnd_version(window, ATOMS) == 0

    def test_older_version_is_accepted(self) -> None:
        window = MagicMock()
        window.get_full_property.return_value = MagicMock(value=[3])
        assert xdnd_version(window, ATOMS) == 3

    def test_bad_window_is_zero(self) -> None:
        window = MagicMock()
        window.get_full_property.side_effect = make_xerror()
        assert xdnd_version(window, ATOMS) == 0
