"""
Unit tests for Point, Rect and the point coercion helper.
"""

from collections import namedtuple

import numpy as np
import pytest
from kdtree2d import AXIS_X, AXIS_Y, InvalidInputError, Point, Rect, as_point, squared_distance


class TestPoint:
    def test_equality_ignores_payload(self):
        assert Point(1.0, 2.0, payload="a") == Point(1.0, 2.0, payload="b")

    def test_hash_matches_equality(self):
        assert len({Point(1.0, 2.0, payload="a"), Point(1.0, 2.0)}) == 1

    def test_coord_by_axis(self):
        p = Point(3.0, 4.0)
        assert p.coord(AXIS_X) == 3.0
        assert p.coord(AXIS_Y) == 4.0

    def test_squared_distance(self):
        assert squared_distance(Point(0, 0), Point(3, 4)) == 25


class TestAsPoint:
    def test_point_is_returned_as_is(self):
        p = Point(1, 2)
        assert as_point(p) is p

    def test_mapping_kept_as_payload(self):
        record = {"x": 1, "y": 2, "name": "a"}
        p = as_point(record)
        assert p == Point(1.0, 2.0)
        assert p.payload is record

    def test_object_with_attributes(self):
        XY = namedtuple("XY", ["x", "y"])
        p = as_point(XY(5, 6))
        assert (p.x, p.y) == (5.0, 6.0)

    def test_pair_and_numpy_row(self):
        assert as_point((1, 2)) == Point(1.0, 2.0)
        assert as_point(np.array([1.5, 2.5])) == Point(1.5, 2.5)

    @pytest.mark.parametrize("value", [None, 3, (1, 2, 3), {"x": 1}, ("a", "b")])
    def test_unreadable_values_rejected(self, value):
        with pytest.raises(InvalidInputError):
            as_point(value)


class TestRect:
    def test_inverted_bounds_rejected(self):
        with pytest.raises(InvalidInputError):
            Rect(1.0, 0.0, 0.0, 1.0)

    def test_bounding(self):
        coords = np.array([[0.0, 5.0], [2.0, -1.0], [1.0, 3.0]])
        assert Rect.bounding(coords) == Rect(0.0, 2.0, -1.0, 5.0)

    def test_split_on_x(self):
        left, right = Rect(0, 10, 0, 4).split(AXIS_X, 3)
        assert left == Rect(0, 3, 0, 4)
        assert right == Rect(3, 10, 0, 4)

    def test_split_on_y(self):
        left, right = Rect(0, 10, 0, 4).split(AXIS_Y, 1)
        assert left == Rect(0, 10, 0, 1)
        assert right == Rect(0, 10, 1, 4)

    def test_contains(self):
        outer = Rect(0, 10, 0, 10)
        assert outer.contains(Rect(1, 9, 0, 10))
        assert outer.contains(outer)
        assert not outer.contains(Rect(-1, 5, 0, 5))

    def test_min_squared_distance_inside_is_zero(self):
        assert Rect(0, 2, 0, 2).min_squared_distance(Point(1, 1)) == 0

    def test_min_squared_distance_to_corner(self):
        # Nearest perimeter point is the corner (2, 2).
        assert Rect(0, 2, 0, 2).min_squared_distance(Point(5, 6)) == 25

    def test_min_squared_distance_to_edge(self):
        assert Rect(0, 2, 0, 2).min_squared_distance(Point(1, -3)) == 9
