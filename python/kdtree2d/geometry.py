from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt

from .errors import InvalidInputError

AXIS_X = 0
AXIS_Y = 1

# Only 2d is supported, so the splitting axis cycles between AXIS_X and AXIS_Y.
DIMENSIONS = 2


@dataclass(frozen=True)
class Point:
    x: float
    y: float
    # Caller's own record, handed back untouched in query results.
    payload: object = field(default=None, compare=False, repr=False)

    def coord(self, axis: int) -> float:
        return self.x if axis == AXIS_X else self.y

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)


def as_point(value) -> Point:
    """Convert a point-like value to Point.

    Args:
        value: Point, object with x/y attributes, mapping with "x"/"y" keys,
            or a sequence (including a numpy row) of two numbers.

    Returns:
        Point. If value is not a Point itself, it is kept as the payload.
    """
    if isinstance(value, Point):
        return value

    try:
        if isinstance(value, Mapping):
            return Point(float(value["x"]), float(value["y"]), payload=value)

        if hasattr(value, "x") and hasattr(value, "y"):
            return Point(float(value.x), float(value.y), payload=value)

        if isinstance(value, (Sequence, np.ndarray)) and len(value) == DIMENSIONS:
            return Point(float(value[0]), float(value[1]), payload=value)
    except (KeyError, TypeError, ValueError) as err:
        raise InvalidInputError(f"Can't read coordinates from {value!r}: {err}") from err

    raise InvalidInputError(f"Can't read coordinates from {value!r}")


def squared_distance(a: Point, b: Point) -> float:
    dx = a.x - b.x
    dy = a.y - b.y
    return dx * dx + dy * dy


@dataclass(frozen=True)
class Rect:
    """Axis aligned region of the plane assigned to a subtree."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float

    def __post_init__(self):
        if self.min_x > self.max_x or self.min_y > self.max_y:
            raise InvalidInputError(f"Inverted bounds: {self}")

    @staticmethod
    def bounding(coords: npt.NDArray) -> Rect:
        """Returns the bounding rectangle of (n, 2) coordinates."""
        mins = coords.min(axis=0)
        maxs = coords.max(axis=0)
        return Rect(
            min_x=float(mins[AXIS_X]),
            max_x=float(maxs[AXIS_X]),
            min_y=float(mins[AXIS_Y]),
            max_y=float(maxs[AXIS_Y]),
        )

    def split(self, axis: int, value: float) -> tuple[Rect, Rect]:
        """Clip the rectangle at value on the specified axis.

        Args:
            axis: Axis to clip on.
            value: Splitting coordinate.

        Returns:
            Tuple of the rectangle below the value and the one above it.
        """
        if axis == AXIS_X:
            left = Rect(self.min_x, value, self.min_y, self.max_y)
            right = Rect(value, self.max_x, self.min_y, self.max_y)
        else:
            left = Rect(self.min_x, self.max_x, self.min_y, value)
            right = Rect(self.min_x, self.max_x, value, self.max_y)
        return left, right

    def contains(self, other: Rect) -> bool:
        return (
            self.min_x <= other.min_x
            and other.max_x <= self.max_x
            and self.min_y <= other.min_y
            and other.max_y <= self.max_y
        )

    def contains_point(self, p: Point) -> bool:
        return self.min_x <= p.x <= self.max_x and self.min_y <= p.y <= self.max_y

    def closest_point(self, p: Point) -> Point:
        return Point(
            min(max(p.x, self.min_x), self.max_x),
            min(max(p.y, self.min_y), self.max_y),
        )

    def min_squared_distance(self, p: Point) -> float:
        # Nothing inside the rectangle can be closer than its nearest perimeter point.
        return squared_distance(p, self.closest_point(p))
