from __future__ import annotations

import math
import numbers
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from .errors import InvalidArgumentError, InvalidInputError
from .geometry import DIMENSIONS, Point, Rect, as_point, squared_distance
from .kdtree_node import KdTreeNode
from .logger import logger


@dataclass(frozen=True)
class SearchResult:
    point: Point
    squared_distance: float

    @property
    def distance(self) -> float:
        return math.sqrt(self.squared_distance)


class KdTree:
    """Balanced 2d kd-tree, built once and queried read-only afterwards."""

    def __init__(self, root: KdTreeNode | None, size: int):
        self._root = root
        self._size = size

    @classmethod
    def create(cls, points: Iterable | npt.NDArray) -> KdTree:
        """Build a balanced tree.

        Args:
            points: Point-like values (see as_point) or (n, 2) array.

        Returns:
            Built tree. Empty input gives a tree without root.

        Raises:
            InvalidInputError: If any point can't be read or has non-finite coordinates.
        """
        point_list = _to_points(points)
        if len(point_list) == 0:
            logger.debug("Built empty kd-tree")
            return cls(None, 0)

        # Own a copy of the coordinates. The caller's sequence is never reordered.
        coords = np.array([(p.x, p.y) for p in point_list], dtype=np.float64)

        finite = np.isfinite(coords).all(axis=1)
        if not finite.all():
            bad = int(np.flatnonzero(~finite)[0])
            logger.warning(f"Rejecting {len(point_list)} points, point {bad} is not finite")
            raise InvalidInputError(
                f"points must have finite coordinates, received {point_list[bad]} at index {bad}"
            )

        root = KdTree._create_node(
            point_list,
            coords,
            np.arange(len(point_list)),
            0,
            Rect.bounding(coords),
        )
        tree = cls(root, len(point_list))
        logger.debug(f"Built kd-tree with {len(tree)} points, height {tree.height}")
        return tree

    @staticmethod
    def _create_node(
        points: list[Point],
        coords: npt.NDArray,
        indices: npt.NDArray,
        depth: int,
        rect: Rect,
    ) -> KdTreeNode | None:
        if len(indices) == 0:
            return None

        # Decide which axis for splitting.
        axis = depth % DIMENSIONS

        # Stable sort keeps the relative order of points with equal coordinates,
        # so the same input always builds the same tree.
        order = indices[np.argsort(coords[indices, axis], kind="stable")]

        median = len(order) // 2
        point = points[order[median]]

        left_rect, right_rect = rect.split(axis, point.coord(axis))

        # The median point belongs only to this node.
        return KdTreeNode(
            point=point,
            rect=rect,
            left_child=KdTree._create_node(
                points, coords, order[:median], depth + 1, left_rect
            ),
            right_child=KdTree._create_node(
                points, coords, order[median + 1 :], depth + 1, right_rect
            ),
        )

    @property
    def root(self) -> KdTreeNode | None:
        return self._root

    @property
    def bounds(self) -> Rect | None:
        return None if self._root is None else self._root.rect

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._root is not None

    def walk(self) -> Iterator[tuple[KdTreeNode, int]]:
        """Yields (node, depth) in pre-order."""
        stack = [] if self._root is None else [(self._root, 0)]
        while stack:
            node, depth = stack.pop()
            yield node, depth
            if node.right_child is not None:
                stack.append((node.right_child, depth + 1))
            if node.left_child is not None:
                stack.append((node.left_child, depth + 1))

    @property
    def height(self) -> int:
        return max((depth + 1 for _, depth in self.walk()), default=0)

    def find_nearest(self, query, considered_points: list | None = None) -> Point | None:
        """Returns the nearest point to query, or None if the tree is empty.

        Args:
            query: Point-like search location.
            considered_points: Optional empty list to be filled with every point
                visited during the search, in visiting order.
        """
        results = self.search(query, 1, considered_points)
        return results[0].point if results else None

    def find_k_nearest(
        self, query, k: int, considered_points: list | None = None
    ) -> list[Point]:
        """Returns at most k nearest points to query, nearest first."""
        return [result.point for result in self.search(query, k, considered_points)]

    def search(
        self, query, k: int, considered_points: list | None = None
    ) -> list[SearchResult]:
        """Find the k nearest points and their squared distances to query.

        Args:
            query: Point-like search location.
            k: Maximum number of results. Must be >= 1.
            considered_points: Optional empty list to be filled with every point
                visited during the search, in visiting order.

        Returns:
            List of SearchResult sorted by distance, nearest first.

        Raises:
            InvalidArgumentError: If k is not a positive integer or query is invalid.
        """
        _check_k(k)
        query_point = _to_query(query)

        results: list[SearchResult] = []
        if self._root is not None:
            KdTree._search_nearest(
                self._root, query_point, 0, k, results, considered_points
            )
        return results

    @staticmethod
    def _search_nearest(
        node: KdTreeNode,
        query: Point,
        depth: int,
        k: int,
        results: list[SearchResult],
        considered_points: list | None,
    ):
        if considered_points is not None:
            considered_points.append(node.point)

        _insert_result(results, SearchResult(node.point, squared_distance(query, node.point)), k)

        axis = depth % DIMENSIONS
        if query.coord(axis) < node.point.coord(axis):
            near, far = node.left_child, node.right_child
        else:
            near, far = node.right_child, node.left_child

        if near is not None:
            KdTree._search_nearest(near, query, depth + 1, k, results, considered_points)

        if far is None:
            return

        # Nothing in the far subtree is closer than the nearest point of its region.
        if (
            len(results) < k
            or far.rect.min_squared_distance(query) <= results[-1].squared_distance
        ):
            KdTree._search_nearest(far, query, depth + 1, k, results, considered_points)

    def find_within_radius(
        self, query, radius: float, considered_points: list | None = None
    ) -> list[Point]:
        """Find all points whose distance to query is <= radius.

        Args:
            query: Point-like search location.
            radius: Search radius. Must be finite and >= 0.
            considered_points: Optional empty list to be filled with every point
                visited during the search, in visiting order.

        Returns:
            Found points sorted by distance, nearest first.
        """
        if (
            isinstance(radius, bool)
            or not isinstance(radius, numbers.Real)
            or not math.isfinite(radius)
            or radius < 0
        ):
            raise InvalidArgumentError(f"radius must be finite and >= 0, received {radius!r}")
        query_point = _to_query(query)

        found: list[SearchResult] = []
        if self._root is not None:
            KdTree._search_radius(
                self._root, query_point, 0, radius * radius, found, considered_points
            )

        found.sort(key=lambda result: result.squared_distance)
        return [result.point for result in found]

    @staticmethod
    def _search_radius(
        node: KdTreeNode,
        query: Point,
        depth: int,
        max_dist2: float,
        found: list[SearchResult],
        considered_points: list | None,
    ):
        if considered_points is not None:
            considered_points.append(node.point)

        dist2 = squared_distance(query, node.point)
        if dist2 <= max_dist2:
            found.append(SearchResult(node.point, dist2))

        axis = depth % DIMENSIONS
        if query.coord(axis) < node.point.coord(axis):
            # Left
            near, far = node.left_child, node.right_child
        else:
            # Right
            near, far = node.right_child, node.left_child

        if near is not None:
            KdTree._search_radius(near, query, depth + 1, max_dist2, found, considered_points)
        if far is not None and far.rect.min_squared_distance(query) <= max_dist2:
            KdTree._search_radius(far, query, depth + 1, max_dist2, found, considered_points)


def _insert_result(results: list[SearchResult], result: SearchResult, max_results: int):
    # results is sorted nearest to farthest. Scan from the farthest entry;
    # a tie goes in front of the entries it ties with.
    index = len(results)
    while index > 0 and results[index - 1].squared_distance >= result.squared_distance:
        index -= 1

    results.insert(index, result)
    if len(results) > max_results:
        results.pop()


def _to_points(points) -> list[Point]:
    if isinstance(points, np.ndarray):
        if points.size == 0:
            return []
        if points.ndim != 2 or points.shape[1] != DIMENSIONS:
            raise InvalidInputError(
                f"points array must have shape (n, {DIMENSIONS}), received {points.shape}"
            )
        return [Point(float(x), float(y)) for x, y in points.tolist()]

    return [as_point(p) for p in points]


def _to_query(query) -> Point:
    try:
        point = as_point(query)
    except InvalidInputError as err:
        raise InvalidArgumentError(str(err)) from err

    if not point.is_finite():
        raise InvalidArgumentError(f"query must have finite coordinates, received {point}")
    return point


def _check_k(k):
    if isinstance(k, bool) or not isinstance(k, numbers.Integral):
        raise InvalidArgumentError(f"k must be an integer, received {k!r}")
    if k < 1:
        raise InvalidArgumentError(f"k must be >= 1, received {k}")


def build(points: Iterable | npt.NDArray) -> KdTree:
    return KdTree.create(points)


def find_nearest(tree: KdTree, query, considered_points: list | None = None) -> Point | None:
    return tree.find_nearest(query, considered_points)


def find_k_nearest(
    tree: KdTree, query, k: int, considered_points: list | None = None
) -> list[Point]:
    return tree.find_k_nearest(query, k, considered_points)
