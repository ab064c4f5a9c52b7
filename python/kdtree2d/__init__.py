from .errors import InvalidArgumentError, InvalidInputError, KdTreeError
from .geometry import AXIS_X, AXIS_Y, Point, Rect, as_point, squared_distance
from .kdtree import KdTree, SearchResult, build, find_k_nearest, find_nearest
from .kdtree_node import KdTreeNode

__all__ = [
    "AXIS_X",
    "AXIS_Y",
    "InvalidArgumentError",
    "InvalidInputError",
    "KdTree",
    "KdTreeError",
    "KdTreeNode",
    "Point",
    "Rect",
    "SearchResult",
    "as_point",
    "build",
    "find_k_nearest",
    "find_nearest",
    "squared_distance",
]
