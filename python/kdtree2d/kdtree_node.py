from __future__ import annotations

from dataclasses import dataclass

from .geometry import Point, Rect


@dataclass(frozen=True)
class KdTreeNode:
    point: Point
    # Region of the plane assigned to this subtree, not the tight bounds of its points.
    rect: Rect
    left_child: KdTreeNode | None = None
    right_child: KdTreeNode | None = None

    @property
    def is_leaf(self) -> bool:
        return self.left_child is None and self.right_child is None
