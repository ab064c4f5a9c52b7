from __future__ import annotations

import argparse
import sys

import matplotlib.patches as patches
import matplotlib.pyplot as plt
import numpy as np

from .geometry import AXIS_X
from .kdtree import KdTree
from .logger import logger, set_debug

VIEWER_MATPLOTLIB = "matplotlib"
VIEWER_RERUN = "rerun"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Visualize 2d kd-tree nearest neighbor search")
    parser.add_argument("--num-points", type=int, default=10, help="Number of random points")
    parser.add_argument("--seed", type=int, default=19, help="Random seed")
    parser.add_argument(
        "--query",
        type=float,
        nargs=2,
        default=[0.5, 0.5],
        metavar=("X", "Y"),
        help="Search location",
    )
    parser.add_argument("-k", type=int, default=3, help="Number of nearest neighbors")
    parser.add_argument("--radius", type=float, default=0.3, help="Search radius")
    parser.add_argument(
        "--viewer",
        choices=[VIEWER_MATPLOTLIB, VIEWER_RERUN],
        default=VIEWER_MATPLOTLIB,
    )
    parser.add_argument("--save", type=str, default=None, help="Save figure to file instead of showing it")
    parser.add_argument("--verbose", action="store_true", help="Enable debug log")
    return parser.parse_args(argv)


def splitting_segments(tree: KdTree) -> list[tuple[tuple[float, float], tuple[float, float]]]:
    """Returns the splitting line segment of each node, clipped to the node's region."""
    segments = []
    for node, depth in tree.walk():
        rect = node.rect
        if depth % 2 == AXIS_X:
            segments.append(((node.point.x, rect.min_y), (node.point.x, rect.max_y)))
        else:
            segments.append(((rect.min_x, node.point.y), (rect.max_x, node.point.y)))
    return segments


def plot(points, query, nearest, found, considered, tree: KdTree, radius: float):
    c = patches.Circle(
        query, radius=radius, edgecolor="green", facecolor="none", linewidth=1
    )
    ax = plt.axes()
    ax.add_patch(c)

    for start, end in splitting_segments(tree):
        ax.plot([start[0], end[0]], [start[1], end[1]], color="lightgray", linewidth=1)

    plt.scatter(points[:, 0], points[:, 1], label="points")
    plt.scatter([p.x for p in considered], [p.y for p in considered], marker="x", label="visited")
    plt.scatter([p.x for p in found], [p.y for p in found], label="in radius")
    plt.scatter([p.x for p in nearest], [p.y for p in nearest], facecolors="none", edgecolors="red", s=120, label="nearest")
    plt.scatter(query[0], query[1], color="black", label="query")
    plt.axis("square")
    x, y = 1.1, 1.1
    plt.xlim(0, x)
    plt.ylim(0, y)
    plt.xticks(np.arange(0, x + 0.1, step=0.1))
    plt.yticks(np.arange(0, y + 0.1, step=0.1))
    plt.axhline(0, linewidth=2, color="gray")
    plt.axvline(0, linewidth=2, color="gray")
    plt.legend(loc="upper right", fontsize="small")
    return ax


def log_to_rerun(points, query, nearest, tree: KdTree):
    import rerun as rr

    all_points = np.append(points, np.array(query).reshape(1, 2), axis=0)

    colors = np.full((len(points), 3), [0, 255, 0])
    colors = np.append(colors, np.array([255, 0, 0]).reshape(1, 3), axis=0)

    rr.init("knn", spawn=True)
    rr.log("points", rr.Points2D(all_points, colors=colors, radii=0.02))
    rr.log(
        "nearest",
        rr.Points2D([(p.x, p.y) for p in nearest], colors=[255, 0, 255], radii=0.03),
    )
    rr.log("splits", rr.LineStrips2D(splitting_segments(tree), colors=[128, 128, 128]))


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    set_debug(args.verbose)

    rng = np.random.default_rng(args.seed)
    points = rng.random((args.num_points, 2))
    query = tuple(args.query)

    tree = KdTree.create(points)

    considered = []
    nearest = tree.find_k_nearest(query, args.k, considered)
    found = tree.find_within_radius(query, args.radius)

    logger.info(f"Visited {len(considered)} of {len(tree)} points")
    for i, p in enumerate(nearest):
        logger.info(f"#{i}: ({p.x:.3f}, {p.y:.3f})")

    if args.viewer == VIEWER_RERUN:
        log_to_rerun(points, query, nearest, tree)
        return 0

    plot(points, query, nearest, found, considered, tree, args.radius)
    if args.save:
        plt.savefig(args.save)
        plt.close()
    else:
        plt.show()
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(1)
