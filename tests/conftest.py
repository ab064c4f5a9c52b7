"""
Shared pytest fixtures for the kdtree2d test suite.
"""

import os

# The demo imports pyplot; keep it off any display.
os.environ.setdefault("MPLBACKEND", "Agg")

import numpy as np
import pytest
from kdtree2d import KdTree, Point


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def scenario_points():
    """Five points used by the documented (1, 0) k=2 query."""
    return [Point(0, 0), Point(1, 1), Point(2, 2), Point(5, 5), Point(0, 5)]


@pytest.fixture
def scenario_tree(scenario_points):
    return KdTree.create(scenario_points)


@pytest.fixture
def empty_tree():
    return KdTree.create([])
