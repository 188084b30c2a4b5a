"""Shared fixtures for frontier exploration tests."""
import math
import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from frontier_exploration.exceptions import NoPathError
from frontier_exploration.frontier import FrontierDetector
from frontier_exploration.navigation import NavGraph, WeightMap
from frontier_exploration.types import PathResult


CELL_VALUES = {'.': 0, '#': 100, '?': -1}


def make_map(rows, resolution=1.0, origin_x=0.0, origin_y=0.0, weights=None):
    """
    WeightMap from ASCII rows: '.' free, '#' occupied, '?' unknown.

    Row i of the list is grid row gy = i.
    """
    data = np.array([[CELL_VALUES[c] for c in row] for row in rows], dtype=int)
    return WeightMap(data, resolution=resolution, origin_x=origin_x,
                     origin_y=origin_y, weights=weights)


class StubPlanner:
    """Planner with costs given by a function, None meaning unreachable."""

    def __init__(self, weight_map, cost_fn):
        self.map = weight_map
        self.cost_fn = cost_fn
        self.calls = []

    def get_map(self):
        return self.map

    def shortest_path(self, start, goal):
        self.calls.append((start, goal))
        cost = self.cost_fn(start, goal)
        if cost is None:
            raise NoPathError(f"no path from {start} to {goal}")
        return PathResult(path=(tuple(start), tuple(goal)), cost=cost)


def euclidean_cost(start, goal):
    return math.hypot(goal[0] - start[0], goal[1] - start[1])


def query(detector, positions, yaw=0.0, **kwargs):
    """compute_frontiers with permissive size and distance bounds."""
    kwargs.setdefault('frontier_min_size', 0.0)
    kwargs.setdefault('min_dist', 0.0)
    return detector.compute_frontiers(positions, yaw, **kwargs)


# ==================== Maps ====================

# Two rooms joined by a corridor, each open to unknown space on row 0
TWO_ROOMS = [
    '??????????',
    '#..####..#',
    '#........#',
    '##########',
]

# Corridor under openings of 1, 2, 3 and 4 cells
OPENINGS = [
    '???????????????',
    '#.#..#...#....#',
    '...............',
    '###############',
]


@pytest.fixture
def two_rooms_map():
    return make_map(TWO_ROOMS)


@pytest.fixture
def two_rooms_graph(two_rooms_map):
    return NavGraph(two_rooms_map)


@pytest.fixture
def two_rooms(two_rooms_graph):
    """Detector over the two rooms map."""
    return FrontierDetector(two_rooms_graph)


@pytest.fixture
def openings_map():
    return make_map(OPENINGS)


@pytest.fixture
def openings(openings_map):
    """Detector over the openings map."""
    return FrontierDetector(NavGraph(openings_map))
