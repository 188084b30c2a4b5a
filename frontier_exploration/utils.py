"""
Utility functions for frontier exploration.

Common coordinate transformations and math utilities.
"""
import math
from typing import Tuple

import numpy as np

from frontier_exploration.types import Point

# 8-connectivity, used for classification, flood fill and grouping alike
NEIGHBOURS_8 = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0),           (1, 0),
    (-1, 1),  (0, 1),  (1, 1),
)
STRUCTURE_8 = np.ones((3, 3), dtype=bool)


def grid_to_world(gx: int, gy: int, origin_x: float, origin_y: float,
                  resolution: float) -> Point:
    """
    Convert grid coordinates to the world coordinates of the cell centre.

    Args:
        gx: Grid x coordinate
        gy: Grid y coordinate
        origin_x, origin_y: World position of the grid corner
        resolution: Cell size (m)

    Returns:
        Tuple of (world_x, world_y)
    """
    wx = origin_x + (gx + 0.5) * resolution
    wy = origin_y + (gy + 0.5) * resolution
    return wx, wy


def world_to_grid(wx: float, wy: float, origin_x: float, origin_y: float,
                  resolution: float) -> Tuple[int, int]:
    """
    Convert world coordinates to the grid cell containing them.

    Args:
        wx: World x coordinate
        wy: World y coordinate
        origin_x, origin_y: World position of the grid corner
        resolution: Cell size (m)

    Returns:
        Tuple of (grid_x, grid_y), possibly out of bounds
    """
    gx = int(math.floor((wx - origin_x) / resolution))
    gy = int(math.floor((wy - origin_y) / resolution))
    return gx, gy


def normalize_angle(angle: float) -> float:
    """
    Normalize angle to (-pi, pi] range.

    Args:
        angle: Angle in radians

    Returns:
        Normalized angle in radians
    """
    angle = math.remainder(angle, 2 * math.pi)
    if angle == -math.pi:
        return math.pi
    return angle


def bearing(x1: float, y1: float, x2: float, y2: float) -> float:
    """Heading from the first point towards the second, 0 if they coincide."""
    if x1 == x2 and y1 == y2:
        return 0.0
    return math.atan2(y2 - y1, x2 - x1)


def distances_to(points: np.ndarray, x: float, y: float) -> np.ndarray:
    """
    Euclidean distances from every row of an (N, 2) array to (x, y).
    """
    if len(points) == 0:
        return np.empty(0)
    return np.hypot(points[:, 0] - x, points[:, 1] - y)


def is_in_bounds(gx: int, gy: int, width: int, height: int) -> bool:
    """
    Check if grid coordinates are within map bounds.

    Args:
        gx, gy: Grid coordinates
        width, height: Map dimensions

    Returns:
        True if coordinates are valid
    """
    return 0 <= gx < width and 0 <= gy < height
