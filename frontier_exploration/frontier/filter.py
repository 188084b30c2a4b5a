"""
Frontier filtering.

Quickly discards frontiers that are too small, too large, too close or
too far, and caps their number before the costly attributes are computed.
"""
import logging
from typing import Callable, Optional, Sequence, Tuple

import numpy as np

from frontier_exploration.config import FrontierParams
from frontier_exploration.types import Frontier, Point
from frontier_exploration import utils

_log = logging.getLogger(__name__)


def nearest_point(frontier: Frontier, x: float, y: float) -> Tuple[int, float]:
    """
    Member of a frontier closest to a position.

    Ties resolve to the first member in frontier order.

    Args:
        frontier: Frontier to search
        x, y: World position

    Returns:
        Tuple of (member index, euclidean distance)
    """
    distances = utils.distances_to(frontier.points, x, y)
    index = int(np.argmin(distances))
    return index, float(distances[index])


class FrontierFilter:
    """Keeps the most promising frontiers."""

    def __init__(self, logger: Optional[Callable] = None):
        """
        Initialize frontier filter.

        Args:
            logger: Optional logger function (node.get_logger().info, etc.)
        """
        self.logger = logger or _log.debug

    def filter(
        self,
        frontiers: Sequence[Frontier],
        positions: Sequence[Point],
        params: FrontierParams
    ) -> Tuple[Frontier, ...]:
        """
        Filter frontiers by size and distance, then cap their number.

        Kept frontiers are ranked by size (largest first), then distance
        to the querying robot (nearest first), then detection order.

        Args:
            frontiers: Detected frontiers
            positions: Team positions, the first one is the querying robot
            params: Size and distance bounds and max_nf

        Returns:
            At most params.max_nf frontiers in ranked order
        """
        rx, ry = positions[0]

        candidates = []
        for index, frontier in enumerate(frontiers):
            if not params.frontier_min_size <= frontier.size <= params.frontier_max_size:
                continue
            _, distance = nearest_point(frontier, rx, ry)
            if not params.min_dist <= distance <= params.max_dist:
                continue
            candidates.append((index, frontier, distance))

        candidates.sort(key=lambda c: (-c[1].size, c[2], c[0]))
        kept = tuple(frontier for _, frontier, _ in candidates[:params.max_nf])

        self.logger(
            f'Frontier filter: {len(frontiers)} detected, '
            f'{len(frontiers) - len(candidates)} out of bounds, '
            f'{len(candidates) - len(kept)} over the cap, {len(kept)} kept'
        )
        return kept
