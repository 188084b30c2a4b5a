"""
Navigation graph and shortest path planning.

Connects 8-adjacent free cells of a weight map and answers shortest path
queries with Dijkstra searches over a sparse graph.
"""
import logging
import math
import threading
from collections import OrderedDict
from typing import Callable, Optional, Tuple

import numpy as np
from scipy.sparse import csr_matrix
from scipy.sparse.csgraph import dijkstra

from frontier_exploration.config import Config
from frontier_exploration.exceptions import NoPathError
from frontier_exploration.navigation.weight_map import WeightMap
from frontier_exploration.types import PathResult, Point
from frontier_exploration import utils

_log = logging.getLogger(__name__)


class NavGraph:
    """Weighted graph over the free cells of a weight map."""

    def __init__(
        self,
        weight_map: WeightMap,
        cache_size: int = Config.PLANNER_CACHE_SIZE,
        logger: Optional[Callable] = None
    ):
        """
        Initialize navigation graph.

        Args:
            weight_map: Map whose free cells become graph nodes
            cache_size: Number of single-source searches kept in memory
            logger: Optional logger function (node.get_logger().info, etc.)
        """
        self.map = weight_map
        self.cache_size = max(1, cache_size)
        self.logger = logger or _log.debug

        self._graph = self._build_graph()
        self._cache: 'OrderedDict[int, Tuple[np.ndarray, np.ndarray]]' = OrderedDict()
        self._lock = threading.Lock()

        self.logger(
            f'Navigation graph built: {int(self.map.free_mask.sum())} nodes, '
            f'{self._graph.nnz} edges'
        )

    def get_map(self) -> WeightMap:
        return self.map

    @property
    def num_edges(self) -> int:
        return self._graph.nnz

    def _build_graph(self) -> csr_matrix:
        """
        Build the sparse adjacency matrix.

        Edge cost is the step length times the mean weight of both cells.
        """
        h, w = self.map.height, self.map.width
        free = self.map.free_mask
        weights = self.map.weights
        index = np.arange(h * w).reshape(h, w)

        rows, cols, costs = [], [], []
        for dx, dy in utils.NEIGHBOURS_8:
            src_y = slice(max(0, -dy), h - max(0, dy))
            src_x = slice(max(0, -dx), w - max(0, dx))
            dst_y = slice(max(0, dy), h - max(0, -dy))
            dst_x = slice(max(0, dx), w - max(0, -dx))

            both = free[src_y, src_x] & free[dst_y, dst_x]
            if not both.any():
                continue

            step = self.map.resolution * (math.sqrt(2) if dx and dy else 1.0)
            rows.append(index[src_y, src_x][both])
            cols.append(index[dst_y, dst_x][both])
            costs.append(
                step * (weights[src_y, src_x][both] + weights[dst_y, dst_x][both]) / 2
            )

        n = h * w
        if not rows:
            return csr_matrix((n, n))
        return csr_matrix(
            (np.concatenate(costs), (np.concatenate(rows), np.concatenate(cols))),
            shape=(n, n)
        )

    def _node(self, point: Point) -> int:
        gx, gy = self.map.world_to_grid(point[0], point[1])
        if not (self.map.in_bounds(gx, gy) and self.map.free_mask[gy, gx]):
            raise NoPathError(f"({point[0]}, {point[1]}) is not in free space")
        return gy * self.map.width + gx

    def _search(self, source: int) -> Tuple[np.ndarray, np.ndarray]:
        """Single-source Dijkstra, cached per source node."""
        with self._lock:
            if source in self._cache:
                self._cache.move_to_end(source)
                return self._cache[source]

        dist, pred = dijkstra(
            self._graph, directed=True, indices=source, return_predecessors=True
        )

        with self._lock:
            self._cache[source] = (dist, pred)
            self._cache.move_to_end(source)
            while len(self._cache) > self.cache_size:
                self._cache.popitem(last=False)
        return dist, pred

    def shortest_path(self, start: Point, goal: Point) -> PathResult:
        """
        Plan the cheapest route between two world points.

        Args:
            start: World start position
            goal: World goal position

        Returns:
            PathResult with the cell centres from start to goal and the cost

        Raises:
            NoPathError: an end is not free space or the goal is unreachable
        """
        source = self._node(start)
        target = self._node(goal)

        dist, pred = self._search(source)
        cost = dist[target]
        if not np.isfinite(cost):
            raise NoPathError(
                f"no path from ({start[0]}, {start[1]}) to ({goal[0]}, {goal[1]})")

        nodes = [target]
        while nodes[-1] != source:
            nodes.append(int(pred[nodes[-1]]))
        nodes.reverse()

        path = tuple(
            self.map.grid_to_world(node % self.map.width, node // self.map.width)
            for node in nodes
        )
        return PathResult(path=path, cost=float(cost))
