"""
Frontier detection and the exploration query pipeline.

Identifies boundaries between known free space and unknown space with the
Wavefront Frontier Detector, then filters the frontiers and computes their
attributes for the querying robot.
"""
import logging
import math
from collections import deque
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
from scipy import ndimage

from frontier_exploration.config import Config, FrontierParams
from frontier_exploration.exceptions import InvalidConfigurationError, InvalidSeedError
from frontier_exploration.frontier.attributes import AttributeComputer
from frontier_exploration.frontier.filter import FrontierFilter
from frontier_exploration.types import (
    Algorithm,
    CellState,
    Frontier,
    FrontierAttributes,
    Planner,
    Point,
    as_point,
    as_points,
)
from frontier_exploration import utils

_log = logging.getLogger(__name__)


class FrontierDetector:
    """Detects, filters and ranks frontiers over a navigation graph's map."""

    def __init__(
        self,
        graph: Planner,
        x0_area: Optional[float] = None,
        y0_area: Optional[float] = None,
        width_max: Optional[float] = None,
        height_max: Optional[float] = None,
        workers: int = Config.ATTRIBUTE_WORKERS,
        logger: Optional[Callable] = None
    ):
        """
        Initialize frontier detector.

        The area to explore defaults to the whole map.

        Args:
            graph: Navigation graph used for its map and path planning
            x0_area, y0_area: Origin of the area to explore (map frame)
            width_max, height_max: Size of the area to explore (m)
            workers: Threads used for per-frontier attributes
            logger: Optional logger function (node.get_logger().info, etc.)
        """
        self._graph = graph
        self._map = graph.get_map()
        self.logger = logger or _log.debug

        (origin_x, origin_y), map_width, map_height = self._map.extent()
        self.x0_area = origin_x if x0_area is None else float(x0_area)
        self.y0_area = origin_y if y0_area is None else float(y0_area)
        self.width_max = map_width if width_max is None else float(width_max)
        self.height_max = map_height if height_max is None else float(height_max)
        if self.width_max < 0 or self.height_max < 0:
            raise InvalidConfigurationError(
                f"area size must be >= 0, got {self.width_max} x {self.height_max}")

        self._area_mask = self._compute_area_mask()

        self.frontier_filter = FrontierFilter(logger=self.logger)
        self.attribute_computer = AttributeComputer(
            graph, workers=workers, logger=self.logger
        )
        self._algorithms: Dict[Algorithm, Callable[[Point], Tuple[Frontier, ...]]] = {
            Algorithm.WFD: self._compute_frontiers_wfd,
        }

        self._frontiers: Tuple[Frontier, ...] = ()
        self._attributes: Tuple[FrontierAttributes, ...] = ()

    # ==================== Accessors ====================

    @property
    def graph(self) -> Planner:
        return self._graph

    @property
    def map(self):
        return self._map

    @property
    def frontiers(self) -> Tuple[Frontier, ...]:
        """Frontiers of the last query, attributes[i] describes frontiers[i]."""
        return self._frontiers

    @property
    def attributes(self) -> Tuple[FrontierAttributes, ...]:
        """Attributes of the last query."""
        return self._attributes

    @property
    def area_mask(self) -> np.ndarray:
        """(height, width) mask of the cells inside the area to explore."""
        return self._area_mask

    # ==================== Query ====================

    def compute_frontiers(
        self,
        positions: Sequence[Point],
        yaw: float,
        max_nf: int = Config.MAX_FRONTIERS,
        frontier_min_size: float = Config.FRONTIER_MIN_SIZE,
        frontier_max_size: float = Config.FRONTIER_MAX_SIZE,
        min_dist: float = Config.MIN_DIST,
        max_dist: float = Config.MAX_DIST,
        algorithm: Algorithm = Config.ALGORITHM
    ) -> Tuple[FrontierAttributes, ...]:
        """
        Compute the frontiers and their attributes.

        Args:
            positions: Positions of all the robots of the team, the first
                one is the robot running the query
            yaw: Heading of the querying robot (rad)
            max_nf: Max number of frontiers to keep
            frontier_min_size: Minimal frontier size (m)
            frontier_max_size: Maximal frontier size (m)
            min_dist: Minimal distance to a frontier (m)
            max_dist: Maximal distance to a frontier (m)
            algorithm: Frontier detection algorithm

        Returns:
            Attributes of the kept frontiers, also readable from attributes

        Raises:
            InvalidConfigurationError: bad parameters, nothing is computed
            UnsupportedAlgorithmError: algorithm not implemented, nothing is computed
            InvalidSeedError: the querying robot is not in known free space
        """
        params = FrontierParams(
            algorithm=algorithm,
            max_nf=max_nf,
            frontier_min_size=frontier_min_size,
            frontier_max_size=frontier_max_size,
            min_dist=min_dist,
            max_dist=max_dist,
        )
        return self.compute_with_params(positions, yaw, params)

    def compute_with_params(
        self,
        positions: Sequence[Point],
        yaw: float,
        params: FrontierParams
    ) -> Tuple[FrontierAttributes, ...]:
        """Run detection, filtering and attributes with the given parameters."""
        params = params.validate()
        team = as_points(positions)
        if not team:
            raise InvalidConfigurationError("positions must hold the querying robot")
        yaw = float(yaw)
        if not math.isfinite(yaw):
            raise InvalidConfigurationError(f"yaw must be finite, got {yaw}")

        # Fresh computation: drop the previous result before anything can fail
        self._frontiers = ()
        self._attributes = ()

        raw = self._algorithms[params.algorithm](team[0])
        frontiers = self.frontier_filter.filter(raw, team, params)
        attributes = self.attribute_computer.compute(frontiers, team, yaw)

        self._frontiers = frontiers
        self._attributes = attributes
        return attributes

    # ==================== Detection ====================

    def _compute_frontiers_wfd(self, seed: Point) -> Tuple[Frontier, ...]:
        """
        Wavefront Frontier Detection.

        Flood fills the free space reachable from the seed and groups the
        frontier cells met on the way into connected frontiers.

        Args:
            seed: Wavefront origin, usually the robot position

        Returns:
            Frontiers in the order the wavefront reached them

        Raises:
            InvalidSeedError: the seed is not a free cell of the area
        """
        states = self._map.state_array()
        free = (states == CellState.FREE.value) & self._area_mask
        unknown = (states == CellState.UNKNOWN.value) & self._area_mask

        h, w = states.shape
        gx, gy = self._map.world_to_grid(seed[0], seed[1])
        if not utils.is_in_bounds(gx, gy, w, h) or not self._area_mask[gy, gx]:
            self.logger(f'Invalid seed ({seed[0]:.2f}, {seed[1]:.2f}): outside the area')
            raise InvalidSeedError(
                f"seed ({seed[0]}, {seed[1]}) is outside the area to explore")
        if not free[gy, gx]:
            state = CellState(int(states[gy, gx])).name.lower()
            self.logger(f'Invalid seed ({seed[0]:.2f}, {seed[1]:.2f}): {state} cell')
            raise InvalidSeedError(
                f"seed ({seed[0]}, {seed[1]}) is not in known free space ({state})")

        frontier_mask = self.find_frontier_cells(free, unknown)

        # Map BFS over free cells, collecting frontier cells as met
        visited = np.zeros_like(free)
        visited[gy, gx] = True
        queue = deque([(gx, gy)])
        found: List[Tuple[int, int]] = []
        while queue:
            x, y = queue.popleft()
            if frontier_mask[y, x]:
                found.append((x, y))
            for dx, dy in utils.NEIGHBOURS_8:
                nx, ny = x + dx, y + dy
                if 0 <= nx < w and 0 <= ny < h and free[ny, nx] and not visited[ny, nx]:
                    visited[ny, nx] = True
                    queue.append((nx, ny))

        frontiers = self._group_frontiers(found, states.shape)
        self.logger(
            f'WFD from ({seed[0]:.2f}, {seed[1]:.2f}): {int(visited.sum())} free cells, '
            f'{len(found)} frontier cells, {len(frontiers)} frontiers'
        )
        return frontiers

    @staticmethod
    def find_frontier_cells(free: np.ndarray, unknown: np.ndarray) -> np.ndarray:
        """
        Mask of frontier cells: free cells with an unknown 8-neighbour.

        Args:
            free: Mask of known free cells
            unknown: Mask of unknown cells

        Returns:
            Boolean mask of frontier cells
        """
        unknown_dilated = ndimage.binary_dilation(unknown, structure=utils.STRUCTURE_8)
        return free & unknown_dilated

    def _group_frontiers(
        self,
        found: List[Tuple[int, int]],
        shape: Tuple[int, int]
    ) -> Tuple[Frontier, ...]:
        """Split frontier cells into 8-connected frontiers, keeping BFS order."""
        if not found:
            return ()

        cells = np.array(found, dtype=int)
        mask = np.zeros(shape, dtype=bool)
        mask[cells[:, 1], cells[:, 0]] = True

        labeled, _ = ndimage.label(mask, structure=utils.STRUCTURE_8)
        groups: Dict[int, List[int]] = {}
        for i, label in enumerate(labeled[cells[:, 1], cells[:, 0]]):
            groups.setdefault(int(label), []).append(i)

        frontiers = []
        for members in groups.values():
            member_cells = cells[members]
            points = np.array(
                [self._map.grid_to_world(int(x), int(y)) for x, y in member_cells],
                dtype=float
            )
            frontiers.append(Frontier(
                cells=member_cells,
                points=points,
                resolution=self._map.resolution
            ))
        return tuple(frontiers)

    def _compute_area_mask(self) -> np.ndarray:
        """Cells whose centre lies in the area to explore."""
        states = self._map.state_array()
        h, w = states.shape
        (origin_x, origin_y), _, _ = self._map.extent()
        res = self._map.resolution

        gx_min = max(0, math.ceil((self.x0_area - origin_x) / res - 0.5))
        gx_max = min(w - 1, math.floor((self.x0_area + self.width_max - origin_x) / res - 0.5))
        gy_min = max(0, math.ceil((self.y0_area - origin_y) / res - 0.5))
        gy_max = min(h - 1, math.floor((self.y0_area + self.height_max - origin_y) / res - 0.5))

        mask = np.zeros((h, w), dtype=bool)
        if gx_min <= gx_max and gy_min <= gy_max:
            mask[gy_min:gy_max + 1, gx_min:gx_max + 1] = True
        mask.flags.writeable = False
        return mask

    # ==================== Point Queries ====================

    def find_neighbours(self, point: Point) -> List[Point]:
        """
        Adjacent cell centres of a point, restricted to the area to explore.

        Args:
            point: World point

        Returns:
            World positions of the 8-neighbour cells inside the area
        """
        gx, gy = self._map.world_to_grid(point[0], point[1])
        h, w = self._area_mask.shape
        neighbours = []
        for dx, dy in utils.NEIGHBOURS_8:
            nx, ny = gx + dx, gy + dy
            if utils.is_in_bounds(nx, ny, w, h) and self._area_mask[ny, nx]:
                neighbours.append(self._map.grid_to_world(nx, ny))
        return neighbours

    def is_frontier(self, point) -> bool:
        """
        Tell if a point lies on a frontier cell.

        Args:
            point: World point

        Returns:
            True if the point is in a free cell of the area with an
            unknown neighbour
        """
        point = as_point(point)
        gx, gy = self._map.world_to_grid(point[0], point[1])
        h, w = self._area_mask.shape
        if not utils.is_in_bounds(gx, gy, w, h) or not self._area_mask[gy, gx]:
            return False
        if self._map.classify(point) is not CellState.FREE:
            return False
        return any(
            self._map.classify(n) is CellState.UNKNOWN
            for n in self.find_neighbours(point)
        )
