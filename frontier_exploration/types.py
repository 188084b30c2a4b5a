"""
Data type definitions for frontier exploration.

Provides structured data classes and the capability interfaces the
detector consumes.
"""
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Protocol, Tuple

import numpy as np

Point = Tuple[float, float]
Path = Tuple[Point, ...]


class CellState(Enum):
    """Classification of a grid cell."""
    FREE = 0
    OCCUPIED = 1
    UNKNOWN = 2


class Algorithm(Enum):
    """Frontier detection algorithms."""
    WFD = 'wfd'   # Wavefront Frontier Detection
    FFD = 'ffd'   # Fast Frontier Detection (not implemented)


class PathResult(NamedTuple):
    """Planned route and its cost."""
    path: Path
    cost: float


@dataclass(frozen=True, eq=False)
class Frontier:
    """Connected set of frontier cells from detection."""
    cells: np.ndarray = field(repr=False)   # (N, 2) grid indices, (gx, gy)
    points: np.ndarray = field(repr=False)  # (N, 2) world cell centres
    resolution: float = 1.0

    def __len__(self) -> int:
        return len(self.cells)

    @property
    def size(self) -> float:
        """Physical size of the frontier (meters)."""
        return len(self.cells) * self.resolution


@dataclass(frozen=True)
class FrontierAttributes:
    """Attributes of one frontier, attributes[i] describes frontiers[i]."""
    id: int
    size: float
    ratio: float                # importance among others in [0, 1], < 0 = unknown
    lookout: Point
    distance: float             # euclidean distance to the lookout
    yaw_diff: float             # heading change to face the lookout, (-pi, pi]
    path: Path = ()             # empty when unreachable
    cost: float = math.inf      # inf when unreachable
    proximity: int = 0          # teammates with a strictly cheaper path

    @property
    def reachable(self) -> bool:
        """Whether the planner found a path to the lookout."""
        return math.isfinite(self.cost)

    @property
    def has_ratio(self) -> bool:
        """Whether the ratio could be computed."""
        return self.ratio >= 0

    def __str__(self) -> str:
        return (
            f"{{ #{self.id}: size = {self.size:g}; ratio = {self.ratio:g}; "
            f"lookout = ({self.lookout[0]:g},{self.lookout[1]:g}); "
            f"euclidian distance = {self.distance:g}; "
            f"yaw difference = {self.yaw_diff:g}; "
            f"path size = {len(self.path)}; cost = {self.cost:g}; "
            f"proximity = {self.proximity} }}"
        )


class Grid(Protocol):
    """Occupancy and weight raster the detector reads."""
    resolution: float

    def classify(self, point: Point) -> CellState:
        ...

    def weight(self, point: Point) -> float:
        ...

    def extent(self) -> Tuple[Point, float, float]:
        ...

    def world_to_grid(self, wx: float, wy: float) -> Tuple[int, int]:
        ...

    def grid_to_world(self, gx: int, gy: int) -> Point:
        ...

    def state_array(self) -> np.ndarray:
        ...


class Planner(Protocol):
    """Shortest path service over a navigation graph."""

    def shortest_path(self, start: Point, goal: Point) -> PathResult:
        ...

    def get_map(self) -> Grid:
        ...


def as_point(position) -> Point:
    """Coerce a position-like value (tuple, list, array) to a Point."""
    x, y = position[0], position[1]
    return (float(x), float(y))


def as_points(positions) -> List[Point]:
    """Coerce a sequence of positions, e.g. the team's, to Points."""
    return [as_point(p) for p in positions]