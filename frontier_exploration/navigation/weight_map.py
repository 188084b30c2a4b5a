"""
Weight map over an occupancy grid.

Classifies cells as free, occupied or unknown and gives the traversal
weight of free cells.
"""
from typing import Optional, Tuple

import numpy as np

from frontier_exploration.config import Config
from frontier_exploration.types import CellState, Point
from frontier_exploration import utils


class WeightMap:
    """Read-only occupancy raster with traversal weights."""

    def __init__(
        self,
        occupancy: np.ndarray,
        resolution: float = Config.DEFAULT_RESOLUTION,
        origin_x: float = 0.0,
        origin_y: float = 0.0,
        weights: Optional[np.ndarray] = None
    ):
        """
        Initialize weight map.

        Args:
            occupancy: (height, width) occupancy values, -1 unknown, 0..100 otherwise
            resolution: Cell size (m)
            origin_x, origin_y: World position of cell (0, 0)'s corner
            weights: Traversal weight per cell, must be > 0 on free cells;
                defaults to 1 + occupancy / 100
        """
        data = np.array(occupancy)
        if data.ndim != 2:
            raise ValueError(f"occupancy must be 2D, got shape {data.shape}")
        if resolution <= 0:
            raise ValueError(f"resolution must be > 0, got {resolution}")

        self.data = data
        self.resolution = float(resolution)
        self.origin_x = float(origin_x)
        self.origin_y = float(origin_y)
        self.height, self.width = data.shape

        unknown = data < 0
        occupied = ~unknown & (data >= Config.OCCUPIED_THRESHOLD)
        states = np.full(data.shape, CellState.FREE.value, dtype=np.int8)
        states[occupied] = CellState.OCCUPIED.value
        states[unknown] = CellState.UNKNOWN.value
        self._states = states
        self.free_mask = states == CellState.FREE.value

        if weights is None:
            weights = 1.0 + np.clip(data, 0, 100) / 100.0
        else:
            weights = np.array(weights, dtype=float)
            if weights.shape != data.shape:
                raise ValueError(
                    f"weights shape {weights.shape} != occupancy shape {data.shape}")
            free_weights = weights[self.free_mask]
            if not np.all(np.isfinite(free_weights) & (free_weights > 0)):
                raise ValueError("weights must be finite and > 0 on free cells")
        self.weights = weights.astype(float)

        for array in (self.data, self._states, self.free_mask, self.weights):
            array.flags.writeable = False

    def world_to_grid(self, wx: float, wy: float) -> Tuple[int, int]:
        """Grid cell containing a world point (may be out of bounds)."""
        return utils.world_to_grid(wx, wy, self.origin_x, self.origin_y, self.resolution)

    def grid_to_world(self, gx: int, gy: int) -> Point:
        """World position of a cell centre."""
        return utils.grid_to_world(gx, gy, self.origin_x, self.origin_y, self.resolution)

    def in_bounds(self, gx: int, gy: int) -> bool:
        return utils.is_in_bounds(gx, gy, self.width, self.height)

    def classify_cell(self, gx: int, gy: int) -> CellState:
        """
        Classify a grid cell; cells off the raster are unknown.

        Frontier detection never looks past the raster (nor the area of
        interest), so an off-raster UNKNOWN does not make its free
        neighbour a frontier cell.
        """
        if not self.in_bounds(gx, gy):
            return CellState.UNKNOWN
        return CellState(int(self._states[gy, gx]))

    def classify(self, point: Point) -> CellState:
        """Classify the cell containing a world point."""
        return self.classify_cell(*self.world_to_grid(point[0], point[1]))

    def weight(self, point: Point) -> float:
        """
        Traversal weight at a world point.

        Raises:
            ValueError: the point is not in a free cell
        """
        gx, gy = self.world_to_grid(point[0], point[1])
        if self.classify_cell(gx, gy) is not CellState.FREE:
            raise ValueError(f"no weight at ({point[0]}, {point[1]}): cell is not free")
        return float(self.weights[gy, gx])

    def extent(self) -> Tuple[Point, float, float]:
        """Return ((origin_x, origin_y), width_m, height_m)."""
        return (
            (self.origin_x, self.origin_y),
            self.width * self.resolution,
            self.height * self.resolution,
        )

    def state_array(self) -> np.ndarray:
        """(height, width) array of CellState values."""
        return self._states
