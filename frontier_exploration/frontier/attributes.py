"""
Frontier attributes.

Evaluates each frontier for the querying robot: lookout, distance, heading
change, path, cost, proximity of teammates and importance ratio.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Callable, List, Optional, Sequence, Tuple

from frontier_exploration.config import Config
from frontier_exploration.exceptions import NoPathError
from frontier_exploration.frontier.filter import nearest_point
from frontier_exploration.types import (
    Frontier,
    FrontierAttributes,
    PathResult,
    Planner,
    Point,
    as_point,
)
from frontier_exploration import utils

_log = logging.getLogger(__name__)


class AttributeComputer:
    """Computes and ranks frontier attributes."""

    def __init__(
        self,
        planner: Planner,
        workers: int = Config.ATTRIBUTE_WORKERS,
        logger: Optional[Callable] = None
    ):
        """
        Initialize attribute computer.

        Args:
            planner: Shortest path service
            workers: Threads used to evaluate frontiers (1 = inline)
            logger: Optional logger function (node.get_logger().info, etc.)
        """
        self.planner = planner
        self.workers = max(1, int(workers))
        self.logger = logger or _log.debug

    def compute(
        self,
        frontiers: Sequence[Frontier],
        positions: Sequence[Point],
        yaw: float
    ) -> Tuple[FrontierAttributes, ...]:
        """
        Compute the attributes of every frontier.

        Args:
            frontiers: Filtered frontiers
            positions: Team positions, the first one is the querying robot
            yaw: Heading of the querying robot (rad)

        Returns:
            One record per frontier, in frontier order
        """
        if not frontiers:
            return ()

        robot = as_point(positions[0])
        team = [as_point(p) for p in positions[1:]]

        def evaluate(item):
            index, frontier = item
            return self.evaluate_frontier(index, frontier, robot, team, yaw)

        if self.workers > 1 and len(frontiers) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                records = list(pool.map(evaluate, enumerate(frontiers)))
        else:
            records = [evaluate(item) for item in enumerate(frontiers)]

        attributes = self.assign_ratios(records)

        unreachable = sum(1 for a in attributes if not a.reachable)
        if unreachable:
            self.logger(f'{unreachable}/{len(attributes)} frontiers unreachable')
        return tuple(attributes)

    def evaluate_frontier(
        self,
        index: int,
        frontier: Frontier,
        robot: Point,
        team: Sequence[Point],
        yaw: float
    ) -> FrontierAttributes:
        """
        Attributes of one frontier, ratio left unknown.

        The lookout is the frontier cell nearest the robot.
        """
        member, distance = nearest_point(frontier, robot[0], robot[1])
        lookout = as_point(frontier.points[member])

        heading = utils.bearing(robot[0], robot[1], lookout[0], lookout[1])
        yaw_diff = utils.normalize_angle(heading - yaw)

        path, cost = self.plan(robot, lookout)

        return FrontierAttributes(
            id=index,
            size=frontier.size,
            ratio=Config.UNKNOWN_RATIO,
            lookout=lookout,
            distance=distance,
            yaw_diff=yaw_diff,
            path=path,
            cost=cost,
            proximity=self.count_closer(team, lookout, cost),
        )

    def plan(self, start: Point, goal: Point) -> PathResult:
        """Planner query, an unreachable goal gives an empty path and inf cost."""
        try:
            return self.planner.shortest_path(start, goal)
        except NoPathError:
            return PathResult(path=(), cost=Config.UNREACHABLE_COST)

    def count_closer(self, team: Sequence[Point], lookout: Point, cost: float) -> int:
        """
        Number of teammates with a strictly cheaper path to the lookout.

        Unreachable teammates never count.
        """
        closer = 0
        for mate in team:
            if self.plan(mate, lookout).cost < cost:
                closer += 1
        return closer

    def assign_ratios(
        self,
        records: List[FrontierAttributes]
    ) -> List[FrontierAttributes]:
        """
        Normalize frontier importance to [0, 1] among reachable frontiers.

        Importance grows with size and shrinks with cost and with the number
        of closer teammates. Unreachable frontiers keep the unknown ratio.
        """
        resolution = self.planner.get_map().resolution
        values = {}
        for record in records:
            if record.reachable:
                values[record.id] = record.size / (
                    (record.cost + resolution) * (1 + record.proximity)
                )

        best = max(values.values(), default=0.0)
        if best <= 0:
            return list(records)
        return [
            replace(record, ratio=values[record.id] / best) if record.id in values else record
            for record in records
        ]
