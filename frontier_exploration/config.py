"""
Configuration for frontier exploration.

Default query parameters and map conventions are centralized here;
FrontierParams bundles the per-call tuning and can be loaded from YAML.
"""
import math
import numbers
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from frontier_exploration.exceptions import (
    InvalidConfigurationError,
    UnsupportedAlgorithmError,
)
from frontier_exploration.types import Algorithm


class Config:
    """Frontier exploration configuration constants."""

    # ==================== Query Defaults ====================
    MAX_FRONTIERS = 50              # max number of frontiers kept by the filter
    FRONTIER_MIN_SIZE = 2.0         # m - smaller frontiers are ignored
    FRONTIER_MAX_SIZE = 30.0        # m - larger frontiers are ignored
    MIN_DIST = 1.6                  # m - closer frontiers are ignored
    MAX_DIST = 50.0                 # m - farther frontiers are ignored
    ALGORITHM = Algorithm.WFD

    # ==================== Occupancy Grid ====================
    OCCUPIED_THRESHOLD = 65         # occupancy >= this is an obstacle, < 0 is unknown
    DEFAULT_RESOLUTION = 0.05       # m/cell

    # ==================== Sentinels ====================
    UNREACHABLE_COST = math.inf     # cost of a frontier the planner cannot reach
    UNKNOWN_RATIO = -1.0            # ratio that could not be computed

    # ==================== Performance ====================
    PLANNER_CACHE_SIZE = 32         # cached single-source searches
    ATTRIBUTE_WORKERS = 1           # threads for per-frontier attributes (1 = inline)


@dataclass(frozen=True)
class FrontierParams:
    """Tuning of a single compute_frontiers call."""
    algorithm: Algorithm = Config.ALGORITHM
    max_nf: int = Config.MAX_FRONTIERS
    frontier_min_size: float = Config.FRONTIER_MIN_SIZE
    frontier_max_size: float = Config.FRONTIER_MAX_SIZE
    min_dist: float = Config.MIN_DIST
    max_dist: float = Config.MAX_DIST

    def validate(self) -> 'FrontierParams':
        """
        Check the parameters and normalize the algorithm selector.

        Returns:
            A FrontierParams with an Algorithm member, an int cap and float bounds

        Raises:
            UnsupportedAlgorithmError: algorithm unknown or not implemented
            InvalidConfigurationError: a bound is negative or inverted
        """
        algorithm = parse_algorithm(self.algorithm)

        if isinstance(self.max_nf, bool) or not isinstance(self.max_nf, numbers.Integral):
            raise InvalidConfigurationError(
                f"max_nf must be an integer, got {self.max_nf!r}")
        if self.max_nf < 0:
            raise InvalidConfigurationError(f"max_nf must be >= 0, got {self.max_nf}")

        min_size, max_size = _check_range(
            'frontier size', self.frontier_min_size, self.frontier_max_size)
        min_dist, max_dist = _check_range('distance', self.min_dist, self.max_dist)

        return FrontierParams(
            algorithm=algorithm,
            max_nf=int(self.max_nf),
            frontier_min_size=min_size,
            frontier_max_size=max_size,
            min_dist=min_dist,
            max_dist=max_dist,
        )

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'FrontierParams':
        """
        Build parameters from a mapping, missing keys keep their defaults.

        A mapping with a 'frontier' section is unwrapped first; that section
        must then be the only top-level key.
        """
        data = data or {}
        if not isinstance(data, dict):
            raise InvalidConfigurationError(
                f"frontier parameters must be a mapping, got {type(data).__name__}")
        if 'frontier' in data:
            siblings = sorted(str(k) for k in data if k != 'frontier')
            if siblings:
                raise InvalidConfigurationError(
                    f"unexpected key(s) beside the frontier section: {', '.join(siblings)}")
            data = data['frontier'] or {}
            if not isinstance(data, dict):
                raise InvalidConfigurationError(
                    f"frontier section must be a mapping, got {type(data).__name__}")

        known = {f.name for f in fields(cls)}
        unknown = sorted(str(k) for k in data if k not in known)
        if unknown:
            raise InvalidConfigurationError(
                f"unknown frontier parameter(s): {', '.join(unknown)}")

        return cls(**data).validate()


def parse_algorithm(value: Union[Algorithm, str]) -> Algorithm:
    """
    Resolve an algorithm selector.

    Only WFD is implemented; FFD is recognised but rejected.
    """
    if isinstance(value, Algorithm):
        algorithm = value
    else:
        try:
            algorithm = Algorithm(str(value).lower())
        except ValueError:
            raise UnsupportedAlgorithmError(f"unknown algorithm: {value!r}") from None

    if algorithm is not Algorithm.WFD:
        raise UnsupportedAlgorithmError(
            f"algorithm {algorithm.name} is not supported")
    return algorithm


def load_params(params_file: str) -> FrontierParams:
    """
    Load frontier parameters from a YAML file.

    Args:
        params_file: Path to the YAML file

    Returns:
        Validated FrontierParams

    Raises:
        InvalidConfigurationError: missing file, bad YAML or bad values
    """
    if not os.path.exists(params_file):
        raise InvalidConfigurationError(f"parameter file not found: {params_file}")

    try:
        with open(params_file, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidConfigurationError(f"cannot parse {params_file}: {e}") from e

    return FrontierParams.from_dict(data)


def _check_range(name: str, low: float, high: float) -> Tuple[float, float]:
    for value in (low, high):
        if isinstance(value, bool) or not isinstance(value, numbers.Real) or math.isnan(value):
            raise InvalidConfigurationError(f"{name} bound must be a number, got {value!r}")
    low, high = float(low), float(high)
    if low < 0:
        raise InvalidConfigurationError(f"{name} lower bound must be >= 0, got {low}")
    if low > high:
        raise InvalidConfigurationError(
            f"{name} bounds are inverted: min {low} > max {high}")
    return low, high
