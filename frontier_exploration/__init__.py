"""
Frontier Exploration Package

Finds and ranks exploration frontiers for a robot team over a partially
known terrain.
"""
from .config import Config, FrontierParams, load_params
from .exceptions import (
    FrontierError,
    InvalidConfigurationError,
    UnsupportedAlgorithmError,
    InvalidSeedError,
    NoPathError,
)
from .types import (
    Algorithm,
    CellState,
    Frontier,
    FrontierAttributes,
    PathResult,
    Grid,
    Planner,
)
from .navigation import WeightMap, NavGraph
from .frontier import FrontierDetector, FrontierFilter, AttributeComputer
from . import utils

__version__ = "1.0.0"
__all__ = [
    'Config',
    'FrontierParams',
    'load_params',
    'FrontierError',
    'InvalidConfigurationError',
    'UnsupportedAlgorithmError',
    'InvalidSeedError',
    'NoPathError',
    'Algorithm',
    'CellState',
    'Frontier',
    'FrontierAttributes',
    'PathResult',
    'Grid',
    'Planner',
    'WeightMap',
    'NavGraph',
    'FrontierDetector',
    'FrontierFilter',
    'AttributeComputer',
    'utils',
]
