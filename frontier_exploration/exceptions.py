"""
Errors raised by frontier exploration.

Configuration and seed errors fail a whole compute_frontiers call;
NoPathError is recovered per frontier by the attribute stage.
"""


class FrontierError(Exception):
    """Base class for frontier exploration errors."""


class InvalidConfigurationError(FrontierError, ValueError):
    """Query parameters or parameter file are not usable."""


class UnsupportedAlgorithmError(InvalidConfigurationError):
    """The requested frontier algorithm is unknown or not implemented."""


class InvalidSeedError(FrontierError, ValueError):
    """The wavefront seed is not a known-free cell of the area of interest."""


class NoPathError(FrontierError):
    """The planner cannot route between two points."""
