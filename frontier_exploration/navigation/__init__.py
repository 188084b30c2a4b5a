"""
Navigation module for the weight map and path planning.

Provides the map and planner the frontier detector reads.
"""
from .weight_map import WeightMap
from .nav_graph import NavGraph

__all__ = ['WeightMap', 'NavGraph']
