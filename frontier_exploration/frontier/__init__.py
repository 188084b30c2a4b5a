"""
Frontier detection, filtering and ranking module.

Provides the exploration query pipeline over a navigation graph.
"""
from .detector import FrontierDetector
from .filter import FrontierFilter
from .attributes import AttributeComputer

__all__ = ['FrontierDetector', 'FrontierFilter', 'AttributeComputer']
