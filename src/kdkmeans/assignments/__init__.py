"""Tree traversals that assign points to centres."""

from .filter import CentreFilter
from .centroids import CentroidComputer
from .closest import ClosestPointsCollector

__all__ = [
    'CentreFilter',
    'CentroidComputer',
    'ClosestPointsCollector'
]
