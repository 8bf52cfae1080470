"""Initialization strategies for seeding cluster centres."""

from .random import RandomInit
from .kmeans_plusplus import KMeansPlusPlusInit

__all__ = [
    'RandomInit',
    'KMeansPlusPlusInit'
]
