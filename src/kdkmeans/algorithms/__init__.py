"""Clustering drivers."""

from .engine import KMeansEngine
from .kmeans import KMeans

__all__ = [
    'KMeansEngine',
    'KMeans'
]
