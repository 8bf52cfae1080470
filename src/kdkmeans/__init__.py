"""
kd-kmeans: exact k-means accelerated by a kd-tree centre filter.

Lloyd's algorithm where a kd-tree over the points prunes, per region, the
centres that cannot be nearest to any point in it. Points can be raw
coordinates or pre-aggregated spherical clusters.

Example usage:
    >>> import torch
    >>> from kdkmeans import KMeans
    >>>
    >>> # Generate sample data
    >>> X = torch.randn(1000, 2, dtype=torch.float64)
    >>>
    >>> # Fit K-means
    >>> kmeans = KMeans(n_clusters=5, random_state=0)
    >>> kmeans.fit(X)
    >>>
    >>> # Get cluster assignments
    >>> labels = kmeans.predict(X)
"""

__version__ = '0.1.0'

# Import main algorithms
from .algorithms.kmeans import KMeans
from .algorithms.engine import KMeansEngine

# Seeding
from .initialization import KMeansPlusPlusInit, RandomInit

# Spatial index and traversals
from .spatial import BoundingBox, KdTree, KdTreeNode
from .assignments import CentreFilter, CentroidComputer, ClosestPointsCollector

# Point representations
from .representations import RawPoints, SphericalCluster, SphericalClusters, as_point_set

# Import visualization
from .visualization import (
    plot_clusters_2d,
    plot_kdtree_boxes,
    plot_spherical_clusters
)

# Convenience imports
from .base import (
    MeanAccumulator,
    IterationRecord,
    EmptyInputError,
    InvalidCentreCountError,
    InvalidKError
)

__all__ = [
    # Algorithms
    'KMeans',
    'KMeansEngine',

    # Seeding
    'KMeansPlusPlusInit',
    'RandomInit',

    # Spatial index
    'BoundingBox',
    'KdTree',
    'KdTreeNode',
    'CentreFilter',
    'CentroidComputer',
    'ClosestPointsCollector',

    # Representations
    'RawPoints',
    'SphericalCluster',
    'SphericalClusters',
    'as_point_set',

    # Core data structures
    'MeanAccumulator',
    'IterationRecord',

    # Errors
    'EmptyInputError',
    'InvalidCentreCountError',
    'InvalidKError',

    # Visualization
    'plot_clusters_2d',
    'plot_kdtree_boxes',
    'plot_spherical_clusters',

    # Version
    '__version__'
]
