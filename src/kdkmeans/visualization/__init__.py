"""Visualization utilities for clustering results and kd-trees."""

from .plot_clusters import (
    plot_clusters_2d,
    plot_kdtree_boxes,
    plot_spherical_clusters
)

__all__ = [
    'plot_clusters_2d',
    'plot_kdtree_boxes',
    'plot_spherical_clusters'
]
