"""Point set representations: raw points and spherical clusters."""

from typing import Any
import torch

from ..base.interfaces import PointSet
from .points import RawPoints
from .spherical import SphericalCluster, SphericalClusters


def as_point_set(points: Any, dtype: torch.dtype = torch.float64) -> PointSet:
    """Wrap caller input in the matching PointSet.

    A PointSet is returned unchanged, a sequence of SphericalCluster becomes
    SphericalClusters and anything else is treated as raw (n, d) points.
    """
    if isinstance(points, PointSet):
        return points
    if isinstance(points, (list, tuple)) and len(points) > 0:
        n_spherical = sum(isinstance(p, SphericalCluster) for p in points)
        if n_spherical == len(points):
            return SphericalClusters(points)
        if n_spherical > 0:
            raise TypeError("Cannot mix SphericalCluster and raw points")
    return RawPoints(points, dtype=dtype)


__all__ = [
    'RawPoints',
    'SphericalCluster',
    'SphericalClusters',
    'as_point_set'
]
