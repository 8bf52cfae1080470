"""
Distance and clustering-quality metrics.

Brute-force nearest-centre assignment lives here; the kd-tree traversals use
the same squared-distance primitive so both paths agree on ties.
"""

from typing import Optional, Sequence
import torch
from torch import Tensor


def squared_distances(points: Tensor, centres: Tensor) -> Tensor:
    """Squared Euclidean distances between rows.

    Args:
        points: (n, d) or (d,) points
        centres: (k, d) centres

    Returns:
        (n, k) matrix, or (k,) for a single point
    """
    if points.dim() == 1:
        diff = centres - points.unsqueeze(0)
        return torch.sum(diff * diff, dim=1)
    diff = points.unsqueeze(1) - centres.unsqueeze(0)
    return torch.sum(diff * diff, dim=2)


def nearest_centres(points: Tensor, centres: Tensor) -> Tensor:
    """Index of the nearest centre for every point, lowest index on ties.

    Args:
        points: (n, d) data points
        centres: (k, d) centres

    Returns:
        (n,) long tensor of centre indices
    """
    return torch.argmin(squared_distances(points, centres), dim=1)


def inertia(X: Tensor, labels: Tensor, centers: Tensor,
            weights: Optional[Tensor] = None) -> float:
    """Compute (weighted) sum of squared distances to assigned centers.

    Args:
        X: (n, d) data points
        labels: (n,) cluster labels
        centers: (k, d) cluster centers
        weights: Optional (n,) point weights

    Returns:
        Total inertia (lower is better)
    """
    total = 0.0
    n_clusters = centers.shape[0]

    for k in range(n_clusters):
        mask = labels == k
        if mask.sum() > 0:
            cluster_points = X[mask]
            distances = torch.sum((cluster_points - centers[k]) ** 2, dim=1)
            if weights is not None:
                distances = distances * weights[mask]
            total += distances.sum().item()

    return total


def sum_square_residuals(clusters: Sequence[Tensor]) -> float:
    """Sum of squared distances of each cluster's points from its own mean.

    Args:
        clusters: Sequence of (m_i, d) tensors, one per cluster

    Returns:
        Total within-cluster sum of squares; empty clusters contribute zero
    """
    total = 0.0
    for points in clusters:
        if len(points) == 0:
            continue
        mean = points.mean(dim=0)
        total += torch.sum((points - mean) ** 2).item()
    return total
