"""
Spherical cluster representation.

A spherical cluster compresses a group of points into its mean, its count
and its average per-dimension variance. Under the arithmetic k-means needs
(difference, norm, weighted accumulation) it behaves exactly like a single
point of weight ``count``, so a set of spherical clusters can be clustered
with the same engine as raw points.
"""

from typing import Any, List, Sequence, Union
import torch
from torch import Tensor

from ..base.interfaces import PointSet
from ..base.errors import EmptyInputError
from ..utils.validation import validate_data


class SphericalCluster:
    """A (mean, count, average variance) point aggregate.

    Parameters
    ----------
    mean : array-like of shape (d,)
        Mean of the underlying points
    count : float
        Number (or total weight) of underlying points; the accumulation weight
    variance : float, default=0.0
        Average of the per-dimension variances of the underlying points
    """

    def __init__(self, mean: Any, count: float = 1.0, variance: float = 0.0):
        self.mean = torch.as_tensor(mean, dtype=torch.float64).reshape(-1)
        self.count = float(count)
        self.variance = float(variance)
        if self.count < 0:
            raise ValueError(f"count must be non-negative, got {self.count}")
        if self.variance < 0:
            raise ValueError(f"variance must be non-negative, got {self.variance}")

    @classmethod
    def from_points(cls, points: Any) -> 'SphericalCluster':
        """Summarise a group of raw points.

        The variance is the average over dimensions of the maximum likelihood
        (divide by n) variance of each coordinate.
        """
        X = validate_data(points)
        mean = X.mean(dim=0)
        variance = ((X - mean) ** 2).mean(dim=0).mean().item()
        return cls(mean, X.shape[0], variance)

    @property
    def weight(self) -> float:
        return self.count

    @property
    def dimension(self) -> int:
        return self.mean.shape[0]

    def __sub__(self, other: Union['SphericalCluster', Tensor]) -> Tensor:
        """Coordinate difference, as for raw points."""
        if isinstance(other, SphericalCluster):
            return self.mean - other.mean
        return self.mean - torch.as_tensor(other, dtype=self.mean.dtype)

    def __rsub__(self, other: Tensor) -> Tensor:
        return torch.as_tensor(other, dtype=self.mean.dtype) - self.mean

    def norm(self) -> float:
        """Euclidean norm of the mean."""
        return torch.linalg.vector_norm(self.mean).item()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SphericalCluster):
            return NotImplemented
        return (self.count == other.count
                and self.variance == other.variance
                and torch.equal(self.mean, other.mean))

    def __lt__(self, other: 'SphericalCluster') -> bool:
        """Lexicographic order on the mean coordinates."""
        return self.mean.tolist() < other.mean.tolist()

    def __repr__(self) -> str:
        return (f"SphericalCluster(mean={self.mean.tolist()}, count={self.count:g}, "
                f"variance={self.variance:g})")


class SphericalClusters(PointSet):
    """A PointSet of spherical clusters; row weights are the counts."""

    def __init__(self, clusters: Sequence[SphericalCluster]):
        """
        Args:
            clusters: Non-empty sequence of SphericalCluster of equal dimension

        Raises:
            EmptyInputError: If no clusters are given
            ValueError: If the clusters differ in dimension
        """
        clusters = list(clusters)
        if len(clusters) == 0:
            raise EmptyInputError("No spherical clusters supplied")
        dimensions = {c.dimension for c in clusters}
        if len(dimensions) != 1:
            raise ValueError(f"Spherical clusters have mixed dimensions {sorted(dimensions)}")
        self._means = torch.stack([c.mean for c in clusters])
        self._counts = torch.tensor([c.count for c in clusters], dtype=torch.float64)
        self._variances = torch.tensor([c.variance for c in clusters], dtype=torch.float64)

    @classmethod
    def from_tensors(cls, means: Tensor, counts: Tensor,
                     variances: Tensor) -> 'SphericalClusters':
        """Build directly from row tensors, which may have zero rows."""
        result = cls.__new__(cls)
        result._means = means
        result._counts = counts
        result._variances = variances
        return result

    @property
    def coordinates(self) -> Tensor:
        return self._means

    @property
    def weights(self) -> Tensor:
        return self._counts

    @property
    def variances(self) -> Tensor:
        return self._variances

    def select(self, indices: Tensor) -> 'SphericalClusters':
        return SphericalClusters.from_tensors(
            self._means[indices], self._counts[indices], self._variances[indices]
        )

    def replace(self, coordinates: Tensor, weights: Tensor,
                variances: Tensor) -> 'SphericalClusters':
        return SphericalClusters.from_tensors(coordinates, weights, variances)

    def to_native(self) -> List[SphericalCluster]:
        return [
            SphericalCluster(self._means[i].clone(), self._counts[i].item(),
                             self._variances[i].item())
            for i in range(len(self))
        ]

    def __repr__(self) -> str:
        return f"SphericalClusters(n={len(self)}, dimension={self.dimension})"
