"""
Core interfaces for the kd-tree accelerated k-means components.

This module defines the abstract base classes shared by the engine, the
seeding strategies and the convergence checks, so raw points and compressed
point aggregates flow through the same code.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Sequence
import torch
from torch import Tensor

from .errors import InvalidKError


class PointSet(ABC):
    """A fixed-dimension collection of weighted points.

    This is the capability set the clustering algorithm relies on:
    coordinates to measure differences and norms, weights for accumulation,
    and per-row variances for aggregates. Raw points have unit weight and
    zero variance; spherical clusters carry their count and spread.
    """

    @property
    @abstractmethod
    def coordinates(self) -> Tensor:
        """(n, d) tensor of point coordinates."""
        pass

    @property
    @abstractmethod
    def weights(self) -> Tensor:
        """(n,) tensor of accumulation weights."""
        pass

    @property
    @abstractmethod
    def variances(self) -> Tensor:
        """(n,) tensor of average per-dimension variances."""
        pass

    @abstractmethod
    def select(self, indices: Tensor) -> 'PointSet':
        """Return the rows at ``indices`` as a point set of the same kind."""
        pass

    @abstractmethod
    def replace(self, coordinates: Tensor, weights: Tensor,
                variances: Tensor) -> 'PointSet':
        """Build a point set of the same kind from new row values."""
        pass

    @abstractmethod
    def to_native(self) -> Any:
        """Return the rows in the representation the caller supplied."""
        pass

    def __len__(self) -> int:
        return self.coordinates.shape[0]

    @property
    def dimension(self) -> int:
        """Ambient dimension of the points."""
        return self.coordinates.shape[1]

    def split(self, labels: Tensor, n_groups: int) -> List[Any]:
        """Partition rows by label, each group in the native representation."""
        groups = []
        for k in range(n_groups):
            indices = torch.where(labels == k)[0]
            groups.append(self.select(indices).to_native())
        return groups


class InitializationStrategy(ABC):
    """Abstract base class for centre seeding strategies."""

    @abstractmethod
    def select(self, points: PointSet, n_clusters: int) -> Tensor:
        """Choose the rows of ``points`` to use as initial centres.

        Args:
            points: Point set to seed from
            n_clusters: Number of centres, already validated

        Returns:
            (n_clusters,) long tensor of row indices
        """
        pass

    def run(self, points: Any, n_clusters: int) -> Any:
        """Seed ``n_clusters`` centres from ``points``.

        Args:
            points: (n, d) tensor / array, a list of SphericalCluster, or a PointSet
            n_clusters: Number of centres k

        Returns:
            The chosen centres in the same representation as ``points``

        Raises:
            InvalidKError: If k is zero or exceeds the number of points
        """
        from ..representations import as_point_set

        point_set = as_point_set(points)
        if n_clusters <= 0 or n_clusters > len(point_set):
            raise InvalidKError(f"Cannot seed {n_clusters} centres from "
                                f"{len(point_set)} points")
        indices = self.select(point_set, n_clusters)
        return point_set.select(indices).to_native()


class ConvergenceCriterion(ABC):
    """Abstract base class for convergence checking."""

    def __init__(self):
        self.history = []

    @abstractmethod
    def check(self, previous: Tensor, updated: Tensor) -> bool:
        """Check if the centres have stopped moving.

        Args:
            previous: (k, d) centres before the update step
            updated: (k, d) centres after the update step

        Returns:
            True if converged, False otherwise
        """
        pass

    def reset(self):
        """Reset convergence history."""
        self.history = []
