"""
Core data structures for the accelerated k-means engine.

The mean accumulator is the unit every aggregate in the kd-tree and every
per-centre result is expressed in; iteration records are what the engine
keeps as its run history.
"""

from dataclasses import dataclass
import torch
from torch import Tensor


class MeanAccumulator:
    """Weighted streaming mean with an average-variance moment.

    Stores the total weight, the weighted coordinate sum and the weighted sum
    of squared norms (including each input's own spread). Accumulators merge
    with ``+=``, so a subtree's centroid is the merge of its children's.
    """

    def __init__(self, dimension: int, dtype: torch.dtype = torch.float64):
        self.weight = 0.0
        self.total = torch.zeros(dimension, dtype=dtype)
        self.sum_sq = 0.0

    @classmethod
    def of_point(cls, point: Tensor, weight: float = 1.0,
                 variance: float = 0.0) -> 'MeanAccumulator':
        """Accumulator holding a single (possibly weighted) point."""
        acc = cls.__new__(cls)
        acc.weight = float(weight)
        acc.total = point * weight
        acc.sum_sq = weight * (float(torch.dot(point, point)) + point.shape[0] * variance)
        return acc

    @property
    def dimension(self) -> int:
        return self.total.shape[0]

    def add(self, point: Tensor, weight: float = 1.0,
            variance: float = 0.0) -> 'MeanAccumulator':
        """Add one point with the given weight and spread."""
        self.weight += weight
        self.total.add_(point, alpha=weight)
        self.sum_sq += weight * (float(torch.dot(point, point)) + point.shape[0] * variance)
        return self

    def __iadd__(self, other: 'MeanAccumulator') -> 'MeanAccumulator':
        self.weight += other.weight
        self.total.add_(other.total)
        self.sum_sq += other.sum_sq
        return self

    def __add__(self, other: 'MeanAccumulator') -> 'MeanAccumulator':
        result = self.copy()
        result += other
        return result

    def copy(self) -> 'MeanAccumulator':
        acc = self.__class__.__new__(self.__class__)
        acc.weight = self.weight
        acc.total = self.total.clone()
        acc.sum_sq = self.sum_sq
        return acc

    @property
    def empty(self) -> bool:
        return self.weight <= 0.0

    @property
    def mean(self) -> Tensor:
        """Weighted mean of everything added so far."""
        if self.empty:
            raise ValueError("Mean of an empty accumulator is undefined")
        return self.total / self.weight

    @property
    def variance(self) -> float:
        """Average per-dimension variance about the mean."""
        if self.empty:
            return 0.0
        mean = self.mean
        spread = self.sum_sq / self.weight - float(torch.dot(mean, mean))
        return max(spread, 0.0) / self.dimension

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MeanAccumulator):
            return NotImplemented
        return (self.weight == other.weight
                and self.sum_sq == other.sum_sq
                and torch.equal(self.total, other.total))

    def __repr__(self) -> str:
        if self.empty:
            return "MeanAccumulator(weight=0)"
        return f"MeanAccumulator(weight={self.weight:g}, mean={self.mean.tolist()})"


@dataclass
class IterationRecord:
    """Summary of one Lloyd iteration.

    Attributes:
        iteration: Zero-based iteration index
        n_changed: Number of centres whose value changed
        n_empty: Number of centres that received no points
        comparisons: Candidate centre comparisons performed by the traversal
        converged: Whether this iteration satisfied the convergence criterion
    """
    iteration: int
    n_changed: int
    n_empty: int
    comparisons: int
    converged: bool = False
