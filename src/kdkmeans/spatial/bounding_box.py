"""
Axis-aligned bounding boxes.

Boxes only ever widen: they start as a single point and grow by adding
points or merging other boxes. Besides the extreme-distance queries, the box
provides the vertex dominance test the centre filter prunes with.
"""

import torch
from torch import Tensor


class BoundingBox:
    """Per-dimension interval ``[lo, hi]`` in d-dimensional space."""

    def __init__(self, lo: Tensor, hi: Tensor):
        if lo.shape != hi.shape:
            raise ValueError(f"Bounds have different shapes {tuple(lo.shape)} and {tuple(hi.shape)}")
        if (lo > hi).any():
            raise ValueError("Lower bound exceeds upper bound")
        self.lo = lo
        self.hi = hi

    @classmethod
    def from_point(cls, point: Tensor) -> 'BoundingBox':
        """Degenerate box holding exactly one point."""
        return cls(point.clone(), point.clone())

    @property
    def dimension(self) -> int:
        return self.lo.shape[0]

    @property
    def centre(self) -> Tensor:
        return (self.lo + self.hi) / 2

    @property
    def widths(self) -> Tensor:
        return self.hi - self.lo

    def add(self, point: Tensor) -> 'BoundingBox':
        """Widen in place to include ``point``."""
        self.lo = torch.minimum(self.lo, point)
        self.hi = torch.maximum(self.hi, point)
        return self

    def union(self, other: 'BoundingBox') -> 'BoundingBox':
        """Smallest box containing both boxes."""
        return BoundingBox(torch.minimum(self.lo, other.lo),
                           torch.maximum(self.hi, other.hi))

    def __or__(self, other: 'BoundingBox') -> 'BoundingBox':
        return self.union(other)

    def contains(self, point: Tensor) -> bool:
        return bool(((point >= self.lo) & (point <= self.hi)).all())

    def min_distance(self, point: Tensor) -> float:
        """Distance from ``point`` to the nearest point of the box."""
        nearest = torch.clamp(point, self.lo, self.hi)
        return torch.linalg.vector_norm(point - nearest).item()

    def max_distance(self, point: Tensor) -> float:
        """Distance from ``point`` to the farthest corner of the box."""
        farthest = torch.where(point - self.lo > self.hi - point, self.lo, self.hi)
        return torch.linalg.vector_norm(point - farthest).item()

    def favourable_vertices(self, candidates: Tensor, closest: Tensor) -> Tensor:
        """Box corner most favourable to each candidate relative to ``closest``.

        Per dimension the corner takes ``hi`` where the candidate lies above
        ``closest`` and ``lo`` otherwise.

        Args:
            candidates: (m, d) candidate centres
            closest: (d,) reference centre

        Returns:
            (m, d) tensor of vertices
        """
        return torch.where(candidates - closest > 0, self.hi, self.lo)

    def dominated(self, candidates: Tensor, closest: Tensor) -> Tensor:
        """Which candidates are farther than ``closest`` everywhere in the box.

        A candidate is dominated when, even at its favourable vertex, it is
        strictly farther away than ``closest``. Equal distance does not count.

        Args:
            candidates: (m, d) candidate centres
            closest: (d,) reference centre

        Returns:
            (m,) bool mask, True for candidates that can be discarded
        """
        vertices = self.favourable_vertices(candidates, closest)
        to_candidate = torch.sum((vertices - candidates) ** 2, dim=1)
        to_closest = torch.sum((vertices - closest) ** 2, dim=1)
        return to_candidate > to_closest

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoundingBox):
            return NotImplemented
        return torch.equal(self.lo, other.lo) and torch.equal(self.hi, other.hi)

    def __repr__(self) -> str:
        return f"BoundingBox(lo={self.lo.tolist()}, hi={self.hi.tolist()})"
