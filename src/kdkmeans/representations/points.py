"""
Raw point sets.

The plainest PointSet: every row has unit weight and no spread.
"""

from typing import Any
import torch
from torch import Tensor

from ..base.interfaces import PointSet
from ..utils.validation import validate_data


class RawPoints(PointSet):
    """Points given directly as an (n, d) tensor, array or list of rows."""

    def __init__(self, points: Any, dtype: torch.dtype = torch.float64):
        """
        Args:
            points: (n, d) tensor, numpy array, or list of rows
            dtype: Floating point type used for all arithmetic

        Raises:
            EmptyInputError: If there are no rows
        """
        self._coordinates = validate_data(points, dtype=dtype)

    @classmethod
    def from_tensor(cls, coordinates: Tensor) -> 'RawPoints':
        """Wrap an already validated tensor, which may have zero rows."""
        result = cls.__new__(cls)
        result._coordinates = coordinates
        return result

    @property
    def coordinates(self) -> Tensor:
        return self._coordinates

    @property
    def weights(self) -> Tensor:
        return torch.ones(len(self), dtype=self._coordinates.dtype)

    @property
    def variances(self) -> Tensor:
        return torch.zeros(len(self), dtype=self._coordinates.dtype)

    def select(self, indices: Tensor) -> 'RawPoints':
        return RawPoints.from_tensor(self._coordinates[indices])

    def replace(self, coordinates: Tensor, weights: Tensor,
                variances: Tensor) -> 'RawPoints':
        return RawPoints.from_tensor(coordinates)

    def to_native(self) -> Tensor:
        return self._coordinates.clone()

    def __repr__(self) -> str:
        return f"RawPoints(n={len(self)}, dimension={self.dimension})"
