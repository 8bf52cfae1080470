"""
Random initialization strategy.

Selects random points from the dataset as initial cluster centers.
"""

from typing import Optional
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy, PointSet
from ..utils.validation import check_random_state


class RandomInit(InitializationStrategy):
    """Random initialization by selecting points from the dataset.

    Selects n_clusters distinct rows (without replacement) as initial centers.
    """

    def __init__(self, generator: Optional[torch.Generator] = None):
        self.generator = check_random_state(generator)

    def select(self, points: PointSet, n_clusters: int) -> Tensor:
        return torch.randperm(len(points), generator=self.generator)[:n_clusters]
