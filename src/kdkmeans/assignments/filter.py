"""
Candidate centre filtering.

A CentreFilter starts with every centre as a candidate and is narrowed by
bounding boxes: a centre is dropped once some other surviving centre is
closer to every point of a box. The nearest centre of any point inside the
box therefore always survives, and pruning never re-admits a centre.
"""

from typing import List, Optional
import torch
from torch import Tensor

from ..spatial.bounding_box import BoundingBox
from ..utils.metrics import squared_distances


class CentreFilter:
    """Surviving subset of a fixed centre set.

    Args:
        centres: (k, d) tensor of all centres
        survivors: Optional ascending index tensor; all centres by default
    """

    def __init__(self, centres: Tensor, survivors: Optional[Tensor] = None):
        self.centres = centres
        if survivors is None:
            survivors = torch.arange(centres.shape[0])
        self._survivors = survivors

    @property
    def survivors(self) -> Tensor:
        """Ascending tensor of surviving centre indices."""
        return self._survivors

    @property
    def candidates(self) -> Tensor:
        """Coordinates of the surviving centres."""
        return self.centres[self._survivors]

    def filter(self) -> List[int]:
        return self._survivors.tolist()

    def __len__(self) -> int:
        return self._survivors.numel()

    def clone(self) -> 'CentreFilter':
        """Independent copy sharing the (read-only) centre tensor."""
        return CentreFilter(self.centres, self._survivors.clone())

    def prune(self, box: BoundingBox) -> 'CentreFilter':
        """Drop every survivor dominated inside ``box``.

        The reference centre is the survivor nearest the box centre, lowest
        index on ties. Nothing happens while at most one centre survives.
        """
        if len(self) <= 1:
            return self

        candidates = self.candidates
        closest = candidates[torch.argmin(squared_distances(box.centre, candidates))]
        dominated = box.dominated(candidates, closest)
        self._survivors = self._survivors[~dominated]
        return self

    def nearest(self, point: Tensor) -> int:
        """Index of the survivor nearest ``point``, lowest index on ties."""
        distances = squared_distances(point, self.candidates)
        return int(self._survivors[torch.argmin(distances)].item())

    def __repr__(self) -> str:
        return f"CentreFilter(survivors={self.filter()})"
