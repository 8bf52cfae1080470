"""
Filtered centroid computation.

One preorder pass over a propagated kd-tree computes, for every centre, the
weighted mean of the points nearest to it. As soon as the candidate set of a
subtree collapses to one centre, the subtree's precomputed centroid is
folded into that centre's accumulator in one step instead of visiting its
points. The pass also records which centre owns each point.
"""

from typing import List, Optional
import torch
from torch import Tensor

from ..base.data_structures import MeanAccumulator
from ..spatial.kdtree import KdTree, KdTreeNode
from .filter import CentreFilter


class CentroidComputer:
    """Preorder visitor accumulating per-centre nearest-point means.

    Attributes:
        centres: (k, d) centre tensor
        accumulators: One MeanAccumulator per centre
        comparisons: Number of centre-point comparisons made at nodes where
            more than one centre survived
        labels: (n,) long tensor with the owning centre of every row, filled
            in by ``compute``; None before
    """

    def __init__(self, centres: Tensor):
        self.centres = centres
        self.accumulators = [MeanAccumulator(centres.shape[1], centres.dtype)
                             for _ in range(centres.shape[0])]
        self.comparisons = 0
        self.labels: Optional[Tensor] = None
        self._tree: Optional[KdTree] = None

    def __call__(self, node: KdTreeNode,
                 inherited: CentreFilter) -> Optional[CentreFilter]:
        current = inherited.clone().prune(node.bounding_box)

        if len(current) == 1:
            owner = int(current.survivors[0].item())
            self.accumulators[owner] += node.centroid
            if self.labels is not None:
                self.labels[self._tree.subtree_rows(node)] = owner
            return None

        self.comparisons += len(current)
        owner = current.nearest(node.point)
        self.accumulators[owner].add(node.point, node.weight, node.variance)
        if self.labels is not None:
            self.labels[node.index] = owner
        return current

    def compute(self, tree: KdTree) -> List[MeanAccumulator]:
        """Run the traversal and return the per-centre accumulators."""
        if not tree.has_aggregates:
            tree.propagate_data()
        self._tree = tree
        self.labels = torch.full((tree.size,), -1, dtype=torch.long)
        tree.preorder_depth_first(self, CentreFilter(self.centres))
        return self.accumulators
