"""
Explicit nearest-centre partition of the tree's points.

Slower than the centroid pass since it keeps every point's identity, but
yields the actual membership of each cluster. Candidate centres are narrowed
on the way down exactly as in the centroid pass; a subtree left with a
single candidate is assigned wholesale without visiting its nodes.
"""

from typing import Dict, List, Optional
import torch
from torch import Tensor

from ..spatial.kdtree import KdTree, KdTreeNode
from .filter import CentreFilter


class ClosestPointsCollector:
    """Postorder visitor assigning every point to its nearest centre.

    Attributes:
        partition: Per-centre lists of input row indices
        labels: (n,) long tensor of centre indices
    """

    def __init__(self, centres: Tensor, n_points: int):
        self.centres = centres
        self.partition: List[List[int]] = [[] for _ in range(centres.shape[0])]
        self.labels = torch.full((n_points,), -1, dtype=torch.long)
        self._tree: Optional[KdTree] = None
        self._inherited: Dict[KdTreeNode, CentreFilter] = {}
        self._current: Dict[KdTreeNode, CentreFilter] = {}

    def descend(self, node: KdTreeNode) -> bool:
        """Narrow the parent's candidates by the node box; stop at one."""
        inherited = self._inherited.pop(node, None)
        if inherited is None:
            inherited = CentreFilter(self.centres)
        current = inherited.clone().prune(node.bounding_box)
        self._current[node] = current
        if len(current) == 1:
            return False
        for child in node.children():
            self._inherited[child] = current
        return True

    def __call__(self, node: KdTreeNode) -> None:
        current = self._current.pop(node)
        if len(current) == 1:
            owner = int(current.survivors[0].item())
            rows = self._tree.subtree_rows(node)
        else:
            owner = current.nearest(node.point)
            rows = torch.tensor([node.index], dtype=torch.long)
        self.partition[owner].extend(rows.tolist())
        self.labels[rows] = owner

    def collect(self, tree: KdTree) -> List[List[int]]:
        """Run the traversal and return the partition."""
        if not tree.has_aggregates:
            tree.propagate_data()
        self._tree = tree
        tree.postorder_depth_first(self, self.descend)
        return self.partition
