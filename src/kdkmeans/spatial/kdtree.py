"""
Balanced kd-tree with per-subtree aggregates.

Each node owns exactly one input row. Building the tree and computing the
aggregates are separate steps: after ``build`` the nodes only know their
point and split dimension; ``propagate_data`` then fills in, bottom-up, the
bounding box and weighted centroid of every subtree.

Traversals take plain callables:

- ``postorder_depth_first(visit, descend)``: children before parent. Every
  reachable node is visited; ``descend(node)`` returning ``False`` skips the
  children of that node, which is still visited itself.
- ``preorder_depth_first(visit, state)``: parent before children,
  ``visit(node, state)`` returns the state both children receive, or
  ``None`` to skip the subtree.
"""

from typing import Any, Callable, Iterator, Optional, Union
import torch
from torch import Tensor

from ..base.interfaces import PointSet
from ..base.data_structures import MeanAccumulator
from ..representations import as_point_set
from .bounding_box import BoundingBox


class NodeData:
    """Aggregates of the subtree rooted at a node."""

    __slots__ = ('bounding_box', 'centroid')

    def __init__(self, bounding_box: BoundingBox, centroid: MeanAccumulator):
        self.bounding_box = bounding_box
        self.centroid = centroid


class KdTreeNode:
    """A tree node holding one input row and owning its children."""

    __slots__ = ('index', 'point', 'weight', 'variance', 'split_dimension',
                 'left', 'right', 'data', 'start', 'stop')

    def __init__(self, index: int, point: Tensor, weight: float = 1.0,
                 variance: float = 0.0, split_dimension: int = 0):
        self.index = index
        self.point = point
        self.weight = weight
        self.variance = variance
        self.split_dimension = split_dimension
        self.left: Optional['KdTreeNode'] = None
        self.right: Optional['KdTreeNode'] = None
        self.data: Optional[NodeData] = None
        # Rows of the subtree are layout[start:stop]
        self.start = 0
        self.stop = 0

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def children(self):
        return [child for child in (self.left, self.right) if child is not None]

    @property
    def bounding_box(self) -> BoundingBox:
        if self.data is None:
            raise RuntimeError("Node aggregates not available; call propagate_data() first")
        return self.data.bounding_box

    @property
    def centroid(self) -> MeanAccumulator:
        if self.data is None:
            raise RuntimeError("Node aggregates not available; call propagate_data() first")
        return self.data.centroid

    def own_accumulator(self) -> MeanAccumulator:
        """Accumulator holding only this node's point."""
        return MeanAccumulator.of_point(self.point, self.weight, self.variance)

    def __repr__(self) -> str:
        return (f"KdTreeNode(index={self.index}, point={self.point.tolist()}, "
                f"split_dimension={self.split_dimension})")


class DataPropagator:
    """Postorder visitor that computes every node's aggregates."""

    def __call__(self, node: KdTreeNode) -> None:
        box = BoundingBox.from_point(node.point)
        centroid = node.own_accumulator()
        for child in node.children():
            box = box.union(child.data.bounding_box)
            centroid += child.data.centroid
        node.data = NodeData(box, centroid)


class KdTree:
    """Balanced kd-tree over a point set.

    Parameters
    ----------
    points : Tensor, array-like, list of SphericalCluster, or PointSet
        The points to index. Row weights and variances come from the point
        set (unit weight and zero variance for raw points).

    Attributes
    ----------
    root : KdTreeNode
        Root of the tree
    points : PointSet
        The indexed points
    layout : Tensor
        In-order permutation of the row indices; the rows of any subtree
        are the contiguous slice ``layout[node.start:node.stop]``
    """

    def __init__(self, points: Union[Tensor, PointSet, Any]):
        self.points = as_point_set(points)
        self._has_aggregates = False

        coordinates = self.points.coordinates
        weights = self.points.weights.tolist()
        variances = self.points.variances.tolist()

        self.layout = torch.empty(len(self.points), dtype=torch.long)

        def build_group(indices: Tensor, offset: int) -> Optional[KdTreeNode]:
            if indices.numel() == 0:
                return None
            group = coordinates[indices]
            spread = group.max(dim=0).values - group.min(dim=0).values
            # argmax returns the first maximum, so ties go to the lowest dimension
            dimension = int(torch.argmax(spread).item())
            order = torch.sort(group[:, dimension], stable=True).indices
            ordered = indices[order]
            median = ordered.numel() // 2

            index = int(ordered[median].item())
            node = KdTreeNode(index, coordinates[index], weights[index],
                              variances[index], dimension)
            node.start = offset
            node.stop = offset + ordered.numel()
            self.layout[offset + median] = index
            node.left = build_group(ordered[:median], offset)
            node.right = build_group(ordered[median + 1:], offset + median + 1)
            return node

        self.root = build_group(torch.arange(len(self.points)), 0)

    @classmethod
    def build(cls, points: Union[Tensor, PointSet, Any]) -> 'KdTree':
        """Build a tree over ``points``.

        Raises:
            EmptyInputError: If there are no points
        """
        return cls(points)

    @property
    def size(self) -> int:
        return len(self.points)

    def __len__(self) -> int:
        return self.size

    @property
    def dimension(self) -> int:
        return self.points.dimension

    @property
    def has_aggregates(self) -> bool:
        return self._has_aggregates

    def propagate_data(self) -> 'KdTree':
        """Compute bounding box and centroid for every subtree."""
        self.postorder_depth_first(DataPropagator())
        self._has_aggregates = True
        return self

    def subtree_rows(self, node: KdTreeNode) -> Tensor:
        """Row indices of every point in the subtree rooted at ``node``."""
        return self.layout[node.start:node.stop]

    def postorder_depth_first(self, visit: Callable[[KdTreeNode], Any],
                              descend: Optional[Callable[[KdTreeNode], bool]] = None) -> None:
        """Visit children before parents.

        Args:
            visit: Called once per visited node; its return value is ignored
            descend: Optional predicate checked on the way down; ``False``
                     means the node's subtree below it is not walked. The
                     node itself and the rest of the tree still are
        """
        def walk(node: Optional[KdTreeNode]) -> None:
            if node is None:
                return
            if descend is None or descend(node) is not False:
                walk(node.left)
                walk(node.right)
            visit(node)

        walk(self.root)

    def preorder_depth_first(self, visit: Callable[[KdTreeNode, Any], Any],
                             state: Any = None) -> None:
        """Visit parents before children, threading per-path state down."""
        def walk(node: Optional[KdTreeNode], inherited: Any) -> None:
            if node is None:
                return
            passed = visit(node, inherited)
            if passed is None:
                return
            walk(node.left, passed)
            walk(node.right, passed)

        walk(self.root, state)

    def nodes(self) -> Iterator[KdTreeNode]:
        """Iterate over all nodes in preorder."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            if node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)

    def depth(self) -> int:
        """Number of nodes on the longest root-to-leaf path."""
        def height(node: Optional[KdTreeNode]) -> int:
            if node is None:
                return 0
            return 1 + max(height(node.left), height(node.right))

        return height(self.root)

    def __repr__(self) -> str:
        return f"KdTree(size={self.size}, dimension={self.dimension}, depth={self.depth()})"
