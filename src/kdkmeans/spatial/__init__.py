"""Spatial index: bounding boxes and the kd-tree."""

from .bounding_box import BoundingBox
from .kdtree import KdTree, KdTreeNode, NodeData, DataPropagator

__all__ = [
    'BoundingBox',
    'KdTree',
    'KdTreeNode',
    'NodeData',
    'DataPropagator'
]
