"""
Cluster visualization utilities.

Provides functions for visualizing clustering results in 2D, the bounding
boxes of a kd-tree, and spherical cluster summaries.
"""

from typing import Optional, List, Sequence
import torch
from torch import Tensor
import matplotlib.pyplot as plt
from matplotlib.patches import Circle, Rectangle
import numpy as np

from ..representations.spherical import SphericalCluster
from ..spatial.kdtree import KdTree, KdTreeNode


def plot_clusters_2d(X: Tensor,
                    labels: Tensor,
                    centers: Optional[Tensor] = None,
                    ax: Optional[plt.Axes] = None,
                    colors: Optional[List[str]] = None,
                    alpha: float = 0.7,
                    center_marker: str = 'X',
                    center_size: int = 200,
                    point_size: int = 50,
                    show_legend: bool = True,
                    title: Optional[str] = None) -> plt.Axes:
    """Plot 2D clustering results.

    Args:
        X: (n, 2) data points
        labels: (n,) cluster labels
        centers: Optional (k, 2) cluster centers
        ax: Matplotlib axes (created if None)
        colors: List of colors for clusters
        alpha: Point transparency
        center_marker: Marker for centers
        center_size: Size of center markers
        point_size: Size of data points
        show_legend: Whether to show legend
        title: Plot title

    Returns:
        Matplotlib axes
    """
    if X.shape[1] != 2:
        raise ValueError(f"Expected 2D points, got dimension {X.shape[1]}")
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 6))

    # Convert to numpy for matplotlib
    X_np = X.cpu().numpy()
    labels_np = labels.cpu().numpy()

    unique_labels = np.unique(labels_np)
    n_clusters = len(unique_labels)

    if colors is None:
        cmap = plt.get_cmap('tab10' if n_clusters <= 10 else 'tab20')
        colors = [cmap(i / max(n_clusters, 1)) for i in range(n_clusters)]

    for i, label in enumerate(unique_labels):
        mask = labels_np == label
        ax.scatter(X_np[mask, 0], X_np[mask, 1],
                  c=[colors[i % len(colors)]],
                  s=point_size,
                  alpha=alpha,
                  edgecolors='black',
                  linewidth=0.5,
                  label=f'Cluster {label}')

    if centers is not None:
        centers_np = centers.cpu().numpy()
        ax.scatter(centers_np[:, 0], centers_np[:, 1],
                  c='black',
                  marker=center_marker,
                  s=center_size,
                  edgecolors='white',
                  linewidth=2,
                  label='Centers',
                  zorder=10)

    ax.set_xlabel('Feature 1')
    ax.set_ylabel('Feature 2')

    if title:
        ax.set_title(title)

    if show_legend:
        ax.legend()

    return ax


def plot_kdtree_boxes(tree: KdTree,
                      max_depth: Optional[int] = None,
                      ax: Optional[plt.Axes] = None,
                      show_points: bool = True,
                      cmap_name: str = 'viridis',
                      title: Optional[str] = None) -> plt.Axes:
    """Draw the subtree bounding boxes of a 2D kd-tree.

    Args:
        tree: Tree over 2D points; aggregates are computed if missing
        max_depth: Deepest level to draw (root is level 0); all if None
        ax: Matplotlib axes (created if None)
        show_points: Whether to scatter the tree's points
        cmap_name: Colormap used to color boxes by depth
        title: Plot title

    Returns:
        Matplotlib axes
    """
    if tree.dimension != 2:
        raise ValueError(f"Can only draw 2D trees, got dimension {tree.dimension}")
    if not tree.has_aggregates:
        tree.propagate_data()
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 8))

    levels = tree.depth() if max_depth is None else min(max_depth + 1, tree.depth())
    cmap = plt.get_cmap(cmap_name)

    def draw(node: KdTreeNode, depth: int) -> Optional[int]:
        if max_depth is not None and depth > max_depth:
            return None
        box = node.bounding_box
        lo = box.lo.tolist()
        width, height = box.widths.tolist()
        ax.add_patch(Rectangle((lo[0], lo[1]), width, height,
                               fill=False,
                               edgecolor=cmap(depth / max(levels - 1, 1)),
                               linewidth=max(2.0 - 0.25 * depth, 0.5)))
        return depth + 1

    tree.preorder_depth_first(draw, 0)

    if show_points:
        coordinates = tree.points.coordinates.cpu().numpy()
        ax.scatter(coordinates[:, 0], coordinates[:, 1], s=8, c='black', zorder=5)

    ax.autoscale_view()
    ax.set_aspect('equal', adjustable='datalim')
    ax.set_xlabel('Feature 1')
    ax.set_ylabel('Feature 2')
    if title:
        ax.set_title(title)

    return ax


def plot_spherical_clusters(clusters: Sequence[SphericalCluster],
                            ax: Optional[plt.Axes] = None,
                            n_std: float = 2.0,
                            color: str = 'tab:blue',
                            alpha: float = 0.3,
                            title: Optional[str] = None) -> plt.Axes:
    """Plot 2D spherical clusters as circles.

    Each cluster is drawn at its mean with radius ``n_std`` standard
    deviations and a marker size growing with its count.

    Args:
        clusters: 2D spherical clusters
        ax: Matplotlib axes (created if None)
        n_std: Circle radius in standard deviations
        color: Fill color
        alpha: Fill transparency
        title: Plot title

    Returns:
        Matplotlib axes
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 6))

    for cluster in clusters:
        if cluster.dimension != 2:
            raise ValueError(f"Expected 2D clusters, got dimension {cluster.dimension}")
        x, y = cluster.mean.tolist()
        radius = n_std * float(np.sqrt(cluster.variance))
        ax.add_patch(Circle((x, y), radius, facecolor=color, edgecolor='black',
                            alpha=alpha))
        ax.scatter([x], [y], s=10 + 5 * np.sqrt(cluster.count), c='black', zorder=5)

    ax.autoscale_view()
    ax.set_aspect('equal', adjustable='datalim')
    ax.set_xlabel('Feature 1')
    ax.set_ylabel('Feature 2')
    if title:
        ax.set_title(title)

    return ax
