# tests/test_visualization.py
"""
Smoke tests for the plotting helpers (non-interactive Agg backend).
"""

from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest

try:
    import torch
except Exception:  # pragma: no cover
    torch = None  # type: ignore

from kdkmeans import KMeans, KdTree, SphericalCluster
from kdkmeans.visualization import (
    plot_clusters_2d,
    plot_kdtree_boxes,
    plot_spherical_clusters,
)
from data_gen import make_separated_clusters, make_uniform_problem


pytestmark = pytest.mark.skipif(torch is None, reason="PyTorch is required for these tests")


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


def test_plot_clusters_2d():
    X, _ = make_separated_clusters(sizes=[50, 50, 50, 50], seed=0)
    model = KMeans(n_clusters=4, random_state=0).fit(X)
    ax = plot_clusters_2d(X, model.labels_, model.cluster_centers_, title="k-means")
    assert ax.get_title() == "k-means"
    # One scatter per cluster plus the centres
    assert len(ax.collections) == len(set(model.labels_.tolist())) + 1


def test_plot_clusters_2d_rejects_other_dimensions():
    with pytest.raises(ValueError):
        plot_clusters_2d(torch.zeros(3, 3), torch.zeros(3, dtype=torch.long))


def test_plot_kdtree_boxes_depth_limit(rng):
    points, _ = make_uniform_problem(d=2, n_samples=200, seed=rng)
    tree = KdTree(points)

    ax = plot_kdtree_boxes(tree, max_depth=2)
    assert tree.has_aggregates
    # Levels 0, 1 and 2 of a tree over 100 points are full: 1 + 2 + 4 boxes
    assert len(ax.patches) == 7

    _, ax_all = plt.subplots()
    plot_kdtree_boxes(tree, ax=ax_all, show_points=False)
    assert len(ax_all.patches) == len(tree)


def test_plot_kdtree_boxes_requires_2d(rng):
    points, _ = make_uniform_problem(d=4, n_samples=40, seed=rng)
    with pytest.raises(ValueError):
        plot_kdtree_boxes(KdTree(points))


def test_plot_spherical_clusters():
    clusters = [SphericalCluster([0.0, 0.0], 4.0, 1.0),
                SphericalCluster([5.0, 5.0], 9.0, 0.25)]
    ax = plot_spherical_clusters(clusters, title="summaries")
    assert len(ax.patches) == 2
    assert ax.patches[0].get_radius() == pytest.approx(2.0)
    assert ax.patches[1].get_radius() == pytest.approx(1.0)
