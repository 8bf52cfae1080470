# tests/test_kmeans_plusplus.py
"""
K-means++ and random seeding.

Covers:
- k validation (InvalidKError for k == 0 and k > n)
- Output is k input rows in the input representation
- Determinism for a fixed generator seed
- Uniform fallback when every point coincides with a chosen centre
- Weighted draws for spherical clusters; greedy local trials
"""

from __future__ import annotations

import pytest

try:
    import torch
except Exception:  # pragma: no cover
    torch = None  # type: ignore

from kdkmeans.base import InvalidKError
from kdkmeans.initialization import KMeansPlusPlusInit, RandomInit
from kdkmeans.representations import SphericalCluster
from data_gen import make_separated_clusters


pytestmark = pytest.mark.skipif(torch is None, reason="PyTorch is required for these tests")


def _generator(seed):
    gen = torch.Generator()
    gen.manual_seed(seed)
    return gen


@pytest.mark.parametrize("strategy_cls", [KMeansPlusPlusInit, RandomInit])
def test_invalid_k(strategy_cls, generator):
    points = torch.randn(5, 2, dtype=torch.float64, generator=generator)
    strategy = strategy_cls(generator)
    with pytest.raises(InvalidKError):
        strategy.run(points, 0)
    with pytest.raises(InvalidKError):
        strategy.run(points, 6)
    # InvalidKError is a ValueError
    with pytest.raises(ValueError):
        strategy.run(points, 6)


@pytest.mark.parametrize("strategy_cls", [KMeansPlusPlusInit, RandomInit])
def test_returns_k_input_rows(strategy_cls, generator):
    points = torch.randn(50, 3, dtype=torch.float64, generator=generator)
    centres = strategy_cls(generator).run(points, 7)

    assert isinstance(centres, torch.Tensor)
    assert centres.shape == (7, 3)
    rows = {tuple(p) for p in points.tolist()}
    assert all(tuple(c) in rows for c in centres.tolist())


def test_k_equals_n_selects_every_point_once():
    points = torch.tensor([[0.0, 0.0], [5.0, 0.0], [0.0, 5.0]], dtype=torch.float64)
    centres = KMeansPlusPlusInit(_generator(3)).run(points, 3)
    assert sorted(map(tuple, centres.tolist())) == sorted(map(tuple, points.tolist()))

    centres = RandomInit(_generator(3)).run(points, 3)
    assert sorted(map(tuple, centres.tolist())) == sorted(map(tuple, points.tolist()))


def test_same_seed_same_centres():
    X, _ = make_separated_clusters(seed=5)
    a = KMeansPlusPlusInit(_generator(11)).run(X, 5)
    b = KMeansPlusPlusInit(_generator(11)).run(X, 5)
    assert torch.equal(a, b)


def test_all_coincident_points_fall_back_to_uniform():
    points = torch.ones(6, 2, dtype=torch.float64)
    centres = KMeansPlusPlusInit(_generator(0)).run(points, 4)
    assert centres.shape == (4, 2)
    assert torch.equal(centres, torch.ones(4, 2, dtype=torch.float64))


def test_zero_distance_rows_never_drawn_after_first():
    # Two distinct locations: the second centre must be at the other location
    points = torch.tensor([[0.0, 0.0]] * 5 + [[10.0, 10.0]] * 5, dtype=torch.float64)
    for seed in range(20):
        centres = KMeansPlusPlusInit(_generator(seed)).run(points, 2)
        assert not torch.equal(centres[0], centres[1])


def test_spherical_clusters_returned_natively():
    clusters = [SphericalCluster([float(i), 0.0], i + 1.0, 0.1) for i in range(10)]
    centres = KMeansPlusPlusInit(_generator(1)).run(clusters, 3)
    assert len(centres) == 3
    assert all(isinstance(c, SphericalCluster) for c in centres)
    assert all(c in clusters for c in centres)


def test_count_weights_bias_the_draw():
    # One heavy cluster far away; with the first centre at the origin group,
    # the heavy one dominates the D^2 weighted draw.
    light = [SphericalCluster([0.0, float(i) * 0.01], 1.0) for i in range(20)]
    heavy = SphericalCluster([10.0, 0.0], 1000.0)
    light_far = SphericalCluster([-10.0, 0.0], 1.0)
    clusters = light + [heavy, light_far]

    heavy_second = 0
    trials = 0
    for seed in range(60):
        centres = KMeansPlusPlusInit(_generator(seed)).run(clusters, 2)
        if centres[0] in light:
            trials += 1
            heavy_second += int(centres[1] == heavy)
    assert trials > 0
    assert heavy_second / trials > 0.9


def test_local_trials_validation_and_run(generator):
    with pytest.raises(ValueError):
        KMeansPlusPlusInit(generator, n_local_trials=0)

    X, _ = make_separated_clusters(seed=2)
    centres = KMeansPlusPlusInit(generator, n_local_trials=5).run(X, 4)
    assert centres.shape == (4, 2)
