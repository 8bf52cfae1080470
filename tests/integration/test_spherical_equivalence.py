"""
Clustering spherical summaries gives the same centres as clustering the
points they summarise, as long as no summarised group straddles a boundary.

Two regions of Gaussian groups are summarised with SphericalCluster.from_points;
starting from one centre in each region, both runs must land on the same
sorted centres, and the spherical centres must carry the pooled counts and
variances of the underlying points.

The initial centres are drawn one per region on purpose. Starting both
centres anywhere in [0, 15]^2 lets a boundary cut through a summarised
group during the run; the raw points then split while the summary cannot,
and the two results legitimately differ.
"""

import numpy as np
import pytest
import torch

from kdkmeans import KMeansEngine, SphericalCluster
from utils import sorted_rows, time_block

MEANS = np.array([
    [1.0, 1.0],
    [2.0, 1.5],
    [1.5, 1.5],
    [1.9, 1.5],
    [1.0, 1.5],
    [10.0, 15.0],
    [12.0, 13.5],
    [12.0, 11.5],
    [14.0, 10.5],
])
COUNTS = [10, 15, 5, 8, 17, 10, 11, 8, 12]
FIRST_REGION = 5


def _sample_groups(rng):
    groups = [torch.from_numpy(rng.normal(loc=m, scale=1.0, size=(n, 2)))
              for m, n in zip(MEANS, COUNTS)]
    return groups


def _initial_centres(rng):
    low = rng.uniform(0.0, 3.0, size=2)
    high = rng.uniform(10.0, 14.0, size=2)
    return torch.from_numpy(np.vstack([low, high]))


def test_spherical_and_raw_runs_agree(rng):
    with time_block("spherical-equivalence", {"trials": 50}):
        for trial in range(50):
            groups = _sample_groups(rng)
            points = torch.cat(groups)
            clusters = [SphericalCluster.from_points(g) for g in groups]
            initial = _initial_centres(rng)

            raw = KMeansEngine().set_points(points).set_centres(initial)
            raw.run(20)

            spherical = KMeansEngine().set_points(clusters).set_centres(
                [SphericalCluster(c, 1.0) for c in initial])
            spherical.run(20)

            raw_centres = raw.centres()
            spherical_centres = spherical.centres()
            spherical_means = torch.stack([c.mean for c in spherical_centres])

            assert np.allclose(sorted_rows(raw_centres), sorted_rows(spherical_means),
                               rtol=1e-10, atol=1e-10), f"trial {trial}"

            # Pooled counts and variances match the raw points of each region
            for centre, region in zip(spherical_centres,
                                      (points[:sum(COUNTS[:FIRST_REGION])],
                                       points[sum(COUNTS[:FIRST_REGION]):])):
                expected = SphericalCluster.from_points(region)
                assert centre.count == expected.count
                assert centre.variance == pytest.approx(expected.variance, rel=1e-9)
