"""
K-means++ initialization strategy.

Selects initial cluster centers using the K-means++ algorithm, which chooses
centers that are far apart to improve convergence speed and quality.
"""

from typing import Optional
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy, PointSet
from ..utils.metrics import squared_distances
from ..utils.validation import check_random_state


class KMeansPlusPlusInit(InitializationStrategy):
    """K-means++ initialization for better starting positions.

    Algorithm:
    1. Choose first center uniformly at random
    2. For each remaining center:
       - Compute distance D from each point to nearest existing center
       - Choose next center with probability proportional to weight * D^2

    Weights are one for raw points and the count for spherical clusters. If
    every point already coincides with a chosen center the next one is drawn
    uniformly.
    """

    def __init__(self, generator: Optional[torch.Generator] = None,
                 n_local_trials: int = 1):
        """
        Args:
            generator: Source of randomness; a freshly seeded one if None
            n_local_trials: Number of candidates drawn per center. With more
                            than one, the candidate giving the smallest
                            weighted potential is kept
        """
        if n_local_trials < 1:
            raise ValueError(f"n_local_trials must be at least 1, got {n_local_trials}")
        self.generator = check_random_state(generator)
        self.n_local_trials = n_local_trials

    def select(self, points: PointSet, n_clusters: int) -> Tensor:
        """Choose center rows using K-means++.

        Args:
            points: Point set to seed from
            n_clusters: Number of clusters

        Returns:
            (n_clusters,) long tensor of row indices
        """
        coordinates = points.coordinates
        weights = points.weights
        n_points = len(points)

        # Choose first center uniformly at random
        first_idx = int(torch.randint(n_points, (1,), generator=self.generator).item())
        center_indices = [first_idx]

        # Squared distance of each point to its nearest chosen center
        distances = squared_distances(coordinates[first_idx], coordinates)

        for c in range(1, n_clusters):
            probabilities = weights * distances
            if probabilities.sum().item() <= 0.0:
                probabilities = torch.ones_like(probabilities)

            candidates_idx = torch.multinomial(probabilities, self.n_local_trials,
                                               replacement=True, generator=self.generator)

            # For each candidate, compute its potential (weighted sum of min distances if chosen)
            best_potential = float('inf')
            best_distances = None
            best_candidate = None

            for idx in candidates_idx:
                candidate_distances = squared_distances(coordinates[idx], coordinates)
                new_distances = torch.minimum(distances, candidate_distances)
                potential = torch.sum(weights * new_distances).item()

                if potential < best_potential:
                    best_potential = potential
                    best_distances = new_distances
                    best_candidate = int(idx.item())

            center_indices.append(best_candidate)
            distances = best_distances

        return torch.tensor(center_indices, dtype=torch.long)
