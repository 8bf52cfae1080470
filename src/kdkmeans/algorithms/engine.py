"""
Kd-tree accelerated Lloyd iterations.

The engine owns a point set and a set of centres. The kd-tree over the
points is built once and reused by every iteration; each iteration runs the
filtered centroid traversal and moves every centre to the weighted mean of
the points nearest to it.
"""

from typing import Any, List, Optional
import torch
from torch import Tensor
import time
import warnings

from ..base.interfaces import PointSet, ConvergenceCriterion
from ..base.data_structures import IterationRecord
from ..base.errors import InvalidCentreCountError
from ..representations import as_point_set
from ..spatial.kdtree import KdTree
from ..assignments.centroids import CentroidComputer
from ..assignments.closest import ClosestPointsCollector
from ..utils.convergence import ExactCentres
from ..utils.validation import check_dimension, check_n_clusters


class KMeansEngine:
    """Low-level k-means driver over a kd-tree.

    Usage is ``set_points``, ``set_centres``, then ``run``; ``centres`` and
    ``clusters`` read the result. Points are never modified by ``run``.

    Parameters
    ----------
    verbose : int, default=0
        Verbosity level (0=silent, 1=progress, 2=detailed)
    convergence : ConvergenceCriterion, optional
        Stopping rule; exact centre equality if None
    dtype : torch.dtype, default=torch.float64
        Floating point type for raw point input

    Attributes
    ----------
    history_ : list of IterationRecord
        One record per iteration of the last run
    n_iter_ : int
        Iterations performed by the last run
    converged_ : bool
        Whether the last run converged
    """

    def __init__(self,
                 verbose: int = 0,
                 convergence: Optional[ConvergenceCriterion] = None,
                 dtype: torch.dtype = torch.float64):
        self.verbose = verbose
        self.convergence = convergence if convergence is not None else ExactCentres()
        self.dtype = dtype

        self._points: Optional[PointSet] = None
        self._centres: Optional[PointSet] = None
        self._tree: Optional[KdTree] = None
        # Owner of every point under the current centres, once known
        self._partition: Optional[Tensor] = None

        self.history_: List[IterationRecord] = []
        self.n_iter_ = 0
        self.converged_ = False

    @property
    def points(self) -> Optional[PointSet]:
        return self._points

    @property
    def tree(self) -> Optional[KdTree]:
        """The kd-tree over the current points, if built yet."""
        return self._tree

    def set_points(self, points: Any) -> 'KMeansEngine':
        """Replace the points to cluster.

        Args:
            points: (n, d) tensor / array, list of SphericalCluster, or PointSet

        Raises:
            EmptyInputError: If there are no points
        """
        self._points = as_point_set(points, dtype=self.dtype)
        self._tree = None
        self._partition = None
        return self

    def set_centres(self, centres: Any) -> 'KMeansEngine':
        """Replace the centres; centre ``i`` is row ``i`` of ``centres``.

        Raises:
            RuntimeError: If no points have been set
            InvalidCentreCountError: If there are no centres or more centres
                than points
            ValueError: If the centre dimension differs from the points'
        """
        if self._points is None:
            raise RuntimeError("set_points() must be called before set_centres()")
        if len(centres) == 0:
            raise InvalidCentreCountError("At least one centre is required")

        centre_set = as_point_set(centres, dtype=self._points.coordinates.dtype)
        check_n_clusters(len(centre_set), len(self._points))
        check_dimension(centre_set.coordinates, self._points.dimension, what="centres")

        coordinates = centre_set.coordinates.to(self._points.coordinates.dtype).clone()
        if type(centre_set) is type(self._points):
            weights = centre_set.weights.clone()
            variances = centre_set.variances.clone()
        else:
            weights = torch.ones(len(centre_set), dtype=coordinates.dtype)
            variances = torch.zeros(len(centre_set), dtype=coordinates.dtype)
        self._centres = self._points.replace(coordinates, weights, variances)
        self._partition = None
        return self

    def _ensure_tree(self) -> KdTree:
        if self._tree is None:
            self._tree = KdTree(self._points)
        if not self._tree.has_aggregates:
            self._tree.propagate_data()
        return self._tree

    def _check_ready(self) -> None:
        if self._points is None:
            raise RuntimeError("No points set; call set_points() first")
        if self._centres is None:
            raise RuntimeError("No centres set; call set_centres() first")
        check_n_clusters(len(self._centres), len(self._points))
        check_dimension(self._centres.coordinates, self._points.dimension, what="centres")

    def run(self, max_iterations: int = 100) -> bool:
        """Run Lloyd iterations until the centres are stable.

        Centres that receive no points keep their previous value. An
        iteration whose nearest-centre partition equals the one the current
        centres are the means of leaves every centre unchanged.

        Args:
            max_iterations: Iteration budget

        Returns:
            True if converged within the budget, False otherwise
        """
        self._check_ready()
        tree = self._ensure_tree()

        self.convergence.reset()
        self.history_ = []
        self.n_iter_ = 0
        converged = False
        start_time = time.time()

        centres = self._centres.coordinates
        weights = self._centres.weights
        variances = self._centres.variances

        for iteration in range(max_iterations):
            iter_start_time = time.time()

            computer = CentroidComputer(centres)
            accumulators = computer.compute(tree)
            n_empty = sum(1 for accumulator in accumulators if accumulator.empty)

            updated = centres.clone()
            updated_weights = weights.clone()
            updated_variances = variances.clone()
            if self._partition is None or not torch.equal(computer.labels, self._partition):
                for k, accumulator in enumerate(accumulators):
                    if accumulator.empty:
                        continue
                    updated[k] = accumulator.mean
                    updated_weights[k] = accumulator.weight
                    updated_variances[k] = accumulator.variance
            self._partition = computer.labels

            n_changed = int((updated != centres).any(dim=1).sum().item())
            converged = self.convergence.check(centres, updated)

            centres, weights, variances = updated, updated_weights, updated_variances
            self.n_iter_ = iteration + 1
            self.history_.append(IterationRecord(
                iteration=iteration,
                n_changed=n_changed,
                n_empty=n_empty,
                comparisons=computer.comparisons,
                converged=converged
            ))

            # Logging
            iter_time = time.time() - iter_start_time
            if self.verbose >= 2 or (self.verbose >= 1 and iteration % 10 == 0):
                print(f"Iteration {iteration:3d}: {n_changed} centres moved, "
                      f"{computer.comparisons} comparisons ({iter_time:.3f}s)")
            if n_empty > 0 and self.verbose >= 2:
                warnings.warn(f"{n_empty} centres received no points at iteration {iteration}")

            if converged:
                if self.verbose:
                    print(f"Converged at iteration {iteration}")
                break

        self._centres = self._points.replace(centres, weights, variances)
        self.converged_ = converged

        if self.verbose:
            if not converged:
                warnings.warn(f"Failed to converge after {max_iterations} iterations")
            print(f"Total run time: {time.time() - start_time:.3f}s")

        return converged

    @property
    def centre_coordinates(self) -> Tensor:
        """(k, d) tensor of the current centre coordinates."""
        if self._centres is None:
            raise RuntimeError("No centres set; call set_centres() first")
        return self._centres.coordinates.clone()

    def centres(self) -> Any:
        """Current centres in the representation of the points."""
        if self._centres is None:
            raise RuntimeError("No centres set; call set_centres() first")
        return self._centres.to_native()

    def labels(self) -> Tensor:
        """(n,) long tensor with the index of each point's nearest centre."""
        self._check_ready()
        collector = ClosestPointsCollector(self._centres.coordinates, len(self._points))
        collector.collect(self._ensure_tree())
        return collector.labels

    def clusters(self) -> List[Any]:
        """Points nearest each centre, one group per centre.

        Returns:
            List of (m_i, d) tensors for raw points, or lists of
            SphericalCluster for spherical input; empty groups included
        """
        return self._points.split(self.labels(), len(self._centres))
