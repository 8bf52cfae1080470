"""
K-means clustering estimator.

An sklearn-style facade over KMeansEngine: seeds the centres, runs the
kd-tree accelerated Lloyd iterations and exposes the result as fitted
attributes.
"""

from typing import Any, Dict, List, Optional, Union
import torch
from torch import Tensor

from ..base.interfaces import PointSet
from ..representations import as_point_set
from ..initialization.kmeans_plusplus import KMeansPlusPlusInit
from ..initialization.random import RandomInit
from ..utils.convergence import ExactCentres, CentreShift
from ..utils.metrics import inertia, nearest_centres
from ..utils.validation import check_dimension, check_n_clusters, check_random_state
from .engine import KMeansEngine


class KMeans:
    """K-means clustering accelerated by a kd-tree centre filter.

    Gives exactly the result of plain Lloyd iterations from the same initial
    centres, but most point-centre distance computations are skipped.

    Parameters
    ----------
    n_clusters : int
        Number of clusters
    init : str or array-like, default='k-means++'
        Initialization method:
        - 'k-means++' : K-means++ initialization
        - 'random' : Random initialization
        - array of shape (n_clusters, n_features) or list of SphericalCluster :
          Use as initial centers
    max_iter : int, default=100
        Maximum number of iterations
    tol : float, default=0.0
        Zero means stop when no center changes at all; otherwise stop when no
        center moves further than tol
    verbose : int, default=0
        Verbosity level
    random_state : int or torch.Generator, optional
        Seed or generator for the initialization
    n_local_trials : int, optional
        Candidates per center for greedy K-means++; plain K-means++ if None

    Attributes
    ----------
    cluster_centers_ : Tensor of shape (n_clusters, n_features)
        Cluster centroids
    centres_ : Tensor or list of SphericalCluster
        Cluster centroids in the representation of the training data
    labels_ : Tensor of shape (n_samples,)
        Cluster assignments for training data
    inertia_ : float
        Weighted sum of squared distances to nearest cluster center
    n_iter_ : int
        Number of iterations run
    converged_ : bool
        Whether the iterations converged within max_iter
    history_ : list of IterationRecord
        Per-iteration diagnostics
    """

    def __init__(self,
                 n_clusters: int,
                 init: Union[str, Any] = 'k-means++',
                 max_iter: int = 100,
                 tol: float = 0.0,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None,
                 n_local_trials: Optional[int] = None):
        """Initialize K-means algorithm."""
        self.n_clusters = n_clusters
        self.init = init
        self.max_iter = max_iter
        self.tol = tol
        self.verbose = verbose
        self.random_state = random_state
        self.n_local_trials = n_local_trials

        self.fitted_ = False
        self.n_iter_ = 0
        self.converged_ = False
        self.history_ = []
        self.engine_: Optional[KMeansEngine] = None

    def _initial_centres(self, points: PointSet) -> Any:
        """Seed or validate the initial centres."""
        if isinstance(self.init, str):
            check_n_clusters(self.n_clusters, len(points))
            generator = check_random_state(self.random_state)
            if self.init == 'k-means++':
                strategy = KMeansPlusPlusInit(generator, self.n_local_trials or 1)
            elif self.init == 'random':
                strategy = RandomInit(generator)
            else:
                raise ValueError(f"Unknown init method: {self.init}")
            return strategy.run(points, self.n_clusters)

        # Custom initial centers provided
        if len(self.init) != self.n_clusters:
            raise ValueError(f"init has {len(self.init)} centers, expected {self.n_clusters}")
        return self.init

    def fit(self, X: Any, y: Optional[Tensor] = None) -> 'KMeans':
        """Fit K-means clustering.

        Parameters
        ----------
        X : Tensor of shape (n_samples, n_features) or list of SphericalCluster
            Training data
        y : Ignored
            Not used, present for API consistency

        Returns
        -------
        self : KMeans
            Fitted estimator
        """
        if self.tol > 0:
            convergence = CentreShift(tol=self.tol)
        else:
            convergence = ExactCentres()

        engine = KMeansEngine(verbose=self.verbose, convergence=convergence)
        engine.set_points(X)
        points = engine.points

        if self.verbose:
            print(f"Initializing {self.n_clusters} clusters...")
        engine.set_centres(self._initial_centres(points))

        self.converged_ = engine.run(self.max_iter)
        self.n_iter_ = engine.n_iter_
        self.history_ = engine.history_
        self.engine_ = engine

        self._cluster_centers = engine.centre_coordinates
        self._centres = engine.centres()
        self._labels = engine.labels()
        self._inertia = inertia(points.coordinates, self._labels,
                                self._cluster_centers, weights=points.weights)
        self.fitted_ = True
        return self

    def fit_predict(self, X: Any, y: Optional[Tensor] = None) -> Tensor:
        """Fit and return labels.

        Parameters
        ----------
        X : Tensor of shape (n_samples, n_features) or list of SphericalCluster
            Training data
        y : Ignored
            Not used

        Returns
        -------
        labels : Tensor of shape (n_samples,)
            Cluster labels
        """
        self.fit(X, y)
        return self.labels_

    def _check_fitted(self) -> None:
        if not self.fitted_:
            raise RuntimeError("Model must be fitted first")

    def predict(self, X: Any) -> Tensor:
        """Predict cluster labels for new data.

        Parameters
        ----------
        X : Tensor of shape (n_samples, n_features) or list of SphericalCluster
            New data to predict

        Returns
        -------
        labels : Tensor of shape (n_samples,)
            Index of the nearest center, lowest index on ties
        """
        self._check_fitted()
        points = as_point_set(X)
        check_dimension(points.coordinates, self._cluster_centers.shape[1])
        return nearest_centres(points.coordinates, self._cluster_centers)

    def score(self, X: Any, y: Optional[Tensor] = None) -> float:
        """Opposite of the value of X on the K-means objective.

        Parameters
        ----------
        X : Tensor of shape (n_samples, n_features) or list of SphericalCluster
            New data
        y : Ignored
            Not used

        Returns
        -------
        score : float
            Negative of weighted sum of squared distances to centers
        """
        points = as_point_set(X)
        labels = self.predict(points)
        return -inertia(points.coordinates, labels, self._cluster_centers,
                        weights=points.weights)

    def clusters(self) -> List[Any]:
        """Training points grouped by nearest center."""
        self._check_fitted()
        return self.engine_.clusters()

    @property
    def cluster_centers_(self) -> Tensor:
        self._check_fitted()
        return self._cluster_centers

    @property
    def centres_(self) -> Any:
        self._check_fitted()
        return self._centres

    @property
    def labels_(self) -> Tensor:
        self._check_fitted()
        return self._labels

    @property
    def inertia_(self) -> float:
        self._check_fitted()
        return self._inertia

    def get_params(self, deep: bool = True) -> Dict[str, Any]:
        """Get parameters (sklearn compatibility)."""
        return {
            'n_clusters': self.n_clusters,
            'init': self.init,
            'max_iter': self.max_iter,
            'tol': self.tol,
            'verbose': self.verbose,
            'random_state': self.random_state,
            'n_local_trials': self.n_local_trials
        }

    def set_params(self, **params) -> 'KMeans':
        """Set parameters (sklearn compatibility)."""
        valid = self.get_params()
        for key, value in params.items():
            if key not in valid:
                raise ValueError(f"Invalid parameter {key} for KMeans")
            setattr(self, key, value)
        return self
