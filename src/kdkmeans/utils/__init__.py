"""Utility functions for the kd-tree k-means components."""

from .convergence import (
    ExactCentres,
    CentreShift
)

from .metrics import (
    squared_distances,
    nearest_centres,
    inertia,
    sum_square_residuals
)

from .validation import (
    validate_data,
    check_dimension,
    check_n_clusters,
    check_random_state,
    sort_rows
)

__all__ = [
    # Convergence criteria
    'ExactCentres',
    'CentreShift',

    # Metrics
    'squared_distances',
    'nearest_centres',
    'inertia',
    'sum_square_residuals',

    # Validation
    'validate_data',
    'check_dimension',
    'check_n_clusters',
    'check_random_state',
    'sort_rows'
]
