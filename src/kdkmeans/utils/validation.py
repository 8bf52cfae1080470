"""
Input validation utilities.

Provides functions for validating inputs before they reach the kd-tree or
the engine, so that shape and type problems surface at the offending call.
"""

from typing import Optional, Union
import torch
from torch import Tensor
import numpy as np

from ..base.errors import EmptyInputError, InvalidCentreCountError


def validate_data(X: Union[Tensor, np.ndarray, list],
                  dtype: torch.dtype = torch.float64,
                  ensure_finite: bool = True,
                  ensure_non_empty: bool = True,
                  copy: bool = False) -> Tensor:
    """Validate and convert input points to a 2D CPU tensor.

    Args:
        X: Input data (tensor, numpy array, or list of rows)
        dtype: Target data type
        ensure_finite: Whether to check for inf/nan
        ensure_non_empty: Whether zero rows is an error
        copy: Whether to force a copy

    Returns:
        Validated (n, d) tensor

    Raises:
        EmptyInputError: If there are no rows and ensure_non_empty is set
        ValueError: If the data is not 2D or contains non-finite values
        TypeError: If X cannot be converted
    """
    if isinstance(X, Tensor):
        if copy or X.dtype != dtype or X.device.type != 'cpu':
            X = X.to(dtype=dtype, device='cpu', copy=copy)
    elif isinstance(X, np.ndarray):
        X = torch.from_numpy(np.array(X, dtype=np.float64, copy=True)).to(dtype=dtype)
    elif isinstance(X, (list, tuple)):
        if len(X) == 0:
            if ensure_non_empty:
                raise EmptyInputError("No points supplied")
            return torch.zeros(0, 0, dtype=dtype)
        if all(isinstance(row, Tensor) for row in X):
            X = torch.stack([row.to(dtype=dtype, device='cpu') for row in X])
        else:
            X = torch.tensor(np.asarray(X, dtype=np.float64), dtype=dtype)
    else:
        raise TypeError(f"Cannot convert {type(X)} to tensor")

    if X.dim() == 1 and X.numel() == 0:
        X = X.reshape(0, 0)
    if X.dim() != 2:
        raise ValueError(f"Expected 2D array, got {X.dim()}D")

    if ensure_non_empty and X.shape[0] == 0:
        raise EmptyInputError("No points supplied")

    if ensure_finite and X.numel() > 0:
        if torch.isnan(X).any():
            raise ValueError("Input contains NaN values")
        if torch.isinf(X).any():
            raise ValueError("Input contains infinite values")

    return X


def check_dimension(X: Tensor, dimension: int, what: str = "points") -> None:
    """Raise ValueError unless X has ``dimension`` columns."""
    if X.shape[1] != dimension:
        raise ValueError(f"Expected {what} of dimension {dimension}, got {X.shape[1]}")


def check_n_clusters(n_clusters: int, n_samples: int) -> None:
    """Validate number of centres against number of points.

    Args:
        n_clusters: Number of centres
        n_samples: Number of points

    Raises:
        TypeError: If n_clusters is not an int
        InvalidCentreCountError: If n_clusters is zero or exceeds n_samples
    """
    if not isinstance(n_clusters, (int, np.integer)):
        raise TypeError(f"n_clusters must be int, got {type(n_clusters)}")

    if n_clusters <= 0:
        raise InvalidCentreCountError(f"n_clusters must be positive, got {n_clusters}")

    if n_clusters > n_samples:
        raise InvalidCentreCountError(f"n_clusters ({n_clusters}) cannot be larger than "
                                      f"n_samples ({n_samples})")


def check_random_state(random_state: Optional[Union[int, torch.Generator]]) -> torch.Generator:
    """Create generator from random state.

    Args:
        random_state: None, seed or generator

    Returns:
        Generator; a freshly seeded one when random_state is None
    """
    if random_state is None:
        generator = torch.Generator()
        generator.seed()
        return generator
    elif isinstance(random_state, (int, np.integer)):
        generator = torch.Generator()
        generator.manual_seed(int(random_state))
        return generator
    elif isinstance(random_state, torch.Generator):
        return random_state
    else:
        raise TypeError(f"random_state must be int or Generator, got {type(random_state)}")


def sort_rows(X: Tensor) -> Tensor:
    """Sort the rows of X lexicographically by their coordinates."""
    order = torch.arange(X.shape[0])
    # Stable sorts from the last column to the first give lexicographic order
    for column in reversed(range(X.shape[1])):
        keys = X[order, column]
        order = order[torch.sort(keys, stable=True).indices]
    return X[order]
