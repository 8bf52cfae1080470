# tests/utils.py
"""
Small, reusable helpers used across the kd-kmeans test suite.

Functions:
- brute_force_nearest(points, centres): nearest centre per point, lowest index on ties.
- brute_force_centroids(points, centres, weights=None): per-centre weighted sums and counts.
- naive_kmeans(points, centres, iterations): plain Lloyd reference, returns (converged, centres).
- sorted_rows(X): rows in lexicographic order as a numpy array.
- time_block(label, meta=None): context manager that prints wall-clock time with optional metadata.
- print_timing(label, seconds, **meta): convenience printer for timings (used by time_block).

Notes:
- The reference implementations use the package's own squared-distance
  primitive so that distance ties resolve the same way on both paths.
"""

from __future__ import annotations

import json
import time
from contextlib import contextmanager
from typing import Any, Dict, Optional, Tuple

import numpy as np

try:
    import torch
    from torch import Tensor
except Exception:  # pragma: no cover
    torch = None  # type: ignore
    Tensor = None  # type: ignore

from kdkmeans.utils.metrics import nearest_centres, squared_distances


def brute_force_nearest(points: "Tensor", centres: "Tensor") -> "Tensor":
    """Index of the nearest centre for every point, checking all centres."""
    return nearest_centres(points, centres)


def brute_force_centroids(points: "Tensor", centres: "Tensor",
                          weights: Optional["Tensor"] = None) -> Tuple["Tensor", "Tensor"]:
    """
    Per-centre weighted coordinate sums and total weights of the nearest points.

    Returns
    -------
    (sums, counts): (k, d) and (k,) tensors
    """
    labels = nearest_centres(points, centres)
    if weights is None:
        weights = torch.ones(points.shape[0], dtype=points.dtype)
    sums = torch.zeros_like(centres)
    sums.index_add_(0, labels, points * weights.unsqueeze(1))
    counts = torch.zeros(centres.shape[0], dtype=points.dtype)
    counts.index_add_(0, labels, weights)
    return sums, counts


def naive_kmeans(points: "Tensor", centres: "Tensor",
                 iterations: int) -> Tuple[bool, "Tensor"]:
    """
    Plain Lloyd iterations without any spatial index.

    A centre moves to the mean of its nearest points; a centre with no points
    stays put. Converged on the first iteration where no centre changes.
    """
    centres = centres.clone()
    for _ in range(iterations):
        sums, counts = brute_force_centroids(points, centres)
        updated = centres.clone()
        nonempty = counts > 0
        updated[nonempty] = sums[nonempty] / counts[nonempty].unsqueeze(1)
        if torch.equal(updated, centres):
            return True, centres
        centres = updated
    return False, centres


def sorted_rows(X: Any) -> np.ndarray:
    """Rows of X in lexicographic order."""
    if torch is not None and isinstance(X, torch.Tensor):
        X = X.detach().cpu().numpy()
    X = np.asarray(X)
    order = np.lexsort(X.T[::-1])
    return X[order]


def min_pairwise_distance(centres: "Tensor") -> float:
    """Smallest distance between two distinct rows."""
    d2 = squared_distances(centres, centres)
    d2.fill_diagonal_(float("inf"))
    return float(torch.sqrt(d2.min()).item())


@contextmanager
def time_block(label: str, meta: Dict[str, Any] | None = None):
    """
    Context manager to time a block and print a single-line summary.

    Example
    -------
    >>> with time_block("run", {"n": 2000, "d": 2, "K": 20}):
    ...     engine.run(50)

    Output
    ------
    [timing] run {"n":2000,"d":2,"K":20} 0.123s
    """
    t0 = time.perf_counter()
    try:
        yield
    finally:
        dt = time.perf_counter() - t0
        print_timing(label, dt, **(meta or {}))


def print_timing(label: str, seconds: float, **meta: Any) -> None:
    """
    Print timing in a compact, machine-readable single line.

    Example:
    [timing] run {"n":2000,"d":2,"K":20} 0.123s
    """
    meta_str = ""
    if meta:
        meta_str = " " + json.dumps(meta, separators=(",", ":"))
    print(f"[timing] {label}{meta_str} {seconds:.3f}s")
