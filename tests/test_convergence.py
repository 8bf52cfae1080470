# tests/test_convergence.py
"""
Convergence criteria behavior.

Covers:
- ExactCentres: converged only when every centre is bit-for-bit unchanged
- CentreShift: maximum shift tolerance + patience, reset clears state

All tests run on CPU; these are pure logic checks (no heavy tensors).
"""

from __future__ import annotations

import pytest

try:
    import torch
except Exception:  # pragma: no cover
    torch = None  # type: ignore

from kdkmeans.utils.convergence import ExactCentres, CentreShift


pytestmark = pytest.mark.skipif(torch is None, reason="PyTorch is required for these tests")


def test_exact_centres_requires_identity(seed_all):
    crit = ExactCentres()
    c0 = torch.zeros(3, 2, dtype=torch.float64)
    c1 = c0.clone()
    c1[1, 0] = 1e-300  # any change at all counts

    assert crit.check(c0, c1) is False
    assert crit.history[-1]["n_changed"] == 1
    assert crit.check(c1, c1.clone()) is True
    assert crit.history[-1]["n_changed"] == 0

    crit.reset()
    assert crit.history == []


def test_centre_shift_tolerance_and_patience(seed_all):
    crit = CentreShift(tol=0.1, patience=2)
    c0 = torch.zeros(2, 2, dtype=torch.float64)
    c1 = c0 + 0.05   # shift ~0.07 < tol
    c2 = c1 + 0.05
    c3 = c2 + 1.0    # large move resets the counter

    assert crit.check(c0, c1) is False  # stable_count = 1
    assert crit.check(c1, c2) is True   # stable_count = 2
    assert crit.check(c2, c3) is False
    assert crit.history[-1]["max_shift"] == pytest.approx(2 ** 0.5)

    crit.reset()
    assert crit.history == []
    assert crit.check(c0, c1) is False  # counter starts over


def test_centre_shift_rejects_negative_tol():
    with pytest.raises(ValueError):
        CentreShift(tol=-1.0)
