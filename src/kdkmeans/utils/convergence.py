"""
Convergence criteria for the Lloyd iterations.

Both criteria compare the centres before and after an update step:
- Exact equality of every centre (the default, deterministic stopping rule)
- Maximum centre shift within a tolerance
"""

import torch
from torch import Tensor

from ..base.interfaces import ConvergenceCriterion


class ExactCentres(ConvergenceCriterion):
    """Converged when no centre changed value at all."""

    def check(self, previous: Tensor, updated: Tensor) -> bool:
        """Check if every centre is bit-for-bit unchanged."""
        changed = (previous != updated).any(dim=1)
        n_changed = int(changed.sum().item())

        self.history.append({
            'iteration': len(self.history),
            'n_changed': n_changed
        })

        return n_changed == 0


class CentreShift(ConvergenceCriterion):
    """Converged when every centre moved at most ``tol``."""

    def __init__(self, tol: float = 1e-4, patience: int = 1):
        """
        Args:
            tol: Maximum Euclidean shift of any centre
            patience: Number of consecutive stable iterations required
        """
        super().__init__()
        if tol < 0:
            raise ValueError(f"tol must be non-negative, got {tol}")
        self.tol = tol
        self.patience = patience
        self._stable_count = 0

    def check(self, previous: Tensor, updated: Tensor) -> bool:
        """Check if the largest centre shift is within tolerance."""
        shift = torch.norm(updated - previous, dim=1).max().item()

        self.history.append({
            'iteration': len(self.history),
            'max_shift': shift
        })

        if shift <= self.tol:
            self._stable_count += 1
            converged = self._stable_count >= self.patience
        else:
            self._stable_count = 0
            converged = False

        return converged

    def reset(self):
        """Reset history and the stability counter."""
        super().reset()
        self._stable_count = 0
