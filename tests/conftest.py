"""
Global pytest fixtures for the kd-kmeans tests.

- Provides deterministic seeding across Python, NumPy, and PyTorch.
- Forces single-threaded torch to stabilize timings and reduce flakiness.
- Standardizes on CPU; the kd-tree traversals never leave it.
"""

from __future__ import annotations

import os
import random
import sys
from typing import Generator
from pathlib import Path

import numpy as np
import pytest

try:
    import torch
except Exception:  # pragma: no cover
    torch = None  # type: ignore

# Add the project's src directory to the Python path so tests can import the code
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))


def _get_seed() -> int:
    """Resolve the test seed from env or default."""
    env = os.getenv("TEST_RANDOM_SEED", "1337")
    try:
        return int(env)
    except ValueError:
        return 1337


@pytest.fixture(scope="session", autouse=True)
def seed_all() -> int:
    """
    Seed Python, NumPy, and PyTorch RNGs once per session.

    Seed value comes from TEST_RANDOM_SEED (default 1337) and is returned so
    tests can derive their own generators from it.
    """
    seed = _get_seed()

    # Python
    random.seed(seed)

    # NumPy: both legacy and Generator-based code paths become deterministic
    np.random.seed(seed)

    # PyTorch (if available)
    if torch is not None:
        torch.manual_seed(seed)

    return seed


@pytest.fixture(scope="session", autouse=True)
def set_torch_threads() -> None:
    """
    Reduce PyTorch to a single thread for stability and consistent timing.
    """
    if torch is not None and hasattr(torch, "set_num_threads"):
        torch.set_num_threads(1)


@pytest.fixture(scope="function")
def rng(seed_all: int) -> Generator[np.random.Generator, None, None]:
    """
    Per-test NumPy Generator seeded from the session seed.

    Each test receives a fresh Generator (independent streams across tests,
    reproducible within a test).
    """
    gen = np.random.default_rng(seed_all)
    yield gen


@pytest.fixture(scope="function")
def generator(seed_all: int) -> "torch.Generator | None":
    """Per-test torch Generator seeded from the session seed."""
    if torch is None:
        return None
    gen = torch.Generator()
    gen.manual_seed(seed_all)
    return gen


@pytest.fixture(scope="session")
def torch_device() -> "torch.device | None":
    """
    Standard device for tests. Everything runs on CPU.
    """
    if torch is None:
        return None
    return torch.device("cpu")
