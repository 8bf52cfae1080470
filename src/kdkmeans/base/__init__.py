"""Base classes, interfaces and errors for the kd-tree k-means components."""

from .interfaces import (
    PointSet,
    InitializationStrategy,
    ConvergenceCriterion
)

from .data_structures import (
    MeanAccumulator,
    IterationRecord
)

from .errors import (
    EmptyInputError,
    InvalidCentreCountError,
    InvalidKError
)

__all__ = [
    # Interfaces
    'PointSet',
    'InitializationStrategy',
    'ConvergenceCriterion',

    # Data structures
    'MeanAccumulator',
    'IterationRecord',

    # Errors
    'EmptyInputError',
    'InvalidCentreCountError',
    'InvalidKError'
]
