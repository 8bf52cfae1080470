"""
Argument validation errors raised by the clustering components.

All of them derive from ValueError so callers that already guard clustering
calls with ``except ValueError`` keep working.
"""


class EmptyInputError(ValueError):
    """No points were supplied where at least one is required."""


class InvalidCentreCountError(ValueError):
    """Zero centres, or more centres than there are points."""


class InvalidKError(ValueError):
    """A seeding strategy was asked for k == 0 or k > number of points."""
