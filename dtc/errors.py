from __future__ import annotations


class UnparseableInputError(ValueError):
    """Raised when a date, time or timezone string cannot be recognised."""
