from __future__ import annotations


class InvalidInputError(ValueError):
    """Raised when a scoring function receives input it cannot score."""
