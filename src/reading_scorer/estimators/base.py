from __future__ import annotations

from abc import ABC, abstractmethod


class DifficultyEstimator(ABC):
    """Abstract estimator that rates passage difficulty on a 1-10 scale."""

    @abstractmethod
    def predict_rating(self, text: str) -> int:
        """Return an integer difficulty rating between 1 and 10."""
        raise NotImplementedError
