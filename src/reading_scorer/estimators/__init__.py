from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .base import DifficultyEstimator
from .heuristic_estimator import HeuristicDifficultyEstimator, estimate_difficulty
from .llm_estimator import LLMDifficultyEstimator

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from ..config import ScoringConfig

__all__ = [
    "DifficultyEstimator",
    "HeuristicDifficultyEstimator",
    "LLMDifficultyEstimator",
    "estimate_difficulty",
    "create_estimator",
    "build_estimator_from_config",
]


def create_estimator(name: str, **kwargs: Any) -> DifficultyEstimator:
    """Factory for building estimators by name."""
    normalized = name.lower().strip()
    if normalized == "heuristic":
        return HeuristicDifficultyEstimator()
    if normalized in {"llm", "openai"}:
        return LLMDifficultyEstimator(**kwargs)
    raise ValueError(f"Unknown estimator '{name}'.")


def build_estimator_from_config(
    config: "ScoringConfig", client: Any | None = None
) -> DifficultyEstimator:
    """
    Convenience helper to build an estimator from ScoringConfig.
    The LLM estimator needs an already constructed client.
    """
    normalized = config.estimator_name.lower().strip()
    if normalized in {"llm", "openai"}:
        if client is None:
            raise ValueError("The LLM difficulty estimator requires a client.")
        return create_estimator(config.estimator_name, client=client)
    return create_estimator(config.estimator_name)
