from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

from .speed import WpmCountingPolicy


@dataclass(slots=True)
class OpenAISettings:
    """Configuration block for the OpenAI-backed rater, feedback and passages."""

    enabled: bool = False
    model: str = "gpt-4.1-mini"
    api_key: str | None = None
    api_key_env: str = "OPENAI_API_KEY"
    base_url: str | None = None
    organization: str | None = None
    request_timeout: float = 60.0
    max_attempts: int = 3


@dataclass(slots=True)
class ScoringConfig:
    """Configuration options for scoring reading attempts."""

    wpm_policy: WpmCountingPolicy = WpmCountingPolicy.ALL_WORDS
    estimator_name: str = "heuristic"
    default_difficulty_rating: int | None = None
    openai: OpenAISettings = field(default_factory=OpenAISettings)

    def to_dict(self) -> dict[str, Any]:
        """Return a mutable dictionary representation of the configuration."""
        data = dict(asdict(self))
        data["wpm_policy"] = WpmCountingPolicy(self.wpm_policy).value
        return data


def _build_kwargs(data: Mapping[str, Any]) -> dict[str, Any]:
    allowed = {field.name for field in fields(ScoringConfig)}
    kwargs = {key: data[key] for key in data if key in allowed}
    if "wpm_policy" in kwargs:
        kwargs["wpm_policy"] = _parse_wpm_policy(kwargs["wpm_policy"])
    if "openai" in data:
        openai_value = data["openai"]
        if isinstance(openai_value, OpenAISettings):
            kwargs["openai"] = openai_value
        elif isinstance(openai_value, Mapping):
            kwargs["openai"] = _build_openai_settings(openai_value)
        else:
            kwargs.pop("openai")
    return kwargs


def _parse_wpm_policy(value: Any) -> WpmCountingPolicy:
    try:
        return WpmCountingPolicy(value)
    except ValueError as exc:
        choices = ", ".join(policy.value for policy in WpmCountingPolicy)
        raise ValueError(
            f"Invalid wpm_policy {value!r}; expected one of: {choices}."
        ) from exc


def _build_openai_settings(data: Mapping[str, Any]) -> OpenAISettings:
    openai_allowed = {field.name for field in fields(OpenAISettings)}
    filtered = {key: data[key] for key in data if key in openai_allowed}
    return OpenAISettings(**filtered)


def config_from_dict(data: Mapping[str, Any] | None) -> ScoringConfig:
    """Build a ScoringConfig from a dictionary-like input."""
    if data is None:
        return ScoringConfig()
    return ScoringConfig(**_build_kwargs(data))


def config_from_yaml(path: str | Path) -> ScoringConfig:
    """Load configuration from a YAML file."""
    contents = Path(path).read_text(encoding="utf-8")
    parsed = yaml.safe_load(contents) or {}
    if not isinstance(parsed, MutableMapping):
        raise ValueError("Configuration YAML must define a mapping.")
    return config_from_dict(parsed)


def load_config(path: str | Path | None = None) -> ScoringConfig:
    """Load configuration from YAML when provided, otherwise return defaults."""
    if path is None:
        return ScoringConfig()
    return config_from_yaml(path)
