from __future__ import annotations

import json
import os
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, TypedDict

import typer
import yaml

from .comparison import compare as compare_texts
from .config import OpenAISettings, ScoringConfig, load_config
from .errors import InvalidInputError
from .estimators import DifficultyEstimator, build_estimator_from_config
from .feedback import FeedbackGenerator, LLMFeedbackGenerator, StaticFeedbackGenerator
from .leveling import level_info as resolve_level_info
from .leveling import level_rewards, level_title
from .llm import OpenAIChatClient
from .models import ComparisonResult, RankInfo
from .passages import LLMPassageGenerator
from .pipeline import score_challenge_attempt, score_learn_attempt
from .ranking import rank_info as resolve_rank_info
from .ranking import rank_message
from .speed import WpmCountingPolicy

app = typer.Typer(help="Reading attempt scoring CLI.", no_args_is_help=True)


class WordStatePayload(TypedDict):
    word: str
    is_correct: bool
    index: int


class ComparisonPayload(TypedDict):
    word_states: List[WordStatePayload]
    correct_count: int
    total_count: int
    accuracy_percent: int
    incorrect_words: List[str]


@app.command()
def compare(
    target: str = typer.Option(..., "--target", "-t", help="Passage the user read."),
    transcript: str = typer.Option(
        ..., "--transcript", help="Transcript returned by the speech-to-text service."
    ),
) -> None:
    """Compare a transcript against its passage and emit per-word results."""
    try:
        result = compare_texts(target, transcript)
    except InvalidInputError as exc:
        raise typer.BadParameter(str(exc)) from exc
    typer.echo(json.dumps(_comparison_dict(result), indent=2))


@app.command()
def learn(
    target: str = typer.Option(..., "--target", "-t"),
    transcript: str = typer.Option(..., "--transcript"),
    tier: str = typer.Option("easy", "--tier", help="easy, medium or hard."),
    current_xp: int = typer.Option(0, "--current-xp", min=0),
    elapsed_seconds: float | None = typer.Option(
        None, "--elapsed-seconds", help="Reading duration; enables WPM output."
    ),
    config: Path | None = typer.Option(None, "--config", "-c"),
    wpm_policy: WpmCountingPolicy | None = typer.Option(None, "--wpm-policy"),
    llm_feedback: bool = typer.Option(
        False,
        "--llm-feedback/--static-feedback",
        help="Ask the OpenAI model for coaching feedback instead of the fixed message.",
    ),
    openai_model: str | None = typer.Option(None, "--openai-model"),
    openai_api_key: str | None = typer.Option(None, "--openai-api-key"),
) -> None:
    """Score a Learn-mode attempt and report XP and level changes."""
    cfg = _load_config(config)
    _apply_scoring_overrides(cfg, wpm_policy=wpm_policy)
    _apply_openai_overrides(cfg, None, openai_model, openai_api_key)
    feedback = _build_feedback_generator(cfg, llm_feedback)
    try:
        result = score_learn_attempt(
            target,
            transcript,
            tier,
            current_xp,
            elapsed_seconds=elapsed_seconds,
            config=cfg,
            feedback=feedback,
        )
    except InvalidInputError as exc:
        raise typer.BadParameter(str(exc)) from exc
    new_level = resolve_level_info(result.level_update.new_total_xp)
    payload: Dict[str, Any] = {
        "comparison": _comparison_dict(result.comparison),
        "tier": result.tier.value,
        "earned_xp": result.earned_xp,
        "wpm": result.wpm,
        "level_update": asdict(result.level_update),
        "level_info": asdict(new_level),
        "title": level_title(new_level.level),
        "feedback": result.feedback,
    }
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@app.command()
def challenge(
    target: str = typer.Option(..., "--target", "-t"),
    transcript: str = typer.Option(..., "--transcript"),
    elapsed_seconds: float = typer.Option(..., "--elapsed-seconds"),
    current_score: int = typer.Option(0, "--current-score", min=0),
    difficulty_rating: int | None = typer.Option(
        None, "--difficulty-rating", help="1-10 rating; estimated when omitted."
    ),
    estimator_name: str | None = typer.Option(
        None,
        "--estimator-name",
        "-e",
        help="Estimator to use when no rating is given ('heuristic' or 'llm').",
    ),
    config: Path | None = typer.Option(None, "--config", "-c"),
    wpm_policy: WpmCountingPolicy | None = typer.Option(None, "--wpm-policy"),
    llm_feedback: bool = typer.Option(
        False,
        "--llm-feedback/--static-feedback",
        help="Ask the OpenAI model for coaching feedback instead of the fixed message.",
    ),
    openai_enabled: bool | None = typer.Option(
        None,
        "--openai-enabled/--openai-disabled",
        help="Toggle the OpenAI-backed difficulty rater.",
    ),
    openai_model: str | None = typer.Option(
        None, "--openai-model", help="OpenAI model identifier (e.g., gpt-4.1-mini)."
    ),
    openai_api_key: str | None = typer.Option(
        None, "--openai-api-key", help="Explicit OpenAI API key (prefer env vars)."
    ),
) -> None:
    """Score a Challenge-mode attempt and report rank changes."""
    cfg = _load_config(config)
    _apply_scoring_overrides(
        cfg, wpm_policy=wpm_policy, estimator_name=estimator_name
    )
    _apply_openai_overrides(cfg, openai_enabled, openai_model, openai_api_key)
    estimator = _build_estimator(cfg) if difficulty_rating is None else None
    feedback = _build_feedback_generator(cfg, llm_feedback)
    try:
        result = score_challenge_attempt(
            target,
            transcript,
            elapsed_seconds,
            current_score,
            difficulty_rating=difficulty_rating,
            estimator=estimator,
            config=cfg,
            feedback=feedback,
        )
    except InvalidInputError as exc:
        raise typer.BadParameter(str(exc)) from exc
    payload: Dict[str, Any] = {
        "comparison": _comparison_dict(result.comparison),
        "attempt": asdict(result.attempt),
        "challenge_score": result.challenge_score,
        "rank_update": asdict(result.rank_update),
        "rank_info": _rank_dict(resolve_rank_info(result.rank_update.new_total_score)),
        "feedback": result.feedback,
    }
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@app.command("level-info")
def level_info(total_xp: int = typer.Argument(..., min=0)) -> None:
    """Show the level, progress and unlocks for a total XP value."""
    info = resolve_level_info(total_xp)
    payload: Dict[str, Any] = {
        **asdict(info),
        "title": level_title(info.level),
        "rewards": asdict(level_rewards(info.level)),
    }
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@app.command("rank-info")
def rank_info(total_score: int = typer.Argument(..., min=0)) -> None:
    """Show the rank and progress for a cumulative challenge score."""
    typer.echo(
        json.dumps(
            _rank_dict(resolve_rank_info(total_score)), indent=2, ensure_ascii=False
        )
    )


@app.command("estimate-difficulty")
def estimate_difficulty(
    input_path: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=False, file_okay=True
    ),
    estimator_name: str | None = typer.Option(None, "--estimator-name", "-e"),
    config: Path | None = typer.Option(None, "--config", "-c"),
) -> None:
    """Rate the difficulty (1-10) of a passage stored in a text file."""
    cfg = _load_config(config)
    _apply_scoring_overrides(cfg, estimator_name=estimator_name)
    estimator = _build_estimator(cfg)
    text = input_path.read_text(encoding="utf-8")
    typer.echo(
        json.dumps({"doc_id": input_path.name, "rating": estimator.predict_rating(text)})
    )


@app.command("generate-passage")
def generate_passage(
    tier: str = typer.Option("easy", "--tier"),
    count: int = typer.Option(1, "--count", min=1),
    config: Path | None = typer.Option(None, "--config", "-c"),
    openai_model: str | None = typer.Option(None, "--openai-model"),
    openai_api_key: str | None = typer.Option(None, "--openai-api-key"),
) -> None:
    """Generate practice passages with the OpenAI-backed generator."""
    cfg = _load_config(config)
    _apply_openai_overrides(cfg, True, openai_model, openai_api_key)
    client = _build_openai_client(cfg.openai)
    try:
        passages = LLMPassageGenerator(client).generate_many(tier, count)
    except InvalidInputError as exc:
        raise typer.BadParameter(str(exc)) from exc
    except RuntimeError as exc:
        typer.echo(f"Passage generation failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    payload = [
        {**asdict(passage), "difficulty": passage.difficulty.value}
        for passage in passages
    ]
    typer.echo(json.dumps({"passages": payload}, indent=2, ensure_ascii=False))


@app.command("print-config")
def print_config() -> None:
    """Print the default configuration as YAML."""
    cfg = ScoringConfig()
    typer.echo(yaml.safe_dump(cfg.to_dict(), sort_keys=False))


def main() -> None:
    app()


def _load_config(path: Path | None) -> ScoringConfig:
    try:
        return load_config(path)
    except (ValueError, yaml.YAMLError) as exc:
        raise typer.BadParameter(f"Invalid config {path}: {exc}") from exc


def _apply_scoring_overrides(
    config: ScoringConfig,
    *,
    wpm_policy: WpmCountingPolicy | None = None,
    estimator_name: str | None = None,
) -> None:
    """Apply CLI overrides to scoring-related config fields when provided."""
    if wpm_policy is not None:
        config.wpm_policy = wpm_policy
    if estimator_name:
        config.estimator_name = estimator_name


def _apply_openai_overrides(
    config: ScoringConfig,
    openai_enabled: bool | None,
    openai_model: str | None,
    openai_api_key: str | None,
) -> None:
    settings = config.openai
    if openai_enabled is not None:
        settings.enabled = openai_enabled
    if openai_model:
        settings.model = openai_model
    if openai_api_key:
        settings.api_key = openai_api_key


def _build_estimator(config: ScoringConfig) -> DifficultyEstimator:
    """Instantiate the configured estimator, wiring an OpenAI client when needed."""
    if config.estimator_name.lower().strip() in {"llm", "openai"}:
        if not config.openai.enabled:
            typer.echo(
                "LLM estimator requested but OpenAI is disabled; using heuristic.",
                err=True,
            )
            config.estimator_name = "heuristic"
            return build_estimator_from_config(config)
        client = _build_openai_client(config.openai)
        return build_estimator_from_config(config, client=client)
    try:
        return build_estimator_from_config(config)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _build_feedback_generator(
    config: ScoringConfig, use_llm: bool
) -> FeedbackGenerator:
    if not use_llm:
        return StaticFeedbackGenerator()
    return LLMFeedbackGenerator(_build_openai_client(config.openai))


def _build_openai_client(settings: OpenAISettings) -> OpenAIChatClient:
    try:
        return OpenAIChatClient(settings, api_key=_resolve_openai_api_key(settings))
    except RuntimeError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _resolve_openai_api_key(settings: OpenAISettings) -> str:
    """Resolve the API key from explicit config or the configured environment variable."""
    if settings.api_key:
        return settings.api_key
    env_name = settings.api_key_env or "OPENAI_API_KEY"
    if env_name in os.environ and os.environ[env_name]:
        return os.environ[env_name]
    raise RuntimeError(
        "OpenAI API key not provided. Use --openai-api-key or set the configured environment variable."
    )


def _comparison_dict(result: ComparisonResult) -> ComparisonPayload:
    """Serialize a ComparisonResult so it can be emitted in JSON."""
    return {
        "word_states": [
            {"word": s.word, "is_correct": s.is_correct, "index": s.index}
            for s in result.word_states
        ],
        "correct_count": result.correct_count,
        "total_count": result.total_count,
        "accuracy_percent": result.accuracy_percent,
        "incorrect_words": result.incorrect_words,
    }


def _rank_dict(info: RankInfo) -> Dict[str, Any]:
    payload = asdict(info)
    payload["message"] = rank_message(info.rank)
    return payload


if __name__ == "__main__":
    main()
