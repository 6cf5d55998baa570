from __future__ import annotations

import datetime as _dt
import logging
import uuid
from dataclasses import dataclass
from typing import Dict, List

from .llm.openai_client import OpenAIChatClient, RequestMetadata
from .models import DifficultyTier, Passage

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class PassageSpec:
    """Generation parameters for one difficulty tier."""

    reading_seconds: int
    vocabulary_level: str
    sentence_structure: str
    word_count: str
    age_group: str
    examples: str


PASSAGE_SPECS: Dict[DifficultyTier, PassageSpec] = {
    DifficultyTier.EASY: PassageSpec(
        reading_seconds=10,
        vocabulary_level="very simple and basic",
        sentence_structure="short, simple sentences",
        word_count="25-35",
        age_group="8-10 years old",
        examples="Use words like: cat, dog, sun, play, happy, run, eat",
    ),
    DifficultyTier.MEDIUM: PassageSpec(
        reading_seconds=20,
        vocabulary_level="moderate complexity with some challenging words",
        sentence_structure="varied sentence lengths with compound sentences",
        word_count="50-70",
        age_group="11-13 years old",
        examples=(
            "Use words like: ancient, mysterious, discovered, adventure, magnificent"
        ),
    ),
    DifficultyTier.HARD: PassageSpec(
        reading_seconds=30,
        vocabulary_level="advanced and sophisticated",
        sentence_structure="complex sentences with clauses and advanced grammar",
        word_count="80-100",
        age_group="13-16 years old",
        examples=(
            "Use words like: phenomenon, unprecedented, meticulously, remarkable, "
            "sophisticated"
        ),
    ),
}

SYSTEM_PROMPT = (
    "You write short reading passages for a read-aloud practice app.\n"
    "Output plain text only: no titles, no explanations, no metadata."
)

USER_PROMPT_TEMPLATE = (
    "Generate a reading passage with these exact specifications:\n"
    "\n"
    "DIFFICULTY LEVEL: {tier}\n"
    "TARGET AGE: {age_group}\n"
    "WORD COUNT: {word_count} words\n"
    "READING TIME: Approximately {reading_seconds} seconds when read aloud\n"
    "VOCABULARY: {vocabulary_level}\n"
    "SENTENCE STRUCTURE: {sentence_structure}\n"
    "\n"
    "REQUIREMENTS:\n"
    "1. Create an engaging, age-appropriate passage\n"
    "2. Make it interesting and relatable to young readers\n"
    "3. Use clear, proper grammar and punctuation\n"
    "4. Avoid controversial or sensitive topics\n"
    "5. Make it educational and positive\n"
    "6. {examples}\n"
    "\n"
    "TOPICS TO CONSIDER: nature and animals, space and science, adventures and "
    "exploration, everyday life, age-appropriate history, technology and "
    "inventions, sports and hobbies.\n"
    "\n"
    "Return ONLY the passage text, complete and ready to read aloud."
)

def build_passage_prompt(tier: DifficultyTier | str) -> str:
    """Render the user prompt for a tier."""
    resolved = DifficultyTier.parse(tier)
    spec = PASSAGE_SPECS[resolved]
    return USER_PROMPT_TEMPLATE.format(
        tier=resolved.value.upper(),
        age_group=spec.age_group,
        word_count=spec.word_count,
        reading_seconds=spec.reading_seconds,
        vocabulary_level=spec.vocabulary_level,
        sentence_structure=spec.sentence_structure,
        examples=spec.examples,
    )


class LLMPassageGenerator:
    """Generates practice passages through the LLM client."""

    def __init__(self, client: OpenAIChatClient) -> None:
        self._client = client

    def generate(self, tier: DifficultyTier | str = DifficultyTier.EASY) -> Passage:
        resolved = DifficultyTier.parse(tier)
        logger.info("Generating %s passage", resolved.value)
        text = self._client.complete(
            system_prompt=SYSTEM_PROMPT,
            user_prompt=build_passage_prompt(resolved),
            metadata=RequestMetadata(purpose="passage", subject=resolved.value),
        ).strip()
        if not text:
            raise RuntimeError(f"LLM returned an empty {resolved.value} passage.")
        logger.info(
            "Generated %s passage (%s words)", resolved.value, len(text.split())
        )
        return Passage(
            passage_id=f"generated-{resolved.value}-{uuid.uuid4().hex[:12]}",
            text=text,
            difficulty=resolved,
            estimated_seconds=PASSAGE_SPECS[resolved].reading_seconds,
            generated_at=_dt.datetime.now(_dt.timezone.utc).isoformat(),
        )

    def generate_many(
        self, tier: DifficultyTier | str, count: int = 3
    ) -> List[Passage]:
        """Generate several passages of one tier, e.g. for preloading."""
        if count < 1:
            raise ValueError("count must be at least 1.")
        return [self.generate(tier) for _ in range(count)]
