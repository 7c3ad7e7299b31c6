"""
Transcript signal extraction.

Derives coarse, explainable signals from a spoken-response transcript:
a lexicon sentiment proxy, first-person pronoun density, emotional keyword
hits and a length-based confidence. None of these are clinical measures.
"""

import logging
from dataclasses import dataclass, field
from functools import lru_cache

import numpy as np
from afinn import Afinn

from moodscreen.services.errors import AnalysisError

logger = logging.getLogger(__name__)


FIRST_PERSON_PRONOUNS = frozenset({"i", "me", "my", "myself", "mine"})

EMOTIONAL_KEYWORDS = (
    "sad",
    "depressed",
    "anxious",
    "worried",
    "hopeless",
    "tired",
    "empty",
    "lonely",
    "overwhelmed",
    "stressed",
    "angry",
    "frustrated",
    "numb",
    "helpless",
    "worthless",
    "guilty",
    "shame",
    "fear",
    "panic",
)

SENTIMENT_SCALE = 10.0
CONFIDENCE_WORDS = 50.0
CONFIDENCE_FLOOR = 0.3


@dataclass(slots=True)
class TextAnalysis:
    sentiment: float = 0.0
    negative_words: list[str] = field(default_factory=list)
    pronoun_usage: float = 0.0
    emotional_indicators: list[str] = field(default_factory=list)
    confidence: float = CONFIDENCE_FLOOR


@lru_cache(maxsize=1)
def _lexicon() -> Afinn:
    return Afinn(language="en")


def _lexicon_hits(text: str) -> list[tuple[str, float]]:
    lexicon = _lexicon()
    return list(zip(lexicon.find_all(text), lexicon.scores(text), strict=False))


def _sentiment(hits: list[tuple[str, float]]) -> float:
    raw = sum(score for _, score in hits)
    return float(np.clip(raw / SENTIMENT_SCALE, -1.0, 1.0))


def _pronoun_usage(words: list[str]) -> float:
    if not words:
        return 0.0
    count = sum(1 for w in words if w in FIRST_PERSON_PRONOUNS)
    return float(np.clip(count / len(words) * 10.0, 0.0, 1.0))


def _emotional_indicators(words: list[str]) -> list[str]:
    # Substring match on purpose: "saddest" counts as "sad".
    return [w for w in words if any(keyword in w for keyword in EMOTIONAL_KEYWORDS)]


def _confidence(word_count: int) -> float:
    return float(np.clip(word_count / CONFIDENCE_WORDS, CONFIDENCE_FLOOR, 1.0))


def analyze_text(transcript: str) -> TextAnalysis:
    if transcript is None:
        transcript = ""
    try:
        words = transcript.lower().split()
        hits = _lexicon_hits(transcript)
        return TextAnalysis(
            sentiment=_sentiment(hits),
            negative_words=[word for word, score in hits if score < 0],
            pronoun_usage=_pronoun_usage(words),
            emotional_indicators=_emotional_indicators(words),
            confidence=_confidence(len(words)),
        )
    except Exception as exc:
        logger.exception("Text signal extraction failed")
        raise AnalysisError(f"Failed to analyze text sentiment: {exc}") from exc


def neutral_text_analysis() -> TextAnalysis:
    """Stand-in used when a voice analysis was simulated and no transcript exists."""
    return TextAnalysis()
