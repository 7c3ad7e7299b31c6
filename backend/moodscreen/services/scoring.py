import enum
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from moodscreen.services.errors import ValidationError


DISCLAIMER_TEXT = "This result is for reference only and is not a medical diagnosis."
PHQ9_ITEM_COUNT = 9
PHQ9_MAX_ITEM_SCORE = 3
PHQ9_MAX_TOTAL = PHQ9_ITEM_COUNT * PHQ9_MAX_ITEM_SCORE


class SeverityBand(str, enum.Enum):
    MINIMAL = "minimal"
    MILD = "mild"
    MODERATE = "moderate"
    MODERATELY_SEVERE = "moderately-severe"
    SEVERE = "severe"

    @property
    def rank(self) -> int:
        return _BAND_ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SeverityBand):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, SeverityBand):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, SeverityBand):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, SeverityBand):
            return NotImplemented
        return self.rank >= other.rank


_BAND_ORDER = [
    SeverityBand.MINIMAL,
    SeverityBand.MILD,
    SeverityBand.MODERATE,
    SeverityBand.MODERATELY_SEVERE,
    SeverityBand.SEVERE,
]

BAND_DESCRIPTIONS: dict[SeverityBand, str] = {
    SeverityBand.MINIMAL: "Minimal Depression",
    SeverityBand.MILD: "Mild Depression",
    SeverityBand.MODERATE: "Moderate Depression",
    SeverityBand.MODERATELY_SEVERE: "Moderately Severe Depression",
    SeverityBand.SEVERE: "Severe Depression",
}

ANSWER_OPTIONS: list[dict[str, Any]] = [
    {"value": 0, "label": "Not at all", "description": "(0 points)"},
    {"value": 1, "label": "Several days", "description": "(1 point)"},
    {"value": 2, "label": "More than half the days", "description": "(2 points)"},
    {"value": 3, "label": "Nearly every day", "description": "(3 points)"},
]

PHQ9_QUESTIONS: list[str] = [
    "Little interest or pleasure in doing things?",
    "Feeling down, depressed, or hopeless?",
    "Trouble falling or staying asleep, or sleeping too much?",
    "Feeling tired or having little energy?",
    "Poor appetite or overeating?",
    "Feeling bad about yourself, or that you are a failure or have let yourself or your family down?",
    "Trouble concentrating on things, such as reading the newspaper or watching television?",
    (
        "Moving or speaking so slowly that other people could have noticed? Or the opposite, "
        "being so fidgety or restless that you have been moving around a lot more than usual?"
    ),
    "Thoughts that you would be better off dead, or of hurting yourself in some way?",
]


@dataclass(slots=True, frozen=True)
class PHQ9Response:
    question_index: int
    score: int


def _is_int(value: object) -> bool:
    return type(value) is int


def _validate_response(response: PHQ9Response) -> None:
    idx, score = response.question_index, response.score
    if not _is_int(idx) or idx < 0 or idx >= PHQ9_ITEM_COUNT:
        raise ValidationError(f"PHQ-9 question index must be an integer between 0 and 8, got {idx!r}.")
    if not _is_int(score) or score < 0 or score > PHQ9_MAX_ITEM_SCORE:
        raise ValidationError(f"PHQ-9 item {idx + 1} must be an integer between 0 and 3, got {score!r}.")


def to_response(raw: PHQ9Response | Mapping[str, Any]) -> PHQ9Response:
    if isinstance(raw, PHQ9Response):
        return raw
    try:
        return PHQ9Response(question_index=raw["question_index"], score=raw["score"])
    except (KeyError, TypeError) as exc:
        raise ValidationError(f"Malformed PHQ-9 response: {raw!r}") from exc


def latest_responses(responses: Iterable[PHQ9Response | Mapping[str, Any]]) -> list[PHQ9Response]:
    """Validate responses and keep the last answer per question, ordered by index."""
    by_index: dict[int, PHQ9Response] = {}
    for raw in responses:
        response = to_response(raw)
        _validate_response(response)
        by_index[response.question_index] = response
    return [by_index[idx] for idx in sorted(by_index)]


def is_complete(responses: Iterable[PHQ9Response]) -> bool:
    return sorted(r.question_index for r in responses) == list(range(PHQ9_ITEM_COUNT))


def score_responses(responses: Iterable[PHQ9Response | Mapping[str, Any]]) -> int:
    # Partial sets are scored as-is; completeness is the caller's concern.
    return sum(r.score for r in latest_responses(responses))


def severity_from_total(total_score: int) -> SeverityBand:
    if not _is_int(total_score) or total_score < 0 or total_score > PHQ9_MAX_TOTAL:
        raise ValidationError(f"PHQ-9 total must be an integer between 0 and 27, got {total_score!r}.")
    if total_score <= 4:
        return SeverityBand.MINIMAL
    if total_score <= 9:
        return SeverityBand.MILD
    if total_score <= 14:
        return SeverityBand.MODERATE
    if total_score <= 19:
        return SeverityBand.MODERATELY_SEVERE
    return SeverityBand.SEVERE


def describe_severity(band: SeverityBand) -> str:
    return BAND_DESCRIPTIONS[band]


def phq9_questions() -> list[dict[str, Any]]:
    return [
        {"id": idx, "text": text, "options": [dict(opt) for opt in ANSWER_OPTIONS]}
        for idx, text in enumerate(PHQ9_QUESTIONS)
    ]
