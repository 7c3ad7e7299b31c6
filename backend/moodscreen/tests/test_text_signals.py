import pytest

from moodscreen.services.errors import AnalysisError
from moodscreen.services import text_signals
from moodscreen.services.text_signals import TextAnalysis, analyze_text


def test_empty_transcript_yields_floor_values() -> None:
    result = analyze_text("")
    assert result == TextAnalysis(
        sentiment=0.0,
        negative_words=[],
        pronoun_usage=0.0,
        emotional_indicators=[],
        confidence=0.3,
    )


def test_whitespace_only_counts_as_empty() -> None:
    result = analyze_text("   \n\t ")
    assert result.pronoun_usage == 0.0
    assert result.confidence == 0.3


def test_negative_transcript() -> None:
    result = analyze_text("I feel hopeless and empty")
    assert result.sentiment < 0
    assert "hopeless" in result.negative_words
    assert result.emotional_indicators == ["hopeless", "empty"]


def test_positive_transcript() -> None:
    result = analyze_text("Today was a good day and I am happy")
    assert result.sentiment > 0
    assert result.negative_words == []


def test_sentiment_is_clamped() -> None:
    result = analyze_text("terrible awful horrible bad miserable hate disaster catastrophic")
    assert result.sentiment == -1.0


def test_pronoun_usage_is_scaled_and_clamped() -> None:
    # 1 pronoun in 20 words -> 0.05 * 10
    words = ["I"] + ["word"] * 19
    assert analyze_text(" ".join(words)).pronoun_usage == pytest.approx(0.5)
    assert analyze_text("I me my myself mine").pronoun_usage == 1.0


def test_pronoun_match_is_whole_word_after_lowercasing() -> None:
    assert analyze_text("MY Mine mind").pronoun_usage == 1.0
    assert analyze_text("mind mine!").pronoun_usage == pytest.approx(0.0)


def test_emotional_keywords_match_by_substring() -> None:
    result = analyze_text("The saddest part is feeling Worthless and panicked")
    assert result.emotional_indicators == ["saddest", "worthless", "panicked"]


def test_confidence_grows_with_length() -> None:
    assert analyze_text(" ".join(["word"] * 10)).confidence == 0.3
    assert analyze_text(" ".join(["word"] * 25)).confidence == pytest.approx(0.5)
    assert analyze_text(" ".join(["word"] * 80)).confidence == 1.0


def test_internal_faults_surface_as_analysis_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken(_: str):
        raise RuntimeError("lexicon unavailable")

    monkeypatch.setattr(text_signals, "_lexicon_hits", broken)
    with pytest.raises(AnalysisError):
        analyze_text("anything")
