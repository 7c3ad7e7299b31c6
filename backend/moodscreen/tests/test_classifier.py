import pytest

from moodscreen.services.audio_features import AudioFeatures
from moodscreen.services.classifier import (
    RISK_HIGH_TOTAL,
    RISK_HOPELESSNESS,
    RISK_NEGATIVE_EXPRESSION,
    classify_assessment,
)
from moodscreen.services.recommendations import recommend
from moodscreen.services.scoring import SeverityBand
from moodscreen.services.text_signals import TextAnalysis, analyze_text


def _text(sentiment: float = 0.0, indicators: list[str] | None = None, confidence: float = 0.6) -> TextAnalysis:
    return TextAnalysis(
        sentiment=sentiment,
        negative_words=[],
        pronoun_usage=0.0,
        emotional_indicators=list(indicators or []),
        confidence=confidence,
    )


def _audio(speech_rate: float = 2.5) -> AudioFeatures:
    return AudioFeatures(speech_rate=speech_rate, pause_count=0, avg_pitch=200.0, duration=30.0, energy_variance=0.3)


@pytest.mark.parametrize(
    ("total", "sentiment", "expected"),
    [
        (0, 0.2, SeverityBand.MINIMAL),
        (0, -0.6, SeverityBand.MILD),
        (0, -0.8, SeverityBand.MILD),
        (6, -0.6, SeverityBand.MILD),
        (6, -0.8, SeverityBand.MODERATE),
        (12, -1.0, SeverityBand.MODERATE),
        (18, -1.0, SeverityBand.MODERATELY_SEVERE),
        (22, 0.9, SeverityBand.SEVERE),
    ],
)
def test_sentiment_escalation_only_lifts_lower_bands(total: int, sentiment: float, expected: SeverityBand) -> None:
    assert classify_assessment(total, _text(sentiment), _audio()).severity == expected


def test_escalation_raises_at_most_one_band() -> None:
    for total in (0, 2, 4):
        assert classify_assessment(total, _text(-1.0), None).severity == SeverityBand.MILD
    assert classify_assessment(5, _text(-1.0), None).severity == SeverityBand.MODERATE


def test_escalation_thresholds_are_strict() -> None:
    assert classify_assessment(0, _text(-0.5), _audio()).severity == SeverityBand.MINIMAL
    assert classify_assessment(6, _text(-0.7), _audio()).severity == SeverityBand.MILD


@pytest.mark.parametrize(
    ("sentiment", "tone"),
    [(0.4, "positive"), (0.0, "neutral"), (-0.2, "neutral"), (-0.3, "negative"), (-0.9, "negative")],
)
def test_key_findings_tone(sentiment: float, tone: str) -> None:
    findings = classify_assessment(3, _text(sentiment), _audio()).key_findings
    assert findings[0] == "PHQ-9 depression screening score: 3/27"
    assert findings[1] == f"Voice sentiment analysis: {tone} tone detected"
    assert len(findings) == 2


def test_key_findings_add_slow_speech_and_first_three_indicators() -> None:
    result = classify_assessment(
        8,
        _text(indicators=["tired", "lonely", "numb", "anxious"]),
        _audio(speech_rate=1.2),
    )
    assert result.key_findings[2:] == [
        "Slow speech rate may indicate low energy or mood",
        "Emotional indicators detected: tired, lonely, numb",
    ]


def test_risk_factors() -> None:
    assert classify_assessment(14, _text(-0.5), _audio()).risk_factors == []

    result = classify_assessment(15, _text(-0.6, indicators=["worthless"]), _audio())
    assert result.risk_factors == [RISK_HIGH_TOTAL, RISK_NEGATIVE_EXPRESSION, RISK_HOPELESSNESS]


def test_hopelessness_needs_exact_indicator_word() -> None:
    result = classify_assessment(3, _text(indicators=["hopeless."]), _audio())
    assert RISK_HOPELESSNESS not in result.risk_factors


@pytest.mark.parametrize(
    ("severity_total", "expected"),
    [
        (2, ["Continue monitoring your mental health", "Consider stress management techniques"]),
        (7, ["Continue monitoring your mental health", "Consider stress management techniques"]),
        (12, ["Consider speaking with a mental health professional", "Practice daily self-care activities"]),
        (17, ["Seek professional mental health support", "Consider crisis support if needed"]),
        (25, ["Seek professional mental health support", "Consider crisis support if needed"]),
    ],
)
def test_flat_recommendations_follow_final_severity(severity_total: int, expected: list[str]) -> None:
    assert classify_assessment(severity_total, _text(), _audio()).recommendations == expected


def test_confidence_blend_and_clamp() -> None:
    assert classify_assessment(0, _text(confidence=0.3), None).confidence == 0.5
    assert classify_assessment(5, _text(confidence=0.6), None).confidence == pytest.approx(0.6)
    assert classify_assessment(5, _text(confidence=0.6), _audio()).confidence == pytest.approx(0.8)
    assert classify_assessment(5, _text(confidence=1.0), _audio()).confidence == pytest.approx(1.0)


def test_demographics_do_not_change_the_result() -> None:
    text, audio = _text(-0.6, ["sad"]), _audio(1.0)
    without = classify_assessment(9, text, audio)
    with_demo = classify_assessment(
        9, text, audio, {"name": "Sam", "age": 40, "gender": "male", "relationship_status": "single"}
    )
    assert with_demo == without


def test_classification_is_idempotent() -> None:
    text, audio = _text(-0.75, ["hopeless"]), _audio(1.1)
    assert classify_assessment(4, text, audio) == classify_assessment(4, text, audio)


def test_end_to_end_hopeless_scenario() -> None:
    total = 9 * 2
    text = analyze_text("I feel hopeless and empty")
    audio = AudioFeatures(speech_rate=0.42, pause_count=0, avg_pitch=200.0, duration=12.0, energy_variance=0.3)

    result = classify_assessment(total, text, audio)

    assert text.sentiment < 0
    assert {"hopeless", "empty"} <= set(text.emotional_indicators)
    assert result.severity == SeverityBand.MODERATELY_SEVERE
    assert RISK_HIGH_TOTAL in result.risk_factors
    assert RISK_HOPELESSNESS in result.risk_factors
    assert result.recommendations[0] == "Seek professional mental health support"
    assert "Urgent psychiatric evaluation" in recommend(result.severity).professional
