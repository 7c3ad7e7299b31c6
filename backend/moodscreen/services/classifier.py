"""
Severity synthesis.

Combines the PHQ-9 band with transcript and speech signals into the final
rating. Transcript sentiment can lift a minimal or mild band but never lowers
any band, and never touches bands that are already moderate or above.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from moodscreen.services.audio_features import SLOW_SPEECH_RATE, AudioFeatures
from moodscreen.services.scoring import SeverityBand, severity_from_total
from moodscreen.services.text_signals import TextAnalysis

logger = logging.getLogger(__name__)


HIGH_RISK_TOTAL = 15
NEGATIVE_SENTIMENT = -0.5
STRONGLY_NEGATIVE_SENTIMENT = -0.7
NEUTRAL_SENTIMENT_FLOOR = -0.3
HOPELESSNESS_WORDS = frozenset({"hopeless", "worthless", "helpless"})

RISK_HIGH_TOTAL = "moderately-severe-or-severe symptoms"
RISK_NEGATIVE_EXPRESSION = "negative emotional expression"
RISK_HOPELESSNESS = "expressions of hopelessness/worthlessness"

FLAT_RECOMMENDATIONS: dict[SeverityBand, list[str]] = {
    SeverityBand.MINIMAL: [
        "Continue monitoring your mental health",
        "Consider stress management techniques",
    ],
    SeverityBand.MILD: [
        "Continue monitoring your mental health",
        "Consider stress management techniques",
    ],
    SeverityBand.MODERATE: [
        "Consider speaking with a mental health professional",
        "Practice daily self-care activities",
    ],
    SeverityBand.MODERATELY_SEVERE: [
        "Seek professional mental health support",
        "Consider crisis support if needed",
    ],
    SeverityBand.SEVERE: [
        "Seek professional mental health support",
        "Consider crisis support if needed",
    ],
}


@dataclass(slots=True)
class FinalAssessment:
    severity: SeverityBand
    confidence: float
    key_findings: list[str] = field(default_factory=list)
    risk_factors: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)


def _escalate_for_sentiment(severity: SeverityBand, sentiment: float) -> SeverityBand:
    if sentiment < NEGATIVE_SENTIMENT and severity == SeverityBand.MINIMAL:
        severity = SeverityBand.MILD
    elif sentiment < STRONGLY_NEGATIVE_SENTIMENT and severity in (SeverityBand.MINIMAL, SeverityBand.MILD):
        severity = SeverityBand.MODERATE
    return severity


def _tone(sentiment: float) -> str:
    if sentiment > 0:
        return "positive"
    if sentiment > NEUTRAL_SENTIMENT_FLOOR:
        return "neutral"
    return "negative"


def _key_findings(phq9_total: int, text: TextAnalysis, audio: AudioFeatures | None) -> list[str]:
    findings = [
        f"PHQ-9 depression screening score: {phq9_total}/27",
        f"Voice sentiment analysis: {_tone(text.sentiment)} tone detected",
    ]
    if audio is not None and audio.speech_rate < SLOW_SPEECH_RATE:
        findings.append("Slow speech rate may indicate low energy or mood")
    if text.emotional_indicators:
        findings.append(f"Emotional indicators detected: {', '.join(text.emotional_indicators[:3])}")
    return findings


def _risk_factors(phq9_total: int, text: TextAnalysis) -> list[str]:
    factors: list[str] = []
    if phq9_total >= HIGH_RISK_TOTAL:
        factors.append(RISK_HIGH_TOTAL)
    if text.sentiment < NEGATIVE_SENTIMENT:
        factors.append(RISK_NEGATIVE_EXPRESSION)
    if any(word in HOPELESSNESS_WORDS for word in text.emotional_indicators):
        factors.append(RISK_HOPELESSNESS)
    return factors


def _confidence(phq9_total: int, text: TextAnalysis, audio: AudioFeatures | None) -> float:
    raw = text.confidence * 0.5 + (0.3 if phq9_total > 0 else 0.1) + (0.2 if audio is not None else 0.0)
    return float(np.clip(raw, 0.5, 1.0))


def classify_assessment(
    phq9_total: int,
    text_analysis: TextAnalysis,
    audio_features: AudioFeatures | None,
    demographics: dict[str, Any] | None = None,
) -> FinalAssessment:
    # demographics are part of the contract but do not influence scoring yet.
    base = severity_from_total(phq9_total)
    severity = _escalate_for_sentiment(base, text_analysis.sentiment)
    if severity != base:
        logger.info("Severity escalated from %s to %s on transcript sentiment", base.value, severity.value)

    return FinalAssessment(
        severity=severity,
        confidence=_confidence(phq9_total, text_analysis, audio_features),
        key_findings=_key_findings(phq9_total, text_analysis, audio_features),
        risk_factors=_risk_factors(phq9_total, text_analysis),
        recommendations=list(FLAT_RECOMMENDATIONS[severity]),
    )
