"""
Speech feature heuristics.

Speech rate and pause count are derived from the transcript text. Pitch and
energy variance are NOT measured: they come from an AudioMeasurementProvider,
and the default provider draws placeholder values from fixed ranges. Treat
them as illustrative until a real signal-processing backend is plugged in.
"""

import enum
import logging
import re
from dataclasses import dataclass, field
from typing import Protocol

import numpy as np

from moodscreen.services.errors import ValidationError

logger = logging.getLogger(__name__)


PAUSE_PATTERN = re.compile(r"[.,;!?]")

PITCH_RANGE_HZ = (150.0, 250.0)
ENERGY_VARIANCE_RANGE = (0.0, 0.5)

SLOW_SPEECH_RATE = 1.5
RAPID_SPEECH_RATE = 4.0
FREQUENT_PAUSES_PER_10S = 3.0
LOW_PITCH_HZ = 160.0
FLAT_ENERGY_VARIANCE = 0.2

INDICATOR_SLOW_SPEECH = "slow speech / low energy"
INDICATOR_RAPID_SPEECH = "rapid speech / anxiety"
INDICATOR_FREQUENT_PAUSES = "frequent pauses"
INDICATOR_LOW_PITCH = "lower pitch / depressed mood"
INDICATOR_FLAT_ENERGY = "reduced energy variation / flat affect"


class RiskLevel(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


_RISK_ORDER = [RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH]


def _raise_to(current: RiskLevel, floor: RiskLevel) -> RiskLevel:
    return max(current, floor, key=_RISK_ORDER.index)


def _escalate(current: RiskLevel) -> RiskLevel:
    idx = min(_RISK_ORDER.index(current) + 1, len(_RISK_ORDER) - 1)
    return _RISK_ORDER[idx]


@dataclass(slots=True)
class AudioFeatures:
    speech_rate: float
    pause_count: int
    avg_pitch: float
    duration: float
    energy_variance: float


@dataclass(slots=True)
class AudioInterpretation:
    indicators: list[str] = field(default_factory=list)
    risk_level: RiskLevel = RiskLevel.LOW


class AudioMeasurementProvider(Protocol):
    def measure(self, transcript: str, duration_seconds: float) -> tuple[float, float]:
        """Return (avg_pitch_hz, energy_variance)."""
        ...


class PlaceholderMeasurementProvider:
    """Uniform random pitch/energy values. Not audio analysis."""

    def __init__(self, seed: int | None = None) -> None:
        self._rng = np.random.default_rng(seed)

    def measure(self, transcript: str, duration_seconds: float) -> tuple[float, float]:
        pitch = float(self._rng.uniform(*PITCH_RANGE_HZ))
        energy = float(self._rng.uniform(*ENERGY_VARIANCE_RANGE))
        # Rounding to 2 decimals can land on the open upper bound.
        return round(pitch), min(round(energy, 2), 0.49)


def _word_count(transcript: str) -> int:
    return len((transcript or "").split())


def extract_audio_features(
    transcript: str,
    duration_seconds: float,
    provider: AudioMeasurementProvider | None = None,
) -> AudioFeatures:
    if duration_seconds is None or duration_seconds < 0:
        raise ValidationError(f"Duration must be a non-negative number of seconds, got {duration_seconds!r}.")

    measurer = provider or PlaceholderMeasurementProvider()
    avg_pitch, energy_variance = measurer.measure(transcript or "", float(duration_seconds))

    speech_rate = _word_count(transcript) / max(float(duration_seconds), 1.0)
    pause_count = len(PAUSE_PATTERN.findall(transcript or ""))

    return AudioFeatures(
        speech_rate=round(speech_rate, 2),
        pause_count=pause_count,
        avg_pitch=float(avg_pitch),
        duration=round(float(duration_seconds), 2),
        energy_variance=float(energy_variance),
    )


def _pauses_are_frequent(features: AudioFeatures) -> bool:
    if features.pause_count == 0:
        return False
    if features.duration <= 0:
        return True
    return features.pause_count / (features.duration / 10.0) > FREQUENT_PAUSES_PER_10S


def interpret_audio_features(features: AudioFeatures) -> AudioInterpretation:
    """Collect every matching indicator; risk only ever moves low -> medium -> high."""
    indicators: list[str] = []
    risk = RiskLevel.LOW

    if features.speech_rate < SLOW_SPEECH_RATE:
        indicators.append(INDICATOR_SLOW_SPEECH)
        risk = _raise_to(risk, RiskLevel.MEDIUM)
    if features.speech_rate > RAPID_SPEECH_RATE:
        indicators.append(INDICATOR_RAPID_SPEECH)
        risk = _raise_to(risk, RiskLevel.MEDIUM)

    if _pauses_are_frequent(features):
        indicators.append(INDICATOR_FREQUENT_PAUSES)
        risk = _escalate(risk)

    if features.avg_pitch < LOW_PITCH_HZ:
        indicators.append(INDICATOR_LOW_PITCH)
        risk = _escalate(risk)

    if features.energy_variance < FLAT_ENERGY_VARIANCE:
        indicators.append(INDICATOR_FLAT_ENERGY)
        risk = _escalate(risk)

    logger.debug("Audio interpretation: %d indicator(s), risk=%s", len(indicators), risk.value)
    return AudioInterpretation(indicators=indicators, risk_level=risk)
