"""
Assessment lifecycle orchestration.

Each step reads the record from the injected store, runs the pure pipeline
pieces and writes the derived fields back:

    create -> demographics -> phq9 -> voice | audio (simulated) -> finalize
"""

import enum
import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import asdict
from datetime import datetime
from typing import Any

from moodscreen.db.store import AssessmentStore
from moodscreen.services.audio_features import (
    AudioFeatures,
    AudioMeasurementProvider,
    extract_audio_features,
    interpret_audio_features,
)
from moodscreen.services.classifier import classify_assessment
from moodscreen.services.errors import AssessmentNotFoundError, IncompleteInputError, ValidationError
from moodscreen.services.recommendations import recommend
from moodscreen.services.scoring import PHQ9Response, is_complete, latest_responses
from moodscreen.services.simulator import simulate_from_phq
from moodscreen.services.text_signals import TextAnalysis, analyze_text, neutral_text_analysis

logger = logging.getLogger(__name__)


SIMULATOR_SOURCE = "phq9_based_demo"
_AUDIO_FEATURE_KEYS = ("speech_rate", "pause_count", "avg_pitch", "duration", "energy_variance")


def _jsonable(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    return value


async def create_assessment(store: AssessmentStore, initial: dict[str, Any] | None = None) -> dict[str, Any]:
    assessment = await store.create(initial or {})
    logger.info("Assessment %s created", assessment["id"])
    return assessment


async def get_assessment(store: AssessmentStore, assessment_id: str) -> dict[str, Any]:
    assessment = await store.get(assessment_id)
    if assessment is None:
        raise AssessmentNotFoundError(assessment_id)
    return assessment


async def _update(store: AssessmentStore, assessment_id: str, fields: dict[str, Any]) -> dict[str, Any]:
    updated = await store.update(assessment_id, fields)
    if updated is None:
        raise AssessmentNotFoundError(assessment_id)
    return updated


async def save_demographics(store: AssessmentStore, assessment_id: str, demographics: dict[str, Any]) -> dict[str, Any]:
    return await _update(store, assessment_id, {"demographics": dict(demographics)})


async def save_phq9(
    store: AssessmentStore,
    assessment_id: str,
    responses: Iterable[PHQ9Response | Mapping[str, Any]],
) -> dict[str, Any]:
    kept = latest_responses(responses)
    total = sum(r.score for r in kept)
    updated = await _update(
        store,
        assessment_id,
        {"phq9_responses": [asdict(r) for r in kept], "phq9_score": total},
    )
    logger.info("Assessment %s PHQ-9 saved (%d item(s), total=%d)", assessment_id, len(kept), total)
    return updated


def build_voice_analysis(
    transcript: str,
    duration_seconds: float,
    provider: AudioMeasurementProvider | None = None,
) -> dict[str, Any]:
    features = extract_audio_features(transcript, duration_seconds, provider)
    interpretation = interpret_audio_features(features)
    text = analyze_text(transcript)
    return _jsonable(
        {
            "simulated": False,
            **asdict(features),
            "sentiment": text.sentiment,
            "text_analysis": asdict(text),
            "audio_interpretation": asdict(interpretation),
        }
    )


async def process_voice(
    store: AssessmentStore,
    assessment_id: str,
    transcript: str,
    duration_seconds: float,
    provider: AudioMeasurementProvider | None = None,
) -> dict[str, Any]:
    if not transcript or not transcript.strip():
        raise ValidationError("Transcript and duration are required")
    if duration_seconds is None or duration_seconds <= 0:
        raise ValidationError("Transcript and duration are required")

    await get_assessment(store, assessment_id)
    voice_analysis = build_voice_analysis(transcript, duration_seconds, provider)
    return await _update(store, assessment_id, {"transcript": transcript, "voice_analysis": voice_analysis})


def _stored_phq9_vector(assessment: dict[str, Any]) -> list[int] | None:
    stored = assessment.get("phq9_responses") or []
    try:
        responses = latest_responses(stored)
    except ValidationError:
        return None
    if not is_complete(responses):
        return None
    return [r.score for r in responses]


async def process_audio_upload(
    store: AssessmentStore,
    assessment_id: str,
    audio_filename: str,
    phq9: Sequence[int] | None = None,
) -> dict[str, Any]:
    assessment = await get_assessment(store, assessment_id)

    vector = list(phq9) if phq9 is not None else _stored_phq9_vector(assessment)
    if vector is None:
        raise IncompleteInputError(
            "PHQ-9 answers required. Send phq9 (JSON array) in the request or save PHQ-9 to the assessment first."
        )

    sim = simulate_from_phq(vector, audio_filename)
    voice_analysis = {
        "simulated": True,
        "simulator_source": SIMULATOR_SOURCE,
        **asdict(sim),
        "audio_filename": audio_filename,
    }
    logger.info("Assessment %s audio simulated (bias=%d)", assessment_id, sim.bias_applied)
    return await _update(store, assessment_id, {"transcript": None, "voice_analysis": voice_analysis})


def _pipeline_inputs(voice_analysis: dict[str, Any]) -> tuple[TextAnalysis, AudioFeatures | None]:
    if voice_analysis.get("simulated"):
        return neutral_text_analysis(), None

    text = TextAnalysis(**voice_analysis["text_analysis"])
    audio = AudioFeatures(**{key: voice_analysis[key] for key in _AUDIO_FEATURE_KEYS})
    return text, audio


def _simulated_finding(voice_analysis: dict[str, Any]) -> str:
    return (
        f"Simulated voice screening (demo): {voice_analysis['label']} "
        f"(simulated score {voice_analysis['simulated_total']}/27)"
    )


async def finalize(store: AssessmentStore, assessment_id: str) -> dict[str, Any]:
    assessment = await get_assessment(store, assessment_id)

    phq9_total = assessment.get("phq9_score")
    voice_analysis = assessment.get("voice_analysis")
    if phq9_total is None or not voice_analysis:
        raise IncompleteInputError("Assessment incomplete - missing PHQ-9 or voice analysis")

    text, audio = _pipeline_inputs(voice_analysis)
    result = classify_assessment(phq9_total, text, audio, assessment.get("demographics"))
    if voice_analysis.get("simulated"):
        result.key_findings.append(_simulated_finding(voice_analysis))
    categorized = recommend(result.severity)

    updated = await _update(
        store,
        assessment_id,
        {
            "final_assessment": _jsonable(asdict(result)),
            "severity": result.severity.value,
            "recommendations": asdict(categorized),
        },
    )
    logger.info("Assessment %s finalized (severity=%s)", assessment_id, result.severity.value)
    return updated


async def list_assessments_between(store: AssessmentStore, start: datetime, end: datetime) -> list[dict[str, Any]]:
    if start > end:
        raise ValidationError("start must not be after end")
    return await store.list_by_created_range(start, end)
