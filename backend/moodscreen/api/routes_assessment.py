import json
import logging
import re
import secrets
import time
from datetime import datetime
from pathlib import Path
from typing import Any, NoReturn

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from starlette.concurrency import run_in_threadpool

from moodscreen.api.deps import get_store, get_upload_dir
from moodscreen.core.config import settings
from moodscreen.db.store import AssessmentStore
from moodscreen.schemas.assessment import (
    AssessmentCreateRequest,
    AssessmentOut,
    Demographics,
    PHQ9UpdateRequest,
    VoiceAnalysisRequest,
)
from moodscreen.services import assessment_service
from moodscreen.services.errors import (
    AnalysisError,
    AssessmentNotFoundError,
    IncompleteInputError,
    ValidationError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{settings.api_prefix}/assessments", tags=["assessment"])

CONSENT_VALUES = {"true", "on"}


def _raise_http(exc: Exception, failure: str) -> NoReturn:
    if isinstance(exc, AssessmentNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assessment not found") from exc
    if isinstance(exc, (ValidationError, IncompleteInputError)):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if isinstance(exc, AnalysisError):
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"{failure}: {exc}") from exc
    raise exc


def _to_response(assessment: dict[str, Any]) -> AssessmentOut:
    return AssessmentOut.model_validate(assessment)


def _stored_filename(original: str | None) -> str:
    safe = re.sub(r"\s+", "_", Path(original or "audio").name)
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}_{safe}"


def _parse_phq9_field(raw: str | None) -> list[int] | None:
    if raw is None or raw == "":
        return None
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="phq9 must be a JSON array of 9 integers",
        ) from exc
    if not isinstance(parsed, list):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="phq9 must be a JSON array of 9 integers")
    return parsed


@router.post("", response_model=AssessmentOut, status_code=status.HTTP_201_CREATED)
async def create_assessment(
    payload: AssessmentCreateRequest,
    store: AssessmentStore = Depends(get_store),
) -> AssessmentOut:
    # Request Example:
    # POST /api/assessments
    # {}
    #
    # Response Example:
    # 201
    # {"id":"5f0c...","demographics":null,"phq9_score":null,...,"created_at":"..."}
    initial: dict[str, Any] = {}
    try:
        if payload.demographics is not None:
            initial["demographics"] = payload.demographics.model_dump()
        assessment = await assessment_service.create_assessment(store, initial)
        if payload.phq9_responses:
            assessment = await assessment_service.save_phq9(
                store,
                assessment["id"],
                [r.model_dump() for r in payload.phq9_responses],
            )
    except Exception as exc:
        _raise_http(exc, "Failed to create assessment")
    return _to_response(assessment)


@router.get("", response_model=list[AssessmentOut])
async def list_assessments(
    start: datetime = Query(...),
    end: datetime = Query(...),
    store: AssessmentStore = Depends(get_store),
) -> list[AssessmentOut]:
    # Request Example:
    # GET /api/assessments?start=2026-10-01T00:00:00Z&end=2026-10-31T23:59:59Z
    try:
        rows = await assessment_service.list_assessments_between(store, start, end)
    except Exception as exc:
        _raise_http(exc, "Failed to list assessments")
    return [_to_response(row) for row in rows]


@router.get("/{assessment_id}", response_model=AssessmentOut)
async def get_assessment(
    assessment_id: str,
    store: AssessmentStore = Depends(get_store),
) -> AssessmentOut:
    try:
        assessment = await assessment_service.get_assessment(store, assessment_id)
    except Exception as exc:
        _raise_http(exc, "Failed to retrieve assessment")
    return _to_response(assessment)


@router.patch("/{assessment_id}/demographics", response_model=AssessmentOut)
async def update_demographics(
    assessment_id: str,
    payload: Demographics,
    store: AssessmentStore = Depends(get_store),
) -> AssessmentOut:
    # Request Example:
    # PATCH /api/assessments/5f0c.../demographics
    # {"name":"Sam","age":34,"gender":"non-binary","relationship_status":"single"}
    try:
        assessment = await assessment_service.save_demographics(store, assessment_id, payload.model_dump())
    except Exception as exc:
        _raise_http(exc, "Failed to save demographics")
    return _to_response(assessment)


@router.patch("/{assessment_id}/phq9", response_model=AssessmentOut)
async def update_phq9(
    assessment_id: str,
    payload: PHQ9UpdateRequest,
    store: AssessmentStore = Depends(get_store),
) -> AssessmentOut:
    # Request Example:
    # PATCH /api/assessments/5f0c.../phq9
    # {"responses":[{"question_index":0,"score":2},{"question_index":1,"score":1}]}
    try:
        assessment = await assessment_service.save_phq9(
            store,
            assessment_id,
            [r.model_dump() for r in payload.responses],
        )
    except Exception as exc:
        _raise_http(exc, "Failed to save PHQ-9")
    return _to_response(assessment)


@router.patch("/{assessment_id}/voice", response_model=AssessmentOut)
async def process_voice(
    assessment_id: str,
    payload: VoiceAnalysisRequest,
    store: AssessmentStore = Depends(get_store),
) -> AssessmentOut:
    # Request Example:
    # PATCH /api/assessments/5f0c.../voice
    # {"transcript":"I feel tired most days.","duration":12.5}
    try:
        assessment = await assessment_service.process_voice(store, assessment_id, payload.transcript, payload.duration)
    except Exception as exc:
        _raise_http(exc, "Voice analysis failed")
    return _to_response(assessment)


@router.post("/{assessment_id}/audio", response_model=AssessmentOut)
async def upload_audio(
    assessment_id: str,
    audio: UploadFile | None = File(default=None),
    consent: str | None = Form(default=None),
    phq9: str | None = Form(default=None),
    store: AssessmentStore = Depends(get_store),
    upload_dir: Path = Depends(get_upload_dir),
) -> AssessmentOut:
    # Demo only: the file is stored but not analysed; results come from the PHQ-9 simulator.
    #
    # Request Example:
    # POST /api/assessments/5f0c.../audio  (multipart/form-data)
    # audio=@answer.wav  consent=true  phq9=[0,1,2,1,0,0,1,0,0]
    if (consent or "").strip().lower() not in CONSENT_VALUES:
        logger.warning("Audio upload for %s rejected: missing consent", assessment_id)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Consent required to process audio")
    if audio is None or not audio.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Audio file is required")

    phq9_vector = _parse_phq9_field(phq9)

    filename = _stored_filename(audio.filename)
    target = upload_dir / filename
    await run_in_threadpool(target.write_bytes, await audio.read())

    try:
        assessment = await assessment_service.process_audio_upload(store, assessment_id, filename, phq9_vector)
    except Exception as exc:
        _raise_http(exc, "Audio processing failed")
    finally:
        if not settings.keep_uploads:
            target.unlink(missing_ok=True)
    return _to_response(assessment)


@router.post("/{assessment_id}/finalize", response_model=AssessmentOut)
async def finalize_assessment(
    assessment_id: str,
    store: AssessmentStore = Depends(get_store),
) -> AssessmentOut:
    try:
        assessment = await assessment_service.finalize(store, assessment_id)
    except Exception as exc:
        _raise_http(exc, "Failed to generate final assessment")
    return _to_response(assessment)
