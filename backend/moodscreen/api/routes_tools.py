from dataclasses import asdict

from fastapi import APIRouter, HTTPException, status

from moodscreen.core.config import settings
from moodscreen.schemas.assessment import (
    PHQ9QuestionOut,
    PHQ9ScoreRequest,
    PHQ9ScoreResponse,
    SimulateRequest,
    SimulationResponse,
)
from moodscreen.services.errors import ValidationError
from moodscreen.services.scoring import (
    DISCLAIMER_TEXT,
    describe_severity,
    is_complete,
    latest_responses,
    phq9_questions,
    severity_from_total,
)
from moodscreen.services.simulator import simulate_from_phq

router = APIRouter(prefix=settings.api_prefix, tags=["tools"])


@router.get("/phq9/questions", response_model=list[PHQ9QuestionOut])
async def list_phq9_questions() -> list[PHQ9QuestionOut]:
    return [PHQ9QuestionOut.model_validate(q) for q in phq9_questions()]


@router.post("/phq9/score", response_model=PHQ9ScoreResponse)
async def preview_phq9_score(payload: PHQ9ScoreRequest) -> PHQ9ScoreResponse:
    # Request Example:
    # POST /api/phq9/score
    # {"responses":[{"question_index":0,"score":3},{"question_index":1,"score":2}]}
    #
    # Response Example:
    # 200
    # {"total_score":5,"severity":"mild","description":"Mild Depression","complete":false,"disclaimer":"..."}
    try:
        kept = latest_responses(r.model_dump() for r in payload.responses)
        total = sum(r.score for r in kept)
        band = severity_from_total(total)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return PHQ9ScoreResponse(
        total_score=total,
        severity=band.value,
        description=describe_severity(band),
        complete=is_complete(kept),
        disclaimer=DISCLAIMER_TEXT,
    )


@router.post("/simulate", response_model=SimulationResponse)
async def simulate(payload: SimulateRequest) -> SimulationResponse:
    # Request Example:
    # POST /api/simulate
    # {"phq9":[3,3,3,3,3,3,3,3,3],"salt":"file.wav"}
    try:
        result = simulate_from_phq(payload.phq9, payload.salt)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return SimulationResponse(**asdict(result))
