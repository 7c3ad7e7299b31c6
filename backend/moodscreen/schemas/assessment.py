from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, confloat, conint, constr

from moodscreen.services.scoring import DISCLAIMER_TEXT

LikertScore = conint(ge=0, le=3)
QuestionIndex = conint(ge=0, le=8)
SeverityLabel = Literal["minimal", "mild", "moderate", "moderately-severe", "severe"]
Gender = Literal["male", "female", "non-binary", "prefer-not-to-say"]
RelationshipStatus = Literal["single", "married", "relationship", "divorced", "widowed"]
TranscriptStr = constr(max_length=20000)


class Demographics(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    name: constr(min_length=1, max_length=100)
    age: conint(ge=18, le=100)
    gender: Gender
    relationship_status: RelationshipStatus


class PHQ9ResponseIn(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    question_index: QuestionIndex
    score: LikertScore


class AssessmentCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    demographics: Demographics | None = None
    phq9_responses: list[PHQ9ResponseIn] | None = None


class PHQ9UpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    responses: list[PHQ9ResponseIn] = Field(min_length=1, max_length=50)


class VoiceAnalysisRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    transcript: TranscriptStr
    duration: confloat(ge=0, le=3600)


class FinalAssessmentOut(BaseModel):
    model_config = ConfigDict(extra="forbid")

    severity: SeverityLabel
    confidence: confloat(ge=0.0, le=1.0)
    key_findings: list[str]
    risk_factors: list[str]
    recommendations: list[str]


class RecommendationsOut(BaseModel):
    model_config = ConfigDict(extra="forbid")

    immediate: list[str]
    professional: list[str]
    resources: list[str]


class AssessmentOut(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    demographics: Demographics | None = None
    phq9_responses: list[PHQ9ResponseIn] | None = None
    phq9_score: conint(ge=0, le=27) | None = None
    transcript: str | None = None
    # Either measured signals or a simulated record, see services.assessment_service.
    voice_analysis: dict[str, Any] | None = None
    final_assessment: FinalAssessmentOut | None = None
    severity: SeverityLabel | None = None
    recommendations: RecommendationsOut | None = None
    created_at: datetime
    disclaimer: str = Field(default=DISCLAIMER_TEXT)


class PHQ9AnswerOption(BaseModel):
    model_config = ConfigDict(extra="forbid")

    value: LikertScore
    label: str
    description: str


class PHQ9QuestionOut(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: QuestionIndex
    text: str
    options: list[PHQ9AnswerOption]


class PHQ9ScoreRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    responses: list[PHQ9ResponseIn] = Field(min_length=1, max_length=50)


class PHQ9ScoreResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    total_score: conint(ge=0, le=27)
    severity: SeverityLabel
    description: str
    complete: bool
    disclaimer: str = Field(default=DISCLAIMER_TEXT)


class SimulateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    # Length and bounds are checked by the simulator so it can report its own reason.
    phq9: list[int]
    salt: constr(max_length=255) | None = None


class SimulationResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    phq9_total: conint(ge=0, le=27)
    bias_applied: conint(ge=0, le=3)
    simulated_total: conint(ge=0, le=27)
    label: Literal["Minimal or None", "Mild", "Moderate", "Moderately Severe", "Severe"]
