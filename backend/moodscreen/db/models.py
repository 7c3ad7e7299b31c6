import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from moodscreen.db.session import Base


JSONType = JSON().with_variant(JSONB, "postgresql")


def _new_id() -> str:
    return str(uuid.uuid4())


class AssessmentRecord(Base):
    __tablename__ = "assessment"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    demographics: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    phq9_responses: Mapped[list[dict[str, int]] | None] = mapped_column(JSONType, nullable=True)
    phq9_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    transcript: Mapped[str | None] = mapped_column(Text, nullable=True)
    voice_analysis: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    final_assessment: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    severity: Mapped[str | None] = mapped_column(String(50), nullable=True)
    recommendations: Mapped[dict[str, list[str]] | None] = mapped_column(JSONType, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True, nullable=False)

    def to_dict(self) -> dict[str, Any]:
        return {column: getattr(self, column) for column in ASSESSMENT_FIELDS}


ASSESSMENT_FIELDS = (
    "id",
    "demographics",
    "phq9_responses",
    "phq9_score",
    "transcript",
    "voice_analysis",
    "final_assessment",
    "severity",
    "recommendations",
    "created_at",
)

MUTABLE_FIELDS = frozenset(ASSESSMENT_FIELDS) - {"id", "created_at"}
