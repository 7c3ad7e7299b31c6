from dataclasses import dataclass, field

from moodscreen.services.scoring import SeverityBand


@dataclass(slots=True)
class Recommendations:
    immediate: list[str] = field(default_factory=list)
    professional: list[str] = field(default_factory=list)
    resources: list[str] = field(default_factory=list)


_URGENT = {
    "immediate": [
        "Crisis support planning",
        "Daily check-ins with support person",
    ],
    "professional": [
        "Urgent psychiatric evaluation",
        "Intensive therapy program",
        "Medication consultation",
    ],
    "resources": [],
}

RECOMMENDATION_TABLE: dict[SeverityBand, dict[str, list[str]]] = {
    SeverityBand.MINIMAL: {
        "immediate": [
            "Continue maintaining healthy habits",
            "Regular exercise and sleep schedule",
        ],
        "professional": [],
        "resources": [
            "Mental wellness apps",
            "Stress management techniques",
        ],
    },
    SeverityBand.MILD: {
        "immediate": [
            "Breathing exercises",
            "Mindfulness meditation",
            "Social connection activities",
        ],
        "professional": ["Consider counseling sessions"],
        "resources": [],
    },
    SeverityBand.MODERATE: {
        "immediate": [
            "Daily mood tracking",
            "Structured activity scheduling",
            "Breathing exercises",
        ],
        "professional": [
            "Schedule therapy appointment",
            "Consider psychiatric evaluation",
        ],
        "resources": [],
    },
    SeverityBand.MODERATELY_SEVERE: _URGENT,
    SeverityBand.SEVERE: _URGENT,
}


def recommend(severity: SeverityBand | str) -> Recommendations:
    band = SeverityBand(severity)
    row = RECOMMENDATION_TABLE[band]
    # Copy so callers can't mutate the shared table.
    return Recommendations(
        immediate=list(row["immediate"]),
        professional=list(row["professional"]),
        resources=list(row["resources"]),
    )
