"""
Deterministic PHQ-9 based simulator for demo audio uploads.

No audio is analysed. A small bias derived from a SHA-256 hash of the salt
(usually the stored upload filename) is subtracted from the PHQ-9 total, so
the same file and answers always produce the same simulated result.
"""

import hashlib
from collections.abc import Sequence
from dataclasses import dataclass

from moodscreen.services.errors import ValidationError
from moodscreen.services.scoring import PHQ9_ITEM_COUNT, PHQ9_MAX_ITEM_SCORE


DEFAULT_SALT = "nofile"
BIAS_TABLE = {0: 0, 1: 0, 2: 1, 3: 1, 4: 2, 5: 3}


@dataclass(slots=True, frozen=True)
class SimulationResult:
    phq9_total: int
    bias_applied: int
    simulated_total: int
    label: str


def compute_phq9_total(phq9: Sequence[int]) -> int:
    if isinstance(phq9, (str, bytes)) or not isinstance(phq9, Sequence) or len(phq9) != PHQ9_ITEM_COUNT:
        raise ValidationError("PHQ-9 must be an array of 9 integers (0-3)")
    for value in phq9:
        if type(value) is not int or value < 0 or value > PHQ9_MAX_ITEM_SCORE:
            raise ValidationError("PHQ-9 values must be integers between 0 and 3")
    return sum(phq9)


def deterministic_bias(salt: str) -> int:
    digest = hashlib.sha256(salt.encode("utf-8")).hexdigest()
    return BIAS_TABLE[int(digest[:8], 16) % 6]


def simulated_label(total: int) -> str:
    if total <= 4:
        return "Minimal or None"
    if total <= 9:
        return "Mild"
    if total <= 14:
        return "Moderate"
    if total <= 19:
        return "Moderately Severe"
    return "Severe"


def simulate_from_phq(phq9: Sequence[int], salt: str | None = None) -> SimulationResult:
    total = compute_phq9_total(phq9)
    bias = deterministic_bias(DEFAULT_SALT if salt is None else salt)
    simulated = max(0, total - bias)
    return SimulationResult(
        phq9_total=total,
        bias_applied=bias,
        simulated_total=simulated,
        label=simulated_label(simulated),
    )
