class AssessmentError(Exception):
    """Base class for failures raised by the screening pipeline."""


class ValidationError(AssessmentError, ValueError):
    """Malformed or out-of-range input (PHQ-9 items, vector length, durations)."""


class IncompleteInputError(AssessmentError):
    """A pipeline step was requested before its prerequisite data exists."""


class AnalysisError(AssessmentError):
    """Unexpected fault while deriving text or audio signals."""


class AssessmentNotFoundError(AssessmentError, LookupError):
    def __init__(self, assessment_id: str) -> None:
        super().__init__(f"Assessment not found: {assessment_id}")
        self.assessment_id = assessment_id
