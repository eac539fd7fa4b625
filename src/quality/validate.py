"""Structural validation of generated candidates."""
from dataclasses import dataclass
from typing import Optional

from schemas.question import ExtractionResult

# Minimum lengths are exclusive: a field must be strictly longer than these
MIN_QUESTION_CHARS = 10
MIN_ANSWER_CHARS = 5
MIN_EXPLANATION_CHARS = 20


@dataclass
class ValidationResult:
    ok: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.ok


def validate_candidate(result: Optional[ExtractionResult]) -> ValidationResult:
    """
    Check minimal structural constraints on an extracted candidate.

    Does not repair anything; the first unmet constraint is reported.

    Args:
        result: Candidate from the response extractor (None fails)

    Returns:
        ValidationResult with ok flag and failure reason
    """
    if result is None:
        return ValidationResult(False, "no candidate")

    checks = (
        ("question", result.question, MIN_QUESTION_CHARS),
        ("answer", result.answer, MIN_ANSWER_CHARS),
        ("explanation", result.explanation, MIN_EXPLANATION_CHARS),
    )
    for name, value, minimum in checks:
        length = len(value) if value else 0
        if length <= minimum:
            return ValidationResult(
                False, f"{name} too short ({length} chars, need more than {minimum})"
            )

    return ValidationResult(True)


def is_valid(result: Optional[ExtractionResult]) -> bool:
    return validate_candidate(result).ok
