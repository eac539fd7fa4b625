"""Quality checks - issue classification, candidate validation and duplicate detection."""
from .classify import classify, needs_improvement, RULES
from .validate import ValidationResult, validate_candidate, is_valid
from .similarity import (
    normalize_text,
    calculate_similarity,
    is_duplicate,
    find_duplicates,
    DuplicatePair,
)

__all__ = [
    "classify",
    "needs_improvement",
    "RULES",
    "ValidationResult",
    "validate_candidate",
    "is_valid",
    "normalize_text",
    "calculate_similarity",
    "is_duplicate",
    "find_duplicates",
    "DuplicatePair",
]
