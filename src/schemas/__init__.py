"""Question corpus schemas - Pydantic models and shared enums."""
from .enums import Difficulty, IssueTag, Outcome, FAILURE_KINDS, DEFAULT_DIAGRAM_KIND
from .question import QuestionRecord, ExtractionResult

__all__ = [
    "Difficulty",
    "IssueTag",
    "Outcome",
    "FAILURE_KINDS",
    "DEFAULT_DIAGRAM_KIND",
    "QuestionRecord",
    "ExtractionResult",
]
