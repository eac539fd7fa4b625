"""Shared enums and tag constants used across quality checks and the improvement loop."""
from enum import Enum


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class IssueTag(str, Enum):
    """Quality defects detected on a stored question."""
    SHORT_ANSWER = "short_answer"
    LONG_ANSWER = "long_answer"
    SHORT_EXPLANATION = "short_explanation"
    TRUNCATED = "truncated"
    NO_CODE_EXAMPLES = "no_code_examples"
    NO_DIAGRAM = "no_diagram"
    SIMPLE_DIAGRAM = "simple_diagram"
    NO_QUESTION_MARK = "no_question_mark"
    TOO_SHORT_QUESTION = "too_short_question"
    NOT_INTERVIEW_STYLE = "not_interview_style"
    NO_EXAMPLES = "no_examples"


class Outcome(str, Enum):
    """Per-candidate result of an improvement run."""
    IMPROVED = "improved"
    GENERATION_FAILED = "generation_failed"
    INVALID_FORMAT = "invalid_format"
    NOT_FOUND = "not_found"
    DUPLICATE = "duplicate"
    STORE_FAILED = "store_failed"


# Failure kinds reported in run summaries, in display order
FAILURE_KINDS = tuple(o.value for o in Outcome if o is not Outcome.IMPROVED)

DEFAULT_DIAGRAM_KIND = "mermaid"
