"""Rule-based quality classification for stored questions."""
from typing import Callable, List, Optional, Tuple

from schemas.enums import IssueTag
from schemas.question import QuestionRecord

MIN_ANSWER_LENGTH = 20
MAX_ANSWER_LENGTH = 300
MIN_EXPLANATION_LENGTH = 100
MIN_DIAGRAM_LENGTH = 20
MIN_DIAGRAM_LINES = 3
MIN_QUESTION_LENGTH = 30

TRUNCATION_MARKER = "[truncated"
CODE_FENCE = "```"
INTERVIEW_WORDS = ("how", "what", "why", "when", "explain", "describe")


def _length(text: Optional[str]) -> int:
    return len(text) if text else 0


def _has_code_block(text: Optional[str]) -> bool:
    return bool(text) and CODE_FENCE in text


def short_answer(q: QuestionRecord) -> bool:
    return _length(q.answer) < MIN_ANSWER_LENGTH


def long_answer(q: QuestionRecord) -> bool:
    return _length(q.answer) > MAX_ANSWER_LENGTH


def short_explanation(q: QuestionRecord) -> bool:
    return _length(q.explanation) < MIN_EXPLANATION_LENGTH


def truncated(q: QuestionRecord) -> bool:
    return bool(q.explanation) and TRUNCATION_MARKER in q.explanation


def no_code_examples(q: QuestionRecord) -> bool:
    # Only checked when an explanation is present
    return bool(q.explanation) and not _has_code_block(q.explanation)


def no_diagram(q: QuestionRecord) -> bool:
    return _length(q.diagram) < MIN_DIAGRAM_LENGTH


def simple_diagram(q: QuestionRecord) -> bool:
    return bool(q.diagram) and len(q.diagram.split("\n")) < MIN_DIAGRAM_LINES


def no_question_mark(q: QuestionRecord) -> bool:
    return not q.question.endswith("?")


def too_short_question(q: QuestionRecord) -> bool:
    return len(q.question) < MIN_QUESTION_LENGTH


def not_interview_style(q: QuestionRecord) -> bool:
    text = q.question.lower()
    return not any(word in text for word in INTERVIEW_WORDS)


def no_examples(q: QuestionRecord) -> bool:
    explanation = q.explanation or ""
    return "example" not in explanation.lower() and not _has_code_block(explanation)


# Evaluated in this order; every rule runs regardless of the others
RULES: Tuple[Tuple[IssueTag, Callable[[QuestionRecord], bool]], ...] = (
    (IssueTag.SHORT_ANSWER, short_answer),
    (IssueTag.LONG_ANSWER, long_answer),
    (IssueTag.SHORT_EXPLANATION, short_explanation),
    (IssueTag.TRUNCATED, truncated),
    (IssueTag.NO_CODE_EXAMPLES, no_code_examples),
    (IssueTag.NO_DIAGRAM, no_diagram),
    (IssueTag.SIMPLE_DIAGRAM, simple_diagram),
    (IssueTag.NO_QUESTION_MARK, no_question_mark),
    (IssueTag.TOO_SHORT_QUESTION, too_short_question),
    (IssueTag.NOT_INTERVIEW_STYLE, not_interview_style),
    (IssueTag.NO_EXAMPLES, no_examples),
)


def classify(record: QuestionRecord) -> List[str]:
    """
    Detect quality issues on a question.

    Args:
        record: Question to inspect

    Returns:
        Ordered list of issue tags (empty if the question is in good shape)
    """
    return [tag.value for tag, rule in RULES if rule(record)]


def needs_improvement(record: QuestionRecord) -> bool:
    return bool(classify(record))
