"""Token-overlap similarity for duplicate question detection."""
import re
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from schemas.question import QuestionRecord

DEFAULT_THRESHOLD = 0.6


def normalize_text(text: str) -> str:
    """Lowercase, drop non-alphanumerics and collapse whitespace."""
    text = text.lower()
    text = re.sub(r"[^a-z0-9\s]", "", text)
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def calculate_similarity(text1: str, text2: str) -> float:
    """
    Jaccard similarity of the two texts' normalized token sets.

    Returns 0.0 when both texts normalize to nothing.
    """
    words1 = set(normalize_text(text1).split())
    words2 = set(normalize_text(text2).split())

    union = words1 | words2
    if not union:
        return 0.0
    return len(words1 & words2) / len(union)


def is_duplicate(
    text: str,
    existing: Iterable[QuestionRecord],
    threshold: float = DEFAULT_THRESHOLD,
) -> bool:
    """True if any existing question is at least ``threshold`` similar to ``text``."""
    return any(calculate_similarity(text, q.question) >= threshold for q in existing)


@dataclass
class DuplicatePair:
    first: QuestionRecord
    second: QuestionRecord
    similarity: float


def find_duplicates(
    questions: Sequence[QuestionRecord],
    threshold: float = DEFAULT_THRESHOLD,
) -> List[DuplicatePair]:
    """List every pair of questions at or above the threshold, in index order."""
    pairs = []
    for i in range(len(questions)):
        for j in range(i + 1, len(questions)):
            similarity = calculate_similarity(questions[i].question, questions[j].question)
            if similarity >= threshold:
                pairs.append(DuplicatePair(questions[i], questions[j], similarity))
    return pairs
