"""Duplicate removal across topic stores."""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from quality.similarity import DEFAULT_THRESHOLD, find_duplicates
from store.persistence import QuestionStore

logger = logging.getLogger(__name__)


@dataclass
class RemovedDuplicate:
    topic: str
    removed_id: str
    kept_id: str
    similarity: float


@dataclass
class DedupeReport:
    topics_processed: int = 0
    clean_topics: List[str] = field(default_factory=list)
    removed: List[RemovedDuplicate] = field(default_factory=list)
    total_remaining: int = 0

    def to_output(self) -> Dict[str, Any]:
        return {
            "removed_count": len(self.removed),
            "channels_processed": self.topics_processed,
            "channels_clean": len(self.clean_topics),
            "total_questions": self.total_remaining,
            "removed_ids": ",".join(r.removed_id for r in self.removed),
        }


def dedupe_topics(store: QuestionStore, threshold: float = DEFAULT_THRESHOLD) -> DedupeReport:
    """
    Remove at most one duplicate question per topic.

    Of the first duplicate pair found, the older question is kept (ties keep
    the second one). The index is rebuilt once at the end.
    """
    report = DedupeReport()

    for topic in store.list_topics():
        report.topics_processed += 1
        questions = store.load(topic)
        pairs = find_duplicates(questions, threshold)

        if not pairs:
            report.clean_topics.append(topic)
            report.total_remaining += len(questions)
            continue

        pair = pairs[0]
        if pair.first.sort_key() < pair.second.sort_key():
            keep, remove = pair.first, pair.second
        else:
            keep, remove = pair.second, pair.first

        remaining = [q for q in questions if q.id != remove.id]
        store.save(topic, remaining)
        report.removed.append(RemovedDuplicate(topic, remove.id, keep.id, round(pair.similarity, 2)))
        report.total_remaining += len(remaining)
        logger.info(f"[{topic}] Keeping {keep.id}, removed {remove.id} ({pair.similarity:.2f} similar)")

    store.rebuild_index()
    return report
