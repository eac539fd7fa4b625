"""Orchestrator - one maintenance run of the question improvement loop.

Run Stages:
    load      Read every topic store, tagging each question with its owner
    select    Keep questions with quality issues, oldest first, up to batch_size
    per candidate:
      generate  Prompt the generation tool (bounded, retried)
      extract   Parse and validate the structured candidate
      merge     Replace the question in its store, save, rebuild the index

    Each candidate is persisted (store + index) before the next one starts, so
    an interrupted run loses at most the candidate in flight. A failing
    candidate is recorded in the summary and the run moves on; only a failure
    to read the questions directory aborts the run.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence, Tuple

from errors import (
    DuplicateQuestion,
    GenerationError,
    ImprovementError,
    RecordNotFound,
    ValidationFailure,
)
from generation.extraction import extract_candidate
from generation.invoker import GenerationInvoker, RetryCoordinator
from quality.classify import classify
from quality.similarity import is_duplicate
from quality.validate import validate_candidate
from schemas.enums import DEFAULT_DIAGRAM_KIND
from schemas.question import ExtractionResult, QuestionRecord
from store.persistence import QuestionStore
from telemetry import Telemetry

from .config import ImprovementConfig
from .prompts import build_improvement_prompt
from .summary import RunSummary

logger = logging.getLogger(__name__)


@dataclass
class Candidate:
    """A question selected for improvement, with its owning topic store."""
    topic: str
    record: QuestionRecord
    issues: List[str]


def find_improvable(tagged: Sequence[Tuple[str, QuestionRecord]]) -> List[Candidate]:
    """
    Questions with at least one issue, oldest first.

    The sort is stable; questions without a parseable timestamp come first.
    """
    candidates = []
    for topic, record in tagged:
        issues = classify(record)
        if issues:
            candidates.append(Candidate(topic=topic, record=record, issues=issues))
    candidates.sort(key=lambda c: c.record.sort_key())
    return candidates


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a Z suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ImprovementOrchestrator:
    """Composes classification, generation, extraction and persistence into one run."""

    def __init__(
        self,
        config: ImprovementConfig,
        store: Optional[QuestionStore] = None,
        generate: Optional[Callable[[str], Optional[str]]] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.config = config
        self.store = store or QuestionStore(config.questions_dir, config.index_name)
        if generate is None:
            invoker = GenerationInvoker(config.command, config.timeout_seconds)
            generate = RetryCoordinator(
                invoker,
                max_attempts=config.max_attempts,
                retry_delay=config.retry_delay_seconds,
            )
        self.generate = generate
        self.now = now or (lambda: datetime.now(timezone.utc))
        self.telemetry = Telemetry()

    def run(self) -> RunSummary:
        """
        Execute one maintenance run.

        Returns:
            RunSummary with counts, improved ids and per-candidate failures

        Raises:
            StoreLoadError: If the questions directory cannot be read
        """
        with self.telemetry.span("load"):
            tagged = self.store.load_all()
        logger.info(f"Loaded {len(tagged)} questions from {self.store.questions_dir}")

        with self.telemetry.span("select"):
            improvable = find_improvable(tagged)
            batch = improvable[:self.config.batch_size]
        logger.info(f"Found {len(improvable)} questions needing improvement")

        summary = RunSummary(total_questions=len(tagged), needing_improvement=len(improvable))

        for i, candidate in enumerate(batch, 1):
            record = candidate.record
            logger.info(f"--- Question {i}/{len(batch)}: {record.id} ({candidate.topic}) ---")
            logger.info(f"Issues: {', '.join(candidate.issues)}")
            summary.processed += 1

            try:
                improved = self.improve_candidate(candidate)
            except ImprovementError as e:
                if e.outcome is None:
                    raise
                logger.warning(f"{record.id}: {e.outcome.value} - {e}")
                summary.record_failure(record.id, e.outcome.value, str(e))
                continue

            summary.improved_ids.append(improved.id)
            logger.info(f"Improved: {improved.id}")

        summary.timing = self.telemetry.to_dict()
        logger.info(
            f"Run complete: {summary.improved}/{summary.processed} improved, {summary.failed} failed"
        )
        return summary

    def improve_candidate(self, candidate: Candidate) -> QuestionRecord:
        """
        Generate, vet and merge an improvement for one question.

        Raises:
            ImprovementError: Subclass naming why this candidate was not improved
        """
        record_id = candidate.record.id
        prompt = build_improvement_prompt(candidate.record, candidate.issues)

        with self.telemetry.span("generate"):
            output = self.generate(prompt)
        if not output:
            raise GenerationError("Generation tool failed after retries", record_id)

        with self.telemetry.span("extract"):
            result = extract_candidate(output, record_id)
            validation = validate_candidate(result)
        if not validation.ok:
            raise ValidationFailure(f"Invalid candidate: {validation.reason}", record_id)

        with self.telemetry.span("merge"):
            return self.merge(candidate, result)

    def merge(self, candidate: Candidate, result: ExtractionResult) -> QuestionRecord:
        """Replace the question in its owning store, then persist store and index."""
        record_id = candidate.record.id
        question = result.question.strip()
        if not question.endswith("?"):
            question += "?"

        # Re-read: the store may have changed since the load stage
        questions = self.store.load(candidate.topic)
        position = next((i for i, q in enumerate(questions) if q.id == record_id), None)
        if position is None:
            raise RecordNotFound(f"{record_id} not found in {candidate.topic}", record_id)

        if self.config.check_duplicates:
            others = [q for q in questions if q.id != record_id]
            if is_duplicate(question, others, self.config.similarity_threshold):
                raise DuplicateQuestion(
                    f"Improved question duplicates another question in {candidate.topic}", record_id
                )

        current = questions[position]
        answer = result.answer
        if self.config.answer_max_length:
            answer = answer[:self.config.answer_max_length]

        updated = current.model_copy(update={
            "question": question,
            "answer": answer,
            "explanation": result.explanation,
            "diagram": result.diagram or current.diagram,
            "diagram_kind": current.diagram_kind or DEFAULT_DIAGRAM_KIND,
            "last_updated": format_timestamp(self.now()),
        })
        questions[position] = updated

        self.store.save(candidate.topic, questions)
        self.store.rebuild_index()
        return updated
