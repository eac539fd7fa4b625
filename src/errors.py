"""Failure taxonomy for the improvement pipeline.

Per-candidate failures carry the outcome kind they are reported under, so the
orchestrator can catch ``ImprovementError`` once and record it in the run
summary. Only ``StoreLoadError`` aborts a whole run.
"""
from typing import Optional

from schemas.enums import Outcome


class ImprovementError(Exception):
    """Base class for pipeline failures."""
    outcome: Optional[Outcome] = None
    retryable = False

    def __init__(self, message: str, record_id: Optional[str] = None):
        super().__init__(message)
        self.record_id = record_id


class GenerationError(ImprovementError):
    """External generation process did not produce output."""
    outcome = Outcome.GENERATION_FAILED
    retryable = True


class GenerationTimeout(GenerationError):
    """Process exceeded its deadline and was killed."""


class GenerationProcessError(GenerationError):
    """Process could not be spawned or was terminated abnormally."""


class ExtractionFailure(ImprovementError):
    """No parsing strategy produced a structured record."""
    outcome = Outcome.INVALID_FORMAT


class ValidationFailure(ImprovementError):
    """Extracted record is below the structural minimums."""
    outcome = Outcome.INVALID_FORMAT


class RecordNotFound(ImprovementError):
    """Owning store no longer contains the candidate's identifier."""
    outcome = Outcome.NOT_FOUND


class DuplicateQuestion(ImprovementError):
    """Improved question is too similar to another question in its store."""
    outcome = Outcome.DUPLICATE


class StoreError(ImprovementError):
    """A topic store could not be written."""
    outcome = Outcome.STORE_FAILED


class StoreLoadError(StoreError):
    """The questions directory could not be read at all."""
    outcome = None
