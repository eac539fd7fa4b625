"""Pydantic models for stored questions and generated candidates."""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import Difficulty

EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


class QuestionRecord(BaseModel):
    """
    A single interview question as stored in a topic file.

    On-disk keys are camelCase (``channel``, ``subChannel``, ``diagramType``,
    ``lastUpdated``); Python code uses the snake_case field names. Keys the
    pipeline does not model are kept as extras and written back unchanged.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(description="Identifier, unique within its topic store")
    topic: Optional[str] = Field(default=None, alias="channel")
    sub_topic: Optional[str] = Field(default=None, alias="subChannel")
    difficulty: Optional[Difficulty] = None
    question: str = ""
    answer: Optional[str] = None
    explanation: Optional[str] = None
    diagram: Optional[str] = None
    diagram_kind: Optional[str] = Field(default=None, alias="diagramType")
    last_updated: Optional[str] = Field(
        default=None,
        alias="lastUpdated",
        description="ISO-8601 timestamp, kept verbatim",
    )
    tags: List[str] = Field(default_factory=list)

    def to_storage(self) -> Dict[str, Any]:
        """Serialize with on-disk keys, omitting fields that were never set."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)

    def updated_at(self) -> Optional[datetime]:
        """Parse ``last_updated`` into an aware datetime (None if absent or unparseable)."""
        if not self.last_updated:
            return None
        try:
            parsed = datetime.fromisoformat(self.last_updated.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    def sort_key(self) -> datetime:
        """Timestamp for oldest-first ordering; missing timestamps sort earliest."""
        return self.updated_at() or EARLIEST


class ExtractionResult(BaseModel):
    """Structured candidate parsed out of generation tool output."""
    model_config = ConfigDict(extra="ignore")

    question: Optional[str] = None
    answer: Optional[str] = None
    explanation: Optional[str] = None
    diagram: Optional[str] = None
