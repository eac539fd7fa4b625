"""Per-topic question storage and derived index generation."""
import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

from pydantic import ValidationError

from errors import StoreError, StoreLoadError
from schemas.question import QuestionRecord

logger = logging.getLogger(__name__)

DEFAULT_QUESTIONS_DIR = Path("data/questions")
INDEX_FILENAME = "index.json"


def atomic_write_json(path: Path, data: Any) -> None:
    """Write JSON to ``path`` via a temp file in the same directory and os.replace."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


@dataclass
class QuestionStore:
    """
    Manages topic stores and the generated index.

    Directory structure:
        {questions_dir}/
            system-design.json   (ordered array of questions)
            kubernetes.json
            ...
            index.json           (generated: {topic: [questions...]}, never hand-edited)
    """
    questions_dir: Path = DEFAULT_QUESTIONS_DIR
    index_name: str = INDEX_FILENAME

    def __post_init__(self):
        self.questions_dir = Path(self.questions_dir)

    @property
    def index_path(self) -> Path:
        return self.questions_dir / self.index_name

    def topic_path(self, topic: str) -> Path:
        """Get the store file for a topic."""
        return self.questions_dir / f"{topic}.json"

    def list_topics(self) -> List[str]:
        """
        Enumerate topics present on disk, sorted by name.

        Raises:
            StoreLoadError: If the questions directory is missing or unreadable
        """
        if not self.questions_dir.is_dir():
            raise StoreLoadError(f"Questions directory not found: {self.questions_dir}")
        try:
            files = sorted(self.questions_dir.glob("*.json"))
        except OSError as e:
            raise StoreLoadError(f"Cannot read {self.questions_dir}: {e}")
        return [f.stem for f in files if f.is_file() and f.name != self.index_name]

    def load_raw(self, topic: str) -> List[Any]:
        """
        Read one topic store as plain JSON, without schema validation.

        Returns:
            Stored items in order; empty if the file is missing, unreadable
            or not a JSON array
        """
        path = self.topic_path(topic)
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            # JSONDecodeError is a ValueError
            logger.warning(f"Ignoring unreadable store {path}: {e}")
            return []
        if not isinstance(data, list):
            logger.warning(f"Ignoring store {path}: expected a JSON array, got {type(data).__name__}")
            return []
        return data

    def load(self, topic: str) -> List[QuestionRecord]:
        """
        Load one topic store.

        A store with any off-schema record loads as empty as a whole.

        Returns:
            Questions in stored order; empty if the file is missing or malformed
        """
        try:
            return [QuestionRecord.model_validate(item) for item in self.load_raw(topic)]
        except ValidationError as e:
            logger.warning(f"Ignoring malformed store {self.topic_path(topic)}: {e}")
            return []

    def save(self, topic: str, questions: Sequence[QuestionRecord]) -> Path:
        """
        Overwrite a topic store with the full question sequence.

        Raises:
            StoreError: If identifiers are not unique or the file cannot be written
        """
        seen = set()
        for q in questions:
            if q.id in seen:
                raise StoreError(f"Duplicate id {q.id!r} in topic {topic!r}", q.id)
            seen.add(q.id)

        path = self.topic_path(topic)
        try:
            atomic_write_json(path, [q.to_storage() for q in questions])
        except OSError as e:
            raise StoreError(f"Failed to write {path}: {e}")
        logger.debug(f"Saved {len(questions)} questions to {path}")
        return path

    def load_all(self) -> List[Tuple[str, QuestionRecord]]:
        """Load every store, tagging each question with its owning topic."""
        tagged = []
        for topic in self.list_topics():
            tagged.extend((topic, q) for q in self.load(topic))
        return tagged

    def rebuild_index(self) -> List[str]:
        """
        Regenerate the index from every topic store on disk.

        The index is fully derived; it is rewritten from scratch on each call
        from the stores as stored, including records that fail validation.

        Returns:
            Topics included in the index
        """
        topics = self.list_topics()
        index: Dict[str, List[Any]] = {topic: self.load_raw(topic) for topic in topics}
        try:
            atomic_write_json(self.index_path, index)
        except OSError as e:
            raise StoreError(f"Failed to write index {self.index_path}: {e}")
        logger.debug(f"Rebuilt index with {len(topics)} topics")
        return topics

    def topic_counts(self) -> Dict[str, int]:
        """Number of questions per topic."""
        return {topic: len(self.load_raw(topic)) for topic in self.list_topics()}


def generate_unique_id(questions: Sequence[QuestionRecord], topic: str) -> str:
    """
    Next free identifier for a topic, e.g. "sy-12" for system-design.

    Counting starts after the current number of questions and skips taken ids.
    """
    prefix = topic[:2]
    taken = {q.id for q in questions}
    counter = len(questions) + 1
    while f"{prefix}-{counter}" in taken:
        counter += 1
    return f"{prefix}-{counter}"
