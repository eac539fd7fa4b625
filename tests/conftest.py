"""Shared test fixtures and configuration."""
import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from schemas.question import QuestionRecord
from store.persistence import QuestionStore

FIXED_NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

GOOD_QUESTION = {
    "id": "sd-1",
    "channel": "system-design",
    "subChannel": "caching",
    "difficulty": "intermediate",
    "question": "How does consistent hashing distribute keys across cache nodes?",
    "answer": "It maps keys and nodes onto a ring so only nearby keys move.",
    "explanation": (
        "## Overview\n"
        "Consistent hashing places nodes on a ring. For example, adding a node "
        "moves only the keys between it and its predecessor.\n\n"
        "```python\nring.add(node)\nowner = ring.lookup(key)\n```\n"
    ),
    "diagram": "graph TD\n  A[Client] --> B[Hash Ring]\n  B --> C[Node]",
    "diagramType": "mermaid",
    "lastUpdated": "2026-02-20T09:00:00.000Z",
    "tags": ["caching", "distributed-systems"],
}


@pytest.fixture
def good_question_data():
    """A stored question with no quality issues (on-disk keys)."""
    return dict(GOOD_QUESTION)


@pytest.fixture
def make_record():
    """Factory for QuestionRecord built from the good question plus overrides."""
    def _make(**overrides) -> QuestionRecord:
        data = dict(GOOD_QUESTION)
        data.update(overrides)
        return QuestionRecord.model_validate(data)
    return _make


@pytest.fixture
def questions_dir(tmp_path) -> Path:
    path = tmp_path / "questions"
    path.mkdir()
    return path


@pytest.fixture
def store(questions_dir) -> QuestionStore:
    return QuestionStore(questions_dir)


@pytest.fixture
def write_topic(questions_dir):
    """Write raw question dicts to a topic file."""
    def _write(topic: str, questions: list) -> Path:
        path = questions_dir / f"{topic}.json"
        path.write_text(json.dumps(questions, indent=2))
        return path
    return _write


class FakeGenerator:
    """Scripted stand-in for the retrying generation callable."""

    def __init__(self, responses, on_call=None):
        self.responses = list(responses)
        self.prompts = []
        self.on_call = on_call

    def __call__(self, prompt):
        self.prompts.append(prompt)
        if self.on_call:
            self.on_call(len(self.prompts))
        if not self.responses:
            return None
        return self.responses.pop(0)


@pytest.fixture
def fake_generator():
    return FakeGenerator
