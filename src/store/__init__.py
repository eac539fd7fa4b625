"""Topic store persistence."""
from .persistence import QuestionStore, atomic_write_json, generate_unique_id, INDEX_FILENAME

__all__ = ["QuestionStore", "atomic_write_json", "generate_unique_id", "INDEX_FILENAME"]
