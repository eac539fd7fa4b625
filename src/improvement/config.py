"""Run configuration for the improvement loop."""
import logging
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field

from generation.invoker import DEFAULT_COMMAND, DEFAULT_TIMEOUT, MAX_RETRIES, RETRY_DELAY
from quality.similarity import DEFAULT_THRESHOLD
from store.persistence import DEFAULT_QUESTIONS_DIR, INDEX_FILENAME

logger = logging.getLogger(__name__)

NUM_TO_IMPROVE = 5


class ImprovementConfig(BaseModel):
    """Constants for one maintenance run, passed explicitly to the orchestrator."""
    questions_dir: Path = Field(default=DEFAULT_QUESTIONS_DIR, description="Directory holding topic stores")
    index_name: str = Field(default=INDEX_FILENAME, description="Filename of the generated index")
    command: List[str] = Field(
        default_factory=lambda: list(DEFAULT_COMMAND),
        min_length=1,
        description="Generation CLI; the prompt is appended as the last argument",
    )
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    max_attempts: int = Field(default=MAX_RETRIES, ge=1)
    retry_delay_seconds: float = Field(default=RETRY_DELAY, ge=0)
    batch_size: int = Field(default=NUM_TO_IMPROVE, ge=1, description="Questions improved per run")
    similarity_threshold: float = Field(default=DEFAULT_THRESHOLD, ge=0, le=1)
    check_duplicates: bool = Field(
        default=False, description="Reject improvements too similar to another question in the same store"
    )
    answer_max_length: Optional[int] = Field(
        default=200, ge=1, description="Improved answers are cut to this length (None keeps them whole)"
    )


def load_config(path: Optional[Path] = None, **overrides) -> ImprovementConfig:
    """
    Load configuration from a YAML file and apply overrides.

    Args:
        path: Optional YAML file; missing keys fall back to defaults
        **overrides: Values that win over the file (None values are ignored)

    Returns:
        Validated ImprovementConfig
    """
    data = {}
    if path is not None:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        logger.debug(f"Loaded config from {path}")

    data.update({k: v for k, v in overrides.items() if v is not None})
    return ImprovementConfig.model_validate(data)
