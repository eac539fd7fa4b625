"""Generation tool invocation and response extraction."""
from .invoker import GenerationAttempt, GenerationInvoker, RetryCoordinator
from .extraction import (
    extract_text_from_events,
    parse_response,
    extract_candidate,
    STRATEGIES,
)

__all__ = [
    "GenerationAttempt",
    "GenerationInvoker",
    "RetryCoordinator",
    "extract_text_from_events",
    "parse_response",
    "extract_candidate",
    "STRATEGIES",
]
