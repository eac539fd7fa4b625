"""Extract a structured question from raw generation tool output.

The tool's output format is not guaranteed: it may emit newline-delimited JSON
events carrying incremental text, prose wrapping a JSON payload, or a bare
payload. Text is first reassembled from events, then a fixed sequence of
parsing strategies is tried and the first success wins.
"""
import json
import logging
import re
from typing import Any, Callable, Optional, Tuple

from pydantic import ValidationError

from errors import ExtractionFailure
from schemas.question import ExtractionResult

logger = logging.getLogger(__name__)

FENCE = "```"
JSON_FENCE_OPEN = re.compile(r"```json\b", re.IGNORECASE)
ANY_FENCE_OPEN = re.compile(r"```[\w-]*")
WHITESPACE = re.compile(r"\s*")

_DECODER = json.JSONDecoder()


def _event_text(event: Any) -> Optional[str]:
    """Pull the text payload out of one streamed event, if it carries any."""
    if not isinstance(event, dict):
        return None

    part = event.get("part")
    if event.get("type") == "text" and isinstance(part, dict) and part.get("text"):
        return part["text"]
    if event.get("type") == "content" and event.get("content"):
        return event["content"]
    if event.get("text"):
        return event["text"]
    if event.get("message"):
        return event["message"]
    return None


def extract_text_from_events(output: Optional[str]) -> Optional[str]:
    """
    Reassemble text from newline-delimited JSON events.

    Args:
        output: Raw combined tool output

    Returns:
        Concatenated event text, the raw output if no event carried text,
        or None for empty input
    """
    if not output:
        return None

    full_text = []
    for line in output.split("\n"):
        line = line.strip()
        if not line:
            continue
        try:
            event = json.loads(line)
        except json.JSONDecodeError:
            # Plain prose stays in the raw-output fallback; broken events are dropped
            continue
        text = _event_text(event)
        if isinstance(text, str):
            full_text.append(text)

    return "".join(full_text) or output


def _to_candidate(data: Any) -> Optional[ExtractionResult]:
    if not isinstance(data, dict):
        return None
    try:
        return ExtractionResult.model_validate(data)
    except ValidationError:
        return None


def _decode_at(text: str, start: int) -> Tuple[Any, int]:
    """Decode one JSON value beginning at ``start``; (None, -1) if there is none."""
    try:
        return _DECODER.raw_decode(text, start)
    except json.JSONDecodeError:
        return None, -1


def parse_direct(text: str) -> Optional[ExtractionResult]:
    try:
        data = json.loads(text.strip())
    except json.JSONDecodeError:
        return None
    return _to_candidate(data)


def _parse_fenced(text: str, opener: "re.Pattern[str]") -> Optional[ExtractionResult]:
    """
    Parse a JSON object that opens a fenced block and is followed by its closing fence.

    The object is decoded in place, so fences inside its strings (markdown
    explanations with code samples) never end the block early.
    """
    for match in opener.finditer(text):
        start = WHITESPACE.match(text, match.end()).end()
        data, end = _decode_at(text, start)
        if end == -1 or not text.startswith(FENCE, WHITESPACE.match(text, end).end()):
            continue
        candidate = _to_candidate(data)
        if candidate is not None:
            return candidate
    return None


def parse_json_fence(text: str) -> Optional[ExtractionResult]:
    return _parse_fenced(text, JSON_FENCE_OPEN)


def parse_any_fence(text: str) -> Optional[ExtractionResult]:
    return _parse_fenced(text, ANY_FENCE_OPEN)


def parse_braced_object(text: str) -> Optional[ExtractionResult]:
    """Parse the first ``{...}`` in the text that decodes to a usable JSON object."""
    start = text.find("{")
    while start != -1:
        data, end = _decode_at(text, start)
        if end != -1:
            candidate = _to_candidate(data)
            if candidate is not None:
                return candidate
        start = text.find("{", start + 1)
    return None


STRATEGIES: Tuple[Callable[[str], Optional[ExtractionResult]], ...] = (
    parse_direct,
    parse_json_fence,
    parse_any_fence,
    parse_braced_object,
)


def parse_response(output: Optional[str]) -> Optional[ExtractionResult]:
    """
    Turn raw tool output into a candidate record.

    Args:
        output: Raw combined tool output (may be None)

    Returns:
        ExtractionResult from the first strategy that succeeds, None otherwise
    """
    text = extract_text_from_events(output)
    if not text:
        return None

    for strategy in STRATEGIES:
        result = strategy(text)
        if result is not None:
            logger.debug(f"Extracted candidate via {strategy.__name__}")
            return result

    logger.debug(f"No strategy matched output: {text[:200]}")
    return None


def extract_candidate(output: Optional[str], record_id: Optional[str] = None) -> ExtractionResult:
    """Like parse_response, but raises ExtractionFailure instead of returning None."""
    result = parse_response(output)
    if result is None:
        raise ExtractionFailure("No structured record found in generation output", record_id)
    return result
