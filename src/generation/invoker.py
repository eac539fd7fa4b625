"""External generation CLI invocation with a hard deadline and fixed retries.

Invocation Pattern:
    The generation tool is run as a one-shot subprocess with the prompt as its
    last argument, e.g.:
    opencode run --format json "<prompt>"

    stdout and stderr are merged into a single buffer because the tool may
    stream JSON events on one and plain text on the other. Calls are strictly
    sequential; there is never more than one child process in flight.
"""
import logging
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from errors import GenerationError, GenerationProcessError, GenerationTimeout

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = ("opencode", "run", "--format", "json")
DEFAULT_TIMEOUT = 120.0
MAX_RETRIES = 3
RETRY_DELAY = 10.0


@dataclass
class GenerationAttempt:
    """One call to the generation tool; discarded once the call returns."""
    prompt: str
    deadline: float
    output: str = ""

    def remaining(self) -> float:
        return max(0.0, self.deadline - time.monotonic())


class GenerationInvoker:
    """Spawn the generation tool for a single prompt."""

    def __init__(
        self,
        command: Sequence[str] = DEFAULT_COMMAND,
        timeout: float = DEFAULT_TIMEOUT,
        cwd: Optional[Path] = None,
    ):
        self.command = list(command)
        self.timeout = timeout
        self.cwd = cwd

    def build_command(self, prompt: str) -> List[str]:
        return [*self.command, prompt]

    def invoke(self, prompt: str) -> Optional[str]:
        """
        Run the tool once.

        Args:
            prompt: Prompt text passed as the final argument

        Returns:
            Combined stdout/stderr with undecodable bytes replaced, or None if
            the tool printed nothing

        Raises:
            GenerationTimeout: If the deadline passed (the process is killed)
            GenerationProcessError: If the process could not start or died from a signal
        """
        attempt = GenerationAttempt(prompt=prompt, deadline=time.monotonic() + self.timeout)

        try:
            # run() kills and reaps the child on TimeoutExpired before re-raising
            result = subprocess.run(
                self.build_command(prompt),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                encoding="utf-8",
                errors="replace",
                timeout=attempt.remaining(),
                cwd=str(self.cwd) if self.cwd else None,
            )
        except subprocess.TimeoutExpired:
            raise GenerationTimeout(f"{self.command[0]} timed out after {self.timeout}s")
        except OSError as e:
            raise GenerationProcessError(f"Failed to start {self.command[0]}: {e}")

        if result.returncode < 0:
            raise GenerationProcessError(
                f"{self.command[0]} terminated by signal {-result.returncode}"
            )

        attempt.output = result.stdout or ""
        if result.returncode != 0:
            logger.warning(f"{self.command[0]} exited with code {result.returncode}")

        return attempt.output or None

    __call__ = invoke


class RetryCoordinator:
    """Retry a generation callable a fixed number of times."""

    def __init__(
        self,
        invoker: Callable[[str], Optional[str]],
        max_attempts: int = MAX_RETRIES,
        retry_delay: float = RETRY_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        self.invoker = invoker
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.sleep = sleep

    def run(self, prompt: str) -> Optional[str]:
        """
        Call the invoker until it returns output or the budget is spent.

        Timeouts and process errors count as an absent result.

        Returns:
            First non-empty output, or None if every attempt failed
        """
        for attempt in range(1, self.max_attempts + 1):
            logger.info(f"[Attempt {attempt}/{self.max_attempts}] Calling generation tool...")
            try:
                output = self.invoker(prompt)
            except GenerationError as e:
                logger.warning(f"Attempt {attempt} failed: {e}")
                output = None

            if output:
                return output

            if attempt < self.max_attempts:
                logger.info(f"No output. Waiting {self.retry_delay}s before retry...")
                self.sleep(self.retry_delay)

        logger.error(f"Generation failed after {self.max_attempts} attempts")
        return None

    __call__ = run
