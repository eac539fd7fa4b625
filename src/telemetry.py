"""Stage timing for improvement runs.

Usage:
    tel = Telemetry()

    with tel.span("load"):
        store.load_all()

    for candidate in candidates:
        with tel.span("generate"):
            ...

    print(tel.summary())

Stages that run once per candidate are aggregated by name, so the summary
shows one row per stage with its call count.
"""
import time
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Iterator, List


@dataclass
class StageTotals:
    calls: int = 0
    seconds: float = 0.0


class Telemetry:
    """Accumulates wall-clock time per named stage."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._start = clock()
        self._order: List[str] = []
        self.stages: Dict[str, StageTotals] = {}

    @contextmanager
    def span(self, name: str) -> Iterator[None]:
        """Time a block and add it to the stage's totals, even if it raises."""
        if name not in self.stages:
            self.stages[name] = StageTotals()
            self._order.append(name)
        started = self._clock()
        try:
            yield
        finally:
            totals = self.stages[name]
            totals.calls += 1
            totals.seconds += self._clock() - started

    def total_seconds(self) -> float:
        return self._clock() - self._start

    def summary(self) -> str:
        """Return formatted timing table."""
        if not self.stages:
            return "No timing data."

        total = self.total_seconds()
        lines = ["", "TIMING BREAKDOWN", "─" * 52]
        lines.append(f"{'Stage':<24} {'Calls':>6} {'Duration':>9} {'% Total':>9}")
        lines.append("─" * 52)
        for name in self._order:
            totals = self.stages[name]
            pct = (totals.seconds / total * 100) if total > 0 else 0.0
            lines.append(f"{name:<24} {totals.calls:>6} {totals.seconds:>8.1f}s {pct:>8.1f}%")
        lines.append("─" * 52)
        lines.append(f"{'Total':<31} {total:>8.1f}s")
        return "\n".join(lines)

    def to_dict(self) -> Dict:
        """Return JSON-serializable timing data."""
        return {
            "total_seconds": round(self.total_seconds(), 3),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "stages": {
                name: {"calls": self.stages[name].calls, "seconds": round(self.stages[name].seconds, 3)}
                for name in self._order
            },
        }
