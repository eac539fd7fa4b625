"""Run summary aggregation and key=value run output."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from schemas.enums import FAILURE_KINDS


@dataclass
class CandidateFailure:
    record_id: str
    kind: str
    reason: str


@dataclass
class RunSummary:
    """Counts and identifiers collected over one improvement run."""
    total_questions: int = 0
    needing_improvement: int = 0
    processed: int = 0
    improved_ids: List[str] = field(default_factory=list)
    failures: List[CandidateFailure] = field(default_factory=list)
    timing: Dict[str, Any] = field(default_factory=dict)

    @property
    def improved(self) -> int:
        return len(self.improved_ids)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def remaining(self) -> int:
        """Questions still needing improvement after this run."""
        return self.needing_improvement - self.improved

    def failure_counts(self) -> Dict[str, int]:
        counts = {kind: 0 for kind in FAILURE_KINDS}
        for f in self.failures:
            counts[f.kind] = counts.get(f.kind, 0) + 1
        return counts

    def record_failure(self, record_id: str, kind: str, reason: str) -> None:
        self.failures.append(CandidateFailure(record_id, kind, reason))

    def to_output(self) -> Dict[str, Any]:
        """Values published to the hosting environment."""
        return {
            "improved_count": self.improved,
            "failed_count": self.failed,
            "total_questions": self.total_questions,
            "improved_ids": ",".join(self.improved_ids),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_questions": self.total_questions,
            "needing_improvement": self.needing_improvement,
            "processed": self.processed,
            "improved": self.improved,
            "failed": self.failed,
            "failure_counts": self.failure_counts(),
            "improved_ids": list(self.improved_ids),
            "failures": [
                {"id": f.record_id, "kind": f.kind, "reason": f.reason} for f in self.failures
            ],
            "timing": self.timing,
        }


def write_run_output(path: Optional[Path], data: Dict[str, Any]) -> None:
    """
    Append ``key=value`` lines to a run output file (GITHUB_OUTPUT style).

    Does nothing when no path is configured.
    """
    if not path:
        return
    with open(path, "a") as f:
        for key, value in data.items():
            f.write(f"{key}={value}\n")
