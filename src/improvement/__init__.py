"""Improvement loop - select weak questions, regenerate them, merge results back."""
from .config import ImprovementConfig, load_config
from .orchestrator import Candidate, ImprovementOrchestrator, find_improvable
from .prompts import build_improvement_prompt
from .summary import CandidateFailure, RunSummary, write_run_output
from .dedupe import DedupeReport, dedupe_topics

__all__ = [
    "ImprovementConfig",
    "load_config",
    "Candidate",
    "ImprovementOrchestrator",
    "find_improvable",
    "build_improvement_prompt",
    "CandidateFailure",
    "RunSummary",
    "write_run_output",
    "DedupeReport",
    "dedupe_topics",
]
