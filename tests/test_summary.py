"""Tests for run summaries, run output and stage timing."""
import pytest
from improvement.summary import RunSummary, write_run_output
from telemetry import Telemetry


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestRunSummary:
    def test_counts(self):
        summary = RunSummary(total_questions=40, needing_improvement=12, processed=3)
        summary.improved_ids.extend(["sd-2", "ku-9"])
        summary.record_failure("sd-7", "duplicate", "too similar")

        assert summary.improved == 2
        assert summary.failed == 1
        assert summary.remaining == 10
        assert summary.failure_counts() == {
            "generation_failed": 0,
            "invalid_format": 0,
            "not_found": 0,
            "duplicate": 1,
            "store_failed": 0,
        }

    def test_to_output(self):
        summary = RunSummary(total_questions=40, improved_ids=["sd-2", "ku-9"])
        assert summary.to_output() == {
            "improved_count": 2,
            "failed_count": 0,
            "total_questions": 40,
            "improved_ids": "sd-2,ku-9",
        }

    def test_to_dict_lists_failures(self):
        summary = RunSummary()
        summary.record_failure("sd-7", "not_found", "gone")
        assert summary.to_dict()["failures"] == [{"id": "sd-7", "kind": "not_found", "reason": "gone"}]


class TestWriteRunOutput:
    def test_appends_lines(self, tmp_path):
        path = tmp_path / "github_output"
        path.write_text("existing=1\n")
        write_run_output(path, {"improved_count": 2, "improved_ids": "a,b"})
        assert path.read_text() == "existing=1\nimproved_count=2\nimproved_ids=a,b\n"

    def test_empty_ids(self, tmp_path):
        path = tmp_path / "github_output"
        write_run_output(path, RunSummary().to_output())
        assert "improved_ids=\n" in path.read_text()

    def test_no_path_is_noop(self):
        write_run_output(None, {"improved_count": 1})


class TestTelemetry:
    def test_spans_aggregate_by_name(self):
        clock = FakeClock()
        tel = Telemetry(clock=clock)
        for seconds in (1.5, 2.5):
            with tel.span("generate"):
                clock.now += seconds
        with tel.span("merge"):
            clock.now += 1.0

        data = tel.to_dict()
        assert data["total_seconds"] == pytest.approx(5.0)
        assert data["stages"] == {
            "generate": {"calls": 2, "seconds": 4.0},
            "merge": {"calls": 1, "seconds": 1.0},
        }

    def test_span_records_on_error(self):
        clock = FakeClock()
        tel = Telemetry(clock=clock)
        with pytest.raises(RuntimeError):
            with tel.span("extract"):
                clock.now += 2
                raise RuntimeError("boom")
        assert tel.stages["extract"].calls == 1
        assert tel.stages["extract"].seconds == 2

    def test_summary_table(self):
        clock = FakeClock()
        tel = Telemetry(clock=clock)
        assert tel.summary() == "No timing data."
        with tel.span("load"):
            clock.now += 1
        assert "load" in tel.summary()
        assert "TIMING BREAKDOWN" in tel.summary()
