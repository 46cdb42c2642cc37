"""Tests for TraceRecorder and trace invariant checks."""

import pytest

from algotrace.errors import ContractViolation
from algotrace.grid_types import Cell, CellStatus, GridSnapshot
from algotrace.recorder import TraceRecorder, validate_trace
from algotrace.run_types import GenerationLimits
from algotrace.trace_types import GridStep, PrefixSumStep, StepKind, Trace


def _make_snapshot(height, width):
    return GridSnapshot(
        rows=tuple(
            tuple(
                Cell(row=r, col=c, symbol="0", status=CellStatus.WATER)
                for c in range(width)
            )
            for r in range(height)
        )
    )


class TestRecord:
    def test_sequence_ids_are_stamped(self):
        recorder = TraceRecorder("p", PrefixSumStep)

        first = recorder.record(StepKind.ADD, "a")
        second = recorder.record(StepKind.ADD, "b")

        assert (first.sequence_id, second.sequence_id) == (0, 1)

    def test_results_are_copied_into_each_step(self):
        recorder = TraceRecorder("p", PrefixSumStep)
        before = recorder.record(StepKind.ADD, "a")
        recorder.collect(7)
        after = recorder.record(StepKind.MATCH, "b")

        assert before.results_so_far == ()
        assert after.results_so_far == (7,)

    def test_record_after_finish(self):
        recorder = TraceRecorder("p", PrefixSumStep)
        recorder.record(StepKind.ADD, "a")
        recorder.finish()

        with pytest.raises(ContractViolation, match="already finished"):
            recorder.record(StepKind.ADD, "b")

    def test_step_ceiling(self):
        recorder = TraceRecorder("p", PrefixSumStep, GenerationLimits(max_trace_steps=1))
        recorder.record(StepKind.ADD, "a")

        with pytest.raises(ContractViolation, match="exceeded"):
            recorder.record(StepKind.ADD, "b")

    def test_grid_shape_must_not_change(self):
        recorder = TraceRecorder("g", GridStep)
        recorder.record(StepKind.SCAN, "a", grid_snapshot=_make_snapshot(2, 2))

        with pytest.raises(ContractViolation, match="dimensions"):
            recorder.record(StepKind.SCAN, "b", grid_snapshot=_make_snapshot(2, 3))


class TestFinish:
    def test_empty_recorder_cannot_finish(self):
        with pytest.raises(ContractViolation, match="no steps"):
            TraceRecorder("p", PrefixSumStep).finish()

    def test_stats(self):
        recorder = TraceRecorder("p", PrefixSumStep)
        recorder.record(StepKind.ADD, "a")
        recorder.collect(0)
        recorder.record(StepKind.MATCH, "b")
        recorder.record(StepKind.ADD, "c")

        trace = recorder.finish()

        assert trace.stats.steps == 3
        assert trace.stats.results == 1
        assert trace.stats.kind_counts == {"add": 2, "match": 1}
        report = trace.stats.report()
        assert "Trace Statistics" in report
        assert "match" in report


class TestValidateTrace:
    def test_gap_in_sequence_ids(self):
        steps = (
            PrefixSumStep(sequence_id=0, kind=StepKind.ADD, description="a"),
            PrefixSumStep(sequence_id=2, kind=StepKind.ADD, description="b"),
        )

        with pytest.raises(ContractViolation, match="Non-monotonic"):
            validate_trace(Trace(problem="p", steps=steps))

    def test_results_must_not_shrink(self):
        steps = (
            PrefixSumStep(
                sequence_id=0, kind=StepKind.MATCH, description="a", results_so_far=(1,)
            ),
            PrefixSumStep(sequence_id=1, kind=StepKind.ADD, description="b"),
        )

        with pytest.raises(ContractViolation, match="shrank"):
            validate_trace(Trace(problem="p", steps=steps))

    def test_must_start_at_zero(self):
        steps = (PrefixSumStep(sequence_id=1, kind=StepKind.ADD, description="a"),)

        with pytest.raises(ContractViolation):
            validate_trace(Trace(problem="p", steps=steps))

    def test_empty_trace(self):
        with pytest.raises(ContractViolation):
            validate_trace(Trace(problem="p"))
