"""Tests for the region-counting and spreading grid generators."""

import pytest

from algotrace.errors import InvalidInput
from algotrace.grid_bfs import IslandsGenerator, RottingGenerator, get_grid_generator
from algotrace.grid_types import CellStatus
from algotrace.recorder import validate_trace
from algotrace.trace_types import RegionResult, SpreadRound, StepKind, steps_from_json

ISLANDS = ["11000", "11000", "00100", "00011"]


class TestIslands:
    def test_three_regions_numbered_in_scan_order(self):
        trace = IslandsGenerator().generate(ISLANDS)
        found = trace.steps_of(StepKind.FOUND)

        assert len(found) == 3
        assert [s.region_count for s in found] == [1, 2, 3]
        assert trace.final_results == (
            RegionResult(number=1, root=(0, 0)),
            RegionResult(number=2, root=(2, 2)),
            RegionResult(number=3, root=(3, 3)),
        )

    def test_one_scan_step_per_cell(self):
        trace = IslandsGenerator().generate(ISLANDS)
        scans = trace.steps_of(StepKind.SCAN)

        assert len(scans) == 20
        assert [s.scan_pos for s in scans[:6]] == [
            (0, 0), (0, 1), (0, 2), (0, 3), (0, 4), (1, 0),
        ]

    def test_one_expand_step_per_land_cell(self):
        trace = IslandsGenerator().generate(ISLANDS)
        expands = trace.steps_of(StepKind.EXPAND)

        assert len(expands) == 7
        assert all(len(s.changed) == 1 for s in expands)

    def test_found_step_follows_its_scan(self):
        trace = IslandsGenerator().generate(ISLANDS)
        kinds = trace.kinds()

        assert kinds[:3] == [StepKind.SCAN, StepKind.FOUND, StepKind.EXPAND]

    def test_finished_with_every_cell_labelled(self):
        trace = IslandsGenerator().generate("\n".join(ISLANDS))
        final = trace.last

        assert final.kind == StepKind.FINISHED
        assert final.region_count == 3
        assert final.remaining == 0
        assert final.grid_snapshot.cell(1, 1).region == 1
        assert final.grid_snapshot.cell(2, 2).region == 2
        assert final.grid_snapshot.cell(3, 4).region == 3
        assert final.grid_snapshot.count(CellStatus.LAND) == 0

    def test_flood_frontier_drains(self):
        trace = IslandsGenerator().generate(["11"])
        expands = trace.steps_of(StepKind.EXPAND)

        assert expands[0].changed == ((0, 0),)
        assert expands[0].frontier == ((0, 1),)
        assert expands[-1].frontier == ()

    def test_all_water(self):
        trace = IslandsGenerator().generate("000\n000")

        assert trace.last.region_count == 0
        assert trace.final_results == ()
        assert len(trace) == 7

    def test_earlier_snapshots_are_untouched(self):
        trace = IslandsGenerator().generate(["1"])

        assert trace[0].grid_snapshot.cell(0, 0).status == CellStatus.LAND
        assert trace.last.grid_snapshot.cell(0, 0).status == CellStatus.VISITED


class TestRotting:
    def test_single_round(self):
        trace = RottingGenerator().generate(["2", "1"])

        assert trace.kinds() == [
            StepKind.SCAN,
            StepKind.SCAN,
            StepKind.EXPAND,
            StepKind.FINISHED,
        ]
        expand = trace.steps_of(StepKind.EXPAND)[0]
        assert expand.changed == ((1, 0),)
        assert expand.grid_snapshot.cell(1, 0).status == CellStatus.JUST_ROTTED
        assert trace.last.minute == 1
        assert trace.last.grid_snapshot.cell(1, 0).status == CellStatus.ROTTEN

    def test_sources_are_seeded_during_scan(self):
        trace = RottingGenerator().generate(["2", "1"])

        assert trace[0].frontier == ((0, 0),)
        assert trace[0].grid_snapshot.cell(0, 0).status == CellStatus.SOURCE
        assert trace[1].remaining == 1

    def test_multi_source_rounds_are_simultaneous(self):
        trace = RottingGenerator().generate(["211", "110", "011"])

        assert trace.last.kind == StepKind.FINISHED
        assert trace.last.minute == 4
        assert trace.final_results[0] == SpreadRound(minute=1, cells=((0, 1), (1, 0)))
        assert len(trace.steps_of(StepKind.EXPAND)) == 4

    def test_unreachable_cells_are_impossible(self):
        trace = RottingGenerator().generate(["210", "000", "001"])

        assert trace.last.kind == StepKind.IMPOSSIBLE
        assert trace.last.minute == 1
        assert trace.last.remaining == 1

    def test_no_source_at_all(self):
        trace = RottingGenerator().generate("11")

        assert trace.last.kind == StepKind.IMPOSSIBLE
        assert trace.last.minute == 0
        assert trace.last.remaining == 2

    def test_nothing_to_rot(self):
        trace = RottingGenerator().generate("20")

        assert trace.last.kind == StepKind.FINISHED
        assert trace.last.minute == 0


class TestGridTraceProperties:
    @pytest.mark.parametrize(
        "problem, grid",
        [("islands", ISLANDS), ("rotting", ["211", "110", "011"])],
    )
    def test_invariants_hold(self, problem, grid):
        trace = get_grid_generator(problem).generate(grid)

        validate_trace(trace)
        assert {s.grid_snapshot.shape for s in trace} == {(len(grid), len(grid[0]))}

    def test_deterministic(self):
        first = RottingGenerator().generate(["211", "110", "011"])
        second = RottingGenerator().generate(["211", "110", "011"])

        assert first.to_json() == second.to_json()

    def test_json_reloads_equal_steps(self):
        trace = IslandsGenerator().generate(["10", "01"])

        assert steps_from_json(trace.to_json()) == list(trace.steps)

    def test_malformed_grid_records_nothing(self):
        with pytest.raises(InvalidInput) as exc_info:
            RottingGenerator().generate("2x1")

        assert exc_info.value.row == 1
        assert exc_info.value.column == 2

    def test_unknown_problem(self):
        with pytest.raises(InvalidInput):
            get_grid_generator("walls-and-gates")
