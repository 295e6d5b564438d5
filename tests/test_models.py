"""
Tests for data models: parameter validation, immutability and the summary fold.
"""
import dataclasses
import os
import pytest
from quarantiner.core.models import (
    DigestAlgorithm, DuplicateGroup, FileRecord, FileState, QuarantineParams,
    RelocationOutcome, RunSummary)


class TestQuarantineParams:

    def test_defaults(self):
        params = QuarantineParams(root_dir="/data")

        assert params.output_dir == "duplicated"
        assert params.algorithm is DigestAlgorithm.SHA256
        assert params.recursive is False
        assert params.dry_run is False

    def test_relative_output_lives_under_root(self):
        params = QuarantineParams(root_dir="/data/photos", output_dir="dupes")
        assert params.output_path == os.path.normpath("/data/photos/dupes")

    def test_absolute_output_is_kept(self):
        params = QuarantineParams(root_dir="/data", output_dir="/mnt/q")
        assert params.output_path == os.path.normpath("/mnt/q")

    @pytest.mark.parametrize("kwargs, message", [
        ({"root_dir": ""}, "Root directory"),
        ({"root_dir": "/d", "output_dir": ""}, "Output folder"),
        ({"root_dir": "/d", "min_size_bytes": -1}, "negative"),
        ({"root_dir": "/d", "min_size_bytes": 10, "max_size_bytes": 5}, "less than"),
        ({"root_dir": "/d", "workers": 0}, "Workers"),
    ])
    def test_validation(self, kwargs, message):
        with pytest.raises(ValueError, match=message):
            QuarantineParams(**kwargs)

    def test_extensions_are_normalized(self):
        params = QuarantineParams(root_dir="/d", extensions=["JPG", " .Png ", ""])
        assert params.extensions == [".jpg", ".png"]

    def test_from_human_readable(self):
        params = QuarantineParams.from_human_readable(
            root_dir="/d", extensions_str="jpg, png", min_size_str="1K", max_size_str="2MB"
        )
        assert params.extensions == [".jpg", ".png"]
        assert params.min_size_bytes == 1024
        assert params.max_size_bytes == 2 * 1024 * 1024


class TestRecords:

    def test_file_record_is_immutable(self):
        record = FileRecord(path="/a/b.txt", size=1, digest="x")
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.size = 2
        assert record.name == "b.txt"

    def test_state_of_rejects_foreign_record(self):
        group = DuplicateGroup(digest="x", files=[
            FileRecord(path="/a", size=1, digest="x"),
            FileRecord(path="/b", size=1, digest="x"),
        ])
        with pytest.raises(ValueError):
            group.state_of(FileRecord(path="/c", size=1, digest="x"))

    def test_terminal_states(self):
        assert FileState.DUPLICATE_MOVED.is_terminal
        assert FileState.DUPLICATE_FAILED.is_terminal
        assert not FileState.DUPLICATE_PENDING.is_terminal

    def test_outcome_succeeded(self):
        record = FileRecord(path="/b", size=1, digest="x")

        assert RelocationOutcome(record, "/q/b", FileState.DUPLICATE_MOVED).succeeded
        assert RelocationOutcome(record, "/q/b", FileState.DUPLICATE_PLANNED).succeeded
        assert not RelocationOutcome(record, "/q/b", FileState.DUPLICATE_FAILED, error="denied").succeeded


class TestRunSummary:

    def test_from_outcome(self):
        record = FileRecord(path="/b", size=4, digest="x")

        moved = RunSummary.from_outcome(RelocationOutcome(record, "/q/b", FileState.DUPLICATE_MOVED), 4)
        failed = RunSummary.from_outcome(RelocationOutcome(record, "/q/b", FileState.DUPLICATE_FAILED), 4)

        assert (moved.duplicates_found, moved.space_saved_bytes) == (1, 4)
        assert (failed.duplicates_found, failed.space_saved_bytes, failed.move_failures) == (0, 0, 1)

    def test_planned_outcome_is_not_counted_as_moved(self):
        record = FileRecord(path="/b", size=4, digest="x")

        planned = RunSummary.from_outcome(RelocationOutcome(record, "/q/b", FileState.DUPLICATE_PLANNED), 4)

        assert (planned.duplicates_found, planned.space_saved_bytes) == (0, 0)
        assert (planned.planned_moves, planned.planned_bytes, planned.dry_run) == (1, 4, True)

    def test_combine_adds_planned_totals(self):
        combined = RunSummary(planned_moves=1, planned_bytes=4) + RunSummary(planned_moves=2, planned_bytes=6)
        assert (combined.planned_moves, combined.planned_bytes) == (3, 10)

    def test_combine_keeps_first_location(self):
        combined = RunSummary(output_location="/first").combine(RunSummary(output_location="/second"))
        assert combined.output_location == "/first"
