"""
Integration tests for QuarantineCommand — setup → scan → group → relocate.
"""
import os
import pytest
from pathlib import Path
from quarantiner import QuarantineCommand, QuarantineParams, DigestAlgorithm, SetupFailure
from quarantiner.core.grouper import FileGrouperImpl
from quarantiner.core.models import FileState


def snapshot(root: Path):
    """Every file under root with its content."""
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in root.rglob("*") if p.is_file()
    }


class TestQuarantineCommand:

    def test_basic_scenario(self, test_files, temp_dir):
        """a.txt/b.txt share content, c.txt is unique: b.txt goes to duplicated/."""
        command = QuarantineCommand()

        groups, summary = command.execute(QuarantineParams(root_dir=str(temp_dir)))

        assert len(groups) == 1
        assert groups[0].original.path == str(test_files["a"])
        assert [r.path for r in groups[0].duplicates] == [str(test_files["b"])]

        assert test_files["a"].exists()
        assert not test_files["b"].exists()
        assert (temp_dir / "duplicated" / "b.txt").read_bytes() == b"hello"

        assert summary.files_scanned == 3
        assert summary.duplicates_found == 1
        assert summary.space_saved_bytes == 5
        assert summary.output_location == str(temp_dir / "duplicated")

    def test_recursive_run_moves_every_copy(self, test_files, temp_dir):
        _, summary = QuarantineCommand().execute(
            QuarantineParams(root_dir=str(temp_dir), recursive=True)
        )

        output = temp_dir / "duplicated"
        assert sorted(p.name for p in output.iterdir()) == ["b.txt", "d.txt"]
        assert summary.files_scanned == 5
        assert summary.duplicates_found == 2
        assert summary.space_saved_bytes == 10

    def test_existing_name_in_output_gets_suffix(self, temp_dir):
        """Duplicates named like a file already in the output folder are renamed, not overwritten."""
        output = temp_dir / "duplicated"
        output.mkdir()
        (output / "report.pdf").write_bytes(b"previous run")
        (temp_dir / "a").mkdir()
        (temp_dir / "b").mkdir()
        (temp_dir / "a" / "report.pdf").write_bytes(b"same bytes")
        (temp_dir / "b" / "report.pdf").write_bytes(b"same bytes")

        QuarantineCommand().execute(QuarantineParams(root_dir=str(temp_dir), recursive=True))

        assert (output / "report.pdf").read_bytes() == b"previous run"
        assert (output / "report_1.pdf").read_bytes() == b"same bytes"
        assert (temp_dir / "a" / "report.pdf").exists()

    def test_second_run_ignores_quarantined_files(self, test_files, temp_dir):
        params = QuarantineParams(root_dir=str(temp_dir), recursive=True)
        QuarantineCommand().execute(params)

        groups, summary = QuarantineCommand().execute(params)

        assert groups == []
        assert summary.duplicates_found == 0
        assert summary.files_scanned == 3  # a.txt, c.txt, subdir/e.bin

    def test_dry_run_never_mutates_filesystem(self, test_files, temp_dir):
        before = snapshot(temp_dir)

        groups, summary = QuarantineCommand().execute(
            QuarantineParams(root_dir=str(temp_dir), recursive=True, dry_run=True)
        )

        assert snapshot(temp_dir) == before
        assert not (temp_dir / "duplicated").exists()
        assert summary.dry_run is True
        assert len(groups) == 1

    def test_dry_run_reports_planned_totals_only(self, test_files, temp_dir):
        """Nothing reached the output folder, so nothing counts as moved or saved."""
        command = QuarantineCommand()

        _, summary = command.execute(
            QuarantineParams(root_dir=str(temp_dir), recursive=True, dry_run=True)
        )

        moved = [o for o in command.get_outcomes() if o.state == FileState.DUPLICATE_MOVED]
        assert moved == []
        assert summary.duplicates_found == 0
        assert summary.space_saved_bytes == 0
        assert summary.planned_moves == 2
        assert summary.planned_bytes == 10

    def test_distinct_content_reports_zero_duplicates(self, temp_dir):
        for i in range(4):
            (temp_dir / f"f{i}.txt").write_bytes(f"content {i}".encode())

        groups, summary = QuarantineCommand().execute(QuarantineParams(root_dir=str(temp_dir)))

        assert groups == []
        assert summary.files_scanned == 4
        assert summary.duplicates_found == 0
        assert summary.space_saved_bytes == 0

    @pytest.mark.parametrize("algorithm", list(DigestAlgorithm))
    def test_every_algorithm_finds_the_same_duplicates(self, test_files, temp_dir, algorithm):
        groups, summary = QuarantineCommand().execute(
            QuarantineParams(root_dir=str(temp_dir), algorithm=algorithm, dry_run=True)
        )

        assert [[Path(r.path).name for r in g.files] for g in groups] == [["a.txt", "b.txt"]]

    def test_absolute_output_outside_root(self, test_files, temp_dir, tmp_path):
        output = tmp_path / "elsewhere"

        _, summary = QuarantineCommand().execute(
            QuarantineParams(root_dir=str(temp_dir), output_dir=str(output))
        )

        assert (output / "b.txt").exists()
        assert summary.output_location == str(output.resolve())

    def test_unwritable_output_raises_setup_failure(self, test_files, temp_dir):
        (temp_dir / "blocked").write_text("a file, not a folder")

        with pytest.raises(SetupFailure):
            QuarantineCommand().execute(QuarantineParams(root_dir=str(temp_dir), output_dir="blocked"))

        assert test_files["b"].exists()

    def test_group_callback_receives_each_group(self, test_files, temp_dir):
        seen = []

        QuarantineCommand().execute(
            QuarantineParams(root_dir=str(temp_dir)),
            group_callback=lambda group, outcomes: seen.append((group.digest, [o.state for o in outcomes]))
        )

        assert len(seen) == 1
        assert seen[0][1] == [FileState.DUPLICATE_MOVED]

    def test_get_records_returns_copy(self, test_files, temp_dir):
        command = QuarantineCommand()
        command.execute(QuarantineParams(root_dir=str(temp_dir), dry_run=True))

        records = command.get_records()
        records.clear()

        assert len(command.get_records()) == 3

    def test_hash_failures_are_counted_not_fatal(self, test_files, temp_dir, monkeypatch):
        real_open = open

        def flaky_open(path, *args, **kwargs):
            if os.fspath(path).endswith("c.txt"):
                raise PermissionError("Permission denied")
            return real_open(path, *args, **kwargs)

        monkeypatch.setattr("quarantiner.core.hasher.open", flaky_open, raising=False)

        _, summary = QuarantineCommand().execute(QuarantineParams(root_dir=str(temp_dir)))

        assert summary.files_scanned == 3
        assert summary.hash_failures == 1
        assert summary.duplicates_found == 1

    def test_get_outcomes_lists_every_duplicate(self, test_files, temp_dir):
        command = QuarantineCommand()
        command.execute(QuarantineParams(root_dir=str(temp_dir), recursive=True))

        outcomes = command.get_outcomes()

        assert [o.record.path for o in outcomes] == [str(test_files["b"]), str(test_files["d"])]
        assert all(o.succeeded for o in outcomes)
        outcomes.clear()
        assert len(command.get_outcomes()) == 2

    def test_get_states_covers_every_hashed_file(self, test_files, temp_dir):
        command = QuarantineCommand()
        command.execute(QuarantineParams(root_dir=str(temp_dir), recursive=True))

        states = command.get_states()

        assert states == {
            str(test_files["a"]): FileState.ORIGINAL,
            str(test_files["b"]): FileState.DUPLICATE_MOVED,
            str(test_files["c"]): FileState.UNIQUE,
            str(test_files["d"]): FileState.DUPLICATE_MOVED,
            str(test_files["e"]): FileState.UNIQUE,
        }

    def test_stopped_flag_skips_relocation(self, test_files, temp_dir, monkeypatch):
        """A stop requested after grouping leaves every duplicate in place."""
        stop = []
        real_group = FileGrouperImpl.group

        def group_then_stop(self, records):
            stop.append(True)
            return real_group(self, records)

        monkeypatch.setattr(FileGrouperImpl, "group", group_then_stop)

        groups, summary = QuarantineCommand().execute(
            QuarantineParams(root_dir=str(temp_dir)), stopped_flag=lambda: bool(stop)
        )

        assert len(groups) == 1
        assert summary.duplicates_found == 0
        assert test_files["b"].exists()
