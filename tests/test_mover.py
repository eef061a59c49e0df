"""
Unit tests for the file sorter.
"""

import shutil
from pathlib import Path

import pytest

from file_sorter.conflicts import ConflictResolver, ScriptedPolicy, rename_policy
from file_sorter.mover import NOTHING_TO_DO, DestinationError, FileSorter
from file_sorter.types import (
    Candidate,
    Category,
    ConflictDecision,
    DestinationSet,
    MoveStatus,
)

from conftest import create_files

SCENARIO_FILES = [
    "photo.JPG", "clip.mp4", "notes.txt", "data.csv", "report.pdf", "archive.zip",
]


class TestRun:
    """Tests for FileSorter.run."""

    def test_sorts_every_category(self, workspace):
        """Each file lands in the folder of its category."""
        source, dests = workspace
        create_files(source, SCENARIO_FILES)

        outcomes = FileSorter().run(source, dests)

        assert len(outcomes) == 6
        assert all(o.status == MoveStatus.MOVED for o in outcomes)
        assert (Path(dests.images) / "photo.JPG").exists()
        assert (Path(dests.videos) / "clip.mp4").exists()
        assert (Path(dests.texts) / "notes.txt").exists()
        assert (Path(dests.tables) / "data.csv").exists()
        assert (Path(dests.pdfs) / "report.pdf").exists()
        assert (Path(dests.others) / "archive.zip").exists()
        assert list(source.iterdir()) == []

    def test_outcome_details(self, workspace):
        """Outcomes record category and final path."""
        source, dests = workspace
        create_files(source, ["photo.JPG"])

        [outcome] = FileSorter().run(source, dests)

        assert outcome.category is Category.IMAGES
        assert outcome.dest_path == str(Path(dests.images) / "photo.JPG")
        assert outcome.source_path.endswith("photo.JPG")
        assert outcome.renamed is False

    def test_recursive_and_flattened(self, workspace):
        """Files in subfolders are found and moved flat into the category folder."""
        source, dests = workspace
        create_files(source, ["a/b/deep.png", "a/shallow.pdf"])

        outcomes = FileSorter().run(source, dests)

        assert len(outcomes) == 2
        assert (Path(dests.images) / "deep.png").exists()
        assert (Path(dests.pdfs) / "shallow.pdf").exists()

    def test_creates_destinations(self, workspace):
        """Missing destination folders are created even with nothing to move."""
        source, dests = workspace

        FileSorter().run(source, dests)

        assert all(Path(p).is_dir() for p in dests.paths())

    def test_missing_source_is_fatal(self, tmp_path, workspace):
        """A missing source aborts before touching destinations."""
        _, dests = workspace

        with pytest.raises(FileNotFoundError):
            FileSorter().run(tmp_path / "missing", dests)

        assert not Path(dests.images).exists()

    def test_destination_creation_failure_is_fatal(self, tmp_path, workspace):
        """A destination that cannot be created aborts the run."""
        source, _ = workspace
        create_files(source, ["a.txt"])
        blocker = tmp_path / "blocker"
        blocker.write_text("not a folder")
        dests = DestinationSet(
            images=str(tmp_path / "Images"),
            videos=str(tmp_path / "Videos"),
            texts=str(blocker / "Texts"),
            tables=str(tmp_path / "Tables"),
            pdfs=str(tmp_path / "PDFs"),
            others=str(tmp_path / "Others"),
        )

        with pytest.raises(DestinationError) as exc_info:
            FileSorter().run(source, dests)

        assert "Texts" in str(exc_info.value)
        assert (source / "a.txt").exists()

    def test_nothing_to_do(self, workspace):
        """An empty source returns no outcomes and says so."""
        source, dests = workspace
        lines = []

        outcomes = FileSorter(sink=lines.append).run(source, dests)

        assert outcomes == []
        assert lines == [NOTHING_TO_DO]

    def test_idempotent_rerun(self, workspace):
        """A second run over the same configuration finds nothing new."""
        source, dests = workspace
        create_files(source, SCENARIO_FILES)

        first = FileSorter().run(source, dests)
        second = FileSorter().run(source, dests)

        assert len(first) == 6
        assert second == []

    def test_destinations_nested_in_source(self, tmp_path):
        """Destinations inside the source are never picked up again."""
        source = tmp_path / "inbox"
        create_files(source, ["a.jpg", "b.txt", "Images/already.jpg"])
        dests = DestinationSet(*(str(source / c.value) for c in Category))

        outcomes = FileSorter().run(source, dests)

        assert sorted(o.name for o in outcomes) == ["a.jpg", "b.txt"]
        assert (source / "Images" / "already.jpg").exists()
        assert FileSorter().run(source, dests) == []


class TestConflicts:
    """Tests for destination collisions during a run."""

    def test_rename_on_conflict(self, workspace):
        """Rename decision moves under the smallest free suffix."""
        source, dests = workspace
        create_files(source, ["photo.jpg"])
        create_files(Path(dests.images), ["photo.jpg", "photo_1.jpg"])

        sorter = FileSorter(resolver=ConflictResolver(rename_policy))
        [outcome] = sorter.run(source, dests)

        assert outcome.status == MoveStatus.MOVED
        assert outcome.renamed is True
        assert outcome.dest_path == str(Path(dests.images) / "photo_2.jpg")
        assert (Path(dests.images) / "photo_2.jpg").read_text() == "content of photo.jpg"

    def test_skip_on_conflict(self, workspace):
        """Skip decision leaves the source file in place."""
        source, dests = workspace
        create_files(source, ["notes.txt"])
        create_files(Path(dests.texts), ["notes.txt"])
        lines = []

        [outcome] = FileSorter(sink=lines.append).run(source, dests)

        assert outcome.status == MoveStatus.SKIPPED
        assert outcome.message == "conflict"
        assert (source / "notes.txt").exists()
        assert "Skipped notes.txt due to conflict" in lines

    def test_same_name_within_run(self, workspace):
        """Two source files with the same name collide with each other."""
        source, dests = workspace
        create_files(source, ["a/report.pdf", "b/report.pdf"])
        policy = ScriptedPolicy(default=ConflictDecision.RENAME)

        outcomes = FileSorter(resolver=ConflictResolver(policy)).run(source, dests)

        assert [o.status for o in outcomes] == [MoveStatus.MOVED, MoveStatus.MOVED]
        assert len(policy.calls) == 1
        assert sorted(p.name for p in Path(dests.pdfs).iterdir()) == [
            "report.pdf", "report_1.pdf",
        ]

    def test_policy_error_is_per_file(self, workspace):
        """A policy that raises fails only that file."""
        source, dests = workspace
        create_files(source, ["clash.txt", "fine.pdf"])
        create_files(Path(dests.texts), ["clash.txt"])

        def broken(name, path):
            raise EOFError("no input")

        outcomes = FileSorter(resolver=ConflictResolver(broken)).run(source, dests)
        by_name = {o.name: o for o in outcomes}

        assert by_name["clash.txt"].status == MoveStatus.FAILED
        assert "no input" in by_name["clash.txt"].message
        assert by_name["fine.pdf"].status == MoveStatus.MOVED


class TestFailures:
    """Tests for per-file failure isolation."""

    def test_one_failure_does_not_stop_run(self, workspace, monkeypatch):
        """A simulated permission error fails one file, the rest still move."""
        source, dests = workspace
        create_files(source, SCENARIO_FILES)
        real_move = shutil.move

        def flaky_move(src, dst):
            if Path(src).name == "data.csv":
                raise PermissionError(13, "Permission denied", src)
            return real_move(src, dst)

        monkeypatch.setattr("file_sorter.utils.shutil.move", flaky_move)
        lines = []

        outcomes = FileSorter(sink=lines.append).run(source, dests)
        by_name = {o.name: o for o in outcomes}

        assert len(outcomes) == 6
        assert by_name["data.csv"].status == MoveStatus.FAILED
        assert "Permission denied" in by_name["data.csv"].message
        assert (source / "data.csv").exists()
        moved = [o for o in outcomes if o.status == MoveStatus.MOVED]
        assert len(moved) == 5
        assert any(line.startswith("Error moving data.csv:") for line in lines)

    def test_failed_file_retried_next_run(self, workspace, monkeypatch):
        """A file that failed stays in the source and is found again."""
        source, dests = workspace
        create_files(source, ["a.txt"])

        def always_fail(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("file_sorter.utils.shutil.move", always_fail)
        [first] = FileSorter().run(source, dests)
        monkeypatch.undo()
        [second] = FileSorter().run(source, dests)

        assert first.status == MoveStatus.FAILED
        assert second.status == MoveStatus.MOVED


class TestDryRun:
    """Tests for dry-run mode."""

    def test_dry_run_moves_nothing(self, workspace):
        """Dry run reports plans without touching the filesystem."""
        source, dests = workspace
        create_files(source, ["photo.jpg", "x.zip"])

        sorter = FileSorter(dry_run=True)
        outcomes = sorter.run(source, dests)

        assert [o.status for o in outcomes] == [MoveStatus.DRY_RUN] * 2
        assert (source / "photo.jpg").exists()
        assert not Path(dests.images).exists()
        assert "Would move: 2" in sorter.get_summary()

    def test_dry_run_rename(self, workspace):
        """Dry run still consults the policy on conflicts."""
        source, dests = workspace
        create_files(source, ["photo.jpg"])
        create_files(Path(dests.images), ["photo.jpg"])

        sorter = FileSorter(resolver=ConflictResolver(rename_policy), dry_run=True)
        [outcome] = sorter.run(source, dests)

        assert outcome.status == MoveStatus.DRY_RUN
        assert outcome.renamed is True
        assert outcome.dest_path == str(Path(dests.images) / "photo_1.jpg")


    def test_dry_run_same_name_planned_apart(self, workspace):
        """Two files with one name get distinct planned paths, as a real run would."""
        source, dests = workspace
        create_files(source, ["x/photo.jpg", "y/photo.jpg"])
        policy = ScriptedPolicy(default=ConflictDecision.RENAME)

        sorter = FileSorter(resolver=ConflictResolver(policy), dry_run=True)
        outcomes = sorter.run(source, dests)

        planned = sorted(Path(o.dest_path).name for o in outcomes)
        assert planned == ["photo.jpg", "photo_1.jpg"]
        assert len(policy.calls) == 1
        assert not Path(dests.images).exists()

    def test_dry_run_skip_on_planned_conflict(self, workspace):
        """A skip decision applies to collisions between planned paths too."""
        source, dests = workspace
        create_files(source, ["x/notes.txt", "y/notes.txt"])

        outcomes = FileSorter(dry_run=True).run(source, dests)

        assert sorted(o.status.value for o in outcomes) == ["DRY_RUN", "SKIPPED"]

    def test_dry_run_plans_reset_between_runs(self, workspace):
        """Planned paths from one dry run do not leak into the next."""
        source, dests = workspace
        create_files(source, ["photo.jpg"])
        sorter = FileSorter(dry_run=True)

        first = sorter.run(source, dests)
        second = sorter.run(source, dests)

        assert first[0].status == second[0].status == MoveStatus.DRY_RUN
        assert second[0].dest_path == str(Path(dests.images) / "photo.jpg")


class TestSortFile:
    """Tests for sorting a single candidate."""

    def test_unknown_extension_goes_to_others(self, workspace):
        """An extension outside the table is moved to the Others folder."""
        source, dests = workspace
        create_files(source, ["song.mp3"])
        Path(dests.others).mkdir(parents=True)

        outcome = FileSorter().sort_file(
            Candidate.from_path(str(source / "song.mp3")), dests
        )

        assert outcome.category is Category.OTHERS
        assert (Path(dests.others) / "song.mp3").exists()


class TestStatsAndSink:
    """Tests for statistics, summaries and the log sink."""

    def test_sink_lines(self, workspace):
        """One line per file plus one summary line."""
        source, dests = workspace
        create_files(source, ["a.pdf", "b.txt"])
        lines = []

        FileSorter(sink=lines.append).run(source, dests)

        assert len(lines) == 3
        assert f"Moved a.pdf to {dests.pdfs}" in lines
        assert lines[-1] == "Sorted 2 files: 2 moved, 0 skipped, 0 failed"

    def test_get_stats(self, workspace):
        """Counts outcomes by status."""
        source, dests = workspace
        create_files(source, ["a.pdf", "b.txt", "c.jpg"])
        create_files(Path(dests.texts), ["b.txt"])
        create_files(Path(dests.images), ["c.jpg"])
        policy = ScriptedPolicy([ConflictDecision.RENAME, ConflictDecision.SKIP])

        sorter = FileSorter(resolver=ConflictResolver(policy))
        sorter.run(source, dests)
        stats = sorter.get_stats()

        assert stats["MOVED"] == 2
        assert stats["SKIPPED"] == 1
        assert stats["FAILED"] == 0
        assert stats["renamed"] == 1

    def test_get_summary(self, workspace):
        """Generates readable summary."""
        source, dests = workspace
        create_files(source, ["a.pdf"])

        sorter = FileSorter()
        sorter.run(source, dests)
        summary = sorter.get_summary()

        assert "Sort Summary" in summary
        assert "Moved: 1" in summary

    def test_stats_cover_last_run_only(self, workspace):
        """A reused sorter counts only the most recent run."""
        source, dests = workspace
        sorter = FileSorter()

        create_files(source, ["a.pdf"])
        sorter.run(source, dests)
        create_files(source, ["b.pdf"])
        sorter.run(source, dests)

        assert sorter.get_stats()["MOVED"] == 1
        assert "Moved: 1" in sorter.get_summary()

    def test_reset_stats(self, workspace):
        """Reset clears all counters."""
        source, dests = workspace
        create_files(source, ["a.pdf"])

        sorter = FileSorter()
        sorter.run(source, dests)
        assert sum(sorter.get_stats().values()) > 0

        sorter.reset_stats()
        assert sum(sorter.get_stats().values()) == 0

    def test_summary_line_empty(self):
        """An empty run still produces a summary line."""
        assert FileSorter.summary_line([]) == "Sorted 0 files: 0 moved, 0 skipped, 0 failed"


class TestSourceValidation:
    """Tests for source checks that abort a run."""

    def test_source_is_file(self, tmp_path, workspace):
        """A file as source aborts before destinations are created."""
        _, dests = workspace
        f = tmp_path / "file.txt"
        f.write_text("x")

        with pytest.raises(NotADirectoryError):
            FileSorter().run(f, dests)

        assert not Path(dests.others).exists()
