"""
File sorter for moving files into their category folders.

This module is responsible for:
- Checking the source exists and creating missing destination folders
- Scanning the source, excluding files already in a destination
- Classifying each file and picking its destination folder
- Resolving name conflicts through the configured policy
- Moving files one at a time, recording failures without stopping
- Supporting dry-run mode (no actual moves)
- Returning one MoveOutcome per file for reporting
"""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Set, Union

from .categories import CategoryMap
from .conflicts import ConflictResolver
from .scanner import scan
from .types import (
    Candidate,
    ConflictDecision,
    DestinationSet,
    MoveOutcome,
    MoveStatus,
)
from .utils import safe_move

logger = logging.getLogger(__name__)

NOTHING_TO_DO = "No files found in source directory and subdirectories."


class DestinationError(OSError):
    """A destination folder could not be created."""


class FileSorter:
    """
    Sorts files from a source tree into category folders.

    Runs are single-threaded: each file is classified, checked for a
    conflict and moved before the next one is looked at, so a conflict
    check always sees the moves made before it.
    """

    def __init__(
        self,
        category_map: Optional[CategoryMap] = None,
        resolver: Optional[ConflictResolver] = None,
        dry_run: bool = False,
        sink: Optional[Callable[[str], None]] = None
    ):
        """
        Initialize the sorter.

        Args:
            category_map: Extension table (defaults to the built-in one)
            resolver: Conflict resolver (defaults to skipping conflicts)
            dry_run: If True, report what would happen without moving
            sink: Optional callable receiving one human-readable line per
                  file plus a summary line per run
        """
        self.category_map = category_map or CategoryMap.default()
        self.resolver = resolver or ConflictResolver()
        self.dry_run = dry_run
        self.sink = sink

        self._stats: Dict[MoveStatus, int] = {status: 0 for status in MoveStatus}
        self._renamed = 0

        # Destination paths planned during a dry run
        self._claimed_paths: Set[str] = set()

    def _emit(self, line: str) -> None:
        if self.sink:
            self.sink(line)

    def _ensure_destinations(self, destinations: DestinationSet) -> None:
        for folder in destinations.paths():
            if self.dry_run:
                if not Path(folder).is_dir():
                    logger.info(f"[DRY RUN] Would create folder: {folder}")
                continue
            try:
                Path(folder).mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise DestinationError(
                    f"Cannot create destination directory '{folder}': {e}"
                ) from e

    def run(
        self,
        source_root: Union[str, Path],
        destinations: DestinationSet
    ) -> List[MoveOutcome]:
        """
        Sort every file under source_root into its destination folder.

        Args:
            source_root: Directory to sort (scanned recursively)
            destinations: Folder for each category

        Returns:
            One MoveOutcome per file found, in scan order

        Raises:
            FileNotFoundError: If source_root does not exist
            NotADirectoryError: If source_root is a file
            DestinationError: If a destination folder cannot be created
        """
        source = Path(source_root)
        if not source.exists():
            raise FileNotFoundError(f"Source directory '{source}' does not exist.")
        if not source.is_dir():
            raise NotADirectoryError(f"Source path is not a directory: {source}")

        self.reset_stats()
        self._ensure_destinations(destinations)

        # Materialize before moving so moves never race the directory walk
        candidates = list(scan(source, destinations.paths()))

        if not candidates:
            logger.warning(NOTHING_TO_DO)
            self._emit(NOTHING_TO_DO)
            return []

        total = len(candidates)
        logger.info(f"Processing {total} files...")

        outcomes: List[MoveOutcome] = []
        for i, candidate in enumerate(candidates):
            outcome = self.sort_file(candidate, destinations)
            outcomes.append(outcome)

            # Log progress every 100 files
            if (i + 1) % 100 == 0:
                logger.info(f"Processed {i + 1}/{total} files...")

        summary = self.summary_line(outcomes)
        logger.info(summary)
        self._emit(summary)
        return outcomes

    def sort_file(self, candidate: Candidate, destinations: DestinationSet) -> MoveOutcome:
        """
        Classify, resolve and move one file.

        Never raises: any failure becomes a FAILED outcome.
        """
        category = self.category_map.classify(candidate.extension)
        folder = destinations.for_category(category)

        try:
            resolution = self.resolver.resolve(folder, candidate.name, self._claimed_paths)
        except Exception as e:
            logger.error(f"Could not resolve destination for {candidate.path}: {e}")
            outcome = MoveOutcome.failed(candidate.path, e, category)
            self._emit(f"Error moving {candidate.name}: {outcome.message}")
            return self._record(outcome)

        if resolution.decision == ConflictDecision.SKIP:
            logger.warning(f"Skipped {candidate.name} due to conflict in {folder}")
            self._emit(f"Skipped {candidate.name} due to conflict")
            return self._record(
                MoveOutcome.skipped(candidate.path, "conflict", category,
                                    str(Path(folder) / candidate.name))
            )

        dest_path = resolution.path
        renamed = resolution.decision == ConflictDecision.RENAME

        if self.dry_run:
            logger.info(f"[DRY RUN] {candidate.path} -> {dest_path}")
            self._claimed_paths.add(dest_path)
            self._emit(f"Would move {candidate.name} to {folder}")
            return self._record(MoveOutcome(
                source_path=candidate.path,
                status=MoveStatus.DRY_RUN,
                category=category,
                dest_path=dest_path,
                message=f"Would move to {dest_path}",
                renamed=renamed,
            ))

        logger.info(f"Moving: {candidate.path} -> {dest_path}")
        success, message = safe_move(candidate.path, dest_path)

        if not success:
            logger.error(f"Error moving {candidate.path}: {message}")
            self._emit(f"Error moving {candidate.name}: {message}")
            return self._record(
                MoveOutcome.failed(candidate.path, message, category, dest_path)
            )

        self._emit(f"Moved {candidate.name} to {folder}")
        outcome = MoveOutcome.moved(candidate.path, dest_path, category, renamed)
        if renamed:
            outcome.message = f"Moved successfully (renamed to {Path(dest_path).name})"
        return self._record(outcome)

    def _record(self, outcome: MoveOutcome) -> MoveOutcome:
        self._stats[outcome.status] += 1
        if outcome.renamed:
            self._renamed += 1
        return outcome

    @staticmethod
    def summary_line(outcomes: List[MoveOutcome]) -> str:
        counts = {status: 0 for status in MoveStatus}
        for outcome in outcomes:
            counts[outcome.status] += 1
        line = (
            f"Sorted {len(outcomes)} files: {counts[MoveStatus.MOVED]} moved, "
            f"{counts[MoveStatus.SKIPPED]} skipped, {counts[MoveStatus.FAILED]} failed"
        )
        if counts[MoveStatus.DRY_RUN]:
            line += f", {counts[MoveStatus.DRY_RUN]} would move"
        return line

    def get_stats(self) -> Dict[str, int]:
        """
        Get statistics about sort operations since the last reset.

        Returns:
            Dictionary mapping status values to counts, plus "renamed"
        """
        stats = {status.value: count for status, count in self._stats.items()}
        stats["renamed"] = self._renamed
        return stats

    def get_summary(self) -> str:
        """
        Get a human-readable summary of sort operations.

        Returns:
            Formatted summary string
        """
        stats = self.get_stats()
        total = sum(count for key, count in stats.items() if key != "renamed")

        lines = [f"Sort Summary ({total} total):"]

        if self.dry_run:
            lines.append(f"  Would move: {stats[MoveStatus.DRY_RUN.value]}")
        else:
            lines.append(f"  Moved: {stats[MoveStatus.MOVED.value]}")

        if stats["renamed"]:
            lines.append(f"    (with rename: {stats['renamed']})")

        if stats[MoveStatus.SKIPPED.value]:
            lines.append(f"  Skipped: {stats[MoveStatus.SKIPPED.value]}")

        if stats[MoveStatus.FAILED.value]:
            lines.append(f"  Errors: {stats[MoveStatus.FAILED.value]}")

        return "\n".join(lines)

    def reset_stats(self) -> None:
        """Reset statistics and planned paths for a new run."""
        self._stats = {status: 0 for status in MoveStatus}
        self._renamed = 0
        self._claimed_paths.clear()
