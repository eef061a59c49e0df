"""
Name conflict handling.

This module is responsible for:
- Detecting when a file's destination path is already taken
- Asking a pluggable policy whether to rename or skip
- Building a free "name_1.ext", "name_2.ext", ... path for renames

A policy is any callable ``policy(file_name, destination_path)`` returning
ConflictDecision.RENAME or ConflictDecision.SKIP.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Set, Tuple, Union

from .types import ConflictDecision

logger = logging.getLogger(__name__)

ConflictPolicy = Callable[[str, str], ConflictDecision]

MAX_SUFFIX_ATTEMPTS = 10000


def safe_destination_path(
    folder: Union[str, Path],
    file_name: str,
    claimed_paths: Optional[Set[str]] = None
) -> str:
    """
    Resolve a free destination path for a file.

    Returns folder/file_name if that is free, otherwise appends _1, _2,
    etc. to the stem (keeping the extension) until a free name is found.

    The extension is Path.suffix, so a dotfile such as ".bashrc" has no
    extension and becomes ".bashrc_1", not "_1.bashrc".

    Args:
        folder: The destination folder
        file_name: The original file name
        claimed_paths: Optional set of paths already planned in this run
                       (dry run), treated as taken

    Returns:
        The full destination path (unique, may have suffix)

    Raises:
        RuntimeError: If no free name is found within MAX_SUFFIX_ATTEMPTS
    """
    folder = Path(folder)
    claimed_paths = claimed_paths or set()

    def taken(path: Path) -> bool:
        return path.exists() or str(path) in claimed_paths

    candidate = folder / file_name
    if not taken(candidate):
        return str(candidate)

    original = Path(file_name)
    stem, suffix = original.stem, original.suffix

    counter = 1
    while True:
        candidate = folder / f"{stem}_{counter}{suffix}"
        if not taken(candidate):
            return str(candidate)
        counter += 1

        # Safety limit to prevent infinite loops
        if counter > MAX_SUFFIX_ATTEMPTS:
            raise RuntimeError(
                f"Could not find unique name for '{file_name}' "
                f"after {MAX_SUFFIX_ATTEMPTS} attempts"
            )


def rename_policy(file_name: str, destination_path: str) -> ConflictDecision:
    return ConflictDecision.RENAME


def skip_policy(file_name: str, destination_path: str) -> ConflictDecision:
    return ConflictDecision.SKIP


class ScriptedPolicy:
    """
    Replay a fixed list of decisions, then fall back to a default.

    Every call is recorded in ``calls`` as (file_name, destination_path).
    """

    def __init__(
        self,
        decisions: Iterable[ConflictDecision] = (),
        default: ConflictDecision = ConflictDecision.SKIP
    ):
        self._decisions = list(decisions)
        self.default = default
        self.calls: List[Tuple[str, str]] = []

    def __call__(self, file_name: str, destination_path: str) -> ConflictDecision:
        self.calls.append((file_name, destination_path))
        if self._decisions:
            return self._decisions.pop(0)
        return self.default


class PromptPolicy:
    """Ask on the terminal what to do with each conflicting file."""

    ANSWERS = {
        "r": ConflictDecision.RENAME,
        "rename": ConflictDecision.RENAME,
        "s": ConflictDecision.SKIP,
        "skip": ConflictDecision.SKIP,
    }

    def __init__(self, input_func: Optional[Callable[[str], str]] = None, output_func=None):
        self.input_func = input_func or input
        self.output_func = output_func or print

    def __call__(self, file_name: str, destination_path: str) -> ConflictDecision:
        self.output_func(
            f"The file '{file_name}' already exists at '{destination_path}'."
        )
        while True:
            answer = self.input_func("[r]ename or [s]kip? ").strip().lower()
            if answer in self.ANSWERS:
                return self.ANSWERS[answer]
            self.output_func("Please answer 'r' to rename or 's' to skip.")


@dataclass
class ConflictResolution:
    """Where a file should go, or None when it should be skipped."""
    decision: ConflictDecision
    path: Optional[str]


class ConflictResolver:
    """Decide the final destination path of a file, consulting a policy on conflicts."""

    def __init__(self, policy: ConflictPolicy = skip_policy):
        self.policy = policy

    def resolve(
        self,
        destination_folder: Union[str, Path],
        file_name: str,
        claimed_paths: Optional[Set[str]] = None
    ) -> ConflictResolution:
        """
        Args:
            destination_folder: Folder the file is bound for
            file_name: The file's name
            claimed_paths: Paths planned earlier in the run that do not
                           exist on disk yet (dry run); they count as taken
        """
        claimed_paths = claimed_paths or set()
        target = Path(destination_folder) / file_name
        if not target.exists() and str(target) not in claimed_paths:
            return ConflictResolution(ConflictDecision.USE_ORIGINAL, str(target))

        decision = self.policy(file_name, str(target))
        logger.debug(f"Conflict for {target}: policy chose {decision}")

        if decision == ConflictDecision.RENAME:
            return ConflictResolution(
                ConflictDecision.RENAME,
                safe_destination_path(destination_folder, file_name, claimed_paths)
            )

        if decision == ConflictDecision.SKIP:
            return ConflictResolution(ConflictDecision.SKIP, None)

        raise ValueError(f"Conflict policy returned an invalid decision: {decision!r}")
