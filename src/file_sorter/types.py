"""
Type definitions and data classes for the file sorter.

This module defines:
- Category: Enum of the fixed file categories plus the Others fallback
- Candidate: Data class for a file discovered during scanning
- DestinationSet: The six destination folders of a run
- MoveStatus: Enum for move outcomes
- MoveOutcome: Data class recording what happened to one candidate
- ConflictDecision: Enum of the answers a conflict policy can give
"""

from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import List, Optional


class Category(Enum):
    """File category. The value is the display name."""
    IMAGES = "Images"
    VIDEOS = "Videos"
    TEXTS = "Texts"
    TABLES = "Tables"
    PDFS = "PDFs"
    OTHERS = "Others"


@dataclass(slots=True)
class Candidate:
    """
    Represents a file discovered during scanning.

    Attributes:
        path: The canonical absolute path to the file
        name: The file's basename (e.g., "photo.JPG")
        extension: The final suffix including the dot, or "" if none
    """
    path: str
    name: str
    extension: str

    @classmethod
    def from_path(cls, path: str) -> "Candidate":
        p = Path(path)
        return cls(path=str(p), name=p.name, extension=p.suffix)

    def __hash__(self):
        return hash(self.path)

    def __eq__(self, other):
        if not isinstance(other, Candidate):
            return False
        return self.path == other.path


@dataclass(frozen=True)
class DestinationSet:
    """
    Destination folder for every category of a run.

    All six folders must be non-empty. They do not have to exist yet;
    the sorter creates missing ones before moving anything.
    """
    images: str
    videos: str
    texts: str
    tables: str
    pdfs: str
    others: str

    def __post_init__(self):
        empty = [f.name for f in fields(self) if not str(getattr(self, f.name) or "").strip()]
        if empty:
            raise ValueError(
                f"Destination folders must not be empty: {', '.join(empty)}"
            )
        for f in fields(self):
            object.__setattr__(self, f.name, str(getattr(self, f.name)))

    def for_category(self, category: Category) -> str:
        """Return the folder for a category, using Others for anything unmapped."""
        return getattr(self, category.name.lower(), self.others)

    def paths(self) -> List[str]:
        """All destination folders in category order."""
        return [getattr(self, f.name) for f in fields(self)]


class MoveStatus(Enum):
    """Status of a single file's move attempt."""
    MOVED = "MOVED"        # Moved to its category folder
    SKIPPED = "SKIPPED"    # Left in place (conflict policy said skip)
    FAILED = "FAILED"      # Move raised an error
    DRY_RUN = "DRY_RUN"    # Would move (dry run mode)


@dataclass
class MoveOutcome:
    """Result of processing one candidate."""
    source_path: str
    status: MoveStatus
    category: Optional[Category] = None
    dest_path: Optional[str] = None
    message: str = ""
    renamed: bool = False

    @classmethod
    def moved(cls, source_path, dest_path, category=None, renamed=False):
        return cls(source_path, MoveStatus.MOVED, category, dest_path,
                   "Moved successfully", renamed)

    @classmethod
    def skipped(cls, source_path, reason, category=None, dest_path=None):
        return cls(source_path, MoveStatus.SKIPPED, category, dest_path, reason)

    @classmethod
    def failed(cls, source_path, error, category=None, dest_path=None):
        return cls(source_path, MoveStatus.FAILED, category, dest_path, str(error))

    @property
    def name(self) -> str:
        return Path(self.source_path).name


class ConflictDecision(Enum):
    """What to do when the destination path is already taken."""
    USE_ORIGINAL = "use_original"  # No conflict, move to the computed path
    RENAME = "rename"              # Move under a suffixed name
    SKIP = "skip"                  # Leave the file where it is
