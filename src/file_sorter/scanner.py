"""
Recursive source scanner.

This module is responsible for:
- Walking every subdirectory of the source root
- Yielding each regular file once as a Candidate
- Skipping anything that already lives under a destination folder, so
  destinations nested inside the source are never re-processed
"""

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, List, Union

from .types import Candidate
from .utils import is_path_under, normalize_path

logger = logging.getLogger(__name__)


def _under_any(path: str, roots: List[str]) -> bool:
    return any(is_path_under(path, root) for root in roots)


def scan(
    source_root: Union[str, Path],
    destination_paths: Iterable[Union[str, Path]] = ()
) -> Iterator[Candidate]:
    """
    Lazily yield every file under source_root, recursively.

    Args:
        source_root: Directory to scan
        destination_paths: Folders whose contents must be excluded

    Yields:
        Candidate for each eligible file

    Raises:
        FileNotFoundError: If source_root does not exist
        NotADirectoryError: If source_root is not a directory
    """
    root = Path(source_root)

    if not root.exists():
        raise FileNotFoundError(f"Source directory '{root}' does not exist.")

    if not root.is_dir():
        raise NotADirectoryError(f"Source path is not a directory: {root}")

    return _walk(normalize_path(root), [normalize_path(d) for d in destination_paths])


def _walk(root: str, excluded: List[str]) -> Iterator[Candidate]:
    logger.info(f"Scanning files under: {root}")
    file_count = 0
    excluded_count = 0

    def on_error(error: OSError):
        logger.warning(f"Cannot access {error.filename}: {error}")

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        # Prune destination trees before descending into them
        kept = []
        for dirname in dirnames:
            if _under_any(os.path.join(dirpath, dirname), excluded):
                logger.debug(f"Skipping destination folder: {os.path.join(dirpath, dirname)}")
            else:
                kept.append(dirname)
        dirnames[:] = kept

        for filename in filenames:
            full_path = os.path.join(dirpath, filename)
            if not os.path.isfile(full_path):
                continue

            if _under_any(full_path, excluded):
                excluded_count += 1
                logger.debug(f"Already in a destination: {full_path}")
                continue

            file_count += 1
            yield Candidate.from_path(full_path)

    logger.info(
        f"Scan complete: {file_count} files found "
        f"({excluded_count} already in a destination)"
    )

