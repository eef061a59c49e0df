"""
Shared fixtures for file sorter tests.
"""

from pathlib import Path

import pytest

from file_sorter.types import DestinationSet


def create_files(base: Path, names) -> None:
    """Create files (relative paths, parents included) under base."""
    for name in names:
        path = base / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"content of {name}")


@pytest.fixture
def workspace(tmp_path):
    """A source folder plus a DestinationSet under a separate sorted/ folder."""
    source = tmp_path / "source"
    source.mkdir()
    sorted_root = tmp_path / "sorted"
    destinations = DestinationSet(
        images=str(sorted_root / "Images"),
        videos=str(sorted_root / "Videos"),
        texts=str(sorted_root / "Texts"),
        tables=str(sorted_root / "Tables"),
        pdfs=str(sorted_root / "PDFs"),
        others=str(sorted_root / "Others"),
    )
    return source, destinations
