"""
Extension to category mapping.

This module is responsible for:
- Holding the fixed extension table (Images, Videos, Texts, Tables, PDFs)
- Classifying an extension or file name, case-insensitively
- Falling back to Others for anything not in the table, including ""
"""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Tuple

from .types import Category

logger = logging.getLogger(__name__)

DEFAULT_RULES = (
    (Category.IMAGES, (".jpg", ".jpeg", ".png", ".gif", ".bmp")),
    (Category.VIDEOS, (".mp4", ".mov", ".avi", ".mkv")),
    (Category.TEXTS, (".txt", ".doc", ".docx", ".rtf")),
    (Category.TABLES, (".csv", ".xls", ".xlsx")),
    (Category.PDFS, (".pdf",)),
)


def normalize_extension(extension: str) -> str:
    """Lower-case an extension for table lookup."""
    return (extension or "").lower()


class CategoryMap:
    """
    Read-only table from normalized extension to Category.

    Built once per run and passed to the sorter. Lookups are exact on the
    lower-cased extension, so ".JPG" and ".jpg" match but "jpg" does not.
    """

    def __init__(self, rules: Iterable[Tuple[str, Category]]):
        """
        Build the table from (extension, category) pairs.

        Args:
            rules: Pairs in registration order; a later duplicate wins
        """
        table = {}
        for extension, category in rules:
            key = normalize_extension(extension)
            if key in table and table[key] != category:
                logger.warning(
                    f"Extension {key} re-registered: {table[key].value} -> {category.value}"
                )
            table[key] = category
        self._table: Mapping[str, Category] = MappingProxyType(table)

    @classmethod
    def default(cls) -> "CategoryMap":
        return cls(
            (ext, category)
            for category, extensions in DEFAULT_RULES
            for ext in extensions
        )

    @property
    def rules(self) -> Mapping[str, Category]:
        return self._table

    def classify(self, extension: Optional[str]) -> Category:
        """
        Classify an extension.

        Never raises: unknown, empty or None extensions are Others.
        """
        return self._table.get(normalize_extension(extension), Category.OTHERS)

    def classify_name(self, file_name: str) -> Category:
        return self.classify(Path(file_name).suffix)

    def extensions_for(self, category: Category) -> List[str]:
        return [ext for ext, cat in self._table.items() if cat is category]

    def __len__(self):
        return len(self._table)

    def __contains__(self, extension):
        return normalize_extension(extension) in self._table
