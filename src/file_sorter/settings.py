"""
Saved folder settings.

The last used source and destination folders are kept as JSON in the
user's application data directory (``%APPDATA%\\FileSorter`` on Windows,
``~/.config/FileSorter`` elsewhere). Set FILE_SORTER_CONFIG_DIR to use a
different directory.
"""

import json
import logging
import os
import sys
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import List, Optional, Union

from .types import DestinationSet

logger = logging.getLogger(__name__)

APP_DIR_NAME = "FileSorter"
SETTINGS_FILE_NAME = "settings.json"
CONFIG_DIR_ENV = "FILE_SORTER_CONFIG_DIR"


def config_dir() -> Path:
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override)
    if sys.platform == "win32":
        base = os.environ.get("APPDATA") or str(Path.home())
        return Path(base) / APP_DIR_NAME
    return Path.home() / ".config" / APP_DIR_NAME


def default_settings_path() -> Path:
    return config_dir() / SETTINGS_FILE_NAME


@dataclass
class AppSettings:
    """Source folder plus one destination folder per category."""
    source_folder: str = ""
    images_folder: str = ""
    videos_folder: str = ""
    texts_folder: str = ""
    tables_folder: str = ""
    pdfs_folder: str = ""
    others_folder: str = ""

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> "AppSettings":
        """
        Load settings from JSON.

        A missing file gives empty settings. A file that cannot be read or
        parsed also gives empty settings, with a warning. Unknown keys are
        ignored and non-string values are dropped.
        """
        path = Path(path) if path else default_settings_path()

        if not path.exists():
            logger.debug(f"No settings file at {path}, using defaults")
            return cls()

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Could not load settings from {path}: {e}")
            return cls()

        if not isinstance(data, dict):
            logger.warning(f"Settings file {path} does not contain a JSON object")
            return cls()

        known = {f.name for f in fields(cls)}
        values = {
            key: value for key, value in data.items()
            if key in known and isinstance(value, str)
        }
        logger.debug(f"Loaded settings from {path}")
        return cls(**values)

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        """
        Write settings as indented JSON, creating the directory if needed.

        Raises:
            OSError: If the file cannot be written
        """
        path = Path(path) if path else default_settings_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(asdict(self), indent=2), encoding="utf-8")
        logger.debug(f"Saved settings to {path}")
        return path

    def missing_fields(self) -> List[str]:
        return [f.name for f in fields(self) if not getattr(self, f.name).strip()]

    def to_destination_set(self) -> DestinationSet:
        """
        Raises:
            ValueError: If any destination folder is empty
        """
        return DestinationSet(
            images=self.images_folder,
            videos=self.videos_folder,
            texts=self.texts_folder,
            tables=self.tables_folder,
            pdfs=self.pdfs_folder,
            others=self.others_folder,
        )
