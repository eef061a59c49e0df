r"""
Path utilities and the single-file move primitive.

This module provides:
- normalize_path(): Canonical absolute form of a path, preserving UNC
- is_path_under(): Segment-aware "is this path inside that folder" check
- to_extended_length_path(): Convert to \\?\ form for Windows API calls
- safe_move(): Move one file, turning OS errors into readable messages
"""

import logging
import os
import shutil
import sys
from pathlib import Path
from typing import Tuple, Union

logger = logging.getLogger(__name__)

# Windows extended-length path prefixes
EXTENDED_PATH_PREFIX = "\\\\?\\"
EXTENDED_UNC_PREFIX = "\\\\?\\UNC\\"
UNC_PREFIX = "\\\\"


def normalize_path(path: Union[str, Path]) -> str:
    """
    Normalize a path to canonical absolute form.

    Relative paths are made absolute and symlinks in the parent chain are
    resolved. UNC paths (\\\\server\\share) are only cleaned up, since
    resolving them can break the share prefix.

    Args:
        path: A file path as string or Path object

    Returns:
        Normalized absolute path as string
    """
    path_str = str(path)

    if path_str.startswith(EXTENDED_PATH_PREFIX):
        return path_str

    if path_str.startswith(UNC_PREFIX):
        parts = path_str[2:].replace("/", "\\").split("\\")
        cleaned = [part for i, part in enumerate(parts) if part or i < 2]
        return UNC_PREFIX + "\\".join(cleaned)

    try:
        return str(Path(path_str).resolve())
    except (OSError, ValueError):
        return os.path.abspath(os.path.normpath(path_str))


def is_path_under(path: Union[str, Path], root: Union[str, Path]) -> bool:
    """
    Check whether a path is the root itself or lies inside it.

    Comparison is on whole path segments of the normalized paths, so
    "/dest/ImagesOld/a.jpg" is not under "/dest/Images". Case is folded
    on Windows only.

    Examples:
        >>> is_path_under("/dest/Images/a.jpg", "/dest/Images")
        True
        >>> is_path_under("/dest/ImagesOld/a.jpg", "/dest/Images")
        False
    """
    path_norm = os.path.normcase(normalize_path(path))
    root_norm = os.path.normcase(normalize_path(root))
    try:
        return os.path.commonpath([path_norm, root_norm]) == root_norm
    except ValueError:
        # Different drives, or a mix of absolute and relative
        return False


def to_extended_length_path(path: Union[str, Path]) -> str:
    """
    Convert a path to Windows extended-length form (\\\\?\\ prefix).

    Returns the path unchanged on non-Windows platforms or when it is
    already in extended form.
    """
    if sys.platform != "win32":
        return str(path)

    path_str = normalize_path(path)

    if path_str.startswith(EXTENDED_PATH_PREFIX):
        return path_str

    if path_str.startswith(UNC_PREFIX):
        return EXTENDED_UNC_PREFIX + path_str[2:]

    return EXTENDED_PATH_PREFIX + path_str


def safe_move(
    src: Union[str, Path],
    dest: Union[str, Path],
    use_extended_paths: bool = True
) -> Tuple[bool, str]:
    """
    Move a single file, reporting failure instead of raising.

    shutil.move renames on the same volume and falls back to copy + delete
    across volumes. Windows error codes are turned into clearer messages.

    Args:
        src: Source file path
        dest: Full destination file path (not just the folder)
        use_extended_paths: Whether to use \\\\?\\ prefix on Windows

    Returns:
        Tuple of (success: bool, message: str)
        On success: (True, "Moved successfully")
        On failure: (False, "Error description")
    """
    if sys.platform == "win32" and use_extended_paths:
        src_str = to_extended_length_path(src)
        dest_str = to_extended_length_path(dest)
    else:
        src_str = str(src)
        dest_str = str(dest)

    try:
        shutil.move(src_str, dest_str)
        return (True, "Moved successfully")

    except PermissionError as e:
        return (False, f"PermissionError: {_format_windows_error(e)}")

    except OSError as e:
        error_code = getattr(e, "winerror", None)

        if error_code == 32:
            # WinError 32: File in use
            return (False, f"File is locked or in use: {_format_windows_error(e)}")

        elif error_code == 5:
            return (False, f"Access denied: {_format_windows_error(e)}")

        elif error_code == 206:
            return (False, f"Path too long: {_format_windows_error(e)}")

        else:
            return (False, f"OSError: {_format_windows_error(e)}")

    except Exception as e:
        return (False, f"Unexpected error: {type(e).__name__}: {e}")


def _format_windows_error(e: Exception) -> str:
    """Format an error with its Windows error code if available."""
    error_code = getattr(e, "winerror", None)
    if error_code is not None:
        return f"[WinError {error_code}] {e}"
    return str(e)
