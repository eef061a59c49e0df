"""
Command-line interface for the file sorter.

Usage:
    file-sorter SOURCE --images DIR --videos DIR --texts DIR \\
        --tables DIR --pdfs DIR --others DIR [options]

Any folder not given on the command line is taken from the saved settings.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .conflicts import ConflictResolver, PromptPolicy, rename_policy, skip_policy
from .mover import DestinationError, FileSorter
from .report import write_report
from .settings import AppSettings
from .types import MoveStatus

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FILE_ERRORS = 1
EXIT_USAGE = 2
EXIT_FATAL = 3

# (argument dest, settings field)
FOLDER_ARGS = [
    ("source", "source_folder"),
    ("images", "images_folder"),
    ("videos", "videos_folder"),
    ("texts", "texts_folder"),
    ("tables", "tables_folder"),
    ("pdfs", "pdfs_folder"),
    ("others", "others_folder"),
]

POLICIES = {
    "rename": rename_policy,
    "skip": skip_policy,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="file-sorter",
        description="Move files into Images, Videos, Texts, Tables, PDFs "
                    "and Others folders based on their extension.",
    )
    parser.add_argument(
        "source",
        nargs="?",
        help="Folder to sort (searched recursively)",
    )
    for dest, _ in FOLDER_ARGS[1:]:
        parser.add_argument(
            f"--{dest}",
            metavar="DIR",
            help=f"Destination folder for {dest}",
        )
    parser.add_argument(
        "--on-conflict",
        choices=["ask", "rename", "skip"],
        default="ask",
        help="What to do when a file with the same name already exists "
             "(default: ask)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be moved without moving anything",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Save the folders used for this run as the new defaults",
    )
    parser.add_argument(
        "--settings",
        metavar="PATH",
        help="Settings file to read and save (default: app data folder)",
    )
    parser.add_argument(
        "--report",
        metavar="PATH",
        help="Write a report of every file (.xlsx or .csv)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--log-file",
        metavar="PATH",
        help="Also write the log to this file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """Configure root logging for the command line."""
    level = logging.DEBUG if verbose else logging.INFO
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def merge_settings(args: argparse.Namespace, settings: AppSettings) -> AppSettings:
    """Command-line folders override saved ones."""
    merged = AppSettings(**vars(settings))
    for dest, field_name in FOLDER_ARGS:
        value = getattr(args, dest)
        if value:
            setattr(merged, field_name, value)
    return merged


def make_resolver(on_conflict: str) -> ConflictResolver:
    if on_conflict == "ask":
        return ConflictResolver(PromptPolicy())
    return ConflictResolver(POLICIES[on_conflict])


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.log_file)

    settings = merge_settings(args, AppSettings.load(args.settings))

    if args.save:
        try:
            saved = settings.save(args.settings)
            logger.info(f"Settings saved to {saved}")
        except OSError as e:
            logger.warning(f"Could not save settings: {e}")

    missing = settings.missing_fields()
    if missing:
        names = ", ".join(name.replace("_folder", "") for name in missing)
        print(f"Error: Please select or enter all folder paths (missing: {names}).",
              file=sys.stderr)
        return EXIT_USAGE

    destinations = settings.to_destination_set()
    sorter = FileSorter(
        resolver=make_resolver(args.on_conflict),
        dry_run=args.dry_run,
        sink=print,
    )

    try:
        outcomes = sorter.run(settings.source_folder, destinations)
    except (FileNotFoundError, NotADirectoryError, DestinationError) as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FATAL

    if args.report:
        write_report(outcomes, args.report, parameters={
            "version": __version__,
            "source": settings.source_folder,
            "dry_run": args.dry_run,
            "on_conflict": args.on_conflict,
        })

    if any(o.status == MoveStatus.FAILED for o in outcomes):
        return EXIT_FILE_ERRORS
    return EXIT_OK
