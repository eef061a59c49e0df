"""
File Sorter - sort files into category folders based on their extension.

This package provides functionality to:
- Classify files by extension into Images, Videos, Texts, Tables, PDFs or Others
- Scan a source tree recursively, skipping files already in a destination folder
- Move each file to its category folder
- Resolve name conflicts by renaming with numeric suffixes or skipping
- Isolate per-file failures so one bad file never stops a run
- Generate CSV or XLSX reports of every outcome
"""

__version__ = "0.1.0"
__author__ = "File Sorter Team"
