"""
Run report writer.

This module is responsible for:
- Writing one row per file outcome, preceded by PARAMETER rows
- Writing XLSX workbooks via openpyxl for .xlsx paths
- Writing CSV for any other path
"""

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Union

import openpyxl
from openpyxl.styles import Font

from .types import MoveOutcome

logger = logging.getLogger(__name__)

REPORT_COLUMNS = ["timestamp", "status", "category", "source_path", "dest_path", "message"]
PARAMETER_STATUS = "PARAMETER"
END_PARAMETERS = "--- END PARAMETERS ---"


def build_rows(
    outcomes: List[MoveOutcome],
    parameters: Optional[Dict[str, object]] = None
) -> List[List[str]]:
    """Turn outcomes (and optional run parameters) into report rows."""
    timestamp = datetime.now().isoformat(timespec="seconds")
    rows: List[List[str]] = []

    if parameters:
        for key, value in parameters.items():
            rows.append([timestamp, PARAMETER_STATUS, "", "", "", f"{key}={value}"])
        rows.append([timestamp, PARAMETER_STATUS, "", "", "", END_PARAMETERS])

    for outcome in outcomes:
        rows.append([
            timestamp,
            outcome.status.value,
            outcome.category.value if outcome.category else "",
            outcome.source_path,
            outcome.dest_path or "",
            outcome.message,
        ])
    return rows


def write_report(
    outcomes: List[MoveOutcome],
    report_path: Union[str, Path],
    parameters: Optional[Dict[str, object]] = None
) -> Path:
    """
    Write a report of a run.

    Args:
        outcomes: Outcomes returned by FileSorter.run
        report_path: Target file; ".xlsx" writes a workbook, anything else CSV
        parameters: Optional run parameters written as PARAMETER rows

    Returns:
        The path written
    """
    path = Path(report_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    rows = build_rows(outcomes, parameters)

    if path.suffix.lower() == ".xlsx":
        _write_xlsx(path, rows)
    else:
        _write_csv(path, rows)

    logger.info(f"Report written: {path} ({len(outcomes)} files)")
    return path


def _write_csv(path: Path, rows: List[List[str]]) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(REPORT_COLUMNS)
        writer.writerows(rows)


def _write_xlsx(path: Path, rows: List[List[str]]) -> None:
    workbook = openpyxl.Workbook()
    try:
        worksheet = workbook.active
        worksheet.title = "Report"
        worksheet.append(REPORT_COLUMNS)
        for cell in worksheet[1]:
            cell.font = Font(bold=True)
        for row in rows:
            worksheet.append(row)
        worksheet.freeze_panes = "A2"
        workbook.save(path)
    finally:
        workbook.close()
