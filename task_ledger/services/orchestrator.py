from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import LedgerConfig
from ..excel.workbook import find_data_sheet, get_or_create_table, read_workbook, write_tables
from ..logging.decision_log import DecisionLogBuffer
from ..models.archive_result import ArchiveResult, RowDecision
from ..models.processing_result import FileStat, FileStatus, ProcessingResult
from ..models.table import Table
from .archive import archive_completed_tasks
from .progress import ProgressTracker

"""Service orchestration: archive every ledger workbook in a directory.

Each workbook is independent: it is read, its task sheet archived into its own
Archive sheet, and written back. A workbook that fails is reported and the run
continues with the next one.
"""

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal error that prevents the run from starting."""


def scan_ledger_files(directory: Path) -> list[Path]:
    """Return the .xlsx files directly inside ``directory``, sorted by name.

    Raises:
        ProcessingError: If the directory is missing or unreadable
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    try:
        # "~$" files are Excel lock files
        return sorted(
            p for p in directory.iterdir()
            if p.is_file() and p.suffix == ".xlsx" and not p.name.startswith("~$")
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def local_now(config: LedgerConfig) -> datetime:
    """Current wall-clock time in the configured timezone, without tzinfo (Excel stores naive values)."""
    return datetime.now(config.tzinfo).replace(tzinfo=None, microsecond=0)


def open_ledger(path: Path, config: LedgerConfig) -> tuple[dict[str, Table], Table]:
    """Read a workbook and select its task sheet.

    Raises:
        DataSheetNotFoundError: If no sheet looks like a task table
    """
    tables = read_workbook(path)
    return tables, find_data_sheet(tables, config.sheet_name, config.archive_sheet_name)


def archive_ledger(
    path: Path,
    tables: dict[str, Table],
    source: Table,
    config: LedgerConfig,
    now: datetime,
) -> ArchiveResult:
    """Archive ``source`` into the workbook's archive sheet and save when rows moved.

    Raises:
        HeaderNotFoundError: before anything is written
    """
    archive = get_or_create_table(tables, config.archive_sheet_name)
    result = archive_completed_tasks(
        source,
        archive,
        now=now,
        scan_rows=config.header_scan_rows,
    )
    if result.archived:
        write_tables(path, [archive, source])
    return result


def process_ledger(path: Path, config: LedgerConfig, now: datetime) -> tuple[str, ArchiveResult]:
    """Archive one workbook in place.

    Returns:
        (selected task sheet name, ArchiveResult)
    """
    tables, source = open_ledger(path, config)
    return source.name, archive_ledger(path, tables, source, config, now)


def process_all(
    config: LedgerConfig,
    now: datetime | None = None,
    decision_log: DecisionLogBuffer | None = None,
) -> ProcessingResult:
    """Archive all ledger workbooks in ``config.source_directory``.

    Args:
        config: Ledger configuration
        now: Timestamp stamped on archived/regenerated rows (default: local_now)
        decision_log: Buffer for per-row decisions (default: logs/ directory)

    Raises:
        ProcessingError: If the source directory cannot be scanned
    """
    start_time = datetime.now(UTC)
    run_now = now if now is not None else local_now(config)
    decision_log = decision_log if decision_log is not None else DecisionLogBuffer()

    file_paths = scan_ledger_files(Path(config.source_directory))

    file_stats: list[FileStat] = []
    with ProgressTracker(len(file_paths)) as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            file_start = datetime.now(UTC)
            sheet_name: str | None = None
            try:
                tables, source = open_ledger(file_path, config)
                sheet_name = source.name
                result = archive_ledger(file_path, tables, source, config, run_now)
            except Exception as e:
                logger.error(f"{file_path.name}: {e}")
                stat = FileStat(
                    file_name=file_path.name,
                    status=FileStatus.FAILED,
                    sheet_name=sheet_name,
                    archived_rows=0,
                    regenerated_rows=0,
                    elapsed_seconds=(datetime.now(UTC) - file_start).total_seconds(),
                    error=str(e),
                )
            else:
                decision_log.extend(
                    [
                        RowDecision(
                            row_number=d.row_number,
                            status=d.status,
                            action=d.action,
                            reason=d.reason,
                            sheet=d.sheet,
                            file=file_path.name,
                        )
                        for d in result.decisions
                    ]
                )
                stat = FileStat(
                    file_name=file_path.name,
                    status=FileStatus.SUCCESS,
                    sheet_name=sheet_name,
                    archived_rows=result.archived,
                    regenerated_rows=result.regenerated,
                    elapsed_seconds=(datetime.now(UTC) - file_start).total_seconds(),
                )
                logger.info(
                    f"{file_path.name}: sheet={sheet_name} archived={result.archived} "
                    f"regenerated={result.regenerated}"
                )
            file_stats.append(stat)
            progress.record(stat)

    try:
        log_path = decision_log.flush()
    except OSError as e:
        # workbooks are already saved at this point
        logger.warning(f"failed to write decision log: {e}")
    else:
        if log_path is not None:
            logger.debug(f"decision log written: {log_path}")

    end_time = datetime.now(UTC)
    return ProcessingResult(
        success_files=sum(1 for s in file_stats if s.status is FileStatus.SUCCESS),
        failed_files=sum(1 for s in file_stats if s.status is FileStatus.FAILED),
        total_archived_rows=sum(s.archived_rows for s in file_stats),
        total_regenerated_rows=sum(s.regenerated_rows for s in file_stats),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
    )
