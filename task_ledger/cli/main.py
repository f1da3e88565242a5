from __future__ import annotations

import argparse
import os
import sys
from dataclasses import asdict, replace
from pathlib import Path
from zipfile import BadZipFile

import pandas as pd
from dotenv import load_dotenv
from openpyxl.utils.exceptions import InvalidFileException

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, LedgerConfig, load_config
from ..errors import LedgerError
from ..excel.workbook import find_data_sheet, read_workbook
from ..logging.init import log_summary, setup_logging
from ..services.ledger_queries import open_tasks
from ..services.orchestrator import ProcessingError, process_all, scan_ledger_files
from ..services.summary import render_summary_line
from ..table.context import build_table_context, resolve_columns

"""CLI entrypoint.

Commands:
- archive (default): archive finished tasks in every ledger workbook
- inspect: show the detected header row and column mapping per workbook
- list: show open tasks per workbook, by priority then due date

Exit codes: 0 all workbooks succeeded (or none found), 2 at least one
workbook failed, 1 fatal (bad config, missing directory).
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

COMMANDS = ("archive", "inspect", "list")


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env so TASK_LEDGER_* variables win over the shell environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="task-ledger", description="Task ledger archive & recurrence tool")
    p.add_argument("command", nargs="?", choices=COMMANDS, default="archive", help="Command to run (default: archive)")
    p.add_argument("--config", type=Path, default=None, help=f"Config file (default: {DEFAULT_CONFIG_PATH})")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _inspect(cfg: LedgerConfig) -> int:
    for f in scan_ledger_files(Path(cfg.source_directory)):
        print(f"FILE: {f.name}")
        try:
            table = find_data_sheet(read_workbook(f), cfg.sheet_name, cfg.archive_sheet_name)
            ctx = build_table_context(table, cfg.header_scan_rows)
        except (LedgerError, OSError, BadZipFile, InvalidFileException) as e:
            print(f"  error: {e}")
            continue
        print(f"  SHEET: {table.name} header_row={ctx.header_row} rows={table.last_row - ctx.header_row}")
        print(f"  headers={list(ctx.headers)}")
        columns = asdict(resolve_columns(ctx))
        print(f"  columns={columns}")
    return EXIT_SUCCESS_ALL


def _list_open(cfg: LedgerConfig) -> int:
    for f in scan_ledger_files(Path(cfg.source_directory)):
        print(f"FILE: {f.name}")
        try:
            table = find_data_sheet(read_workbook(f), cfg.sheet_name, cfg.archive_sheet_name)
            tasks = open_tasks(table, cfg.header_scan_rows)
        except (LedgerError, OSError, BadZipFile, InvalidFileException) as e:
            print(f"  error: {e}")
            continue
        if not tasks:
            print("  (no open tasks)")
            continue
        df = pd.DataFrame(
            [
                {
                    "Priority": t.priority,
                    "Task": t.task_name if t.task_name is not None else "",
                    "Due Date": f"{t.due_date:%Y-%m-%d}" if t.due_date is not None else "",
                    "Status": t.status,
                }
                for t in tasks
            ]
        )
        print(df.to_string(index=False))
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # [] must not fall back to sys.argv (pytest passes its own flags there)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    logger.debug("debug mode enabled")
    _load_env_file(Path(".env"), override=True)

    config_path = args.config or Path(os.getenv("TASK_LEDGER_CONFIG") or DEFAULT_CONFIG_PATH)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    source_override = os.getenv("TASK_LEDGER_SOURCE_DIR")
    if source_override:
        cfg = replace(cfg, source_directory=source_override)

    directory = Path(cfg.source_directory)
    if not directory.exists():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    logger.info(f"Processing ledgers from: {directory}")

    try:
        if args.command == "inspect":
            return _inspect(cfg)
        if args.command == "list":
            return _list_open(cfg)
        result = process_all(cfg)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    # log_summary adds the "SUMMARY " label itself
    log_summary(render_summary_line(result).removeprefix("SUMMARY "))

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL
