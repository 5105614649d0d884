"""
Command-line interface for extract ingestion.

Usage:
    liquidation-ingest ingest --input "Sales 02.01.25.csv" [options]
    liquidation-ingest init-db
    liquidation-ingest fiscal-week 2025-02-08
"""

import argparse
import sys
import threading
from datetime import date
from pathlib import Path

from dotenv import load_dotenv

from liquidation_pipeline.batch.pipeline import BatchUpsertOrchestrator, RunOptions
from liquidation_pipeline.batch.progress import CancellationToken, LoggingProgressSink
from liquidation_pipeline.core import fiscal_calendar
from liquidation_pipeline.core.fees import FeeLookupTable
from liquidation_pipeline.core.models import RunResult
from liquidation_pipeline.core.parsing import parse_date
from liquidation_pipeline.core.settings import load_settings
from liquidation_pipeline.observability.logger import get_logger
from liquidation_pipeline.observability.metrics import start_metrics_server
from liquidation_pipeline.warehouse.connection import DatabaseConnectionPool
from liquidation_pipeline.warehouse.schema_mgmt import SchemaManager
from liquidation_pipeline.warehouse.store import InMemoryUnitStore, UnitStore
from liquidation_pipeline.warehouse.upsert import PostgresUnitStore

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CANCELLED = 2


def _pool_from_args(args) -> DatabaseConnectionPool:
    return DatabaseConnectionPool(
        host=args.db_host,
        port=args.db_port,
        database=args.db_name,
        user=args.db_user,
        password=args.db_password,
    )


def _run_in_worker(orchestrator: BatchUpsertOrchestrator, data: bytes, file_name: str, options: RunOptions) -> RunResult:
    """
    Run the orchestrator on a worker thread so Ctrl-C can request a
    cancellation at the next batch boundary.

    Raises:
        Exception: Whatever the run raised on the worker, re-raised here
    """
    outcome: dict = {}

    def _target() -> None:
        try:
            outcome["result"] = orchestrator.run(data, file_name, options)
        except BaseException as e:
            outcome["error"] = e

    worker = threading.Thread(target=_target, name="ingest-run")
    worker.start()
    try:
        while worker.is_alive():
            worker.join(timeout=0.2)
    except KeyboardInterrupt:
        logger.warning("Interrupted; cancelling after the batch in flight")
        options.cancellation.cancel()
        worker.join()
    if "error" in outcome:
        raise outcome["error"]
    return outcome["result"]


def ingest_command(args) -> int:
    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input file not found: {args.input}")
        return EXIT_ERROR

    settings = load_settings(
        args.config,
        batch_size=args.batch_size,
        strict_identifiers=True if args.strict else None,
    )

    fee_lookup = FeeLookupTable()
    if args.fee_table:
        loaded = fee_lookup.load_csv(Path(args.fee_table).read_text(encoding="utf-8-sig"))
        logger.info(f"Loaded {loaded} check-in fees from {args.fee_table}")

    if args.metrics_port:
        start_metrics_server(args.metrics_port)

    store: UnitStore
    if args.dry_run:
        logger.info("DRY RUN MODE: records are built and batched in memory only")
        store = InMemoryUnitStore()
    else:
        pool = _pool_from_args(args)
        pool.open()
        store = PostgresUnitStore(pool)

    try:
        if args.fees_from_db and not args.dry_run:
            loaded = fee_lookup.load_from_store(store)
            logger.info(f"Loaded {loaded} check-in fees from the database")

        orchestrator = BatchUpsertOrchestrator(store, fee_lookup=fee_lookup, settings=settings)
        options = RunOptions(
            progress=LoggingProgressSink(input_path.name),
            cancellation=CancellationToken(),
        )
        result = _run_in_worker(orchestrator, input_path.read_bytes(), input_path.name, options)
    finally:
        store.close()

    print(result.summary())
    if result.skipped_rows:
        print(f"Skipped rows: {result.skipped_rows} ({', '.join(f'{k}={v}' for k, v in result.skip_reasons.items())})")

    if result.status == "cancelled":
        return EXIT_CANCELLED
    if result.status == "error":
        return EXIT_ERROR
    return EXIT_OK


def init_db_command(args) -> int:
    with _pool_from_args(args) as pool:
        tables = SchemaManager(pool).ensure_schema()
    print(f"Schema ready: {', '.join(tables)}")
    return EXIT_OK


def fiscal_week_command(args) -> int:
    day = parse_date(args.date)
    if day is None:
        logger.error(f"Not a valid date: {args.date}")
        return EXIT_ERROR

    fiscal_day = fiscal_calendar.day_of_week(day)
    print(f"Date:         {day.isoformat()}")
    print(f"Week:         {fiscal_calendar.week_label(day)}")
    print(f"Week start:   {fiscal_calendar.week_start(day).isoformat()}")
    print(f"Week end:     {fiscal_calendar.week_end(day).isoformat()}")
    print(f"Day of week:  {fiscal_day} ({fiscal_calendar.day_name(fiscal_day)})")
    return EXIT_OK


def _add_db_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--db-host", default=None, help="Database host (default: DB_HOST or localhost)")
    parser.add_argument("--db-port", type=int, default=None, help="Database port (default: DB_PORT or 5432)")
    parser.add_argument("--db-name", default=None, help="Database name (default: DB_NAME)")
    parser.add_argument("--db-user", default=None, help="Database user (default: DB_USER)")
    parser.add_argument("--db-password", default=None, help="Database password (default: DB_PASSWORD)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="liquidation-ingest",
        description="Liquidation unit extract ingestion",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Ingest a sales extract into PostgreSQL
  liquidation-ingest ingest --input "Sales 02.01.25.csv"

  # Parse and batch without writing anything
  liquidation-ingest ingest --input "Inbound 01.27.25.xlsx" --dry-run

  # Require numeric unit identifiers and use a full fee sheet
  liquidation-ingest ingest --input "Outbound 02.03.25.csv" --strict --fee-table checkin.csv

  # Create the tables
  liquidation-ingest init-db
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    ingest_parser = subparsers.add_parser("ingest", help="Ingest one extract file")
    ingest_parser.add_argument("--input", required=True, help="Path to the extract (.csv, .txt, .xlsx)")
    ingest_parser.add_argument("--config", default=None, help="Ingest YAML configuration (default: INGEST_CONFIG)")
    ingest_parser.add_argument("--fee-table", default=None, help="Check-in fee sheet CSV replacing the built-in fees")
    ingest_parser.add_argument(
        "--fees-from-db",
        action="store_true",
        help="Load check-in fees from the checkin_fee_lookup table",
    )
    ingest_parser.add_argument("--strict", action="store_true", help="Skip rows whose unit id is not numeric")
    ingest_parser.add_argument("--batch-size", type=int, default=None, help="Records per upload batch")
    ingest_parser.add_argument("--dry-run", action="store_true", help="Run against an in-memory store")
    ingest_parser.add_argument("--metrics-port", type=int, default=None, help="Expose Prometheus metrics on this port")
    _add_db_arguments(ingest_parser)

    init_parser = subparsers.add_parser("init-db", help="Create or update the ingestion tables")
    _add_db_arguments(init_parser)

    week_parser = subparsers.add_parser("fiscal-week", help="Show the fiscal week of a date")
    week_parser.add_argument("date", nargs="?", default=date.today().isoformat(), help="MM/DD/YYYY or YYYY-MM-DD")

    return parser


COMMANDS = {
    "ingest": ingest_command,
    "init-db": init_db_command,
    "fiscal-week": fiscal_week_command,
}


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_ERROR

    try:
        return COMMANDS[args.command](args)
    except (ValueError, FileNotFoundError) as e:
        logger.error(f"{args.command} failed: {e}")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
