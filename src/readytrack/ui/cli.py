from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from readytrack.app import (
    application_known,
    browse,
    clear,
    derive,
    edit_combined,
    export,
    import_file,
    list_applications,
    open_store,
    query,
    rebuild,
    summarize,
)
from readytrack.adapters.tabular import ExportFormat
from readytrack.config import (
    ConfigurationError,
    Environment,
    configure_logging,
    resolve_log_level,
)
from readytrack.domain.errors import QueryError, ReadytrackError
from readytrack.domain.model import DataType, SourceType

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from readytrack.adapters.sqlalchemy import SqlAlchemyStore
    from readytrack.domain.model import StoredRecord

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Track application migration readiness")
    parser.add_argument(
        "--environment",
        type=str,
        help="Deployment stage whose database to use (defaults to READYTRACK_ENVIRONMENT)",
    )
    parser.add_argument(
        "--database-uri",
        type=str,
        help="Explicit SQLAlchemy URI; overrides the environment's database",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="Logging level name (defaults to READYTRACK_LOG_LEVEL or INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_cmd = subparsers.add_parser("import", help="Import a CSV export for one source")
    import_cmd.add_argument("source", type=str, help="Access, Employment, Packaging, ...")
    import_cmd.add_argument("path", type=Path, help="CSV file with a header row")
    import_cmd.add_argument(
        "--rebuild",
        action="store_true",
        help="Rebuild the combined view after the import",
    )

    subparsers.add_parser("rebuild", help="Recompute the combined view from all sources")

    query_cmd = subparsers.add_parser("query", help="Query one store")
    query_cmd.add_argument("data_type", type=str, help="Combined, Access, Employment, ...")
    query_cmd.add_argument("field", type=str, help='Field label, e.g. "Job Role"')
    query_cmd.add_argument("operator", type=str, help='e.g. equals, "not contains", before')
    query_cmd.add_argument("value", type=str, nargs="?", default=None, help="Comparison value")
    query_cmd.add_argument("--limit", type=int, help="Maximum number of rows (at most 1000)")

    list_cmd = subparsers.add_parser("list", help="Page through one store")
    list_cmd.add_argument("data_type", type=str)
    list_cmd.add_argument("--limit", type=int, default=50)
    list_cmd.add_argument("--offset", type=int, default=0)

    clear_cmd = subparsers.add_parser("clear", help="Delete every row of one store")
    clear_cmd.add_argument("data_type", type=str)

    subparsers.add_parser("status", help="Show row counts and latest import per store")

    edit_cmd = subparsers.add_parser("edit", help="Correct one tracking field of a combined row")
    edit_cmd.add_argument("access_group", type=str)
    edit_cmd.add_argument("account", type=str)
    edit_cmd.add_argument("field", type=str, help='e.g. "Package Status", "Test Date"')
    edit_cmd.add_argument(
        "value", type=str, nargs="?", default=None, help="Omit to clear the field"
    )

    derive_cmd = subparsers.add_parser(
        "derive", help="Regenerate Packaging or Testing records from the combined view"
    )
    derive_cmd.add_argument("source", type=str, help="Packaging or Testing")

    export_cmd = subparsers.add_parser("export", help="Write one store to a CSV or JSON file")
    export_cmd.add_argument("path", type=Path)
    export_cmd.add_argument("--data-type", type=str, default="Combined")
    export_cmd.add_argument(
        "--format",
        type=str,
        choices=[member.value for member in ExportFormat],
        help="Defaults to the file suffix",
    )

    apps = subparsers.add_parser("applications", help="List application names")
    apps.add_argument("--check", type=str, help="Only report whether this application exists")

    return parser.parse_args(list(argv))


def _format_record(record: StoredRecord) -> str:
    values = record.business_values()
    shown = ", ".join(f"{name}={value}" for name, value in values.items() if value is not None)
    return f"{record.import_batch}: {shown}"


def _print_records(records: Sequence[StoredRecord]) -> None:
    for record in records:
        print(_format_record(record))  # noqa: T201


def _run(store: SqlAlchemyStore, args: argparse.Namespace) -> None:  # noqa: C901, PLR0912, PLR0915
    if args.command == "import":
        source = SourceType.parse(args.source)
        result, parsed = import_file(store, source, args.path)
        log.info(
            "Imported %s: batch=%s saved=%s skipped=%s rejected_rows=%s propagated=%s",
            source.value,
            result.batch.label,
            result.saved,
            result.skipped,
            len(parsed.rejected),
            result.propagated,
        )
        for reason in result.skip_reasons:
            log.info("Skipped %s", reason)
        if args.rebuild:
            rebuilt = rebuild(store)
            log.info("Rebuilt combined view: count=%s batch=%s", rebuilt.count, rebuilt.batch.label)
    elif args.command == "rebuild":
        rebuilt = rebuild(store)
        log.info("Rebuilt combined view: count=%s batch=%s", rebuilt.count, rebuilt.batch.label)
    elif args.command == "query":
        records = query(
            store,
            DataType.parse(args.data_type),
            args.field,
            args.operator,
            args.value,
            limit=args.limit,
        )
        _print_records(records)
        log.info("Query returned %s row(s)", len(records))
    elif args.command == "list":
        _print_records(
            browse(store, DataType.parse(args.data_type), limit=args.limit, offset=args.offset)
        )
    elif args.command == "clear":
        data_type = DataType.parse(args.data_type)
        removed = clear(store, data_type)
        log.info("Cleared %s: removed=%s", data_type.value, removed)
    elif args.command == "status":
        summary = summarize(store)
        for status in summary.stores:
            log.info(
                "%s: rows=%s latest_batch=%s",
                status.data_type.value,
                status.count,
                status.latest_batch or "-",
            )
        if not summary.combined_is_current:
            log.warning("Combined view is out of date; run 'readytrack rebuild'")
    elif args.command == "edit":
        record = edit_combined(store, args.access_group, args.account, args.field, args.value)
        log.info("Edited combined row: %s", _format_record(record))
    elif args.command == "derive":
        derived = derive(store, SourceType.parse(args.source))
        log.info(
            "Derived %s records: count=%s removed=%s batch=%s",
            derived.source.value,
            derived.count,
            derived.removed,
            derived.batch.label,
        )
    elif args.command == "export":
        data_type = DataType.parse(args.data_type)
        export_format = ExportFormat(args.format) if args.format else None
        written = export(store, data_type, args.path, export_format=export_format)
        log.info("Exported %s: rows=%s path=%s", data_type.value, written, args.path)
    elif args.command == "applications":
        if args.check:
            known = application_known(store, args.check)
            log.info("Application %r %s", args.check, "exists" if known else "not found")
        else:
            for name in list_applications(store):
                print(name)  # noqa: T201
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    try:
        configure_logging(level=resolve_log_level(parsed_args.log_level))
        environment = Environment.parse(parsed_args.environment) if parsed_args.environment else None
    except ConfigurationError:
        logging.getLogger(__name__).exception("CLI validation error")
        sys.exit(2)

    store: SqlAlchemyStore | None = None
    try:
        store = open_store(environment=environment, database_uri=parsed_args.database_uri)
        _run(store, parsed_args)
    except (ConfigurationError, QueryError, ValueError) as exc:
        log.error("Invalid request: %s", exc)  # noqa: TRY400
        sys.exit(2)
    except ReadytrackError:
        log.exception("Operation failed")
        sys.exit(1)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)
    finally:
        if store is not None:
            store.dispose()


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
