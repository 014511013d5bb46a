"""Report Engine Orchestrator.

This script runs the end-to-end report: it reads document and notification
feeds, resolves the expiring/expired lists, aggregates statistics and
writes the export files. Each step is timed and reported.

**Error Handling Philosophy:**

- **Infrastructure Errors** (missing document feed, malformed or invalid config)
  fail fast:
  - Raised immediately; no partial output
  - Exit with code 1

- **Degraded Sources** (missing or unreadable expiring/expired/notification
  feeds) are recovered:
  - Expiring/expired lists are classified locally
  - Notifications default to an empty list
  - The run completes and the summary names the degraded sources

**Exit Codes:**
- 0: Report completed successfully
- 1: Report failed (infrastructure error)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
import traceback
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml

from . import (
    aggregator,
    chart_series,
    export_formatter,
    export_writer,
    feed_loader,
    filters,
    source_adapter,
)
from .classifier import days_until_expiry
from .config_loader import get_settings, load_config
from .data_models import DocumentRecord, ReportSnapshot
from .enums import ExportFormat, Lifecycle, ReportKind
from .user_report import build_user_report, scope_to_user

SCRIPT_DIR = Path(__file__).resolve().parent
ROOT_DIR = SCRIPT_DIR.parent
DEFAULT_OUTPUT_DIR = ROOT_DIR / "output"
DEFAULT_CONFIG_PATH = ROOT_DIR / "config" / "parameters.yaml"
RECENT_UPLOADS_LIMIT = 5


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Build document and notification reports with spreadsheet export",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s files.json --notifications notifications.json
  %(prog)s files.json --expiring expiring.json --expired expired.json --user 7
  %(prog)s files.json --report files --search contract --status expiring_soon
        """,
    )

    parser.add_argument(
        "documents",
        type=Path,
        help="JSON document feed (list or {'body': [...]})",
    )
    parser.add_argument(
        "--notifications",
        type=Path,
        default=None,
        help="JSON notification feed; omitted or unreadable means no notifications",
    )
    parser.add_argument(
        "--expiring",
        type=Path,
        default=None,
        help="Pre-classified expiring documents; omitted means classify locally",
    )
    parser.add_argument(
        "--expired",
        type=Path,
        default=None,
        help="Pre-classified expired documents; omitted means classify locally",
    )
    parser.add_argument(
        "--user",
        type=str,
        default=None,
        dest="user_id",
        help="Restrict the report to documents and notifications of this user id",
    )
    parser.add_argument(
        "--now",
        type=date.fromisoformat,
        default=None,
        help="Reference date (YYYY-MM-DD) for classification (default: today)",
    )
    parser.add_argument(
        "--format",
        choices=sorted(ExportFormat.all_codes()),
        default=None,
        dest="export_format",
        help="Export format (default: export.format from config)",
    )
    parser.add_argument(
        "--report",
        choices=sorted(ReportKind.all_codes()),
        default=ReportKind.COMPREHENSIVE.value,
        dest="report_kind",
        help="Export to produce: single-sheet files or notifications report, or "
        "the comprehensive workbook (default: comprehensive)",
    )
    parser.add_argument(
        "--search",
        type=str,
        default=None,
        help="Only export files whose name or description contains this text",
    )
    parser.add_argument(
        "--status",
        choices=[state.value for state in Lifecycle],
        default=None,
        help="Only export files in this lifecycle state",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        dest="output_dir",
        help=f"Output directory (default: {DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        dest="config_path",
        help=f"Configuration file (default: {DEFAULT_CONFIG_PATH})",
    )

    return parser.parse_args(argv)


def validate_args(args: argparse.Namespace) -> None:
    """Validate command-line arguments and raise errors if invalid."""
    if not args.documents.exists():
        raise FileNotFoundError(f"Document feed not found: {args.documents}")
    if args.output_dir.exists() and not args.output_dir.is_dir():
        raise NotADirectoryError(
            f"Output path is not a directory: {args.output_dir}"
        )


def resolve_user_id(raw: Optional[str], documents: List[Any]) -> Any:
    """Match a CLI user id against ids in the feed.

    Feed ids are usually integers while the CLI delivers strings; the
    string is converted when the feed uses integer ids.
    """
    if raw is None:
        return None
    if raw.isdigit():
        for doc in documents:
            for user in (doc.uploaded_by, doc.assigned_user):
                if user is not None and isinstance(user.id, int):
                    return int(raw)
    return raw


def select_file_rows(
    documents: List[DocumentRecord],
    search: Optional[str],
    status: Optional[str],
    now: date,
    horizon_days: int,
) -> Optional[List[DocumentRecord]]:
    """Documents shown in the Files sheet, or None when no filter is set.

    Filters narrow the exported rows only; statistics cover the whole scope.
    """
    if not search and status is None:
        return None
    rows = filters.search_documents(documents, search)
    if status is not None:
        rows = filters.filter_by_lifecycle(
            rows, Lifecycle.from_string(status), now, horizon_days
        )
    logging.getLogger(__name__).info(
        "Files sheet filtered to %d of %d document(s)", len(rows), len(documents)
    )
    return rows


def summarize_documents(
    documents: Iterable[DocumentRecord], now: date
) -> List[Dict[str, Any]]:
    """JSON-ready entries with the day countdown to expiry."""
    return [
        {
            "id": doc.id,
            "file_name": doc.file_name,
            "expiry_date": doc.expiry_date,
            "days_until_expiry": days_until_expiry(doc, now),
        }
        for doc in documents
    ]


def configure_logging(output_dir: Path, run_id: str) -> Path:
    """Configure file logging for the report run.

    Parameters
    ----------
    output_dir : Path
        Root output directory where logs subdirectory will be created.
    run_id : str
        Unique run identifier used in log filename.

    Returns
    -------
    Path
        Path to the created log file.
    """
    log_dir = output_dir / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / f"report_{run_id}.log"

    handler = logging.FileHandler(log_path, encoding="utf-8")
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(message)s")
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(logging.INFO)
    root_logger.addHandler(handler)

    return log_path


def print_header(documents_path: Path) -> None:
    """Print the report header."""
    print()
    print("🚀 Starting Report Engine")
    print(f"🗂️  Document Feed: {documents_path}")
    print()


def print_step(step_num: int, description: str) -> None:
    """Print a step header."""
    print()
    print(f"{'=' * 60}")
    print(f"Step {step_num}: {description}")
    print(f"{'=' * 60}")


def print_step_complete(step_num: int, description: str, duration: float) -> None:
    """Print step completion message."""
    print(f"✅ Step {step_num}: {description} complete in {duration:.1f} seconds.")


def write_snapshot(
    output_dir: Path,
    run_id: str,
    payload: Dict[str, Any],
) -> Path:
    """Write the snapshot JSON artifact."""
    output_dir.mkdir(parents=True, exist_ok=True)
    snapshot_path = output_dir / f"snapshot_{run_id}.json"
    snapshot_path.write_text(json.dumps(payload, indent=2, default=str), encoding="utf-8")
    logging.getLogger(__name__).info("Wrote snapshot to %s", snapshot_path)
    return snapshot_path


def write_exports(output_dir: Path, files: Dict[str, bytes]) -> List[Path]:
    """Write export buffers to output_dir and return their paths."""
    output_dir.mkdir(parents=True, exist_ok=True)
    paths = []
    for file_name, content in files.items():
        path = output_dir / file_name
        path.write_bytes(content)
        paths.append(path)
    return paths


def print_summary(
    step_times: list[tuple[str, float]],
    total_duration: float,
    snapshot: ReportSnapshot,
    degraded_sources: tuple[str, ...],
) -> None:
    """Print the report summary."""
    print()
    print(f"{'=' * 60}")
    print("🎉 Report completed successfully!")
    print(f"{'=' * 60}")
    print()
    print("🕒 Time Summary:")
    for step_name, duration in step_times:
        print(f"  - {step_name:<25} {duration:.1f}s")
    print(f"  - {'─' * 25} {'─' * 6}")
    print(f"  - {'Total Time':<25} {total_duration:.1f}s")
    print()
    print(f"📄 Documents:              {snapshot.total_documents}")
    print(f"⏳ Expiring soon:          {snapshot.expiring_soon_count}")
    print(f"⛔ Expired:                {snapshot.expired_count}")
    print(f"🔔 Notifications:          {snapshot.total_notifications}")
    if degraded_sources:
        print(
            "⚠️  Classified locally (source unavailable): "
            + ", ".join(degraded_sources)
        )


def main(argv: Optional[List[str]] = None) -> int:
    """Run the report orchestrator."""
    try:
        args = parse_args(argv)
        validate_args(args)
        config = load_config(args.config_path)
        settings = get_settings(config)
    except (ValueError, OSError, yaml.YAMLError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    output_dir = args.output_dir.resolve()
    run_id = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
    now = args.now or date.today()
    export_format = (
        ExportFormat.from_string(args.export_format)
        if args.export_format
        else settings["export_format"]
    )
    report_kind = ReportKind.from_string(args.report_kind)

    log_path = configure_logging(output_dir, run_id)
    print_header(args.documents)

    total_start = time.time()
    step_times = []

    try:
        # Step 1: Load feeds
        step_start = time.time()
        print_step(1, "Loading feeds")
        documents = feed_loader.load_documents(args.documents)
        notifications = feed_loader.load_notifications(args.notifications)
        server_expiring = feed_loader.load_optional_documents(args.expiring)
        server_expired = feed_loader.load_optional_documents(args.expired)
        print(f"Loaded {len(documents)} document(s), {len(notifications)} notification(s)")
        step_duration = time.time() - step_start
        step_times.append(("Feed Loading", step_duration))
        print_step_complete(1, "Feed loading", step_duration)

        # Step 2: Classification and aggregation
        step_start = time.time()
        print_step(2, "Classifying and aggregating")
        user_id = resolve_user_id(args.user_id, documents)
        if user_id is not None:
            user_report = build_user_report(
                documents,
                notifications,
                user_id,
                server_expiring=server_expiring,
                server_expired=server_expired,
                now=now,
                horizon_days=settings["horizon_days"],
                max_trend_buckets=settings["max_buckets"],
            )
            documents, notifications = scope_to_user(documents, notifications, user_id)
            snapshot = user_report.report
            snapshot_payload = user_report.to_dict()
            classified = user_report.classified
            print(f"👤 Report scoped to user {user_id}")
        else:
            classified = source_adapter.resolve_classified(
                documents,
                server_expiring=server_expiring,
                server_expired=server_expired,
                now=now,
                horizon_days=settings["horizon_days"],
            )
            snapshot = aggregator.aggregate(
                documents, notifications, classified, settings["max_buckets"]
            )
            snapshot_payload = snapshot.to_dict()
        degraded = classified.degraded_sources
        snapshot_payload["degraded_sources"] = list(degraded)
        snapshot_payload["reference_date"] = now.isoformat()
        snapshot_payload["expiring_documents"] = summarize_documents(
            classified.expiring_soon, now
        )
        snapshot_payload["expired_documents"] = summarize_documents(
            classified.expired, now
        )
        snapshot_payload["recent_uploads"] = summarize_documents(
            filters.recent_documents(documents, RECENT_UPLOADS_LIMIT), now
        )
        snapshot_payload["charts"] = chart_series.build_chart_payload(
            snapshot, settings["locale"]
        )
        step_duration = time.time() - step_start
        step_times.append(("Aggregation", step_duration))
        print_step_complete(2, "Aggregation", step_duration)

        # Step 3: Export
        step_start = time.time()
        print_step(3, "Writing export")
        file_documents = select_file_rows(
            documents, args.search, args.status, now, settings["horizon_days"]
        )
        sheets = export_formatter.format_report(
            report_kind,
            documents,
            notifications,
            snapshot,
            now=now,
            locale=settings["locale"],
            date_format=settings["date_format"],
            file_documents=file_documents,
        )
        files = export_writer.write_sheets(
            sheets,
            export_formatter.report_file_prefix(report_kind, settings["file_prefix"]),
            now,
            export_format,
            columns=export_formatter.SHEET_COLUMNS,
        )
        for path in write_exports(output_dir, files):
            print(f"📊 Export written: {path}")
        snapshot_path = write_snapshot(output_dir, run_id, snapshot_payload)
        print(f"📄 Snapshot written: {snapshot_path}")
        step_duration = time.time() - step_start
        step_times.append(("Export", step_duration))
        print_step_complete(3, "Export", step_duration)

        print(f"Report log written to {log_path}")
        print_summary(step_times, time.time() - total_start, snapshot, degraded)
        return 0

    except Exception as exc:
        print(f"\n❌ Report failed: {exc}", file=sys.stderr)
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
