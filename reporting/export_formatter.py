"""Projection of documents, notifications and statistics into tabular sheets.

Rows are ordered dicts with a fixed column set per sheet. Writing them to a
file is left to export_writer; this module only decides columns and cell
values.

**Output Contract:**
- Every row of a sheet has exactly that sheet's columns, in order
- No cell is ever None or blank; missing data gets an explicit placeholder
  ("N/A", "Not Assigned", "Unknown", "0 Bytes")
- Formatting never raises for a bad record: malformed sizes and dates fall
  back to their placeholders so one bad row cannot fail an export
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from babel.dates import format_date

from .classifier import classify
from .data_models import DocumentRecord, NotificationRecord, ReportSnapshot
from .enums import Lifecycle, ReportKind, SheetName
from .utils import full_name_or, parse_date, string_or_empty

LOG = logging.getLogger(__name__)

Row = Dict[str, Union[str, int, float]]

NOT_AVAILABLE = "N/A"
NOT_ASSIGNED = "Not Assigned"
UNKNOWN_TYPE = "Unknown"

DEFAULT_LOCALE = "en_US"
DEFAULT_DATE_FORMAT = "medium"

DOCUMENT_COLUMNS = [
    "File Name",
    "File Type",
    "File Size",
    "Upload Date",
    "Expiry Date",
    "Uploaded By",
    "Assigned User",
    "Region",
    "Partner Type",
    "Status",
    "Description",
]

NOTIFICATION_COLUMNS = [
    "Title",
    "Message",
    "Type",
    "Status",
    "Scheduled Time",
    "Sent Time",
    "Target User",
    "File",
    "Days Until Expiry",
]

STATISTICS_COLUMNS = [
    "Total Files",
    "Expired Files",
    "Expiring Soon",
    "Total Notifications",
    "Sent Notifications",
    "Failed Notifications",
]

# Single-sheet exports use their own sheet names and fixed file prefixes.
FILES_REPORT_SHEET = "Files Report"
NOTIFICATIONS_REPORT_SHEET = "Notifications Report"
REPORT_FILE_PREFIXES = {
    ReportKind.FILES: "files_report",
    ReportKind.NOTIFICATIONS: "notifications_report",
}

SHEET_COLUMNS = {
    SheetName.FILES.value: DOCUMENT_COLUMNS,
    SheetName.NOTIFICATIONS.value: NOTIFICATION_COLUMNS,
    SheetName.STATISTICS.value: STATISTICS_COLUMNS,
    FILES_REPORT_SHEET: DOCUMENT_COLUMNS,
    NOTIFICATIONS_REPORT_SHEET: NOTIFICATION_COLUMNS,
}

FILE_TYPE_LABELS = {
    "application/pdf": "PDF",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "DOCX",
    "application/msword": "DOC",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "XLSX",
    "application/vnd.ms-excel": "XLS",
    "text/csv": "CSV",
    "text/plain": "TXT",
}

SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


def format_file_size(value: Any) -> str:
    """Format a byte count with the largest unit keeping the magnitude >= 1.

    Parameters
    ----------
    value : Any
        Byte count. Strings holding a number are accepted.

    Returns
    -------
    str
        Size rounded to 2 decimals with trailing zeros trimmed, e.g.
        '1.5 KB'. Zero, negative, missing or non-numeric input gives
        '0 Bytes'. GB is the largest unit.

    Examples
    --------
    >>> format_file_size(1536)
    '1.5 KB'
    >>> format_file_size("oops")
    '0 Bytes'
    """
    if isinstance(value, bool):
        return "0 Bytes"
    try:
        size = float(value)
    except (TypeError, ValueError):
        return "0 Bytes"
    if not size > 0 or size == float("inf"):
        return "0 Bytes"

    unit = 0
    while size >= 1024 and unit < len(SIZE_UNITS) - 1:
        size /= 1024
        unit += 1

    text = f"{size:.2f}".rstrip("0").rstrip(".")
    return f"{text} {SIZE_UNITS[unit]}"


def file_type_label(file_type: Optional[str]) -> str:
    """Short label for a MIME type (e.g. 'application/pdf' -> 'PDF')."""
    if not isinstance(file_type, str) or not file_type.strip():
        return UNKNOWN_TYPE
    file_type = file_type.strip()
    if file_type in FILE_TYPE_LABELS:
        return FILE_TYPE_LABELS[file_type]
    _, _, subtype = file_type.partition("/")
    return subtype.upper() if subtype else "FILE"


def format_display_date(
    value: Any,
    locale: str = DEFAULT_LOCALE,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> str:
    """Format a raw date value for display, or 'N/A' if missing/malformed.

    Uses Babel for locale-aware formatting. date_format is a Babel format
    name ('short', 'medium', 'long', 'full') or a CLDR pattern such as
    'yyyy-MM-dd'.
    """
    parsed = parse_date(value)
    if parsed is None:
        return NOT_AVAILABLE
    return format_date(parsed, format=date_format, locale=locale)


def _text_or(value: Any, placeholder: str) -> str:
    text = string_or_empty(value)
    return text or placeholder


def _document_status(doc: DocumentRecord, now: date | datetime) -> str:
    return "Expired" if classify(doc, now) is Lifecycle.EXPIRED else "Active"


def format_document_row(
    doc: DocumentRecord,
    now: date | datetime,
    locale: str = DEFAULT_LOCALE,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> Row:
    """Project one document onto the Files sheet columns."""
    return {
        "File Name": _text_or(doc.file_name, NOT_AVAILABLE),
        "File Type": file_type_label(doc.file_type),
        "File Size": format_file_size(doc.file_size),
        "Upload Date": format_display_date(doc.upload_date, locale, date_format),
        "Expiry Date": format_display_date(doc.expiry_date, locale, date_format),
        "Uploaded By": full_name_or(doc.uploaded_by, NOT_AVAILABLE),
        "Assigned User": full_name_or(doc.assigned_user, NOT_ASSIGNED),
        "Region": doc.region_name or NOT_AVAILABLE,
        "Partner Type": doc.partner_type_name or NOT_AVAILABLE,
        "Status": _document_status(doc, now),
        "Description": _text_or(doc.description, NOT_AVAILABLE),
    }


def format_document_sheet(
    documents: Iterable[DocumentRecord],
    now: date | datetime | None = None,
    locale: str = DEFAULT_LOCALE,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> List[Row]:
    """One Files-sheet row per document, in input order.

    Parameters
    ----------
    documents : Iterable[DocumentRecord]
        Documents to export.
    now : date | datetime | None
        Reference date for the Status column; defaults to today.
    locale : str, optional
        Babel locale for date cells (default 'en_US').
    date_format : str, optional
        Babel date format name or pattern (default 'medium').

    Returns
    -------
    List[Row]
        Rows keyed by DOCUMENT_COLUMNS. Empty input gives an empty list.
    """
    if now is None:
        now = date.today()
    return [format_document_row(doc, now, locale, date_format) for doc in documents]


def _related_document_name(
    notification: NotificationRecord,
    names_by_id: Dict[Any, Optional[str]],
) -> str:
    name = string_or_empty(notification.related_document_name)
    if name:
        return name
    if notification.related_document_id is not None:
        name = string_or_empty(names_by_id.get(notification.related_document_id))
    return name or NOT_AVAILABLE


def format_notification_sheet(
    notifications: Iterable[NotificationRecord],
    documents: Optional[Iterable[DocumentRecord]] = None,
    locale: str = DEFAULT_LOCALE,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> List[Row]:
    """One Notifications-sheet row per notification, in input order.

    Parameters
    ----------
    notifications : Iterable[NotificationRecord]
        Notifications to export.
    documents : Iterable[DocumentRecord], optional
        Snapshot used to resolve the File column when a notification only
        carries related_document_id.
    locale, date_format : str, optional
        Babel settings for the time columns.

    Returns
    -------
    List[Row]
        Rows keyed by NOTIFICATION_COLUMNS.
    """
    names_by_id: Dict[Any, Optional[str]] = {}
    for doc in documents or ():
        names_by_id.setdefault(doc.id, doc.file_name)

    rows: List[Row] = []
    for notification in notifications:
        days = notification.days_until_expiry
        rows.append(
            {
                "Title": _text_or(notification.title, NOT_AVAILABLE),
                "Message": _text_or(notification.message, NOT_AVAILABLE),
                "Type": _text_or(notification.notification_type, NOT_AVAILABLE),
                "Status": _text_or(notification.status, NOT_AVAILABLE),
                "Scheduled Time": format_display_date(
                    notification.scheduled_time, locale, date_format
                ),
                "Sent Time": format_display_date(
                    notification.sent_time, locale, date_format
                ),
                "Target User": full_name_or(notification.target_user, NOT_AVAILABLE),
                "File": _related_document_name(notification, names_by_id),
                "Days Until Expiry": days if days is not None else NOT_AVAILABLE,
            }
        )
    return rows


def format_statistics_sheet(snapshot: ReportSnapshot) -> List[Row]:
    """Exactly one row with the six scalar counters of the snapshot."""
    return [
        {
            "Total Files": snapshot.total_documents,
            "Expired Files": snapshot.expired_count,
            "Expiring Soon": snapshot.expiring_soon_count,
            "Total Notifications": snapshot.total_notifications,
            "Sent Notifications": snapshot.sent_count,
            "Failed Notifications": snapshot.failed_count,
        }
    ]


def format_comprehensive_report(
    documents: Sequence[DocumentRecord],
    notifications: Sequence[NotificationRecord],
    snapshot: ReportSnapshot,
    now: date | datetime | None = None,
    locale: str = DEFAULT_LOCALE,
    date_format: str = DEFAULT_DATE_FORMAT,
    file_documents: Optional[Sequence[DocumentRecord]] = None,
) -> Dict[str, List[Row]]:
    """Combine the three sheets under fixed names.

    file_documents, when given, replaces documents as the Files rows;
    notification file names and statistics still use the full scope.

    Returns
    -------
    Dict[str, List[Row]]
        Keys 'Files', 'Notifications', 'Statistics', in that order.
    """
    sheets = {
        SheetName.FILES.value: format_document_sheet(
            documents if file_documents is None else file_documents,
            now,
            locale,
            date_format,
        ),
        SheetName.NOTIFICATIONS.value: format_notification_sheet(
            notifications, documents, locale, date_format
        ),
        SheetName.STATISTICS.value: format_statistics_sheet(snapshot),
    }
    LOG.info(
        "Formatted report sheets: %s",
        ", ".join(f"{name}={len(rows)}" for name, rows in sheets.items()),
    )
    return sheets


def format_files_report(
    documents: Sequence[DocumentRecord],
    now: date | datetime | None = None,
    locale: str = DEFAULT_LOCALE,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> Dict[str, List[Row]]:
    """Single 'Files Report' sheet with the Files columns."""
    return {
        FILES_REPORT_SHEET: format_document_sheet(documents, now, locale, date_format)
    }


def format_notifications_report(
    notifications: Sequence[NotificationRecord],
    documents: Optional[Sequence[DocumentRecord]] = None,
    locale: str = DEFAULT_LOCALE,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> Dict[str, List[Row]]:
    """Single 'Notifications Report' sheet with the Notifications columns."""
    return {
        NOTIFICATIONS_REPORT_SHEET: format_notification_sheet(
            notifications, documents, locale, date_format
        )
    }


def format_report(
    kind: ReportKind,
    documents: Sequence[DocumentRecord],
    notifications: Sequence[NotificationRecord],
    snapshot: ReportSnapshot,
    now: date | datetime | None = None,
    locale: str = DEFAULT_LOCALE,
    date_format: str = DEFAULT_DATE_FORMAT,
    file_documents: Optional[Sequence[DocumentRecord]] = None,
) -> Dict[str, List[Row]]:
    """Format the sheets of one export kind.

    Parameters
    ----------
    kind : ReportKind
        FILES and NOTIFICATIONS give one sheet each; COMPREHENSIVE gives
        Files, Notifications and Statistics.
    documents : Sequence[DocumentRecord]
        Report scope. Resolves notification file names.
    notifications : Sequence[NotificationRecord]
        Notifications of the report scope.
    snapshot : ReportSnapshot
        Statistics of the report scope.
    now : date | datetime | None
        Reference instant for the Files Status column.
    locale, date_format : str, optional
        Babel settings for date cells.
    file_documents : Sequence[DocumentRecord], optional
        Rows of the Files sheet when they are narrower than the scope (a
        search or status filter). Defaults to documents.

    Returns
    -------
    Dict[str, List[Row]]
        Sheet name to rows, in display order.
    """
    rows = documents if file_documents is None else file_documents
    if kind is ReportKind.FILES:
        return format_files_report(rows, now, locale, date_format)
    if kind is ReportKind.NOTIFICATIONS:
        return format_notifications_report(
            notifications, documents, locale, date_format
        )
    return format_comprehensive_report(
        documents, notifications, snapshot, now, locale, date_format, file_documents
    )


def report_file_prefix(kind: ReportKind, comprehensive_prefix: str) -> str:
    """File name prefix of an export kind.

    Single-sheet exports use 'files_report' / 'notifications_report'; the
    comprehensive export uses the configured prefix.
    """
    return REPORT_FILE_PREFIXES.get(kind, comprehensive_prefix)
