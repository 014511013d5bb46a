"""Unit tests for export_formatter module - sheet rows for the report export.

Tests cover:
- File size and file type display values
- Locale-aware date cells
- Placeholder policy: no blank cells
- Sheet composition and order

Real-world significance:
- Exported workbooks are shared with partners and auditors; a blank cell
  or a crash on one malformed record makes the whole export unusable
"""

from __future__ import annotations

from datetime import date

import pytest

from reporting import export_formatter
from reporting.data_models import ReportSnapshot
from reporting.enums import ReportKind
from tests.fixtures import sample_input


def _snapshot() -> ReportSnapshot:
    return ReportSnapshot(
        total_documents=4,
        expired_count=1,
        expiring_soon_count=1,
        total_notifications=4,
        sent_count=2,
        failed_count=1,
    )


@pytest.mark.unit
class TestFormatFileSize:
    """Unit tests for format_file_size function."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (500, "500 Bytes"),
            (1024, "1 KB"),
            (1536, "1.5 KB"),
            (1048576, "1 MB"),
            (5 * 1024 ** 3, "5 GB"),
            (3 * 1024 ** 4, "3072 GB"),
            ("2048", "2 KB"),
            (1234567, "1.18 MB"),
        ],
    )
    def test_sizes(self, raw, expected: str) -> None:
        """Verify sizes use the largest unit keeping the value >= 1.

        Real-world significance:
        - Matches the sizes shown in the file list screens
        """
        assert export_formatter.format_file_size(raw) == expected

    @pytest.mark.parametrize(
        "raw", [0, -10, None, "oops", True, float("nan"), float("inf"), [1]]
    )
    def test_malformed_sizes(self, raw) -> None:
        assert export_formatter.format_file_size(raw) == "0 Bytes"


@pytest.mark.unit
class TestFileTypeLabel:
    """Unit tests for file_type_label function."""

    @pytest.mark.parametrize(
        "mime, expected",
        [
            ("application/pdf", "PDF"),
            ("application/vnd.ms-excel", "XLS"),
            ("text/plain", "TXT"),
            ("image/png", "PNG"),
            ("binary", "FILE"),
            (None, "Unknown"),
            ("  ", "Unknown"),
        ],
    )
    def test_labels(self, mime, expected: str) -> None:
        assert export_formatter.file_type_label(mime) == expected


@pytest.mark.unit
class TestFormatDisplayDate:
    """Unit tests for format_display_date function."""

    def test_medium_en_us(self) -> None:
        assert export_formatter.format_display_date("2025-01-15T09:00:00") == "Jan 15, 2025"

    def test_pattern(self) -> None:
        assert (
            export_formatter.format_display_date("2025-01-15", date_format="yyyy-MM-dd")
            == "2025-01-15"
        )

    def test_other_locale(self) -> None:
        """Verify the locale setting changes month names.

        Real-world significance:
        - Reports for French-speaking regions use localized dates
        """
        assert "janv." in export_formatter.format_display_date("2025-01-15", locale="fr_FR")

    @pytest.mark.parametrize("raw", [None, "", "not a date"])
    def test_missing_dates(self, raw) -> None:
        assert export_formatter.format_display_date(raw) == "N/A"


@pytest.mark.unit
class TestFormatDocumentSheet:
    """Unit tests for format_document_sheet function."""

    def test_empty_input(self, reference_date: date) -> None:
        assert export_formatter.format_document_sheet([], reference_date) == []

    def test_complete_row(self, sample_documents, reference_date: date) -> None:
        rows = export_formatter.format_document_sheet(sample_documents, reference_date)
        row = rows[1]

        assert list(row) == export_formatter.DOCUMENT_COLUMNS
        assert row["File Name"] == "lease.docx"
        assert row["File Type"] == "DOCX"
        assert row["File Size"] == "2 KB"
        assert row["Upload Date"] == "Dec 20, 2024"
        assert row["Expiry Date"] == "Jan 25, 2025"
        assert row["Uploaded By"] == "Bruno Keller"
        assert row["Assigned User"] == "Alice Martin"
        assert row["Region"] == "North"
        assert row["Partner Type"] == "Retailer"
        assert row["Status"] == "Active"

    def test_status_column(self, sample_documents, reference_date: date) -> None:
        """Verify only expired documents are marked 'Expired'.

        Real-world significance:
        - Expiring-soon and undated documents are still usable
        """
        rows = export_formatter.format_document_sheet(sample_documents, reference_date)
        assert [row["Status"] for row in rows] == ["Active", "Active", "Expired", "Active"]

    def test_placeholders(self, sample_documents, reference_date: date) -> None:
        """Verify missing fields get explicit placeholders, never blanks."""
        rows = export_formatter.format_document_sheet(sample_documents, reference_date)
        row = rows[3]

        assert row["File Size"] == "0 Bytes"
        assert row["Expiry Date"] == "N/A"
        assert row["Assigned User"] == "Not Assigned"
        assert row["Region"] == "N/A"
        assert row["Partner Type"] == "N/A"
        assert row["Description"] == "N/A"
        for row in rows:
            for value in row.values():
                assert value is not None
                assert str(value).strip() != ""

    def test_missing_file_type_and_uploader(self, reference_date: date) -> None:
        doc = sample_input.create_test_document(file_type=None, file_name=None)
        row = export_formatter.format_document_sheet([doc], reference_date)[0]

        assert row["File Type"] == "Unknown"
        assert row["File Name"] == "N/A"
        assert row["Uploaded By"] == "N/A"

    def test_does_not_mutate_input(self, sample_documents, reference_date: date) -> None:
        before = list(sample_documents)
        export_formatter.format_document_sheet(sample_documents, reference_date)
        assert sample_documents == before


@pytest.mark.unit
class TestFormatNotificationSheet:
    """Unit tests for format_notification_sheet function."""

    def test_rows(self, sample_notifications, sample_documents) -> None:
        rows = export_formatter.format_notification_sheet(
            sample_notifications, sample_documents
        )

        assert len(rows) == 4
        assert list(rows[0]) == export_formatter.NOTIFICATION_COLUMNS
        assert rows[0]["Status"] == "SENT"
        assert rows[0]["Scheduled Time"] == "Jan 14, 2025"
        assert rows[0]["Target User"] == "Alice Martin"
        assert rows[0]["File"] == "lease.docx"
        assert rows[2]["Sent Time"] == "N/A"

    def test_zero_days_kept(self, sample_notifications) -> None:
        """Verify zero days until expiry is shown as 0, not a placeholder.

        Real-world significance:
        - 'Expires today' is the most urgent reminder of all
        """
        rows = export_formatter.format_notification_sheet(sample_notifications)

        assert rows[1]["Days Until Expiry"] == 0
        assert rows[3]["Days Until Expiry"] == "N/A"

    def test_embedded_file_name_wins(self) -> None:
        notification = sample_input.create_test_notification(
            related_document_id=1, related_document_name="embedded.pdf"
        )
        rows = export_formatter.format_notification_sheet([notification])
        assert rows[0]["File"] == "embedded.pdf"

    def test_unknown_document(self) -> None:
        notification = sample_input.create_test_notification(related_document_id=42)
        rows = export_formatter.format_notification_sheet(
            [notification], [sample_input.create_test_document(1)]
        )
        assert rows[0]["File"] == "N/A"
        assert rows[0]["Target User"] == "N/A"


@pytest.mark.unit
class TestFormatStatisticsSheet:
    """Unit tests for format_statistics_sheet function."""

    def test_single_row(self) -> None:
        rows = export_formatter.format_statistics_sheet(_snapshot())

        assert rows == [
            {
                "Total Files": 4,
                "Expired Files": 1,
                "Expiring Soon": 1,
                "Total Notifications": 4,
                "Sent Notifications": 2,
                "Failed Notifications": 1,
            }
        ]


@pytest.mark.unit
class TestFormatComprehensiveReport:
    """Unit tests for format_comprehensive_report function."""

    def test_sheet_order(
        self, sample_documents, sample_notifications, reference_date: date
    ) -> None:
        """Verify the three sheets appear as Files, Notifications, Statistics.

        Real-world significance:
        - Downstream consumers locate sheets by name and position
        """
        sheets = export_formatter.format_comprehensive_report(
            sample_documents, sample_notifications, _snapshot(), now=reference_date
        )

        assert list(sheets) == ["Files", "Notifications", "Statistics"]
        assert len(sheets["Files"]) == 4
        assert len(sheets["Notifications"]) == 4
        assert len(sheets["Statistics"]) == 1

    def test_empty_snapshot(self, reference_date: date) -> None:
        sheets = export_formatter.format_comprehensive_report(
            [], [], _snapshot(), now=reference_date
        )

        assert sheets["Files"] == []
        assert sheets["Notifications"] == []
        assert len(sheets["Statistics"]) == 1

    def test_file_documents_replace_files_rows_only(
        self, sample_documents, sample_notifications, reference_date: date
    ) -> None:
        """Verify a filtered Files sheet keeps the full-scope statistics.

        Real-world significance:
        - A search narrows the exported file list, not the dashboard totals
        """
        sheets = export_formatter.format_comprehensive_report(
            sample_documents,
            sample_notifications,
            _snapshot(),
            now=reference_date,
            file_documents=[sample_documents[2]],
        )

        assert [row["File Name"] for row in sheets["Files"]] == ["permit.pdf"]
        assert sheets["Notifications"][0]["File"] == "lease.docx"
        assert len(sheets["Statistics"]) == 1


@pytest.mark.unit
class TestFormatReport:
    """Unit tests for single-sheet reports and format_report."""

    def test_files_report(self, sample_documents, reference_date: date) -> None:
        """Verify the files export is one 'Files Report' sheet.

        Real-world significance:
        - Users download the file list alone from the reports page
        """
        sheets = export_formatter.format_files_report(
            sample_documents, now=reference_date
        )

        assert list(sheets) == ["Files Report"]
        assert list(sheets["Files Report"][0]) == export_formatter.DOCUMENT_COLUMNS
        assert len(sheets["Files Report"]) == 4

    def test_notifications_report(self, sample_notifications, sample_documents) -> None:
        sheets = export_formatter.format_notifications_report(
            sample_notifications, sample_documents
        )

        assert list(sheets) == ["Notifications Report"]
        rows = sheets["Notifications Report"]
        assert list(rows[0]) == export_formatter.NOTIFICATION_COLUMNS
        assert rows[0]["File"] == "lease.docx"

    @pytest.mark.parametrize(
        "kind, expected",
        [
            (ReportKind.FILES, ["Files Report"]),
            (ReportKind.NOTIFICATIONS, ["Notifications Report"]),
            (ReportKind.COMPREHENSIVE, ["Files", "Notifications", "Statistics"]),
        ],
    )
    def test_sheets_per_kind(
        self, sample_documents, sample_notifications, reference_date: date, kind, expected
    ) -> None:
        sheets = export_formatter.format_report(
            kind, sample_documents, sample_notifications, _snapshot(), now=reference_date
        )
        assert list(sheets) == expected

    def test_files_report_uses_file_documents(
        self, sample_documents, sample_notifications, reference_date: date
    ) -> None:
        sheets = export_formatter.format_report(
            ReportKind.FILES,
            sample_documents,
            sample_notifications,
            _snapshot(),
            now=reference_date,
            file_documents=sample_documents[:1],
        )
        assert [row["File Name"] for row in sheets["Files Report"]] == ["contract.pdf"]

    def test_every_sheet_has_columns(
        self, sample_documents, sample_notifications, reference_date: date
    ) -> None:
        """Verify each sheet name any report produces has a header definition."""
        for kind in ReportKind:
            sheets = export_formatter.format_report(
                kind, sample_documents, sample_notifications, _snapshot(), now=reference_date
            )
            assert set(sheets) <= set(export_formatter.SHEET_COLUMNS)

    def test_report_file_prefix(self) -> None:
        assert (
            export_formatter.report_file_prefix(ReportKind.FILES, "custom")
            == "files_report"
        )
        assert (
            export_formatter.report_file_prefix(ReportKind.NOTIFICATIONS, "custom")
            == "notifications_report"
        )
        assert export_formatter.report_file_prefix(ReportKind.COMPREHENSIVE, "custom") == "custom"
