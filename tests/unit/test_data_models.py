"""Unit tests for data_models module - core record and snapshot dataclasses.

Tests cover:
- Immutability of records
- Derived properties (full names, grouping names, active count)
- JSON-ready rendering of snapshots

Real-world significance:
- Records are shared between classification, aggregation and export; none
  of those steps may change them
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from reporting import data_models
from tests.fixtures import sample_input


@pytest.mark.unit
class TestUserRef:
    """Unit tests for UserRef dataclass."""

    def test_full_name_joins_names(self) -> None:
        user = sample_input.create_test_user(1, " Alice ", "Martin")
        assert user.full_name == "Alice Martin"

    def test_full_name_with_one_part(self) -> None:
        assert sample_input.create_test_user(1, None, "Martin").full_name == "Martin"

    def test_full_name_empty_when_missing(self) -> None:
        """Verify missing names give an empty string, not 'None None'.

        Real-world significance:
        - Export cells fall back to a placeholder when the name is empty
        """
        assert sample_input.create_test_user(1, None, "  ").full_name == ""


@pytest.mark.unit
class TestDocumentRecord:
    """Unit tests for DocumentRecord dataclass."""

    def test_is_frozen(self) -> None:
        """Verify DocumentRecord cannot be modified after creation.

        Real-world significance:
        - The aggregator and exporter read the same records; a mutation in
          one step would leak into the other
        """
        doc = sample_input.create_test_document()
        with pytest.raises(FrozenInstanceError):
            doc.file_name = "changed.pdf"  # type: ignore[misc]

    def test_region_and_partner_names_are_stripped(self) -> None:
        doc = sample_input.create_test_document(
            region="  North ", partner_type=" Retailer"
        )
        assert doc.region_name == "North"
        assert doc.partner_type_name == "Retailer"

    def test_blank_or_missing_grouping_is_none(self) -> None:
        """Verify blank names count as missing.

        Real-world significance:
        - Documents without a region are left out of the region chart
        """
        assert sample_input.create_test_document(region="   ").region_name is None
        assert sample_input.create_test_document(region=None).region_name is None
        assert (
            sample_input.create_test_document(partner_type=None).partner_type_name
            is None
        )


@pytest.mark.unit
class TestClassifiedDocuments:
    """Unit tests for ClassifiedDocuments dataclass."""

    def test_is_degraded(self) -> None:
        assert not data_models.ClassifiedDocuments([], []).is_degraded
        assert data_models.ClassifiedDocuments([], [], ("expired",)).is_degraded


@pytest.mark.unit
class TestReportSnapshot:
    """Unit tests for ReportSnapshot dataclass."""

    def _snapshot(self, **overrides) -> data_models.ReportSnapshot:
        values = dict(
            total_documents=10,
            expired_count=3,
            expiring_soon_count=2,
            total_notifications=4,
            sent_count=2,
            failed_count=1,
            by_region={"North": 6, "South": 3},
            by_partner_type={"Distributor": 10},
            monthly_upload_trend=[("2024-12", 4), ("2025-01", 6)],
        )
        values.update(overrides)
        return data_models.ReportSnapshot(**values)

    def test_active_count(self) -> None:
        assert self._snapshot().active_count == 5

    def test_active_count_never_negative(self) -> None:
        """Verify overlapping upstream lists cannot give a negative count.

        Real-world significance:
        - Upstream lists are trusted even when they overlap, so the status
          chart clamps at zero instead of showing a negative slice
        """
        snapshot = self._snapshot(total_documents=2, expired_count=2, expiring_soon_count=1)
        assert snapshot.active_count == 0

    def test_other_notification_count(self) -> None:
        assert self._snapshot().other_notification_count == 1

    def test_to_dict(self) -> None:
        payload = self._snapshot().to_dict()

        assert payload["total_documents"] == 10
        assert payload["active_count"] == 5
        assert payload["other_notification_count"] == 1
        assert payload["by_region"] == {"North": 6, "South": 3}
        assert payload["monthly_upload_trend"] == [
            {"month": "2024-12", "count": 4},
            {"month": "2025-01", "count": 6},
        ]

    def test_user_report_to_dict_adds_user_fields(self) -> None:
        user_report = data_models.UserReportSnapshot(
            user_id=7, report=self._snapshot(), uploaded_count=3, assigned_count=1
        )
        payload = user_report.to_dict()

        assert payload["user_id"] == 7
        assert payload["uploaded_count"] == 3
        assert payload["assigned_count"] == 1
        assert payload["total_documents"] == 10
        assert user_report.degraded_sources == ()
        assert user_report.classified.expiring_soon == []
