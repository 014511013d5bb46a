"""Unified data models for the reporting engine.

This module provides the immutable dataclasses passed between the
classification, aggregation and export steps. Records are snapshots
supplied by callers; no step mutates them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple, Union

# Raw date value as delivered by a feed. Parsed lazily by utils.parse_date so
# that a malformed value degrades at use instead of failing construction.
DateLike = Union[str, date, datetime, None]


@dataclass(frozen=True)
class UserRef:
    """Reference to a user attached to a document or notification.

    Parameters
    ----------
    id : Any
        User identifier, as issued by the user directory.
    first_name : str | None
        Given name.
    last_name : str | None
        Family name.
    role : str | None
        Role label (e.g. 'ADMIN', 'USER').
    """

    id: Any = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[str] = None

    @property
    def full_name(self) -> str:
        """First and last name joined by a space; empty when both are missing."""
        parts = [
            str(part).strip()
            for part in (self.first_name, self.last_name)
            if part is not None
        ]
        return " ".join(part for part in parts if part)


@dataclass(frozen=True)
class RegionRef:
    """Region a document belongs to."""

    id: Any = None
    name: Optional[str] = None
    code: Optional[str] = None


@dataclass(frozen=True)
class PartnerTypeRef:
    """Channel partner type a document belongs to."""

    id: Any = None
    name: Optional[str] = None


def _clean_name(value: Optional[str]) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class DocumentRecord:
    """One uploaded file and its metadata.

    Fields
    ------
    id : Any
        Unique document identifier.
    file_name : str | None
        Original file name.
    description : str | None
        Free-text description.
    file_type : str | None
        MIME type (e.g. 'application/pdf').
    file_size : Any
        Byte count. Kept as delivered; the export step tolerates malformed
        values.
    upload_date : DateLike
        Ingestion timestamp.
    validity_date : DateLike
        Date from which the document is valid (informational).
    expiry_date : DateLike
        Calendar date the document expires. Missing or malformed values
        classify as Lifecycle.UNKNOWN.
    region : RegionRef | None
        Region classification dimension.
    partner_type : PartnerTypeRef | None
        Channel partner type classification dimension.
    uploaded_by : UserRef | None
        Uploader.
    assigned_user : UserRef | None
        User responsible for the document.
    """

    id: Any
    file_name: Optional[str] = None
    description: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Any = None
    upload_date: DateLike = None
    validity_date: DateLike = None
    expiry_date: DateLike = None
    region: Optional[RegionRef] = None
    partner_type: Optional[PartnerTypeRef] = None
    uploaded_by: Optional[UserRef] = None
    assigned_user: Optional[UserRef] = None

    @property
    def region_name(self) -> Optional[str]:
        """Stripped region name, or None when missing or blank."""
        return _clean_name(self.region.name) if self.region else None

    @property
    def partner_type_name(self) -> Optional[str]:
        """Stripped partner type name, or None when missing or blank."""
        return _clean_name(self.partner_type.name) if self.partner_type else None


@dataclass(frozen=True)
class NotificationRecord:
    """One notification delivery attempt associated with a document.

    Fields
    ------
    id : Any
        Unique notification identifier.
    title, message : str | None
        Notification content.
    notification_type : str | None
        Type label (e.g. 'EXPIRY_WARNING').
    status : str | None
        Raw delivery status. Interpreted through NotificationStatus; values
        other than SENT and FAILED form a separate "other" bucket.
    scheduled_time, sent_time : DateLike
        When delivery was scheduled and, if it happened, when it was sent.
    target_user : UserRef | None
        Recipient.
    related_document_id : Any
        Identifier of the document the notification is about.
    related_document_name : str | None
        File name of that document when the feed embeds it.
    days_until_expiry : int | None
        Informational countdown computed by the dispatcher.
    """

    id: Any
    title: Optional[str] = None
    message: Optional[str] = None
    notification_type: Optional[str] = None
    status: Optional[str] = None
    scheduled_time: DateLike = None
    sent_time: DateLike = None
    target_user: Optional[UserRef] = None
    related_document_id: Any = None
    related_document_name: Optional[str] = None
    days_until_expiry: Optional[int] = None


@dataclass(frozen=True)
class ClassifiedDocuments:
    """Expiring and expired document lists produced by the source adapter.

    Parameters
    ----------
    expiring_soon : List[DocumentRecord]
        Documents expiring within the classification horizon.
    expired : List[DocumentRecord]
        Documents past their expiry date.
    degraded_sources : Tuple[str, ...]
        Names of upstream sources ('expiring', 'expired') that were
        unavailable and replaced by local classification.
    """

    expiring_soon: List[DocumentRecord]
    expired: List[DocumentRecord]
    degraded_sources: Tuple[str, ...] = ()

    @property
    def is_degraded(self) -> bool:
        return bool(self.degraded_sources)


@dataclass(frozen=True)
class ReportSnapshot:
    """Computed summary of documents and notifications at one point in time.

    Recomputed as a whole on every aggregation; never partially updated.

    Parameters
    ----------
    total_documents : int
        Number of documents in the snapshot.
    expired_count : int
        Size of the classified expired list.
    expiring_soon_count : int
        Size of the classified expiring-soon list.
    total_notifications : int
        Number of notifications, all statuses included.
    sent_count : int
        Notifications with status SENT.
    failed_count : int
        Notifications with status FAILED.
    by_region : Dict[str, int]
        Document count per region name, first-seen order. Documents without
        a region are omitted.
    by_partner_type : Dict[str, int]
        Document count per partner type name, first-seen order. Documents
        without a partner type are omitted.
    monthly_upload_trend : List[Tuple[str, int]]
        ('YYYY-MM', count) pairs, oldest first, most recent buckets only.
    """

    total_documents: int
    expired_count: int
    expiring_soon_count: int
    total_notifications: int
    sent_count: int
    failed_count: int
    by_region: Dict[str, int] = field(default_factory=dict)
    by_partner_type: Dict[str, int] = field(default_factory=dict)
    monthly_upload_trend: List[Tuple[str, int]] = field(default_factory=list)

    @property
    def active_count(self) -> int:
        """Documents in neither the expired nor the expiring-soon list."""
        return max(
            0, self.total_documents - self.expired_count - self.expiring_soon_count
        )

    @property
    def other_notification_count(self) -> int:
        """Notifications whose status is neither SENT nor FAILED."""
        return self.total_notifications - self.sent_count - self.failed_count

    def to_dict(self) -> Dict[str, Any]:
        """Render the snapshot as a JSON-serializable dict."""
        return {
            "total_documents": self.total_documents,
            "expired_count": self.expired_count,
            "expiring_soon_count": self.expiring_soon_count,
            "active_count": self.active_count,
            "total_notifications": self.total_notifications,
            "sent_count": self.sent_count,
            "failed_count": self.failed_count,
            "other_notification_count": self.other_notification_count,
            "by_region": dict(self.by_region),
            "by_partner_type": dict(self.by_partner_type),
            "monthly_upload_trend": [
                {"month": month, "count": count}
                for month, count in self.monthly_upload_trend
            ],
        }


@dataclass(frozen=True)
class UserReportSnapshot:
    """Report restricted to the documents and notifications of one user.

    Parameters
    ----------
    user_id : Any
        Identifier of the user the report was built for.
    report : ReportSnapshot
        Aggregated statistics over the user's documents and notifications.
        Its monthly trend counts only documents the user uploaded.
    uploaded_count : int
        Documents uploaded by the user.
    assigned_count : int
        Documents in scope that the user did not upload (assigned to them).
    classified : ClassifiedDocuments
        Expiring and expired lists of the user's documents.
    """

    user_id: Any
    report: ReportSnapshot
    uploaded_count: int
    assigned_count: int
    classified: ClassifiedDocuments = field(
        default_factory=lambda: ClassifiedDocuments(expiring_soon=[], expired=[])
    )

    @property
    def degraded_sources(self) -> Tuple[str, ...]:
        """Upstream sources replaced by local classification."""
        return self.classified.degraded_sources

    def to_dict(self) -> Dict[str, Any]:
        payload = self.report.to_dict()
        payload["user_id"] = self.user_id
        payload["uploaded_count"] = self.uploaded_count
        payload["assigned_count"] = self.assigned_count
        return payload
