"""Aggregation of document and notification snapshots into a ReportSnapshot.

Single entry point: aggregate(documents, notifications, classified). The
helpers below are exposed for reuse by the per-user report and for tests;
each is a single O(n) pass with no I/O and no mutation of its inputs.

**Grouping rules:**
- Documents without a region (or partner type) name are left out of that
  grouping; there is no synthetic "unknown" key, so grouping totals can be
  lower than the document total
- Notifications with a status other than SENT or FAILED count toward the
  total only
- The monthly trend keys on the upload year-month, skips documents without
  a parsable upload date, and keeps only the most recent buckets
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .data_models import (
    ClassifiedDocuments,
    DocumentRecord,
    NotificationRecord,
    ReportSnapshot,
)
from .enums import NotificationStatus
from .utils import parse_date

LOG = logging.getLogger(__name__)

DEFAULT_TREND_BUCKETS = 6


def count_notifications(
    notifications: Iterable[NotificationRecord],
) -> Tuple[int, int, int]:
    """Count notifications in one pass.

    Returns
    -------
    Tuple[int, int, int]
        (total, sent, failed). Other statuses are included in total only.
    """
    total = sent = failed = 0
    for notification in notifications:
        total += 1
        status = NotificationStatus.from_string(notification.status)
        if status is NotificationStatus.SENT:
            sent += 1
        elif status is NotificationStatus.FAILED:
            failed += 1
    return total, sent, failed


def _count_by(
    documents: Iterable[DocumentRecord],
    key: Callable[[DocumentRecord], Optional[str]],
) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for doc in documents:
        name = key(doc)
        if name is None:
            continue
        counts[name] = counts.get(name, 0) + 1
    return counts


def count_by_region(documents: Iterable[DocumentRecord]) -> Dict[str, int]:
    """Document count per region name, first-seen order."""
    return _count_by(documents, lambda doc: doc.region_name)


def count_by_partner_type(documents: Iterable[DocumentRecord]) -> Dict[str, int]:
    """Document count per partner type name, first-seen order."""
    return _count_by(documents, lambda doc: doc.partner_type_name)


def monthly_upload_trend(
    documents: Iterable[DocumentRecord],
    max_buckets: int = DEFAULT_TREND_BUCKETS,
) -> List[Tuple[str, int]]:
    """Upload counts per calendar month, oldest first.

    Parameters
    ----------
    documents : Iterable[DocumentRecord]
        Documents to bucket by upload_date.
    max_buckets : int, optional
        Number of most recent non-empty months to keep (default 6).

    Returns
    -------
    List[Tuple[str, int]]
        ('YYYY-MM', count) pairs sorted ascending. Months without uploads
        are not inserted, and fewer than max_buckets months are returned
        as-is.

    Examples
    --------
    >>> docs = [DocumentRecord(id=1, upload_date="2025-01-03"),
    ...         DocumentRecord(id=2, upload_date="2025-03-09")]
    >>> monthly_upload_trend(docs)
    [('2025-01', 1), ('2025-03', 1)]
    """
    if max_buckets <= 0:
        raise ValueError(f"max_buckets must be positive, got {max_buckets}")

    buckets: Counter = Counter()
    skipped = 0
    for doc in documents:
        uploaded = parse_date(doc.upload_date)
        if uploaded is None:
            skipped += 1
            continue
        buckets[f"{uploaded.year:04d}-{uploaded.month:02d}"] += 1

    if skipped:
        LOG.debug("Excluded %d document(s) without upload date from trend", skipped)

    return sorted(buckets.items())[-max_buckets:]


def aggregate(
    documents: Sequence[DocumentRecord],
    notifications: Sequence[NotificationRecord],
    classified: ClassifiedDocuments,
    max_trend_buckets: int = DEFAULT_TREND_BUCKETS,
) -> ReportSnapshot:
    """Compute a ReportSnapshot from a document and notification snapshot.

    Expired and expiring-soon counts reuse the lists resolved by the source
    adapter rather than classifying again, so the counts always agree with
    the lists shown to users.

    Parameters
    ----------
    documents : Sequence[DocumentRecord]
        Document snapshot. Must not be None (use an empty list).
    notifications : Sequence[NotificationRecord]
        Notification snapshot. Must not be None (use an empty list).
    classified : ClassifiedDocuments
        Output of source_adapter.resolve_classified for the same snapshot.
    max_trend_buckets : int, optional
        Number of months kept in the upload trend (default 6).

    Returns
    -------
    ReportSnapshot
        Freshly computed snapshot.

    Raises
    ------
    TypeError
        If documents, notifications or classified is None.
    """
    if documents is None:
        raise TypeError("documents must be a sequence of DocumentRecord, got None")
    if notifications is None:
        raise TypeError(
            "notifications must be a sequence of NotificationRecord, got None"
        )
    if classified is None:
        raise TypeError("classified must be a ClassifiedDocuments, got None")

    total_notifications, sent, failed = count_notifications(notifications)

    snapshot = ReportSnapshot(
        total_documents=len(documents),
        expired_count=len(classified.expired),
        expiring_soon_count=len(classified.expiring_soon),
        total_notifications=total_notifications,
        sent_count=sent,
        failed_count=failed,
        by_region=count_by_region(documents),
        by_partner_type=count_by_partner_type(documents),
        monthly_upload_trend=monthly_upload_trend(documents, max_trend_buckets),
    )
    LOG.info(
        "Aggregated %d document(s) and %d notification(s)",
        snapshot.total_documents,
        snapshot.total_notifications,
    )
    return snapshot
