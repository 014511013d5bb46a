"""Report scoped to a single user.

The user is always passed in explicitly; nothing here reads session or
ambient state. A user's scope is every document they uploaded or are
assigned to, and every notification targeting them.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from .aggregator import DEFAULT_TREND_BUCKETS, aggregate, monthly_upload_trend
from .classifier import DEFAULT_HORIZON_DAYS
from .data_models import (
    DocumentRecord,
    NotificationRecord,
    UserRef,
    UserReportSnapshot,
)
from .source_adapter import resolve_classified

LOG = logging.getLogger(__name__)


def _is_user(user: Optional[UserRef], user_id: Any) -> bool:
    return user is not None and user.id is not None and user.id == user_id


def scope_to_user(
    documents: Iterable[DocumentRecord],
    notifications: Iterable[NotificationRecord],
    user_id: Any,
) -> Tuple[List[DocumentRecord], List[NotificationRecord]]:
    """Select the documents and notifications belonging to one user.

    Parameters
    ----------
    documents : Iterable[DocumentRecord]
        Full document snapshot.
    notifications : Iterable[NotificationRecord]
        Full notification snapshot.
    user_id : Any
        Identifier of the current user. Compared by equality with the ids
        of uploaded_by, assigned_user and target_user.

    Returns
    -------
    Tuple[List[DocumentRecord], List[NotificationRecord]]
        Documents uploaded by or assigned to the user, and notifications
        targeting the user, in input order.

    Raises
    ------
    ValueError
        If user_id is None.
    """
    if user_id is None:
        raise ValueError("user_id is required to scope a report to a user")

    user_documents = [
        doc
        for doc in documents
        if _is_user(doc.uploaded_by, user_id) or _is_user(doc.assigned_user, user_id)
    ]
    user_notifications = [
        notification
        for notification in notifications
        if _is_user(notification.target_user, user_id)
    ]
    return user_documents, user_notifications


def build_user_report(
    documents: Sequence[DocumentRecord],
    notifications: Sequence[NotificationRecord],
    user_id: Any,
    server_expiring: Optional[Iterable[DocumentRecord]] = None,
    server_expired: Optional[Iterable[DocumentRecord]] = None,
    now: date | datetime | None = None,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    max_trend_buckets: int = DEFAULT_TREND_BUCKETS,
) -> UserReportSnapshot:
    """Build the report of one user's documents and notifications.

    Upstream expiring/expired lists may cover all users; the source adapter
    intersects them with the user's documents. The monthly trend counts
    only documents the user uploaded themselves.

    Returns
    -------
    UserReportSnapshot
        Aggregated report plus uploaded/assigned document counts.

    Raises
    ------
    TypeError
        If documents or notifications is None.
    ValueError
        If user_id is None or horizon_days is not positive.
    """
    if documents is None:
        raise TypeError("documents must be a sequence of DocumentRecord, got None")
    if notifications is None:
        raise TypeError(
            "notifications must be a sequence of NotificationRecord, got None"
        )

    user_documents, user_notifications = scope_to_user(
        documents, notifications, user_id
    )
    uploaded = [doc for doc in user_documents if _is_user(doc.uploaded_by, user_id)]

    classified = resolve_classified(
        user_documents,
        server_expiring=server_expiring,
        server_expired=server_expired,
        now=now,
        horizon_days=horizon_days,
    )
    report = aggregate(
        user_documents, user_notifications, classified, max_trend_buckets
    )
    # Trend of the user's own uploads, not of documents assigned to them.
    report = replace(
        report, monthly_upload_trend=monthly_upload_trend(uploaded, max_trend_buckets)
    )

    LOG.info(
        "Built report for user %s: %d document(s), %d uploaded",
        user_id,
        len(user_documents),
        len(uploaded),
    )
    return UserReportSnapshot(
        user_id=user_id,
        report=report,
        uploaded_count=len(uploaded),
        assigned_count=len(user_documents) - len(uploaded),
        classified=classified,
    )
