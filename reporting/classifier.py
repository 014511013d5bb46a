"""Temporal classification of documents by expiry date.

Maps a document and a reference date to exactly one Lifecycle state. All
comparisons are on calendar dates so intraday drift of the reference
instant cannot move a document between buckets.

**Classification rules** (``today`` is the date part of ``now``):

- expiry missing or unparsable -> UNKNOWN
- expiry <= today -> EXPIRED (expiring today counts as expired)
- expiry <= today + horizon_days -> EXPIRING_SOON
- otherwise -> ACTIVE
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional

from .data_models import DocumentRecord
from .enums import Lifecycle
from .utils import parse_date, to_date

DEFAULT_HORIZON_DAYS = 30


def validate_horizon(horizon_days: int) -> int:
    """Return horizon_days if it is a positive integer, else raise ValueError."""
    if isinstance(horizon_days, bool) or not isinstance(horizon_days, int):
        raise ValueError(
            f"horizon_days must be an integer, got {type(horizon_days).__name__}"
        )
    if horizon_days <= 0:
        raise ValueError(f"horizon_days must be positive, got {horizon_days}")
    return horizon_days


def classify(
    doc: DocumentRecord,
    now: date | datetime,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
) -> Lifecycle:
    """Classify a document's lifecycle state relative to now.

    Parameters
    ----------
    doc : DocumentRecord
        Document to classify. Its expiry_date may be missing or malformed.
    now : date | datetime
        Reference instant; only the calendar date is used.
    horizon_days : int, optional
        Look-ahead window in days for EXPIRING_SOON (default 30).

    Returns
    -------
    Lifecycle
        Exactly one of ACTIVE, EXPIRING_SOON, EXPIRED, UNKNOWN.

    Raises
    ------
    ValueError
        If horizon_days is not a positive integer.
    """
    validate_horizon(horizon_days)

    expiry = parse_date(doc.expiry_date)
    if expiry is None:
        return Lifecycle.UNKNOWN

    today = to_date(now)
    if expiry <= today:
        return Lifecycle.EXPIRED
    if expiry <= today + timedelta(days=horizon_days):
        return Lifecycle.EXPIRING_SOON
    return Lifecycle.ACTIVE


def partition(
    documents: Iterable[DocumentRecord],
    now: date | datetime,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
) -> Dict[Lifecycle, List[DocumentRecord]]:
    """Split documents into lifecycle buckets with one classification each.

    Every Lifecycle member is present as a key, possibly with an empty list.
    Input order is preserved within each bucket.
    """
    validate_horizon(horizon_days)

    buckets: Dict[Lifecycle, List[DocumentRecord]] = {state: [] for state in Lifecycle}
    for doc in documents:
        buckets[classify(doc, now, horizon_days)].append(doc)
    return buckets


def days_until_expiry(doc: DocumentRecord, now: date | datetime) -> Optional[int]:
    """Signed number of days from now until the document expires.

    Negative values count days since expiry. None when the expiry date is
    missing or malformed.
    """
    expiry = parse_date(doc.expiry_date)
    if expiry is None:
        return None
    return (expiry - to_date(now)).days
