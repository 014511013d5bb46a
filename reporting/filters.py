"""Search and lifecycle filtering of document lists."""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, List, Optional

from .classifier import DEFAULT_HORIZON_DAYS, classify
from .data_models import DocumentRecord
from .enums import Lifecycle
from .utils import parse_date


def search_documents(
    documents: Iterable[DocumentRecord], query: Optional[str]
) -> List[DocumentRecord]:
    """Documents whose file name or description contains query.

    Matching is case-insensitive. A missing or blank query returns every
    document.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return list(documents)

    return [
        doc
        for doc in documents
        if needle in (doc.file_name or "").lower()
        or needle in (doc.description or "").lower()
    ]


def filter_by_lifecycle(
    documents: Iterable[DocumentRecord],
    lifecycle: Lifecycle,
    now: date | datetime | None = None,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
) -> List[DocumentRecord]:
    """Documents classified as lifecycle at now (defaults to today)."""
    if now is None:
        now = date.today()
    return [doc for doc in documents if classify(doc, now, horizon_days) is lifecycle]


def recent_documents(
    documents: Iterable[DocumentRecord], limit: int = 5
) -> List[DocumentRecord]:
    """Most recently uploaded documents first, at most limit of them.

    Documents without a parsable upload date sort after all dated ones,
    keeping their input order.
    """
    if limit < 0:
        raise ValueError(f"limit must not be negative, got {limit}")

    indexed = list(enumerate(documents))
    dated = [(idx, doc, parse_date(doc.upload_date)) for idx, doc in indexed]
    with_date = sorted(
        (entry for entry in dated if entry[2] is not None),
        key=lambda entry: (entry[2], -entry[0]),
        reverse=True,
    )
    without_date = [entry for entry in dated if entry[2] is None]
    return [doc for _, doc, _ in (with_date + without_date)[:limit]]
