"""Resilient resolution of the expiring and expired document lists.

Upstream services can supply pre-classified "expiring within N days" and
"expired" lists, and either may be unavailable independently. This step
always returns both lists: a supplied list is used as-is for its bucket,
and a missing one is recomputed locally from a single mutually exclusive
partition of the full snapshot.

**Error Handling:**
- A missing source (None) is a recoverable condition: logged as a warning,
  recorded in ClassifiedDocuments.degraded_sources, never raised
- A supplied list takes precedence over local classification even when
  the two would disagree
- Entries of a supplied list that are not part of the snapshot are dropped
  (logged), and repeated entries are kept once
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .classifier import DEFAULT_HORIZON_DAYS, partition, validate_horizon
from .data_models import ClassifiedDocuments, DocumentRecord
from .enums import Lifecycle

LOG = logging.getLogger(__name__)

EXPIRING_SOURCE = "expiring"
EXPIRED_SOURCE = "expired"


def restrict_to_snapshot(
    candidates: Iterable[DocumentRecord],
    snapshot_ids: Dict[Any, DocumentRecord],
    source_name: str,
) -> List[DocumentRecord]:
    """Reduce an upstream list to unique members of the document snapshot.

    Parameters
    ----------
    candidates : Iterable[DocumentRecord]
        Pre-classified list from an upstream source.
    snapshot_ids : Dict[Any, DocumentRecord]
        Snapshot documents keyed by id.
    source_name : str
        Source label used in log messages.

    Returns
    -------
    List[DocumentRecord]
        Snapshot records matching the candidates, first-seen order, no
        repeats. Snapshot records are returned so both lists reference the
        same objects the aggregator and exporter see.
    """
    seen: set = set()
    resolved: List[DocumentRecord] = []
    foreign = 0
    for candidate in candidates:
        doc = snapshot_ids.get(candidate.id)
        if doc is None:
            foreign += 1
            continue
        if candidate.id in seen:
            continue
        seen.add(candidate.id)
        resolved.append(doc)

    if foreign:
        LOG.warning(
            "Dropped %d %s document(s) not present in the document snapshot",
            foreign,
            source_name,
        )
    return resolved


def resolve_classified(
    documents: Sequence[DocumentRecord],
    server_expiring: Optional[Iterable[DocumentRecord]] = None,
    server_expired: Optional[Iterable[DocumentRecord]] = None,
    now: date | datetime | None = None,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
) -> ClassifiedDocuments:
    """Produce consistent expiring-soon and expired lists for a snapshot.

    Parameters
    ----------
    documents : Sequence[DocumentRecord]
        Full document snapshot.
    server_expiring : Iterable[DocumentRecord] | None
        Upstream "expiring within horizon" list, or None if the source failed.
    server_expired : Iterable[DocumentRecord] | None
        Upstream "expired" list, or None if the source failed.
    now : date | datetime | None
        Reference instant for local fallback; defaults to today.
    horizon_days : int, optional
        Look-ahead window for the local fallback (default 30).

    Returns
    -------
    ClassifiedDocuments
        Both lists plus the names of the sources that were replaced locally.

    Raises
    ------
    TypeError
        If documents is None.
    ValueError
        If horizon_days is not a positive integer.
    """
    if documents is None:
        raise TypeError("documents must be a sequence of DocumentRecord, got None")
    validate_horizon(horizon_days)

    if now is None:
        now = date.today()

    # Records without an id cannot be matched or de-duplicated; they are kept
    # for local classification but never match an upstream entry.
    snapshot_ids: Dict[Any, DocumentRecord] = {}
    unique_documents: List[DocumentRecord] = []
    for doc in documents:
        if doc.id is None:
            unique_documents.append(doc)
        elif doc.id not in snapshot_ids:
            snapshot_ids[doc.id] = doc
            unique_documents.append(doc)

    local: Optional[Dict[Lifecycle, List[DocumentRecord]]] = None
    degraded: List[str] = []

    def local_bucket(state: Lifecycle) -> List[DocumentRecord]:
        nonlocal local
        if local is None:
            local = partition(unique_documents, now, horizon_days)
        return list(local[state])

    if server_expiring is None:
        LOG.warning(
            "Expiring documents source unavailable; classifying %d document(s) locally",
            len(unique_documents),
        )
        degraded.append(EXPIRING_SOURCE)
        expiring_soon = local_bucket(Lifecycle.EXPIRING_SOON)
    else:
        expiring_soon = restrict_to_snapshot(
            server_expiring, snapshot_ids, EXPIRING_SOURCE
        )

    if server_expired is None:
        LOG.warning(
            "Expired documents source unavailable; classifying %d document(s) locally",
            len(unique_documents),
        )
        degraded.append(EXPIRED_SOURCE)
        expired = local_bucket(Lifecycle.EXPIRED)
    else:
        expired = restrict_to_snapshot(server_expired, snapshot_ids, EXPIRED_SOURCE)

    LOG.info(
        "Classified %d document(s): %d expiring soon, %d expired",
        len(unique_documents),
        len(expiring_soon),
        len(expired),
    )
    return ClassifiedDocuments(
        expiring_soon=expiring_soon,
        expired=expired,
        degraded_sources=tuple(degraded),
    )
