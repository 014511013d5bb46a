"""Reading of document and notification feeds from JSON files.

**Input Contract:**
- A feed file holds either a JSON array of records or an envelope object
  with the array under "body" or "data" (the shape the file and
  notification services respond with)
- Records are deserialized with utils.deserialize_document /
  utils.deserialize_notification

**Error Handling:**
- The document feed is required: a missing or malformed file raises
  immediately (infrastructure error)
- The expiring/expired feeds are optional sources: a missing, unreadable or
  malformed file is logged and reported as None so the source adapter can
  fall back to local classification
- The notification feed degrades to an empty list on the same conditions
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

from .data_models import DocumentRecord, NotificationRecord
from .utils import deserialize_document, deserialize_notification

LOG = logging.getLogger(__name__)

ENVELOPE_KEYS = ("body", "data")


def unwrap_records(payload: Any, source: str) -> List[Any]:
    """Return the record list of a feed payload.

    Parameters
    ----------
    payload : Any
        Parsed JSON value.
    source : str
        Feed description used in error messages.

    Returns
    -------
    List[Any]
        The records array.

    Raises
    ------
    ValueError
        If payload is neither a list nor an envelope holding one.
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ENVELOPE_KEYS:
            if isinstance(payload.get(key), list):
                return payload[key]
    raise ValueError(
        f"Unexpected {source} payload: expected a list or an object with "
        f"one of {list(ENVELOPE_KEYS)} holding a list"
    )


def _read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_documents(path: Path) -> List[DocumentRecord]:
    """Load the required document feed.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the file is not valid JSON or has an unexpected shape.
    TypeError
        If a record is not a JSON object.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Document feed not found: {path}")

    try:
        payload = _read_json(path)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in document feed {path}: {exc}") from exc

    documents = [
        deserialize_document(raw)
        for raw in unwrap_records(payload, f"document feed {path}")
    ]
    LOG.info("Loaded %d document(s) from %s", len(documents), path)
    return documents


def load_optional_documents(path: Optional[Path]) -> Optional[List[DocumentRecord]]:
    """Load a pre-classified document feed, or None if the source failed.

    A None path means the source was not supplied at all.
    """
    if path is None:
        return None

    path = Path(path)
    try:
        payload = _read_json(path)
        records = unwrap_records(payload, f"document feed {path}")
        documents = [deserialize_document(raw) for raw in records]
    except (OSError, ValueError, TypeError) as exc:
        LOG.warning("Document source %s unavailable: %s", path, exc)
        return None

    LOG.info("Loaded %d pre-classified document(s) from %s", len(documents), path)
    return documents


def load_notifications(path: Optional[Path]) -> List[NotificationRecord]:
    """Load the notification feed; an unavailable source yields an empty list."""
    if path is None:
        return []

    path = Path(path)
    try:
        payload = _read_json(path)
        records = unwrap_records(payload, f"notification feed {path}")
        notifications = [deserialize_notification(raw) for raw in records]
    except (OSError, ValueError, TypeError) as exc:
        LOG.warning("Notification source %s unavailable: %s", path, exc)
        return []

    LOG.info("Loaded %d notification(s) from %s", len(notifications), path)
    return notifications
