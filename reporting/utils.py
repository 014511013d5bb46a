"""Utility functions for report processing.

Provides tolerant date parsing, display helpers and the canonical
deserialization of raw feed dicts into record dataclasses. Feeds are
loosely typed (camelCase keys, nested objects that may be missing or
null); every optional field is normalized here once so downstream steps
work with explicit Optional attributes instead of ad hoc lookups."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Mapping, Optional

import pandas as pd

from .data_models import (
    DocumentRecord,
    NotificationRecord,
    PartnerTypeRef,
    RegionRef,
    UserRef,
)

LOG = logging.getLogger(__name__)


def string_or_empty(value: Any) -> str:
    """Safely convert value to string, returning empty string for None.

    Parameters
    ----------
    value : Any
        Value to convert (may be None, empty string, or any type)

    Returns
    -------
    str
        Stringified, stripped value or empty string for None values
    """
    if value is None:
        return ""
    return str(value).strip()


def parse_date(value: Any) -> Optional[date]:
    """Parse a raw feed value into a calendar date.

    Time of day and timezone are discarded. ISO strings are parsed
    directly and may only be followed by a time part introduced by 'T' or
    a space. Other string formats go through pandas, except text without
    any digit ('now', 'today'), which is rejected. Never raises.

    Parameters
    ----------
    value : Any
        A date, datetime, pandas Timestamp or string.

    Returns
    -------
    date | None
        Calendar date, or None when value is missing, not a string/date, or
        cannot be parsed.

    Examples
    --------
    >>> parse_date("2025-03-15T09:30:00Z")
    datetime.date(2025, 3, 15)
    >>> parse_date("not a date") is None
    True
    >>> parse_date("2025-03-15garbage") is None
    True
    """
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        LOG.debug("Ignoring non-string date value %r", value)
        return None

    text = value.strip()
    if not text:
        return None

    head, tail = text[:10], text[10:]
    try:
        iso_date = date.fromisoformat(head)
    except ValueError:
        iso_date = None
    if iso_date is not None:
        if not tail or tail[0] in ("T", " "):
            return iso_date
        LOG.debug("Trailing characters after ISO date %r", value)
        return None

    # pandas resolves words such as 'now' or 'today' against the wall clock;
    # a calendar date always carries digits.
    if not any(char.isdigit() for char in text):
        LOG.debug("Unparsable date value %r", value)
        return None

    parsed = pd.to_datetime(text, errors="coerce")
    if pd.isna(parsed):
        LOG.debug("Unparsable date value %r", value)
        return None
    return parsed.date()


def to_date(value: date | datetime) -> date:
    """Reduce a reference instant to its calendar date."""
    if isinstance(value, datetime):
        return value.date()
    return value


def full_name_or(user: Optional[UserRef], placeholder: str) -> str:
    """Full name of user, or placeholder when the user or both names are missing."""
    if user is None:
        return placeholder
    return user.full_name or placeholder


def _first_present(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def deserialize_user(raw: Any) -> Optional[UserRef]:
    """Deserialize a nested user object; None when absent or not an object."""
    if not isinstance(raw, Mapping):
        return None
    return UserRef(
        id=raw.get("id"),
        first_name=raw.get("firstName"),
        last_name=raw.get("lastName"),
        role=raw.get("role"),
    )


def deserialize_document(raw: Mapping[str, Any]) -> DocumentRecord:
    """Deserialize a feed dict to a DocumentRecord.

    Accepts the file service's payload shape:
    {
        "id": 1,
        "fileName": "...",
        "description": "...",
        "fileType": "application/pdf",
        "fileSize": 2048,
        "uploadDate": "2025-01-10T08:00:00",
        "validityDate": "2025-01-01",
        "expiryDate": "2025-12-31",
        "region": {"id": 3, "regionName": "...", "regionCode": "..."},
        "channelPartnerType": {"id": 2, "typeName": "..."},
        "uploadedBy": {"id": 7, "firstName": "...", "lastName": "...", "role": "..."},
        "assignedKAR": {...}
    }

    ``partnerType``/``name`` and ``assignedUser`` are accepted as aliases,
    and ``regionId``/``partnerTypeId`` fill in identifiers when the nested
    object lacks them.

    Parameters
    ----------
    raw : Mapping[str, Any]
        One document entry from the feed.

    Returns
    -------
    DocumentRecord
        Constructed dataclass instance.

    Raises
    ------
    TypeError
        If raw is not a mapping.
    """
    if not isinstance(raw, Mapping):
        raise TypeError(
            f"Cannot deserialize {type(raw).__name__} to DocumentRecord: expected a mapping"
        )

    region_raw = _as_mapping(raw.get("region"))
    region = None
    if region_raw or raw.get("regionId") is not None:
        region = RegionRef(
            id=_first_present(region_raw, "id") if region_raw else raw.get("regionId"),
            name=_first_present(region_raw, "regionName", "name"),
            code=_first_present(region_raw, "regionCode", "code"),
        )

    partner_raw = _as_mapping(_first_present(raw, "channelPartnerType", "partnerType"))
    partner_type = None
    if partner_raw or raw.get("partnerTypeId") is not None:
        partner_type = PartnerTypeRef(
            id=_first_present(partner_raw, "id")
            if partner_raw
            else raw.get("partnerTypeId"),
            name=_first_present(partner_raw, "typeName", "name"),
        )

    return DocumentRecord(
        id=raw.get("id"),
        file_name=raw.get("fileName"),
        description=raw.get("description"),
        file_type=raw.get("fileType"),
        file_size=raw.get("fileSize"),
        upload_date=raw.get("uploadDate"),
        validity_date=raw.get("validityDate"),
        expiry_date=raw.get("expiryDate"),
        region=region,
        partner_type=partner_type,
        uploaded_by=deserialize_user(raw.get("uploadedBy")),
        assigned_user=deserialize_user(
            _first_present(raw, "assignedUser", "assignedKAR")
        ),
    )


def deserialize_notification(raw: Mapping[str, Any]) -> NotificationRecord:
    """Deserialize a feed dict to a NotificationRecord.

    The related document is taken from an embedded ``file`` object when
    present ({"id": ..., "fileName": ...}), otherwise from
    ``relatedDocumentId``/``fileId``.

    Raises
    ------
    TypeError
        If raw is not a mapping.
    """
    if not isinstance(raw, Mapping):
        raise TypeError(
            f"Cannot deserialize {type(raw).__name__} to NotificationRecord: "
            "expected a mapping"
        )

    file_raw = _as_mapping(raw.get("file"))
    days = raw.get("daysUntilExpiry")
    if isinstance(days, bool) or not isinstance(days, (int, float)) or pd.isna(days):
        days = None
    else:
        days = int(days)

    return NotificationRecord(
        id=raw.get("id"),
        title=raw.get("title"),
        message=raw.get("message"),
        notification_type=raw.get("notificationType"),
        status=raw.get("status"),
        scheduled_time=raw.get("scheduledTime"),
        sent_time=raw.get("sentTime"),
        target_user=deserialize_user(raw.get("targetUser")),
        related_document_id=_first_present(file_raw, "id")
        if file_raw
        else _first_present(raw, "relatedDocumentId", "fileId"),
        related_document_name=file_raw.get("fileName") if file_raw else None,
        days_until_expiry=days,
    )
