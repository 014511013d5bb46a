"""Enumerations for the reporting engine."""

from enum import Enum


class Lifecycle(Enum):
    """Lifecycle state of a document relative to a reference date.

    The four states are mutually exclusive: every classification call places
    a document in exactly one of them.

    Attributes
    ----------
    ACTIVE : str
        Expiry date lies beyond the classification horizon.
    EXPIRING_SOON : str
        Expiry date is after today but within the classification horizon.
    EXPIRED : str
        Expiry date is today or earlier.
    UNKNOWN : str
        Expiry date is missing or could not be parsed.

    See Also
    --------
    reporting.classifier.classify : Maps a document to a Lifecycle value
    """

    ACTIVE = "active"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"
    UNKNOWN = "unknown"

    @classmethod
    def from_string(cls, value: str | None) -> "Lifecycle":
        """Convert string to Lifecycle.

        Parameters
        ----------
        value : str | None
            Lifecycle name ('active', 'expiring_soon', 'expired', 'unknown').
            Case-insensitive; hyphens and spaces are accepted in place of
            underscores.

        Returns
        -------
        Lifecycle
            Corresponding Lifecycle enum value.

        Raises
        ------
        ValueError
            If value is None or not a valid lifecycle name.

        Examples
        --------
        >>> Lifecycle.from_string("expiring-soon")
        <Lifecycle.EXPIRING_SOON: 'expiring_soon'>
        """
        if value is None:
            raise ValueError(
                f"Lifecycle is required. Valid options: {', '.join(s.value for s in cls)}"
            )

        value_normalized = value.strip().lower().replace("-", "_").replace(" ", "_")
        for state in cls:
            if state.value == value_normalized:
                return state

        raise ValueError(
            f"Unknown lifecycle: {value}. "
            f"Valid options: {', '.join(s.value for s in cls)}"
        )


class NotificationStatus(Enum):
    """Delivery status of a notification.

    Only SENT and FAILED are counted in their own buckets. Any other raw
    status (PENDING, SCHEDULED, typos, missing values) maps to OTHER and is
    counted in the notification total only.
    """

    SENT = "SENT"
    FAILED = "FAILED"
    OTHER = "OTHER"

    @classmethod
    def from_string(cls, value: str | None) -> "NotificationStatus":
        """Convert a raw feed status to NotificationStatus.

        Never raises: unrecognized or missing values become OTHER.

        Parameters
        ----------
        value : str | None
            Raw status string from the notification feed.

        Returns
        -------
        NotificationStatus
            SENT or FAILED on an exact, case-sensitive match, else OTHER.
            Variants such as "sent" or " FAILED " are OTHER.

        Examples
        --------
        >>> NotificationStatus.from_string("SENT")
        <NotificationStatus.SENT: 'SENT'>
        >>> NotificationStatus.from_string("sent")
        <NotificationStatus.OTHER: 'OTHER'>
        >>> NotificationStatus.from_string("PENDING")
        <NotificationStatus.OTHER: 'OTHER'>
        """
        if value == cls.SENT.value:
            return cls.SENT
        if value == cls.FAILED.value:
            return cls.FAILED
        return cls.OTHER


class SheetName(Enum):
    """Fixed sheet names of the comprehensive report, in display order."""

    FILES = "Files"
    NOTIFICATIONS = "Notifications"
    STATISTICS = "Statistics"


class ReportKind(Enum):
    """Which export to produce.

    FILES and NOTIFICATIONS are single-sheet reports; COMPREHENSIVE holds
    the Files, Notifications and Statistics sheets.
    """

    FILES = "files"
    NOTIFICATIONS = "notifications"
    COMPREHENSIVE = "comprehensive"

    @classmethod
    def from_string(cls, value: str | None) -> "ReportKind":
        """Convert string to ReportKind; None gives COMPREHENSIVE.

        Raises
        ------
        ValueError
            If value is not a valid report kind.
        """
        if value is None:
            return cls.COMPREHENSIVE
        if not isinstance(value, str):
            raise ValueError(f"Report kind must be a string, got {type(value).__name__}")

        value_lower = value.strip().lower()
        for kind in cls:
            if kind.value == value_lower:
                return kind

        raise ValueError(
            f"Unknown report kind: {value}. "
            f"Valid options: {', '.join(k.value for k in cls)}"
        )

    @classmethod
    def all_codes(cls) -> set[str]:
        """Get set of all report kind names."""
        return {kind.value for kind in cls}


class ExportFormat(Enum):
    """Output file format for exported reports."""

    XLSX = "xlsx"
    CSV = "csv"

    @classmethod
    def from_string(cls, value: str | None) -> "ExportFormat":
        """Convert string to ExportFormat.

        Parameters
        ----------
        value : str | None
            Format name ('xlsx', 'csv'), or None for default (XLSX).

        Returns
        -------
        ExportFormat
            Corresponding ExportFormat enum, defaults to XLSX if value is None.

        Raises
        ------
        ValueError
            If value is not a valid format name.
        """
        if value is None:
            return cls.XLSX
        if not isinstance(value, str):
            raise ValueError(
                f"Export format must be a string, got {type(value).__name__}"
            )

        value_lower = value.lower()
        for export_format in cls:
            if export_format.value == value_lower:
                return export_format

        raise ValueError(
            f"Unknown export format: {value}. "
            f"Valid options: {', '.join(f.value for f in cls)}"
        )

    @classmethod
    def all_codes(cls) -> set[str]:
        """Get set of all supported format names."""
        return {export_format.value for export_format in cls}
