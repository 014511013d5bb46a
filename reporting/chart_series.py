"""Chart-ready label/value series derived from a ReportSnapshot."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

from babel.dates import get_month_names

from .data_models import ReportSnapshot

DEFAULT_LOCALE = "en_US"


@dataclass(frozen=True)
class ChartSeries:
    """Parallel label and value lists for one chart."""

    labels: List[str]
    values: List[int]

    def to_dict(self) -> Dict[str, Any]:
        return {"labels": list(self.labels), "values": list(self.values)}


def status_series(snapshot: ReportSnapshot) -> ChartSeries:
    """Active / expired / expiring-soon document counts."""
    return ChartSeries(
        labels=["Active Files", "Expired Files", "Expiring Soon"],
        values=[
            snapshot.active_count,
            snapshot.expired_count,
            snapshot.expiring_soon_count,
        ],
    )


def notification_series(snapshot: ReportSnapshot) -> ChartSeries:
    """Sent / failed notification counts. Other statuses are not charted."""
    return ChartSeries(
        labels=["Sent", "Failed"],
        values=[snapshot.sent_count, snapshot.failed_count],
    )


def distribution_series(counts: Mapping[str, int]) -> ChartSeries:
    """Series for a grouping such as ReportSnapshot.by_region.

    An empty grouping gives empty lists; callers decide how to render "no
    data".
    """
    return ChartSeries(labels=list(counts.keys()), values=list(counts.values()))


def month_label(year_month: str, locale: str = DEFAULT_LOCALE) -> str:
    """Render a 'YYYY-MM' key as e.g. 'Jan 2025'.

    Raises
    ------
    ValueError
        If year_month is not in 'YYYY-MM' form.
    """
    year, sep, month = year_month.partition("-")
    if not sep or not year.isdigit() or not month.isdigit():
        raise ValueError(f"Invalid year-month key: {year_month}. Expected YYYY-MM.")
    month_number = int(month)
    if not 1 <= month_number <= 12:
        raise ValueError(f"Invalid month in year-month key: {year_month}")

    names = get_month_names("abbreviated", locale=locale)
    return f"{names[month_number]} {year}"


def trend_series(snapshot: ReportSnapshot, locale: str = DEFAULT_LOCALE) -> ChartSeries:
    """Monthly upload counts labelled by abbreviated month and year."""
    return ChartSeries(
        labels=[month_label(month, locale) for month, _ in snapshot.monthly_upload_trend],
        values=[count for _, count in snapshot.monthly_upload_trend],
    )


def build_chart_payload(
    snapshot: ReportSnapshot, locale: str = DEFAULT_LOCALE
) -> Dict[str, Dict[str, Any]]:
    """All dashboard charts of a snapshot, keyed by chart name.

    Keys are 'status', 'notifications', 'regions', 'partner_types' and
    'monthly_uploads', each holding {'labels': [...], 'values': [...]}.
    """
    charts = {
        "status": status_series(snapshot),
        "notifications": notification_series(snapshot),
        "regions": distribution_series(snapshot.by_region),
        "partner_types": distribution_series(snapshot.by_partner_type),
        "monthly_uploads": trend_series(snapshot, locale),
    }
    return {name: series.to_dict() for name, series in charts.items()}
