"""Chart series for the vitals trend graph."""
from datetime import date, datetime
from typing import Any, Dict, List

from healthdesk.aggregation.reducer import parse_float
from healthdesk.models.dashboard import ChartPoint

# Number of most recent records shown per range, not calendar days.
TIME_RANGE_RECORDS = {
    "week": 7,
    "month": 30,
    "quarter": 90,
}


def window_size(time_range: str) -> int:
    try:
        return TIME_RANGE_RECORDS[time_range]
    except KeyError:
        raise ValueError(f"Unknown time range '{time_range}'. Expected one of: {', '.join(TIME_RANGE_RECORDS)}")


def point_label(record_date: Any) -> str:
    """Format a record date as M/D. Unknown dates are labelled '--'."""
    if isinstance(record_date, datetime):
        parsed = record_date.date()
    elif isinstance(record_date, date):
        parsed = record_date
    elif isinstance(record_date, str) and record_date:
        try:
            parsed = date.fromisoformat(record_date[:10])
        except ValueError:
            return "--"
    else:
        return "--"
    return f"{parsed.month}/{parsed.day}"


def to_chart_point(record: Dict[str, Any]) -> ChartPoint:
    data = record.get("data") or {}
    return ChartPoint(
        name=point_label(record.get("record_date")),
        weight=parse_float(data.get("weight")) or 0,
        heartRate=parse_float(data.get("heartRate")) or 0,
        systolic=parse_float(data.get("bloodPressureSystolic")) or 0,
        diastolic=parse_float(data.get("bloodPressureDiastolic")) or 0,
        bloodSugar=parse_float(data.get("bloodSugar")) or 0,
    )


def build_vitals_series(vitals: List[Dict[str, Any]], time_range: str = "week") -> List[ChartPoint]:
    """
    Map the newest records of the range to chart points, oldest first.

    `vitals` must be ordered newest first, as fetched. Every record becomes
    its own point; same-day records are not merged and gaps are not filled.
    """
    size = window_size(time_range)
    points = [to_chart_point(record) for record in vitals[:size]]
    points.reverse()
    return points
