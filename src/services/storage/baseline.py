"""
Baseline dataset for the snapshot store.

The baseline is an immutable JSON array of monthly records used to seed
the store at startup and to service reset. When the file is missing a
small built-in default is used (and written out, if enabled). A file
that exists but cannot be parsed yields an empty baseline.
"""

import json
from pathlib import Path
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from src.events import EventLogger
from src.models.events import StoreEventBuilder
from src.models.snapshot import MonthlyRecord


DEFAULT_BASELINE: list[dict] = [
    {
        "date": "31/01/24",
        "assets": {
            "Mutual Funds": 50000,
            "Stocks": 82000,
            "Retirement Fund": 205000,
            "Savings Account": 100000,
            "Real Estate": 5000000,
        },
        "liabilities": {
            "Home Loan": 2995000,
            "Car Loan": 195000,
            "Credit Card Debt": 25000,
        },
    },
    {
        "date": "29/02/24",
        "assets": {
            "Mutual Funds": 53000,
            "Stocks": 85000,
            "Retirement Fund": 210000,
            "Savings Account": 102000,
            "Real Estate": 5000000,
        },
        "liabilities": {
            "Home Loan": 2990000,
            "Car Loan": 190000,
            "Credit Card Debt": 18000,
        },
    },
]

_SERIES_ADAPTER = TypeAdapter(list[MonthlyRecord])


def parse_series(raw: list[dict]) -> list[MonthlyRecord]:
    """
    Validate raw records and check that month labels are unique.

    Raises:
        ValueError: On invalid records or duplicate labels
    """
    records = _SERIES_ADAPTER.validate_python(raw)
    seen: set[str] = set()
    for record in records:
        if record.date in seen:
            raise ValueError(f"Duplicate month label in series: {record.date}")
        seen.add(record.date)
    return records


def default_baseline() -> list[MonthlyRecord]:
    return parse_series(DEFAULT_BASELINE)


def load_baseline(
    path: Path | str,
    write_default: bool = True,
    event_logger: Optional[EventLogger] = None,
) -> list[MonthlyRecord]:
    """
    Load the baseline series from a JSON file.

    Args:
        path: Location of the baseline JSON array
        write_default: Write the built-in default when the file is missing
        event_logger: Optional logger for load events

    Returns:
        The baseline records (possibly empty if the file is corrupt)
    """
    path = Path(path)

    if not path.exists():
        written = False
        if write_default:
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(json.dumps(DEFAULT_BASELINE, indent=2), encoding="utf-8")
                written = True
            except OSError as e:
                if event_logger:
                    event_logger.log(StoreEventBuilder.baseline_unreadable(str(path), str(e)))
        if event_logger:
            event_logger.log(StoreEventBuilder.baseline_missing(str(path), written))
        return default_baseline()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(raw, list):
            raise ValueError("Baseline must be a JSON array of monthly records")
        records = parse_series(raw)
    except (OSError, ValueError, ValidationError) as e:
        if event_logger:
            event_logger.log(StoreEventBuilder.baseline_unreadable(str(path), str(e)))
        return []

    if event_logger:
        event_logger.log(StoreEventBuilder.series_loaded(len(records), str(path)))
    return records
