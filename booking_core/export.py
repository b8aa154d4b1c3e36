from __future__ import annotations

import csv
from datetime import date
from typing import Any, Dict, List, Optional

import pandas as pd

CSV_HEADERS = ["Name", "City", "Price", "Rating", "Amenities", "Check-In", "Check-Out"]


def _cell(value: Any) -> str:
    return "" if value is None else str(value)


def hotels_export_frame(hotels: List[Dict[str, Any]]) -> pd.DataFrame:
    rows = []
    for h in hotels:
        availability = h.get("availability") or {}
        rows.append(
            [
                _cell(h.get("name")),
                _cell(h.get("city")),
                _cell(h.get("price")),
                _cell(h.get("rating")),
                "; ".join(str(a) for a in h.get("amenities") or []),
                _cell(availability.get("check_in")),
                _cell(availability.get("check_out")),
            ]
        )
    return pd.DataFrame(rows, columns=CSV_HEADERS, dtype="string")


def hotels_to_csv(hotels: List[Dict[str, Any]]) -> str:
    """Header row unquoted, every data cell quoted, rows joined by newlines without a trailing one."""
    df = hotels_export_frame(hotels)
    header = ",".join(CSV_HEADERS)
    if df.empty:
        return header
    body = df.to_csv(index=False, header=False, quoting=csv.QUOTE_ALL, lineterminator="\n")
    return header + "\n" + body.rstrip("\n")


def export_filename(day: Optional[date] = None) -> str:
    day = day or date.today()
    return f"hotels_{day.isoformat()}.csv"
