from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pandas as pd

from booking_core.filters import HotelFilters, SortSpec, is_valid_date_range

logger = logging.getLogger(__name__)

ITEMS_PER_PAGE = 10

HOTELS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "name": "Agoda Palace",
        "city": "Bangkok",
        "price": 120,
        "rating": 4.5,
        "amenities": ["Wi-Fi", "Pool", "Gym"],
        "availability": {"check_in": "2025-01-15", "check_out": "2025-01-20"},
    },
    {
        "id": 2,
        "name": "Seaside View",
        "city": "Phuket",
        "price": 80,
        "rating": 4.2,
        "amenities": ["Wi-Fi", "Beach"],
        "availability": {"check_in": "2025-01-10", "check_out": "2025-01-25"},
    },
    {
        "id": 3,
        "name": "Mountain Stay",
        "city": "Chiang Mai",
        "price": 100,
        "rating": 4.8,
        "amenities": ["Wi-Fi", "Gym", "Spa"],
        "availability": {"check_in": "2025-01-05", "check_out": "2025-01-30"},
    },
    {
        "id": 4,
        "name": "Urban Loft",
        "city": "Bangkok",
        "price": 150,
        "rating": 4.6,
        "amenities": ["Wi-Fi", "Pool"],
        "availability": {"check_in": "2025-01-12", "check_out": "2025-01-18"},
    },
    {
        "id": 5,
        "name": "Tropical Resort",
        "city": "Phuket",
        "price": 200,
        "rating": 4.9,
        "amenities": ["Wi-Fi", "Pool", "Beach", "Spa"],
        "availability": {"check_in": "2025-01-08", "check_out": "2025-01-22"},
    },
]

ALL_AMENITIES: List[str] = sorted({a for h in HOTELS for a in h["amenities"]})
MIN_PRICE = min(h["price"] for h in HOTELS)
MAX_PRICE = max(h["price"] for h in HOTELS)

HOTEL_COLUMNS = ["name", "city", "price", "rating", "amenities", "check_in", "check_out"]


def _day(value: Optional[str]) -> pd.Timestamp:
    ts = pd.to_datetime(value, errors="coerce") if value else pd.NaT
    return ts if pd.isna(ts) else ts.normalize()


def hotels_frame(hotels: List[Dict[str, Any]]) -> pd.DataFrame:
    """Flatten hotel records into one row per hotel, index = position in ``hotels``."""
    rows = []
    for h in hotels:
        availability = h.get("availability") or {}
        rows.append(
            {
                "name": str(h.get("name", "")),
                "city": str(h.get("city", "")),
                "price": h.get("price"),
                "rating": h.get("rating"),
                "amenities": list(h.get("amenities") or []),
                "check_in": availability.get("check_in"),
                "check_out": availability.get("check_out"),
            }
        )
    df = pd.DataFrame(rows, index=range(len(rows)), columns=HOTEL_COLUMNS)
    for col in ["price", "rating"]:
        df[col] = pd.to_numeric(df[col], errors="coerce")
    for col in ["check_in", "check_out"]:
        df[col] = pd.to_datetime(df[col], errors="coerce").dt.normalize()
    return df


def _date_mask(df: pd.DataFrame, check_in: Optional[str], check_out: Optional[str]) -> pd.Series:
    if check_in and check_out:
        if not is_valid_date_range(check_in, check_out):
            return pd.Series(False, index=df.index)
        start, end = _day(check_in), _day(check_out)
        return (start < df["check_out"]) & (end > df["check_in"])
    if check_in:
        start = _day(check_in)
        return (start >= df["check_in"]) & (start < df["check_out"])
    if check_out:
        end = _day(check_out)
        return (end > df["check_in"]) & (end <= df["check_out"])
    return pd.Series(True, index=df.index)


def filter_hotels(hotels: List[Dict[str, Any]], filters: HotelFilters) -> List[Dict[str, Any]]:
    df = hotels_frame(hotels)
    if df.empty:
        return []

    mask = pd.Series(True, index=df.index)
    if filters.search:
        q = filters.search.lower()
        mask &= df["name"].str.lower().str.contains(q, regex=False) | df["city"].str.lower().str.contains(q, regex=False)

    lo, hi = filters.price_range
    mask &= df["price"].between(lo, hi)

    if filters.amenities:
        wanted = set(filters.amenities)
        mask &= df["amenities"].apply(lambda have: wanted.issubset(have))

    mask &= df["rating"] >= filters.min_rating
    mask &= _date_mask(df, filters.date_range.check_in, filters.date_range.check_out)

    kept = [hotels[i] for i in df.index[mask.fillna(False).astype(bool).to_numpy()]]
    logger.debug("filter_hotels kept %d of %d", len(kept), len(hotels))
    return kept


def _sort_column_key(col: pd.Series) -> pd.Series:
    if col.name == "name":
        return col.str.lower()
    return col


def sort_hotels(hotels: List[Dict[str, Any]], sort: SortSpec) -> List[Dict[str, Any]]:
    """Stable sort on the primary key; the secondary key only breaks ties."""
    df = hotels_frame(hotels)
    if df.empty:
        return []

    by = [sort.primary.field or "price"]
    ascending = [sort.primary.order == "asc"]
    if sort.secondary.field and sort.secondary.field not in by:
        by.append(sort.secondary.field)
        ascending.append(sort.secondary.order == "asc")

    ordered = df.sort_values(by=by, ascending=ascending, kind="stable", key=_sort_column_key)
    return [hotels[i] for i in ordered.index]


def apply_filters(hotels: List[Dict[str, Any]], filters: HotelFilters) -> List[Dict[str, Any]]:
    return sort_hotels(filter_hotels(hotels, filters), filters.sort)


@dataclass
class Page:
    items: List[Dict[str, Any]] = field(default_factory=list)
    page: int = 1
    total_pages: int = 0
    total: int = 0

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def paginate(hotels: List[Dict[str, Any]], page: int = 1, per_page: int = ITEMS_PER_PAGE) -> Page:
    per_page = max(1, int(per_page))
    total = len(hotels)
    total_pages = math.ceil(total / per_page)
    page = max(1, min(int(page), total_pages or 1))
    start = (page - 1) * per_page
    return Page(items=hotels[start : start + per_page], page=page, total_pages=total_pages, total=total)
