from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Iterable, List, Optional, Tuple
from urllib.parse import quote, unquote

logger = logging.getLogger(__name__)

SORT_FIELDS = ("price", "rating", "name")
SORT_ORDERS = ("asc", "desc")
URL_PARAMS_KEY = "filters"
DEFAULT_PRICE_RANGE: Tuple[float, float] = (0, 1000)


@dataclass(frozen=True)
class DateRange:
    check_in: Optional[str] = None
    check_out: Optional[str] = None


@dataclass(frozen=True)
class SortKey:
    field: Optional[str] = "price"
    order: str = "asc"


@dataclass(frozen=True)
class SortSpec:
    primary: SortKey = field(default_factory=SortKey)
    secondary: SortKey = field(default_factory=lambda: SortKey(field=None))


@dataclass(frozen=True)
class HotelFilters:
    search: str = ""
    price_range: Tuple[float, float] = DEFAULT_PRICE_RANGE
    amenities: List[str] = field(default_factory=list)
    min_rating: float = 0
    date_range: DateRange = field(default_factory=DateRange)
    sort: SortSpec = field(default_factory=SortSpec)


DEFAULT_FILTERS = HotelFilters()


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def is_valid_date_range(check_in: Optional[str], check_out: Optional[str]) -> bool:
    """A range is valid when a bound is missing or check-out falls after check-in."""
    start, end = _parse_date(check_in), _parse_date(check_out)
    if not check_in or not check_out:
        return True
    if start is None or end is None:
        return False
    return end > start


def _as_float(value: Any, fallback: float) -> float:
    try:
        return float(value)
    except Exception:
        return fallback


def _as_str_list(values: Optional[Iterable[object]]) -> List[str]:
    if not values or isinstance(values, str):
        return []
    return [str(x) for x in values if x is not None]


def _pick(raw: dict, *keys: str) -> Any:
    for key in keys:
        if key in raw:
            return raw[key]
    return None


def _sort_key(raw: Any, default: SortKey) -> SortKey:
    if not isinstance(raw, dict):
        return default
    f = raw.get("field", default.field)
    if f not in SORT_FIELDS:
        f = default.field
    order = raw.get("order", default.order)
    if order not in SORT_ORDERS:
        order = default.order
    return SortKey(field=f, order=order)


def normalize_filters(raw: Optional[dict]) -> HotelFilters:
    """Shallow-merge raw filter values over the defaults.

    Accepts both camelCase (as stored in the URL) and snake_case keys. Values
    that cannot be coerced fall back to the default for that filter.
    """
    raw = raw or {}
    d = DEFAULT_FILTERS

    search = _pick(raw, "search")
    search = str(search) if search is not None else d.search

    price_range = d.price_range
    pr = _pick(raw, "priceRange", "price_range")
    if isinstance(pr, (list, tuple)) and len(pr) == 2:
        price_range = (_as_float(pr[0], d.price_range[0]), _as_float(pr[1], d.price_range[1]))

    amenities = _pick(raw, "amenities")
    amenities = _as_str_list(amenities) if amenities is not None else list(d.amenities)

    min_rating = _pick(raw, "minRating", "min_rating")
    min_rating = _as_float(min_rating, d.min_rating) if min_rating is not None else d.min_rating

    date_range = d.date_range
    dr = _pick(raw, "dateRange", "date_range")
    if isinstance(dr, dict):
        date_range = DateRange(
            check_in=_pick(dr, "checkIn", "check_in") or None,
            check_out=_pick(dr, "checkOut", "check_out") or None,
        )

    sort = d.sort
    s = _pick(raw, "sort")
    if isinstance(s, dict):
        sort = SortSpec(
            primary=_sort_key(s.get("primary"), d.sort.primary),
            secondary=_sort_key(s.get("secondary"), d.sort.secondary),
        )
        if sort.primary.field is None:
            sort = replace(sort, primary=d.sort.primary)

    return HotelFilters(
        search=search,
        price_range=price_range,
        amenities=amenities,
        min_rating=min_rating,
        date_range=date_range,
        sort=sort,
    )


def active_filter_count(filters: HotelFilters) -> int:
    count = 0
    if filters.search:
        count += 1
    if tuple(filters.price_range) != tuple(DEFAULT_FILTERS.price_range):
        count += 1
    if filters.amenities:
        count += 1
    if filters.min_rating > 0:
        count += 1
    if filters.date_range.check_in or filters.date_range.check_out:
        count += 1
    return count


def toggle_amenity(filters: HotelFilters, amenity: str) -> HotelFilters:
    if amenity in filters.amenities:
        amenities = [a for a in filters.amenities if a != amenity]
    else:
        amenities = [*filters.amenities, amenity]
    return replace(filters, amenities=amenities)


def clear_filters() -> HotelFilters:
    return DEFAULT_FILTERS


def filters_to_dict(filters: HotelFilters) -> dict:
    """camelCase dict, the shape carried in the URL."""
    return {
        "search": filters.search,
        "priceRange": list(filters.price_range),
        "amenities": list(filters.amenities),
        "minRating": filters.min_rating,
        "dateRange": {"checkIn": filters.date_range.check_in, "checkOut": filters.date_range.check_out},
        "sort": {
            "primary": {"field": filters.sort.primary.field, "order": filters.sort.primary.order},
            "secondary": {"field": filters.sort.secondary.field, "order": filters.sort.secondary.order},
        },
    }


def encode_filters(filters: HotelFilters) -> str:
    return quote(json.dumps(filters_to_dict(filters), separators=(",", ":")), safe="")


def decode_filters(value: Optional[str]) -> HotelFilters:
    if not value:
        return DEFAULT_FILTERS
    try:
        parsed = json.loads(unquote(value))
    except ValueError:
        logger.warning("ignoring malformed %s query parameter", URL_PARAMS_KEY)
        return DEFAULT_FILTERS
    if not isinstance(parsed, dict):
        return DEFAULT_FILTERS
    return normalize_filters(parsed)
