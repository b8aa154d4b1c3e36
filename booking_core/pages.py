from __future__ import annotations

import math
from dataclasses import asdict
from typing import Any, Dict, List, Mapping, Optional

from booking_core.bookings import BOOKINGS
from booking_core.charts import group_aggregate_chart, to_vega_spec
from booking_core.filters import HotelFilters, active_filter_count, filters_to_dict, is_valid_date_range
from booking_core.hotels import HOTELS, ITEMS_PER_PAGE, apply_filters, paginate
from booking_core.transform import AGGREGABLE_FIELDS, TransformOptions, transform_data


def compute_groups(
    records: Optional[List[Dict[str, Any]]],
    options: TransformOptions,
) -> Dict[str, Any]:
    entries = transform_data(BOOKINGS if records is None else records, options)

    charts: Dict[str, Any] = {}
    for name in AGGREGABLE_FIELDS:
        if not any(name in e.aggregates for e in entries):
            continue
        # vega specs cannot carry inf
        finite = [e for e in entries if name in e.aggregates and math.isfinite(e.aggregates[name])]
        if finite:
            charts[f"{name}_by_group"] = to_vega_spec(group_aggregate_chart(finite, name))

    return {
        "options": {
            "group_by": options.group_paths,
            "aggregations": dict(options.aggregations),
            "sort_by": asdict(options.sort_by),
        },
        "groups": [e.to_dict() for e in entries],
        "charts": charts,
    }


def compute_hotel_listing(
    filters: HotelFilters,
    *,
    page: int = 1,
    per_page: int = ITEMS_PER_PAGE,
    hotels: Optional[List[Mapping[str, Any]]] = None,
) -> Dict[str, Any]:
    per_page = max(1, int(per_page))
    matched = apply_filters(HOTELS if hotels is None else list(hotels), filters)
    p = paginate(matched, page, per_page)
    return {
        "filters": filters_to_dict(filters),
        "active_filter_count": active_filter_count(filters),
        "invalid_date_range": not is_valid_date_range(filters.date_range.check_in, filters.date_range.check_out),
        "hotels": p.items,
        "pagination": {
            "page": p.page,
            "per_page": per_page,
            "total_pages": p.total_pages,
            "total": p.total,
            "has_previous": p.has_previous,
            "has_next": p.has_next,
        },
    }
