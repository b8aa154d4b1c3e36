from __future__ import annotations

from booking_core.filters import DEFAULT_FILTERS, DateRange, HotelFilters, SortKey, SortSpec
from booking_core.hotels import ALL_AMENITIES, HOTELS, MAX_PRICE, MIN_PRICE, apply_filters, filter_hotels, paginate, sort_hotels


def _names(hotels) -> list[str]:
    return [h["name"] for h in hotels]


def test_catalogue_constants() -> None:
    assert ALL_AMENITIES == ["Beach", "Gym", "Pool", "Spa", "Wi-Fi"]
    assert (MIN_PRICE, MAX_PRICE) == (80, 200)


def test_default_filters_keep_everything() -> None:
    assert len(filter_hotels(HOTELS, DEFAULT_FILTERS)) == 5


def test_search_is_case_insensitive_on_name_or_city() -> None:
    assert _names(filter_hotels(HOTELS, HotelFilters(search="BANGKOK"))) == ["Agoda Palace", "Urban Loft"]
    assert _names(filter_hotels(HOTELS, HotelFilters(search="stay"))) == ["Mountain Stay"]


def test_price_range_is_inclusive() -> None:
    assert _names(filter_hotels(HOTELS, HotelFilters(price_range=(90, 110)))) == ["Mountain Stay"]
    assert _names(filter_hotels(HOTELS, HotelFilters(price_range=(80, 100)))) == ["Seaside View", "Mountain Stay"]


def test_amenities_use_and_logic() -> None:
    assert _names(filter_hotels(HOTELS, HotelFilters(amenities=["Wi-Fi", "Gym"]))) == ["Agoda Palace", "Mountain Stay"]


def test_min_rating() -> None:
    assert _names(filter_hotels(HOTELS, HotelFilters(min_rating=4.8))) == ["Mountain Stay", "Tropical Resort"]


def test_date_overlap_with_both_bounds() -> None:
    f = HotelFilters(date_range=DateRange(check_in="2025-01-25", check_out="2025-01-28"))
    assert _names(filter_hotels(HOTELS, f)) == ["Mountain Stay"]


def test_invalid_date_range_matches_nothing() -> None:
    f = HotelFilters(date_range=DateRange(check_in="2025-01-20", check_out="2025-01-15"))
    assert filter_hotels(HOTELS, f) == []


def test_check_in_only() -> None:
    # must fall inside [hotel check-in, hotel check-out)
    f = HotelFilters(date_range=DateRange(check_in="2025-01-20"))
    assert _names(filter_hotels(HOTELS, f)) == ["Seaside View", "Mountain Stay", "Tropical Resort"]


def test_check_out_only() -> None:
    # must fall inside (hotel check-in, hotel check-out]
    f = HotelFilters(date_range=DateRange(check_out="2025-01-10"))
    assert _names(filter_hotels(HOTELS, f)) == ["Mountain Stay", "Tropical Resort"]


def test_sort_by_price_ascending() -> None:
    assert [h["price"] for h in sort_hotels(HOTELS, SortSpec())] == [80, 100, 120, 150, 200]


def test_sort_by_rating_descending() -> None:
    spec = SortSpec(primary=SortKey("rating", "desc"))
    assert [h["rating"] for h in sort_hotels(HOTELS, spec)] == [4.9, 4.8, 4.6, 4.5, 4.2]


def test_sort_by_name() -> None:
    spec = SortSpec(primary=SortKey("name", "asc"))
    assert _names(sort_hotels(HOTELS, spec))[:3] == ["Agoda Palace", "Mountain Stay", "Seaside View"]


def test_secondary_sort_breaks_ties() -> None:
    hotels = [
        {"name": "b", "city": "X", "price": 100, "rating": 4.0, "amenities": [], "availability": {}},
        {"name": "A", "city": "X", "price": 100, "rating": 4.5, "amenities": [], "availability": {}},
        {"name": "c", "city": "X", "price": 50, "rating": 3.0, "amenities": [], "availability": {}},
    ]
    by_name = SortSpec(primary=SortKey("price", "desc"), secondary=SortKey("name", "asc"))
    assert _names(sort_hotels(hotels, by_name)) == ["A", "b", "c"]
    by_rating = SortSpec(primary=SortKey("price", "desc"), secondary=SortKey("rating", "asc"))
    assert _names(sort_hotels(hotels, by_rating)) == ["b", "A", "c"]
    no_secondary = SortSpec(primary=SortKey("price", "desc"))
    assert _names(sort_hotels(hotels, no_secondary)) == ["b", "A", "c"]


def test_apply_filters_filters_then_sorts() -> None:
    f = HotelFilters(search="phuket", sort=SortSpec(primary=SortKey("price", "desc")))
    assert _names(apply_filters(HOTELS, f)) == ["Tropical Resort", "Seaside View"]


def test_paginate_clamps_page() -> None:
    items = list(range(23))
    page = paginate(items, 3, 10)
    assert page.items == [20, 21, 22]
    assert (page.page, page.total_pages, page.total) == (3, 3, 23)
    assert page.has_previous and not page.has_next
    assert paginate(items, 9, 10).page == 3
    assert paginate(items, 0, 10).page == 1


def test_paginate_empty() -> None:
    page = paginate([], 2)
    assert page.items == []
    assert (page.page, page.total_pages) == (1, 0)


def test_empty_hotel_list() -> None:
    assert filter_hotels([], DEFAULT_FILTERS) == []
    assert sort_hotels([], DEFAULT_FILTERS.sort) == []
