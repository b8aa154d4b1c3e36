from __future__ import annotations

from booking_core.filters import (
    DEFAULT_FILTERS,
    DateRange,
    HotelFilters,
    SortKey,
    active_filter_count,
    clear_filters,
    decode_filters,
    encode_filters,
    filters_to_dict,
    is_valid_date_range,
    normalize_filters,
    toggle_amenity,
)


def test_defaults() -> None:
    f = normalize_filters({})
    assert f == DEFAULT_FILTERS
    assert f.price_range == (0, 1000)
    assert f.sort.primary == SortKey("price", "asc")
    assert f.sort.secondary.field is None
    assert active_filter_count(f) == 0


def test_normalize_accepts_camel_and_snake_case() -> None:
    camel = normalize_filters({"priceRange": [50, 150], "minRating": "4.5", "dateRange": {"checkIn": "2025-01-10"}})
    snake = normalize_filters({"price_range": [50, 150], "min_rating": 4.5, "date_range": {"check_in": "2025-01-10"}})
    assert camel == snake
    assert camel.price_range == (50.0, 150.0)
    assert camel.min_rating == 4.5
    assert camel.date_range == DateRange(check_in="2025-01-10", check_out=None)


def test_normalize_falls_back_on_bad_values() -> None:
    f = normalize_filters(
        {
            "priceRange": [1, 2, 3],
            "minRating": "lots",
            "amenities": "Pool",
            "sort": {"primary": {"field": "stars", "order": "sideways"}, "secondary": {"field": "name", "order": "desc"}},
        }
    )
    assert f.price_range == DEFAULT_FILTERS.price_range
    assert f.min_rating == 0
    assert f.amenities == []
    assert f.sort.primary == SortKey("price", "asc")
    assert f.sort.secondary == SortKey("name", "desc")


def test_active_filter_count_counts_each_kind_once() -> None:
    f = HotelFilters(
        search="bang",
        price_range=(0, 500),
        amenities=["Pool", "Gym"],
        min_rating=4,
        date_range=DateRange(check_out="2025-01-20"),
    )
    assert active_filter_count(f) == 5


def test_toggle_amenity_adds_then_removes() -> None:
    f = toggle_amenity(DEFAULT_FILTERS, "Pool")
    assert f.amenities == ["Pool"]
    f = toggle_amenity(f, "Spa")
    assert f.amenities == ["Pool", "Spa"]
    assert toggle_amenity(f, "Pool").amenities == ["Spa"]
    assert DEFAULT_FILTERS.amenities == []


def test_clear_filters_returns_defaults() -> None:
    assert clear_filters() == DEFAULT_FILTERS


def test_date_range_validation() -> None:
    assert is_valid_date_range(None, None)
    assert is_valid_date_range("2025-01-10", None)
    assert is_valid_date_range(None, "2025-01-10")
    assert is_valid_date_range("2025-01-10", "2025-01-11")
    assert not is_valid_date_range("2025-01-10", "2025-01-10")
    assert not is_valid_date_range("2025-01-12", "2025-01-10")
    assert not is_valid_date_range("soon", "2025-01-10")


def test_filter_codec_restores_state() -> None:
    f = HotelFilters(search="Phuket", amenities=["Beach"], min_rating=4.2)
    encoded = encode_filters(f)
    assert "{" not in encoded and " " not in encoded
    decoded = decode_filters(encoded)
    assert filters_to_dict(decoded) == filters_to_dict(f)


def test_decode_ignores_malformed_payloads() -> None:
    assert decode_filters("%7Bnot-json") == DEFAULT_FILTERS
    assert decode_filters("%5B1%2C2%5D") == DEFAULT_FILTERS
    assert decode_filters(None) == DEFAULT_FILTERS


def test_decode_merges_partial_state_over_defaults() -> None:
    f = decode_filters("%7B%22search%22%3A%22loft%22%7D")
    assert f.search == "loft"
    assert f.price_range == DEFAULT_FILTERS.price_range
    assert f.sort == DEFAULT_FILTERS.sort
