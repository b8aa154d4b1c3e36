import logging
import math
from contextlib import contextmanager

import altair as alt
import pandas as pd
import streamlit as st

from booking_core.bookings import BOOKINGS
from booking_core.charts import group_aggregate_chart
from booking_core.export import export_filename, hotels_to_csv
from booking_core.filters import (
    DEFAULT_FILTERS,
    URL_PARAMS_KEY,
    DateRange,
    HotelFilters,
    SortKey,
    SortSpec,
    active_filter_count,
    decode_filters,
    encode_filters,
    is_valid_date_range,
)
from booking_core.hotels import ALL_AMENITIES, HOTELS, ITEMS_PER_PAGE, apply_filters, paginate
from booking_core.transform import AGGREGABLE_FIELDS, AGGREGATION_KINDS, SORT_FIELDS, SortBy, TransformOptions, transform_data

logging.basicConfig(level=logging.INFO)
alt.data_transformers.disable_max_rows()


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;margin-bottom: 8px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_sort_label(key: SortKey) -> str:
    return f"{key.field} ({key.order})" if key.field else "none"


def hotels_table(hotels) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "Name": h["name"],
                "City": h["city"],
                "Price": h["price"],
                "Rating": h["rating"],
                "Amenities": ", ".join(h["amenities"]),
                "Availability": f"{h['availability']['check_in']} - {h['availability']['check_out']}",
            }
            for h in hotels
        ]
    )


def render_hotels_page(initial: HotelFilters):
    with st.sidebar:
        st.markdown("### Filters")
        search = st.text_input("Search by name or city", initial.search)
        lo, hi = st.slider(
            "Price range",
            min_value=0,
            max_value=1000,
            value=(max(0, min(1000, int(initial.price_range[0]))), max(0, min(1000, int(initial.price_range[1])))),
            step=10,
        )
        amenities = st.multiselect("Amenities (all required)", ALL_AMENITIES, default=[a for a in initial.amenities if a in ALL_AMENITIES])
        min_rating = st.number_input("Minimum rating", min_value=0.0, max_value=5.0, value=float(initial.min_rating), step=0.1)
        check_in = st.text_input("Check-in (YYYY-MM-DD)", initial.date_range.check_in or "")
        check_out = st.text_input("Check-out (YYYY-MM-DD)", initial.date_range.check_out or "")

        st.markdown("---")
        st.markdown("### Sort")
        fields = ["price", "rating", "name"]
        primary_field = st.selectbox("Primary field", fields, index=fields.index(initial.sort.primary.field or "price"))
        primary_order = st.radio("Primary order", ["asc", "desc"], horizontal=True, index=0 if initial.sort.primary.order == "asc" else 1)
        secondary_options = ["none"] + fields
        secondary_field = st.selectbox("Secondary field", secondary_options, index=secondary_options.index(initial.sort.secondary.field or "none"))
        secondary_order = st.radio("Secondary order", ["asc", "desc"], horizontal=True)
        if st.button("Clear all filters"):
            st.query_params.clear()
            st.rerun()

    filters = HotelFilters(
        search=search,
        price_range=(lo, hi),
        amenities=amenities,
        min_rating=min_rating,
        date_range=DateRange(check_in=check_in or None, check_out=check_out or None),
        sort=SortSpec(
            primary=SortKey(primary_field, primary_order),
            secondary=SortKey(None if secondary_field == "none" else secondary_field, secondary_order),
        ),
    )
    st.query_params[URL_PARAMS_KEY] = encode_filters(filters)

    matched = apply_filters(HOTELS, filters)
    count = active_filter_count(filters)
    c1, c2 = st.columns([6, 2])
    with c1:
        st.markdown(f"<span class='chip'>{count} filter{'s' if count != 1 else ''}</span> "
                    f"<span class='chip'>Sort: {format_sort_label(filters.sort.primary)}</span>", unsafe_allow_html=True)
    with c2:
        st.download_button("Export CSV", data=hotels_to_csv(matched).encode("utf-8"), file_name=export_filename(), mime="text/csv")

    if not is_valid_date_range(filters.date_range.check_in, filters.date_range.check_out):
        st.warning("Check-out must be after check-in.")

    total_pages = max(1, math.ceil(len(matched) / ITEMS_PER_PAGE))
    page_no = st.number_input("Page", min_value=1, max_value=total_pages, value=1, step=1)
    page = paginate(matched, int(page_no))
    with card(f"Hotels ({page.total} found)"):
        if page.items:
            st.dataframe(hotels_table(page.items), hide_index=True, use_container_width=True)
        else:
            st.info("No hotels match the current filters.")
        st.caption(f"Page {page.page} of {max(page.total_pages, 1)}")


def render_groups_page():
    with st.sidebar:
        st.markdown("### Grouping")
        group_by = st.multiselect("Group by", ["category", "location.city", "location.country"], default=["category"])
        aggregations = {}
        for name in AGGREGABLE_FIELDS:
            kind = st.selectbox(f"{name} aggregation", ["(none)", *AGGREGATION_KINDS], key=f"agg_{name}")
            if kind != "(none)":
                aggregations[name] = kind
        sort_field = st.selectbox("Sort items by", list(SORT_FIELDS))
        sort_order = st.radio("Order", ["asc", "desc"], horizontal=True)

    options = TransformOptions(group_by=group_by, aggregations=aggregations, sort_by=SortBy(sort_field, sort_order))
    entries = transform_data(BOOKINGS, options)
    if not entries:
        st.info("Pick at least one field to group by.")
        return

    for name in aggregations:
        chartable = [e for e in entries if name in e.aggregates and math.isfinite(e.aggregates[name])]
        if chartable:
            with card(f"{name.title()} ({aggregations[name]}) by group"):
                st.altair_chart(group_aggregate_chart(chartable, name), use_container_width=True)

    for entry in entries:
        with card(f"{entry.group_field} = {entry.group_key} ({entry.count})"):
            st.json(entry.aggregates)
            st.dataframe(pd.json_normalize(entry.items), hide_index=True, use_container_width=True)


# ---------- UI setup ----------
st.set_page_config(page_title="Booking Insights", layout="wide")
inject_base_styles()
st.title("Booking Insights")
st.caption("Hotel search and booking group summaries.")

with st.sidebar:
    st.markdown("### Navigate")
    nav_choice = st.radio("Navigate", ["Hotels", "Booking groups"], index=0)
    st.markdown("---")

if nav_choice == "Hotels":
    initial = decode_filters(st.query_params.get(URL_PARAMS_KEY)) if URL_PARAMS_KEY in st.query_params else DEFAULT_FILTERS
    render_hotels_page(initial)
else:
    render_groups_page()
