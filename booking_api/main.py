from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np
import pandas as pd
from fastapi import FastAPI, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from booking_api.schemas import EncodedFiltersResponse, HotelFiltersModel, TransformRequestModel
from booking_core.bookings import BOOKINGS
from booking_core.export import export_filename, hotels_to_csv
from booking_core.filters import (
    URL_PARAMS_KEY,
    HotelFilters,
    decode_filters,
    encode_filters,
    filters_to_dict,
    normalize_filters,
)
from booking_core.hotels import ALL_AMENITIES, HOTELS, ITEMS_PER_PAGE, MAX_PRICE, MIN_PRICE, apply_filters
from booking_core.pages import compute_groups, compute_hotel_listing
from booking_core.transform import TransformOptions

ALLOWED_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]

app = FastAPI(title="Booking Insights API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _filters_from_model(model: HotelFiltersModel) -> HotelFilters:
    raw = model.model_dump(by_alias=True)
    return normalize_filters(raw)


def _options_from_model(model: TransformRequestModel) -> TransformOptions:
    return TransformOptions.from_dict(model.model_dump(by_alias=True, exclude={"records"}))


def _error(name: str, exc: Exception) -> JSONResponse:
    logger.exception("%s failed", name)
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects; nan and inf become null."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        )
    )


@app.get("/meta/bookings")
def meta_bookings():
    try:
        return _json({"bookings": BOOKINGS})
    except Exception as exc:
        return _error("meta_bookings", exc)


@app.get("/meta/amenities")
def meta_amenities():
    try:
        return _json({"amenities": ALL_AMENITIES, "min_price": MIN_PRICE, "max_price": MAX_PRICE})
    except Exception as exc:
        return _error("meta_amenities", exc)


@app.post("/transform")
def transform(request: TransformRequestModel):
    try:
        options = _options_from_model(request)
        return _json(compute_groups(request.records, options))
    except Exception as exc:
        return _error("transform", exc)


@app.post("/hotels")
def hotels(
    filters: HotelFiltersModel,
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=ITEMS_PER_PAGE, ge=1, le=100),
):
    try:
        f = _filters_from_model(filters)
        return _json(compute_hotel_listing(f, page=page, per_page=per_page))
    except Exception as exc:
        return _error("hotels", exc)


@app.post("/export/hotels")
def export_hotels(filters: HotelFiltersModel):
    try:
        f = _filters_from_model(filters)
        csv_text = hotels_to_csv(apply_filters(HOTELS, f))
        filename = export_filename()
    except Exception as exc:
        return _error("export_hotels", exc)
    return Response(
        content=csv_text.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@app.post("/filters/encode", response_model=EncodedFiltersResponse)
def filters_encode(filters: HotelFiltersModel):
    try:
        value = encode_filters(_filters_from_model(filters))
    except Exception as exc:
        return _error("filters_encode", exc)
    return EncodedFiltersResponse(key=URL_PARAMS_KEY, value=value, query=f"{URL_PARAMS_KEY}={value}")


@app.get("/filters/decode")
def filters_decode(value: Optional[str] = Query(default=None, alias=URL_PARAMS_KEY)):
    try:
        return _json({"filters": filters_to_dict(decode_filters(value))})
    except Exception as exc:
        return _error("filters_decode", exc)
