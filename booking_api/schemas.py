from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

SortOrder = Literal["asc", "desc"]


class SortByModel(BaseModel):
    field: str = "price"
    order: SortOrder = "asc"


class TransformRequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    records: Optional[List[Dict[str, Any]]] = None
    group_by: Union[str, List[str]] = Field(default="category", alias="groupBy")
    aggregations: Dict[str, str] = Field(default_factory=dict)
    sort_by: SortByModel = Field(default_factory=SortByModel, alias="sortBy")


class DateRangeModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    check_in: Optional[str] = Field(default=None, alias="checkIn")
    check_out: Optional[str] = Field(default=None, alias="checkOut")


class SortKeyModel(BaseModel):
    field: Optional[Literal["price", "rating", "name"]] = "price"
    order: SortOrder = "asc"


class SortSpecModel(BaseModel):
    primary: SortKeyModel = Field(default_factory=SortKeyModel)
    secondary: SortKeyModel = Field(default_factory=lambda: SortKeyModel(field=None))


class HotelFiltersModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    search: str = ""
    price_range: List[float] = Field(default_factory=lambda: [0, 1000], alias="priceRange", min_length=2, max_length=2)
    amenities: List[str] = Field(default_factory=list)
    min_rating: float = Field(default=0, alias="minRating", ge=0, le=5)
    date_range: DateRangeModel = Field(default_factory=DateRangeModel, alias="dateRange")
    sort: SortSpecModel = Field(default_factory=SortSpecModel)


class EncodedFiltersResponse(BaseModel):
    key: str
    value: str
    query: str
