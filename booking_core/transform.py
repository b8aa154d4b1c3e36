"""Group, aggregate and sort in-memory booking records."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

logger = logging.getLogger(__name__)

AGGREGATION_KINDS = ("sum", "avg", "min", "max", "count")
AGGREGABLE_FIELDS = ("price", "nights", "passengers")
SORT_FIELDS = ("price", "nights", "passengers")


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def resolve_path(record: Any, path: str) -> Any:
    """Walk a dotted path through nested mappings; MISSING if any segment is absent."""
    if isinstance(record, Mapping) and path in record:
        return record[path]
    current = record
    for segment in path.split("."):
        if not isinstance(current, Mapping) or segment not in current:
            return MISSING
        current = current[segment]
    return current


def get_field(record: Any, path: str, default: Any = None) -> Any:
    value = resolve_path(record, path)
    if value is MISSING:
        return default
    return value


def aggregate_values(values: Sequence[Any], kind: str) -> float:
    """Reduce already non-zero values. Empty avg is nan, empty min/max are +/-inf."""
    if kind == "sum":
        return sum(values, 0)
    if kind == "avg":
        if not values:
            return math.nan
        return sum(values, 0) / len(values)
    if kind == "min":
        return min(values, default=math.inf)
    if kind == "max":
        return max(values, default=-math.inf)
    if kind == "count":
        return len(values)
    return 0


def aggregate_field(items: Iterable[Any], path: str, kind: str) -> float:
    values = []
    for item in items:
        value = get_field(item, path, 0)
        if value is None:
            value = 0
        # zero and missing are the same thing here; False is kept
        if value is False or value != 0:
            values.append(value)
    return aggregate_values(values, kind)


def group_key(value: Any) -> str:
    if value is MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
    if isinstance(value, Mapping):
        return "[object Object]"
    if isinstance(value, (list, tuple)):
        # None entries render empty when joined
        return ",".join("" if v is None else group_key(v) for v in value)
    return str(value)


def partition(records: Iterable[Any], path: str) -> Dict[str, List[Any]]:
    buckets: Dict[str, List[Any]] = {}
    for record in records:
        buckets.setdefault(group_key(resolve_path(record, path)), []).append(record)
    return buckets


def _sort_number(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return float(value or 0)
    try:
        out = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(out):
        return 0.0
    return out


@dataclass(frozen=True)
class SortBy:
    field: str = "price"
    order: str = "asc"

    @property
    def ascending(self) -> bool:
        return self.order == "asc"


def sort_items(items: Iterable[Any], sort_by: SortBy) -> List[Any]:
    return sorted(
        items,
        key=lambda item: _sort_number(get_field(item, sort_by.field, 0)),
        reverse=not sort_by.ascending,
    )


@dataclass(frozen=True)
class TransformOptions:
    group_by: Union[str, List[str]] = "category"
    aggregations: Dict[str, str] = field(default_factory=dict)
    sort_by: SortBy = field(default_factory=SortBy)

    @property
    def group_paths(self) -> List[str]:
        if isinstance(self.group_by, str):
            return [self.group_by]
        return list(self.group_by)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "TransformOptions":
        group_by = raw.get("groupBy", raw.get("group_by"))
        if group_by is None:
            group_by = []
        elif not isinstance(group_by, str):
            group_by = [str(p) for p in group_by]
        aggregations = {str(k): str(v) for k, v in (raw.get("aggregations") or {}).items() if v}
        s = raw.get("sortBy", raw.get("sort_by")) or {}
        sort_by = SortBy(field=str(s.get("field", "price")), order=str(s.get("order", "asc")))
        return cls(group_by=group_by, aggregations=aggregations, sort_by=sort_by)


@dataclass
class ResultEntry:
    group_field: str
    group_key: str
    aggregates: Dict[str, float]
    items: List[Any]
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            self.group_field: self.group_key,
            "aggregates": dict(self.aggregates),
            "items": list(self.items),
            "count": self.count,
        }


def _include_aggregate(value: float) -> bool:
    return bool(value) and not math.isnan(value)


def compute_aggregates(items: Sequence[Any], aggregations: Mapping[str, str]) -> Dict[str, float]:
    out: Dict[str, float] = {}
    for name in AGGREGABLE_FIELDS:
        kind = aggregations.get(name)
        if not kind:
            continue
        value = aggregate_field(items, name, kind)
        if _include_aggregate(value):
            out[name] = value
    return out


def transform_data(
    records: Iterable[Any],
    options: Union[TransformOptions, Mapping[str, Any]],
) -> List[ResultEntry]:
    """Group records by each path independently, aggregate each bucket and sort its members.

    Entries for the first group-by path come first, each path's buckets in the
    order their key was first seen. Within a bucket, records are ordered by
    ``options.sort_by`` with ties kept in input order.
    """
    if not isinstance(options, TransformOptions):
        options = TransformOptions.from_dict(options)
    records = list(records)

    results: List[ResultEntry] = []
    for path in options.group_paths:
        buckets = partition(records, path)
        logger.debug("grouped %d records by %r into %d buckets", len(records), path, len(buckets))
        for key, members in buckets.items():
            items = sort_items(members, options.sort_by)
            results.append(
                ResultEntry(
                    group_field=path,
                    group_key=key,
                    aggregates=compute_aggregates(members, options.aggregations),
                    items=items,
                    count=len(items),
                )
            )
    return results


def transform_records(records: Iterable[Any], options: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    """Dict-shaped variant of ``transform_data`` for JSON payloads."""
    return [entry.to_dict() for entry in transform_data(records, options or {})]
