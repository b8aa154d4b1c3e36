from __future__ import annotations

from typing import Any, Dict, List

import altair as alt
import pandas as pd

from booking_core.transform import ResultEntry

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def group_aggregate_chart(entries: List[ResultEntry], field: str) -> alt.Chart:
    rows = [
        {"group_field": e.group_field, "group": e.group_key, "value": e.aggregates[field], "members": e.count}
        for e in entries
        if field in e.aggregates
    ]
    df = pd.DataFrame(rows, columns=["group_field", "group", "value", "members"])
    return (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X("group:N", title="Group", sort=None),
            y=alt.Y("value:Q", title=field.title()),
            color=alt.Color("group_field:N", title="Grouped by"),
            tooltip=["group_field", "group", alt.Tooltip("value:Q", format=",.2f"), alt.Tooltip("members:Q", title="Count")],
        )
    )
