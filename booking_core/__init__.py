"""Core (UI-agnostic) booking logic.

This package contains:
- group / aggregate / sort over booking records
- hotel filter normalization and the URL filter codec
- hotel listing filter, sort and pagination (pandas)
- CSV export
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
