from __future__ import annotations

from typing import Any, Dict, List

BOOKINGS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "category": "Hotel",
        "location": {"city": "Bangkok", "country": "TH"},
        "price": 120,
        "nights": 2,
    },
    {
        "id": 2,
        "category": "Flight",
        "location": {"city": "Tokyo", "country": "JP"},
        "price": 450,
        "passengers": 1,
    },
    {
        "id": 3,
        "category": "Hotel",
        "location": {"city": "Bangkok", "country": "TH"},
        "price": 80,
        "nights": 3,
    },
    {
        "id": 4,
        "category": "Hotel",
        "location": {"city": "Dubai", "country": "AE"},
        "price": 200,
        "nights": 1,
    },
    {
        "id": 5,
        "category": "Flight",
        "location": {"city": "Bangkok", "country": "TH"},
        "price": 300,
        "passengers": 2,
    },
]
