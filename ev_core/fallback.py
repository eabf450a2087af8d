"""Built-in sample used when no CSV source can be loaded.

The summaries describe a 1,000-vehicle sample of the Washington State
registrations file; the raw records are a handful of rows from it, enough for
the filters to have something to work with.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List

import pandas as pd

from ev_core.data import BEV_LABEL, PHEV_LABEL, records_to_frame


FALLBACK_RECORDS: List[Dict[str, object]] = [
    {"Make": "TESLA", "Model": "MODEL Y", "Model Year": 2024, "County": "King", "City": "Seattle",
     "Electric Vehicle Type": BEV_LABEL, "Electric Range": 326, "Base MSRP": 52990},
    {"Make": "TESLA", "Model": "MODEL 3", "Model Year": 2023, "County": "King", "City": "Bellevue",
     "Electric Vehicle Type": BEV_LABEL, "Electric Range": 358, "Base MSRP": 40740},
    {"Make": "NISSAN", "Model": "LEAF", "Model Year": 2022, "County": "Snohomish", "City": "Everett",
     "Electric Vehicle Type": BEV_LABEL, "Electric Range": 226, "Base MSRP": 31620},
    {"Make": "CHEVROLET", "Model": "BOLT EV", "Model Year": 2023, "County": "Pierce", "City": "Tacoma",
     "Electric Vehicle Type": BEV_LABEL, "Electric Range": 259, "Base MSRP": 31000},
]

FALLBACK_SUMMARY: Dict[str, Any] = {
    "yearly_trends": {
        "years": [2011, 2012, 2013, 2014, 2015, 2016, 2017, 2018, 2019, 2020, 2021, 2022, 2023, 2024],
        "counts": [7, 12, 29, 17, 36, 43, 52, 59, 82, 99, 98, 159, 178, 129],
    },
    "manufacturers": {
        "manufacturers": ["TESLA", "NISSAN", "CHEVROLET", "BMW", "FORD", "AUDI", "KIA", "HYUNDAI", "MERCEDES-BENZ", "VOLKSWAGEN"],
        "counts": [377, 164, 96, 80, 53, 50, 50, 49, 42, 39],
        "avg_prices": [80828, 44739, 45830, 71145, 44082, 74754, 43076, 45180, 76440, 48256],
    },
    "counties": {
        "counties": ["King", "Snohomish", "Pierce", "Island", "Clark", "Thurston", "Spokane", "Skagit", "Whatcom", "Kitsap"],
        "counts": [464, 114, 104, 104, 52, 46, 43, 31, 21, 21],
    },
    "ev_types": {
        "types": [BEV_LABEL, PHEV_LABEL],
        "counts": [820, 180],
    },
    "top_models": [
        {"make": "NISSAN", "model": "LEAF", "count": 164},
        {"make": "TESLA", "model": "MODEL X", "count": 99},
        {"make": "TESLA", "model": "MODEL S", "count": 95},
        {"make": "TESLA", "model": "MODEL Y", "count": 92},
        {"make": "TESLA", "model": "MODEL 3", "count": 91},
    ],
    "kpis": {"total_evs": 1000, "avg_range": 240.4, "avg_price": 63435, "bev_percentage": 82},
}


def fallback_records() -> pd.DataFrame:
    return records_to_frame(FALLBACK_RECORDS)


def fallback_summary() -> Dict[str, Any]:
    return copy.deepcopy(FALLBACK_SUMMARY)
