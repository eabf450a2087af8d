from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel


class DashboardFiltersModel(BaseModel):
    manufacturer: str = "all"
    ev_type: str = "all"
    county: str = "all"
    price_range: str = "all"


class OptionsResponse(BaseModel):
    options: Dict[str, List[str]]
    source: Optional[str] = None
    record_count: int
    used_fallback: bool
