"""Pytest fixtures shared across the EV dashboard tests."""

from __future__ import annotations

import pandas as pd
import pytest

from ev_core.data import parse_csv


SAMPLE_CSV = """County,City,Model Year,Make,Model,Electric Vehicle Type,Electric Range,Base MSRP
King,Seattle,2020,TESLA,MODEL 3,Battery Electric Vehicle (BEV),266,0
King,"Bellevue, East",2023,TESLA,MODEL Y,Battery Electric Vehicle (BEV),0,52990
Snohomish,Everett,2019,NISSAN,LEAF,Battery Electric Vehicle (BEV),150,31620
Pierce,Tacoma,2018,CHEVROLET,VOLT,Plug-in Hybrid Electric Vehicle (PHEV),53,34000
King,Seattle,2008,Tesla,ROADSTER,Battery Electric Vehicle (BEV),220,110950
Kitsap,Bremerton,2022,FORD,ESCAPE,Plug-in Hybrid Electric Vehicle (PHEV),37,0
"""


@pytest.fixture
def sample_csv() -> str:
    """Return a small registrations CSV with one quoted comma."""

    return SAMPLE_CSV


@pytest.fixture
def sample_records(sample_csv: str) -> pd.DataFrame:
    """Return the sample CSV parsed into a record frame."""

    return parse_csv(sample_csv)
