# flight_eda/schema.py

from dataclasses import dataclass, fields
from datetime import date
from typing import Iterable, Optional

import pandas as pd


@dataclass
class FlightRecord:
    fl_date: date
    arr_delay: Optional[float]
    dep_delay: Optional[float]
    distance: Optional[float]
    crs_dep_time: Optional[int]
    op_unique_carrier: str
    origin: str
    dest: str
    cancelled: Optional[int]
    cancellation_code: Optional[str]
    carrier_delay: Optional[float]
    weather_delay: Optional[float]
    nas_delay: Optional[float]
    security_delay: Optional[float]
    late_aircraft_delay: Optional[float]


REQUIRED_COLUMNS = [f.name for f in fields(FlightRecord)]

DELAY_CAUSE_COLUMNS = [
    'carrier_delay', 'weather_delay', 'nas_delay', 'security_delay', 'late_aircraft_delay',
]

DERIVED_COLUMNS = ['hour_of_day', 'time_of_day', 'is_delayed', 'route']

NOT_CANCELLED = 'Not_Cancelled'


class SchemaError(ValueError):
    """Raised when a table lacks one or more required columns."""

    def __init__(self, missing_columns: Iterable[str]):
        self.missing_columns = list(missing_columns)
        super().__init__(f"Missing required columns: {self.missing_columns}")


def validate_schema(df: pd.DataFrame, required: Iterable[str] = REQUIRED_COLUMNS) -> None:
    """
    Checks that every required column is present. Extra columns and row
    count are irrelevant.
    """
    present = set(df.columns)
    missing = [col for col in required if col not in present]
    if missing:
        raise SchemaError(missing)
