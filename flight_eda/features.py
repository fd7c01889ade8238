import math
import logging

import pandas as pd

log = logging.getLogger(__name__)

DELAY_THRESHOLD_MINS = 15
ROUTE_SEPARATOR = ' -> '


def get_hour(hhmm) -> int:
    """
    Extracts the hour (0-23) from an HHMM encoded time such as 1230 or '0815'.
    Missing or unparseable values map to hour 0.
    """
    if hhmm is None or (not isinstance(hhmm, str) and pd.isna(hhmm)):
        return 0

    if isinstance(hhmm, str):
        try:
            hhmm = int(hhmm.strip())
        except ValueError:
            return 0

    try:
        return int(math.floor(hhmm / 100)) % 24
    except (TypeError, ValueError, OverflowError):
        return 0


def assign_time_of_day(hour) -> str:
    if 6 <= hour < 11:
        return "Morning"
    elif 11 <= hour < 16:
        return "Afternoon"
    elif 16 <= hour < 21:
        return "Evening"
    return "Night/Red-eye"


def hours_from_crs(crs_dep_time: pd.Series) -> pd.Series:
    """Vectorized `get_hour` over a scheduled departure column, missing treated as 0."""
    return crs_dep_time.map(get_hour).astype(int)


def ensure_date_column(df: pd.DataFrame) -> pd.DataFrame:
    """
    Converts `fl_date` from yyyy-mm-dd text to datetime64. A no-op when the
    column is absent or already converted.
    """
    if 'fl_date' in df.columns and not pd.api.types.is_datetime64_any_dtype(df['fl_date']):
        df = df.copy()
        df['fl_date'] = pd.to_datetime(df['fl_date'], format='%Y-%m-%d')
    return df


def ensure_hour_features(df: pd.DataFrame, logger: logging.Logger = None) -> pd.DataFrame:
    """
    Makes sure `hour_of_day` and `time_of_day` exist and carry signal.

    `hour_of_day` is recomputed from `crs_dep_time` when it is absent or
    constant, but only if `crs_dep_time` itself varies. A constant hour with a
    constant source is left as is.
    """
    logger = logger or log
    df = df.copy()

    hour_missing = 'hour_of_day' not in df.columns
    hour_constant = False
    if not hour_missing:
        hour_constant = df['hour_of_day'].nunique() <= 1

    needs_recompute = hour_missing or hour_constant
    if needs_recompute and 'crs_dep_time' in df.columns:
        needs_recompute = df['crs_dep_time'].nunique() > 1

    if needs_recompute:
        if 'crs_dep_time' in df.columns:
            logger.debug("Recomputing hour_of_day from crs_dep_time")
            df['hour_of_day'] = hours_from_crs(df['crs_dep_time'])
        else:
            logger.debug("No crs_dep_time column; filling hour_of_day with 0")
            df['hour_of_day'] = 0

    if 'hour_of_day' in df.columns and 'time_of_day' not in df.columns:
        df['time_of_day'] = df['hour_of_day'].map(assign_time_of_day)

    return df


def enrich_features(df: pd.DataFrame, logger: logging.Logger = None) -> pd.DataFrame:
    """
    Adds the derived analysis columns that can be computed from what is present:

    - hour_of_day / time_of_day (see `ensure_hour_features`)
    - is_delayed: arrival delay of at least 15 minutes, missing counts as on time
    - route: "ORIGIN -> DEST"

    Existing derived columns are never overwritten, so calling this twice
    gives the same table.

    Args:
        df: A raw, cleaned or partially enriched flight table.

    Returns:
        A new DataFrame; the input is left untouched.
    """
    df = ensure_hour_features(df, logger=logger)

    if 'arr_delay' in df.columns and 'is_delayed' not in df.columns:
        arr_delay = pd.to_numeric(df['arr_delay'], errors='coerce')
        df['is_delayed'] = arr_delay.ge(DELAY_THRESHOLD_MINS).fillna(False).astype(bool)

    if 'origin' in df.columns and 'dest' in df.columns and 'route' not in df.columns:
        df['route'] = df['origin'].astype(str) + ROUTE_SEPARATOR + df['dest'].astype(str)

    return df
