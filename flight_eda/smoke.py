import os
import logging

import pandas as pd

from .config import Config
from .features import ensure_date_column, enrich_features
from .load import read_table

log = logging.getLogger(__name__)

SMOKE_REQUIRED_COLUMNS = ['arr_delay', 'dep_delay', 'distance', 'hour_of_day', 'is_delayed', 'route']


class SmokeAssertionFailure(AssertionError):
    """A post-load invariant did not hold."""


def run_smoke(config: Config, logger: logging.Logger = None) -> pd.DataFrame:
    """
    Quick correctness gate: loads the sample file (or the cleaned file when
    there is no sample), derives the date and features, and checks the
    columns and date type downstream code relies on.
    """
    logger = logger or log
    sample_path = config.data.sample_file
    clean_path = config.data.cleaned_file

    if os.path.isfile(sample_path):
        file_to_load = sample_path
    elif os.path.isfile(clean_path):
        file_to_load = clean_path
    else:
        raise FileNotFoundError(f"No data file found. Expected one of: {sample_path} or {clean_path}")

    logger.info("Running smoke test on %s", file_to_load)
    df = enrich_features(ensure_date_column(read_table(file_to_load, logger=logger)), logger=logger)

    missing_cols = [col for col in SMOKE_REQUIRED_COLUMNS if col not in df.columns]
    if missing_cols:
        raise SmokeAssertionFailure(f"Missing expected columns: {missing_cols}")
    if 'fl_date' not in df.columns or not pd.api.types.is_datetime64_any_dtype(df['fl_date']):
        raise SmokeAssertionFailure("fl_date not converted to a date")

    print(f"Shape: {len(df)} rows x {len(df.columns)} cols")
    print("Missing counts (first 10):")
    print(df.isna().sum().head(10).to_string())
    logger.info("Smoke test passed")
    return df
