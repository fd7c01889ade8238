import os
import logging

import pandas as pd

from .config import Config
from .features import ensure_date_column, enrich_features, hours_from_crs
from .load import load_raw_dataset, write_table
from .schema import DELAY_CAUSE_COLUMNS, NOT_CANCELLED

log = logging.getLogger(__name__)

CORE_TIMING_COLUMNS = ['dep_time', 'arr_time', 'dep_delay', 'arr_delay', 'distance']


def cancellations_path(cleaned_file: str) -> str:
    """
    Path of the side file holding cancelled/diverted flights, e.g.
    data/flights_cleaned.csv -> data/flights_cleaned_cancellations.csv
    """
    root, ext = os.path.splitext(cleaned_file)
    return f"{root}_cancellations{ext}"


def _flag(df: pd.DataFrame, col: str) -> pd.Series:
    """A 0/1 flag column as integers, missing (or absent) treated as 0."""
    if col not in df.columns:
        return pd.Series(0, index=df.index)
    return pd.to_numeric(df[col], errors='coerce').fillna(0).astype(int)


def clean_and_engineer_data(config: Config, df_raw: pd.DataFrame = None,
                            logger: logging.Logger = None) -> pd.DataFrame:
    """
    Cleans the raw flight table, engineers the analysis features and writes
    the cleaned CSV (plus a side file of cancelled/diverted flights).

    Args:
        config: Pipeline configuration.
        df_raw: An already loaded raw table. When None the raw file from the
            config is loaded and schema-checked.
        logger: Logger to report row counts to.

    Returns:
        The cleaned DataFrame, identical to what was written to
        `config.data.cleaned_file`.
    """
    logger = logger or log
    logger.info("Starting cleaning and feature engineering...")

    df = load_raw_dataset(config, logger=logger) if df_raw is None else df_raw.copy()

    # --- 1. Drop unusable rows ---
    # Cancelled flights legitimately lack delays; anything else without both
    # delay values is corrupt.
    rows_before = len(df)
    has_delays = df['arr_delay'].notna() & df['dep_delay'].notna()
    df = df[_flag(df, 'cancelled').eq(1) | has_delays].copy()
    logger.info("Removed %d rows without arrival/departure delays", rows_before - len(df))

    # --- 2. Impute delay causes and cancellation code ---
    for col in DELAY_CAUSE_COLUMNS:
        if col in df.columns:
            df[col] = df[col].fillna(0.0)
    if 'cancellation_code' in df.columns:
        df['cancellation_code'] = df['cancellation_code'].astype(object).fillna(NOT_CANCELLED)

    # --- 3. Normalize dates and recompute the hour ---
    df = ensure_date_column(df)
    if 'crs_dep_time' in df.columns:
        df['hour_of_day'] = hours_from_crs(df['crs_dep_time'])

    # --- 4. Persist cancelled/diverted flights separately ---
    out_path = config.data.cleaned_file
    cancel_mask = _flag(df, 'cancelled').eq(1) | _flag(df, 'diverted').eq(1)
    df_cancel = df[cancel_mask]
    if not df_cancel.empty:
        cancel_path = cancellations_path(out_path)
        logger.info("Writing %d cancelled/diverted flights to %s", len(df_cancel), cancel_path)
        write_table(df_cancel, cancel_path, logger=logger)

    rows_before = len(df)
    df = df[~cancel_mask]
    logger.info("Dropped %d cancelled/diverted flights", rows_before - len(df))

    # --- 5. Drop rows missing core timing fields ---
    present_required = [col for col in CORE_TIMING_COLUMNS if col in df.columns]
    if present_required:
        rows_before = len(df)
        df = df.dropna(subset=present_required)
        logger.info("Dropped %d rows missing core timing fields", rows_before - len(df))

    # --- 6. Feature Engineering ---
    df = enrich_features(df.reset_index(drop=True), logger=logger)

    logger.info("Writing cleaned data to %s", out_path)
    write_table(df, out_path, logger=logger)

    logger.info("Cleaning complete. Total rows after processing: %d", len(df))
    return df


if __name__ == '__main__':
    from .config import load_config, setup_logging

    cfg = load_config()
    clean_and_engineer_data(cfg, logger=setup_logging(cfg.log_level))
