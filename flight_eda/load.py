import os
import re
import time
import logging

import pandas as pd

from .config import Config
from .schema import validate_schema

log = logging.getLogger(__name__)


def clean_col_names(df: pd.DataFrame) -> pd.DataFrame:
    """
    Cleans and standardizes DataFrame column names.
    - Converts to lowercase
    - Replaces spaces and special characters with underscores
    - Strips leading/trailing whitespace and underscores
    """
    new_columns = []
    for col in (str(c) for c in df.columns):
        new_col = col.strip().lower()
        new_col = re.sub(r'[^a-z0-9]', '_', new_col)
        new_col = re.sub(r'_+', '_', new_col)
        new_col = new_col.strip('_')
        new_columns.append(new_col)

    cols = pd.Series(new_columns)
    for dup in cols[cols.duplicated()].unique():
        positions = cols[cols == dup].index.tolist()
        cols[positions] = [dup + '.' + str(i) if i != 0 else dup for i in range(len(positions))]

    df = df.copy()
    df.columns = cols.tolist()
    return df


def read_table(path: str, logger: logging.Logger = None) -> pd.DataFrame:
    """Reads a comma separated flight table with a header row."""
    logger = logger or log
    start = time.perf_counter()
    df = pd.read_csv(path, low_memory=False)
    logger.info("Read %s (%d rows) in %.2fs", path, len(df), time.perf_counter() - start)
    return df


def write_table(df: pd.DataFrame, path: str, logger: logging.Logger = None) -> None:
    """Writes a flight table as CSV, creating parent directories as needed."""
    logger = logger or log
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    start = time.perf_counter()
    df.to_csv(path, index=False)
    logger.info("Wrote %s (%d rows) in %.2fs", path, len(df), time.perf_counter() - start)


def load_raw_dataset(config: Config, logger: logging.Logger = None) -> pd.DataFrame:
    """
    Loads the raw flight data file named in the configuration.

    Args:
        config: Pipeline configuration; `config.data.raw_file` is read.
        logger: Logger to report progress to.

    Returns:
        The raw table with normalized column names, already schema-checked.
    """
    logger = logger or log
    raw_path = config.data.raw_file
    if not os.path.isfile(raw_path):
        raise FileNotFoundError(f"Raw data file not found at {raw_path}. Check [data] raw_file in the config.")

    logger.info("Loading raw dataset from %s", raw_path)
    df = clean_col_names(read_table(raw_path, logger=logger))
    validate_schema(df)

    logger.info("Loaded %d rows x %d columns", len(df), len(df.columns))
    return df


def describe_df(df: pd.DataFrame) -> str:
    """
    Builds a printable summary of a table: shape, first and last rows, and
    per-column range and missing counts.
    """
    numeric = df.select_dtypes(include='number')
    summary = pd.DataFrame({
        'min': numeric.min(),
        'q25': numeric.quantile(0.25),
        'q75': numeric.quantile(0.75),
        'max': numeric.max(),
    }).reindex(df.columns)
    summary['nmissing'] = df.isna().sum()
    summary['dtype'] = df.dtypes.astype(str)

    with pd.option_context('display.max_columns', None, 'display.width', 200):
        return "\n".join([
            "\n=== DATA SHAPE ===",
            str(df.shape),
            "\n=== FIRST 6 ROWS ===",
            str(df.head(6)),
            "\n=== LAST 6 ROWS ===",
            str(df.tail(6)),
            "\n=== DESCRIBE() SUMMARY ===",
            str(summary),
        ])
