import os
import logging
from enum import Enum

import pandas as pd

from .config import Config
from .load import describe_df, load_raw_dataset, read_table
from .preprocess import clean_and_engineer_data
from .smoke import run_smoke
from .visualize import generate_plots

log = logging.getLogger(__name__)


class Phase(Enum):
    PHASE1 = 'phase1'
    PHASE2 = 'phase2'
    PHASE3 = 'phase3'
    ALL = 'all'
    SMOKE = 'smoke'


class UnknownPhaseError(ValueError):
    """Raised for a phase name or value the runner does not know."""


PHASE_ALIASES = {
    '1': Phase.PHASE1, 'phase1': Phase.PHASE1, 'load': Phase.PHASE1,
    '2': Phase.PHASE2, 'phase2': Phase.PHASE2, 'clean': Phase.PHASE2,
    '3': Phase.PHASE3, 'phase3': Phase.PHASE3, 'plot': Phase.PHASE3,
    'all': Phase.ALL,
    'smoke': Phase.SMOKE,
}


def parse_phase(name) -> Phase:
    if isinstance(name, Phase):
        return name
    try:
        return PHASE_ALIASES[str(name).strip().lower()]
    except KeyError:
        raise UnknownPhaseError(f"Unknown phase: {name!r}. Expected one of 1, 2, 3, all, smoke.") from None


def run_load_phase(config: Config, logger: logging.Logger = None) -> pd.DataFrame:
    """Phase 1: load and validate the raw file and print a summary."""
    logger = logger or log
    df = load_raw_dataset(config, logger=logger)
    print(describe_df(df))
    logger.info("Phase 1 complete")
    return df


def run_clean_phase(config: Config, df_raw: pd.DataFrame = None, logger: logging.Logger = None) -> pd.DataFrame:
    """Phase 2: clean and engineer features, then report missing counts."""
    logger = logger or log
    df = clean_and_engineer_data(config, df_raw=df_raw, logger=logger)
    print("\n=== AFTER CLEANING (missing counts) ===")
    print(df.isna().sum().head(20).to_string())
    logger.info("Phase 2 complete")
    return df


def run_plot_phase(config: Config, df: pd.DataFrame = None, logger: logging.Logger = None) -> pd.DataFrame:
    """
    Phase 3: render the charts. Without an in-memory table the cleaned file
    must already exist; Phase 2 is never run implicitly.
    """
    logger = logger or log
    if df is None:
        clean_file = config.data.cleaned_file
        if not os.path.isfile(clean_file):
            raise FileNotFoundError(f"Cleaned file not found. Run Phase 2 first. Expected at {clean_file}")
        logger.info("Loading cleaned dataset for plotting from %s", clean_file)
        df = read_table(clean_file, logger=logger)
    df = generate_plots(config, df, logger=logger)
    logger.info("Phase 3 complete")
    return df


def run_phase(phase, config: Config, logger: logging.Logger = None):
    """
    Runs one phase of the analysis.

    Args:
        phase: A Phase or one of its names ("1", "2", "3", "all", "smoke").
        config: Pipeline configuration.
        logger: Logger handed to every stage.

    Returns:
        Phase 1 the raw table, Phase 2 the cleaned table, Phase 3 the plotted
        table, "all" a (raw, cleaned) tuple, smoke the checked table.
    """
    logger = logger or log
    phase = parse_phase(phase)

    if phase is Phase.PHASE1:
        return run_load_phase(config, logger=logger)
    elif phase is Phase.PHASE2:
        return run_clean_phase(config, logger=logger)
    elif phase is Phase.PHASE3:
        return run_plot_phase(config, logger=logger)
    elif phase is Phase.ALL:
        df_raw = run_load_phase(config, logger=logger)
        df_clean = run_clean_phase(config, df_raw=df_raw, logger=logger)
        run_plot_phase(config, df_clean, logger=logger)
        return df_raw, df_clean
    elif phase is Phase.SMOKE:
        return run_smoke(config, logger=logger)
    raise UnknownPhaseError(f"Unknown phase: {phase}")
