from .config import DEFAULT_CONFIG_PATH, Config, DataConfig, PlotConfig, load_config
from .features import assign_time_of_day, enrich_features, ensure_date_column, ensure_hour_features, get_hour
from .load import load_raw_dataset
from .phases import Phase, UnknownPhaseError, parse_phase, run_phase
from .preprocess import clean_and_engineer_data
from .schema import REQUIRED_COLUMNS, SchemaError, validate_schema
from .smoke import SmokeAssertionFailure, run_smoke
from .visualize import generate_plots

__all__ = [
    "DEFAULT_CONFIG_PATH", "Config", "DataConfig", "PlotConfig", "load_config",
    "assign_time_of_day", "enrich_features", "ensure_date_column", "ensure_hour_features", "get_hour",
    "load_raw_dataset", "Phase", "UnknownPhaseError", "parse_phase", "run_phase",
    "clean_and_engineer_data", "REQUIRED_COLUMNS", "SchemaError", "validate_schema",
    "SmokeAssertionFailure", "run_smoke", "generate_plots",
]
