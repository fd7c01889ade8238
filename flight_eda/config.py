"""
Configuration management for the flight EDA pipeline.
"""

import os
import logging
import tomllib
from dataclasses import dataclass, field

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_CONFIG_PATH = os.path.join(PROJECT_ROOT, 'config', 'eda_config.toml')

LOGGER_NAME = 'flight_eda'


@dataclass
class DataConfig:
    """Paths of the data files used by the pipeline."""

    raw_file: str = 'data/flight_data_2024.csv'
    cleaned_file: str = 'data/flight_data_2024_cleaned.csv'
    sample_file: str = 'data/flight_data_2024_sample.csv'


@dataclass
class PlotConfig:
    """Output directory and bounds for the chart battery."""

    dir: str = 'plots'
    scatter_sample_size: int = 20000
    route_min_flights: int = 100
    route_top_n: int = 10
    delay_lower: float = -60.0
    delay_upper: float = 180.0


@dataclass
class Config:
    data: DataConfig = field(default_factory=DataConfig)
    plots: PlotConfig = field(default_factory=PlotConfig)
    log_level: int = logging.INFO


def log_level_from_string(level: str) -> int:
    """
    Maps a level name from the config file or the CLI to a `logging` level.
    Unknown names fall back to INFO.
    """
    levels = {
        'debug': logging.DEBUG,
        'info': logging.INFO,
        'warn': logging.WARNING,
        'warning': logging.WARNING,
        'error': logging.ERROR,
    }
    return levels.get(str(level).strip().lower(), logging.INFO)


def load_config(path: str = DEFAULT_CONFIG_PATH) -> Config:
    """
    Loads the pipeline configuration from a TOML file.

    Args:
        path: Path to the TOML file. Every key is optional.

    Returns:
        A Config with defaults filled in for anything the file leaves out.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, 'rb') as f:
        cfg = tomllib.load(f)

    data_cfg = cfg.get('data', {})
    plot_cfg = cfg.get('plots', {})
    log_cfg = cfg.get('logging', {})

    data_defaults = DataConfig()
    defaults = PlotConfig()
    data = DataConfig(
        raw_file=data_cfg.get('raw_file', data_defaults.raw_file),
        cleaned_file=data_cfg.get('cleaned_file', data_defaults.cleaned_file),
        sample_file=data_cfg.get('sample_file', data_defaults.sample_file),
    )
    plots = PlotConfig(
        dir=plot_cfg.get('dir', defaults.dir),
        scatter_sample_size=int(plot_cfg.get('scatter_sample_size', defaults.scatter_sample_size)),
        route_min_flights=int(plot_cfg.get('route_min_flights', defaults.route_min_flights)),
        route_top_n=int(plot_cfg.get('route_top_n', defaults.route_top_n)),
        delay_lower=float(plot_cfg.get('delay_lower', defaults.delay_lower)),
        delay_upper=float(plot_cfg.get('delay_upper', defaults.delay_upper)),
    )

    return Config(data=data, plots=plots, log_level=log_level_from_string(log_cfg.get('level', 'info')))


def setup_logging(log_level: int = logging.INFO) -> logging.Logger:
    """
    Configures the package logger and returns it.

    Only the `flight_eda` logger is touched, so callers (tests, notebooks)
    keep control of the root logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)

    # Clear existing handlers
    logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))
    logger.addHandler(console_handler)

    return logger
