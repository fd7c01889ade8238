import logging
import os

import pandas as pd
import pytest

from flight_eda.config import Config, DataConfig, PlotConfig

FIXTURES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'fixtures')
SAMPLE_CSV = os.path.join(FIXTURES_DIR, 'sample.csv')


@pytest.fixture
def sample_csv():
    return SAMPLE_CSV


@pytest.fixture
def raw_df():
    return pd.read_csv(SAMPLE_CSV)


@pytest.fixture
def make_config(tmp_path):
    def _make(raw_file=SAMPLE_CSV, sample_file=SAMPLE_CSV, route_min_flights=1, **plot_overrides):
        data = DataConfig(
            raw_file=raw_file,
            cleaned_file=str(tmp_path / 'data' / 'sample_clean.csv'),
            sample_file=sample_file,
        )
        plots = PlotConfig(dir=str(tmp_path / 'plots'), scatter_sample_size=1000,
                           route_min_flights=route_min_flights, route_top_n=10, **plot_overrides)
        return Config(data=data, plots=plots)
    return _make


@pytest.fixture
def config(make_config):
    return make_config()


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger('flight_eda')
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
