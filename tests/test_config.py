import logging

import pytest

from flight_eda.config import (
    DEFAULT_CONFIG_PATH, Config, load_config, log_level_from_string, setup_logging,
)


def test_default_config_file_loads():
    cfg = load_config()
    assert isinstance(cfg, Config)
    assert cfg.data.raw_file == 'data/flight_data_2024.csv'
    assert cfg.data.cleaned_file == 'data/flight_data_2024_cleaned.csv'
    assert cfg.plots.scatter_sample_size == 20000
    assert cfg.plots.delay_lower < cfg.plots.delay_upper
    assert cfg.log_level == logging.INFO


def test_missing_keys_fall_back_to_defaults(tmp_path):
    path = tmp_path / 'partial.toml'
    path.write_text("[plots]\nroute_top_n = 5\ndelay_upper = 120\n")
    cfg = load_config(str(path))
    assert cfg.plots.route_top_n == 5
    assert cfg.plots.delay_upper == 120.0
    assert isinstance(cfg.plots.delay_upper, float)
    assert cfg.plots.dir == 'plots'
    assert cfg.data.sample_file == 'data/flight_data_2024_sample.csv'


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError, match='Config file not found'):
        load_config(str(tmp_path / 'nope.toml'))


@pytest.mark.parametrize("name, level", [
    ('debug', logging.DEBUG),
    ('INFO', logging.INFO),
    ('warn', logging.WARNING),
    ('warning', logging.WARNING),
    ('error', logging.ERROR),
    ('chatty', logging.INFO),
])
def test_log_level_from_string(name, level):
    assert log_level_from_string(name) == level


def test_setup_logging_configures_package_logger_only():
    root_handlers = list(logging.getLogger().handlers)
    logger = setup_logging(logging.ERROR)
    assert logger.name == 'flight_eda'
    assert logger.level == logging.ERROR
    assert len(logger.handlers) == 1
    setup_logging(logging.ERROR)
    assert len(logger.handlers) == 1
    assert logging.getLogger().handlers == root_handlers
    assert DEFAULT_CONFIG_PATH.endswith('eda_config.toml')
