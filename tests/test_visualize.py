import logging
import os

import pytest

from flight_eda.preprocess import clean_and_engineer_data
from flight_eda.visualize import generate_plots, load_cancellations


def _html_files(plot_dir):
    return sorted(f for f in os.listdir(plot_dir) if f.endswith('.html'))


def test_generate_plots_writes_chart_battery(config):
    df_clean = clean_and_engineer_data(config)
    generate_plots(config, df_clean)

    files = _html_files(config.plots.dir)
    assert len(files) >= 10
    assert '4_cancellation_reasons.html' in files
    assert '10_worst_routes.html' in files


def test_generate_plots_loads_cleaned_file(config):
    clean_and_engineer_data(config)
    df = generate_plots(config)
    assert len(df) == 2
    assert len(_html_files(config.plots.dir)) >= 10


def test_generate_plots_requires_cleaned_file(config):
    with pytest.raises(FileNotFoundError, match='Run Phase 2 first'):
        generate_plots(config)


def test_empty_routes_and_cancellations_are_skipped(make_config, tmp_path, raw_df, caplog):
    config = make_config(raw_file=str(tmp_path / 'no_raw.csv'), route_min_flights=1000)
    df_clean = clean_and_engineer_data(config, df_raw=raw_df[raw_df['cancelled'] == 0])

    with caplog.at_level(logging.WARNING, logger='flight_eda'):
        generate_plots(config, df_clean)

    files = _html_files(config.plots.dir)
    assert '4_cancellation_reasons.html' not in files
    assert '10_worst_routes.html' not in files
    assert len(files) == 9
    assert "No cancellations found" in caplog.text
    assert "worst routes" in caplog.text


def test_cancellations_fall_back_to_raw_file(config, raw_df):
    dfc = load_cancellations(raw_df[raw_df['cancelled'] == 0], config)
    assert dfc['cancellation_code'].tolist() == ['B']
