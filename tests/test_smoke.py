import pandas as pd
import pytest

from flight_eda.preprocess import clean_and_engineer_data
from flight_eda.smoke import SmokeAssertionFailure, run_smoke


def test_smoke_on_sample_file(config):
    df = run_smoke(config)
    assert len(df) == 3
    assert pd.api.types.is_datetime64_any_dtype(df['fl_date'])


def test_smoke_falls_back_to_cleaned_file(make_config, tmp_path):
    config = make_config(sample_file=str(tmp_path / 'no_sample.csv'))
    clean_and_engineer_data(config)
    assert len(run_smoke(config)) == 2


def test_smoke_without_any_file(make_config, tmp_path):
    config = make_config(sample_file=str(tmp_path / 'no_sample.csv'))
    with pytest.raises(FileNotFoundError, match='No data file found'):
        run_smoke(config)


def test_smoke_fails_on_missing_columns(make_config, tmp_path, raw_df):
    path = tmp_path / 'sample.csv'
    raw_df.drop(columns=['dest']).to_csv(path, index=False)
    with pytest.raises(SmokeAssertionFailure, match='route'):
        run_smoke(make_config(sample_file=str(path)))


def test_smoke_fails_without_date_column(make_config, tmp_path, raw_df):
    path = tmp_path / 'sample.csv'
    raw_df.drop(columns=['fl_date']).to_csv(path, index=False)
    with pytest.raises(SmokeAssertionFailure, match='fl_date'):
        run_smoke(make_config(sample_file=str(path)))
