import os

import pandas as pd
import pytest

from flight_eda.phases import Phase, UnknownPhaseError, parse_phase, run_phase


@pytest.mark.parametrize("name, expected", [
    ("1", Phase.PHASE1),
    ("phase2", Phase.PHASE2),
    ("Plot", Phase.PHASE3),
    ("all", Phase.ALL),
    ("SMOKE", Phase.SMOKE),
    (Phase.ALL, Phase.ALL),
])
def test_parse_phase(name, expected):
    assert parse_phase(name) is expected


def test_unknown_phase():
    with pytest.raises(UnknownPhaseError, match='phase4'):
        parse_phase('phase4')


def test_run_unknown_phase(config):
    with pytest.raises(UnknownPhaseError):
        run_phase('bogus', config)


def test_load_phase_returns_raw_table(config, capsys):
    df = run_phase('1', config)
    assert len(df) == 3
    assert "=== DATA SHAPE ===" in capsys.readouterr().out


def test_clean_phase_writes_cleaned_file(config, capsys):
    df = run_phase(Phase.PHASE2, config)
    assert len(df) == 2
    assert os.path.isfile(config.data.cleaned_file)
    assert "AFTER CLEANING" in capsys.readouterr().out


def test_plot_phase_requires_cleaned_file(config):
    with pytest.raises(FileNotFoundError, match='Run Phase 2 first'):
        run_phase('3', config)
    assert not os.path.exists(config.plots.dir)


def test_plot_phase_after_clean(config):
    run_phase('2', config)
    run_phase('3', config)
    assert len(os.listdir(config.plots.dir)) >= 10


def test_all_phases_pass_tables_forward(config):
    df_raw, df_clean = run_phase('all', config)
    assert len(df_raw) == 3
    assert len(df_clean) == 2
    assert 'route' in df_clean.columns
    assert 'route' not in df_raw.columns
    assert len(os.listdir(config.plots.dir)) >= 10


def test_all_phases_do_not_reread_files(config, monkeypatch):
    import flight_eda.phases as phases

    reads = []
    original = phases.read_table
    monkeypatch.setattr(phases, 'read_table', lambda *a, **k: reads.append(a) or original(*a, **k))
    run_phase('all', config)
    assert reads == []


def test_smoke_phase(config):
    df = run_phase('smoke', config)
    assert pd.api.types.is_datetime64_any_dtype(df['fl_date'])
