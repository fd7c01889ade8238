import math

import pandas as pd

from flight_eda.kpis import (
    calculate_airline_kpis, calculate_hourly_kpis, find_worst_routes, format_quick_stats, quick_stats,
)


def _flights():
    return pd.DataFrame({
        'op_unique_carrier': ['AA', 'AA', 'AA', 'DL'],
        'origin': ['JFK', 'JFK', 'ATL', 'ATL'],
        'dest': ['LAX', 'LAX', 'ORD', 'ORD'],
        'hour_of_day': [8, 8, 17, 17],
        'arr_delay': [10.0, 30.0, -5.0, 5.0],
        'dep_delay': [0.0, 20.0, 0.0, 10.0],
    })


def test_hourly_kpis():
    hourly = calculate_hourly_kpis(_flights())
    assert hourly['hour_of_day'].tolist() == [8, 17]
    assert hourly['total_flights'].tolist() == [2, 2]
    assert hourly['average_arrival_delay'].tolist() == [20.0, 0.0]
    assert hourly['average_departure_delay'].tolist() == [10.0, 5.0]


def test_airline_kpis_busiest_first():
    airlines = calculate_airline_kpis(_flights())
    assert airlines['op_unique_carrier'].tolist() == ['AA', 'DL']
    assert airlines['flight_count'].tolist() == [3, 1]


def test_worst_routes_respects_minimum_and_top_n():
    routes = find_worst_routes(_flights(), min_flights=2, top_n=1)
    assert routes['route'].tolist() == ['JFK -> LAX']
    assert routes['mean_delay'].tolist() == [20.0]


def test_worst_routes_empty_when_no_route_qualifies():
    assert find_worst_routes(_flights(), min_flights=10, top_n=5).empty


def test_quick_stats():
    stats = quick_stats(_flights(), route_min_flights=2)
    assert stats['on_time_share'] == 0.75
    assert stats['mean_arrival_delay'] == 10.0
    assert stats['peak_hour']['hour_of_day'] == 8
    text = format_quick_stats(stats)
    assert "On-time share (<=15 min): 75.00%" in text
    assert "Peak delay hour: 8" in text
    assert "JFK -> LAX" in text


def test_quick_stats_without_delays():
    stats = quick_stats(_flights().assign(arr_delay=float('nan')))
    assert math.isnan(stats['mean_arrival_delay'])
    assert stats['peak_hour'] is None
