import numpy as np
import pandas as pd

from .features import DELAY_THRESHOLD_MINS, ROUTE_SEPARATOR


def calculate_hourly_kpis(df: pd.DataFrame) -> pd.DataFrame:
    """
    Calculates delay statistics per scheduled departure hour.

    Args:
        df: A cleaned flight table with `hour_of_day` and `arr_delay`.

    Returns:
        A DataFrame sorted by hour with:
        - total_flights
        - average_arrival_delay
        - average_departure_delay (when `dep_delay` is present)
    """
    df = df.assign(arr_delay=pd.to_numeric(df['arr_delay'], errors='coerce'))
    aggregations = {
        'total_flights': ('arr_delay', 'size'),
        'average_arrival_delay': ('arr_delay', 'mean'),
    }
    if 'dep_delay' in df.columns:
        df = df.assign(dep_delay=pd.to_numeric(df['dep_delay'], errors='coerce'))
        aggregations['average_departure_delay'] = ('dep_delay', 'mean')

    hourly = df.groupby('hour_of_day').agg(**aggregations).reset_index()
    return hourly.sort_values('hour_of_day').reset_index(drop=True)


def calculate_airline_kpis(df: pd.DataFrame) -> pd.DataFrame:
    """Flight count and mean arrival delay per carrier, busiest carrier first."""
    df = df.assign(arr_delay=pd.to_numeric(df['arr_delay'], errors='coerce'))
    airlines = df.groupby('op_unique_carrier').agg(
        flight_count=('arr_delay', 'size'),
        mean_delay=('arr_delay', 'mean'),
    ).reset_index()
    return airlines.sort_values('flight_count', ascending=False).reset_index(drop=True)


def find_worst_routes(df: pd.DataFrame, min_flights: int, top_n: int) -> pd.DataFrame:
    """
    Identifies the routes with the highest mean arrival delay.

    Args:
        df: A cleaned flight table.
        min_flights: Routes with fewer flights are ignored.
        top_n: The number of routes to return.

    Returns:
        Up to `top_n` rows of origin, dest, route, flight_count, mean_delay.
        Empty when no route has enough flights.
    """
    arr_delay = pd.to_numeric(df['arr_delay'], errors='coerce')
    valid = df[arr_delay.notna()].assign(arr_delay=arr_delay[arr_delay.notna()])

    routes = valid.groupby(['origin', 'dest']).agg(
        flight_count=('arr_delay', 'size'),
        mean_delay=('arr_delay', 'mean'),
    ).reset_index()
    routes = routes[routes['flight_count'] >= min_flights]
    routes = routes.sort_values('mean_delay', ascending=False).head(top_n).reset_index(drop=True)
    routes.insert(2, 'route', routes['origin'].astype(str) + ROUTE_SEPARATOR + routes['dest'].astype(str))
    return routes


def find_peak_delay_hour(hourly_kpis: pd.DataFrame) -> pd.Series:
    """The hour with the highest mean arrival delay, or None without data."""
    ranked = hourly_kpis.dropna(subset=['average_arrival_delay'])
    if ranked.empty:
        return None
    return ranked.sort_values('average_arrival_delay', ascending=False).iloc[0]


def quick_stats(df: pd.DataFrame, route_min_flights: int = 50, top_routes: int = 3) -> dict:
    """
    Headline numbers for a cleaned table: on-time share, mean arrival delay,
    the peak delay hour and the worst routes.
    """
    arr_delay = pd.to_numeric(df['arr_delay'], errors='coerce').dropna()
    return {
        'on_time_share': float((arr_delay <= DELAY_THRESHOLD_MINS).mean()) if len(arr_delay) else np.nan,
        'mean_arrival_delay': float(arr_delay.mean()) if len(arr_delay) else np.nan,
        'peak_hour': find_peak_delay_hour(calculate_hourly_kpis(df)),
        'worst_routes': find_worst_routes(df, route_min_flights, top_routes),
    }


def format_quick_stats(stats: dict) -> str:
    lines = [
        "=== Quick stats ===",
        f"On-time share (<=15 min): {stats['on_time_share'] * 100:.2f}%",
        f"Mean arrival delay: {stats['mean_arrival_delay']:.2f} min",
    ]
    peak = stats['peak_hour']
    if peak is not None:
        lines.append(f"Peak delay hour: {int(peak['hour_of_day'])} (mean {peak['average_arrival_delay']:.2f} min)")
    routes = stats['worst_routes']
    if not routes.empty:
        lines.append("Worst routes (avg delay):")
        for r in routes.itertuples():
            lines.append(f" - {r.route}: {r.mean_delay:.2f} min (n={r.flight_count})")
    return "\n".join(lines)
