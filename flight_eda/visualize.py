import os
import logging

import pandas as pd
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from .config import Config
from .features import ensure_date_column, enrich_features
from .kpis import calculate_airline_kpis, calculate_hourly_kpis, find_worst_routes
from .load import clean_col_names, read_table
from .preprocess import cancellations_path
from .schema import NOT_CANCELLED

log = logging.getLogger(__name__)

DAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
SCATTER_SEED = 123


def plot_filename(name: str, plot_dir: str) -> str:
    return os.path.join(plot_dir, f"{name}.html")


def _save(fig: go.Figure, name: str, plot_dir: str, logger: logging.Logger) -> str:
    output_path = plot_filename(name, plot_dir)
    fig.write_html(output_path, include_plotlyjs='cdn')
    logger.info("Saved %s", output_path)
    return output_path


def _delays_within(df: pd.DataFrame, col: str, lower: float, upper: float) -> pd.Series:
    values = pd.to_numeric(df[col], errors='coerce')
    return values.notna() & (values > lower) & (values < upper)


def plot_arrival_delay_histogram(df, lower, upper, plot_dir, logger=None):
    logger = logger or log
    delays = pd.to_numeric(df.loc[_delays_within(df, 'arr_delay', lower, upper), 'arr_delay'])

    fig = go.Figure(go.Histogram(x=delays, nbinsx=120, marker_color='indianred'))
    fig.update_layout(
        title_text='<b>Arrival Delay Distribution</b>',
        xaxis_title='Delay (min)',
        yaxis_title='Flights',
        template='plotly_white'
    )
    return _save(fig, "1_hist_arrival_delay", plot_dir, logger)


def plot_flight_counts_by_airline(df, plot_dir, logger=None):
    logger = logger or log
    counts = calculate_airline_kpis(df)

    fig = go.Figure(go.Bar(x=counts['op_unique_carrier'], y=counts['flight_count'], marker_color='lightblue'))
    fig.update_layout(
        title_text='<b>Flights by Airline</b>',
        yaxis_title='Flights',
        xaxis=dict(tickangle=-60),
        template='plotly_white'
    )
    return _save(fig, "2_flights_by_airline", plot_dir, logger)


def plot_top_busiest_airports(df, plot_dir, logger=None, top_n=15):
    logger = logger or log
    busiest = df['origin'].value_counts().head(top_n)

    fig = go.Figure(go.Bar(x=busiest.index.astype(str), y=busiest.values, marker_color='lightsalmon'))
    fig.update_layout(
        title_text=f'<b>Top {top_n} Busiest Airports</b>',
        yaxis_title='Flights',
        xaxis=dict(tickangle=-45),
        template='plotly_white'
    )
    return _save(fig, "3_busiest_airports", plot_dir, logger)


def _cancelled_only(df: pd.DataFrame) -> pd.DataFrame:
    if 'cancellation_code' not in df.columns:
        return df.iloc[0:0]
    codes = df['cancellation_code']
    return df[codes.notna() & (codes != NOT_CANCELLED)]


def load_cancellations(df: pd.DataFrame, config: Config, logger: logging.Logger = None) -> pd.DataFrame:
    """
    Finds the cancelled flights to chart. The side file written during
    cleaning is preferred, then the given table, then a reload of the raw file.
    """
    logger = logger or log

    dfc = df.iloc[0:0]
    cancel_path = cancellations_path(config.data.cleaned_file)
    if os.path.isfile(cancel_path):
        logger.info("Loading cancellations dataset from %s", cancel_path)
        dfc = _cancelled_only(read_table(cancel_path, logger=logger))

    if dfc.empty:
        dfc = _cancelled_only(df)

    if dfc.empty and os.path.isfile(config.data.raw_file):
        logger.info("Reloading raw dataset for cancellation plot from %s", config.data.raw_file)
        dfc = _cancelled_only(clean_col_names(read_table(config.data.raw_file, logger=logger)))

    return dfc


def plot_cancellation_reason_counts(df, config, plot_dir, logger=None):
    logger = logger or log
    dfc = load_cancellations(df, config, logger=logger)
    if dfc.empty:
        logger.warning("No cancellations found; skipping cancellation plot")
        return None

    reasons = dfc['cancellation_code'].astype(str).value_counts().sort_index()
    fig = go.Figure(go.Bar(x=reasons.index, y=reasons.values, marker_color='firebrick'))
    fig.update_layout(
        title_text='<b>Cancellation Reasons</b>',
        yaxis_title='Flights',
        template='plotly_white'
    )
    return _save(fig, "4_cancellation_reasons", plot_dir, logger)


def plot_average_delay_by_hour(df, plot_dir, logger=None):
    logger = logger or log
    hourly = calculate_hourly_kpis(df)

    fig = go.Figure(go.Scatter(
        x=hourly['hour_of_day'],
        y=hourly['average_arrival_delay'],
        mode='lines+markers',
        line=dict(color='seagreen', width=2)
    ))
    fig.update_layout(
        title_text='<b>Avg Delay by Hour</b>',
        xaxis_title='Hour',
        yaxis_title='Delay (min)',
        xaxis=dict(tickmode='linear'),
        template='plotly_white'
    )
    return _save(fig, "5_delay_by_hour", plot_dir, logger)


def plot_average_delay_by_airline(df, plot_dir, logger=None):
    logger = logger or log
    airlines = calculate_airline_kpis(df).sort_values('mean_delay')

    fig = go.Figure(go.Bar(x=airlines['op_unique_carrier'], y=airlines['mean_delay'], marker_color='indianred'))
    fig.update_layout(
        title_text='<b>Avg Delay by Airline</b>',
        yaxis_title='Avg delay (min)',
        xaxis=dict(tickangle=-60),
        template='plotly_white'
    )
    return _save(fig, "6_delay_by_airline", plot_dir, logger)


def plot_arrival_delay_boxplot_by_airline(df, lower, upper, plot_dir, logger=None):
    logger = logger or log
    df_box = df[_delays_within(df, 'arr_delay', lower, upper)]

    fig = go.Figure()
    for carrier, group in df_box.groupby('op_unique_carrier'):
        fig.add_trace(go.Box(y=pd.to_numeric(group['arr_delay']), name=str(carrier), boxpoints=False))
    fig.update_layout(
        title_text='<b>Delay Distribution by Airline</b>',
        yaxis_title='Arrival delay (min)',
        showlegend=False,
        template='plotly_white'
    )
    return _save(fig, "7_boxplot_by_airline", plot_dir, logger)


def plot_departure_vs_arrival_scatter(df, lower, upper, sample_size, plot_dir, logger=None):
    logger = logger or log
    dfs = df.sample(n=min(len(df), sample_size), random_state=SCATTER_SEED)
    dfs = dfs[_delays_within(dfs, 'arr_delay', lower, upper) & _delays_within(dfs, 'dep_delay', lower, upper)]

    fig = go.Figure(go.Scatter(
        x=dfs['dep_delay'],
        y=dfs['arr_delay'],
        mode='markers',
        marker=dict(size=4, opacity=0.3)
    ))
    fig.update_layout(
        title_text='<b>Departure vs Arrival Delay (Sample)</b>',
        xaxis_title='Departure Delay',
        yaxis_title='Arrival Delay',
        template='plotly_white'
    )
    return _save(fig, "8_scatter_dep_arr", plot_dir, logger)


def plot_worst_average_delay_routes(df, config, plot_dir, logger=None):
    logger = logger or log
    min_flights = config.plots.route_min_flights
    top_routes = find_worst_routes(df, min_flights, config.plots.route_top_n)

    if top_routes.empty:
        logger.warning("No routes met the criteria for 'worst routes' plot; skipping.")
        return None

    fig = go.Figure(go.Bar(x=top_routes['route'], y=top_routes['mean_delay'], marker_color='firebrick'))
    fig.update_layout(
        title_text=f'<b>Top {len(top_routes)} Worst Routes (min {min_flights} flights)</b>',
        xaxis_title='Route',
        yaxis_title='Avg arrival delay (min)',
        template='plotly_white'
    )
    return _save(fig, "10_worst_routes", plot_dir, logger)


def plot_delay_rate_heatmap(df, plot_dir, logger=None):
    logger = logger or log
    df = enrich_features(ensure_date_column(df), logger=logger)
    rates = df.assign(
        day_of_week=df['fl_date'].dt.dayofweek + 1,
        is_delayed=df['is_delayed'].astype(float),
    ).groupby(['day_of_week', 'hour_of_day'])['is_delayed'].mean()

    # Full 7 x 24 grid so the heatmap stays rectangular
    grid = pd.MultiIndex.from_product([range(1, 8), range(24)], names=['day_of_week', 'hour_of_day'])
    matrix = rates.reindex(grid).unstack('hour_of_day')

    fig = go.Figure(go.Heatmap(
        z=matrix.values,
        x=list(range(24)),
        y=DAY_LABELS,
        colorscale='Reds',
        colorbar=dict(title='Delay rate')
    ))
    fig.update_layout(
        title_text='<b>Delay Rate by Day & Hour</b>',
        xaxis_title='Hour',
        yaxis_title='Day',
        template='plotly_white'
    )
    return _save(fig, "11_heatmap", plot_dir, logger)


def plot_delay_by_hour_facets(df, airline_counts, plot_dir, logger=None, top_n=8):
    logger = logger or log
    top_carriers = airline_counts['op_unique_carrier'].head(top_n).tolist()
    df_top = df[df['op_unique_carrier'].isin(top_carriers)]
    by_hour = df_top.assign(arr_delay=pd.to_numeric(df_top['arr_delay'], errors='coerce')) \
        .groupby(['op_unique_carrier', 'hour_of_day'])['arr_delay'].mean().reset_index()

    fig = make_subplots(rows=4, cols=2, subplot_titles=[str(c) for c in top_carriers])
    for i, carrier in enumerate(top_carriers):
        subset = by_hour[by_hour['op_unique_carrier'] == carrier].sort_values('hour_of_day')
        fig.add_trace(
            go.Scatter(x=subset['hour_of_day'], y=subset['arr_delay'], mode='lines+markers', name=str(carrier)),
            row=i // 2 + 1, col=i % 2 + 1
        )
    fig.update_layout(
        title_text=f'<b>Delay by Hour (Top {top_n} Airlines)</b>',
        height=1000,
        showlegend=False,
        template='plotly_white'
    )
    fig.update_xaxes(title_text='Hour')
    fig.update_yaxes(title_text='Avg delay')
    return _save(fig, "12_facet_airline_hour", plot_dir, logger)


def generate_plots(config: Config, df: pd.DataFrame = None, logger: logging.Logger = None) -> pd.DataFrame:
    """
    Renders the full chart battery into `config.plots.dir`.

    Args:
        config: Pipeline configuration (paths and plot bounds).
        df: The cleaned table. When None the cleaned file is loaded.
        logger: Logger to report progress and skipped charts to.

    Returns:
        The (date-normalized, enriched) table the charts were drawn from.
    """
    logger = logger or log

    if df is None:
        clean_file = config.data.cleaned_file
        if not os.path.isfile(clean_file):
            raise FileNotFoundError(f"Cleaned file not found. Run Phase 2 first. Expected at {clean_file}")
        logger.info("Loading cleaned dataset from %s", clean_file)
        df = read_table(clean_file, logger=logger)

    df = enrich_features(ensure_date_column(df), logger=logger)

    plot_dir = config.plots.dir
    os.makedirs(plot_dir, exist_ok=True)

    lower = config.plots.delay_lower
    upper = config.plots.delay_upper

    logger.info("Generating plots in %s", plot_dir)

    plot_arrival_delay_histogram(df, lower, upper, plot_dir, logger)
    plot_flight_counts_by_airline(df, plot_dir, logger)
    plot_top_busiest_airports(df, plot_dir, logger)
    plot_cancellation_reason_counts(df, config, plot_dir, logger)
    plot_average_delay_by_hour(df, plot_dir, logger)
    plot_average_delay_by_airline(df, plot_dir, logger)
    plot_arrival_delay_boxplot_by_airline(df, lower, upper, plot_dir, logger)
    plot_departure_vs_arrival_scatter(df, lower, upper, config.plots.scatter_sample_size, plot_dir, logger)
    plot_worst_average_delay_routes(df, config, plot_dir, logger)
    plot_delay_rate_heatmap(df, plot_dir, logger)
    plot_delay_by_hour_facets(df, calculate_airline_kpis(df), plot_dir, logger)

    logger.info("All plots saved to %s", plot_dir)
    return df
