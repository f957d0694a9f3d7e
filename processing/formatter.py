"""
Chart Data Formatter - Prepare chart series for frontend display.

Produces Highcharts line-chart options for the selected prefectures and a
year x prefecture table for tabular views and downloads.
"""

from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from config import (
    DEFAULT_YEAR_MIN,
    DEFAULT_YEAR_MAX,
    YEAR_TICK_INTERVAL,
    CHART_TITLE,
    X_AXIS_TITLE,
    Y_AXIS_TITLE,
)


def year_bounds(series: Sequence) -> Dict[str, int]:
    """X axis range covering every plotted year, or the default census span."""
    years = [year for s in series for year, _ in s.points]
    if not years:
        return {'min': DEFAULT_YEAR_MIN, 'max': DEFAULT_YEAR_MAX}
    return {'min': min(years), 'max': max(years)}


def format_chart(series: Sequence, title: Optional[str] = None) -> Dict[str, Any]:
    """
    Format chart series as line-chart options.

    Args:
        series: ChartSeries-like objects (name, points, color)
        title: Optional chart title override

    Returns:
        Dict with chart options; `empty` is True when nothing is selected
    """
    bounds = year_bounds(series)

    return {
        'empty': len(series) == 0,
        'chart': {'type': 'line'},
        'title': {'text': title or CHART_TITLE, 'align': 'left'},
        'xAxis': {
            'title': {'text': X_AXIS_TITLE},
            'min': bounds['min'],
            'max': bounds['max'],
            'tickInterval': YEAR_TICK_INTERVAL,
        },
        'yAxis': {
            'title': {'text': Y_AXIS_TITLE},
        },
        'series': [
            {
                'type': 'line',
                'name': s.name,
                'data': [[year, value] for year, value in s.points],
                'color': s.color,
                'marker': {'enabled': True, 'symbol': 'circle', 'radius': 4},
                'lineWidth': 3,
            }
            for s in series
        ],
        'credits': {'enabled': False},
    }


def chart_frame(series: Sequence) -> pd.DataFrame:
    """
    Year-indexed frame with one column per series.

    Years missing from a series are <NA>; values stay integers.
    """
    columns = {
        s.name: pd.Series(dict(s.points), dtype='Int64')
        for s in series
    }
    if not columns:
        return pd.DataFrame(index=pd.Index([], dtype='int64', name='year'))

    frame = pd.DataFrame(columns).sort_index()
    frame.index.name = 'year'
    return frame


def format_chart_table(series: Sequence) -> Dict[str, Any]:
    """Table payload: sorted years and one value list per series (None for gaps)."""
    frame = chart_frame(series)

    columns: Dict[str, List[Optional[int]]] = {}
    for name in frame.columns:
        columns[name] = [None if pd.isna(v) else int(v) for v in frame[name]]

    return {
        'years': [int(year) for year in frame.index],
        'columns': columns,
    }
