"""
Chart generation functions for the dashboard.

Each function receives pre-computed data and returns a Plotly figure.
This keeps visualisation logic separate from data processing.
"""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd
import plotly.graph_objects as go

from chart_transformers import ChartDataPoint
from utils import assign_palette_colors, calculate_total, format_count, format_percentage


# =============================================================================
# Distribution pie (dependency, sex, civil status, employment)
# =============================================================================

def distribution_pie_chart(points: Sequence[ChartDataPoint], title: str) -> go.Figure:
    """Pie chart of one demographic distribution.

    Uncolored points get the cycling pie palette.  When every count is
    zero an empty figure with a "No data available" note is returned.
    """
    fig = go.Figure()

    if calculate_total(points) == 0:
        fig.add_annotation(
            text="No data available",
            x=0.5,
            y=0.5,
            xref='paper',
            yref='paper',
            showarrow=False,
            font=dict(size=14, color='gray'),
        )
        fig.update_layout(
            title=dict(text=title, x=0),
            height=360,
            xaxis=dict(visible=False),
            yaxis=dict(visible=False),
            margin=dict(t=40, b=20, l=20, r=20),
        )
        return fig

    colored = assign_palette_colors(points)
    hover_text = [
        f"<b>{point.label}</b><br>"
        f"Count: {format_count(point.value)}<br>"
        f"Share: {format_percentage(point.percentage)}"
        for point in colored
    ]

    fig.add_trace(go.Pie(
        labels=[point.label for point in colored],
        values=[point.value for point in colored],
        marker=dict(colors=[point.color for point in colored]),
        sort=False,
        direction='clockwise',
        textinfo='percent',
        hovertext=hover_text,
        hoverinfo='text',
    ))

    fig.update_layout(
        title=dict(text=title, x=0),
        height=360,
        showlegend=True,
        legend=dict(orientation="v", yanchor="middle", y=0.5, xanchor="left", x=1.0),
        margin=dict(t=40, b=20, l=20, r=20),
    )
    return fig


# =============================================================================
# Population pyramid (mirrored horizontal bars)
# =============================================================================

def population_pyramid_chart(
    pyramid: pd.DataFrame,
    male_color: str,
    female_color: str,
) -> go.Figure:
    """Horizontal bar pyramid: males to the left, females to the right."""
    pyramid = pyramid.copy()
    pyramid['hover_male'] = (
        "<b>Male " + pyramid['age_group'] + "</b><br>Count: "
        + pyramid['male'].apply(format_count)
        + "<br>Share: " + pyramid['male_pct'].apply(format_percentage)
    )
    pyramid['hover_female'] = (
        "<b>Female " + pyramid['age_group'] + "</b><br>Count: "
        + pyramid['female'].apply(format_count)
        + "<br>Share: " + pyramid['female_pct'].apply(format_percentage)
    )

    fig = go.Figure([
        go.Bar(
            y=pyramid['age_group'],
            x=-pyramid['male'],
            orientation='h',
            name='Male',
            marker_color=male_color,
            hovertext=pyramid['hover_male'],
            hoverinfo='text',
        ),
        go.Bar(
            y=pyramid['age_group'],
            x=pyramid['female'],
            orientation='h',
            name='Female',
            marker_color=female_color,
            hovertext=pyramid['hover_female'],
            hoverinfo='text',
        ),
    ])

    # Symmetric axis with positive tick labels on both sides
    peak = int(max(pyramid['male'].max(), pyramid['female'].max(), 1))
    step = max(1, -(-peak // 4))
    ticks = list(range(-4 * step, 4 * step + 1, step))

    fig.update_layout(
        barmode='overlay',
        bargap=0.1,
        height=520,
        dragmode=False,
        hovermode='closest',
        margin=dict(t=0, b=40, l=60, r=20, autoexpand=False),
        legend=dict(orientation="h", yanchor="top", y=1.02, xanchor="right", x=0.99),
        xaxis=dict(
            tickmode='array',
            tickvals=ticks,
            ticktext=[format_count(abs(t)) for t in ticks],
            range=[-4.2 * step, 4.2 * step],
            fixedrange=True,
        ),
        yaxis=dict(categoryorder='array', categoryarray=list(pyramid['age_group']), fixedrange=True),
    )
    return fig
