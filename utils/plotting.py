from typing import Iterable, Optional

import numpy as np
import pandas as pd
from plotly import express as px
from plotly import graph_objects as go

from domain.geometry import Arc, PipeSegment, Spline


def arc_points(segment: PipeSegment, n: int = 12):
    """Points on a 180° bend; bends at x > 0 bulge to +x, bends at x = 0 to -x."""
    sx, sy = segment.start.x, segment.start.y
    ex, ey = segment.end.x, segment.end.y
    cx, cy = (sx + ex) / 2, (sy + ey) / 2
    radius = np.hypot(ex - sx, ey - sy) / 2
    start_angle = np.arctan2(sy - cy, sx - cx)
    bulge_right = sx > 0
    sweep = np.pi if (start_angle < 0) == bulge_right else -np.pi
    angles = start_angle + np.linspace(0.0, sweep, n)
    return cx + radius * np.cos(angles), cy + radius * np.sin(angles)


def segment_polyline(segment: PipeSegment):
    """x and y lists that trace a segment for drawing."""
    if isinstance(segment.shape, Arc):
        xs, ys = arc_points(segment)
        return list(xs), list(ys)
    if isinstance(segment.shape, Spline):
        pts = [segment.start, *segment.shape.control_points, segment.end]
        return [p.x for p in pts], [p.y for p in pts]
    return [segment.start.x, segment.end.x], [segment.start.y, segment.end.y]


def _pipe_trace(segments: Iterable[PipeSegment]) -> go.Scatter:
    xs, ys = [], []
    for s in segments:
        sx, sy = segment_polyline(s)
        xs.extend(sx + [None])
        ys.extend(sy + [None])
    return go.Scatter(x=xs, y=ys, mode="lines", name="Pipe",
                      line=dict(color="black", width=1), hoverinfo="skip")


def plot_temperature_heatmap(
    grid: np.ndarray,
    cell_size: float,
    segments: Optional[Iterable[PipeSegment]] = None,
    title: str = "Floor temperature (°C)",
) -> go.Figure:
    """Heatmap of a grid snapshot with the pipe layout drawn on top."""
    rows, cols = grid.shape
    x = (np.arange(cols) + 0.5) * cell_size
    y = (np.arange(rows) + 0.5) * cell_size

    fig = go.Figure(go.Heatmap(
        z=grid, x=x, y=y,
        colorscale="RdBu_r",
        colorbar=dict(title="°C"),
        hovertemplate="x=%{x:.2f} m<br>y=%{y:.2f} m<br>T=%{z:.1f} °C<extra></extra>",
    ))
    if segments is not None:
        fig.add_trace(_pipe_trace(segments))

    fig.update_layout(title=title, xaxis_title="x (m)", yaxis_title="y (m)")
    fig.update_yaxes(scaleanchor="x", scaleratio=1)
    return fig


def plot_pipe_layout(segments: Iterable[PipeSegment], room_width: float, room_length: float) -> go.Figure:
    """Pipe routing inside the room outline."""
    fig = go.Figure(_pipe_trace(segments))
    fig.add_shape(type="rect", x0=0, y0=0, x1=room_width, y1=room_length,
                  line=dict(color="#555", width=2))
    fig.update_layout(title="Pipe layout", xaxis_title="x (m)", yaxis_title="y (m)")
    fig.update_yaxes(scaleanchor="x", scaleratio=1)
    return fig


def plot_pressure_loss(df: pd.DataFrame, threshold: float = 300.0) -> go.Figure:
    """Pressure loss per circuit against the pump limit."""
    fig = px.bar(df, x='Circuit', y='Pressure loss (mbar)',
                 color='Critical', color_discrete_map={'Yes': 'crimson', 'No': 'seagreen'},
                 labels={'Circuit': 'Circuit', 'Pressure loss (mbar)': 'Δp (mbar)'})
    fig.add_hline(y=threshold, line_dash="dash", line_color="crimson",
                  annotation_text=f"{threshold:.0f} mbar limit")
    fig.update_layout(title='Pressure loss per heating circuit',
                      xaxis_title='Circuit', yaxis_title='Pressure loss (mbar)')
    return fig


def plot_budget_breakdown(df: pd.DataFrame) -> go.Figure:
    """Pie chart of material cost shares."""
    fig = px.pie(df, names='Material', values='Total (€)',
                 title='Material cost breakdown',
                 labels={'Material': 'Material', 'Total (€)': 'Cost (€)'})
    return fig
