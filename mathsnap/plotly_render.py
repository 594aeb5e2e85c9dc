"""Plotly rendering of sampled curves for notebook sessions.

The mobile client draws ``PlotResult`` segments on its own canvas. In a
notebook the same data is easier to inspect as a Plotly figure: this module
builds one in domain coordinates, with the axes through the origin and an
optional tap selection (marker plus dashed guide lines).
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import plotly.graph_objects as go

from .coordinate_view import HitResult
from .curve_sampler import PlotResult

__all__ = ["plot_result_figure"]

CURVE_COLOR = "#52b5cc"
GUIDE_COLOR = "rgba(132, 132, 132, 0.45)"
MARKER_COLOR = "#4c84c0"


def _axis_layout(span: tuple[float, float]) -> Dict[str, Any]:
    return dict(
        range=list(span),
        zeroline=True,
        zerolinewidth=1.5,
        zerolinecolor="#b0b0b0",
        showgrid=True,
        gridcolor="#e8e8e8",
        dtick=1,
    )


def _curve_xy(result: PlotResult) -> tuple[list[Optional[float]], list[Optional[float]]]:
    """Flatten segments into x/y lists separated by ``None`` gaps."""
    xs: list[Optional[float]] = []
    ys: list[Optional[float]] = []
    for index, segment in enumerate(result.segments):
        if index:
            xs.append(None)
            ys.append(None)
        for x, y in segment.domain_points:
            xs.append(x)
            ys.append(y)
    return xs, ys


def plot_result_figure(
    result: PlotResult,
    *,
    hit: Optional[HitResult] = None,
    title: Optional[str] = None,
    x_range: tuple[float, float] = (-17.0, 17.0),
    y_range: tuple[float, float] = (-17.0, 17.0),
) -> go.Figure:
    """Build a Plotly figure for ``result``.

    Parameters
    ----------
    result : PlotResult
        Sampled curve; an empty result gives a figure with axes only.
    hit : HitResult or None
        Tap selection to draw as a marker with guide lines to both axes.
    title : str or None
        Figure title; defaults to the expression.
    x_range, y_range : tuple[float, float]
        Visible window in domain units. The default matches a 34-column grid.

    Returns
    -------
    plotly.graph_objects.Figure
    """
    fig = go.Figure()
    xs, ys = _curve_xy(result)
    if xs:
        fig.add_trace(
            go.Scatter(
                x=xs,
                y=ys,
                mode="lines",
                name=result.expression,
                line=dict(color=CURVE_COLOR, width=2),
                connectgaps=False,
                hovertemplate="x=%{x:.2f}<br>y=%{y:.2f}<extra></extra>",
            )
        )

    if hit is not None:
        px, py = hit.point.x, hit.point.y
        fig.add_trace(
            go.Scatter(
                x=[0.0, px, None, px, px],
                y=[py, py, None, 0.0, py],
                mode="lines",
                name="guides",
                line=dict(color=GUIDE_COLOR, width=1, dash="dash"),
                hoverinfo="skip",
                showlegend=False,
            )
        )
        x_text, y_text = hit.readout
        fig.add_trace(
            go.Scatter(
                x=[px],
                y=[py],
                mode="markers+text",
                name="selection",
                marker=dict(color=MARKER_COLOR, size=8),
                text=[f"({x_text}, {y_text})"],
                textposition="top right",
                showlegend=False,
            )
        )

    fig.update_layout(
        title=title if title is not None else result.expression,
        template="plotly_white",
        showlegend=False,
        margin=dict(l=40, r=20, t=48, b=40),
        xaxis=_axis_layout(x_range),
        yaxis=dict(_axis_layout(y_range), scaleanchor="x", scaleratio=1),
    )
    return fig
