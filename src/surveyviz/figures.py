"""Plotly figure builders for the survey charts.

Every builder returns a Plotly figure dict (``fig.to_dict()``, never
``go.Figure``) ready for ``ui.plotly(...)`` / ``update_figure(...)``.
Inputs are the frames produced by ``surveyviz.algorithms.survey_stats``;
an empty frame gives an empty but valid figure.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Sequence

import numpy as np
import pandas as pd
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from surveyviz.algorithms.force_layout import Particle
from surveyviz.algorithms.survey_stats import ViolinGroup
from surveyviz.chart_config import ChartConfig

# Bubble radius range in pixels (square-root scale of respondent count).
BUBBLE_RADIUS = (5.0, 25.0)

# Fraction of a category slot taken by half a violin.
VIOLIN_HALF_WIDTH = 0.4


def _base_layout(config: ChartConfig, **kwargs: Any) -> dict[str, Any]:
    m = config.margin
    layout: dict[str, Any] = dict(
        width=config.width,
        height=config.height,
        margin=dict(l=m["left"], r=m["right"], t=m["top"], b=m["bottom"]),
        showlegend=False,
        template="plotly_white",
    )
    layout.update(kwargs)
    return layout


def age_histogram_figure(hist: pd.DataFrame, config: Optional[ChartConfig] = None) -> dict:
    """Bars of respondents per age bin (columns x0, x1, count)."""
    config = config or ChartConfig()
    fig = go.Figure()
    if len(hist) > 0:
        x0 = hist["x0"].to_numpy(dtype=float)
        x1 = hist["x1"].to_numpy(dtype=float)
        fig.add_trace(go.Bar(
            x=((x0 + x1) / 2).tolist(),
            y=hist["count"].astype(int).tolist(),
            width=(x1 - x0).tolist(),
            marker_color=config.primary_color,
            customdata=np.stack([x0, x1], axis=-1).tolist(),
            hovertemplate="Age %{customdata[0]}-%{customdata[1]}: %{y}<extra></extra>",
        ))
        ymax = float(hist["count"].max()) * 1.1
    else:
        ymax = 1.0
    fig.update_layout(**_base_layout(
        config,
        bargap=0.02,
        xaxis=dict(title="Age"),
        yaxis=dict(title="Respondents", range=[0.0, ymax]),
    ))
    return fig.to_dict()


def platform_bar_figure(platforms: pd.DataFrame, config: Optional[ChartConfig] = None) -> dict:
    """Bars of respondents per streaming platform (columns platform, count)."""
    config = config or ChartConfig()
    fig = go.Figure()
    if len(platforms) > 0:
        fig.add_trace(go.Bar(
            x=platforms["platform"].astype(str).tolist(),
            y=platforms["count"].astype(int).tolist(),
            marker_color=config.primary_color,
        ))
    fig.update_layout(**_base_layout(
        config,
        xaxis=dict(title="Primary streaming service", tickangle=-45),
        yaxis=dict(title="Respondents"),
    ))
    return fig.to_dict()


def violin_outline(group: ViolinGroup, position: float, half_width: float = VIOLIN_HALF_WIDTH) -> tuple[list[float], list[float]]:
    """Closed silhouette of a violin centred on ``position``.

    The right edge follows the density curve scaled so the widest point is
    ``half_width``; the left edge mirrors it.
    """
    ys = [p.x for p in group.curve]
    peak = group.max_density
    scale = half_width / peak if peak > 0 else 0.0
    right = [position + p.density * scale for p in group.curve]
    left = [position - p.density * scale for p in reversed(group.curve)]
    return right + left, ys + ys[::-1]


def violin_figure(
    groups: Sequence[ViolinGroup],
    config: Optional[ChartConfig] = None,
    *,
    y_title: str = "Hours per day",
) -> dict:
    """Filled violins, one per group, with a median marker."""
    config = config or ChartConfig()
    fig = go.Figure()
    for i, group in enumerate(groups):
        color = config.color_scale[i % len(config.color_scale)]
        xs, ys = violin_outline(group, float(i))
        fig.add_trace(go.Scatter(
            x=xs,
            y=ys,
            mode="lines",
            fill="toself",
            line=dict(color=color),
            name=group.name,
            hoverinfo="skip",
        ))
        fig.add_trace(go.Scatter(
            x=[float(i)],
            y=[group.median],
            mode="markers",
            marker=dict(color="white", line=dict(color=color, width=2)),
            name=f"{group.name} median",
            customdata=[[group.count, group.mean]],
            hovertemplate="median %{y:.1f} h<br>mean %{customdata[1]:.1f} h<br>n=%{customdata[0]}<extra></extra>",
        ))
    fig.update_layout(**_base_layout(
        config,
        xaxis=dict(
            title="Age group",
            tickmode="array",
            tickvals=list(range(len(groups))),
            ticktext=[g.name for g in groups],
        ),
        yaxis=dict(title=y_title, range=list(config.violin_domain)),
    ))
    return fig.to_dict()


def work_music_figure(proportions: pd.DataFrame, config: Optional[ChartConfig] = None) -> dict:
    """Percentage listening while working per age bucket, coloured red to green."""
    config = config or ChartConfig()
    fig = go.Figure()
    if len(proportions) > 0:
        values = proportions["proportion"].astype(float).tolist()
        fig.add_trace(go.Bar(
            x=proportions["ageGroup"].astype(str).tolist(),
            y=values,
            customdata=proportions["total"].astype(int).tolist(),
            hovertemplate="%{x}: %{y:.1f}% of %{customdata}<extra></extra>",
            marker=dict(color=values, colorscale="RdYlGn", cmin=0, cmax=100),
        ))
    fig.update_layout(**_base_layout(
        config,
        xaxis=dict(title="Age group"),
        yaxis=dict(title="Listening while working (%)", range=[0, 100]),
    ))
    return fig.to_dict()


def word_cloud_figure(
    particles: Iterable[Particle],
    config: Optional[ChartConfig] = None,
    *,
    extent: Optional[tuple[float, float]] = None,
) -> dict:
    """Labels drawn at their particle positions, font size = particle mass.

    The y axis is reversed so positions read as screen coordinates around a
    centred origin. ``extent`` is the (width, height) of the visible area.
    """
    config = config or ChartConfig()
    particles = list(particles)
    width, height = extent or (float(config.inner_width), float(config.inner_height))
    fig = go.Figure()
    if particles:
        fig.add_trace(go.Scatter(
            x=[p.x for p in particles],
            y=[p.y for p in particles],
            mode="text",
            text=[p.label for p in particles],
            textfont=dict(size=[p.mass for p in particles], color=config.primary_color),
            hoverinfo="text",
        ))
    fig.update_layout(**_base_layout(
        config,
        xaxis=dict(visible=False, range=[-width / 2, width / 2]),
        yaxis=dict(visible=False, range=[height / 2, -height / 2]),
    ))
    return fig.to_dict()


def pie_figure(shares: Mapping[str, pd.DataFrame], config: Optional[ChartConfig] = None) -> dict:
    """Side-by-side donuts, one per question (columns answer, count)."""
    config = config or ChartConfig()
    titles = list(shares.keys())
    fig = make_subplots(
        rows=1,
        cols=max(1, len(titles)),
        specs=[[{"type": "domain"} for _ in range(max(1, len(titles)))]],
        subplot_titles=titles or None,
    )
    for col, (title, df) in enumerate(shares.items(), start=1):
        if len(df) == 0:
            continue
        fig.add_trace(go.Pie(
            labels=df["answer"].astype(str).tolist(),
            values=df["count"].astype(int).tolist(),
            name=title,
            hole=0.3,
            sort=False,
            marker=dict(colors=config.color_scale),
        ), row=1, col=col)
    fig.update_layout(**_base_layout(config, showlegend=True))
    return fig.to_dict()


def heatmap_figure(matrix: pd.DataFrame, config: Optional[ChartConfig] = None) -> dict:
    """Genre x factor heatmap of mean scores; one row per factor."""
    config = config or ChartConfig()
    fig = go.Figure()
    if len(matrix) > 0:
        z = matrix.to_numpy(dtype=float).T
        fig.add_trace(go.Heatmap(
            z=z.tolist(),
            x=[str(g) for g in matrix.index],
            y=[str(c) for c in matrix.columns],
            colorscale="Reds",
            zmin=float(np.min(z)),
            zmax=float(np.max(z)),
        ))
    fig.update_layout(**_base_layout(
        config,
        xaxis=dict(title="Favourite genre", tickangle=-45),
        yaxis=dict(title="Factor"),
    ))
    return fig.to_dict()


def bubble_radii(totals: Sequence[float], radius_range: tuple[float, float] = BUBBLE_RADIUS) -> list[float]:
    """Square-root scale from ``[0, max(totals)]`` to ``radius_range``."""
    values = np.asarray(totals, dtype=float)
    lo, hi = radius_range
    if len(values) == 0:
        return []
    top = float(values.max())
    if top <= 0:
        return [lo] * len(values)
    return (lo + (hi - lo) * np.sqrt(values / top)).tolist()


def bubble_figure(bubbles: pd.DataFrame, config: Optional[ChartConfig] = None) -> dict:
    """Average BPM (x) vs percent reporting improvement (y), sized by respondents."""
    config = config or ChartConfig()
    fig = go.Figure()
    xaxis: dict[str, Any] = dict(title="Average BPM")
    if len(bubbles) > 0:
        bpm = bubbles["bpm"].astype(float)
        improvement = bubbles["improvement"].astype(float).tolist()
        radii = bubble_radii(bubbles["total"].astype(float).tolist())
        fig.add_trace(go.Scatter(
            x=bpm.tolist(),
            y=improvement,
            mode="markers",
            text=bubbles["genre"].astype(str).tolist(),
            customdata=bubbles["total"].astype(int).tolist(),
            hovertemplate="%{text}<br>Average BPM: %{x:.1f}<br>Improvement: %{y:.1f}% (n=%{customdata})<extra></extra>",
            marker=dict(
                size=[2 * r for r in radii],
                color=improvement,
                colorscale="RdYlGn",
                cmin=0,
                cmax=100,
                opacity=0.7,
            ),
        ))
        xaxis["range"] = [float(bpm.min()) * 0.95, float(bpm.max()) * 1.05]
    fig.update_layout(**_base_layout(
        config,
        xaxis=xaxis,
        yaxis=dict(title="Reporting improvement (%)", range=[0, 100], ticksuffix="%"),
    ))
    return fig.to_dict()
