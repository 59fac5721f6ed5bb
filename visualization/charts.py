"""Plotly chart builders for the SiteLedger views."""

from __future__ import annotations

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from core.formatting import CURRENCY_SYMBOL

from .theme import theme_tokens

TOKENS = theme_tokens()

SERIES_COLORS = {"Budgeted": TOKENS.budgeted_color, "Spent": TOKENS.spent_color}

__all__ = [
    "build_budget_share_chart",
    "build_cost_chart",
]


def _empty_plotly_figure(message: str) -> go.Figure:
    fig = go.Figure()
    fig.update_layout(
        annotations=[
            dict(
                text=message,
                x=0.5,
                y=0.5,
                xref="paper",
                yref="paper",
                showarrow=False,
                font=dict(color=TOKENS.muted_color, size=14, family=TOKENS.label_font),
            )
        ],
        xaxis=dict(visible=False),
        yaxis=dict(visible=False),
        margin=dict(l=0, r=0, t=20, b=0),
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
    )
    return fig


def build_cost_chart(
    chart_df: pd.DataFrame,
    currency_symbol: str | None = CURRENCY_SYMBOL,
) -> go.Figure:
    """Render the grouped "Budgeted vs Spent" bar chart.

    ``chart_df`` is the long frame produced by :func:`analytics.totals.chart_frame`
    with ``Name``, ``Series`` and ``Value`` columns.
    """

    if chart_df.empty:
        return _empty_plotly_figure("No cost data to display yet.")

    currency_prefix = f"{currency_symbol} " if currency_symbol else ""
    fig = px.bar(
        chart_df,
        x="Name",
        y="Value",
        color="Series",
        barmode="group",
        color_discrete_map=SERIES_COLORS,
        category_orders={"Series": list(SERIES_COLORS)},
    )
    fig.update_traces(
        hovertemplate=f"%{{x}}<br>{currency_prefix}%{{y:,.2f}}<extra>%{{fullData.name}}</extra>",
    )
    fig.update_layout(
        title="",
        xaxis_title="",
        yaxis_title="Amount",
        margin=dict(l=0, r=0, t=20, b=0),
        legend=dict(title="", orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1.0),
        xaxis=dict(showgrid=False),
        yaxis=dict(showgrid=True, gridcolor=TOKENS.gridline, zeroline=False),
        bargap=0.3,
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
        font=dict(color=TOKENS.label_color, family=TOKENS.label_font, size=TOKENS.label_size),
    )
    return fig


def build_budget_share_chart(chart_df: pd.DataFrame) -> go.Figure:
    """Render a donut of each category's share of the budgeted total."""

    budgeted = chart_df[chart_df["Series"] == "Budgeted"] if not chart_df.empty else chart_df
    if budgeted.empty or float(budgeted["Value"].sum()) <= 0:
        return _empty_plotly_figure("Add budget items to see the split by category.")

    palette = list(TOKENS.category_palette)
    repeats = (len(budgeted) // len(palette)) + 1
    fig = px.pie(
        budgeted,
        names="Name",
        values="Value",
        hole=0.55,
        color_discrete_sequence=(palette * repeats)[: len(budgeted)],
    )
    fig.update_traces(
        textposition="inside",
        texttemplate="%{label}<br>%{percent:.1%}",
        hovertemplate="%{label}<br>Budgeted: %{value:,.2f}<extra></extra>",
        marker=dict(line=dict(color=TOKENS.slice_border, width=2)),
    )
    fig.update_layout(
        margin=dict(l=0, r=0, t=0, b=0),
        legend=dict(
            title="",
            orientation="v",
            yanchor="middle",
            y=0.5,
            xanchor="left",
            x=1.05,
            font=dict(color=TOKENS.label_color, family=TOKENS.label_font, size=TOKENS.label_size),
        ),
    )
    return fig
