from __future__ import annotations

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from carbontrack.report_schema import CarbonReport

SCOPE_COLORS = {
    "Scope 1": "#059669",
    "Scope 2": "#3b82f6",
    "Scope 3": "#f59e0b",
}
TOP_SOURCE_LIMIT = 8


def format_amount(value: float) -> str:
    """Group thousands and keep at most three decimals, dropping trailing zeros."""
    text = f"{float(value):,.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def scope_frame(report: CarbonReport) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "scope": list(SCOPE_COLORS),
            "value": [report.breakdown.scope1, report.breakdown.scope2, report.breakdown.scope3],
        }
    )


def top_sources(report: CarbonReport, limit: int = TOP_SOURCE_LIMIT) -> pd.DataFrame:
    """Largest emission sources first, without reordering the report itself."""
    columns = ["source", "amount", "unit", "scope", "scope_label", "label"]
    if not report.sources:
        return pd.DataFrame(columns=columns)

    df = pd.DataFrame([source.to_dict() for source in report.sources])
    df["scope_label"] = "Scope " + df["scope"].astype(int).astype(str)
    df = df.sort_values("amount", ascending=False, kind="stable").head(limit).reset_index(drop=True)

    # repeated source names need distinct axis labels or plotly stacks them into one bar
    occurrence = df.groupby("source").cumcount()
    df["label"] = df["source"].where(occurrence == 0, df["source"] + " (" + (occurrence + 1).astype(str) + ")")
    return df[columns]


def build_scope_pie(report: CarbonReport) -> go.Figure:
    df = scope_frame(report)
    fig = go.Figure(
        data=[
            go.Pie(
                labels=df["scope"].tolist(),
                values=df["value"].astype(float).tolist(),
                hole=0.6,
                sort=False,
                marker={"colors": [SCOPE_COLORS[label] for label in df["scope"]]},
            )
        ]
    )
    fig.update_layout(title_text="Scope Breakdown", showlegend=True, margin={"t": 40, "b": 10, "l": 10, "r": 10})
    return fig


def build_sources_bar(report: CarbonReport, limit: int = TOP_SOURCE_LIMIT) -> go.Figure:
    """Horizontal bar chart of the top sources, largest at the top."""
    df = top_sources(report, limit=limit)
    if df.empty:
        return go.Figure()

    fig = px.bar(
        df,
        x="amount",
        y="label",
        color="scope_label",
        orientation="h",
        color_discrete_map=SCOPE_COLORS,
        hover_data=["source", "unit"],
        title=f"Emissions by Source (Top {limit})",
    )
    fig.update_layout(yaxis={"categoryorder": "total ascending", "title": "source"}, legend_title_text="Scope")
    return fig
