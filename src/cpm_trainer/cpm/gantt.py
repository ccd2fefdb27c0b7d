from typing import Mapping, Optional, Sequence

import numpy as np
import plotly.graph_objects as go

from cpm_trainer.cpm.engine import Schedule
from cpm_trainer.models import Task

# -----------------------------------------------------------
# Visual constants
# -----------------------------------------------------------
FLAT_COLORS = {
    "red": "#E53935",     # critical
    "slate": "#90A4AE",   # non-critical
    "grey": "#9CA3AF",    # links
    "amber": "#FB8C00",   # pinned start
}

MIN_AXIS_UNITS = 12


def axis_units(schedule: Schedule) -> int:
    return int(max(np.ceil(schedule.project_duration) + 3, MIN_AXIS_UNITS))


def build_gantt_figure(
    tasks: Sequence[Task],
    schedule: Schedule,
    min_start: Optional[Mapping[str, float]] = None,
) -> go.Figure:
    """
    Horizontal bar chart of the schedule, one row per task in list order.

    Critical bars and links between two critical tasks are red. Tasks held
    back by a drag override get an amber marker at the pinned start.
    """
    min_start = min_start or {}
    rows = [t for t in tasks if t.id in schedule.es]
    labels = [f"{t.id} – {t.name}" for t in rows]
    row_of = {t.id: label for t, label in zip(rows, labels)}

    fig = go.Figure()
    fig.add_trace(go.Bar(
        y=labels,
        x=[max(t.duration, 0) for t in rows],
        base=[schedule.es[t.id] for t in rows],
        orientation="h",
        marker_color=[
            FLAT_COLORS["red"] if schedule.is_critical(t.id) else FLAT_COLORS["slate"]
            for t in rows
        ],
        text=[f"dur {t.duration} • slack {schedule.slack[t.id]:g}" for t in rows],
        textposition="inside",
        customdata=[
            [schedule.es[t.id], schedule.ef[t.id], schedule.ls[t.id], schedule.lf[t.id]]
            for t in rows
        ],
        hovertemplate=(
            "%{y}<br>ES %{customdata[0]} · EF %{customdata[1]}"
            "<br>LS %{customdata[2]} · LF %{customdata[3]}<extra></extra>"
        ),
        showlegend=False,
    ))

    pinned = [t for t in rows if t.id in min_start]
    if pinned:
        fig.add_trace(go.Scatter(
            y=[row_of[t.id] for t in pinned],
            x=[min_start[t.id] for t in pinned],
            mode="markers",
            marker=dict(symbol="line-ns-open", size=22, color=FLAT_COLORS["amber"]),
            name="Pinned start",
            hovertemplate="%{y}<br>pinned at %{x}<extra></extra>",
        ))

    # Dependency arrows: predecessor finish -> successor start
    for t in rows:
        for p in t.deps:
            if p not in row_of:
                continue
            both_critical = schedule.is_critical(p) and schedule.is_critical(t.id)
            fig.add_annotation(
                x=schedule.es[t.id], y=row_of[t.id],
                ax=schedule.ef[p], ay=row_of[p],
                xref="x", yref="y", axref="x", ayref="y",
                showarrow=True, arrowhead=2, arrowwidth=2,
                arrowcolor=FLAT_COLORS["red"] if both_critical else FLAT_COLORS["grey"],
                text="",
            )

    units = axis_units(schedule)
    fig.update_xaxes(
        range=[0, units],
        tickvals=np.arange(0, units + 1).tolist(),
        title="Time units",
        showgrid=True,
    )
    fig.update_yaxes(autorange="reversed", categoryorder="array", categoryarray=labels)
    fig.update_layout(
        title=f"Project duration: {schedule.project_duration:g}",
        height=max(240, 80 * len(rows)),
        margin=dict(l=20, r=20, t=40, b=20),
        bargap=0.35,
    )
    return fig
