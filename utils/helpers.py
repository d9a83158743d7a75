from typing import Optional

import plotly.express as px
import plotly.graph_objects as go

from config import CHART_HEIGHT_PX


def safe_float(x, default: Optional[float] = None) -> Optional[float]:
    """float(x), or `default` for None, '' and anything unparsable."""
    try:
        if x is None or x == "":
            return default
        return float(x)
    except (TypeError, ValueError):
        return default


def fix_fig(fig: go.Figure, title: Optional[str] = None, height: int = CHART_HEIGHT_PX) -> go.Figure:
    """Apply the common chart styling."""
    fig.update_layout(
        height=height, autosize=False,
        margin=dict(l=60, r=40, t=60, b=60),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1,
                    bgcolor="rgba(255,255,255,0.8)", bordercolor="#ddd", borderwidth=1),
        paper_bgcolor="rgba(0,0,0,0)",
        font=dict(family="Arial, sans-serif", size=12, color="#333"),
        hoverlabel=dict(bgcolor="white", font_size=13, font_family="Arial, sans-serif"),
    )
    if title:
        fig.update_layout(title=dict(text=title, x=0.5, xanchor="center",
                                     font=dict(size=16, family="Arial, sans-serif", color="#2c3e50")))
    return fig


def empty_fig(title: str = "", height: int = CHART_HEIGHT_PX) -> go.Figure:
    return fix_fig(px.scatter(), title=title, height=height)
