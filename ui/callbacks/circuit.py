"""
ui/callbacks/circuit.py
=======================
Callbacks for Tab 1: circuit sizing, layout chart, spacing comparison
and material costs.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List

import dash_bootstrap_components as dbc
from dash import Input, Output, html

from config import KITCHEN_PROTOTYPE, PIPE_SPACING_OPTIONS
from domain.hydraulics import segments_to_frame
from services.circuit_service import (
    CircuitDesignParams, compare_spacings, solution_summary, solve_circuit,
)
from utils.helpers import empty_fig, fix_fig, safe_float
from utils.plotting import plot_budget_breakdown, plot_pipe_layout, plot_pressure_loss

logger = logging.getLogger(__name__)

PARAM_INPUTS = list(KITCHEN_PROTOTYPE.keys())


def collect_params(values: List[Any]) -> Dict[str, float]:
    """Map UI values onto CircuitDesignParams fields, falling back to the kitchen demo."""
    return {
        name: safe_float(v, KITCHEN_PROTOTYPE[name])
        for name, v in zip(PARAM_INPUTS, values)
    }


def _summary_block(summary: Dict[str, Any]) -> html.Div:
    items = [html.Li([html.Strong(f"{k}: "), str(v)]) for k, v in summary.items() if k != "warnings"]
    return html.Div([html.H5("Circuit summary"), html.Ul(items, className="mb-0")])


def register(app):

    @app.callback(
        Output("circuit-params-store", "data"),
        Output("circuit-summary", "children"),
        Output("circuit-warnings", "children"),
        Output("layout-chart", "figure"),
        Output("spacing-chart", "figure"),
        Output("budget-chart", "figure"),
        Output("segment-table", "columns"),
        Output("segment-table", "data"),
        Output("budget-table", "columns"),
        Output("budget-table", "data"),
        *[Input(name, "value") for name in PARAM_INPUTS],
        Input("room_id", "value"),
        Input("total_budget", "value"),
    )
    def compute_circuit(*args):
        *param_values, room_id, total_budget = args
        params_dict = collect_params(param_values)
        room_id = room_id or "room"
        budget_eur = safe_float(total_budget, 0.0)

        try:
            params = CircuitDesignParams.from_mapping(params_dict)
            solution = solve_circuit(params, room_id, budget_eur)
            comparison = compare_spacings(params, room_id, PIPE_SPACING_OPTIONS, budget_eur)
        except ValueError as e:
            logger.warning("Circuit design rejected: %s", e)
            alert = dbc.Alert(str(e), color="danger")
            empty = empty_fig()
            return None, "", alert, empty, empty, empty, [], [], [], []

        summary = solution_summary(solution, params.heat_output_required)
        alerts = [dbc.Alert(w, color="warning", className="mb-2") for w in summary["warnings"]]

        seg_df = segments_to_frame(solution.circuit)
        budget_df = solution.budget.to_frame()

        layout_fig = fix_fig(plot_pipe_layout(solution.circuit.segments,
                                              params.room_width, params.room_length))
        spacing_fig = fix_fig(plot_pressure_loss(comparison))
        budget_fig = fix_fig(plot_budget_breakdown(budget_df))

        return (
            {**params_dict, "room_id": room_id, "total_budget": budget_eur},
            _summary_block(summary),
            alerts,
            layout_fig, spacing_fig, budget_fig,
            [{"name": c, "id": c} for c in seg_df.columns], seg_df.to_dict("records"),
            [{"name": c, "id": c} for c in budget_df.columns], budget_df.to_dict("records"),
        )
