"""
ui/callbacks/simulation.py
==========================
Callbacks for Tab 2: floor heat-grid simulation of the designed circuit.
"""
from __future__ import annotations

import logging

import dash_bootstrap_components as dbc
from dash import Input, Output, State, html, no_update

from config import SIMULATION_CELL_SIZE, SIMULATION_MAX_STEPS
from domain.heat_load import Room, Wall, Window, upgrade_windows
from services.circuit_service import CircuitDesignParams, material_items, solve_circuit
from services.simulation_service import assess_retrofit, simulate_room
from utils.helpers import fix_fig, safe_float
from utils.plotting import plot_temperature_heatmap

logger = logging.getLogger(__name__)


def build_room(room_id: str, area: float, wall_length: float, wall_height: float,
               window_area: float, glazing_type: int) -> Room:
    """Single-exterior-wall room with one window of the given area."""
    windows = []
    if window_area > 0:
        windows.append(Window(id="window_1", width=window_area, height=1.0, glazing_type=glazing_type))
    return Room(
        id=room_id, name=room_id, area=area, height=wall_height,
        walls=[Wall(id="wall_1", length=wall_length, height=wall_height)],
        windows=windows,
    )


def register(app):

    @app.callback(
        Output("simulation-summary", "children"),
        Output("heatmap-chart", "figure"),
        Input("run-simulation-btn", "n_clicks"),
        State("circuit-params-store", "data"),
        State("outside_temperature", "value"),
        State("wall_length", "value"),
        State("wall_height", "value"),
        State("window_area", "value"),
        State("glazing_type", "value"),
        State("max_steps", "value"),
        prevent_initial_call=True,
    )
    def run_simulation(n_clicks, params_data, tout, wall_length, wall_height,
                       window_area, glazing_type, max_steps):
        if not params_data:
            return dbc.Alert("Design a valid circuit in Tab 1 first.", color="warning"), no_update

        room_id = params_data.get("room_id", "room")
        try:
            params = CircuitDesignParams.from_mapping(params_data)
            solution = solve_circuit(params, room_id, params_data.get("total_budget", 0.0))
        except ValueError as e:
            return dbc.Alert(str(e), color="danger"), no_update

        glazing = int(glazing_type or 1)
        outside = safe_float(tout, -10.0)
        existing = build_room(
            room_id, params.room_area,
            safe_float(wall_length, 5.0), safe_float(wall_height, 2.5),
            safe_float(window_area, 0.0), 1,
        )
        result = simulate_room(
            solution.circuit, upgrade_windows(existing, glazing), params.room_width, params.room_length,
            outside_temperature=outside,
            max_steps=int(safe_float(max_steps, SIMULATION_MAX_STEPS)),
        )
        logger.info("Simulation for %s: %.2f °C average, state=%s",
                    room_id, result.average_temperature, result.state.value)
        retrofit = assess_retrofit(
            solution.circuit, existing, glazing, result,
            material_items(params, solution.total_length),
            params_data.get("total_budget", 0.0), outside,
        )

        status = dbc.Alert("✓ Goal met" if result.goal_met else "✗ Goal not met",
                           color="success" if result.goal_met else "danger")
        details = html.Ul([
            html.Li(f"Average floor temperature: {result.average_temperature:.1f} °C"),
            html.Li(f"Required flow temperature: {result.required_flow_temperature:.1f} °C"),
            html.Li(f"Room heat loss: {result.heat_loss:.0f} W"),
            html.Li(f"Steps: {result.steps_run} ({result.state.value})"),
            html.Li(f"Heat loss before / after upgrade: {retrofit.heat_loss_before:.0f} / "
                    f"{retrofit.heat_loss_after:.0f} W ({retrofit.specific_heat_loss:.0f} W/m²)"),
            html.Li(f"Retrofit cost incl. windows and labour: {retrofit.budget.total_spent:.0f} € "
                    f"(remaining {retrofit.budget.remaining_budget:.0f} €)"),
            html.Li(f"Cost per Kelvin of floor warming: {retrofit.cost_per_kelvin:.0f} €/K"),
        ])
        alerts = [dbc.Alert(w, color="warning", className="mb-2") for w in result.warnings]

        fig = plot_temperature_heatmap(result.heatmap, SIMULATION_CELL_SIZE, solution.circuit.segments)
        return html.Div([status, details, *alerts]), fix_fig(fig)
