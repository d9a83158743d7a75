"""
ui/layout.py
============
All Dash layout components: navbar, tabs, and their child cards.

Callbacks are NOT defined here – see ui/callbacks/.
This file only builds static (or mostly-static) component trees.
"""
from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html, dash_table

from config import (
    CHART_HEIGHT_PX, DEFAULT_BUDGET_EUR, DESIGN_OUTSIDE_TEMP, GLAZING_OPTIONS,
    KITCHEN_PROTOTYPE, PIPE_DIAMETER_OPTIONS, PIPE_SPACING_OPTIONS, SIMULATION_MAX_STEPS,
)

# ---------------------------------------------------------------------------
# Navbar
# ---------------------------------------------------------------------------
navbar = dbc.Navbar(
    dbc.Container([
        dbc.NavbarBrand("Underfloor Heating Retrofit Planner", className="ms-2"),
    ], fluid=True),
    color="dark", dark=True, sticky="top",
)

_TABLE_STYLE = dict(
    style_table={"overflowX": "auto"},
    style_header={"backgroundColor": "#f8f9fa", "fontWeight": "bold", "textAlign": "center"},
    style_cell={"padding": "8px", "textAlign": "left", "border": "1px solid #dee2e6"},
    style_data_conditional=[{"if": {"row_index": "odd"}, "backgroundColor": "rgb(248,248,248)"}],
)


def _number(id_: str, label: str, value: float, step: float = 0.1, **kwargs) -> html.Div:
    return html.Div([
        dbc.Label(label),
        dbc.Input(id=id_, type="number", value=value, step=step, className="mb-2", **kwargs),
    ])


def chart_card(title: str, graph_id: str, md: int = 6) -> dbc.Col:
    return dbc.Col(dbc.Card([
        dbc.CardHeader(title),
        dbc.CardBody(dcc.Graph(id=graph_id, style={"height": f"{CHART_HEIGHT_PX}px"})),
    ], className="mb-3"), md=md)


# ---------------------------------------------------------------------------
# Tab 1 – Circuit design
# ---------------------------------------------------------------------------
def _room_card() -> dbc.Card:
    p = KITCHEN_PROTOTYPE
    return dbc.Card([
        dbc.CardHeader("📐 Room"),
        dbc.CardBody([
            dbc.Label("Room id"),
            dbc.Input(id="room_id", type="text", value="kitchen", className="mb-2"),
            _number("room_width",  "Width (m)",  p["room_width"]),
            _number("room_length", "Length (m)", p["room_length"]),
            _number("room_area",   "Floor area (m²)", p["room_area"]),
            _number("heat_output_required", "Heat demand (W)", p["heat_output_required"], step=10),
        ]),
    ], className="mb-3")


def _circuit_card() -> dbc.Card:
    p = KITCHEN_PROTOTYPE
    return dbc.Card([
        dbc.CardHeader("🔧 Circuit"),
        dbc.CardBody([
            dbc.Label("Pipe spacing (VA)"),
            dcc.Dropdown(id="pipe_spacing", clearable=False, className="mb-2",
                         options=[{"label": f"{v * 100:g} cm", "value": v} for v in PIPE_SPACING_OPTIONS],
                         value=p["pipe_spacing"]),
            dbc.Label("Pipe diameter"),
            dcc.Dropdown(id="pipe_diameter", clearable=False, className="mb-2",
                         options=[{"label": f"{v * 1000:g} mm", "value": v} for v in PIPE_DIAMETER_OPTIONS],
                         value=p["pipe_diameter"]),
            _number("supply_temperature", "Supply temperature (°C)", p["supply_temperature"], step=0.5),
            _number("return_temperature", "Return temperature (°C)", p["return_temperature"], step=0.5),
            _number("total_budget", "Budget (€)", DEFAULT_BUDGET_EUR, step=100),
        ]),
    ], className="mb-3")


def build_circuit_tab() -> dbc.Tab:
    return dbc.Tab(
        label="1️⃣ Circuit design", tab_id="tab-1",
        children=[html.Div([
            dbc.Row([
                dbc.Col([_room_card(), _circuit_card()], md=4),
                dbc.Col([
                    html.Div(id="circuit-warnings"),
                    html.Div(id="circuit-summary", className="alert alert-info"),
                    dbc.Row([chart_card("Pipe Layout", "layout-chart", md=12)], className="g-3"),
                ], md=8),
            ]),
            dbc.Row([chart_card("Spacing Comparison", "spacing-chart"),
                     chart_card("Material Costs", "budget-chart")], className="g-3"),
            html.H6("Segments", className="mt-4 mb-3"),
            dash_table.DataTable(id="segment-table", page_size=15, **_TABLE_STYLE),
            html.H6("Budget", className="mt-4 mb-3"),
            dash_table.DataTable(id="budget-table", page_size=10, **_TABLE_STYLE),
        ], className="p-4")]
    )


# ---------------------------------------------------------------------------
# Tab 2 – Floor simulation
# ---------------------------------------------------------------------------
def _envelope_card() -> dbc.Card:
    return dbc.Card([
        dbc.CardHeader("🏠 Envelope"),
        dbc.CardBody([
            _number("outside_temperature", "Outside temperature (°C)", DESIGN_OUTSIDE_TEMP, step=1),
            _number("wall_length", "Exterior wall length (m)", 5.0),
            _number("wall_height", "Wall height (m)", 2.5),
            _number("window_area", "Window area (m²)", 2.1),
            dbc.Label("Window upgrade (existing: single glazing)"),
            dcc.Dropdown(id="glazing_type", options=GLAZING_OPTIONS, value=1,
                         clearable=False, className="mb-2"),
            _number("max_steps", "Max. simulation steps", SIMULATION_MAX_STEPS, step=100, min=1),
            dbc.Button("▶ Run simulation", id="run-simulation-btn", color="primary", className="mt-2"),
        ]),
    ], className="mb-3")


def build_simulation_tab() -> dbc.Tab:
    return dbc.Tab(
        label="2️⃣ Floor simulation", tab_id="tab-2",
        children=[html.Div([
            dbc.Row([
                dbc.Col(_envelope_card(), md=4),
                dbc.Col([
                    dcc.Loading(html.Div(id="simulation-summary")),
                    dbc.Row([chart_card("Floor Temperature", "heatmap-chart", md=12)], className="g-3"),
                ], md=8),
            ]),
        ], className="p-4")]
    )


# ---------------------------------------------------------------------------
# Stores / root
# ---------------------------------------------------------------------------
def build_stores() -> list:
    return [
        dcc.Store(id="circuit-params-store"),
    ]


def build_layout() -> dbc.Container:
    return dbc.Container([
        navbar,
        *build_stores(),
        dbc.Tabs(id="tabs", active_tab="tab-1", className="justify-content-center",
                 children=[build_circuit_tab(), build_simulation_tab()]),
    ], fluid=True)
