"""
app.py
======
Dash entry point for the underfloor heating retrofit planner.

    python app.py            # http://127.0.0.1:8050
"""
import logging
import os

import dash_bootstrap_components as dbc
from dash import Dash

from logging_config import setup_logging
from ui.callbacks import circuit, simulation
from ui.layout import build_layout

setup_logging(level=logging.DEBUG if os.environ.get("DASH_DEBUG") else logging.INFO)

app = Dash(
    __name__,
    external_stylesheets=[dbc.themes.BOOTSTRAP, dbc.icons.BOOTSTRAP],
    suppress_callback_exceptions=True,
    title="Underfloor Heating Retrofit Planner",
)
server = app.server
app.layout = build_layout()

circuit.register(app)
simulation.register(app)


if __name__ == "__main__":
    app.run(debug=bool(os.environ.get("DASH_DEBUG")), port=int(os.environ.get("PORT", 8050)))
