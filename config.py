"""
config.py
=========
Application-wide constants: design defaults, demo room, simulation
settings and UI helpers. No business logic lives here.
"""
from __future__ import annotations
from typing import Dict, List

# ---------------------------------------------------------------------------
# Design defaults
# ---------------------------------------------------------------------------
DEFAULT_BUDGET_EUR: float    = 15000.0
STANDARD_ROOM_TEMP: float    = 21.0     # °C – comfort target
MAX_SUPPLY_TEMP:    float    = 35.0     # °C – protects click-laminate flooring
DESIGN_OUTSIDE_TEMP: float   = -10.0    # °C – frost condition

PIPE_SPACING_OPTIONS: List[float]  = [0.10, 0.125, 0.15, 0.20, 0.25]   # m (VA)
PIPE_DIAMETER_OPTIONS: List[float] = [0.014, 0.016, 0.017, 0.020]      # m

# Kitchen prototype: 13 m² at 12.5 cm VA, 35/30 °C, ~100 W/m².
KITCHEN_PROTOTYPE: Dict[str, float] = {
    "room_area":            13.0,
    "pipe_spacing":         0.125,
    "room_width":           3.5,
    "room_length":          3.7,
    "pipe_diameter":        0.016,
    "supply_temperature":   35.0,
    "return_temperature":   30.0,
    "heat_output_required": 1300.0,
}

# ---------------------------------------------------------------------------
# Heat-grid simulation
# ---------------------------------------------------------------------------
SIMULATION_CELL_SIZE:   float = 0.125   # m
SIMULATION_MAX_STEPS:   int   = 500
SOURCE_SAMPLES_PER_M:   int   = 10      # heat sources per metre of pipe
COMFORT_BAND: Dict[str, float] = {"min": 20.5, "max": 21.5}   # °C

# ---------------------------------------------------------------------------
# UI display
# ---------------------------------------------------------------------------
CHART_HEIGHT_PX = 460
GLAZING_OPTIONS = [
    {"label": "Single (1-fach)", "value": 1},
    {"label": "Double (2-fach)", "value": 2},
    {"label": "Triple (3-fach)", "value": 3},
]
