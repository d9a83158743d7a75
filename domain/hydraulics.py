"""
domain/hydraulics.py
====================
Underfloor-heating circuit model and its hydraulic evaluation.

Pressure loss follows the Darcy-Weisbach equation with the Swamee-Jain
friction factor. No Dash, no UI, no business-logic orchestration.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import pandas as pd

from domain.geometry import Arc, PipeSegment, Spline, segment_length

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
WATER_DENSITY:   float = 998.2      # kg/m³ at 20 °C
WATER_VISCOSITY: float = 0.001002   # Pa·s  at 20 °C
PIPE_ROUGHNESS:  float = 1.5e-6     # m – PE-Xa plastic pipe

CRITICAL_PRESSURE_LOSS: float = 300.0   # mbar – pump overload threshold
PA_TO_MBAR:             float = 0.01


# ---------------------------------------------------------------------------
# Circuit
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class HeatingCircuit:
    """
    One underfloor-heating loop.

    Parameters
    ----------
    id                 : Circuit label (e.g. 'circuit_kitchen')
    room_id            : Room served by this circuit
    segments           : Pipe segments in flow order
    flow_rate          : Volumetric flow   [L/h]
    supply_temperature : Flow temperature  [°C]
    return_temperature : Return temperature [°C]
    """

    id: str
    room_id: str
    segments: Tuple[PipeSegment, ...]
    flow_rate: float
    supply_temperature: float
    return_temperature: float

    @property
    def length(self) -> float:
        return circuit_length(self)

    @property
    def pressure_loss(self) -> float:
        return pressure_loss(self)

    @property
    def is_critical(self) -> bool:
        return is_critical(self)


# ---------------------------------------------------------------------------
# Flow relations
# ---------------------------------------------------------------------------

def circuit_length(circuit: HeatingCircuit) -> float:
    """Total pipe length of the circuit [m]."""
    return sum(segment_length(s) for s in circuit.segments)


def reynolds(velocity: float, diameter: float) -> float:
    """Reynolds number (–) for water at 20 °C."""
    return WATER_DENSITY * velocity * diameter / WATER_VISCOSITY


def friction_factor(re: float, diameter: float) -> float:
    """
    Darcy friction factor (–) after Swamee-Jain.

    Only valid for turbulent flow; laminar flow is not special-cased.
    """
    term_roughness = PIPE_ROUGHNESS / (3.7 * diameter)
    term_reynolds  = 5.74 / re ** 0.9
    return 0.25 / math.log10(term_roughness + term_reynolds) ** 2


def flow_velocity(flow_rate_lph: float, diameter: float) -> float:
    """Mean water velocity in a round pipe [m/s]."""
    area = math.pi * (diameter / 2.0) ** 2
    if area <= 0:
        return 0.0
    return flow_rate_lph / 3600.0 / 1000.0 / area


def pressure_loss_from_values(length: float, diameter: float, flow_rate_lph: float) -> float:
    """
    Friction loss of a single-diameter pipe run [mbar].

    Parameters
    ----------
    length        : Pipe length         [m]
    diameter      : Internal diameter   [m]
    flow_rate_lph : Volumetric flow     [L/h]
    """
    if diameter <= 0 or flow_rate_lph <= 0:
        return 0.0
    velocity = flow_velocity(flow_rate_lph, diameter)
    f = friction_factor(reynolds(velocity, diameter), diameter)
    loss_pa = f * (length / diameter) * (WATER_DENSITY * velocity ** 2 / 2.0)
    return loss_pa * PA_TO_MBAR


def pressure_loss(circuit: HeatingCircuit) -> float:
    """
    Friction loss of the whole circuit [mbar].

    The first segment's diameter stands in for the circuit; circuits are
    assumed to be laid with a single pipe size.
    """
    if not circuit.segments:
        return 0.0
    return pressure_loss_from_values(
        circuit_length(circuit), circuit.segments[0].diameter, circuit.flow_rate,
    )


def is_critical(circuit: HeatingCircuit) -> bool:
    """True when the circuit would overload a standard circulation pump."""
    return pressure_loss(circuit) > CRITICAL_PRESSURE_LOSS


def water_volume(circuit: HeatingCircuit) -> float:
    """Water content of the circuit [litres]."""
    if not circuit.segments:
        return 0.0
    r_m = circuit.segments[0].diameter / 2.0
    return math.pi * r_m ** 2 * circuit_length(circuit) * 1000.0


# ---------------------------------------------------------------------------
# Tabular export
# ---------------------------------------------------------------------------

def segments_to_frame(circuit: HeatingCircuit) -> pd.DataFrame:
    """One row per segment, ready for a DataTable."""
    rows = []
    for s in circuit.segments:
        if isinstance(s.shape, Arc):
            shape = "arc"
        elif isinstance(s.shape, Spline):
            shape = "spline"
        else:
            shape = "straight"
        rows.append({
            "Segment":      s.id,
            "Shape":        shape,
            "Start x (m)":  s.start.x,
            "Start y (m)":  s.start.y,
            "End x (m)":    s.end.x,
            "End y (m)":    s.end.y,
            "Diameter (mm)": round(s.diameter * 1000.0, 1),
            "Length (m)":   round(segment_length(s), 3),
        })
    columns = ["Segment", "Shape", "Start x (m)", "Start y (m)", "End x (m)",
               "End y (m)", "Diameter (mm)", "Length (m)"]
    return pd.DataFrame(rows, columns=columns)
