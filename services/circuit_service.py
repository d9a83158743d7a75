"""
services/circuit_service.py
===========================
Sizes one underfloor-heating circuit for a room.

Flow sizing → serpentine layout → hydraulic check → heat-output estimate
→ material costs. Pure functions; the only collaborator is the cost
table in domain/cost.py. No Dash imports here.
"""
from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from config import DEFAULT_BUDGET_EUR, KITCHEN_PROTOTYPE, STANDARD_ROOM_TEMP
from domain.cost import CURRENCY, PRICE_LIST_DATE, Budget, calculate_budget
from domain.hydraulics import (
    WATER_DENSITY,
    HeatingCircuit,
    circuit_length,
    is_critical,
    pressure_loss,
    water_volume,
)
from domain.layout import generate_serpentine

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
WATER_SPECIFIC_HEAT: float = 4186.0   # J/(kg·K)
TYPICAL_TEMP_DROP:   float = 5.0      # K – assumed supply/return spread

BASE_HEAT_OUTPUT_PER_METER:   float = 10.0   # W/m
HEAT_OUTPUT_TEMP_COEFFICIENT: float = 2.0    # W/(m·K)

PIPE_20MM_THRESHOLD: float = 0.02     # m


@dataclasses.dataclass(frozen=True)
class CircuitDesignParams:
    """
    Inputs for sizing one circuit.

    Parameters
    ----------
    room_area            : Floor area             [m²]
    pipe_spacing         : Laying distance (VA)   [m]
    room_width           : Run length of rows     [m]
    room_length          : Extent across rows     [m]
    pipe_diameter        : Pipe diameter          [m]
    supply_temperature   : Flow temperature       [°C]
    return_temperature   : Return temperature     [°C]
    heat_output_required : Room heat demand       [W]
    """

    room_area: float
    pipe_spacing: float
    room_width: float
    room_length: float
    pipe_diameter: float
    supply_temperature: float
    return_temperature: float
    heat_output_required: float

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "CircuitDesignParams":
        return cls(**{name: float(values[name]) for name in cls.__dataclass_fields__})


@dataclasses.dataclass(frozen=True)
class CircuitSolution:
    circuit: HeatingCircuit
    total_length: float            # m
    pressure_loss: float           # mbar
    is_critical: bool
    budget: Budget
    estimated_heat_output: float   # W
    flow_rate: float               # L/h


# ---------------------------------------------------------------------------
# Thermal relations
# ---------------------------------------------------------------------------

def calculate_required_flow_rate(heat_output: float, supply_temp: float, return_temp: float) -> float:
    """Volumetric flow that carries `heat_output` at the given spread [L/h]."""
    delta_t = supply_temp - return_temp
    mass_flow = heat_output / (WATER_SPECIFIC_HEAT * delta_t)   # kg/s
    volume_flow = mass_flow / WATER_DENSITY                      # m³/s
    return volume_flow * 1000.0 * 3600.0


def estimate_heat_output(
    pipe_length: float,
    supply_temp: float,
    room_temp: float = STANDARD_ROOM_TEMP,
    return_temp: Optional[float] = None,
) -> float:
    """
    Empirical floor output of a laid pipe [W].

    q = 10 + 2·ΔT W/m with ΔT the mean water temperature above the room.
    Without a return temperature the typical 5 K drop is assumed.
    """
    if return_temp is None:
        return_temp = supply_temp - TYPICAL_TEMP_DROP
    delta_t = (supply_temp + return_temp) / 2.0 - room_temp
    q_per_meter = BASE_HEAT_OUTPUT_PER_METER + HEAT_OUTPUT_TEMP_COEFFICIENT * delta_t
    return pipe_length * q_per_meter


def material_items(params: CircuitDesignParams, total_length: float) -> List[Dict[str, Any]]:
    """Purchase list for one circuit."""
    pipe_type = "pipe_20mm" if params.pipe_diameter >= PIPE_20MM_THRESHOLD else "pipe_16mm"
    return [
        {"material_id": pipe_type,        "quantity": total_length},
        {"material_id": "eps_plate_30mm", "quantity": params.room_area},
        {"material_id": "alu_sheet",      "quantity": params.room_area},
        {"material_id": "manifold",       "quantity": 1},
        {"material_id": "thermostat",     "quantity": 1},
    ]


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_params(params: CircuitDesignParams) -> None:
    """Reject physically meaningless input before it reaches the kernels."""
    if params.pipe_diameter <= 0:
        raise ValueError(f"Pipe diameter must be positive (got {params.pipe_diameter} m).")
    if params.pipe_spacing <= 0:
        raise ValueError(f"Pipe spacing must be positive (got {params.pipe_spacing} m).")
    if params.supply_temperature <= params.return_temperature:
        raise ValueError(
            f"Supply temperature ({params.supply_temperature} °C) must exceed "
            f"return temperature ({params.return_temperature} °C)."
        )


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def solve_circuit(
    params: CircuitDesignParams,
    room_id: str,
    total_budget: float = DEFAULT_BUDGET_EUR,
) -> CircuitSolution:
    """
    Complete circuit design for one room.

    Raises ValueError for non-positive diameter or spacing, or a supply
    temperature not above the return temperature.
    """
    validate_params(params)

    flow_rate = calculate_required_flow_rate(
        params.heat_output_required, params.supply_temperature, params.return_temperature,
    )
    segments = generate_serpentine(
        params.room_width, params.room_length, params.pipe_spacing, params.pipe_diameter,
    )
    circuit = HeatingCircuit(
        id=f"circuit_{room_id}",
        room_id=room_id,
        segments=tuple(segments),
        flow_rate=flow_rate,
        supply_temperature=params.supply_temperature,
        return_temperature=params.return_temperature,
    )

    total_length = circuit_length(circuit)
    loss = pressure_loss(circuit)
    critical = is_critical(circuit)
    budget = calculate_budget(total_budget, material_items(params, total_length))
    estimated = estimate_heat_output(total_length, params.supply_temperature)

    logger.info(
        "Circuit %s: %d segments, %.1f m, %.0f L/h, %.1f mbar%s",
        circuit.id, len(segments), total_length, flow_rate, loss,
        " (CRITICAL)" if critical else "",
    )

    return CircuitSolution(
        circuit=circuit,
        total_length=total_length,
        pressure_loss=loss,
        is_critical=critical,
        budget=budget,
        estimated_heat_output=estimated,
        flow_rate=flow_rate,
    )


def solve_kitchen_prototype() -> CircuitSolution:
    """13 m² kitchen, 12.5 cm VA, 35/30 °C, 1300 W."""
    return solve_circuit(CircuitDesignParams(**KITCHEN_PROTOTYPE), "kitchen", DEFAULT_BUDGET_EUR)


def solution_summary(solution: CircuitSolution, heat_required: float) -> Dict[str, Any]:
    """Flat key figures of a solution plus diagnostic messages."""
    warnings: List[str] = []
    if solution.is_critical:
        warnings.append(
            f"Circuit is critical: Δp {solution.pressure_loss:.0f} mbar > 300 mbar – pump may be overloaded."
        )
    surplus = solution.estimated_heat_output - heat_required
    if surplus < 0:
        warnings.append(f"Heat deficit: {surplus:.0f} W – reduce pipe spacing or raise supply temperature.")
    if not solution.budget.within_budget:
        warnings.append(f"Budget exceeded by {-solution.budget.remaining_budget:.2f} €.")

    return {
        "Segments":             len(solution.circuit.segments),
        "Total length (m)":     round(solution.total_length, 2),
        "Flow rate (L/h)":      round(solution.flow_rate, 1),
        "Pressure loss (mbar)": round(solution.pressure_loss, 1),
        "Water volume (L)":     round(water_volume(solution.circuit), 1),
        "Critical":             solution.is_critical,
        "Estimated output (W)": round(solution.estimated_heat_output, 0),
        "Heat surplus (W)":     round(surplus, 0),
        "Total spent (€)":      round(solution.budget.total_spent, 2),
        "Remaining (€)":        round(solution.budget.remaining_budget, 2),
        "Price list":           f"{PRICE_LIST_DATE} ({CURRENCY})",
        "warnings":             warnings,
    }


def compare_spacings(
    params: CircuitDesignParams,
    room_id: str,
    spacings: List[float],
    total_budget: float = DEFAULT_BUDGET_EUR,
) -> pd.DataFrame:
    """
    Solve the same room for several pipe spacings.

    Returns one row per spacing with length, Δp, criticality, output and cost.
    """
    rows = []
    for va in spacings:
        sol = solve_circuit(dataclasses.replace(params, pipe_spacing=va), room_id, total_budget)
        rows.append({
            "Circuit":              f"VA {va * 100:g} cm",
            "Spacing (m)":          va,
            "Total length (m)":     round(sol.total_length, 2),
            "Pressure loss (mbar)": round(sol.pressure_loss, 1),
            "Critical":             "Yes" if sol.is_critical else "No",
            "Estimated output (W)": round(sol.estimated_heat_output, 0),
            "Total spent (€)":      round(sol.budget.total_spent, 2),
        })
    return pd.DataFrame(rows)
