"""
services/simulation_service.py
==============================
Runs the floor heat-grid simulation for a designed circuit and checks the
retrofit goal: reach the comfort band at no more than 35 °C supply.

Takes domain records (HeatingCircuit, Room) → builds a HeatGridSimulator
→ returns a plain result object. No Dash imports here.
"""
from __future__ import annotations

import logging
import math
import warnings
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

import numpy as np

from config import (
    COMFORT_BAND,
    DEFAULT_BUDGET_EUR,
    DESIGN_OUTSIDE_TEMP,
    MAX_SUPPLY_TEMP,
    SIMULATION_CELL_SIZE,
    SIMULATION_MAX_STEPS,
    SOURCE_SAMPLES_PER_M,
    STANDARD_ROOM_TEMP,
)
from domain.cost import Budget, calculate_budget, cost_per_kelvin
from domain.geometry import PipeSegment, Point2D, Spline
from domain.heat_grid import AMBIENT_TEMPERATURE, HeatGridSimulator, SimulationState, StabilityWarning
from domain.heat_load import Room, calculate_room_heat_loss, specific_heat_loss, upgrade_windows
from domain.hydraulics import HeatingCircuit, circuit_length

logger = logging.getLogger(__name__)

# Floor output per metre of pipe and Kelvin of over-temperature [W/(m·K)].
PIPE_HEAT_TRANSFER_PER_M: float = 10.0


@dataclass
class RoomSimulationResult:
    average_temperature: float      # °C
    required_flow_temperature: float  # °C
    heat_loss: float                # W
    steps_run: int
    state: SimulationState
    goal_met: bool
    heatmap: np.ndarray
    warnings: List[str] = field(default_factory=list)

    @property
    def converged(self) -> bool:
        return self.state is SimulationState.CONVERGED


# ---------------------------------------------------------------------------
# Heat-source placement
# ---------------------------------------------------------------------------

def sample_segment(segment: PipeSegment, samples_per_m: int = SOURCE_SAMPLES_PER_M) -> List[Point2D]:
    """
    Points along a segment, `samples_per_m` per metre, both ends included.

    Arcs are sampled along their chord; splines along their control polygon.
    """
    if isinstance(segment.shape, Spline) and segment.shape.control_points:
        path = [segment.start, *segment.shape.control_points, segment.end]
    else:
        path = [segment.start, segment.end]

    points: List[Point2D] = []
    for a, b in zip(path, path[1:]):
        steps = max(1, math.ceil(a.distance_to(b) * samples_per_m))
        for i in range(steps + 1):
            t = i / steps
            points.append(Point2D(a.x + t * (b.x - a.x), a.y + t * (b.y - a.y)))
    return points


def add_pipe_sources(
    simulator: HeatGridSimulator,
    segments: Iterable[PipeSegment],
    temperature: float,
) -> int:
    """Pin every grid cell a pipe passes through; returns the sample count."""
    count = 0
    for segment in segments:
        for p in sample_segment(segment):
            simulator.add_heat_source(p.x, p.y, temperature)
            count += 1
    return count


# ---------------------------------------------------------------------------
# Goal evaluation
# ---------------------------------------------------------------------------

def required_flow_temperature(heat_loss: float, pipe_length: float,
                              room_temp: float = STANDARD_ROOM_TEMP) -> float:
    """Supply temperature needed to cover `heat_loss` with `pipe_length` of pipe [°C]."""
    if pipe_length <= 0:
        return float("inf")
    return room_temp + heat_loss / (pipe_length * PIPE_HEAT_TRANSFER_PER_M)


def goal_met(flow_temperature: float, average_temperature: float) -> bool:
    return (
        flow_temperature <= MAX_SUPPLY_TEMP
        and COMFORT_BAND["min"] <= average_temperature <= COMFORT_BAND["max"]
    )


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def simulate_room(
    circuit: HeatingCircuit,
    room: Room,
    room_width: float,
    room_length: float,
    outside_temperature: float = DESIGN_OUTSIDE_TEMP,
    max_steps: int = SIMULATION_MAX_STEPS,
    cell_size: float = SIMULATION_CELL_SIZE,
    source_temperature: Optional[float] = None,
) -> RoomSimulationResult:
    """
    Steady floor temperature of `room` heated by `circuit`.

    Pipe cells are held at the circuit supply temperature unless
    `source_temperature` overrides it.
    """
    messages: List[str] = []
    simulator = HeatGridSimulator(room_width, room_length, cell_size, outside_temperature)
    n_sources = add_pipe_sources(
        simulator, circuit.segments,
        circuit.supply_temperature if source_temperature is None else source_temperature,
    )
    logger.debug("Room %s: %d heat-source samples on %dx%d grid",
                 room.id, n_sources, simulator.rows, simulator.cols)

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", StabilityWarning)
        state = simulator.run_to_steady_state(max_steps)
    unstable = False
    for w in caught:
        if issubclass(w.category, StabilityWarning):
            unstable = True
        else:
            warnings.warn_explicit(w.message, w.category, w.filename, w.lineno, source=w.source)
    if unstable:
        messages.append("Explicit time step above the stability limit – results may oscillate.")
    if state is SimulationState.EXHAUSTED:
        messages.append(f"No steady state within {max_steps} steps.")

    heat_loss = float(calculate_room_heat_loss(room, outside_temperature))
    flow_temp = required_flow_temperature(heat_loss, circuit_length(circuit))
    average = simulator.average_temperature()
    met = goal_met(flow_temp, average)

    if flow_temp > MAX_SUPPLY_TEMP:
        messages.append(f"Required flow temperature {flow_temp:.1f} °C exceeds {MAX_SUPPLY_TEMP:.0f} °C.")
    if average < COMFORT_BAND["min"]:
        messages.append(f"Room too cold: {average:.1f} °C average.")

    return RoomSimulationResult(
        average_temperature=average,
        required_flow_temperature=flow_temp,
        heat_loss=heat_loss,
        steps_run=simulator.steps_run,
        state=state,
        goal_met=met,
        heatmap=simulator.snapshot(),
        warnings=messages,
    )


# ---------------------------------------------------------------------------
# Retrofit cost
# ---------------------------------------------------------------------------

LABOR_HOURS_PER_M: float = 0.5

# Existing single glazing stays in place at no cost.
WINDOW_MATERIAL_BY_GLAZING: Dict[int, Optional[str]] = {
    1: None,
    2: "window_double",
    3: "window_triple",
}


@dataclass
class RetrofitAssessment:
    heat_loss_before: float     # W
    heat_loss_after: float      # W
    specific_heat_loss: float   # W/m² after the upgrade
    budget: Budget
    temperature_gain: float     # K above the unheated floor
    cost_per_kelvin: float      # EUR/K


def retrofit_items(circuit: HeatingCircuit, room: Room, glazing_type: int) -> List[Dict[str, float]]:
    """Window replacement and installation labour on top of the circuit materials."""
    items: List[Dict[str, float]] = []
    material = WINDOW_MATERIAL_BY_GLAZING.get(glazing_type)
    window_area = sum(w.area for w in room.windows)
    if material is not None and window_area > 0:
        items.append({"material_id": material, "quantity": window_area})
    length = circuit_length(circuit)
    if length > 0:
        items.append({"material_id": "labor", "quantity": length * LABOR_HOURS_PER_M})
    return items


def assess_retrofit(
    circuit: HeatingCircuit,
    room: Room,
    glazing_type: int,
    result: RoomSimulationResult,
    circuit_items: Iterable[Mapping[str, float]] = (),
    total_budget: float = DEFAULT_BUDGET_EUR,
    outside_temperature: float = DESIGN_OUTSIDE_TEMP,
) -> RetrofitAssessment:
    """
    Price the whole retrofit and relate it to the simulated temperature gain.

    `room` is the existing room; `result` the simulation of the upgraded one.
    """
    upgraded = upgrade_windows(room, glazing_type)
    budget = calculate_budget(
        total_budget, [*circuit_items, *retrofit_items(circuit, room, glazing_type)],
    )
    gain = result.average_temperature - AMBIENT_TEMPERATURE
    assessment = RetrofitAssessment(
        heat_loss_before=float(calculate_room_heat_loss(room, outside_temperature)),
        heat_loss_after=float(calculate_room_heat_loss(upgraded, outside_temperature)),
        specific_heat_loss=specific_heat_loss(upgraded, outside_temperature),
        budget=budget,
        temperature_gain=gain,
        cost_per_kelvin=cost_per_kelvin(budget.total_spent, gain),
    )
    logger.info("Retrofit %s: %.0f € for %.2f K", room.id, budget.total_spent, gain)
    return assessment
