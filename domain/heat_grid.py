"""
domain/heat_grid.py
===================
Explicit finite-difference heat diffusion over a floor slab.

Physics
-------
Interior cells follow the 2-D heat equation discretised with the 5-point
stencil:

    T_next = T + r · (T_N + T_S + T_W + T_E − 4·T),   r = α·dt / dx²

Pipe cells are pinned to their water temperature before every step. The
outermost ring of cells loses heat linearly towards the outside:

    T_next = T − U_wall · (T − T_out) · LOSS_COEFFICIENT

LOSS_COEFFICIENT is an empirical per-step scaling, not a physical
quantity. The explicit scheme is only stable for r ≤ 0.25; larger values
still run but raise a StabilityWarning.

No Dash / pandas dependencies. One simulator owns one grid.
"""
from __future__ import annotations

import enum
import logging
import math
import warnings
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
AMBIENT_TEMPERATURE:  float = 20.0     # °C – initial fill and query default
OUTSIDE_TEMPERATURE:  float = -10.0    # °C – design frost condition
THERMAL_DIFFUSIVITY:  float = 1.0e-4   # m²/s – concrete screed
U_WALL:               float = 1.4      # W/(m²·K) – 1950s hollow block wall
LOSS_COEFFICIENT:     float = 0.01     # per-step boundary scaling (–)
DEFAULT_CELL_SIZE:    float = 0.125    # m – one laying grid (12.5 cm)

CFL_LIMIT:              float = 0.25
CONVERGENCE_TOLERANCE:  float = 0.01   # °C
CONVERGENCE_INTERVAL:   int   = 100    # steps between convergence checks


class StabilityWarning(RuntimeWarning):
    """The explicit scheme's step is above the CFL limit."""


class SimulationState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    STEPPING      = "stepping"
    CONVERGED     = "converged"
    EXHAUSTED     = "exhausted"


@dataclass(frozen=True)
class HeatSource:
    """Grid cell held at a fixed temperature (local floor over a pipe)."""

    row: int
    col: int
    temperature: float


class HeatGridSimulator:
    """
    Temperature field of a rectangular floor.

    Parameters
    ----------
    width, height       : Floor extent                     [m]
    cell_size           : Grid spacing dx                  [m]
    outside_temperature : Temperature the boundary loses to [°C]
    """

    def __init__(
        self,
        width: Optional[float] = None,
        height: Optional[float] = None,
        cell_size: float = DEFAULT_CELL_SIZE,
        outside_temperature: float = OUTSIDE_TEMPERATURE,
    ) -> None:
        self.outside_temperature = outside_temperature
        self.state = SimulationState.UNINITIALIZED
        self.heat_sources: List[HeatSource] = []
        self.steps_run = 0
        self.cell_size = cell_size
        self.rows = 0
        self.cols = 0
        self._current = np.empty((0, 0))
        self._next    = np.empty((0, 0))
        if width is not None and height is not None:
            self.initialize(width, height, cell_size)

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def initialize(self, width: float, height: float, cell_size: float = DEFAULT_CELL_SIZE) -> None:
        """(Re)build both buffers at ambient temperature and drop all sources."""
        self.cell_size = cell_size
        self.rows = max(0, math.ceil(height / cell_size))
        self.cols = max(0, math.ceil(width / cell_size))
        self._current = np.full((self.rows, self.cols), AMBIENT_TEMPERATURE, dtype=float)
        self._next    = np.full((self.rows, self.cols), AMBIENT_TEMPERATURE, dtype=float)
        self.heat_sources = []
        self.steps_run = 0
        self.state = SimulationState.STEPPING
        logger.debug("Heat grid initialised: %d rows x %d cols, dx=%.3f m",
                     self.rows, self.cols, cell_size)

    def add_heat_source(self, x: float, y: float, temperature: float) -> None:
        """Pin the cell containing (x, y); points off the grid are ignored."""
        cell = self._cell_of(x, y)
        if cell is not None:
            self.heat_sources.append(HeatSource(cell[0], cell[1], temperature))

    # ------------------------------------------------------------------
    # Time stepping
    # ------------------------------------------------------------------

    def stability_ratio(self, dt: float = 1.0) -> float:
        """r = α·dt/dx² of the explicit scheme (–)."""
        return THERMAL_DIFFUSIVITY * dt / self.cell_size ** 2

    def step(self, dt: float = 1.0) -> None:
        """Advance the field by one explicit step of `dt` seconds."""
        if self.state is SimulationState.UNINITIALIZED:
            raise RuntimeError("Heat grid not initialised; call initialize() first.")

        r = self.stability_ratio(dt)
        if r > CFL_LIMIT:
            logger.warning("Unstable explicit step: r=%.3f > %.2f", r, CFL_LIMIT)
            warnings.warn(
                f"Simulation may be unstable (r={r:.3f} > {CFL_LIMIT}). "
                "Consider a smaller time step.",
                StabilityWarning, stacklevel=2,
            )

        cur, nxt = self._current, self._next
        for src in self.heat_sources:
            cur[src.row, src.col] = src.temperature

        laplacian = (
            cur[:-2, 1:-1] + cur[2:, 1:-1]
            + cur[1:-1, :-2] + cur[1:-1, 2:]
            - 4.0 * cur[1:-1, 1:-1]
        )
        nxt[1:-1, 1:-1] = cur[1:-1, 1:-1] + r * laplacian

        if self.rows and self.cols:
            for edge in (np.s_[0, :], np.s_[-1, :], np.s_[:, 0], np.s_[:, -1]):
                nxt[edge] = self._boundary_loss(cur[edge])

        self._current, self._next = nxt, cur
        self.steps_run += 1

    def run_to_steady_state(self, max_steps: int = 1000) -> SimulationState:
        """
        Step until the field settles or the step budget runs out.

        Convergence is checked after the first step and every
        CONVERGENCE_INTERVAL steps thereafter. Returns CONVERGED or
        EXHAUSTED; both are normal outcomes.
        """
        for i in range(max_steps):
            self.step()
            if i % CONVERGENCE_INTERVAL == 0 and self.max_change() < CONVERGENCE_TOLERANCE:
                self.state = SimulationState.CONVERGED
                logger.info("Heat grid converged after %d steps", i + 1)
                return self.state

        if self.state is SimulationState.UNINITIALIZED:
            return self.state
        self.state = SimulationState.EXHAUSTED
        logger.info("Heat grid stopped after %d steps without converging", max_steps)
        return self.state

    def max_change(self) -> float:
        """Largest per-cell change made by the last step [K]."""
        if self._current.size == 0:
            return 0.0
        return float(np.max(np.abs(self._current - self._next)))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def average_temperature(self) -> float:
        """Mean floor temperature [°C]; ambient for an empty grid."""
        if self._current.size == 0:
            return AMBIENT_TEMPERATURE
        return float(self._current.mean())

    def temperature_at(self, x: float, y: float) -> float:
        """Temperature of the cell containing (x, y) [°C]; ambient off-grid."""
        cell = self._cell_of(x, y)
        if cell is None:
            return AMBIENT_TEMPERATURE
        return float(self._current[cell])

    def snapshot(self) -> np.ndarray:
        """Independent copy of the current field, rows × cols [°C]."""
        return self._current.copy()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _boundary_loss(self, temperature: np.ndarray) -> np.ndarray:
        return temperature - U_WALL * (temperature - self.outside_temperature) * LOSS_COEFFICIENT

    def _cell_of(self, x: float, y: float):
        if not (math.isfinite(x) and math.isfinite(y)):
            return None
        col = math.floor(x / self.cell_size)
        row = math.floor(y / self.cell_size)
        if 0 <= row < self.rows and 0 <= col < self.cols:
            return row, col
        return None
