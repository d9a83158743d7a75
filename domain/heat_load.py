"""
domain/heat_load.py
===================
Room envelope heat loss for retrofit planning.

Transmission through exterior walls (including linear thermal bridges
along each wall) and through windows. All U-values in W/(m²·K), ψ in
W/(m·K), temperatures in °C, heat losses in W.
This module has zero dependencies on Dash, pandas, or any service layer.
"""
from __future__ import annotations

import dataclasses
from typing import Dict, List, Optional, Union

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
WINDOW_U_VALUES: Dict[str, float] = {
    "single": 5.8,
    "double": 2.8,
    "triple": 0.8,
}

GLAZING_BY_PANES: Dict[int, str] = {1: "single", 2: "double", 3: "triple"}


@dataclasses.dataclass(frozen=True)
class MaterialProperties:
    """Wall build-up. density [kg/m³], u_value [W/(m²·K)], psi [W/(m·K)]."""

    name: str
    material_density: float
    u_value: float
    thermal_bridge_coefficient: float
    description: str = ""


# Hollow block masonry of the late 1950s: many air chambers, little mass.
HOLLOW_BLOCK_1957 = MaterialProperties(
    name="Hohlblockstein 1957",
    material_density=800.0,
    u_value=1.4,
    thermal_bridge_coefficient=0.15,
    description="Historical hollow block with high air chamber content and low mass",
)


@dataclasses.dataclass(frozen=True)
class Wall:
    id: str
    length: float
    height: float
    material: MaterialProperties = HOLLOW_BLOCK_1957
    is_exterior: bool = True

    @property
    def area(self) -> float:
        return self.length * self.height


@dataclasses.dataclass(frozen=True)
class Window:
    """
    Glazed opening.

    glazing_type is the number of panes (1, 2 or 3); u_value defaults to
    the standard value for that glazing.
    """

    id: str
    width: float
    height: float
    glazing_type: int = 1
    u_value: Optional[float] = None

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def effective_u_value(self) -> float:
        if self.u_value is not None:
            return self.u_value
        return WINDOW_U_VALUES[GLAZING_BY_PANES.get(self.glazing_type, "single")]


@dataclasses.dataclass
class Room:
    """
    One room as delivered by the building description.

    Parameters
    ----------
    id                 : Room label
    name               : Display name
    area               : Floor area         [m²]
    height             : Clear room height  [m]
    target_temperature : Design set-point   [°C]
    """

    id: str
    name: str
    area: float
    height: float = 2.5
    target_temperature: float = 21.0
    walls: List[Wall] = dataclasses.field(default_factory=list)
    windows: List[Window] = dataclasses.field(default_factory=list)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def calculate_room_heat_loss(
    room: Room,
    exterior_temperature: float,
    return_detail: bool = False,
) -> Union[float, Dict[str, float]]:
    """
    Design transmission heat loss of a room [W].

    Interior walls are ignored. With return_detail a breakdown dict is
    returned instead of the total.
    """
    delta_t = room.target_temperature - exterior_temperature

    walls = 0.0
    bridges = 0.0
    for wall in room.walls:
        if not wall.is_exterior:
            continue
        walls   += wall.material.u_value * wall.area * delta_t
        bridges += wall.material.thermal_bridge_coefficient * wall.length * delta_t

    windows = sum(w.effective_u_value * w.area * delta_t for w in room.windows)
    total = walls + bridges + windows

    if return_detail:
        return {
            "totalHeatLoss":         total,
            "wallHeatLoss":          walls,
            "thermalBridgeHeatLoss": bridges,
            "windowHeatLoss":        windows,
        }
    return total


def specific_heat_loss(room: Room, exterior_temperature: float) -> float:
    """Heat loss per floor area [W/m²]; 0 for a room without area."""
    if room.area <= 0:
        return 0.0
    return calculate_room_heat_loss(room, exterior_temperature) / room.area


def upgrade_windows(room: Room, glazing_type: int) -> Room:
    """Copy of the room with every window replaced by `glazing_type` panes."""
    return dataclasses.replace(
        room,
        windows=[
            dataclasses.replace(w, glazing_type=glazing_type, u_value=None)
            for w in room.windows
        ],
    )
