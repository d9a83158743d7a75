"""
domain/cost.py
==============
Material price table (2025) and budget bookkeeping.

The circuit solver hands over a list of {material_id, quantity} items and
gets a Budget back; unknown material ids are skipped.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd


@dataclass(frozen=True)
class MaterialPrice:
    id: str
    name: str
    unit: str
    price_per_unit: float   # EUR
    description: str = ""


PRICE_LIST_DATE: str = "2025-01-01"
CURRENCY:        str = "EUR"

MATERIAL_COSTS_2025: Tuple[MaterialPrice, ...] = (
    MaterialPrice("pipe_16mm",      "PE-Xa Rohr 16mm (QuickTherm)", "meter", 4.5,
                  "Crosslinked polyethylene pipe for underfloor heating"),
    MaterialPrice("pipe_20mm",      "PE-Xa Rohr 20mm (QuickTherm)", "meter", 5.8,
                  "Larger diameter pipe for main distribution"),
    MaterialPrice("eps_plate_30mm", "EPS-Dämmplatte 30mm",          "m²",    8.5,
                  "Expanded polystyrene insulation plate"),
    MaterialPrice("eps_plate_50mm", "EPS-Dämmplatte 50mm",          "m²",    12.0,
                  "Thicker EPS insulation for better performance"),
    MaterialPrice("alu_sheet",      "Alu-Verteilerblech",           "m²",    18.0,
                  "Aluminum heat distribution plate"),
    MaterialPrice("window_single",  "Fenster einfach verglast",     "m²",    150.0,
                  "Single glazed window"),
    MaterialPrice("window_double",  "Fenster zweifach verglast",    "m²",    280.0,
                  "Double glazed window"),
    MaterialPrice("window_triple",  "Fenster dreifach verglast",    "m²",    450.0,
                  "Triple glazed window"),
    MaterialPrice("manifold",       "Heizkreisverteiler",           "piece", 350.0,
                  "Heating circuit manifold with flow meters"),
    MaterialPrice("pump",           "Hocheffizienzpumpe",           "piece", 420.0,
                  "High-efficiency circulation pump"),
    MaterialPrice("thermostat",     "Raumthermostat",               "piece", 85.0,
                  "Room thermostat"),
    MaterialPrice("labor",          "Montagestunde",                "hour",  65.0,
                  "Installation labour"),
)

_PRICES_BY_ID: Dict[str, MaterialPrice] = {m.id: m for m in MATERIAL_COSTS_2025}


@dataclass(frozen=True)
class BudgetItem:
    material_id: str
    quantity: float
    unit_price: float
    total_price: float


@dataclass(frozen=True)
class Budget:
    """
    Outcome of a purchase list against an available budget [EUR].

    remaining_budget is negative when the list overspends.
    """

    total_budget: float
    items: Tuple[BudgetItem, ...]
    total_spent: float
    remaining_budget: float

    @property
    def within_budget(self) -> bool:
        return is_within_budget(self)

    def to_frame(self) -> pd.DataFrame:
        """Line items as a DataFrame (one row per purchased material)."""
        columns = ["Material", "Quantity", "Unit price (€)", "Total (€)"]
        return pd.DataFrame(
            [
                {
                    "Material":       i.material_id,
                    "Quantity":       round(i.quantity, 2),
                    "Unit price (€)": i.unit_price,
                    "Total (€)":      round(i.total_price, 2),
                }
                for i in self.items
            ],
            columns=columns,
        )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def get_material_price(material_id: str) -> Optional[MaterialPrice]:
    return _PRICES_BY_ID.get(material_id)


def calculate_budget(
    total_budget: float,
    items: Iterable[Mapping[str, float]],
) -> Budget:
    """
    Price a list of {'material_id': ..., 'quantity': ...} items.

    Items whose material is not in the price table are left out.
    """
    budget_items: List[BudgetItem] = []
    for item in items:
        material = get_material_price(item["material_id"])
        if material is None:
            continue
        quantity = float(item["quantity"])
        budget_items.append(BudgetItem(
            material_id=material.id,
            quantity=quantity,
            unit_price=material.price_per_unit,
            total_price=material.price_per_unit * quantity,
        ))

    total_spent = sum(i.total_price for i in budget_items)
    return Budget(
        total_budget=total_budget,
        items=tuple(budget_items),
        total_spent=total_spent,
        remaining_budget=total_budget - total_spent,
    )


def is_within_budget(budget: Budget) -> bool:
    return budget.remaining_budget >= 0


def cost_per_kelvin(total_cost: float, temperature_improvement: float) -> float:
    """EUR per Kelvin of room-temperature gain; infinite for no gain."""
    if temperature_improvement == 0:
        return float("inf")
    return total_cost / temperature_improvement
