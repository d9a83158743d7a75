"""
tests/test_heat_load.py
Tests for domain/heat_load.py (room envelope heat loss).
"""
import pytest
import sys, pathlib
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent))

from domain.heat_load import (
    HOLLOW_BLOCK_1957,
    Room,
    Wall,
    Window,
    calculate_room_heat_loss,
    specific_heat_loss,
    upgrade_windows,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def kitchen():
    """One 4 m exterior wall, one interior wall and a single-glazed window."""
    return Room(
        id="kitchen", name="Küche", area=13.0, height=2.5, target_temperature=21.0,
        walls=[
            Wall("w_ext", length=4.0, height=2.5),
            Wall("w_int", length=3.5, height=2.5, is_exterior=False),
        ],
        windows=[Window("win_1", width=1.2, height=1.0, glazing_type=1)],
    )


# ΔT = 31 K at −10 °C outside
WALL_LOSS = 1.4 * 10.0 * 31.0        # 434.0
BRIDGE_LOSS = 0.15 * 4.0 * 31.0      # 18.6
WINDOW_LOSS = 5.8 * 1.2 * 31.0       # 215.76


class TestMaterials:

    def test_hollow_block(self):
        assert HOLLOW_BLOCK_1957.material_density == 800.0
        assert HOLLOW_BLOCK_1957.u_value == 1.4
        assert HOLLOW_BLOCK_1957.thermal_bridge_coefficient == 0.15

    @pytest.mark.parametrize("panes,u", [(1, 5.8), (2, 2.8), (3, 0.8)])
    def test_window_u_by_glazing(self, panes, u):
        assert Window("w", 1.0, 1.0, glazing_type=panes).effective_u_value == u

    def test_explicit_window_u_wins(self):
        assert Window("w", 1.0, 1.0, glazing_type=1, u_value=1.1).effective_u_value == 1.1


class TestRoomHeatLoss:

    def test_total(self, kitchen):
        assert calculate_room_heat_loss(kitchen, -10.0) == pytest.approx(
            WALL_LOSS + BRIDGE_LOSS + WINDOW_LOSS)

    def test_detail_breakdown(self, kitchen):
        d = calculate_room_heat_loss(kitchen, -10.0, return_detail=True)
        assert set(d) == {"totalHeatLoss", "wallHeatLoss", "thermalBridgeHeatLoss", "windowHeatLoss"}
        assert d["wallHeatLoss"] == pytest.approx(WALL_LOSS)
        assert d["thermalBridgeHeatLoss"] == pytest.approx(BRIDGE_LOSS)
        assert d["windowHeatLoss"] == pytest.approx(WINDOW_LOSS)
        assert d["totalHeatLoss"] == pytest.approx(
            d["wallHeatLoss"] + d["thermalBridgeHeatLoss"] + d["windowHeatLoss"])

    def test_interior_walls_ignored(self, kitchen):
        only_ext = Room("k", "k", 13.0, walls=[kitchen.walls[0]], windows=kitchen.windows)
        assert calculate_room_heat_loss(only_ext, -10.0) == pytest.approx(
            calculate_room_heat_loss(kitchen, -10.0))

    def test_no_loss_without_temperature_difference(self, kitchen):
        assert calculate_room_heat_loss(kitchen, 21.0) == pytest.approx(0.0)

    def test_linear_in_delta_t(self, kitchen):
        assert calculate_room_heat_loss(kitchen, -10.0) == pytest.approx(
            2 * calculate_room_heat_loss(kitchen, 5.5))

    def test_empty_room(self):
        assert calculate_room_heat_loss(Room("r", "r", 10.0), -10.0) == 0.0


class TestRetrofit:

    def test_triple_glazing_reduces_loss(self, kitchen):
        upgraded = upgrade_windows(kitchen, 3)
        assert calculate_room_heat_loss(upgraded, -10.0) == pytest.approx(
            WALL_LOSS + BRIDGE_LOSS + 0.8 * 1.2 * 31.0)
        assert kitchen.windows[0].glazing_type == 1

    def test_specific_heat_loss(self, kitchen):
        assert specific_heat_loss(kitchen, -10.0) == pytest.approx(
            (WALL_LOSS + BRIDGE_LOSS + WINDOW_LOSS) / 13.0)

    def test_specific_heat_loss_zero_area(self):
        assert specific_heat_loss(Room("r", "r", 0.0), -10.0) == 0.0
