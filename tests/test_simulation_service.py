"""
tests/test_simulation_service.py
Tests for services/simulation_service.py (room simulation and goal check).
"""
import math
import warnings

import pytest
import sys, pathlib
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent))

from domain.geometry import Arc, PipeSegment, Point2D, Spline, Straight
from domain.heat_grid import HeatGridSimulator, SimulationState
from domain.heat_load import Room, Wall, Window, upgrade_windows
from domain.hydraulics import HeatingCircuit
from domain.layout import generate_serpentine
from services.simulation_service import (
    assess_retrofit,
    goal_met,
    required_flow_temperature,
    retrofit_items,
    sample_segment,
    simulate_room,
)


def _circuit(width, length, spacing=0.25, supply=35.0):
    segs = tuple(generate_serpentine(width, length, spacing, 0.016))
    return HeatingCircuit("c", "r", segs, 100.0, supply, 30.0)


@pytest.fixture
def small_room():
    return Room("r", "Test", area=1.0, walls=[Wall("w", length=1.0, height=2.5)])


class TestSampling:

    def test_one_metre_straight(self):
        seg = PipeSegment("s", Point2D(0, 0), Point2D(1, 0), 0.016, Straight())
        pts = sample_segment(seg)
        assert len(pts) == 11
        assert pts[0] == Point2D(0, 0)
        assert pts[-1].x == pytest.approx(1.0)

    def test_zero_length_gives_endpoints(self):
        seg = PipeSegment("s", Point2D(1, 1), Point2D(1, 1), 0.016)
        assert len(sample_segment(seg)) == 2

    def test_arc_sampled_along_chord(self):
        seg = PipeSegment("s", Point2D(3, 0.0625), Point2D(3, 0.1875), 0.016, Arc(0.0625))
        assert all(p.x == 3 for p in sample_segment(seg))

    def test_spline_follows_control_polygon(self):
        seg = PipeSegment("s", Point2D(0, 0), Point2D(1, 1), 0.016,
                          Spline(control_points=(Point2D(1, 0),)))
        pts = sample_segment(seg)
        assert Point2D(1, 0) in pts
        assert len(pts) == 22


class TestGoal:

    def test_required_flow_temperature(self):
        assert required_flow_temperature(1000.0, 100.0) == pytest.approx(22.0)

    def test_required_flow_temperature_without_pipe(self):
        assert math.isinf(required_flow_temperature(1000.0, 0.0))

    @pytest.mark.parametrize("flow,avg,expected", [
        (35.0, 21.0, True),
        (35.1, 21.0, False),
        (30.0, 20.5, True),
        (30.0, 21.5, True),
        (30.0, 20.4, False),
        (30.0, 21.6, False),
    ])
    def test_goal(self, flow, avg, expected):
        assert goal_met(flow, avg) is expected


class TestSimulateRoom:

    def test_result_fields(self, small_room):
        result = simulate_room(_circuit(1.0, 1.0), small_room, 1.0, 1.0, max_steps=200)
        assert result.heatmap.shape == (8, 8)
        assert result.steps_run <= 200
        assert result.state in (SimulationState.CONVERGED, SimulationState.EXHAUSTED)
        assert result.heat_loss == pytest.approx(1.4 * 2.5 * 31.0 + 0.15 * 1.0 * 31.0)

    def test_pipes_warm_the_floor(self, small_room):
        result = simulate_room(_circuit(1.0, 1.0), small_room, 1.0, 1.0, max_steps=200)
        assert result.heatmap.max() == pytest.approx(35.0, abs=1.0)
        assert result.average_temperature > 20.0

    def test_exhaustion_reported(self, small_room):
        result = simulate_room(_circuit(1.0, 1.0), small_room, 1.0, 1.0, max_steps=5)
        assert result.state is SimulationState.EXHAUSTED
        assert not result.converged
        assert any("steady state" in w for w in result.warnings)

    def test_source_temperature_override(self, small_room):
        cool = simulate_room(_circuit(1.0, 1.0), small_room, 1.0, 1.0,
                             max_steps=50, source_temperature=20.0)
        warm = simulate_room(_circuit(1.0, 1.0), small_room, 1.0, 1.0, max_steps=50)
        assert cool.average_temperature < warm.average_temperature

    def test_unstable_cell_size_reported(self, small_room):
        result = simulate_room(_circuit(0.2, 0.2, spacing=0.1), small_room, 0.2, 0.2,
                               max_steps=3, cell_size=0.01)
        assert any("stability" in w for w in result.warnings)

    def test_high_loss_flags_flow_temperature(self):
        leaky = Room("r", "Leaky", area=1.0, walls=[Wall("w", length=10.0, height=3.0)])
        result = simulate_room(_circuit(1.0, 1.0), leaky, 1.0, 1.0, max_steps=10)
        assert result.required_flow_temperature > 35.0
        assert not result.goal_met
        assert any("flow temperature" in w for w in result.warnings)

    def test_foreign_warnings_pass_through(self, small_room, monkeypatch):
        def noisy_run(self, max_steps=1000):
            warnings.warn("solver note", UserWarning)
            return SimulationState.EXHAUSTED

        monkeypatch.setattr(HeatGridSimulator, "run_to_steady_state", noisy_run)
        with pytest.warns(UserWarning, match="solver note"):
            result = simulate_room(_circuit(1.0, 1.0), small_room, 1.0, 1.0)
        assert not any("stability" in w for w in result.warnings)


@pytest.fixture
def glazed_room():
    return Room("r", "Glazed", area=1.0,
                walls=[Wall("w", length=1.0, height=2.5)],
                windows=[Window("win", width=2.0, height=1.0, glazing_type=1)])


class TestRetrofit:

    def test_items_for_triple_glazing(self, glazed_room):
        circuit = _circuit(1.0, 1.0)
        items = retrofit_items(circuit, glazed_room, 3)
        assert items[0] == {"material_id": "window_triple", "quantity": 2.0}
        assert items[1]["material_id"] == "labor"
        assert items[1]["quantity"] == pytest.approx(0.5 * circuit.length)

    def test_existing_glazing_costs_nothing(self, glazed_room):
        items = retrofit_items(_circuit(1.0, 1.0), glazed_room, 1)
        assert [i["material_id"] for i in items] == ["labor"]

    def test_no_labour_without_pipe(self, glazed_room):
        empty = HeatingCircuit("c", "r", (), 0.0, 35.0, 30.0)
        assert retrofit_items(empty, glazed_room, 1) == []

    def test_assessment(self, glazed_room):
        circuit = _circuit(1.0, 1.0)
        upgraded = upgrade_windows(glazed_room, 2)
        result = simulate_room(circuit, upgraded, 1.0, 1.0, max_steps=50)
        a = assess_retrofit(circuit, glazed_room, 2, result,
                            [{"material_id": "manifold", "quantity": 1}], total_budget=2000.0)

        assert a.heat_loss_before - a.heat_loss_after == pytest.approx((5.8 - 2.8) * 2.0 * 31.0)
        assert a.heat_loss_after == pytest.approx(result.heat_loss)
        assert a.specific_heat_loss == pytest.approx(a.heat_loss_after / 1.0)
        expected = 350.0 + 280.0 * 2.0 + 65.0 * 0.5 * circuit.length
        assert a.budget.total_spent == pytest.approx(expected)
        assert a.temperature_gain == pytest.approx(result.average_temperature - 20.0)
        assert a.cost_per_kelvin == pytest.approx(expected / a.temperature_gain)

    def test_no_gain_is_infinitely_expensive(self, glazed_room):
        circuit = _circuit(1.0, 1.0)
        result = simulate_room(circuit, glazed_room, 1.0, 1.0, max_steps=5)
        result.average_temperature = 20.0
        assert math.isinf(assess_retrofit(circuit, glazed_room, 1, result).cost_per_kelvin)
