"""
tests/test_plotting.py
Tests for utils/plotting.py and utils/helpers.py.
"""
import numpy as np
import pandas as pd
import pytest
import sys, pathlib
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent))

from domain.geometry import Arc, PipeSegment, Point2D
from domain.layout import generate_serpentine
from utils.helpers import empty_fig, fix_fig, safe_float
from utils.plotting import (
    arc_points,
    plot_budget_breakdown,
    plot_pipe_layout,
    plot_pressure_loss,
    plot_temperature_heatmap,
    segment_polyline,
)


@pytest.fixture
def segments():
    return generate_serpentine(1.0, 1.0, 0.25, 0.016)


class TestArcPoints:

    def test_endpoints(self):
        seg = PipeSegment("a", Point2D(3, 0.0625), Point2D(3, 0.1875), 0.016, Arc(0.0625))
        xs, ys = arc_points(seg)
        assert (xs[0], ys[0]) == pytest.approx((3.0, 0.0625))
        assert (xs[-1], ys[-1]) == pytest.approx((3.0, 0.1875))

    def test_bulges_outside_room(self):
        right = PipeSegment("a", Point2D(3, 0.0625), Point2D(3, 0.1875), 0.016, Arc(0.0625))
        left = PipeSegment("b", Point2D(0, 0.1875), Point2D(0, 0.3125), 0.016, Arc(0.0625))
        assert max(arc_points(right)[0]) == pytest.approx(3.0625, abs=1e-3)
        assert min(arc_points(left)[0]) == pytest.approx(-0.0625, abs=1e-3)

    def test_straight_polyline(self, segments):
        assert segment_polyline(segments[0]) == ([0.0, 1.0], [0.125, 0.125])


class TestFigures:

    def test_heatmap_with_pipes(self, segments):
        fig = plot_temperature_heatmap(np.full((8, 8), 20.0), 0.125, segments)
        assert [t.type for t in fig.data] == ["heatmap", "scatter"]
        assert fig.data[0].x[0] == pytest.approx(0.0625)

    def test_heatmap_without_pipes(self):
        fig = plot_temperature_heatmap(np.zeros((3, 4)), 0.5)
        assert len(fig.data) == 1

    def test_pipe_layout_separates_segments(self, segments):
        trace = plot_pipe_layout(segments, 1.0, 1.0).data[0]
        assert list(trace.x).count(None) == len(segments)

    def test_pressure_loss_chart(self):
        df = pd.DataFrame({"Circuit": ["VA 10 cm", "VA 20 cm"],
                           "Pressure loss (mbar)": [350.0, 90.0],
                           "Critical": ["Yes", "No"]})
        fig = plot_pressure_loss(df)
        assert len(fig.data) == 2
        assert fig.layout.shapes[0].y0 == 300.0

    def test_budget_pie(self):
        df = pd.DataFrame({"Material": ["pipe_16mm", "manifold"], "Total (€)": [450.0, 350.0]})
        assert plot_budget_breakdown(df).data[0].type == "pie"


class TestHelpers:

    @pytest.mark.parametrize("value,expected", [("3.5", 3.5), (2, 2.0), ("", None), (None, None), ("abc", None)])
    def test_safe_float(self, value, expected):
        assert safe_float(value) == expected

    def test_safe_float_default(self):
        assert safe_float("", 1.0) == 1.0

    def test_fix_fig(self):
        fig = fix_fig(empty_fig(), title="Demo", height=300)
        assert fig.layout.height == 300
        assert fig.layout.title.text == "Demo"
