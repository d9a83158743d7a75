"""
domain/geometry.py
==================
Pipe-segment geometry: points, segment shapes and segment lengths.

Zero Dash / pandas / service-layer dependencies.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class Point2D:
    """Floor-plan coordinate [m]."""

    x: float
    y: float

    def distance_to(self, other: "Point2D") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)


# ---------------------------------------------------------------------------
# Segment shapes
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Straight:
    pass


@dataclass(frozen=True)
class Arc:
    """Circular bend; bend_radius in [m]."""

    bend_radius: float


@dataclass(frozen=True)
class Spline:
    """Free curve through ordered control points."""

    control_points: Tuple[Point2D, ...] = ()


SegmentShape = Union[Straight, Arc, Spline]


@dataclass(frozen=True)
class PipeSegment:
    """
    One piece of a heating circuit.

    Parameters
    ----------
    id       : Segment label (e.g. 'seg_3')
    start    : Start point           [m]
    end      : End point             [m]
    diameter : Internal diameter     [m]
    shape    : Straight, Arc or Spline
    """

    id: str
    start: Point2D
    end: Point2D
    diameter: float
    shape: SegmentShape = Straight()

    @property
    def is_curved(self) -> bool:
        return not isinstance(self.shape, Straight)

    @property
    def length(self) -> float:
        return segment_length(self)


# ---------------------------------------------------------------------------
# Lengths
# ---------------------------------------------------------------------------

def segment_length(segment: PipeSegment) -> float:
    """Pipe length of a segment [m]. Never raises; degenerate input gives 0."""
    shape = segment.shape
    chord = segment.start.distance_to(segment.end)

    if isinstance(shape, Arc) and shape.bend_radius > 0:
        return arc_length(chord, shape.bend_radius)
    if isinstance(shape, Spline) and shape.control_points:
        return polyline_length((segment.start, *shape.control_points, segment.end))
    return chord


def arc_length(chord: float, bend_radius: float) -> float:
    """
    Length of a circular arc spanning `chord` with radius `bend_radius`.

    A chord longer than the bend diameter is clamped to a half circle.
    """
    ratio = max(-1.0, min(1.0, chord / (2.0 * bend_radius)))
    angle = 2.0 * math.asin(ratio)
    return bend_radius * angle


def polyline_length(points: Tuple[Point2D, ...]) -> float:
    """Sum of straight distances along consecutive points [m]."""
    return sum(a.distance_to(b) for a, b in zip(points, points[1:]))
