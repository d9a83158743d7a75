"""
domain/layout.py
================
Serpentine (meander) pipe layout for a rectangular room.

Rows run across the full room width, starting half a spacing (VA) from
the first wall, joined by 180° bends. The last row is not recentred, so
the gap to the far wall depends on how room_length divides by the spacing.
"""
from __future__ import annotations

from typing import List

from domain.geometry import Arc, PipeSegment, Point2D, Straight


def generate_serpentine(
    room_width: float,
    room_length: float,
    pipe_spacing: float,
    pipe_diameter: float,
) -> List[PipeSegment]:
    """
    Ordered pipe segments of a serpentine circuit.

    Parameters
    ----------
    room_width    : Extent of each straight run  [m]
    room_length   : Extent across the rows       [m]
    pipe_spacing  : Laying distance between rows [m]
    pipe_diameter : Pipe diameter                [m]
    """
    segments: List[PipeSegment] = []
    if pipe_spacing <= 0:
        return segments

    current_y = pipe_spacing / 2.0
    direction = 1

    while current_y < room_length:
        start_x = 0.0 if direction == 1 else room_width
        end_x   = room_width if direction == 1 else 0.0

        segments.append(PipeSegment(
            id=f"seg_{len(segments)}",
            start=Point2D(start_x, current_y),
            end=Point2D(end_x, current_y),
            diameter=pipe_diameter,
            shape=Straight(),
        ))

        next_y = current_y + pipe_spacing
        if next_y < room_length:
            segments.append(PipeSegment(
                id=f"seg_{len(segments)}",
                start=Point2D(end_x, current_y),
                end=Point2D(end_x, next_y),
                diameter=pipe_diameter,
                shape=Arc(bend_radius=pipe_spacing / 2.0),
            ))

        current_y = next_y
        direction = -direction

    return segments
