# estimator/layout/blueprint.py
"""
Fixed-template floor layouts.

Each floor gets a bounding square whose side is sqrt(floor area share) times
the preset's layout scale (3.0 turns square yards into feet). Rooms sit at
hand-assigned fractional positions/sizes of that side. The templates below are
non-overlapping by construction; nothing here searches or checks packings.
Optional slots disappear when the room program turns them off.
"""

from __future__ import annotations
import math
from typing import List, NamedTuple, Optional, Tuple

from estimator.service.config import RoomProgram
from estimator.service.models import FloorLayout, Room
from estimator.service.presets import EstimatorPreset


class Slot(NamedTuple):
    name: str               # may use {bed_a}, {bed_b}, {bath} placeholders
    x: float
    y: float
    width: float
    height: float
    requires: Optional[str] = None   # RoomProgram flag that must be true


GROUND_FLOOR = (
    Slot("Living Room", 0.00, 0.00, 0.35, 0.40),
    Slot("Kitchen",     0.35, 0.00, 0.25, 0.30),
    Slot("Dining",      0.35, 0.30, 0.25, 0.30, requires="dining"),
    Slot("Bedroom 1",   0.00, 0.40, 0.35, 0.35),
    Slot("Bathroom 1",  0.60, 0.00, 0.15, 0.20),
    Slot("Staircase",   0.60, 0.20, 0.15, 0.25, requires="staircase"),
)

UPPER_FLOOR = (
    Slot("Bedroom {bed_a}", 0.00, 0.00, 0.45, 0.45),
    Slot("Bedroom {bed_b}", 0.45, 0.00, 0.45, 0.45),
    Slot("Bathroom {bath}", 0.00, 0.45, 0.25, 0.25),
    Slot("Balcony",         0.45, 0.45, 0.30, 0.20, requires="balcony"),
    Slot("Staircase",       0.25, 0.45, 0.15, 0.25, requires="staircase"),
)


def floor_label(floor: int) -> str:
    return "Ground Floor" if floor == 0 else f"Floor {floor}"


def floor_side(area_share: float, scale: float) -> float:
    return math.sqrt(max(area_share, 0.0)) * scale


def place_rooms(template: Tuple[Slot, ...], side: float, floor: int,
                program: RoomProgram) -> Tuple[Room, ...]:
    names = {"bed_a": floor * 2, "bed_b": floor * 2 + 1, "bath": floor + 1}
    rooms: List[Room] = []
    for s in template:
        if s.requires and not getattr(program, s.requires):
            continue
        rooms.append(Room(
            name=s.name.format(**names),
            width=side * s.width,
            height=side * s.height,
            x=side * s.x,
            y=side * s.y,
        ))
    return tuple(rooms)


def generate_layout(area: float, floors: int, preset: EstimatorPreset,
                    program: Optional[RoomProgram] = None) -> Tuple[FloorLayout, ...]:
    program = program or RoomProgram()
    share = area / floors
    side = floor_side(share, preset.layout_scale)
    return tuple(
        FloorLayout(
            floor=f,
            label=floor_label(f),
            rooms=place_rooms(GROUND_FLOOR if f == 0 else UPPER_FLOOR, side, f, program),
            total_area=share,
            side=side,
        )
        for f in range(floors)
    )


def allotted_layout_area(layout: FloorLayout, preset: EstimatorPreset) -> float:
    """Floor share expressed in layout units (feet for the square-yard preset)."""
    return layout.total_area * preset.layout_scale ** 2


def describe_layout(layout: Tuple[FloorLayout, ...]) -> str:
    counts = ", ".join(f"{fl.label}: {len(fl.rooms)} rooms" for fl in layout)
    return f"Standard template layout on a {layout[0].side:.1f} ft square per floor ({counts})." \
        if layout else ""
