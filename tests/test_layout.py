# tests/test_layout.py
import math

from estimator.layout.blueprint import allotted_layout_area, describe_layout, floor_side, generate_layout
from estimator.service.config import RoomProgram


def _overlap(a, b, eps=1e-6):
    return (a.x + eps < b.x + b.width and b.x + eps < a.x + a.width
            and a.y + eps < b.y + b.height and b.y + eps < a.y + a.height)


def test_one_floor_layout_per_floor(standard):
    layout = generate_layout(1000, 3, standard)
    assert [f.floor for f in layout] == [0, 1, 2]
    assert [f.label for f in layout] == ["Ground Floor", "Floor 1", "Floor 2"]
    assert layout[0].rooms[0].name == "Living Room"
    assert [r.name for r in layout[1].rooms][:3] == ["Bedroom 2", "Bedroom 3", "Bathroom 2"]


def test_floor_side_scales_with_sqrt_area(standard):
    assert floor_side(100, 3.0) == 30.0
    layout = generate_layout(900, 1, standard)
    assert math.isclose(layout[0].side, 90.0)


def test_rooms_fit_and_never_overlap(standard, thumb_rule):
    for preset in (standard, thumb_rule):
        for area, floors in ((1000, 3), (250, 1), (4000, 2)):
            for fl in generate_layout(area, floors, preset):
                assert fl.occupied_area() <= allotted_layout_area(fl, preset) * (1 + preset.layout_slack)
                for r in fl.rooms:
                    assert r.x + r.width <= fl.side + 1e-9
                    assert r.y + r.height <= fl.side + 1e-9
                for i, a in enumerate(fl.rooms):
                    for b in fl.rooms[i + 1:]:
                        assert not _overlap(a, b), (a.name, b.name)


def test_room_program_flags(standard):
    program = RoomProgram(dining=False, staircase=False, balcony=False)
    ground, upper = generate_layout(600, 2, standard, program)
    names = [r.name for r in ground.rooms] + [r.name for r in upper.rooms]
    assert "Dining" not in names
    assert "Staircase" not in names
    assert "Balcony" not in names
    assert "Kitchen" in names


def test_degenerate_area_gives_tiny_rooms(standard):
    fl = generate_layout(0.0001, 1, standard)[0]
    assert all(r.width < 0.1 for r in fl.rooms)


def test_describe_layout(standard):
    text = describe_layout(generate_layout(100, 2, standard))
    assert "Ground Floor: 6 rooms" in text
    assert "Floor 1: 5 rooms" in text
    assert describe_layout(()) == ""
