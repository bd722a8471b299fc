# tests/test_config.py
import math
import pytest

from estimator.service.config import (
    InvalidConfiguration, LocationTier, ProjectConfig, floors_label_for, normalize_config, parse_floors_label,
)


def test_parse_floors_label():
    assert parse_floors_label("G") == 1
    assert parse_floors_label("G+2") == 3
    assert parse_floors_label("g + 1") == 2
    assert parse_floors_label("4") == 4
    assert parse_floors_label(2) == 2
    assert parse_floors_label("junk") == 1
    assert parse_floors_label("2.0") == 2
    assert parse_floors_label("2.5") == 2
    assert parse_floors_label("3 floors") == 3


def test_decimal_floor_string_keeps_floors(standard):
    cfg = normalize_config({"area": 100, "floors": "2.5"}, standard)
    assert cfg.floors == 2
    assert cfg.floors_label == "G+1"
    with pytest.raises(InvalidConfiguration):
        normalize_config({"area": 100, "floors": "-2"}, standard)


def test_floors_label_for():
    assert floors_label_for(1) == "G"
    assert floors_label_for(3) == "G+2"


def test_defaults_applied(standard):
    cfg = normalize_config({"area": 1000}, standard)
    assert cfg.floors == 1
    assert cfg.floors_label == "G"
    assert cfg.location is LocationTier.URBAN
    assert cfg.duration_constraint is None
    assert cfg.room_program.bedrooms == 3
    assert cfg.wage_overrides == {}


def test_label_and_aliases(standard):
    cfg = normalize_config({"builtUpArea": 800, "floorsLabel": "G+2", "location": "metro",
                            "timelineConstraint": 120}, standard)
    assert cfg.area == 800.0
    assert cfg.floors == 3
    assert cfg.floors_label == "G+2"
    assert cfg.location is LocationTier.METRO
    assert cfg.duration_constraint == 120


def test_zero_or_blank_duration_is_unconstrained(standard):
    assert normalize_config({"area": 100, "duration_constraint": 0}, standard).duration_constraint is None
    assert normalize_config({"area": 100, "duration_constraint": ""}, standard).duration_constraint is None
    assert normalize_config({"area": 100, "duration_constraint": math.nan}, standard).duration_constraint is None


@pytest.mark.parametrize("raw", [
    {"area": 0},
    {"area": -10},
    {"area": math.inf},
    {"area": 100, "floors": 0},
    {"area": 100, "location": "Moon"},
    {"area": 100, "duration_constraint": -5},
    {"area": "lots"},
    {"floors": 2},
])
def test_invalid_configurations(standard, raw):
    with pytest.raises(InvalidConfiguration):
        normalize_config(raw, standard)


def test_override_tables_checked(standard):
    cfg = normalize_config({"area": 100, "wage_overrides": {"mason": 950},
                            "material_overrides": {"cement": 400}}, standard)
    assert cfg.wage_overrides == {"mason": 950.0}
    assert cfg.material_overrides == {"cement": 400.0}
    with pytest.raises(InvalidConfiguration):
        normalize_config({"area": 100, "wage_overrides": {"plumber": 900}}, standard)
    with pytest.raises(InvalidConfiguration):
        normalize_config({"area": 100, "material_overrides": {"cement": -1}}, standard)
    with pytest.raises(InvalidConfiguration):
        normalize_config({"area": 100, "material_overrides": {"aggregates": 50}}, standard)


def test_project_config_passthrough(standard):
    cfg = normalize_config({"area": 500, "floors": 2, "location": "Rural"}, standard)
    again = normalize_config(cfg, standard)
    assert again == cfg
    assert isinstance(again, ProjectConfig)


def test_non_mapping_rejected(standard):
    with pytest.raises(InvalidConfiguration):
        normalize_config([1000, 2], standard)
