# tests/test_cost.py
import pytest

from estimator.cost.map_costs import estimate_cost, merged_rates
from estimator.quantity.estimate import estimate_materials, estimate_workforce
from estimator.schedule.timeline import estimate_timeline
from estimator.service.config import normalize_config


def _cost(preset, **raw):
    cfg = normalize_config(raw, preset)
    wf = estimate_workforce(cfg, preset)
    mats = estimate_materials(cfg, preset)
    tl = estimate_timeline(wf, cfg.floors, cfg.duration_constraint, preset)
    return estimate_cost(cfg.area, cfg.floors, cfg.location, wf, mats, tl, preset,
                         cfg.wage_overrides, cfg.material_overrides)


def test_merged_rates():
    assert merged_rates({"a": 1, "b": 2}, {"b": 5}) == {"a": 1, "b": 5}
    assert merged_rates({"a": 1}, None) == {"a": 1}


def test_total_is_sum_of_components(standard):
    c = _cost(standard, area=1000, floors=3)
    assert c.total_cost == c.labor_cost + c.material_cost + c.overhead_cost + c.contingency
    assert c.labor_cost == round(sum(c.labor_by_trade.values()), 2)
    assert c.material_cost == round(sum(c.material_by_item.values()), 2)
    assert c.overhead_cost == pytest.approx((c.labor_cost + c.material_cost) * 0.10, abs=0.01)
    assert c.cost_per_unit_area == pytest.approx(c.total_cost / 3000, abs=0.01)


def test_standard_material_costs(standard):
    c = _cost(standard, area=1000, floors=3)
    assert c.material_by_item == {
        "cement": 456000.0, "steel": 660000.0, "sand": 216000.0, "water": 75000.0, "bricks": 168000.0,
    }
    assert c.material_cost == 1575000.0


def test_location_multiplier_orders_costs(standard):
    rural = _cost(standard, area=100, floors=1, location="Rural")
    suburban = _cost(standard, area=100, floors=1, location="Suburban")
    urban = _cost(standard, area=100, floors=1, location="Urban")
    metro = _cost(standard, area=100, floors=1, location="Metro")
    assert rural.total_cost < suburban.total_cost < urban.total_cost < metro.total_cost
    assert rural.cost_per_unit_area < urban.cost_per_unit_area


def test_compression_applies_overtime_to_sensitive_trades(thumb_rule):
    relaxed = _cost(thumb_rule, area=1000)
    rushed = _cost(thumb_rule, area=1000, duration_constraint=40)
    assert not relaxed.overtime_applied
    assert rushed.overtime_applied
    assert rushed.labor_by_trade["mason"] == pytest.approx(relaxed.labor_by_trade["mason"] * 1.25, abs=0.01)
    assert rushed.labor_by_trade["helper"] == pytest.approx(relaxed.labor_by_trade["helper"] * 1.25, abs=0.01)
    assert rushed.labor_by_trade["carpenter"] == relaxed.labor_by_trade["carpenter"]
    assert rushed.labor_by_trade["supervisor"] == relaxed.labor_by_trade["supervisor"]
    assert rushed.material_cost == relaxed.material_cost
    assert rushed.labor_cost > relaxed.labor_cost


def test_mild_constraint_is_not_compression(thumb_rule):
    # natural 76 days; 70 is above the 80% threshold
    assert not _cost(thumb_rule, area=1000, duration_constraint=70).overtime_applied


def test_overrides_change_only_their_line(standard):
    base = _cost(standard, area=500)
    custom = _cost(standard, area=500, wage_overrides={"mason": 1600}, material_overrides={"cement": 760})
    assert custom.labor_by_trade["mason"] == pytest.approx(base.labor_by_trade["mason"] * 2, abs=0.01)
    assert custom.labor_by_trade["helper"] == base.labor_by_trade["helper"]
    assert custom.material_by_item["cement"] == pytest.approx(base.material_by_item["cement"] * 2, abs=0.01)
    assert custom.material_by_item["steel"] == base.material_by_item["steel"]


def test_cost_monotone_in_area(standard):
    assert _cost(standard, area=600).total_cost < _cost(standard, area=1200).total_cost
