# estimator/cost/map_costs.py
"""
Cost mapping: quantities x rates x location multiplier.

Labour is priced per trade as headcount x day wage x labour-days x a
utilization factor (not every worker is on site every labour-day). When the
committed schedule is shorter than ``compression_threshold`` of the natural
one, the overtime multiplier is applied to the overtime-sensitive trades only;
materials are never affected by compression.
"""

from typing import Dict, Mapping

from estimator.service.models import CostBreakdown, MaterialBreakdown, TimelinePlan, WorkforceBreakdown
from estimator.service.presets import EstimatorPreset
from estimator.service.utils import money

# ------------------ helpers ------------------

def merged_rates(defaults: Mapping[str, float], overrides: Mapping[str, float]) -> Dict[str, float]:
    out = dict(defaults)
    out.update(overrides or {})
    return out

def is_compressed(timeline: TimelinePlan, preset: EstimatorPreset) -> bool:
    natural = timeline.natural_days or timeline.total_days
    return timeline.total_days < preset.cost.compression_threshold * natural

def labor_costs(workforce: WorkforceBreakdown, wages: Mapping[str, float],
                loc_mult: float, compressed: bool, preset: EstimatorPreset) -> Dict[str, float]:
    C = preset.cost
    out = {}
    for trade, count in workforce.by_trade().items():
        cost = count * wages[trade] * workforce.total_labor_days * C.utilization * loc_mult
        if compressed and preset.trades[trade].overtime:
            cost *= C.overtime_multiplier
        out[trade] = money(cost)
    return out

def material_costs(materials: MaterialBreakdown, prices: Mapping[str, float],
                   loc_mult: float, preset: EstimatorPreset) -> Dict[str, float]:
    basis = {m.key: m.price_basis for m in preset.materials}
    return {
        m.key: money(m.quantity * prices[m.key] / basis.get(m.key, 1.0) * loc_mult)
        for m in materials.items
    }

# ------------------ main ------------------

def estimate_cost(area: float, floors: int, location,
                  workforce: WorkforceBreakdown, materials: MaterialBreakdown,
                  timeline: TimelinePlan, preset: EstimatorPreset,
                  wage_overrides: Mapping[str, float] = None,
                  material_overrides: Mapping[str, float] = None) -> CostBreakdown:
    loc_mult = preset.location_multiplier(location)
    wages = merged_rates(preset.wages, wage_overrides)
    prices = merged_rates(preset.prices, material_overrides)
    compressed = is_compressed(timeline, preset)

    by_trade = labor_costs(workforce, wages, loc_mult, compressed, preset)
    by_item = material_costs(materials, prices, loc_mult, preset)

    labor = money(sum(by_trade.values()))
    material = money(sum(by_item.values()))
    overhead = money((labor + material) * preset.cost.overhead_pct)
    contingency = money((labor + material + overhead) * preset.cost.contingency_pct)
    # total is the plain sum of the rounded components, never re-rounded
    total = labor + material + overhead + contingency

    return CostBreakdown(
        labor_cost=labor,
        material_cost=material,
        overhead_cost=overhead,
        contingency=contingency,
        total_cost=total,
        cost_per_unit_area=money(total / (area * floors)),
        labor_by_trade=by_trade,
        material_by_item=by_item,
        overtime_applied=compressed,
    )
