# estimator/quantity/estimate.py
import math

from estimator.service.config import ProjectConfig
from estimator.service.models import MaterialBreakdown, MaterialQuantity, WorkforceBreakdown
from estimator.service.presets import EstimatorPreset
from estimator.service.utils import round_to

# ---------------- helpers ----------------

def effective_area(config: ProjectConfig, preset: EstimatorPreset) -> float:
    return preset.effective_area(config.area, config.floors)

def workers_for(area: float, per_worker: float) -> int:
    # never truncate a fractional worker; short-staffing is the failure mode
    return int(math.ceil(area / per_worker))

# ---------------- core ----------------

def estimate_workforce(config: ProjectConfig, preset: EstimatorPreset) -> WorkforceBreakdown:
    area = effective_area(config, preset)
    T = preset.trades

    # area / (1 / 0.65) can land a hair above a whole number; drop the noise before ceiling
    total_labor_days = int(math.ceil(round(area / preset.productivity, 9)))
    masons = workers_for(area, T["mason"].area_per_worker)
    helpers = workers_for(area, T["helper"].area_per_worker)
    steel_fixers = workers_for(area, T["steel_fixer"].area_per_worker)
    carpenters = workers_for(area, T["carpenter"].area_per_worker)

    trade_workers = masons + helpers + steel_fixers + carpenters
    supervisors = max(preset.supervisor_minimum,
                      int(math.ceil(trade_workers / preset.supervisor_span)))

    return WorkforceBreakdown(
        masons=masons,
        helpers=helpers,
        steel_fixers=steel_fixers,
        carpenters=carpenters,
        supervisors=supervisors,
        total_labor_days=total_labor_days,
    )

def estimate_materials(config: ProjectConfig, preset: EstimatorPreset) -> MaterialBreakdown:
    area = effective_area(config, preset)
    items = tuple(
        MaterialQuantity(
            key=m.key,
            name=m.name,
            quantity=round_to(area * m.coefficient, m.decimals, m.rounding),
            unit=m.unit,
        )
        for m in preset.materials
    )
    return MaterialBreakdown(items=items)
