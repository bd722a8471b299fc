# estimator/service/engine.py
"""
Estimation engine entry point.

    normalize -> workforce -> materials -> timeline -> cost -> schedule -> layout -> insights

Every stage is a pure function of the normalized config, the preset tables and
earlier stage outputs; no stage reads a later one. The same config and preset
always produce an identical ProjectResult.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from estimator.cost.map_costs import estimate_cost
from estimator.insights.advisory import generate_insights
from estimator.layout.blueprint import describe_layout, generate_layout
from estimator.quantity.estimate import estimate_materials, estimate_workforce
from estimator.schedule.timeline import estimate_timeline
from estimator.schedule.weekly import project_schedule
from estimator.service.config import InvalidConfiguration, ProjectConfig, normalize_config
from estimator.service.models import ProjectResult
from estimator.service.presets import EstimatorPreset, load_preset

logger = logging.getLogger(__name__)


def estimate_project(config: Union[ProjectConfig, Mapping[str, Any]],
                     preset: Optional[EstimatorPreset] = None) -> ProjectResult:
    """Run the full pipeline. Raises InvalidConfiguration on bad input; nothing else."""
    preset = preset or load_preset()
    cfg = normalize_config(config, preset)

    workforce = estimate_workforce(cfg, preset)
    materials = estimate_materials(cfg, preset)
    timeline = estimate_timeline(workforce, cfg.floors, cfg.duration_constraint, preset)
    cost = estimate_cost(
        cfg.area, cfg.floors, cfg.location, workforce, materials, timeline, preset,
        wage_overrides=cfg.wage_overrides, material_overrides=cfg.material_overrides,
    )
    schedule = project_schedule(timeline)
    layout = generate_layout(cfg.area, cfg.floors, preset, cfg.room_program)
    insights = generate_insights(cfg, cost, timeline, workforce)

    logger.debug("Estimated %s %s x %d floors (%s): total=%.2f days=%d",
                 cfg.area, preset.area_unit, cfg.floors, cfg.location.value,
                 cost.total_cost, timeline.total_days)

    return ProjectResult(
        config=cfg,
        preset=preset.name,
        area_unit=preset.area_unit,
        workforce=workforce,
        materials=materials,
        timeline=timeline,
        cost=cost,
        schedule=schedule,
        layout=layout,
        insights=insights,
        layout_explanation=describe_layout(layout),
    )


class ProjectEstimator:
    """
    Binds one preset and estimates single projects or batches of raw rows.
    Batch rows that fail validation are reported, not raised.
    """

    def __init__(self, preset_name: Optional[str] = None, params: Optional[dict] = None):
        self.preset = load_preset(preset_name, params)

    def estimate(self, raw: Union[ProjectConfig, Mapping[str, Any]]) -> ProjectResult:
        return estimate_project(raw, self.preset)

    def estimate_rows(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        out = []
        for r in rows:
            try:
                out.append({"ok": True, "result": self.estimate(r), "error": ""})
            except InvalidConfiguration as e:
                logger.warning("Skipping invalid project row %s: %s", r, e)
                out.append({"ok": False, "result": None, "error": str(e)})
        return out
