# estimator/schedule/timeline.py
"""
Timeline estimation.

Duration comes from labour-days spread over the trade headcount (grouped into
teams), may be compressed to a user constraint, and is floored at the preset's
irreducible minimum. The phase catalog is walked in order; per-floor blocks
repeat once per floor, and a phase without explicit predecessors depends on the
phase emitted just before it. Days are assigned by accumulation only, so two
phases that could run in parallel (electrical, plumbing) still get consecutive
windows.
"""

from __future__ import annotations
import math
from typing import List, Optional, Tuple

from estimator.service.models import Phase, TimelinePlan, WorkforceBreakdown
from estimator.service.presets import EstimatorPreset, PhaseSpec
from estimator.service.utils import round_to


def natural_duration(workforce: WorkforceBreakdown, preset: EstimatorPreset) -> int:
    """Unconstrained duration in days, before the minimum floor is applied."""
    teams = max(1.0, workforce.trade_workers / preset.team_size)
    return int(math.ceil(workforce.total_labor_days / teams))


def committed_duration(natural: int, constraint: Optional[int], preset: EstimatorPreset) -> int:
    days = natural
    if constraint and constraint < days:
        days = constraint
    return max(days, preset.minimum_days)


def phase_duration(total_days: int, share: float, minimum: int) -> int:
    # round before ceiling so 100 * 0.07 == 7.000000000000001 stays 7 days
    return max(minimum, int(math.ceil(round(total_days * share, 9))))


def expand_catalog(phases: Tuple[PhaseSpec, ...], floors: int) -> List[PhaseSpec]:
    """Repeat each contiguous per-floor block once per floor, in floor order."""
    out: List[PhaseSpec] = []
    i = 0
    while i < len(phases):
        if not phases[i].per_floor:
            out.append(phases[i])
            i += 1
            continue
        j = i
        while j < len(phases) and phases[j].per_floor:
            j += 1
        block = phases[i:j]
        for floor in range(floors):
            for spec in block:
                out.append(PhaseSpec(
                    name=spec.name.format(floor=floor),
                    share=spec.share,
                    workers=spec.workers,
                    after=tuple(a.format(floor=floor) for a in spec.after) if spec.after else None,
                    per_floor=True,
                ))
        i = j
    return out


def generate_phases(total_days: int, floors: int, preset: EstimatorPreset) -> Tuple[Phase, ...]:
    phases: List[Phase] = []
    day = 1
    for spec in expand_catalog(preset.phases, floors):
        dur = phase_duration(total_days, spec.share, preset.minimum_phase_days)
        if spec.after is not None:
            deps = spec.after
        else:
            deps = (phases[-1].name,) if phases else ()
        phases.append(Phase(
            name=spec.name,
            start_day=day,
            end_day=day + dur - 1,
            duration_days=dur,
            workers=spec.workers,
            dependencies=deps,
        ))
        day += dur
    return tuple(phases)


def estimate_timeline(workforce: WorkforceBreakdown, floors: int,
                      duration_constraint: Optional[int],
                      preset: EstimatorPreset) -> TimelinePlan:
    natural = max(natural_duration(workforce, preset), preset.minimum_days)
    total_days = committed_duration(natural, duration_constraint, preset)
    return TimelinePlan(
        total_days=total_days,
        total_weeks=int(math.ceil(total_days / 7)),
        total_months=round_to(total_days / 30, 1),
        phases=generate_phases(total_days, floors, preset),
        natural_days=natural,
    )
