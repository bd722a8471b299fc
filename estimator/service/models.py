# estimator/service/models.py
from __future__ import annotations
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from estimator.service.config import ProjectConfig


@dataclass(frozen=True)
class WorkforceBreakdown:
    masons: int
    helpers: int
    steel_fixers: int
    carpenters: int
    supervisors: int
    total_labor_days: int

    def by_trade(self) -> Dict[str, int]:
        return {
            "mason": self.masons, "helper": self.helpers, "steel_fixer": self.steel_fixers,
            "carpenter": self.carpenters, "supervisor": self.supervisors,
        }

    @property
    def trade_workers(self) -> int:
        """Headcount of the non-supervisory trades."""
        return self.masons + self.helpers + self.steel_fixers + self.carpenters


@dataclass(frozen=True)
class MaterialQuantity:
    key: str
    name: str
    quantity: float
    unit: str


@dataclass(frozen=True)
class MaterialBreakdown:
    items: Tuple[MaterialQuantity, ...]

    def get(self, key: str) -> Optional[MaterialQuantity]:
        return next((m for m in self.items if m.key == key), None)

    def quantities(self) -> Dict[str, float]:
        return {m.key: m.quantity for m in self.items}


@dataclass(frozen=True)
class Phase:
    name: str
    start_day: int
    end_day: int
    duration_days: int
    workers: int
    dependencies: Tuple[str, ...] = ()


@dataclass(frozen=True)
class TimelinePlan:
    total_days: int
    total_weeks: int
    total_months: float
    phases: Tuple[Phase, ...]
    natural_days: int = 0


@dataclass(frozen=True)
class CostBreakdown:
    labor_cost: float
    material_cost: float
    overhead_cost: float
    contingency: float
    total_cost: float
    cost_per_unit_area: float
    labor_by_trade: Dict[str, float] = field(default_factory=dict)
    material_by_item: Dict[str, float] = field(default_factory=dict)
    overtime_applied: bool = False


@dataclass(frozen=True)
class ScheduleWeek:
    week: int
    activities: Tuple[str, ...]
    phase: str
    workers_needed: int


@dataclass(frozen=True)
class Room:
    name: str
    width: float
    height: float
    x: float
    y: float

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass(frozen=True)
class FloorLayout:
    floor: int
    label: str
    rooms: Tuple[Room, ...]
    total_area: float
    side: float

    def occupied_area(self) -> float:
        return sum(r.area for r in self.rooms)


@dataclass(frozen=True)
class Insight:
    title: str
    category: str
    severity: str
    score: float
    recommendation: str


@dataclass(frozen=True)
class ProjectResult:
    config: ProjectConfig
    preset: str
    area_unit: str
    workforce: WorkforceBreakdown
    materials: MaterialBreakdown
    timeline: TimelinePlan
    cost: CostBreakdown
    schedule: Tuple[ScheduleWeek, ...]
    layout: Tuple[FloorLayout, ...]
    insights: Tuple[Insight, ...]
    layout_explanation: str = ""

    def to_dict(self) -> dict:
        return _plain(asdict(self))


def _plain(obj):
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dict):
        return {k: _plain(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_plain(v) for v in obj]
    return obj
