# estimator/service/presets.py
"""
Coefficient presets.

A preset bundles every table the engine needs (area unit, trade coefficients
and wages, material catalog and prices, phase catalog, cost policy, layout
scale) so the estimation stages receive plain data instead of reading module
level constants. Presets are built from ``params.yaml`` and are immutable.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from estimator.service.io import load_params

TRADES = ("mason", "helper", "steel_fixer", "carpenter", "supervisor")


@dataclass(frozen=True)
class TradeSpec:
    key: str
    label: str
    wage: float
    area_per_worker: Optional[float] = None   # None for supervisors (span-of-control driven)
    overtime: bool = False


@dataclass(frozen=True)
class MaterialSpec:
    key: str
    name: str
    coefficient: float
    unit: str
    price: float
    rounding: str = "round"
    decimals: int = 0
    price_basis: float = 1.0


@dataclass(frozen=True)
class PhaseSpec:
    name: str
    share: float
    workers: int
    after: Optional[Tuple[str, ...]] = None
    per_floor: bool = False


@dataclass(frozen=True)
class CostPolicy:
    utilization: float
    overhead_pct: float
    contingency_pct: float
    compression_threshold: float
    overtime_multiplier: float


@dataclass(frozen=True)
class EstimatorPreset:
    name: str
    area_unit: str
    floor_factor: float
    productivity: float
    trades: Dict[str, TradeSpec]
    supervisor_minimum: int
    supervisor_span: int
    materials: Tuple[MaterialSpec, ...]
    team_size: float
    minimum_days: int
    minimum_phase_days: int
    phases: Tuple[PhaseSpec, ...]
    cost: CostPolicy
    locations: Dict[str, float]
    layout_scale: float = 1.0
    layout_slack: float = 0.05
    wages: Dict[str, float] = field(default_factory=dict)
    prices: Dict[str, float] = field(default_factory=dict)

    def effective_area(self, area: float, floors: int) -> float:
        return area * (1.0 + (floors - 1) * self.floor_factor)

    def location_multiplier(self, tier) -> float:
        return float(self.locations[getattr(tier, "value", tier)])

    def material_keys(self) -> Tuple[str, ...]:
        return tuple(m.key for m in self.materials)


def _phase(rec: dict) -> PhaseSpec:
    after = rec.get("after")
    return PhaseSpec(
        name=str(rec["name"]),
        share=float(rec["share"]),
        workers=int(rec["workers"]),
        after=tuple(str(a) for a in after) if after else None,
        per_floor=bool(rec.get("per_floor", False)),
    )


def build_preset(name: str, P: dict) -> EstimatorPreset:
    presets = P.get("presets", {})
    if name not in presets:
        raise KeyError(f"Unknown preset '{name}'. Available: {sorted(presets)}")
    rec = presets[name]

    trades = {}
    for key in TRADES:
        t = rec["trades"][key]
        apw = t.get("area_per_worker")
        trades[key] = TradeSpec(
            key=key, label=str(t.get("label", key.title())), wage=float(t["wage"]),
            area_per_worker=float(apw) if apw is not None else None,
            overtime=bool(t.get("overtime", False)),
        )

    materials = tuple(
        MaterialSpec(
            key=str(m["key"]), name=str(m["name"]), coefficient=float(m["coefficient"]),
            unit=str(m["unit"]), price=float(m["price"]),
            rounding=str(m.get("rounding", "round")), decimals=int(m.get("decimals", 0)),
            price_basis=float(m.get("price_basis", 1.0)),
        )
        for m in rec["materials"]
    )

    tl, cost, layout = rec["timeline"], rec["cost"], rec.get("layout", {})
    return EstimatorPreset(
        name=name,
        area_unit=str(rec["area_unit"]),
        floor_factor=float(rec.get("floor_factor", 1.0)),
        productivity=float(rec["productivity"]),
        trades=trades,
        supervisor_minimum=int(rec["supervision"]["minimum"]),
        supervisor_span=int(rec["supervision"]["span"]),
        materials=materials,
        team_size=float(tl["team_size"]),
        minimum_days=int(tl["minimum_days"]),
        minimum_phase_days=int(tl["minimum_phase_days"]),
        phases=tuple(_phase(p) for p in tl["phases"]),
        cost=CostPolicy(
            utilization=float(cost["utilization"]),
            overhead_pct=float(cost["overhead_pct"]),
            contingency_pct=float(cost["contingency_pct"]),
            compression_threshold=float(cost["compression_threshold"]),
            overtime_multiplier=float(cost["overtime_multiplier"]),
        ),
        locations={str(k): float(v) for k, v in P["locations"].items()},
        layout_scale=float(layout.get("scale", 1.0)),
        layout_slack=float(layout.get("slack", 0.05)),
        wages={k: t.wage for k, t in trades.items()},
        prices={m.key: m.price for m in materials},
    )


def load_preset(name: Optional[str] = None, P: Optional[dict] = None) -> EstimatorPreset:
    P = P if P is not None else load_params()
    return build_preset(name or P.get("default_preset", "standard"), P)


def available_presets(P: Optional[dict] = None) -> Dict[str, str]:
    P = P if P is not None else load_params()
    return {k: str(v.get("area_unit", "")) for k, v in P.get("presets", {}).items()}
