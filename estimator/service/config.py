# estimator/service/config.py
"""
Project configuration and its normalizer.

Raw user input (a form post, a CSV row, a JSON payload) is validated through a
pydantic model and turned into an immutable ``ProjectConfig``. Bad input shape
is reported as ``InvalidConfiguration``; nothing else in the engine raises.
"""

from __future__ import annotations
import math, re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from estimator.service.presets import TRADES, EstimatorPreset


class InvalidConfiguration(ValueError):
    """Raised when a project configuration cannot be estimated."""


class LocationTier(str, Enum):
    URBAN = "Urban"
    SUBURBAN = "Suburban"
    RURAL = "Rural"
    METRO = "Metro"

    @classmethod
    def parse(cls, value) -> "LocationTier":
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().lower()
        for tier in cls:
            if tier.value.lower() == key:
                return tier
        raise InvalidConfiguration(
            f"Unknown location tier '{value}'. Expected one of: {[t.value for t in cls]}"
        )


@dataclass(frozen=True)
class RoomProgram:
    bedrooms: int = 3
    bathrooms: int = 2
    dining: bool = True
    staircase: bool = True
    balcony: bool = True
    parking: bool = False


@dataclass(frozen=True)
class ProjectConfig:
    area: float
    floors: int
    location: LocationTier
    floors_label: str = ""
    duration_constraint: Optional[int] = None
    room_program: RoomProgram = field(default_factory=RoomProgram)
    wage_overrides: Dict[str, float] = field(default_factory=dict)
    material_overrides: Dict[str, float] = field(default_factory=dict)


def parse_floors_label(label) -> int:
    """'G' -> 1, 'G+2' -> 3, '4' -> 4. Anything unparseable is 1."""
    if isinstance(label, bool):
        return 1
    if isinstance(label, (int, float)):
        return int(label)
    s = str(label or "").strip()
    m = re.match(r"^G\s*\+\s*(\d+)$", s, flags=re.IGNORECASE)
    if m:
        return int(m.group(1)) + 1
    if s.lower() == "g":
        return 1
    # leading integer only: "2.0" and "2.5" are 2 floors
    m = re.match(r"^([+-]?\d+)", s)
    return int(m.group(1)) if m else 1


def floors_label_for(floors: int) -> str:
    return "G" if floors <= 1 else f"G+{floors - 1}"


class RoomProgramIn(BaseModel):
    bedrooms: int = Field(3, ge=0)
    bathrooms: int = Field(2, ge=0)
    dining: bool = True
    staircase: bool = True
    balcony: bool = True
    parking: bool = False


class ProjectConfigIn(BaseModel):
    area: float
    floors: Union[int, str] = 1
    location: str = "Urban"
    duration_constraint: Optional[int] = None
    room_program: RoomProgramIn = Field(default_factory=RoomProgramIn)
    wage_overrides: Dict[str, float] = Field(default_factory=dict)
    material_overrides: Dict[str, float] = Field(default_factory=dict)

    @field_validator("duration_constraint", mode="before")
    @classmethod
    def blank_duration(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        if isinstance(v, float) and math.isnan(v):
            return None
        return v


_ALIASES = {
    "built_up_area": "area", "builtUpArea": "area",
    "floors_label": "floors", "floorsLabel": "floors",
    "timeline_constraint": "duration_constraint", "timelineConstraint": "duration_constraint",
    "duration_days": "duration_constraint", "durationDays": "duration_constraint",
    "custom_wages": "wage_overrides", "customWages": "wage_overrides",
    "custom_material_costs": "material_overrides", "customMaterialCosts": "material_overrides",
}


def _check_overrides(kind: str, table: Mapping[str, float], known) -> Dict[str, float]:
    unknown = sorted(set(table) - set(known))
    if unknown:
        raise InvalidConfiguration(f"Unknown {kind} override keys: {unknown}. Expected: {list(known)}")
    out = {}
    for k, v in table.items():
        v = float(v)
        if not math.isfinite(v) or v < 0:
            raise InvalidConfiguration(f"{kind} override '{k}' must be a non-negative number, got {v}")
        out[k] = v
    return out


def normalize_config(raw: Union[ProjectConfig, Mapping[str, Any]],
                     preset: Optional[EstimatorPreset] = None) -> ProjectConfig:
    """
    Validate raw input and apply defaults.

    Raises InvalidConfiguration when area <= 0, floors < 1, the location tier
    is unknown, or an override table has unknown keys / negative values.
    """
    if isinstance(raw, ProjectConfig):
        raw = {
            "area": raw.area, "floors": raw.floors, "location": raw.location.value,
            "duration_constraint": raw.duration_constraint,
            "room_program": vars(raw.room_program),
            "wage_overrides": raw.wage_overrides, "material_overrides": raw.material_overrides,
        }
    if not isinstance(raw, Mapping):
        raise InvalidConfiguration(f"Project configuration must be a mapping, got {type(raw).__name__}")

    data = {_ALIASES.get(k, k): v for k, v in raw.items()}
    try:
        cin = ProjectConfigIn.model_validate(data)
    except ValidationError as e:
        raise InvalidConfiguration(str(e)) from e

    if not math.isfinite(cin.area) or cin.area <= 0:
        raise InvalidConfiguration(f"Built-up area must be positive, got {cin.area}")

    floors = parse_floors_label(cin.floors)
    if floors < 1:
        raise InvalidConfiguration(f"Floor count must be at least 1, got {cin.floors}")
    label = cin.floors.strip().upper() if isinstance(cin.floors, str) and "+" in cin.floors \
        else floors_label_for(floors)

    location = LocationTier.parse(cin.location)

    duration = cin.duration_constraint
    if duration is not None and duration < 0:
        raise InvalidConfiguration(f"Duration constraint cannot be negative, got {duration}")
    if not duration:
        duration = None

    material_keys = preset.material_keys() if preset is not None else tuple(cin.material_overrides)
    return ProjectConfig(
        area=float(cin.area),
        floors=floors,
        location=location,
        floors_label=label.replace(" ", ""),
        duration_constraint=duration,
        room_program=RoomProgram(**cin.room_program.model_dump()),
        wage_overrides=_check_overrides("wage", cin.wage_overrides, TRADES),
        material_overrides=_check_overrides("material", cin.material_overrides, material_keys),
    )
