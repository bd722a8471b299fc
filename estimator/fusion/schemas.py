# estimator/fusion/schemas.py
"""Response shapes an enrichment service must return to replace engine output."""

from __future__ import annotations
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class InsightOut(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str = Field(..., min_length=1)
    category: Literal["Budget", "Timeline", "Sustainability", "Optimization"]
    severity: Literal["low", "medium", "high"]
    score: float = Field(..., ge=0, le=100)
    recommendation: str = Field(..., min_length=1)

    @field_validator("severity", mode="before")
    @classmethod
    def lower_severity(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class InsightsOut(BaseModel):
    insights: List[InsightOut] = Field(..., min_length=1)


class RoomOut(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1)
    x: float = Field(..., ge=0)
    y: float = Field(..., ge=0)
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)


class FloorOut(BaseModel):
    floor: int = Field(..., ge=0)
    rooms: List[RoomOut] = Field(..., min_length=1)


class LayoutOut(BaseModel):
    floors: List[FloorOut] = Field(..., min_length=1)
    explanation: str = ""
