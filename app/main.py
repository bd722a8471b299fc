from __future__ import annotations
import os, logging
from typing import Dict, Any, Optional, Union

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator

from estimator.service.io import load_params
from estimator.service.utils import rupees
from estimator.service.config import InvalidConfiguration, LocationTier, RoomProgramIn
from estimator.service.presets import available_presets, load_preset
from estimator.service.engine import estimate_project
from estimator.fusion.client import provider_from_env
from estimator.fusion.enrich import enrich_project

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("construction-estimator-api")

PARAMS_PATH     = os.getenv("PARAMS_PATH", "")
DEFAULT_PRESET  = os.getenv("ESTIMATOR_PRESET", "")
ENRICH_DEADLINE = float(os.getenv("ENRICH_DEADLINE", "30"))

SERVICE_NAME = os.getenv("SERVICE_NAME", "construction-estimator")
SERVICE_STATUS = {"service": SERVICE_NAME, "status": "ok", "docs": "/docs", "openapi": "/openapi.json"}

def load_state():
    P = load_params(PARAMS_PATH or None)
    default = DEFAULT_PRESET or P.get("default_preset", "standard")
    presets = {name: load_preset(name, P) for name in available_presets(P)}
    if default not in presets:
        raise KeyError(f"ESTIMATOR_PRESET '{default}' not in params presets {list(presets)}")
    return {"params": P, "presets": presets, "default_preset": default}

app_state: Dict[str, Any] = load_state()
app = FastAPI(title="Construction Estimator API",
              description="Deterministic workforce, material, timeline and cost estimates for residential builds.",
              version="1.0.0")

class EstimateIn(BaseModel):
    area: float
    floors: Union[int, str] = 1
    location: str = "Urban"
    duration_constraint: Optional[Union[int, str]] = None  # blank means unconstrained
    preset: Optional[str] = None
    room_program: RoomProgramIn = Field(default_factory=RoomProgramIn)
    wage_overrides: Dict[str, float] = Field(default_factory=dict)
    material_overrides: Dict[str, float] = Field(default_factory=dict)
    @field_validator("location")
    @classmethod
    def norm_location(cls, v: str) -> str: return v.strip().capitalize()

@app.get("/", tags=["meta"])
def root(): return SERVICE_STATUS

@app.get("/healthz", tags=["meta"])
def healthz(): return {"status": "healthy"}

@app.get("/meta/locations", tags=["meta"])
def meta_locations():
    preset = app_state["presets"][app_state["default_preset"]]
    return {"locations": {t.value: preset.location_multiplier(t) for t in LocationTier}}

@app.get("/meta/presets", tags=["meta"])
def meta_presets():
    return {"default": app_state["default_preset"],
            "presets": {name: p.area_unit for name, p in app_state["presets"].items()}}

def pick_preset(name: Optional[str]):
    key = name or app_state["default_preset"]
    if key not in app_state["presets"]:
        raise InvalidConfiguration(f"Unknown preset '{key}'. Expected one of: {list(app_state['presets'])}")
    return app_state["presets"][key]

def run_estimate(payload: EstimateIn):
    preset = pick_preset(payload.preset)
    raw = payload.model_dump(exclude={"preset"})
    return estimate_project(raw, preset)

def result_body(result) -> dict:
    body = result.to_dict()
    body["currency"] = "INR"
    body["display"] = rupees(result.cost.total_cost)
    return body

@app.post("/estimate", tags=["estimate"])
def estimate(payload: EstimateIn):
    try:
        result = run_estimate(payload)
        return JSONResponse(result_body(result))
    except InvalidConfiguration as ic:
        raise HTTPException(status_code=400, detail=f"Invalid project configuration: {ic!s}") from ic
    except KeyError as ke:
        raise HTTPException(status_code=400, detail=f"Missing key in input or config: {ke!s}") from ke
    except Exception as e:
        logger.exception("Estimation failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Estimation failed: {e!s}")

@app.post("/estimate/enriched", tags=["estimate"])
def estimate_enriched(payload: EstimateIn):
    try:
        result = run_estimate(payload)
        enriched = enrich_project(result, provider_from_env(), timeout=ENRICH_DEADLINE,
                                  slack=pick_preset(payload.preset).layout_slack)
        body = result_body(enriched.result)
        body["sources"] = {"layout": enriched.layout_source, "insights": enriched.insights_source}
        body["notice"] = enriched.notice
        return JSONResponse(body)
    except InvalidConfiguration as ic:
        raise HTTPException(status_code=400, detail=f"Invalid project configuration: {ic!s}") from ic
    except KeyError as ke:
        raise HTTPException(status_code=400, detail=f"Missing key in input or config: {ke!s}") from ke
    except Exception as e:
        logger.exception("Enriched estimation failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Estimation failed: {e!s}")
