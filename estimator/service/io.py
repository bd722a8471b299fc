# estimator/service/io.py
from __future__ import annotations
import os, yaml, pandas as pd
from pathlib import Path
from typing import Optional

DEFAULT_PARAMS_PATH = Path(__file__).resolve().parent.parent / "params.yaml"

PROJECT_COLUMNS = ["Project_ID", "Area", "Floors", "Location", "Duration_Constraint"]

def load_params(path: Optional[str] = None) -> dict:
    path = path or os.getenv("PARAMS_PATH") or DEFAULT_PARAMS_PATH
    if not os.path.exists(path):
        raise FileNotFoundError(f"Params file not found at {path}")
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)

def load_projects(path: str) -> pd.DataFrame:
    """Read a batch of project rows; column names are matched case-insensitively."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"Projects file not found at {path}")
    df = pd.read_parquet(path) if str(path).endswith(".parquet") else pd.read_csv(path)
    rename = {c.lower(): c for c in PROJECT_COLUMNS}
    rename.update({"duration": "Duration_Constraint", "timeline_constraint": "Duration_Constraint",
                   "duration_constraint": "Duration_Constraint", "id": "Project_ID"})
    df = df.rename(columns={c: rename.get(str(c).strip().lower(), c) for c in df.columns})
    if "Project_ID" not in df.columns:
        df.insert(0, "Project_ID", range(1, len(df) + 1))
    for c in ("Area", "Duration_Constraint"):
        if c in df.columns: df[c] = pd.to_numeric(df[c], errors="coerce")
    return df
