# estimator/batch/batch_estimate.py
import argparse
import logging
import os
import numpy as np
import pandas as pd

from estimator.service.engine import ProjectEstimator
from estimator.service.io import load_params, load_projects

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = [
    "Project_ID", "Area", "Floors", "Location", "Duration_Constraint",
    "Total_Days", "Total_Weeks", "Labour_Days", "Workers",
    "Labour_Cost", "Material_Cost", "Overhead_Cost", "Contingency", "Total_Cost",
    "Cost_per_Unit_Area", "Overtime_Applied", "Error",
]


def _raw_row(row: pd.Series) -> dict:
    """
    Map a projects-table row to raw engine input.
    Missing floors default to 1 and missing location to Urban; NaN durations mean
    unconstrained. Anything else is left for the normalizer to reject.
    """
    raw = {
        "area": row.get("Area"),
        "floors": row.get("Floors", 1),
        "location": row.get("Location", "Urban"),
    }
    if pd.isna(raw["floors"]):
        raw["floors"] = 1
    if isinstance(raw["floors"], np.integer) or (
            isinstance(raw["floors"], (float, np.floating)) and float(raw["floors"]).is_integer()):
        raw["floors"] = int(raw["floors"])
    if pd.isna(raw["location"]):
        raw["location"] = "Urban"
    dur = row.get("Duration_Constraint")
    if dur is not None and pd.notna(dur):
        raw["duration_constraint"] = int(dur)
    return raw


def summarize(df: pd.DataFrame, estimator: ProjectEstimator) -> pd.DataFrame:
    rows = [_raw_row(r) for _, r in df.iterrows()]
    outcomes = estimator.estimate_rows(rows)

    records = []
    for (_, src), out in zip(df.iterrows(), outcomes):
        rec = dict.fromkeys(SUMMARY_COLUMNS)
        rec.update({
            "Project_ID": src.get("Project_ID"),
            "Area": src.get("Area"),
            "Floors": src.get("Floors"),
            "Location": src.get("Location"),
            "Duration_Constraint": src.get("Duration_Constraint"),
            "Error": out["error"],
        })
        res = out["result"]
        if res is not None:
            rec.update({
                "Total_Days": res.timeline.total_days,
                "Total_Weeks": res.timeline.total_weeks,
                "Labour_Days": res.workforce.total_labor_days,
                "Workers": res.workforce.trade_workers + res.workforce.supervisors,
                "Labour_Cost": res.cost.labor_cost,
                "Material_Cost": res.cost.material_cost,
                "Overhead_Cost": res.cost.overhead_cost,
                "Contingency": res.cost.contingency,
                "Total_Cost": res.cost.total_cost,
                "Cost_per_Unit_Area": res.cost.cost_per_unit_area,
                "Overtime_Applied": res.cost.overtime_applied,
            })
        records.append(rec)
    return pd.DataFrame.from_records(records, columns=SUMMARY_COLUMNS)


def main(input_path: str, out_path: str, preset: str = "", params_path: str = "",
         preview_csv: str = "", preview_n: int = 200) -> pd.DataFrame:
    out_dir = os.path.dirname(out_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    if preview_csv and os.path.dirname(preview_csv):
        os.makedirs(os.path.dirname(preview_csv), exist_ok=True)

    P = load_params(params_path or None)
    estimator = ProjectEstimator(preset or None, P)

    df = load_projects(input_path)
    summary = summarize(df, estimator)
    failed = int((summary["Error"] != "").sum())
    logger.info("Estimated %d projects (%d invalid) with preset '%s'",
                len(summary), failed, estimator.preset.name)

    if out_path.endswith(".csv"):
        summary.to_csv(out_path, index=False)
    else:
        summary.to_parquet(out_path, index=False)

    if preview_csv:
        summary.head(int(preview_n)).to_csv(preview_csv, index=False)
    return summary


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    ap = argparse.ArgumentParser()
    ap.add_argument("--input", required=True, help="CSV/parquet with Area, Floors, Location[, Duration_Constraint]")
    ap.add_argument("--out", required=True, help="Where to save the summary (parquet, or .csv)")
    ap.add_argument("--preset", default="", help="Coefficient preset (default from params.yaml)")
    ap.add_argument("--params", default="", help="Optional params.yaml path")
    ap.add_argument("--preview-csv", default="", help="Optional small CSV preview")
    ap.add_argument("--preview-n", type=int, default=200)
    args = ap.parse_args()
    main(args.input, args.out, args.preset, args.params, args.preview_csv, args.preview_n)
