# tests/test_batch.py
import pandas as pd

from estimator.batch.batch_estimate import SUMMARY_COLUMNS, main
from estimator.service.io import load_projects


def test_load_projects_normalizes_columns(tmp_path):
    src = tmp_path / "projects.csv"
    pd.DataFrame({"area": [1000], "FLOORS": [2], "location": ["Rural"], "duration": [60]}).to_csv(src, index=False)
    df = load_projects(str(src))
    assert list(df.columns) == ["Project_ID", "Area", "Floors", "Location", "Duration_Constraint"]
    assert df.loc[0, "Project_ID"] == 1


def test_batch_summary_csv(tmp_path):
    src = tmp_path / "projects.csv"
    pd.DataFrame({
        "Project_ID": ["a", "b", "c"],
        "Area": [1000, 250, -3],
        "Floors": ["G+2", "1", "1"],
        "Location": ["Urban", "metro", "Urban"],
        "Duration_Constraint": [None, 45, None],
    }).to_csv(src, index=False)
    out = tmp_path / "out" / "summary.csv"
    preview = tmp_path / "preview.csv"

    summary = main(str(src), str(out), preview_csv=str(preview), preview_n=2)

    assert list(summary.columns) == SUMMARY_COLUMNS
    assert summary.loc[0, "Total_Days"] == 30
    assert summary.loc[0, "Error"] == ""
    assert summary.loc[1, "Total_Cost"] > 0
    assert summary.loc[2, "Error"] != ""
    assert pd.isna(summary.loc[2, "Total_Cost"])
    assert out.exists()
    assert len(pd.read_csv(preview)) == 2
