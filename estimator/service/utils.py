# estimator/service/utils.py
from __future__ import annotations
import math
import numpy as np, pandas as pd

def to_number(x, default=0.0) -> float:
    try:
        if isinstance(x, pd.Series):
            return float(x.iloc[0]) if not x.empty else float(default)
        if isinstance(x, (np.ndarray, list, tuple, pd.Index)):
            arr = np.asarray(x).ravel()
            return float(arr[0]) if arr.size else float(default)
        v = float(x)
        return v if np.isfinite(v) else float(default)
    except (TypeError, ValueError):
        v = pd.to_numeric(x, errors="coerce")
        return float(v) if pd.notna(v) and np.isfinite(v) else float(default)

def round_to(value: float, decimals: int = 0, mode: str = "round") -> float:
    """Round half away from zero (``round``) or up (``ceil``) at the given decimals."""
    factor = 10 ** decimals
    if mode == "ceil":
        # guard against 0.4 * 3000 == 1200.0000000000002 style noise before ceiling
        out = math.ceil(round(value * factor, 9)) / factor
    else:
        out = math.floor(value * factor + 0.5) / factor
    return float(int(out)) if decimals == 0 else out

def money(x: float) -> float:
    return round_to(x, 2)

def format_inr(x) -> str:
    """Indian digit grouping without decimals: 12345678 -> '1,23,45,678'."""
    v = to_number(x, default=np.nan)
    if not np.isfinite(v): return "—"
    sign = "-" if v < 0 else ""
    digits = str(int(round_to(abs(v), 0)))
    if len(digits) <= 3:
        return sign + digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:]); head = head[:-2]
    if head: groups.insert(0, head)
    return sign + ",".join(groups + [tail])

def rupees(x) -> str:
    s = format_inr(x)
    return s if s == "—" else f"₹{s}"
