"""
step_response_report.py
Step-response KPIs for closed-loop PID runs (CSV written by scripts/run_pid_demo.py).

- compute_step_kpis(...) is the entrypoint used by tests and the CI gate.
- Columns are auto-detected; only numpy/pandas are needed.

Usage:
  python -m scripts.evaluation.step_response_report --csv artifacts/pid_step.csv
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Union

import numpy as np
import pandas as pd


# ---------- Helpers ----------
def _find_col(df: pd.DataFrame, candidates: Sequence[str]) -> Optional[str]:
    cols = {c.lower(): c for c in df.columns}
    for name in candidates:
        if name.lower() in cols:
            return cols[name.lower()]
    return None


def _time_col(df: pd.DataFrame) -> Optional[str]:
    return _find_col(df, ["t", "time_s", "time", "timestamp"])


def _meas_col(df: pd.DataFrame) -> Optional[str]:
    return _find_col(df, ["y", "measurement", "pv", "output"])


def _sp_col(df: pd.DataFrame) -> Optional[str]:
    return _find_col(df, ["setpoint", "sp", "r", "target"])


def _first_crossing(t: np.ndarray, r: np.ndarray, level: float) -> Optional[float]:
    idx = np.nonzero(r >= level)[0]
    return float(t[idx[0]]) if idx.size else None


@dataclass
class StepKPIs:
    n: int
    duration_s: float
    setpoint: Optional[float]
    final_value: Optional[float]
    steady_state_error: Optional[float]
    overshoot_pct: Optional[float]
    rise_time_s: Optional[float]  # 10% -> 90% of the step
    settling_time_s: Optional[float]  # None if still outside the band at the end
    iae: Optional[float]  # integral of |setpoint - y| dt

    def to_dict(self) -> Dict[str, Union[int, float, None]]:
        return {k: v for k, v in self.__dict__.items()}


# ---------- Core KPI function ----------
def compute_step_kpis(
    data: Optional[pd.DataFrame] = None,
    *,
    df: Optional[pd.DataFrame] = None,
    csv_path: Optional[str] = None,
    band: float = 0.02,
) -> Dict[str, Union[int, float, None]]:
    """
    Compute step-response KPIs from a DataFrame or CSV.

    Parameters
    ----------
    data/df : pandas.DataFrame
        Run table with time, measurement and (optionally) setpoint columns.
    csv_path : str
        Path to CSV if DataFrame not provided.
    band : float
        Settling band as a fraction of the step size.

    Returns
    -------
    dict:
        {
          n, duration_s, setpoint, final_value, steady_state_error,
          overshoot_pct, rise_time_s, settling_time_s, iae
        }
    """
    if df is None:
        df = data
    if df is None and csv_path is not None:
        df = pd.read_csv(csv_path)

    y_col = _meas_col(df) if isinstance(df, pd.DataFrame) else None
    if df is None or df.empty or y_col is None:
        return StepKPIs(0, 0.0, None, None, None, None, None, None, None).to_dict()

    t_col = _time_col(df)
    sp_col = _sp_col(df)

    y = pd.to_numeric(df[y_col], errors="coerce")
    keep = y.notna()
    y = y[keep].to_numpy(dtype=float)
    if t_col:
        t = pd.to_numeric(df[t_col], errors="coerce")[keep].to_numpy(dtype=float)
    else:
        t = np.arange(len(y), dtype=float)

    n = int(y.size)
    if n == 0:
        return StepKPIs(0, 0.0, None, None, None, None, None, None, None).to_dict()

    final_value = float(y[-1])
    if sp_col:
        sp = pd.to_numeric(df[sp_col], errors="coerce").dropna()
        setpoint = float(sp.median()) if len(sp) else final_value
    else:
        setpoint = final_value

    duration_s = float(t[-1] - t[0]) if n >= 2 else 0.0
    err = setpoint - y
    iae = float(np.sum(0.5 * (np.abs(err[1:]) + np.abs(err[:-1])) * np.diff(t))) if n >= 2 else 0.0

    y0 = float(y[0])
    step = setpoint - y0
    if math.isclose(step, 0.0, abs_tol=1e-12):
        overshoot_pct = 0.0
        rise_time_s = None
        settling_time_s = 0.0
    else:
        # Normalised response: 0 at start, 1 at setpoint, regardless of step sign
        r = (y - y0) / step
        overshoot_pct = float(max(0.0, r.max() - 1.0) * 100.0)

        t10 = _first_crossing(t, r, 0.1)
        t90 = _first_crossing(t, r, 0.9)
        rise_time_s = float(t90 - t10) if t10 is not None and t90 is not None else None

        outside = np.nonzero(np.abs(err) > band * abs(step))[0]
        if outside.size == 0:
            settling_time_s = 0.0
        elif outside[-1] == n - 1:
            settling_time_s = None
        else:
            settling_time_s = float(t[outside[-1] + 1] - t[0])

    return StepKPIs(
        n=n,
        duration_s=duration_s,
        setpoint=setpoint,
        final_value=final_value,
        steady_state_error=float(setpoint - final_value),
        overshoot_pct=overshoot_pct,
        rise_time_s=rise_time_s,
        settling_time_s=settling_time_s,
        iae=iae,
    ).to_dict()


# ---------- CLI ----------
def _main():
    import argparse

    p = argparse.ArgumentParser()
    p.add_argument("--csv", type=str, required=True, help="Path to CSV from run_pid_demo")
    p.add_argument("--band", type=float, default=0.02, help="Settling band (fraction of step)")
    p.add_argument("--json-out", type=str, default=None, help="Also write KPIs to this file")
    args = p.parse_args()

    kpis = compute_step_kpis(csv_path=args.csv, band=args.band)
    text = json.dumps(kpis, indent=2, sort_keys=True)
    print(text)
    if args.json_out:
        with open(args.json_out, "w") as f:
            f.write(text + "\n")


if __name__ == "__main__":
    _main()
