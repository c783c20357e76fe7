#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys

import pandas as pd

from scripts.evaluation.step_response_report import compute_step_kpis


def check(k: dict, args: argparse.Namespace) -> list[str]:
    failed = []
    if k["n"] < args.min_samples:
        failed.append(f"samples {k['n']} < {args.min_samples}")
    if k["overshoot_pct"] is not None and k["overshoot_pct"] > args.max_overshoot_pct:
        failed.append(f"overshoot_pct {k['overshoot_pct']:.2f} > {args.max_overshoot_pct}")
    if k["settling_time_s"] is None:
        failed.append("response never settled")
    elif k["settling_time_s"] > args.max_settling_s:
        failed.append(f"settling_time_s {k['settling_time_s']:.3f} > {args.max_settling_s}")
    if k["steady_state_error"] is not None and abs(k["steady_state_error"]) > args.max_ss_error:
        failed.append(f"|steady_state_error| {abs(k['steady_state_error']):.4f} > {args.max_ss_error}")
    return failed


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Fail if a step-response run misses its KPI budget")
    ap.add_argument("--csv", required=True, help="step CSV (run_pid_demo output)")
    ap.add_argument("--band", type=float, default=0.02)
    ap.add_argument("--min-samples", type=int, default=100)
    ap.add_argument("--max-overshoot-pct", type=float, default=20.0)
    ap.add_argument("--max-settling-s", type=float, default=10.0)
    ap.add_argument("--max-ss-error", type=float, default=0.02)
    args = ap.parse_args(argv)

    k = compute_step_kpis(pd.read_csv(args.csv), band=args.band)
    print("[pid] KPIs:", k)

    failed = check(k, args)
    if failed:
        print("[pid] step thresholds FAILED: " + "; ".join(failed), file=sys.stderr)
        return 2
    print("[pid] step thresholds PASS")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
