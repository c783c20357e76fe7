from __future__ import annotations

import argparse
import csv
import os
import sys

from pidctrl.config import load_pid_config, load_plant_params
from pidctrl.pid import PID, PIDStatus
from sim.first_order import FirstOrderPlant


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Step-response demo: PID -> first-order plant")
    ap.add_argument("--pid-config", default="configs/pid.yaml")
    ap.add_argument("--setpoint", type=float, default=1.0)
    ap.add_argument("--sim-seconds", type=float, default=10.0)
    ap.add_argument("--csv-out", default="artifacts/pid_step.csv")
    ap.add_argument(
        "--peek", action="store_true", help="also record calculate_peek() before each step"
    )
    args = ap.parse_args(argv)

    cfg = load_pid_config(args.pid_config)
    pid = PID()
    status = pid.initialize(cfg)
    if status is not PIDStatus.OK:
        print(f"[pid] rejected config {cfg}: {status.value}", file=sys.stderr)
        return 2

    plant = FirstOrderPlant(load_plant_params(args.pid_config))
    dt = cfg.timestep
    steps = int(round(args.sim_seconds / dt))

    out_dir = os.path.dirname(args.csv_out)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)

    with open(args.csv_out, "w", newline="") as f:
        w = csv.writer(f)
        header = ["t", "setpoint", "y", "u", "integrator"]
        if args.peek:
            header.append("peek")
        w.writerow(header)

        y = plant.state()
        t = 0.0
        for _ in range(steps):
            peek = pid.calculate_peek(args.setpoint, y) if args.peek else None
            u = pid.calculate(args.setpoint, y)
            y = plant.step(dt, u)
            t += dt
            row = [f"{t:.4f}", args.setpoint, f"{y:.6f}", f"{u:.6f}", f"{pid.integrator:.6f}"]
            if args.peek:
                row.append(f"{peek:.6f}")
            w.writerow(row)

    print(f"[pid] {steps} steps, final y={y:.4f} (setpoint {args.setpoint})")
    print(f"Wrote: {args.csv_out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
