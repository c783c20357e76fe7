import json
import subprocess
import sys
from pathlib import Path

import pandas as pd

from scripts.evaluation import assert_step_kpis
from scripts.evaluation.step_response_report import compute_step_kpis
from scripts.run_pid_demo import main

ROOT = Path(__file__).resolve().parents[2]
CONFIG = str(ROOT / "configs" / "pid.yaml")


def test_demo_step_response_settles(tmp_path):
    out = tmp_path / "step.csv"
    rc = main(["--pid-config", CONFIG, "--sim-seconds", "8.0", "--csv-out", str(out)])
    assert rc == 0

    df = pd.read_csv(out)
    assert list(df.columns) == ["t", "setpoint", "y", "u", "integrator"]
    assert len(df) == 400  # 8 s at 0.02 s
    assert df["u"].between(-2.0, 2.0).all()
    assert df["integrator"].between(-2.0, 2.0).all()

    k = compute_step_kpis(df=df)
    assert abs(k["steady_state_error"]) < 0.01
    assert k["overshoot_pct"] < 20.0
    assert k["settling_time_s"] is not None and k["settling_time_s"] < 8.0

    assert assert_step_kpis.main(["--csv", str(out), "--max-settling-s", "8.0"]) == 0


def test_demo_records_peek_column(tmp_path):
    out = tmp_path / "step.csv"
    assert main(["--pid-config", CONFIG, "--sim-seconds", "1.0", "--peek", "--csv-out", str(out)]) == 0
    df = pd.read_csv(out)
    assert "peek" in df.columns
    assert df["peek"].between(-2.0, 2.0).all()


def test_demo_rejects_invalid_config(tmp_path, capsys):
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("timestep: 0.0\n")
    out = tmp_path / "step.csv"
    assert main(["--pid-config", str(cfg), "--csv-out", str(out)]) == 2
    assert "invalid_config" in capsys.readouterr().err
    assert not out.exists()


def test_kpi_gate_fails_on_unsettled_run(tmp_path):
    out = tmp_path / "step.csv"
    assert main(["--pid-config", CONFIG, "--sim-seconds", "0.5", "--csv-out", str(out)]) == 0
    assert assert_step_kpis.main(["--csv", str(out), "--min-samples", "10"]) == 2


def test_report_cli_prints_json(tmp_path):
    out = tmp_path / "step.csv"
    assert main(["--pid-config", CONFIG, "--sim-seconds", "2.0", "--csv-out", str(out)]) == 0
    json_out = tmp_path / "kpis.json"
    res = subprocess.run(
        [
            sys.executable,
            "-m",
            "scripts.evaluation.step_response_report",
            "--csv",
            str(out),
            "--json-out",
            str(json_out),
        ],
        cwd=ROOT,
        capture_output=True,
        text=True,
        check=True,
    )
    data = json.loads(res.stdout)
    assert data["n"] == 100
    assert json.loads(json_out.read_text()) == data
