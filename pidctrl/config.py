"""YAML config loading for the PID controller and the demo plant.

Loading never validates: an out-of-range file is reported by
``PID.initialize`` / ``PID.set_config`` as ``PIDStatus.INVALID_CONFIG``.
"""

from __future__ import annotations

import os
from typing import Any, Dict, Optional

import yaml

from pidctrl.pid import PIDConfig
from sim.first_order import FirstOrderParams

DEFAULT_CONFIG = PIDConfig(kp=3.0, kd=0.05, ki=3.0, timestep=0.02, min_out=-2.0, max_out=2.0)
DEFAULT_PLANT = FirstOrderParams(gain=0.8, tau=0.5)


def _read_yaml(path: Optional[str]) -> Dict[str, Any]:
    if not path or not os.path.exists(path):
        return {}
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def config_from_dict(cfg: Dict[str, Any]) -> PIDConfig:
    gains = cfg.get("gains") or {}
    lim = cfg.get("limits") or {}
    d = DEFAULT_CONFIG
    return PIDConfig(
        kp=float(gains.get("kp", d.kp)),
        kd=float(gains.get("kd", d.kd)),
        ki=float(gains.get("ki", d.ki)),
        timestep=float(cfg.get("timestep", d.timestep)),
        min_out=float(lim.get("min_out", d.min_out)),
        max_out=float(lim.get("max_out", d.max_out)),
    )


def load_pid_config(path: Optional[str]) -> PIDConfig:
    return config_from_dict(_read_yaml(path))


def load_plant_params(path: Optional[str]) -> FirstOrderParams:
    plant = _read_yaml(path).get("plant") or {}
    d = DEFAULT_PLANT
    return FirstOrderParams(
        gain=float(plant.get("gain", d.gain)),
        tau=float(plant.get("tau", d.tau)),
        u_max=float(plant.get("u_max", d.u_max)),
    )
