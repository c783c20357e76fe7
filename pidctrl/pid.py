from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


def _clamp(v: float, lo: float, hi: float) -> float:
    return hi if v > hi else lo if v < lo else v


@dataclass(frozen=True)
class PIDConfig:
    kp: float = 0.0
    kd: float = 0.0
    ki: float = 0.0
    timestep: float = 0.0  # seconds between calculate() calls, must be > 0
    min_out: float = 0.0  # output and integrator bounds
    max_out: float = 0.0


def is_valid_config(cfg: PIDConfig) -> bool:
    return cfg.timestep > 0 and cfg.min_out <= cfg.max_out


class PIDStatus(Enum):
    OK = "ok"
    INVALID_CONFIG = "invalid_config"
    NOT_INITIALIZED = "not_initialized"
    ALREADY_INITIALIZED = "already_initialized"

    @property
    def ok(self) -> bool:
        return self is PIDStatus.OK

    def __bool__(self) -> bool:
        return self.ok


class PID:
    """Discrete PID controller with integrator clamp (anti-windup) and output clamp.

    The controller starts uninitialized; ``initialize`` must succeed before
    ``calculate`` produces anything but 0.0. Failures are reported through
    ``PIDStatus`` return values rather than exceptions.

    ``ki`` is folded into the integrator as it accumulates, so the clamp bounds
    the I term directly and a later ``set_config`` only affects new history.
    """

    def __init__(self, cfg: Optional[PIDConfig] = None) -> None:
        self._initialized = False
        self._cfg: Optional[PIDConfig] = None
        self.prev_err = 0.0
        self.integrator = 0.0
        if cfg is not None:
            status = self.initialize(cfg)
            if not status:
                raise ValueError(f"cannot initialize PID with {cfg!r}: {status.value}")

    # -- lifecycle --------------------------------------------------------

    def initialize(self, cfg: PIDConfig) -> PIDStatus:
        if not is_valid_config(cfg):
            return PIDStatus.INVALID_CONFIG
        if self._initialized:
            return PIDStatus.ALREADY_INITIALIZED
        self._cfg = cfg
        self.prev_err = 0.0
        self.integrator = 0.0
        self._initialized = True
        return PIDStatus.OK

    def deinitialize(self) -> PIDStatus:
        self._initialized = False
        return PIDStatus.OK

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def reset(self) -> PIDStatus:
        """Zero integrator and derivative history, keeping the tuning."""
        if not self._initialized:
            return PIDStatus.NOT_INITIALIZED
        self.prev_err = 0.0
        self.integrator = 0.0
        return PIDStatus.OK

    # -- configuration ----------------------------------------------------

    def set_config(self, cfg: PIDConfig) -> PIDStatus:
        """Swap gains/limits mid-flight. History is kept so D stays continuous."""
        if not is_valid_config(cfg):
            return PIDStatus.INVALID_CONFIG
        if not self._initialized:
            return PIDStatus.NOT_INITIALIZED
        self._cfg = cfg
        return PIDStatus.OK

    def get_config(self) -> Optional[PIDConfig]:
        if not self._initialized:
            return None
        return self._cfg

    # -- computation ------------------------------------------------------

    def _output(self, cfg: PIDConfig, err: float, integrator: float) -> float:
        p = err * cfg.kp
        d = (err - self.prev_err) * cfg.kd / cfg.timestep
        return p + d + integrator

    def calculate(self, setpoint: float, measurement: float) -> float:
        if not self._initialized:
            return 0.0
        cfg = self._cfg
        err = setpoint - measurement

        # Integral (gain applied on accumulation), clamped for anti-windup
        self.integrator += err * cfg.timestep * cfg.ki
        self.integrator = _clamp(self.integrator, cfg.min_out, cfg.max_out)

        u = self._output(cfg, err, self.integrator)

        # History keeps the raw error, not a clamp-distorted one
        self.prev_err = err
        return _clamp(u, cfg.min_out, cfg.max_out)

    def calculate_peek(self, setpoint: float, measurement: float) -> float:
        """Output ``calculate`` would give against the current state, without advancing it."""
        if not self._initialized:
            return 0.0
        cfg = self._cfg
        u = self._output(cfg, setpoint - measurement, self.integrator)
        return _clamp(u, cfg.min_out, cfg.max_out)

    def state(self) -> Dict[str, float]:
        return {"prev_err": self.prev_err, "integrator": self.integrator}
