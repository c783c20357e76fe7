from __future__ import annotations

import math
from dataclasses import dataclass


def _clamp(v: float, lo: float, hi: float) -> float:
    return hi if v > hi else lo if v < lo else v


@dataclass
class FirstOrderParams:
    gain: float = 1.0  # steady-state output per unit input
    tau: float = 0.5  # time constant (s); <= 0 means static gain
    u_max: float = math.inf  # actuator saturation |u|


class FirstOrderPlant:
    """First-order lag y' = (gain * u - y) / tau with input saturation."""

    def __init__(self, params: FirstOrderParams | None = None) -> None:
        self.p = params or FirstOrderParams()
        self.reset()

    def reset(self, y: float = 0.0) -> None:
        self.y = y

    def state(self) -> float:
        return self.y

    def step(self, dt: float, u: float) -> float:
        u = _clamp(u, -self.p.u_max, self.p.u_max)
        if self.p.tau <= 0:
            self.y = self.p.gain * u
            return self.y
        # explicit Euler
        self.y += (self.p.gain * u - self.y) / self.p.tau * dt
        return self.y
