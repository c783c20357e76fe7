from pidctrl.pid import PID, PIDConfig


def test_pid_reduces_step_error():
    # Simple integrating plant: y_{k+1} = y_k + gain * u * dt
    dt = 0.02
    cfg = PIDConfig(kp=1.2, ki=0.8, kd=0.05, timestep=dt, min_out=-2.0, max_out=2.0)
    pid = PID(cfg)

    y = 0.0
    target = 1.0
    plant_gain = 0.8
    history = []
    for _ in range(500):
        err = target - y
        u = pid.calculate(target, y)
        y = y + plant_gain * u * dt
        history.append(abs(err))

    # Error should drop and stay small
    assert history[0] > history[-1]
    assert abs(target - y) < 0.05


def test_pid_anti_windup_under_saturation():
    cfg = PIDConfig(kp=5.0, ki=2.0, kd=0.0, timestep=0.01, min_out=-0.2, max_out=0.2)
    pid = PID(cfg)
    # Large persistent error forces saturation; integral must stay bounded
    for _ in range(1000):
        u = pid.calculate(setpoint=10.0, measurement=0.0)
        assert -0.2 <= u <= 0.2
    assert -0.2 <= pid.integrator <= 0.2


def test_pid_recovers_after_saturation():
    # Windup would keep the output pinned long after the error reverses
    cfg = PIDConfig(kp=0.5, ki=1.0, kd=0.0, timestep=0.1, min_out=-1.0, max_out=1.0)
    pid = PID(cfg)
    for _ in range(200):
        pid.calculate(10.0, 0.0)
    u = pid.calculate(0.0, 1.0)
    assert u < 1.0
