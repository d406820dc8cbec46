"""
Validation Against a Reference Integration
===========================================
Compares the fixed-step RK4 table with a tight-tolerance adaptive
integration of the same equations of motion (scipy `solve_ivp`, RK45).

The reference trajectory is evaluated exactly at every 25 m mark by
root-finding on the dense output. The RK4 table records the state of the
first step that reaches a mark, so small deviations proportional to the
step size are expected.
"""

import numpy as np
from dataclasses import dataclass
from typing import List

from scipy.integrate import solve_ivp
from scipy.optimize import brentq

from .integrator import FLOOR_HEIGHT, RECORD_INTERVAL, Sample, make_sample, State
from .projectile import (
    Bullet, Environment, Rifle, SolverOptions, compute_acceleration,
)
from .solver import build_trajectory


MAX_FLIGHT_TIME = 60.0   # s
EVENT_TOLERANCE = 1e-6   # m, slack on where the terminal event lands


@dataclass
class ValidationResult:
    """Deviation of one RK4 sample from the reference."""
    range_m: float
    ref_drop: float
    sim_drop: float
    drop_error: float       # m
    ref_tof: float
    sim_tof: float
    tof_error: float        # s
    ref_vel: float
    sim_vel: float
    vel_error: float        # m/s


def reference_samples(rifle: Rifle, bullet: Bullet, environment: Environment,
                      options: SolverOptions, rtol: float = 1e-10,
                      atol: float = 1e-10) -> List[Sample]:
    """
    Samples at every 25 m mark from an adaptive RK45 integration, using
    the same zero angle and flight parameters as the RK4 solve.
    """
    trajectory = build_trajectory(rifle, bullet, environment, options)
    params = trajectory.params
    max_range = trajectory.max_range_m

    def rhs(t, y):
        ax, ay = compute_acceleration(y[2], y[3], params)
        return [y[2], y[3], ax, ay]

    def past_max_range(t, y):
        return y[0] - max_range
    past_max_range.terminal = True

    def below_floor(t, y):
        return y[1] - FLOOR_HEIGHT
    below_floor.terminal = True

    start = State.at_muzzle(trajectory.muzzle_velocity, trajectory.angle_rad,
                            params.sight_height_m)
    sol = solve_ivp(rhs, (0.0, MAX_FLIGHT_TIME),
                    [start.x, start.y, start.vx, start.vy],
                    method='RK45', rtol=rtol, atol=atol, dense_output=True,
                    events=(past_max_range, below_floor))

    t_end = sol.t[-1]
    x_end = sol.y[0, -1]
    last = min(x_end, max_range)
    samples = [make_sample(0.0, start, params)]
    # Marks up to and including max_range; the terminal event lands on it
    for mark in np.arange(RECORD_INTERVAL, max_range + RECORD_INTERVAL / 2, RECORD_INTERVAL):
        if mark > last + EVENT_TOLERANCE:
            break
        if mark >= x_end:
            t_mark = t_end
        else:
            t_mark = brentq(lambda t: sol.sol(t)[0] - mark, 0.0, t_end)
        x, y, vx, vy = sol.sol(t_mark)
        samples.append(make_sample(float(mark), State(x, y, vx, vy, t_mark), params))
    return samples


def validate_against_reference(rifle: Rifle, bullet: Bullet,
                               environment: Environment, options: SolverOptions,
                               verbose: bool = True) -> List[ValidationResult]:
    """
    Run the RK4 solve and the reference integration and compare them
    mark by mark.
    """
    simulated = build_trajectory(rifle, bullet, environment, options).samples()
    reference = {s.range_m: s for s in reference_samples(rifle, bullet, environment, options)}

    results = []
    for sim in simulated:
        ref = reference.get(sim.range_m)
        if ref is None:
            continue
        results.append(ValidationResult(
            range_m=sim.range_m,
            ref_drop=ref.drop_m,
            sim_drop=sim.drop_m,
            drop_error=sim.drop_m - ref.drop_m,
            ref_tof=ref.tof_s,
            sim_tof=sim.tof_s,
            tof_error=sim.tof_s - ref.tof_s,
            ref_vel=ref.vel_ms,
            sim_vel=sim.vel_ms,
            vel_error=sim.vel_ms - ref.vel_ms,
        ))

    if verbose:
        print(f"\n{'='*75}")
        print(f"  VALIDATION: RK4 step {options.step_m} m vs RK45 reference")
        print(f"{'='*75}")
        print(f"{'Range':>6} {'Ref drop':>10} {'Sim drop':>10} {'Δ (mm)':>8} "
              f"{'Ref ToF':>8} {'Sim ToF':>8} {'Δ (ms)':>7} "
              f"{'Ref V':>7} {'Sim V':>7}")
        print("-" * 75)
        for r in results:
            if r.range_m % 100 != 0:
                continue
            print(f"{r.range_m:>6.0f} {r.ref_drop:>10.4f} {r.sim_drop:>10.4f} "
                  f"{r.drop_error * 1000:>+8.1f} "
                  f"{r.ref_tof:>8.4f} {r.sim_tof:>8.4f} {r.tof_error * 1000:>+7.2f} "
                  f"{r.ref_vel:>7.1f} {r.sim_vel:>7.1f}")
        if results:
            max_drop = max(abs(r.drop_error) for r in results)
            max_tof = max(abs(r.tof_error) for r in results)
            print("-" * 75)
            print(f"  Max absolute errors — Drop: {max_drop * 1000:.1f} mm | "
                  f"Time: {max_tof * 1000:.2f} ms")
        print(f"{'='*75}\n")

    return results
